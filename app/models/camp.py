"""Health camp model and its join tables."""
from sqlalchemy import Column, String, ForeignKey, Date, JSON, Table
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


camp_users = Table(
    "camp_users",
    Base.metadata,
    Column("camp_id", String(36), ForeignKey("camps.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

camp_patients = Table(
    "camp_patients",
    Base.metadata,
    Column("camp_id", String(36), ForeignKey("camps.id", ondelete="CASCADE"), primary_key=True),
    Column("patient_id", String(36), ForeignKey("patients.id", ondelete="CASCADE"), primary_key=True),
)

camp_specialties = Table(
    "camp_specialties",
    Base.metadata,
    Column("camp_id", String(36), ForeignKey("camps.id", ondelete="CASCADE"), primary_key=True),
    Column("specialty_id", String(36), ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
)


class Camp(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "camps"

    organizer_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    clinic_id = Column(String(36), ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    vans = Column(JSON, default=list)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    status = Column(String(20), default="active", nullable=False, index=True)

    clinic = relationship("Clinic", back_populates="camps")
    organizer = relationship("User", foreign_keys=[organizer_id])
    users = relationship("User", secondary=camp_users, back_populates="camps")
    patients = relationship("Patient", secondary=camp_patients, back_populates="camps")
    specialties = relationship("Specialty", secondary=camp_specialties)
