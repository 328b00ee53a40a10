"""Clinic (tenant) model."""
from sqlalchemy import Column, String, ForeignKey, Text, Table
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin, SoftDeleteMixin


clinic_specialties = Table(
    "clinic_specialties",
    Base.metadata,
    Column("clinic_id", String(36), ForeignKey("clinics.id", ondelete="CASCADE"), primary_key=True),
    Column("specialty_id", String(36), ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
)


class Clinic(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "clinics"

    clinic_name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    phone_number = Column(String(20), nullable=True, index=True)
    contact_email = Column(String(255), nullable=True, index=True)
    website = Column(String(255), nullable=True)
    status = Column(String(20), default="pending", nullable=False, index=True)

    # use_alter breaks the clinics <-> users FK cycle for create_all / migrations
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL", use_alter=True, name="fk_clinics_owner_id"),
        nullable=True,
    )

    owner = relationship("User", foreign_keys=[owner_id], post_update=True)
    users = relationship("User", back_populates="clinic", foreign_keys="User.clinic_id")
    specialties = relationship("Specialty", secondary=clinic_specialties)
    roles = relationship("Role", back_populates="clinic", cascade="all, delete-orphan")
    camps = relationship("Camp", back_populates="clinic")
