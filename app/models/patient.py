from sqlalchemy import Column, Integer, String, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship, validates
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin, SoftDeleteMixin


class Patient(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "patients"

    reg_no = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    age = Column(Integer, nullable=True)
    sex = Column(String(20), nullable=True)
    mobile = Column(String(10), nullable=True, index=True)
    address = Column(Text, nullable=True)
    clinic_id = Column(String(36), ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False, index=True)
    # {"label": ..., "value": ..., "phone_number": ...}
    primary_doctor = Column(JSON, nullable=True)

    clinic = relationship("Clinic")
    camps = relationship("Camp", secondary="camp_patients", back_populates="patients")
    appointments = relationship("Appointment", back_populates="patient", cascade="all, delete-orphan")
    queues = relationship("Queue", back_populates="patient", cascade="all, delete-orphan")
    diagnoses = relationship(
        "Diagnosis",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="Diagnosis.created_at",
    )
    mammography = relationship("Mammography", back_populates="patient", uselist=False, cascade="all, delete-orphan")
    gp_records = relationship(
        "GeneralPhysicianRecord",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="GeneralPhysicianRecord.created_at",
    )
    records = relationship("PatientRecord", back_populates="patient", cascade="all, delete-orphan")

    @validates("name")
    def strip_name(self, key, value):
        return value.strip() if value else value
