"""Appointment and same-day queue models."""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class Appointment(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "appointments"

    appointment_date = Column(Date, nullable=False, index=True)
    status = Column(String(20), default="in queue", nullable=False, index=True)
    status_updated_at = Column(DateTime, nullable=True)

    clinic_id = Column(String(36), ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    specialty_id = Column(String(36), ForeignKey("specialties.id"), nullable=False, index=True)
    camp_id = Column(String(36), ForeignKey("camps.id", ondelete="SET NULL"), nullable=True, index=True)

    patient = relationship("Patient", back_populates="appointments")
    specialty = relationship("Specialty")
    camp = relationship("Camp")
    records = relationship("PatientRecord", back_populates="appointment", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_appointments_patient_specialty_date", "patient_id", "specialty_id", "appointment_date"),
    )


class Queue(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "queues"

    queue_date = Column(Date, nullable=False, index=True)
    queue_type = Column(String(50), nullable=False)
    token_number = Column(Integer, nullable=False)

    specialty_id = Column(String(36), ForeignKey("specialties.id"), nullable=False)
    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    clinic_id = Column(String(36), ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False)
    camp_id = Column(String(36), ForeignKey("camps.id", ondelete="SET NULL"), nullable=True)

    patient = relationship("Patient", back_populates="queues")
    specialty = relationship("Specialty")

    __table_args__ = (
        Index("ix_queues_slot", "queue_date", "specialty_id", "clinic_id", "camp_id"),
    )
