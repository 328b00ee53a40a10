"""Per-appointment patient record with dentist-specific detail."""
from sqlalchemy import Column, String, Text, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class PatientRecord(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "patient_records"

    description = Column(Text, nullable=True)
    billing_details = Column(JSON, nullable=True)
    appointment_id = Column(String(36), ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)

    appointment = relationship("Appointment", back_populates="records")
    patient = relationship("Patient", back_populates="records")
    dental_data = relationship(
        "DentistPatientRecord",
        back_populates="record",
        uselist=False,
        cascade="all, delete-orphan",
    )


class DentistPatientRecord(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "dentist_patient_records"

    record_id = Column(String(36), ForeignKey("patient_records.id", ondelete="CASCADE"), nullable=False, unique=True)
    complaints = Column(JSON, default=list)
    treatment = Column(JSON, default=list)
    # {"1": [..], "2": [..], "3": [..], "4": [..]} teeth 1-8 per quadrant
    dental_quadrant = Column(JSON, default=dict)
    tooth_number = Column(JSON, default=list)
    xray_status = Column(Boolean, default=False, nullable=False)
    xray = Column(JSON, default=list)
    notes = Column(Text, nullable=True)

    record = relationship("PatientRecord", back_populates="dental_data")
