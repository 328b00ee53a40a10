"""Dental diagnosis, treatment plan and treatment sitting models."""
from sqlalchemy import Column, Integer, String, Text, Date, Boolean, ForeignKey, JSON, Numeric
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


def _money(**kwargs):
    return Column(Numeric(12, 2, asdecimal=False), **kwargs)


class Diagnosis(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "diagnoses"

    diagnosis_date = Column(Date, nullable=True)
    complaints = Column(JSON, default=list)
    treatments_suggested = Column(JSON, default=list)
    current_status = Column(String(100), nullable=True)

    dental_quadrant_type = Column(String(10), default="adult", nullable=False)
    dental_quadrant = Column(JSON, nullable=True)
    selected_teeth = Column(Integer, nullable=True)
    child_selected_teeth = Column(JSON, default=list)
    adult_selected_teeth = Column(JSON, default=list)

    xray_status = Column(Boolean, default=False, nullable=False)
    xray = Column(JSON, default=list)
    notes = Column(Text, nullable=True)
    additional_details = Column(JSON, default=dict)
    estimated_cost = _money(default=0)

    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    camp_id = Column(String(36), ForeignKey("camps.id", ondelete="SET NULL"), nullable=True, index=True)

    patient = relationship("Patient", back_populates="diagnoses")
    treatment = relationship("Treatment", back_populates="diagnosis", uselist=False, cascade="all, delete-orphan")


class Treatment(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "treatments"

    complaints = Column(JSON, default=list)
    treatments = Column(JSON, default=list)
    notes = Column(Text, nullable=True)
    additional_details = Column(JSON, default=dict)

    total_amount = _money(default=0)
    paid_amount = _money(default=0)
    remaining_amount = _money(default=0)
    payment_status = Column(String(20), default="pending", nullable=False)
    status = Column(String(20), default="not started", nullable=False, index=True)

    diagnosis_id = Column(String(36), ForeignKey("diagnoses.id", ondelete="CASCADE"), nullable=False, unique=True)

    diagnosis = relationship("Diagnosis", back_populates="treatment")
    treatment_settings = relationship(
        "TreatmentSetting",
        back_populates="treatment",
        cascade="all, delete-orphan",
        order_by="TreatmentSetting.created_at",
    )


class TreatmentSetting(UUIDMixin, TimestampMixin, Base):
    """One sitting (visit) within a treatment plan."""
    __tablename__ = "treatment_settings"

    treatment_date = Column(Date, nullable=True)
    treatment_status = Column(JSON, default=list)
    notes = Column(Text, nullable=True)
    additional_details = Column(JSON, default=dict)

    setting_paid_amount = _money(default=0)
    online_amount = _money(default=0)
    offline_amount = _money(default=0)

    # {"label": ..., "value": ...}
    treating_doctor = Column(JSON, nullable=True)
    crown_status = Column(Boolean, default=False, nullable=False)
    next_date = Column(Date, nullable=True)
    xray_status = Column(Boolean, default=False, nullable=False)
    xray = Column(JSON, default=list)

    camp_id = Column(String(36), ForeignKey("camps.id", ondelete="SET NULL"), nullable=True, index=True)
    treatment_id = Column(String(36), ForeignKey("treatments.id", ondelete="CASCADE"), nullable=False, index=True)

    treatment = relationship("Treatment", back_populates="treatment_settings")
