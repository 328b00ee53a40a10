from sqlalchemy import Column, String, Text, Date, ForeignKey, JSON, Numeric
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class GeneralPhysicianRecord(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "gp_records"

    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    camp_id = Column(String(36), ForeignKey("camps.id", ondelete="SET NULL"), nullable=True, index=True)

    # Vitals
    weight = Column(String(20), nullable=True)
    height = Column(String(20), nullable=True)
    sugar = Column(String(20), nullable=True)
    bp = Column(String(20), nullable=True)
    hb = Column(String(20), nullable=True)

    complaints = Column(JSON, default=list)
    other_complaints = Column(Text, nullable=True)
    kco = Column(JSON, default=list)
    findings = Column(JSON, default=list)
    findings_options_details = Column(JSON, default=dict)
    systemic_examination = Column(JSON, default=list)
    systemic_examination_options_details = Column(JSON, default=dict)
    treatment = Column(Text, nullable=True)
    advice = Column(Text, nullable=True)
    # [{key, medicine_type, medicine, dose, when, frequency, duration, notes}]
    medicine = Column(JSON, default=list)
    follow_up_date = Column(Date, nullable=True)

    online_amount = Column(Numeric(12, 2, asdecimal=False), default=0)
    offline_amount = Column(Numeric(12, 2, asdecimal=False), default=0)

    patient = relationship("Patient", back_populates="gp_records")
