"""Mammography screening record (one per patient)."""
from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, JSON, Numeric
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class Mammography(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "mammographies"

    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, unique=True)
    camp_id = Column(String(36), ForeignKey("camps.id", ondelete="SET NULL"), nullable=True, index=True)

    # Menstrual / obstetric history
    menstrual_age = Column(Integer, nullable=True)
    last_menstrual_date = Column(Date, nullable=True)
    cycle_type = Column(String(20), nullable=True)  # Regular | Irregular
    obstetric_history = Column(JSON, default=lambda: {"g": False, "p": False, "l": False})
    number_of_pregnancies = Column(Integer, nullable=True)
    number_of_deliveries = Column(Integer, nullable=True)
    number_of_living_children = Column(Integer, nullable=True)
    menopause = Column(String(3), nullable=True)

    # Family / past history
    family_history = Column(String(3), nullable=True)
    family_history_details = Column(Text, nullable=True)
    first_degree_relatives = Column(Text, nullable=True)
    previous_cancer = Column(Text, nullable=True)
    previous_diagnosis = Column(Text, nullable=True)
    previous_biopsy = Column(String(3), nullable=True)
    previous_surgery = Column(String(3), nullable=True)
    previous_treatment = Column(String(3), nullable=True)
    previous_treatment_details = Column(Text, nullable=True)
    implants = Column(String(3), nullable=True)
    relevant_diagnosis = Column(String(3), nullable=True)
    relevant_diagnosis_details = Column(Text, nullable=True)

    # Habits
    smoking = Column(String(3), nullable=True)
    smoking_details = Column(JSON, default=lambda: {"packs_per_day": None, "years_smoked": None})
    alcohol = Column(String(3), nullable=True)
    alcohol_details = Column(JSON, default=lambda: {"frequency": None, "quantity": None})
    misheri_tobacco = Column(String(3), nullable=True)
    misheri_tobacco_details = Column(JSON, default=lambda: {"frequency": None, "quantity": None})

    # Symptoms, each No | Right | Left | Both
    lump = Column(String(5), nullable=True)
    lump_details = Column(JSON, nullable=True)
    discharge = Column(String(5), nullable=True)
    discharge_details = Column(JSON, nullable=True)
    skin_changes = Column(String(5), nullable=True)
    skin_changes_details = Column(JSON, nullable=True)
    nipple_retraction = Column(String(5), nullable=True)
    nipple_retraction_details = Column(JSON, nullable=True)
    pain = Column(String(5), nullable=True)
    pain_details = Column(JSON, nullable=True)

    imaging_studies = Column(JSON, default=lambda: {"location": "", "type": "", "date": None})
    additional_info = Column(Text, nullable=True)

    # Uploaded documents
    screening_image = Column(JSON, default=dict)
    mammo_report = Column(JSON, default=dict)

    online_amount = Column(Numeric(12, 2, asdecimal=False), default=0)
    offline_amount = Column(Numeric(12, 2, asdecimal=False), default=0)

    patient = relationship("Patient", back_populates="mammography")
