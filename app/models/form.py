"""Clinic-defined form templates and form field sets."""
from sqlalchemy import Column, String, ForeignKey, JSON, UniqueConstraint
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class FormTemplate(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "form_templates"

    clinic_id = Column(String(36), ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    # [{"value": ..., "options": [...]}]
    form_data = Column(JSON, nullable=False, default=list)

    __table_args__ = (UniqueConstraint("clinic_id", "name", name="uq_form_templates_clinic_name"),)


class FormFields(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "form_fields"

    clinic_id = Column(String(36), ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False, index=True)
    form_name = Column(String(255), nullable=False)
    form_field_data = Column(JSON, nullable=False, default=list)
