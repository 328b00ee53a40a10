from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class Specialty(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "specialties"

    name = Column(String(255), unique=True, nullable=False)
    # GP / Dentistry / Mammography; becomes Queue.queue_type
    department_name = Column(String(50), nullable=False)
