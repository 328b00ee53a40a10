"""Admin activity log model."""
from sqlalchemy import Column, String, DateTime, Integer, Text
from app.core.database import Base
from datetime import datetime


class AdminActivityLog(Base):
    __tablename__ = "admin_activity_logs"

    id = Column(Integer, primary_key=True)
    admin_id = Column(String(36), nullable=False, index=True)
    activity = Column(String(100), nullable=False)
    target_id = Column(String(36), nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
