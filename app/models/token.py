"""Persisted single-purpose tokens (set/reset password, email verification)."""
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class Token(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "tokens"

    token = Column(Text, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(30), nullable=False, index=True)
    expires = Column(DateTime, nullable=False, index=True)
    blacklisted = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="tokens")
