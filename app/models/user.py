from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship, validates
from app.core.constants import RoleName
from app.core.database import Base
from app.models.base import UUIDMixin, TimestampMixin, SoftDeleteMixin


user_specialties = Table(
    "user_specialties",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("specialty_id", String(36), ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
)


class User(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone_number = Column(String(20), nullable=True)
    password_hash = Column(String(255), nullable=True)
    specialist = Column(String(255), nullable=True)

    clinic_id = Column(String(36), ForeignKey("clinics.id", ondelete="SET NULL"), nullable=True, index=True)
    current_camp_id = Column(
        String(36),
        ForeignKey("camps.id", ondelete="SET NULL", use_alter=True, name="fk_users_current_camp_id"),
        nullable=True,
    )

    # Account status
    status = Column(String(20), default="inactive", index=True, nullable=False)
    is_email_verified = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    clinic = relationship("Clinic", back_populates="users", foreign_keys=[clinic_id])
    roles = relationship("Role", secondary="user_roles", back_populates="users")
    specialties = relationship("Specialty", secondary=user_specialties)
    camps = relationship("Camp", secondary="camp_users", back_populates="users")
    current_camp = relationship("Camp", foreign_keys=[current_camp_id])
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    tokens = relationship("Token", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email}>"

    @property
    def role_names(self) -> list[str]:
        return [r.role_name for r in self.roles]

    @property
    def is_superadmin(self) -> bool:
        # only platform roles (no clinic) carry superadmin rights
        return any(
            r.role_name == RoleName.SUPERADMIN.value and r.clinic_id is None for r in self.roles
        )

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value

    @validates("phone_number")
    def normalize_phone(self, key, value):
        return value or None
