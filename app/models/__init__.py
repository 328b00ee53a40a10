"""ORM models; `app.core.database` imports each module to register tables."""

__all__ = [
    "base",
    "user",
    "clinic",
    "role",
    "session",
    "token",
    "specialty",
    "camp",
    "patient",
    "appointment",
    "diagnosis",
    "mammography",
    "gp_record",
    "patient_record",
    "form",
    "audit",
]
