"""Service layer package."""

__all__ = [
    "auth_service",
    "token_service",
    "clinic_service",
    "specialty_service",
    "user_service",
    "role_permission_service",
    "patient_service",
    "appointment_service",
    "camp_service",
    "diagnosis_service",
    "dental_service",
    "mammography_service",
    "gp_record_service",
    "form_service",
    "email_service",
    "whatsapp_service",
    "storage_service",
]
