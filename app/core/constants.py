"""Application constants: statuses, token types and department names."""
from enum import Enum


class RoleName(str, Enum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"
    ASSISTANT = "assistant"


# names a clinic can never give its own roles
RESERVED_ROLE_NAMES = frozenset({RoleName.SUPERADMIN.value})


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ClinicStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class CampStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    RESET_PASSWORD = "resetPassword"
    SET_PASSWORD = "setPassword"
    VERIFY_EMAIL = "verifyEmail"


class AppointmentStatus(str, Enum):
    IN_QUEUE = "in queue"
    IN = "in"
    OUT = "out"
    CANCELLED = "cancelled"


class Department(str, Enum):
    GP = "GP"
    DENTISTRY = "Dentistry"
    MAMMOGRAPHY = "Mammography"


class TreatmentStatus(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    NOT_STARTED = "not started"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"


# Upload rules per clinical document kind
IMAGE_TYPES = {"image/jpeg", "image/png"}
DIAGNOSIS_FILE_TYPES = IMAGE_TYPES | {"application/pdf"}
DIAGNOSIS_UPDATE_FILE_TYPES = DIAGNOSIS_FILE_TYPES | {"image/avif"}
TREATMENT_FILE_TYPES = DIAGNOSIS_FILE_TYPES | {"image/avif"}
MAMMOGRAPHY_FILE_TYPES = DIAGNOSIS_FILE_TYPES | {
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
GENERIC_IMAGE_TYPES = IMAGE_TYPES | {"image/gif", "image/webp", "image/avif"}

REG_NO_PREFIX = "HWRF-"


class PermissionAction(str, Enum):
    ADMINISTRATION_READ = "administration:read"
    ADMINISTRATION_WRITE = "administration:write"
    PATIENTS_READ = "patients:read"
    PATIENTS_WRITE = "patients:write"
    CAMPS_READ = "camps:read"
    CAMPS_WRITE = "camps:write"
