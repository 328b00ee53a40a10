from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.constants import ClinicStatus, RoleName, TokenType, UserStatus
from app.core.database import transaction
from app.core.security import unusable_password_hash
from app.models.audit import AdminActivityLog
from app.models.clinic import Clinic
from app.models.role import Role
from app.models.specialty import Specialty
from app.models.user import User
from app.services import email_service
from app.services.auth_service import AuthService
from app.services.token_service import TokenService
from app.utils.errors import BadRequestError, ClinicNotFoundError, NotFoundError
from app.utils.helpers import column_updates
import logging

logger = logging.getLogger(__name__)

CLINIC_SORT_COLUMNS = {
    "created_at": Clinic.created_at,
    "updated_at": Clinic.updated_at,
    "clinic_name": Clinic.clinic_name,
}


def load_specialties(db: Session, specialty_ids: List[str]) -> List[Specialty]:
    """All requested specialties, or 400 when any id is unknown."""
    ids = list(dict.fromkeys(specialty_ids))
    if not ids:
        return []
    specialties = db.query(Specialty).filter(Specialty.id.in_(ids)).all()
    if len(specialties) != len(ids):
        raise BadRequestError("One or more specialties not found")
    return specialties


class ClinicService:

    @staticmethod
    def get_by_id(db: Session, clinic_id: str) -> Clinic:
        clinic = db.query(Clinic).filter(Clinic.id == clinic_id, Clinic.deleted_at.is_(None)).first()
        if not clinic:
            raise ClinicNotFoundError()
        return clinic

    @staticmethod
    def onboard_clinic(db: Session, data: dict) -> dict:
        """
        Register a clinic awaiting approval together with its admin account.
        - Reject a clinic whose contact email AND phone already exist
        - Admin gets an "admin" role for the clinic and an unusable password
        - Superadmin is notified, the admin is emailed a set-password link
        """
        contact_email = data.get("contact_email")
        phone_number = data.get("phone_number")
        if contact_email or phone_number:
            existing = (
                db.query(Clinic)
                .filter(Clinic.contact_email == contact_email, Clinic.phone_number == phone_number)
                .first()
            )
            if existing:
                raise BadRequestError("Clinic has already been registered!")

        if AuthService.is_email_taken(db, data["admin_email"]):
            raise BadRequestError("Admin email is already in use.")

        with transaction(db):
            clinic = Clinic(
                clinic_name=data["clinic_name"],
                address=data.get("address"),
                city=data.get("city"),
                state=data.get("state"),
                phone_number=phone_number,
                contact_email=contact_email,
                website=data.get("website"),
                status=ClinicStatus.PENDING.value,
            )
            specialty_ids = data.get("specialties") or []
            if specialty_ids:
                clinic.specialties = db.query(Specialty).filter(Specialty.id.in_(specialty_ids)).all()
            db.add(clinic)
            db.flush()

            admin = User(
                name=data["admin_name"],
                email=data["admin_email"],
                phone_number=data.get("admin_phone_number"),
                password_hash=unusable_password_hash(),
                clinic_id=clinic.id,
                status=UserStatus.INACTIVE.value,
            )
            db.add(admin)
            db.flush()
            admin.roles.append(Role(role_name=RoleName.ADMIN.value, clinic_id=clinic.id, user_id=admin.id))
            clinic.owner_id = admin.id
            token = TokenService.generate_password_token(db, admin, TokenType.SET_PASSWORD)

        logger.info(f"Clinic {clinic.id} onboarded, awaiting approval")
        email_service.send_clinic_onboarding_notification(clinic, admin)
        email_service.send_password_email(admin.email, token, TokenType.SET_PASSWORD)
        return {"clinic_id": clinic.id, "admin_id": admin.id}

    @staticmethod
    def _owner(clinic: Clinic) -> Optional[User]:
        return next((u for u in clinic.users if u.id == clinic.owner_id), None)

    @staticmethod
    def list_clinics(
        db: Session,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> dict:
        column = CLINIC_SORT_COLUMNS.get(sort_by, Clinic.created_at)
        query = (
            db.query(Clinic)
            .options(selectinload(Clinic.users), selectinload(Clinic.specialties))
            .filter(Clinic.deleted_at.is_(None))
        )
        if status:
            query = query.filter(Clinic.status == status)
        clinics = query.order_by(column.asc() if order == "asc" else column.desc()).all()
        if not clinics:
            raise NotFoundError("No clinics found")

        rows = []
        for clinic in clinics:
            owner = ClinicService._owner(clinic)
            rows.append({
                "id": clinic.id,
                "clinic_name": clinic.clinic_name,
                "owner_name": owner.name if owner else "N/A",
                "city": clinic.city or "N/A",
                "state": clinic.state or "N/A",
                "admin_contact_number": (owner.phone_number if owner else None) or "N/A",
                "admin_contact_email": owner.email if owner else "N/A",
                "specialties": ", ".join(s.name for s in clinic.specialties) or "N/A",
                "status": clinic.status,
                "created_at": clinic.created_at,
            })
        return {"data": rows, "meta": {"total": len(rows)}}

    @staticmethod
    def get_clinic(db: Session, clinic_id: str) -> dict:
        clinic = ClinicService.get_by_id(db, clinic_id)
        owner = ClinicService._owner(clinic)
        return {
            "id": clinic.id,
            "clinic_name": clinic.clinic_name,
            "admin_name": owner.name if owner else "N/A",
            "address": clinic.address,
            "city": clinic.city or "N/A",
            "state": clinic.state or "N/A",
            "clinic_contact_email": clinic.contact_email,
            "clinic_phone_number": clinic.phone_number,
            "admin_contact_number": (owner.phone_number if owner else None) or "N/A",
            "admin_contact_email": owner.email if owner else "N/A",
            "specialties": [
                {"id": s.id, "name": s.name, "department_name": s.department_name}
                for s in clinic.specialties
            ],
            "status": clinic.status,
            "created_at": clinic.created_at,
            "all_users": [
                {
                    "id": u.id,
                    "name": u.name,
                    "email": u.email,
                    "phone_number": u.phone_number,
                    "status": u.status,
                    "roles": [{"id": r.id, "role_name": r.role_name} for r in u.roles],
                }
                for u in clinic.users
                if u.deleted_at is None
            ],
        }

    @staticmethod
    def update_clinic(db: Session, clinic_id: str, data: dict) -> Clinic:
        clinic = ClinicService.get_by_id(db, clinic_id)
        specialty_ids = data.pop("specialties", None)
        with transaction(db):
            for field, value in column_updates(Clinic, data).items():
                setattr(clinic, field, value)
            if specialty_ids is not None:
                clinic.specialties = load_specialties(db, specialty_ids)
        return clinic

    @staticmethod
    def approve_clinic(db: Session, admin_id: str, clinic_id: str, status: str) -> Clinic:
        """Superadmin decision on a clinic; logged and mailed to the clinic admin."""
        clinic = ClinicService.get_by_id(db, clinic_id)
        clinic.status = status
        db.add(
            AdminActivityLog(
                admin_id=str(admin_id),
                activity=f"clinic:{clinic_id}:{status}",
                target_id=clinic_id,
            )
        )
        db.commit()

        owner = clinic.owner
        if owner:
            email_service.send_clinic_status_email(owner.email, clinic)
        return clinic

    @staticmethod
    def get_specialty_departments(db: Session, clinic_id: str) -> List[Specialty]:
        return ClinicService.get_by_id(db, clinic_id).specialties
