from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.cache.cache_service import camp_analytics_key, redis_cache
from app.core.constants import CampStatus, Department
from app.core.database import transaction
from app.models.appointment import Appointment
from app.models.camp import Camp
from app.models.diagnosis import Diagnosis, Treatment
from app.models.patient import Patient
from app.models.user import User
from app.services.clinic_service import load_specialties
from app.services.whatsapp_service import whatsapp_service
from app.utils.camp_analytics import (
    aggregate_camps_analytics,
    calculate_full_analytics,
    with_service_flags,
)
from app.utils.errors import BadRequestError, CampNotFoundError, NotFoundError
from app.utils.helpers import column_updates, to_number
import logging

logger = logging.getLogger(__name__)


def load_clinic_users(db: Session, clinic_id: str, user_ids: List[str]) -> List[User]:
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        return []
    users = (
        db.query(User)
        .filter(User.id.in_(ids), User.clinic_id == clinic_id, User.deleted_at.is_(None))
        .all()
    )
    if len(users) != len(ids):
        raise BadRequestError("One or more users not found")
    return users


def status_for_end_date(end_date: date) -> str:
    return CampStatus.ACTIVE.value if end_date >= date.today() else CampStatus.INACTIVE.value


class CampService:

    @staticmethod
    def get_by_id(db: Session, clinic_id: str, camp_id: str) -> Camp:
        camp = db.query(Camp).filter(Camp.id == camp_id, Camp.clinic_id == clinic_id).first()
        if not camp:
            raise CampNotFoundError()
        return camp

    @staticmethod
    def create_camp(db: Session, clinic_id: str, organizer_id: str, data: dict) -> Camp:
        with transaction(db):
            camp = Camp(
                clinic_id=clinic_id,
                organizer_id=organizer_id,
                name=data["name"],
                location=data.get("location"),
                city=data.get("city"),
                state=data.get("state"),
                vans=data.get("vans") or [],
                start_date=data["start_date"],
                end_date=data["end_date"],
                status=status_for_end_date(data["end_date"]),
            )
            camp.specialties = load_specialties(db, data.get("specialties") or [])
            camp.users = load_clinic_users(db, clinic_id, data.get("users") or [])
            db.add(camp)

        logger.info(f"Camp {camp.id} created for clinic {clinic_id}")
        return camp

    @staticmethod
    def list_camps(db: Session, clinic_id: str, status: Optional[str] = None) -> List[Camp]:
        query = (
            db.query(Camp)
            .options(selectinload(Camp.specialties), selectinload(Camp.users))
            .filter(Camp.clinic_id == clinic_id)
        )
        if status:
            query = query.filter(Camp.status == status)
        return query.order_by(Camp.start_date.desc()).all()

    @staticmethod
    def update_camp(db: Session, clinic_id: str, camp_id: str, data: dict) -> Camp:
        """Replace fields, specialties and staff; the status follows the end date."""
        camp = CampService.get_by_id(db, clinic_id, camp_id)
        specialty_ids = data.pop("specialties", None)
        user_ids = data.pop("users", None)

        with transaction(db):
            for field, value in column_updates(Camp, data).items():
                setattr(camp, field, value)
            if camp.end_date < camp.start_date:
                raise BadRequestError("end_date must not be before start_date")
            camp.status = status_for_end_date(camp.end_date)
            if specialty_ids is not None:
                camp.specialties = load_specialties(db, specialty_ids)
            if user_ids is not None:
                camp.users = load_clinic_users(db, clinic_id, user_ids)
        return camp

    @staticmethod
    def set_current_camp(db: Session, user: User, camp_id: str) -> User:
        camp = CampService.get_by_id(db, user.clinic_id, camp_id)
        user.current_camp_id = camp.id
        db.commit()
        return user

    # -------------------------------------------------------------------------
    # Snapshots and analytics
    # -------------------------------------------------------------------------
    @staticmethod
    def _camp_patients(db: Session, camp_id: str) -> List[Patient]:
        return (
            db.query(Patient)
            .join(Patient.camps)
            .options(
                selectinload(Patient.appointments).selectinload(Appointment.specialty),
                selectinload(Patient.queues),
                selectinload(Patient.diagnoses)
                .selectinload(Diagnosis.treatment)
                .selectinload(Treatment.treatment_settings),
                selectinload(Patient.mammography),
                selectinload(Patient.gp_records),
            )
            .filter(Camp.id == camp_id, Patient.deleted_at.is_(None))
            .order_by(Patient.created_at.asc())
            .all()
        )

    @staticmethod
    def _patient_snapshot(patient: Patient, camp_id: str) -> Dict[str, Any]:
        """Plain-dict view of a patient's activity inside one camp."""
        diagnoses = []
        for diagnosis in patient.diagnoses:
            if diagnosis.camp_id != camp_id:
                continue
            treatment = diagnosis.treatment
            diagnoses.append({
                "id": diagnosis.id,
                "treatment": None if treatment is None else {
                    "paid_amount": treatment.paid_amount,
                    "status": treatment.status,
                    "treatment_settings": [
                        {
                            "treating_doctor": s.treating_doctor,
                            "online_amount": s.online_amount,
                            "offline_amount": s.offline_amount,
                            "crown_status": s.crown_status,
                        }
                        for s in treatment.treatment_settings
                    ],
                },
            })

        mammography = patient.mammography
        snapshot = {
            "id": patient.id,
            "name": patient.name,
            "reg_no": patient.reg_no,
            "age": patient.age,
            "sex": patient.sex,
            "mobile": patient.mobile,
            "appointments": [
                {
                    "id": a.id,
                    "status": a.status,
                    "specialty_id": a.specialty_id,
                    "specialty_name": a.specialty.name if a.specialty else None,
                    "appointment_date": a.appointment_date,
                }
                for a in patient.appointments
                if a.camp_id == camp_id
            ],
            "queues": [
                {
                    "token_number": q.token_number,
                    "queue_date": q.queue_date,
                    "queue_type": q.queue_type,
                    "specialty_id": q.specialty_id,
                }
                for q in patient.queues
                if q.camp_id == camp_id
            ],
            "diagnoses": diagnoses,
            "mammography": (
                {"online_amount": mammography.online_amount, "offline_amount": mammography.offline_amount}
                if mammography is not None and mammography.camp_id == camp_id
                else None
            ),
            "gp_records": [
                {"online_amount": r.online_amount, "offline_amount": r.offline_amount}
                for r in patient.gp_records
                if r.camp_id == camp_id
            ],
        }
        return with_service_flags(snapshot)

    @staticmethod
    def camp_snapshots(db: Session, camp_id: str) -> List[Dict[str, Any]]:
        return [
            CampService._patient_snapshot(p, camp_id)
            for p in CampService._camp_patients(db, camp_id)
        ]

    @staticmethod
    def _department_payments(snapshot: Dict[str, Any]) -> Dict[str, float]:
        """What the patient paid per department inside the camp."""
        mammography = snapshot["mammography"] or {}
        return {
            Department.DENTISTRY.value: sum(
                to_number(d["treatment"]["paid_amount"]) for d in snapshot["diagnoses"] if d["treatment"]
            ),
            Department.GP.value: sum(
                to_number(r["online_amount"]) + to_number(r["offline_amount"]) for r in snapshot["gp_records"]
            ),
            Department.MAMMOGRAPHY.value: (
                to_number(mammography.get("online_amount")) + to_number(mammography.get("offline_amount"))
            ),
        }

    @staticmethod
    def _treating_doctors(snapshot: Dict[str, Any]) -> List[dict]:
        doctors = []
        for diagnosis in snapshot["diagnoses"]:
            for setting in (diagnosis["treatment"] or {}).get("treatment_settings", []):
                doctor = setting["treating_doctor"]
                if doctor and doctor not in doctors:
                    doctors.append(doctor)
        return doctors

    @staticmethod
    def _patient_rows(snapshot: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        One row per camp appointment, or a single row with empty appointment fields.
        paid_amount and treating_doctors follow the department of the row's queue entry.
        """
        base = {
            "patient_id": snapshot["id"],
            "name": snapshot["name"],
            "reg_no": snapshot["reg_no"],
            "age": snapshot["age"],
            "sex": snapshot["sex"],
            "mobile": snapshot["mobile"],
            "services_taken": snapshot["services_taken"],
        }
        if not snapshot["appointments"]:
            return [{
                **base,
                "appointment_id": None,
                "appointment_date": None,
                "status": None,
                "specialty_id": None,
                "specialty_name": None,
                "token_number": None,
                "service_taken": None,
                "paid_amount": None,
                "treating_doctors": None,
            }]

        payments = CampService._department_payments(snapshot)

        rows = []
        for appointment in snapshot["appointments"]:
            queue = next(
                (
                    q for q in snapshot["queues"]
                    if q["specialty_id"] == appointment["specialty_id"]
                    and q["queue_date"] == appointment["appointment_date"]
                ),
                None,
            )
            service = queue["queue_type"] if queue else None
            rows.append({
                **base,
                "appointment_id": appointment["id"],
                "appointment_date": appointment["appointment_date"],
                "status": appointment["status"],
                "specialty_id": appointment["specialty_id"],
                "specialty_name": appointment["specialty_name"],
                "token_number": queue["token_number"] if queue else None,
                "service_taken": service,
                "paid_amount": payments.get(service),
                "treating_doctors": (
                    CampService._treating_doctors(snapshot) if service == Department.DENTISTRY.value else None
                ),
            })
        return rows

    @staticmethod
    def get_camp_details(db: Session, clinic_id: str, camp_id: str) -> Dict[str, Any]:
        camp = CampService.get_by_id(db, clinic_id, camp_id)
        snapshots = CampService.camp_snapshots(db, camp.id)
        return {
            "camp": camp,
            "patients": [row for s in snapshots for row in CampService._patient_rows(s)],
            "analytics": calculate_full_analytics(snapshots),
        }

    @staticmethod
    async def get_all_camps_analytics(db: Session, clinic_id: str) -> Dict[str, Any]:
        """Clinic-wide totals across every camp, cached until the next booking or status change."""
        cache_key = camp_analytics_key(clinic_id)
        cached = await redis_cache.get_json(cache_key)
        if cached:
            return cached

        camps = db.query(Camp).filter(Camp.clinic_id == clinic_id).all()
        if not camps:
            raise NotFoundError("No camps found")

        analytics = aggregate_camps_analytics([CampService.camp_snapshots(db, c.id) for c in camps])
        await redis_cache.set_json(cache_key, analytics)
        return analytics

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------
    @staticmethod
    def broadcast_recipients(db: Session, clinic_id: str, camp_id: str) -> List[str]:
        camp = CampService.get_by_id(db, clinic_id, camp_id)
        mobiles = [p.mobile for p in camp.patients if p.mobile and p.deleted_at is None]
        return list(dict.fromkeys(mobiles))

    @staticmethod
    async def broadcast(
        db: Session,
        clinic_id: str,
        camp_id: str,
        template_name: str,
        variables: List[str],
        recipients: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        if recipients is None:
            recipients = CampService.broadcast_recipients(db, clinic_id, camp_id)
        else:
            CampService.get_by_id(db, clinic_id, camp_id)
        if not recipients:
            raise BadRequestError("No recipients to message")

        results = await whatsapp_service.broadcast_template_message(recipients, template_name, variables)
        failed = sum(1 for r in results if r["status"] != "success")
        logger.info(f"Camp {camp_id} broadcast '{template_name}': {len(results) - failed} sent, {failed} failed")
        return results
