from datetime import date as date_type
from typing import List, Dict, Any, Optional

from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from app.core.database import transaction
from app.models.appointment import Appointment, Queue
from app.models.camp import Camp
from app.models.patient import Patient
from app.models.specialty import Specialty
from app.utils.errors import BadRequestError, NotFoundError, PatientNotFoundError
from app.utils.helpers import utcnow
import logging

logger = logging.getLogger(__name__)


SORTABLE_FIELDS = {
    "appointment_date": Appointment.appointment_date,
    "status": Appointment.status,
    "created_at": Appointment.created_at,
    "status_updated_at": Appointment.status_updated_at,
}


class AppointmentService:
    """
    Core business logic for:
    - Booking a patient into one or more specialties
    - Issuing same-day queue tokens
    - Status updates and the front-desk listing
    """

    # -------------------------------------------------------------------------
    # Booking
    # -------------------------------------------------------------------------
    @staticmethod
    def book_appointment(
        db: Session,
        clinic_id: str,
        camp_id: Optional[str],
        data: dict,
    ) -> List[Appointment]:
        """
        Book the patient for every requested specialty in one transaction.

        - Associates the patient with the caller's current camp
        - Rejects a second booking for the same (patient, specialty, date, camp)
        - Queues the patient straight away when the appointment is for today
        """
        patient: Optional[Patient] = (
            db.query(Patient)
            .filter(
                Patient.id == data["patient_id"],
                Patient.clinic_id == clinic_id,
                Patient.deleted_at.is_(None),
            )
            .first()
        )
        if not patient:
            raise PatientNotFoundError()

        appointment_date: date_type = data["appointment_date"]
        created: List[Appointment] = []

        with transaction(db):
            if camp_id:
                camp = db.query(Camp).filter(Camp.id == camp_id, Camp.clinic_id == clinic_id).first()
                if camp and patient not in camp.patients:
                    camp.patients.append(patient)

            for specialty_id in data["specialties"]:
                duplicate = (
                    db.query(Appointment)
                    .filter(
                        Appointment.patient_id == patient.id,
                        Appointment.specialty_id == specialty_id,
                        Appointment.appointment_date == appointment_date,
                        Appointment.camp_id == camp_id,
                    )
                    .first()
                )
                if duplicate:
                    raise BadRequestError("Already added into queue.")

                appointment = Appointment(
                    clinic_id=clinic_id,
                    patient_id=patient.id,
                    specialty_id=specialty_id,
                    camp_id=camp_id,
                    appointment_date=appointment_date,
                    status=data.get("status") or "in queue",
                )
                db.add(appointment)
                # flush so the next duplicate check sees this row
                db.flush()
                created.append(appointment)

                if appointment_date == date_type.today():
                    AppointmentService.add_to_queue(
                        db,
                        clinic_id=clinic_id,
                        camp_id=camp_id,
                        patient_id=patient.id,
                        specialty_id=specialty_id,
                        queue_date=appointment_date,
                    )

        logger.info(
            f"Booked patient {patient.id} for {len(created)} specialties on {appointment_date} "
            f"(clinic {clinic_id}, camp {camp_id})"
        )
        return created

    @staticmethod
    def add_to_queue(
        db: Session,
        clinic_id: str,
        camp_id: Optional[str],
        patient_id: str,
        specialty_id: str,
        queue_date: date_type,
    ) -> Queue:
        """Issue the next token for (date, specialty, clinic, camp); the caller commits."""
        specialty: Optional[Specialty] = (
            db.query(Specialty).filter(Specialty.id == specialty_id).first()
        )
        if not specialty:
            raise BadRequestError("Service not found.")

        last_token = (
            db.query(func.max(Queue.token_number))
            .filter(
                Queue.queue_date == queue_date,
                Queue.specialty_id == specialty_id,
                Queue.clinic_id == clinic_id,
                Queue.camp_id == camp_id,
            )
            .scalar()
        )
        entry = Queue(
            queue_date=queue_date,
            queue_type=specialty.department_name,
            token_number=(last_token or 0) + 1,
            specialty_id=specialty_id,
            patient_id=patient_id,
            clinic_id=clinic_id,
            camp_id=camp_id,
        )
        db.add(entry)
        db.flush()
        return entry

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------
    @staticmethod
    def update_appointment(db: Session, clinic_id: str, appointment_id: str, data: dict) -> Appointment:
        appointment: Optional[Appointment] = (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.clinic_id == clinic_id)
            .first()
        )
        if not appointment:
            raise NotFoundError("Appointment not found")

        appointment.status = data["status"]
        appointment.status_updated_at = data.get("status_updated_at") or utcnow()
        db.commit()
        db.refresh(appointment)
        return appointment

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------
    @staticmethod
    def list_appointments(
        db: Session,
        clinic_id: str,
        camp_id: Optional[str],
        date: Optional[date_type] = None,
        status: Optional[str] = None,
        specialty_id: Optional[str] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> List[Dict[str, Any]]:
        """Appointments of the clinic's current camp, one flat row each."""
        query = (
            db.query(Appointment)
            .options(
                selectinload(Appointment.specialty),
                selectinload(Appointment.records),
                selectinload(Appointment.patient).selectinload(Patient.queues),
            )
            .filter(Appointment.clinic_id == clinic_id, Appointment.camp_id == camp_id)
        )
        if date:
            query = query.filter(Appointment.appointment_date == date)
        if status:
            query = query.filter(Appointment.status == status)
        if specialty_id:
            query = query.filter(Appointment.specialty_id == specialty_id)

        column = SORTABLE_FIELDS.get(sort_by, Appointment.created_at)
        query = query.order_by(column.desc() if order == "desc" else column.asc())

        return [AppointmentService._flatten(a) for a in query.all()]

    @staticmethod
    def _flatten(appointment: Appointment) -> Dict[str, Any]:
        patient = appointment.patient
        queue = next(
            (
                q for q in patient.queues
                if q.specialty_id == appointment.specialty_id
                and q.queue_date == appointment.appointment_date
            ),
            None,
        )
        doctor = patient.primary_doctor or {}
        return {
            "id": appointment.id,
            "appointment_date": appointment.appointment_date,
            "status": appointment.status,
            "status_updated_at": appointment.status_updated_at,
            "specialty_id": appointment.specialty_id,
            "specialty_name": appointment.specialty.name if appointment.specialty else None,
            "patient_id": patient.id,
            "patient_name": patient.name,
            "age": patient.age,
            "sex": patient.sex,
            "mobile": patient.mobile,
            "reg_no": patient.reg_no,
            "token_number": queue.token_number if queue else None,
            "queue_type": queue.queue_type if queue else None,
            "queue_date": queue.queue_date if queue else None,
            "primary_doctor": doctor.get("label"),
            "medical_records": [
                {"id": r.id, "description": r.description, "billing_details": r.billing_details}
                for r in appointment.records
            ],
        }
