from sqlalchemy.orm import Session

from app.core.database import transaction
from app.models.appointment import Appointment
from app.models.patient_record import DentistPatientRecord, PatientRecord
from app.services.patient_service import PatientService
from app.utils.errors import ConflictError, NotFoundError
from app.utils.helpers import flatten_quadrants


class DentalService:

    @staticmethod
    def add_dental_patient_record(db: Session, clinic_id: str, data: dict) -> DentistPatientRecord:
        """One dental record per (appointment, patient); the description lists the complaints."""
        patient = PatientService.get_by_id(db, clinic_id, data["patient_id"])
        appointment = (
            db.query(Appointment)
            .filter(Appointment.id == data["appointment_id"], Appointment.clinic_id == clinic_id)
            .first()
        )
        if not appointment:
            raise NotFoundError("Appointment not found")

        exists = (
            db.query(PatientRecord)
            .filter(PatientRecord.appointment_id == appointment.id, PatientRecord.patient_id == patient.id)
            .first()
        )
        if exists:
            raise ConflictError("Record with this appointment already exists")

        with transaction(db):
            record = PatientRecord(
                appointment_id=appointment.id,
                patient_id=patient.id,
                description=", ".join(data["complaints"]),
                billing_details=data.get("billing"),
            )
            record.dental_data = DentistPatientRecord(
                complaints=data["complaints"],
                treatment=data["treatment"],
                dental_quadrant=data["dental_quadrant"],
                tooth_number=flatten_quadrants(data["dental_quadrant"]),
                xray_status=data["xray_status"],
                xray=data.get("xray") or [],
                notes=data.get("notes"),
            )
            db.add(record)
        return record.dental_data
