from typing import Optional

from sqlalchemy.orm import Session, selectinload

from app.models.appointment import Appointment
from app.models.diagnosis import Diagnosis, Treatment
from app.models.patient import Patient
from app.schemas.diagnosis import DiagnosisRead
from app.schemas.gp_record import GPRecordRead
from app.schemas.mammography import MammographyRead
from app.schemas.patient import PatientRead
from app.utils.errors import PatientNotFoundError
from app.utils.helpers import column_updates, next_reg_no, paginate_meta, utcnow
import logging

logger = logging.getLogger(__name__)


class PatientService:

    @staticmethod
    def get_by_id(db: Session, clinic_id: str, patient_id: str) -> Patient:
        patient = (
            db.query(Patient)
            .filter(
                Patient.id == patient_id,
                Patient.clinic_id == clinic_id,
                Patient.deleted_at.is_(None),
            )
            .first()
        )
        if not patient:
            raise PatientNotFoundError()
        return patient

    @staticmethod
    def create_patient(db: Session, clinic_id: str, data: dict) -> Patient:
        # soft-deleted patients keep their numbers
        existing = [r for (r,) in db.query(Patient.reg_no).filter(Patient.clinic_id == clinic_id).all()]
        patient = Patient(clinic_id=clinic_id, reg_no=next_reg_no(existing), **data)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        logger.info(f"Registered patient {patient.reg_no} in clinic {clinic_id}")
        return patient

    @staticmethod
    def list_patients(
        db: Session,
        clinic_id: str,
        page: int = 1,
        limit: int = 10,
        name: Optional[str] = None,
        mobile: Optional[str] = None,
    ) -> dict:
        query = db.query(Patient).filter(Patient.clinic_id == clinic_id, Patient.deleted_at.is_(None))
        if name:
            query = query.filter(Patient.name.ilike(f"%{name}%"))
        if mobile:
            query = query.filter(Patient.mobile == mobile)

        total = query.count()
        patients = (
            query.order_by(Patient.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "patients": [PatientRead.model_validate(p).model_dump() for p in patients],
            "pagination": paginate_meta(total, page, limit),
        }

    @staticmethod
    def search_patients(
        db: Session,
        clinic_id: str,
        name: Optional[str] = None,
        mobile: Optional[str] = None,
        reg_no: Optional[str] = None,
    ) -> list[Patient]:
        query = db.query(Patient).filter(Patient.clinic_id == clinic_id, Patient.deleted_at.is_(None))
        if name:
            query = query.filter(Patient.name.ilike(f"%{name}%"))
        if mobile:
            query = query.filter(Patient.mobile == mobile)
        if reg_no:
            query = query.filter(Patient.reg_no == reg_no)
        return query.order_by(Patient.created_at.desc()).all()

    @staticmethod
    def get_patient_details(
        db: Session,
        clinic_id: str,
        patient_id: str,
        specialty_id: Optional[str] = None,
    ) -> dict:
        """Patient with clinical history; appointments optionally narrowed to one specialty."""
        patient = (
            db.query(Patient)
            .options(
                selectinload(Patient.diagnoses)
                .selectinload(Diagnosis.treatment)
                .selectinload(Treatment.treatment_settings),
                selectinload(Patient.mammography),
                selectinload(Patient.gp_records),
                selectinload(Patient.appointments).selectinload(Appointment.specialty),
            )
            .filter(
                Patient.id == patient_id,
                Patient.clinic_id == clinic_id,
                Patient.deleted_at.is_(None),
            )
            .first()
        )
        if not patient:
            raise PatientNotFoundError()

        appointments = [
            a for a in patient.appointments
            if specialty_id is None or a.specialty_id == specialty_id
        ]
        return {
            **PatientRead.model_validate(patient).model_dump(),
            "diagnoses": [DiagnosisRead.model_validate(d).model_dump() for d in patient.diagnoses],
            "mammography": (
                MammographyRead.model_validate(patient.mammography).model_dump()
                if patient.mammography else None
            ),
            "gp_records": [GPRecordRead.model_validate(r).model_dump() for r in patient.gp_records],
            "appointments": [
                {
                    "id": a.id,
                    "appointment_date": a.appointment_date,
                    "status": a.status,
                    "status_updated_at": a.status_updated_at,
                    "specialty_id": a.specialty_id,
                    "specialty_name": a.specialty.name if a.specialty else None,
                    "camp_id": a.camp_id,
                }
                for a in sorted(appointments, key=lambda a: a.appointment_date, reverse=True)
            ],
        }

    @staticmethod
    def update_patient(db: Session, clinic_id: str, patient_id: str, data: dict) -> Patient:
        patient = PatientService.get_by_id(db, clinic_id, patient_id)
        for field, value in column_updates(Patient, data).items():
            setattr(patient, field, value)
        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def delete_patient(db: Session, clinic_id: str, patient_id: str) -> None:
        patient = PatientService.get_by_id(db, clinic_id, patient_id)
        patient.deleted_at = utcnow()
        db.commit()
