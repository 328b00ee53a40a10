from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.gp_record import GeneralPhysicianRecord
from app.models.patient import Patient
from app.services.patient_service import PatientService
from app.utils.errors import NotFoundError
from app.utils.helpers import column_updates


class GPRecordService:

    @staticmethod
    def get_by_id(db: Session, clinic_id: str, record_id: str) -> GeneralPhysicianRecord:
        record = (
            db.query(GeneralPhysicianRecord)
            .join(Patient, GeneralPhysicianRecord.patient_id == Patient.id)
            .filter(GeneralPhysicianRecord.id == record_id, Patient.clinic_id == clinic_id)
            .first()
        )
        if not record:
            raise NotFoundError("GP record not found")
        return record

    @staticmethod
    def create(
        db: Session,
        clinic_id: str,
        patient_id: str,
        data: dict,
        camp_id: Optional[str] = None,
    ) -> GeneralPhysicianRecord:
        patient = PatientService.get_by_id(db, clinic_id, patient_id)
        record = GeneralPhysicianRecord(
            patient_id=patient.id,
            camp_id=camp_id,
            **{k: v for k, v in data.items() if v is not None},
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def list_for_patient(db: Session, clinic_id: str, patient_id: str) -> List[GeneralPhysicianRecord]:
        PatientService.get_by_id(db, clinic_id, patient_id)
        return (
            db.query(GeneralPhysicianRecord)
            .filter(GeneralPhysicianRecord.patient_id == patient_id)
            .order_by(GeneralPhysicianRecord.created_at.desc())
            .all()
        )

    @staticmethod
    def update(db: Session, clinic_id: str, record_id: str, data: dict) -> GeneralPhysicianRecord:
        record = GPRecordService.get_by_id(db, clinic_id, record_id)
        for field, value in column_updates(GeneralPhysicianRecord, data).items():
            setattr(record, field, value)
        db.commit()
        db.refresh(record)
        return record
