from typing import Optional

from sqlalchemy.orm import Session

from app.models.mammography import Mammography
from app.services.patient_service import PatientService
from app.utils.errors import ConflictError, NotFoundError
from app.utils.helpers import column_updates


class MammographyService:

    @staticmethod
    def get_for_patient(db: Session, clinic_id: str, patient_id: str) -> Mammography:
        patient = PatientService.get_by_id(db, clinic_id, patient_id)
        if patient.mammography is None:
            raise NotFoundError("Mammography record not found")
        return patient.mammography

    @staticmethod
    def create(
        db: Session,
        clinic_id: str,
        patient_id: str,
        data: dict,
        camp_id: Optional[str] = None,
    ) -> Mammography:
        patient = PatientService.get_by_id(db, clinic_id, patient_id)
        if patient.mammography is not None:
            raise ConflictError("Mammography record already exists for this patient")
        record = Mammography(
            patient_id=patient.id,
            camp_id=camp_id,
            **{k: v for k, v in data.items() if v is not None},
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def update(db: Session, clinic_id: str, patient_id: str, data: dict) -> Mammography:
        record = MammographyService.get_for_patient(db, clinic_id, patient_id)
        for field, value in column_updates(Mammography, data).items():
            setattr(record, field, value)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def attach_document(db: Session, clinic_id: str, patient_id: str, field: str, stored: dict) -> Mammography:
        """Store an uploaded screening image or report ({key, url, content_type})."""
        record = MammographyService.get_for_patient(db, clinic_id, patient_id)
        setattr(record, field, {
            "key": stored["key"],
            "url": stored["url"],
            "content_type": stored["content_type"],
        })
        db.commit()
        db.refresh(record)
        return record
