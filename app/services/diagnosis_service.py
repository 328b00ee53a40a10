"""Dental diagnoses and the treatment plan each one opens."""
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.constants import PaymentStatus, TreatmentStatus
from app.core.database import transaction
from app.models.diagnosis import Diagnosis, Treatment, TreatmentSetting
from app.models.patient import Patient
from app.services.patient_service import PatientService
from app.utils.errors import NotFoundError
from app.utils.helpers import column_updates, paginate_meta, to_number
import logging

logger = logging.getLogger(__name__)


def recompute_balance(treatment: Treatment) -> None:
    total = to_number(treatment.total_amount)
    paid = to_number(treatment.paid_amount)
    treatment.remaining_amount = max(total - paid, 0.0)
    treatment.payment_status = (
        PaymentStatus.PAID.value if total > 0 and paid >= total else PaymentStatus.PENDING.value
    )


class DiagnosisService:

    @staticmethod
    def get_by_id(db: Session, clinic_id: str, diagnosis_id: str) -> Diagnosis:
        diagnosis = (
            db.query(Diagnosis)
            .join(Patient, Diagnosis.patient_id == Patient.id)
            .options(selectinload(Diagnosis.treatment).selectinload(Treatment.treatment_settings))
            .filter(Diagnosis.id == diagnosis_id, Patient.clinic_id == clinic_id)
            .first()
        )
        if not diagnosis:
            raise NotFoundError("Diagnosis not found")
        return diagnosis

    @staticmethod
    def create_diagnosis(
        db: Session,
        clinic_id: str,
        patient_id: str,
        data: dict,
        camp_id: Optional[str] = None,
    ) -> Diagnosis:
        """Record a diagnosis and open its treatment plan in one transaction."""
        patient = PatientService.get_by_id(db, clinic_id, patient_id)
        fields = {k: v for k, v in data.items() if v is not None}
        estimated_cost = to_number(fields.get("estimated_cost"))

        with transaction(db):
            diagnosis = Diagnosis(patient_id=patient.id, camp_id=camp_id, **fields)
            treatment = Treatment(
                complaints=fields.get("complaints") or [],
                treatments=fields.get("treatments_suggested") or [],
                total_amount=estimated_cost,
                paid_amount=0,
                status=TreatmentStatus.NOT_STARTED.value,
            )
            recompute_balance(treatment)
            diagnosis.treatment = treatment
            db.add(diagnosis)

        logger.info(f"Diagnosis {diagnosis.id} recorded for patient {patient.id}")
        return diagnosis

    @staticmethod
    def list_diagnoses(db: Session, clinic_id: str, patient_id: str) -> List[Diagnosis]:
        PatientService.get_by_id(db, clinic_id, patient_id)
        return (
            db.query(Diagnosis)
            .options(selectinload(Diagnosis.treatment).selectinload(Treatment.treatment_settings))
            .filter(Diagnosis.patient_id == patient_id)
            .order_by(Diagnosis.created_at.desc())
            .all()
        )

    @staticmethod
    def update_diagnosis(db: Session, clinic_id: str, diagnosis_id: str, data: dict) -> Diagnosis:
        diagnosis = DiagnosisService.get_by_id(db, clinic_id, diagnosis_id)
        data = column_updates(Diagnosis, data)
        for field, value in data.items():
            setattr(diagnosis, field, value)
        # a revised estimate re-prices the plan
        if "estimated_cost" in data and diagnosis.treatment is not None:
            diagnosis.treatment.total_amount = to_number(data["estimated_cost"])
            recompute_balance(diagnosis.treatment)
        db.commit()
        return diagnosis

    @staticmethod
    def add_xray(db: Session, clinic_id: str, diagnosis_id: str, urls: List[str]) -> Diagnosis:
        diagnosis = DiagnosisService.get_by_id(db, clinic_id, diagnosis_id)
        diagnosis.xray = [*(diagnosis.xray or []), *urls]
        diagnosis.xray_status = True
        db.commit()
        return diagnosis

    @staticmethod
    def delete_diagnosis(db: Session, clinic_id: str, diagnosis_id: str) -> None:
        diagnosis = DiagnosisService.get_by_id(db, clinic_id, diagnosis_id)
        db.delete(diagnosis)
        db.commit()


class TreatmentService:

    @staticmethod
    def get_by_id(db: Session, clinic_id: str, treatment_id: str) -> Treatment:
        treatment = (
            db.query(Treatment)
            .join(Diagnosis, Treatment.diagnosis_id == Diagnosis.id)
            .join(Patient, Diagnosis.patient_id == Patient.id)
            .options(selectinload(Treatment.treatment_settings))
            .filter(Treatment.id == treatment_id, Patient.clinic_id == clinic_id)
            .first()
        )
        if not treatment:
            raise NotFoundError("Treatment not found")
        return treatment

    @staticmethod
    def list_treatments(db: Session, clinic_id: str, patient_id: str, page: int = 1, limit: int = 10) -> dict:
        PatientService.get_by_id(db, clinic_id, patient_id)
        query = (
            db.query(Treatment)
            .join(Diagnosis, Treatment.diagnosis_id == Diagnosis.id)
            .filter(Diagnosis.patient_id == patient_id)
        )
        total = query.count()
        treatments = (
            query.options(selectinload(Treatment.treatment_settings))
            .order_by(Treatment.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {"treatments": treatments, "pagination": paginate_meta(total, page, limit)}

    @staticmethod
    def update_treatment(db: Session, clinic_id: str, treatment_id: str, data: dict) -> Treatment:
        treatment = TreatmentService.get_by_id(db, clinic_id, treatment_id)
        data = column_updates(Treatment, data)
        for field, value in data.items():
            setattr(treatment, field, value)
        if "total_amount" in data:
            recompute_balance(treatment)
        db.commit()
        return treatment

    @staticmethod
    def delete_treatment(db: Session, clinic_id: str, treatment_id: str) -> None:
        treatment = TreatmentService.get_by_id(db, clinic_id, treatment_id)
        db.delete(treatment)
        db.commit()

    @staticmethod
    def add_setting(
        db: Session,
        clinic_id: str,
        treatment_id: str,
        data: dict,
        camp_id: Optional[str] = None,
    ) -> Treatment:
        """
        Record one sitting against the plan.
        The amount collected is setting_paid_amount when given, else online + offline;
        it is added to paid_amount and the balance and payment status are recomputed.
        """
        treatment = TreatmentService.get_by_id(db, clinic_id, treatment_id)
        status = data.pop("status", None)
        collected = data.get("setting_paid_amount")
        if collected is None:
            collected = to_number(data.get("online_amount")) + to_number(data.get("offline_amount"))

        with transaction(db):
            setting = TreatmentSetting(
                treatment_id=treatment.id,
                camp_id=camp_id,
                **{**data, "setting_paid_amount": collected},
            )
            treatment.treatment_settings.append(setting)
            treatment.paid_amount = to_number(treatment.paid_amount) + to_number(collected)
            recompute_balance(treatment)
            if status:
                treatment.status = status
            elif treatment.status == TreatmentStatus.NOT_STARTED.value:
                treatment.status = TreatmentStatus.STARTED.value
        return treatment
