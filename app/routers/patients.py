from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.cache.cache_service import redis_cache
from app.core.constants import (
    DIAGNOSIS_FILE_TYPES,
    DIAGNOSIS_UPDATE_FILE_TYPES,
    MAMMOGRAPHY_FILE_TYPES,
    TREATMENT_FILE_TYPES,
)
from app.core.database import get_db
from app.dependencies.auth import get_clinic_user
from app.schemas.diagnosis import (
    DiagnosisCreate,
    DiagnosisRead,
    DiagnosisUpdate,
    TreatmentRead,
    TreatmentSettingCreate,
    TreatmentUpdate,
)
from app.schemas.gp_record import GPRecordCreate, GPRecordRead, GPRecordUpdate
from app.schemas.mammography import MammographyCreate, MammographyRead, MammographyUpdate
from app.schemas.patient import DentalRecordCreate, PatientCreate, PatientRead, PatientUpdate
from app.services import storage_service
from app.services.dental_service import DentalService
from app.services.diagnosis_service import DiagnosisService, TreatmentService
from app.services.gp_record_service import GPRecordService
from app.services.mammography_service import MammographyService
from app.services.patient_service import PatientService

router = APIRouter(prefix="/patients", tags=["patients"])

UPLOAD_RULES = {
    "diagnosis": DIAGNOSIS_FILE_TYPES,
    "treatment": TREATMENT_FILE_TYPES,
    "mammography": MAMMOGRAPHY_FILE_TYPES,
}


def _diagnosis(d) -> dict:
    return DiagnosisRead.model_validate(d).model_dump()


def _treatment(t) -> dict:
    return TreatmentRead.model_validate(t).model_dump()


# -------------------------------------------------------------------------
# Patients
# -------------------------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_patient(
    request: PatientCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    patient = PatientService.create_patient(db, current_user["clinic_id"], request.model_dump())
    return {"success": True, "data": PatientRead.model_validate(patient).model_dump()}


@router.get("")
async def list_patients(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    name: Optional[str] = None,
    mobile: Optional[str] = None,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    result = PatientService.list_patients(
        db, current_user["clinic_id"], page=page, limit=limit, name=name, mobile=mobile
    )
    return {"success": True, "data": result}


@router.get("/search")
async def search_patients(
    name: Optional[str] = None,
    mobile: Optional[str] = None,
    reg_no: Optional[str] = None,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    patients = PatientService.search_patients(
        db, current_user["clinic_id"], name=name, mobile=mobile, reg_no=reg_no
    )
    return {"success": True, "data": [PatientRead.model_validate(p).model_dump() for p in patients]}


@router.post("/dental-records", status_code=status.HTTP_201_CREATED)
async def add_dental_record(
    request: DentalRecordCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    """Dental findings for one appointment; a second record for it is rejected."""
    record = DentalService.add_dental_patient_record(db, current_user["clinic_id"], request.model_dump())
    return {
        "success": True,
        "data": {
            "id": record.id,
            "record_id": record.record_id,
            "complaints": record.complaints,
            "treatment": record.treatment,
            "dental_quadrant": record.dental_quadrant,
            "tooth_number": record.tooth_number,
            "xray_status": record.xray_status,
            "xray": record.xray,
            "notes": record.notes,
        },
    }


@router.post("/uploads/{kind}")
async def upload_documents(
    kind: Literal["diagnosis", "treatment", "mammography"],
    files: List[UploadFile] = File(...),
    current_user=Depends(get_clinic_user),
):
    """Store clinical documents and return their URLs for a later create/update call."""
    urls = await storage_service.upload_many(
        files, f"clinics/{current_user['clinic_id']}/{kind}", UPLOAD_RULES[kind]
    )
    return {"success": True, "data": urls}


# -------------------------------------------------------------------------
# Diagnoses and treatments
# -------------------------------------------------------------------------
@router.get("/diagnoses/{diagnosis_id}")
async def get_diagnosis(
    diagnosis_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    diagnosis = DiagnosisService.get_by_id(db, current_user["clinic_id"], diagnosis_id)
    return {"success": True, "data": _diagnosis(diagnosis)}


@router.patch("/diagnoses/{diagnosis_id}")
async def update_diagnosis(
    diagnosis_id: str,
    request: DiagnosisUpdate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    diagnosis = DiagnosisService.update_diagnosis(
        db, current_user["clinic_id"], diagnosis_id, request.model_dump(exclude_unset=True)
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": _diagnosis(diagnosis)}


@router.post("/diagnoses/{diagnosis_id}/xray")
async def add_diagnosis_xray(
    diagnosis_id: str,
    files: List[UploadFile] = File(...),
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    DiagnosisService.get_by_id(db, current_user["clinic_id"], diagnosis_id)
    urls = await storage_service.upload_many(
        files, f"clinics/{current_user['clinic_id']}/diagnosis", DIAGNOSIS_UPDATE_FILE_TYPES
    )
    diagnosis = DiagnosisService.add_xray(db, current_user["clinic_id"], diagnosis_id, urls)
    return {"success": True, "data": _diagnosis(diagnosis)}


@router.delete("/diagnoses/{diagnosis_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_diagnosis(
    diagnosis_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    DiagnosisService.delete_diagnosis(db, current_user["clinic_id"], diagnosis_id)
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])


@router.get("/treatments/{treatment_id}")
async def get_treatment(
    treatment_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    treatment = TreatmentService.get_by_id(db, current_user["clinic_id"], treatment_id)
    return {"success": True, "data": _treatment(treatment)}


@router.patch("/treatments/{treatment_id}")
async def update_treatment(
    treatment_id: str,
    request: TreatmentUpdate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    treatment = TreatmentService.update_treatment(
        db, current_user["clinic_id"], treatment_id, request.model_dump(exclude_unset=True)
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": _treatment(treatment)}


@router.delete("/treatments/{treatment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_treatment(
    treatment_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    TreatmentService.delete_treatment(db, current_user["clinic_id"], treatment_id)
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])


@router.post("/treatments/{treatment_id}/settings", status_code=status.HTTP_201_CREATED)
async def add_treatment_setting(
    treatment_id: str,
    request: TreatmentSettingCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    """Record a sitting; the payment is added to the plan's running balance."""
    data = request.model_dump()
    if data.get("treating_doctor"):
        data["treating_doctor"] = {k: v for k, v in data["treating_doctor"].items() if v is not None}
    treatment = TreatmentService.add_setting(
        db, current_user["clinic_id"], treatment_id, data, camp_id=current_user["current_camp_id"]
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": _treatment(treatment)}


# -------------------------------------------------------------------------
# GP records
# -------------------------------------------------------------------------
@router.get("/gp-records/{record_id}")
async def get_gp_record(
    record_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    record = GPRecordService.get_by_id(db, current_user["clinic_id"], record_id)
    return {"success": True, "data": GPRecordRead.model_validate(record).model_dump()}


@router.patch("/gp-records/{record_id}")
async def update_gp_record(
    record_id: str,
    request: GPRecordUpdate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    record = GPRecordService.update(
        db, current_user["clinic_id"], record_id, request.model_dump(exclude_unset=True)
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": GPRecordRead.model_validate(record).model_dump()}


# -------------------------------------------------------------------------
# Single patient
# -------------------------------------------------------------------------
@router.get("/{patient_id}")
async def get_patient(
    patient_id: str,
    specialty_id: Optional[str] = None,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    details = PatientService.get_patient_details(
        db, current_user["clinic_id"], patient_id, specialty_id=specialty_id
    )
    return {"success": True, "data": details}


@router.patch("/{patient_id}")
async def update_patient(
    patient_id: str,
    request: PatientUpdate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    patient = PatientService.update_patient(
        db, current_user["clinic_id"], patient_id, request.model_dump(exclude_unset=True)
    )
    return {"success": True, "data": PatientRead.model_validate(patient).model_dump()}


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient(
    patient_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    PatientService.delete_patient(db, current_user["clinic_id"], patient_id)


@router.post("/{patient_id}/diagnoses", status_code=status.HTTP_201_CREATED)
async def create_diagnosis(
    patient_id: str,
    request: DiagnosisCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    """Diagnose the patient; a treatment plan priced at the estimate is opened with it."""
    diagnosis = DiagnosisService.create_diagnosis(
        db,
        current_user["clinic_id"],
        patient_id,
        request.model_dump(),
        camp_id=current_user["current_camp_id"],
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": _diagnosis(diagnosis)}


@router.get("/{patient_id}/diagnoses")
async def list_diagnoses(
    patient_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    diagnoses = DiagnosisService.list_diagnoses(db, current_user["clinic_id"], patient_id)
    return {"success": True, "data": [_diagnosis(d) for d in diagnoses]}


@router.get("/{patient_id}/treatments")
async def list_treatments(
    patient_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    result = TreatmentService.list_treatments(db, current_user["clinic_id"], patient_id, page=page, limit=limit)
    return {
        "success": True,
        "data": {
            "treatments": [_treatment(t) for t in result["treatments"]],
            "pagination": result["pagination"],
        },
    }


@router.post("/{patient_id}/mammography", status_code=status.HTTP_201_CREATED)
async def create_mammography(
    patient_id: str,
    request: MammographyCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    record = MammographyService.create(
        db,
        current_user["clinic_id"],
        patient_id,
        request.model_dump(),
        camp_id=current_user["current_camp_id"],
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": MammographyRead.model_validate(record).model_dump()}


@router.get("/{patient_id}/mammography")
async def get_mammography(
    patient_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    record = MammographyService.get_for_patient(db, current_user["clinic_id"], patient_id)
    return {"success": True, "data": MammographyRead.model_validate(record).model_dump()}


@router.patch("/{patient_id}/mammography")
async def update_mammography(
    patient_id: str,
    request: MammographyUpdate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    record = MammographyService.update(
        db, current_user["clinic_id"], patient_id, request.model_dump(exclude_unset=True)
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": MammographyRead.model_validate(record).model_dump()}


@router.post("/{patient_id}/mammography/files")
async def upload_mammography_file(
    patient_id: str,
    field: Literal["screening_image", "mammo_report"] = Query(...),
    file: UploadFile = File(...),
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    MammographyService.get_for_patient(db, current_user["clinic_id"], patient_id)
    stored = await storage_service.upload_file(
        file, f"clinics/{current_user['clinic_id']}/mammography", MAMMOGRAPHY_FILE_TYPES
    )
    record = MammographyService.attach_document(db, current_user["clinic_id"], patient_id, field, stored)
    return {"success": True, "data": MammographyRead.model_validate(record).model_dump()}


@router.post("/{patient_id}/gp-records", status_code=status.HTTP_201_CREATED)
async def create_gp_record(
    patient_id: str,
    request: GPRecordCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    record = GPRecordService.create(
        db,
        current_user["clinic_id"],
        patient_id,
        request.model_dump(),
        camp_id=current_user["current_camp_id"],
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": GPRecordRead.model_validate(record).model_dump()}


@router.get("/{patient_id}/gp-records")
async def list_gp_records(
    patient_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    records = GPRecordService.list_for_patient(db, current_user["clinic_id"], patient_id)
    return {"success": True, "data": [GPRecordRead.model_validate(r).model_dump() for r in records]}
