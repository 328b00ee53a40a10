"""Clinic-defined form templates and form field sets."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.dependencies.auth import get_clinic_user
from app.schemas.form import (
    FormFieldsCreate,
    FormFieldsRead,
    FormFieldsUpdate,
    FormTemplateCreate,
    FormTemplateRead,
    FormTemplateUpdate,
)
from app.services.form_service import FormFieldsService, FormTemplateService

templates_router = APIRouter(prefix="/clinics/form-templates", tags=["forms"])
fields_router = APIRouter(prefix="/clinics/form-fields", tags=["forms"])


def _template(t) -> dict:
    return FormTemplateRead.model_validate(t).model_dump()


def _fields(f) -> dict:
    return FormFieldsRead.model_validate(f).model_dump()


@templates_router.post("", status_code=status.HTTP_201_CREATED)
async def create_template(
    request: FormTemplateCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    template = FormTemplateService.create(db, current_user["clinic_id"], request.model_dump())
    return {"success": True, "data": _template(template)}


@templates_router.get("")
async def list_templates(
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    templates = FormTemplateService.list_for_clinic(db, current_user["clinic_id"])
    return {"success": True, "data": [_template(t) for t in templates]}


@templates_router.get("/{template_id}")
async def get_template(
    template_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    template = FormTemplateService.get_by_id(db, current_user["clinic_id"], template_id)
    return {"success": True, "data": _template(template)}


@templates_router.put("/{template_id}")
async def update_template(
    template_id: str,
    request: FormTemplateUpdate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    template = FormTemplateService.update(
        db, current_user["clinic_id"], template_id, request.model_dump(exclude_unset=True)
    )
    return {"success": True, "data": _template(template)}


@templates_router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    FormTemplateService.delete(db, current_user["clinic_id"], template_id)


@fields_router.post("", status_code=status.HTTP_201_CREATED)
async def create_form_fields(
    request: FormFieldsCreate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    form = FormFieldsService.create(db, current_user["clinic_id"], request.model_dump())
    return {"success": True, "data": _fields(form)}


@fields_router.get("")
async def list_form_fields(
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    forms = FormFieldsService.list_for_clinic(db, current_user["clinic_id"])
    return {"success": True, "data": [_fields(f) for f in forms]}


@fields_router.get("/{form_id}")
async def get_form_fields(
    form_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    form = FormFieldsService.get_by_id(db, current_user["clinic_id"], form_id)
    return {"success": True, "data": _fields(form)}


@fields_router.put("/{form_id}")
async def update_form_fields(
    form_id: str,
    request: FormFieldsUpdate,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    form = FormFieldsService.update(
        db, current_user["clinic_id"], form_id, request.model_dump(exclude_unset=True)
    )
    return {"success": True, "data": _fields(form)}


@fields_router.delete("/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_form_fields(
    form_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    FormFieldsService.delete(db, current_user["clinic_id"], form_id)
