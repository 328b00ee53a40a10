from typing import List

from sqlalchemy.orm import Session

from app.models.form import FormFields, FormTemplate
from app.utils.errors import BadRequestError, NotFoundError


class FormTemplateService:

    @staticmethod
    def _name_taken(db: Session, clinic_id: str, name: str, exclude_id: str = None) -> bool:
        query = db.query(FormTemplate).filter(FormTemplate.clinic_id == clinic_id, FormTemplate.name == name)
        if exclude_id:
            query = query.filter(FormTemplate.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def get_by_id(db: Session, clinic_id: str, template_id: str) -> FormTemplate:
        template = (
            db.query(FormTemplate)
            .filter(FormTemplate.id == template_id, FormTemplate.clinic_id == clinic_id)
            .first()
        )
        if not template:
            raise NotFoundError("Form template not found")
        return template

    @staticmethod
    def create(db: Session, clinic_id: str, data: dict) -> FormTemplate:
        if FormTemplateService._name_taken(db, clinic_id, data["name"]):
            raise BadRequestError("Form template with this name already exists in the clinic")
        template = FormTemplate(clinic_id=clinic_id, name=data["name"], form_data=data["form_data"])
        db.add(template)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def list_for_clinic(db: Session, clinic_id: str) -> List[FormTemplate]:
        return (
            db.query(FormTemplate)
            .filter(FormTemplate.clinic_id == clinic_id)
            .order_by(FormTemplate.created_at.desc())
            .all()
        )

    @staticmethod
    def update(db: Session, clinic_id: str, template_id: str, data: dict) -> FormTemplate:
        template = FormTemplateService.get_by_id(db, clinic_id, template_id)
        name = data.get("name")
        if name and FormTemplateService._name_taken(db, clinic_id, name, exclude_id=template.id):
            raise BadRequestError("Form template with this name already exists in the clinic")
        for field, value in data.items():
            if value is not None:
                setattr(template, field, value)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def delete(db: Session, clinic_id: str, template_id: str) -> None:
        template = FormTemplateService.get_by_id(db, clinic_id, template_id)
        db.delete(template)
        db.commit()


class FormFieldsService:

    @staticmethod
    def get_by_id(db: Session, clinic_id: str, form_id: str) -> FormFields:
        form = db.query(FormFields).filter(FormFields.id == form_id, FormFields.clinic_id == clinic_id).first()
        if not form:
            raise NotFoundError("Form field not found")
        return form

    @staticmethod
    def create(db: Session, clinic_id: str, data: dict) -> FormFields:
        form = FormFields(clinic_id=clinic_id, **data)
        db.add(form)
        db.commit()
        db.refresh(form)
        return form

    @staticmethod
    def list_for_clinic(db: Session, clinic_id: str) -> List[FormFields]:
        return (
            db.query(FormFields)
            .filter(FormFields.clinic_id == clinic_id)
            .order_by(FormFields.created_at.desc())
            .all()
        )

    @staticmethod
    def update(db: Session, clinic_id: str, form_id: str, data: dict) -> FormFields:
        form = FormFieldsService.get_by_id(db, clinic_id, form_id)
        for field, value in data.items():
            if value is not None:
                setattr(form, field, value)
        db.commit()
        db.refresh(form)
        return form

    @staticmethod
    def delete(db: Session, clinic_id: str, form_id: str) -> None:
        form = FormFieldsService.get_by_id(db, clinic_id, form_id)
        db.delete(form)
        db.commit()
