from sqlalchemy.orm import Session

from app.models.specialty import Specialty
from app.utils.errors import BadRequestError


class SpecialtyService:

    @staticmethod
    def list_all(db: Session) -> list[Specialty]:
        return db.query(Specialty).order_by(Specialty.name.asc()).all()

    @staticmethod
    def create(db: Session, name: str, department_name: str) -> Specialty:
        if db.query(Specialty).filter(Specialty.name == name).first():
            raise BadRequestError("Specialty already exists")
        specialty = Specialty(name=name, department_name=department_name)
        db.add(specialty)
        db.commit()
        db.refresh(specialty)
        return specialty
