# app/routers/appointments.py
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.cache.cache_service import redis_cache
from app.core.database import get_db
from app.dependencies.auth import get_clinic_user
from app.schemas.appointment import (
    AppointmentBookRequest,
    AppointmentRow,
    AppointmentStatusLiteral,
    AppointmentUpdateRequest,
)
from app.services.appointment_service import AppointmentService

router = APIRouter(prefix="/clinics/appointments", tags=["appointments"])


@router.post("/book", status_code=status.HTTP_201_CREATED)
async def book_appointment(
    request: AppointmentBookRequest,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    """
    Book a patient into one or more specialties.
    - Appointments for today also receive a queue token
    - The booking is tied to the caller's current camp
    """
    appointments = AppointmentService.book_appointment(
        db=db,
        clinic_id=current_user["clinic_id"],
        camp_id=current_user["current_camp_id"],
        data=request.model_dump(),
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {
        "success": True,
        "data": [
            {
                "id": a.id,
                "specialty_id": a.specialty_id,
                "appointment_date": a.appointment_date,
                "status": a.status,
            }
            for a in appointments
        ],
    }


@router.patch("/{appointment_id}")
async def update_appointment(
    appointment_id: str,
    request: AppointmentUpdateRequest,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService.update_appointment(
        db, current_user["clinic_id"], appointment_id, request.model_dump()
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {
        "success": True,
        "data": {
            "id": appointment.id,
            "status": appointment.status,
            "status_updated_at": appointment.status_updated_at,
        },
    }


@router.get("")
async def list_appointments(
    query_date: Optional[date] = Query(None, alias="date"),
    appointment_status: Optional[AppointmentStatusLiteral] = Query(None, alias="status"),
    specialty_id: Optional[str] = None,
    sort_by: str = "created_at",
    order: Literal["asc", "desc"] = "desc",
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    rows = AppointmentService.list_appointments(
        db,
        clinic_id=current_user["clinic_id"],
        camp_id=current_user["current_camp_id"],
        date=query_date,
        status=appointment_status,
        specialty_id=specialty_id,
        sort_by=sort_by,
        order=order,
    )
    return {"success": True, "data": [AppointmentRow.model_validate(r).model_dump() for r in rows]}
