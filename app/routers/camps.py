from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.cache.cache_service import redis_cache
from app.core.constants import PermissionAction
from app.core.database import get_db
from app.dependencies.auth import get_clinic_user, require_permissions
from app.models.user import User
from app.schemas.camp import BroadcastRequest, CampCreate, CampRead, CampUpdate
from app.schemas.user import SetCurrentCamp
from app.services.camp_service import CampService
from app.tasks.notification_tasks import broadcast_whatsapp_task
from app.utils.errors import BadRequestError

router = APIRouter(prefix="/clinics/camps", tags=["camps"])

manage_camps = require_permissions(PermissionAction.CAMPS_WRITE.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_camp(
    request: CampCreate,
    current_user=Depends(manage_camps),
    db: Session = Depends(get_db),
):
    camp = CampService.create_camp(db, current_user["clinic_id"], current_user["user_id"], request.model_dump())
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": CampRead.model_validate(camp).model_dump()}


@router.get("")
async def list_camps(
    camp_status: Optional[Literal["active", "inactive"]] = Query(None, alias="status"),
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    camps = CampService.list_camps(db, current_user["clinic_id"], status=camp_status)
    return {"success": True, "data": [CampRead.model_validate(c).model_dump() for c in camps]}


@router.get("/analytics")
async def all_camps_analytics(
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    """Totals across every camp of the clinic."""
    analytics = await CampService.get_all_camps_analytics(db, current_user["clinic_id"])
    return {"success": True, "data": analytics}


@router.post("/current")
async def set_current_camp(
    request: SetCurrentCamp,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.id == current_user["user_id"]).first()
    CampService.set_current_camp(db, user, request.camp_id)
    return {"success": True, "data": {"current_camp_id": user.current_camp_id}}


@router.get("/{camp_id}")
async def get_camp(
    camp_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    details = CampService.get_camp_details(db, current_user["clinic_id"], camp_id)
    details["camp"] = CampRead.model_validate(details["camp"]).model_dump()
    return {"success": True, "data": details}


@router.put("/{camp_id}")
async def update_camp(
    camp_id: str,
    request: CampUpdate,
    current_user=Depends(manage_camps),
    db: Session = Depends(get_db),
):
    camp = CampService.update_camp(
        db, current_user["clinic_id"], camp_id, request.model_dump(exclude_unset=True)
    )
    await redis_cache.invalidate_camp_analytics(current_user["clinic_id"])
    return {"success": True, "data": CampRead.model_validate(camp).model_dump()}


@router.post("/{camp_id}/broadcast")
async def broadcast(
    camp_id: str,
    request: BroadcastRequest,
    background: bool = False,
    current_user=Depends(manage_camps),
    db: Session = Depends(get_db),
):
    """
    WhatsApp template message to the camp's patients (or the listed numbers).
    With ?background=true the broadcast is queued on Celery and the task id returned.
    """
    if background:
        recipients = request.recipients
        if recipients is None:
            recipients = CampService.broadcast_recipients(db, current_user["clinic_id"], camp_id)
        else:
            CampService.get_by_id(db, current_user["clinic_id"], camp_id)
        if not recipients:
            raise BadRequestError("No recipients to message")
        # off the event loop: an eager worker runs the task inline
        task = await run_in_threadpool(
            broadcast_whatsapp_task.delay, recipients, request.template_name, request.variables
        )
        return {"success": True, "data": {"task_id": task.id, "recipients": len(recipients)}}

    results = await CampService.broadcast(
        db,
        current_user["clinic_id"],
        camp_id,
        template_name=request.template_name,
        variables=request.variables,
        recipients=request.recipients,
    )
    return {"success": True, "data": results}
