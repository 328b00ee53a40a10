"""Generic clinic file store. Keys are scoped to clinics/{clinic_id}/."""
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import FileResponse, RedirectResponse

from app.core.config import settings
from app.core.constants import GENERIC_IMAGE_TYPES
from app.dependencies.auth import get_clinic_user
from app.services import storage_service
from app.utils.errors import BadRequestError, ForbiddenError

router = APIRouter(prefix="/files", tags=["files"])


def _clinic_prefix(current_user: dict) -> str:
    return f"clinics/{current_user['clinic_id']}"


def _owned_key(current_user: dict, key: str) -> str:
    if not key.lstrip("/").startswith(f"{_clinic_prefix(current_user)}/"):
        raise ForbiddenError()
    return key


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload(
    folder: str = Query("images"),
    file: UploadFile = File(...),
    current_user=Depends(get_clinic_user),
):
    if ".." in folder:
        raise BadRequestError("Invalid folder")
    stored = await storage_service.upload_file(
        file, f"{_clinic_prefix(current_user)}/{folder.strip('/')}", GENERIC_IMAGE_TYPES
    )
    return {"success": True, "data": stored}


@router.get("")
async def list_files(
    folder: str = Query(""),
    current_user=Depends(get_clinic_user),
):
    if ".." in folder:
        raise BadRequestError("Invalid folder")
    prefix = f"{_clinic_prefix(current_user)}/{folder.strip('/')}".rstrip("/")
    return {"success": True, "data": storage_service.list_files(prefix)}


@router.get("/url")
async def read_url(
    key: str = Query(...),
    current_user=Depends(get_clinic_user),
):
    url = storage_service.get_read_url(_owned_key(current_user, key))
    return {"success": True, "data": {"key": key, "url": url}}


@router.get("/content/{key:path}")
async def read_content(
    key: str,
    current_user=Depends(get_clinic_user),
):
    """Stream a stored file to members of the owning clinic (S3 objects redirect to a presigned URL)."""
    key = _owned_key(current_user, key)
    if settings.STORAGE_BACKEND != "local":
        return RedirectResponse(storage_service.get_read_url(key))
    return FileResponse(storage_service.local_file_path(key))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    key: str = Query(...),
    current_user=Depends(get_clinic_user),
):
    storage_service.delete_file(_owned_key(current_user, key))
