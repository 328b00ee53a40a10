"""Blob storage for clinical documents (local disk or S3)."""
import logging
import os
import uuid
from pathlib import Path
from typing import Iterable, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from app.core.config import settings
from app.utils.errors import BadRequestError, ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)


def _get_s3_client():
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or os.getenv("AWS_SECRET_ACCESS_KEY"),
        region_name=settings.AWS_REGION or os.getenv("AWS_REGION", "ap-south-1"),
    )


def _bucket() -> str:
    return settings.AWS_S3_BUCKET or os.getenv("AWS_S3_BUCKET")


# local files are only served through the clinic-scoped /files/content route
LOCAL_URL_PREFIX = "/files/content"


def _local_root() -> Path:
    return Path(settings.UPLOAD_DIR)


def _safe_key(key: str) -> str:
    key = key.strip().lstrip("/")
    if not key or ".." in Path(key).parts:
        raise BadRequestError("Invalid file key")
    return key


async def validate_upload(file: UploadFile, allowed_types: Iterable[str]) -> bytes:
    """Check content type and size; returns the file bytes."""
    if file.content_type not in set(allowed_types):
        raise BadRequestError(f"Invalid file type: {file.content_type}")
    contents = await file.read()
    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if len(contents) > max_bytes:
        raise BadRequestError(f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE_MB}MB")
    return contents


async def upload_file(file: UploadFile, folder: str, allowed_types: Iterable[str]) -> dict:
    contents = await validate_upload(file, allowed_types)
    ext = os.path.splitext(file.filename or "")[1].lower()
    key = f"{folder.strip('/')}/{uuid.uuid4().hex}{ext}"
    await file.close()

    if settings.STORAGE_BACKEND == "local":
        url = _upload_local(contents, key)
    else:
        url = _upload_s3(contents, key, file.content_type)
    logger.info(f"Stored upload {key} ({len(contents)} bytes)")
    return {"key": key, "url": url, "content_type": file.content_type, "size": len(contents)}


async def upload_many(files: List[UploadFile], folder: str, allowed_types: Iterable[str]) -> List[str]:
    urls = []
    for f in files:
        stored = await upload_file(f, folder, allowed_types)
        urls.append(stored["url"])
    return urls


def _upload_local(contents: bytes, key: str) -> str:
    path = _local_root() / key
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        f.write(contents)
    return f"{LOCAL_URL_PREFIX}/{key}"


def _upload_s3(contents: bytes, key: str, content_type: str) -> str:
    s3 = _get_s3_client()
    bucket = _bucket()
    try:
        s3.put_object(Bucket=bucket, Key=key, Body=contents, ContentType=content_type)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"S3 upload failed for {key}: {e}")
        raise ExternalServiceError("File upload failed")
    return f"https://{bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"


def list_files(folder: str) -> List[str]:
    prefix = folder.strip("/")
    if settings.STORAGE_BACKEND == "local":
        base = _local_root() / prefix
        if not base.exists():
            return []
        return sorted(
            str(p.relative_to(_local_root())).replace(os.sep, "/")
            for p in base.rglob("*")
            if p.is_file()
        )

    s3 = _get_s3_client()
    try:
        response = s3.list_objects_v2(Bucket=_bucket(), Prefix=f"{prefix}/")
    except (BotoCoreError, ClientError) as e:
        logger.error(f"S3 list failed for {prefix}: {e}")
        raise ExternalServiceError("Unable to list files")
    return [obj["Key"] for obj in response.get("Contents", [])]


def get_read_url(key: str) -> str:
    key = _safe_key(key)
    if settings.STORAGE_BACKEND == "local":
        if not (_local_root() / key).exists():
            raise NotFoundError("File not found")
        return f"{LOCAL_URL_PREFIX}/{key}"

    s3 = _get_s3_client()
    try:
        return s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": _bucket(), "Key": key},
            ExpiresIn=settings.AWS_PRESIGNED_URL_EXPIRY,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Presigned URL failed for {key}: {e}")
        raise ExternalServiceError("Unable to generate file URL")


def local_file_path(key: str) -> Path:
    path = _local_root() / _safe_key(key)
    if not path.is_file():
        raise NotFoundError("File not found")
    return path


def delete_file(key: str) -> None:
    key = _safe_key(key)
    if settings.STORAGE_BACKEND == "local":
        path = _local_root() / key
        if not path.exists():
            raise NotFoundError("File not found")
        path.unlink()
        return

    s3 = _get_s3_client()
    try:
        s3.delete_object(Bucket=_bucket(), Key=key)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"S3 delete failed for {key}: {e}")
        raise ExternalServiceError("Unable to delete file")
