"""CORS configuration from BACKEND_CORS_ORIGINS (comma separated, "*" allowed)."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings


def cors_origins() -> list[str]:
    raw = settings.BACKEND_CORS_ORIGINS or ""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def configure_cors(app: FastAPI) -> None:
    origins = cors_origins()
    if not origins:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
