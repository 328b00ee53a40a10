from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.cache.cache_service import redis_cache
from app.core.logger import setup_logging
from app.middleware.cors import configure_cors
from app.middleware.logging import RequestLoggerMiddleware
from app.middleware.auth import JWTMiddleware
from app.middleware import error_handler

# Routers
from app.routers import auth as auth_router
from app.routers import superadmin as superadmin_router
from app.routers import users as users_router
from app.routers import role_permissions as role_permissions_router
from app.routers import appointments as appointments_router
from app.routers import camps as camps_router
from app.routers import forms as forms_router
from app.routers import clinics as clinics_router
from app.routers import patients as patients_router
from app.routers import files as files_router
from app.routers import health as health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await redis_cache.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    setup_logging()
    description = (
        "Health Camp Backend API.\n\n"
        "Multi-tenant clinic management: onboarding, staff and roles, patients, "
        "appointments and queues, clinical records and health camps."
    )

    openapi_tags = [
        {"name": "authentication", "description": "Login, tokens, password and email flows, clinic onboarding."},
        {"name": "superadmin", "description": "Clinic approvals and the specialty catalogue."},
        {"name": "clinics", "description": "Clinic profile and specialty departments."},
        {"name": "users", "description": "Clinic staff accounts."},
        {"name": "roles", "description": "Clinic roles and permissions."},
        {"name": "patients", "description": "Patients and their clinical records."},
        {"name": "appointments", "description": "Bookings and same-day queue tokens."},
        {"name": "camps", "description": "Health camps, analytics and broadcasts."},
        {"name": "forms", "description": "Clinic form templates and form fields."},
        {"name": "files", "description": "Clinic file storage."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title="Health Camp Backend API",
        version="0.1.0",
        description=description,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(JWTMiddleware)
    app.add_middleware(RequestLoggerMiddleware)
    configure_cors(app)

    # Exception handlers
    app.add_exception_handler(StarletteHTTPException, error_handler.http_exception_handler)
    app.add_exception_handler(RequestValidationError, error_handler.validation_exception_handler)
    app.add_exception_handler(Exception, error_handler.unhandled_exception_handler)

    # Include routers; /clinics/* sub-routers go before /clinics/{clinic_id}
    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(superadmin_router.router)
    app.include_router(users_router.router)
    app.include_router(role_permissions_router.router)
    app.include_router(appointments_router.router)
    app.include_router(camps_router.router)
    app.include_router(forms_router.templates_router)
    app.include_router(forms_router.fields_router)
    app.include_router(clinics_router.router)
    app.include_router(patients_router.router)
    app.include_router(files_router.router)

    return app


app = create_app()
