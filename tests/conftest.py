"""Pytest fixtures for async FastAPI testing.

Points settings at a throwaway SQLite database before any app module is
imported, resets the schema for every test and provides an `AsyncClient`
bound to the app. Outgoing email and WhatsApp calls are captured instead of
being sent.
"""
import os
import pathlib
import tempfile
from datetime import date, timedelta

import pytest

_TMP = pathlib.Path(tempfile.mkdtemp(prefix="healthcamp-tests-"))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP / 'test.db'}")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("UPLOAD_DIR", str(_TMP / "uploads"))
os.environ.setdefault("CACHE_ENABLED", "False")
os.environ.setdefault("RATE_LIMIT_ENABLED", "False")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "True")
os.environ.setdefault("SUPERADMIN_EMAIL", "platform@example.com")
os.environ.setdefault("CLIENT_DOMAIN", "http://frontend.test")
os.environ.setdefault("WA_PHONE_NUMBER_ID", "1234567890")
os.environ.setdefault("WA_ACCESS_TOKEN", "wa-test-token")

PASSWORD = "Passw0rd123"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def prepare_database():
    """Create a clean schema for every test."""
    from app.core.database import engine, Base

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(prepare_database):
    """Yield a SQLAlchemy session for direct DB access in tests."""
    from app.core.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture every outgoing email as {to, subject, body}."""
    import app.services.email_service as email_service

    outbox = []

    def _capture(to_email, subject, body, html=None):
        outbox.append({"to": to_email, "subject": subject, "body": body})
        return True

    monkeypatch.setattr(email_service, "send_email", _capture)
    return outbox


@pytest.fixture
def whatsapp_calls(monkeypatch):
    """Replace the WhatsApp broadcast with a recorder that reports success for every number."""
    from app.services.whatsapp_service import whatsapp_service

    calls = []

    async def _broadcast(recipients, template_name, variables=None):
        calls.append({"recipients": list(recipients), "template_name": template_name, "variables": variables})
        return [
            {"recipient_phone": phone, "status": "success", "response": {"messages": [{"id": f"wamid.{i}"}]}}
            for i, phone in enumerate(recipients)
        ]

    monkeypatch.setattr(whatsapp_service, "broadcast_template_message", _broadcast)
    return calls


@pytest.fixture
async def async_client(sent_emails, prepare_database):
    """Provide an httpx AsyncClient configured with the FastAPI app."""
    from httpx import ASGITransport, AsyncClient
    from app.dependencies.rate_limit import reset_rate_limits
    from app.main import create_app

    reset_rate_limits()
    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def specialties(db_session):
    """One specialty per department, keyed by department name."""
    from app.models.specialty import Specialty

    rows = {
        "GP": Specialty(name="General Medicine", department_name="GP"),
        "Dentistry": Specialty(name="Dental Care", department_name="Dentistry"),
        "Mammography": Specialty(name="Breast Screening", department_name="Mammography"),
    }
    db_session.add_all(rows.values())
    db_session.commit()
    return {dept: s.id for dept, s in rows.items()}


def make_clinic_user(db_session, clinic, email, name, role_name, status="active"):
    from app.core.security import hash_password
    from app.models.role import Role
    from app.models.user import User

    user = User(
        name=name,
        email=email,
        phone_number="9876543210",
        password_hash=hash_password(PASSWORD),
        clinic_id=clinic.id,
        status=status,
    )
    db_session.add(user)
    db_session.flush()
    role = (
        db_session.query(Role)
        .filter(Role.clinic_id == clinic.id, Role.role_name == role_name)
        .first()
    ) or Role(role_name=role_name, clinic_id=clinic.id, user_id=user.id)
    user.roles.append(role)
    db_session.commit()
    return user


@pytest.fixture
def clinic(db_session, specialties):
    from app.models.clinic import Clinic
    from app.models.specialty import Specialty

    clinic = Clinic(
        clinic_name="Sunrise Clinic",
        city="Pune",
        state="MH",
        phone_number="9123456780",
        contact_email="desk@sunrise.example.com",
        status="active",
    )
    clinic.specialties = db_session.query(Specialty).all()
    db_session.add(clinic)
    db_session.commit()
    return clinic


@pytest.fixture
def clinic_admin(db_session, clinic):
    admin = make_clinic_user(db_session, clinic, "admin@sunrise.example.com", "Asha Admin", "admin")
    clinic.owner_id = admin.id
    db_session.commit()
    return admin


@pytest.fixture
def superadmin(db_session):
    from app.core.security import hash_password
    from app.models.role import Role
    from app.models.user import User

    user = User(
        name="Platform Owner",
        email="owner@platform.example.com",
        password_hash=hash_password(PASSWORD),
        status="active",
    )
    db_session.add(user)
    db_session.flush()
    user.roles.append(Role(role_name="superadmin", user_id=user.id))
    db_session.commit()
    return user


async def login_headers(client, email, password=PASSWORD) -> dict:
    r = await client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['data']['access_token']}"}


@pytest.fixture
async def admin_headers(async_client, clinic_admin):
    return await login_headers(async_client, clinic_admin.email)


@pytest.fixture
async def superadmin_headers(async_client, superadmin):
    return await login_headers(async_client, superadmin.email)


@pytest.fixture
def camp(db_session, clinic, clinic_admin):
    """An active camp that is the admin's current camp."""
    from app.models.camp import Camp

    camp = Camp(
        clinic_id=clinic.id,
        organizer_id=clinic_admin.id,
        name="Village Outreach",
        location="Community Hall",
        start_date=date.today(),
        end_date=date.today() + timedelta(days=3),
        status="active",
    )
    camp.specialties = list(clinic.specialties)
    db_session.add(camp)
    db_session.flush()
    clinic_admin.current_camp_id = camp.id
    db_session.commit()
    return camp


@pytest.fixture
def patient(db_session, clinic):
    from app.models.patient import Patient

    patient = Patient(
        clinic_id=clinic.id,
        reg_no="HWRF-1",
        name="Ravi Kumar",
        age=42,
        sex="male",
        mobile="9000000001",
    )
    db_session.add(patient)
    db_session.commit()
    return patient
