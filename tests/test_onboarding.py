"""Clinic self-registration, superadmin approval and clinic profile routes."""
from conftest import PASSWORD, login_headers, make_clinic_user


def _onboard_payload(specialty_ids):
    return {
        "clinic_name": "Hilltop Health",
        "city": "Nashik",
        "state": "MH",
        "phone_number": "9988776655",
        "contact_email": "hello@hilltop.example.com",
        "specialties": specialty_ids,
        "admin_name": "Meera",
        "admin_email": "meera@hilltop.example.com",
        "admin_phone_number": "9988776600",
    }


async def test_onboard_approve_and_login(async_client, db_session, specialties, superadmin_headers, sent_emails):
    from app.models.clinic import Clinic
    from app.models.token import Token

    payload = _onboard_payload([specialties["GP"], specialties["Dentistry"]])
    r = await async_client.post("/auth/onboard-clinic", json=payload)
    assert r.status_code == 201
    clinic_id = r.json()["data"]["clinic_id"]
    admin_id = r.json()["data"]["admin_id"]

    clinic = db_session.query(Clinic).filter(Clinic.id == clinic_id).first()
    assert clinic.status == "pending"
    assert clinic.owner_id == admin_id
    assert {s.department_name for s in clinic.specialties} == {"GP", "Dentistry"}

    # superadmin notice plus the admin's set-password mail
    subjects = {(m["to"], m["subject"]) for m in sent_emails}
    assert ("platform@example.com", "New Clinic Onboarding Request") in subjects
    assert ("meera@hilltop.example.com", "Set Your Password") in subjects

    # same contact email and phone again
    payload2 = dict(payload, admin_email="other@hilltop.example.com")
    r = await async_client.post("/auth/onboard-clinic", json=payload2)
    assert r.status_code == 400
    assert r.json()["message"] == "Clinic has already been registered!"

    token = db_session.query(Token).filter(Token.user_id == admin_id, Token.type == "setPassword").first()
    r = await async_client.post("/auth/reset-password", params={"token": token.token}, json={"password": PASSWORD})
    assert r.status_code == 204

    r = await async_client.post("/auth/login", json={"email": payload["admin_email"], "password": PASSWORD})
    assert r.status_code == 401
    assert "awaiting approval" in r.json()["message"]

    r = await async_client.get("/superadmin/clinics", params={"status": "pending"}, headers=superadmin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["meta"]["total"] == 1
    row = body["data"][0]
    assert row["clinic_name"] == "Hilltop Health"
    assert row["owner_name"] == "Meera"
    assert row["admin_contact_email"] == "meera@hilltop.example.com"

    r = await async_client.patch(
        f"/superadmin/approve-clinic/{clinic_id}", json={"status": "active"}, headers=superadmin_headers
    )
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "active"
    assert sent_emails[-1]["to"] == "meera@hilltop.example.com"
    assert sent_emails[-1]["subject"] == "Your clinic is now active"

    r = await async_client.post("/auth/login", json={"email": payload["admin_email"], "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["data"]["roles"] == ["admin"]
    assert r.json()["data"]["clinic_id"] == clinic_id


async def test_onboard_rejects_taken_admin_email(async_client, clinic_admin, specialties):
    payload = _onboard_payload([])
    payload["admin_email"] = clinic_admin.email
    r = await async_client.post("/auth/onboard-clinic", json=payload)
    assert r.status_code == 400
    assert r.json()["message"] == "Admin email is already in use."


async def test_superadmin_routes_forbidden_for_clinic_admin(async_client, admin_headers):
    r = await async_client.get("/superadmin/clinics", headers=admin_headers)
    assert r.status_code == 403


async def test_superadmin_clinics_empty(async_client, superadmin_headers):
    r = await async_client.get("/superadmin/clinics", headers=superadmin_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "No clinics found"


async def test_specialty_catalogue(async_client, superadmin_headers):
    r = await async_client.post(
        "/superadmin/specialties",
        json={"name": "Oral Surgery", "department_name": "Dentistry"},
        headers=superadmin_headers,
    )
    assert r.status_code == 201

    r = await async_client.post(
        "/superadmin/specialties",
        json={"name": "Oral Surgery", "department_name": "Dentistry"},
        headers=superadmin_headers,
    )
    assert r.status_code == 400

    r = await async_client.post(
        "/superadmin/specialties",
        json={"name": "Cardiology", "department_name": "Cardio"},
        headers=superadmin_headers,
    )
    assert r.status_code == 400

    r = await async_client.get("/superadmin/specialties", headers=superadmin_headers)
    assert [s["name"] for s in r.json()["data"]] == ["Oral Surgery"]


async def test_clinic_profile_access(async_client, db_session, clinic, clinic_admin, admin_headers):
    from app.models.clinic import Clinic

    r = await async_client.get(f"/clinics/{clinic.id}", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["admin_name"] == "Asha Admin"
    assert [u["email"] for u in data["all_users"]] == [clinic_admin.email]

    r = await async_client.get("/clinics/specialty-departments", headers=admin_headers)
    assert r.status_code == 200
    assert {s["department_name"] for s in r.json()["data"]} == {"GP", "Dentistry", "Mammography"}

    # admins may not change their own approval status
    r = await async_client.put(
        f"/clinics/{clinic.id}", json={"city": "Mumbai", "status": "inactive"}, headers=admin_headers
    )
    assert r.status_code == 200
    assert r.json()["data"]["city"] == "Mumbai"
    assert r.json()["data"]["status"] == "active"

    other = Clinic(clinic_name="Elsewhere", status="active")
    db_session.add(other)
    db_session.commit()
    r = await async_client.get(f"/clinics/{other.id}", headers=admin_headers)
    assert r.status_code == 403


async def test_clinic_profile_requires_admin_role(async_client, db_session, clinic):
    make_clinic_user(db_session, clinic, "desk@sunrise.example.com", "Front Desk", "receptionist")
    headers = await login_headers(async_client, "desk@sunrise.example.com")

    r = await async_client.get(f"/clinics/{clinic.id}", headers=headers)
    assert r.status_code == 403
