"""Clinic form templates and form field sets."""
from conftest import login_headers, make_clinic_user

INTAKE = [
    {"id": "f1", "type": "text", "title": "Occupation"},
    {"id": "f2", "type": "select", "title": "Blood group", "options": ["A+", "B+", "O+"]},
]


async def test_form_template_lifecycle(async_client, admin_headers):
    r = await async_client.post(
        "/clinics/form-templates", json={"name": "Intake", "form_data": INTAKE}, headers=admin_headers
    )
    assert r.status_code == 201
    template = r.json()["data"]
    assert template["form_data"][1]["options"] == ["A+", "B+", "O+"]

    r = await async_client.post(
        "/clinics/form-templates", json={"name": "Intake", "form_data": []}, headers=admin_headers
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Form template with this name already exists in the clinic"

    r = await async_client.post(
        "/clinics/form-templates", json={"name": "Consent", "form_data": []}, headers=admin_headers
    )
    consent_id = r.json()["data"]["id"]

    r = await async_client.put(
        f"/clinics/form-templates/{consent_id}", json={"name": "Intake"}, headers=admin_headers
    )
    assert r.status_code == 400

    r = await async_client.put(
        f"/clinics/form-templates/{template['id']}", json={"name": "Intake v2"}, headers=admin_headers
    )
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Intake v2"
    assert len(r.json()["data"]["form_data"]) == 2

    r = await async_client.get("/clinics/form-templates", headers=admin_headers)
    assert {t["name"] for t in r.json()["data"]} == {"Intake v2", "Consent"}

    r = await async_client.delete(f"/clinics/form-templates/{consent_id}", headers=admin_headers)
    assert r.status_code == 204
    r = await async_client.get(f"/clinics/form-templates/{consent_id}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Form template not found"


async def test_form_template_rejects_unknown_field_type(async_client, admin_headers):
    r = await async_client.post(
        "/clinics/form-templates",
        json={"name": "Bad", "form_data": [{"id": "x", "type": "slider", "title": "Pain"}]},
        headers=admin_headers,
    )
    assert r.status_code == 400


async def test_form_fields_lifecycle(async_client, admin_headers):
    r = await async_client.post(
        "/clinics/form-fields",
        json={"form_name": "Dental intake", "form_field_data": [{"label": "Sensitivity", "type": "radio"}]},
        headers=admin_headers,
    )
    assert r.status_code == 201
    form_id = r.json()["data"]["id"]

    r = await async_client.put(
        f"/clinics/form-fields/{form_id}",
        json={"form_field_data": [{"label": "Bleeding gums", "type": "checkbox"}]},
        headers=admin_headers,
    )
    assert r.json()["data"]["form_name"] == "Dental intake"
    assert r.json()["data"]["form_field_data"] == [{"label": "Bleeding gums", "type": "checkbox"}]

    r = await async_client.get("/clinics/form-fields", headers=admin_headers)
    assert [f["id"] for f in r.json()["data"]] == [form_id]

    r = await async_client.delete(f"/clinics/form-fields/{form_id}", headers=admin_headers)
    assert r.status_code == 204
    r = await async_client.delete(f"/clinics/form-fields/{form_id}", headers=admin_headers)
    assert r.status_code == 404


async def test_forms_are_clinic_scoped(async_client, db_session, admin_headers):
    from app.models.clinic import Clinic

    r = await async_client.post(
        "/clinics/form-templates", json={"name": "Intake", "form_data": INTAKE}, headers=admin_headers
    )
    template_id = r.json()["data"]["id"]

    other = Clinic(clinic_name="Elsewhere", status="active")
    db_session.add(other)
    db_session.commit()
    make_clinic_user(db_session, other, "admin@elsewhere.example.com", "Other Admin", "admin")
    headers = await login_headers(async_client, "admin@elsewhere.example.com")

    r = await async_client.get(f"/clinics/form-templates/{template_id}", headers=headers)
    assert r.status_code == 404

    # names only need to be unique inside a clinic
    r = await async_client.post(
        "/clinics/form-templates", json={"name": "Intake", "form_data": []}, headers=headers
    )
    assert r.status_code == 201
