"""Health camp management, camp reports and broadcasts."""
from datetime import date, timedelta

import pytest

from conftest import login_headers, make_clinic_user


def _camp_payload(**overrides):
    payload = {
        "name": "School Screening",
        "location": "Govt School",
        "city": "Pune",
        "start_date": date.today().isoformat(),
        "end_date": (date.today() + timedelta(days=1)).isoformat(),
        "vans": ["MH-12-AB-1234"],
    }
    payload.update(overrides)
    return payload


async def test_create_and_list_camps(async_client, admin_headers, clinic_admin, specialties):
    r = await async_client.post(
        "/clinics/camps",
        json=_camp_payload(specialties=[specialties["GP"]], users=[clinic_admin.id]),
        headers=admin_headers,
    )
    assert r.status_code == 201
    camp = r.json()["data"]
    assert camp["status"] == "active"
    assert camp["organizer_id"] == clinic_admin.id
    assert [s["department_name"] for s in camp["specialties"]] == ["GP"]
    assert [u["email"] for u in camp["users"]] == [clinic_admin.email]

    # a camp that already ended is created inactive
    r = await async_client.post(
        "/clinics/camps",
        json=_camp_payload(
            name="Last Month",
            start_date=(date.today() - timedelta(days=30)).isoformat(),
            end_date=(date.today() - timedelta(days=28)).isoformat(),
        ),
        headers=admin_headers,
    )
    assert r.json()["data"]["status"] == "inactive"

    r = await async_client.get("/clinics/camps", headers=admin_headers)
    assert [c["name"] for c in r.json()["data"]] == ["School Screening", "Last Month"]

    r = await async_client.get("/clinics/camps", params={"status": "inactive"}, headers=admin_headers)
    assert [c["name"] for c in r.json()["data"]] == ["Last Month"]


async def test_create_camp_validation(async_client, admin_headers):
    r = await async_client.post(
        "/clinics/camps",
        json=_camp_payload(end_date=(date.today() - timedelta(days=1)).isoformat()),
        headers=admin_headers,
    )
    assert r.status_code == 400

    r = await async_client.post("/clinics/camps", json=_camp_payload(users=["nobody"]), headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "One or more users not found"


async def test_update_camp(async_client, admin_headers, camp, specialties):
    r = await async_client.put(
        f"/clinics/camps/{camp.id}",
        json={"name": "Village Outreach II", "specialties": [specialties["Mammography"]]},
        headers=admin_headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "Village Outreach II"
    assert [s["department_name"] for s in data["specialties"]] == ["Mammography"]

    r = await async_client.put(
        f"/clinics/camps/{camp.id}",
        json={"end_date": (date.today() - timedelta(days=1)).isoformat()},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "end_date must not be before start_date"

    # moving the end date into the past closes the camp
    r = await async_client.put(
        f"/clinics/camps/{camp.id}",
        json={
            "start_date": (date.today() - timedelta(days=5)).isoformat(),
            "end_date": (date.today() - timedelta(days=1)).isoformat(),
        },
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "inactive"

    # explicit nulls only clear optional columns
    r = await async_client.put(
        f"/clinics/camps/{camp.id}",
        json={"name": None, "start_date": None, "location": None},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Village Outreach II"
    assert r.json()["data"]["location"] is None

    r = await async_client.put("/clinics/camps/missing", json={"name": "x"}, headers=admin_headers)
    assert r.status_code == 404


async def test_set_current_camp(async_client, db_session, admin_headers, clinic_admin, camp):
    clinic_admin.current_camp_id = None
    db_session.commit()

    r = await async_client.post("/clinics/camps/current", json={"camp_id": camp.id}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["current_camp_id"] == camp.id

    r = await async_client.post("/clinics/camps/current", json={"camp_id": "missing"}, headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Camp not found"


async def test_camp_writes_need_camps_permission(async_client, db_session, clinic, clinic_admin):
    make_clinic_user(db_session, clinic, "desk@sunrise.example.com", "Front Desk", "receptionist")
    headers = await login_headers(async_client, "desk@sunrise.example.com")

    r = await async_client.post("/clinics/camps", json=_camp_payload(), headers=headers)
    assert r.status_code == 403

    r = await async_client.get("/clinics/camps", headers=headers)
    assert r.status_code == 200


@pytest.fixture
async def busy_camp(async_client, db_session, admin_headers, camp, specialties, patient):
    """Camp with one treated patient and one registered patient who never showed up."""
    from app.models.patient import Patient

    r = await async_client.post(
        "/clinics/appointments/book",
        json={
            "patient_id": patient.id,
            "specialties": [specialties["Dentistry"], specialties["GP"]],
            "appointment_date": date.today().isoformat(),
        },
        headers=admin_headers,
    )
    dental_appointment = next(a for a in r.json()["data"] if a["specialty_id"] == specialties["Dentistry"])
    await async_client.patch(
        f"/clinics/appointments/{dental_appointment['id']}", json={"status": "in"}, headers=admin_headers
    )

    r = await async_client.post(
        f"/patients/{patient.id}/diagnoses",
        json={"diagnosis_date": date.today().isoformat(), "complaints": ["Cavity"], "estimated_cost": 1000},
        headers=admin_headers,
    )
    treatment_id = r.json()["data"]["treatment"]["id"]
    await async_client.post(
        f"/patients/treatments/{treatment_id}/settings",
        json={
            "treatment_date": date.today().isoformat(),
            "online_amount": 300,
            "offline_amount": 200,
            "treating_doctor": {"label": "Dr Rao", "value": "doc-1"},
        },
        headers=admin_headers,
    )
    await async_client.post(
        f"/patients/{patient.id}/gp-records", json={"offline_amount": 150}, headers=admin_headers
    )

    no_show = Patient(clinic_id=camp.clinic_id, reg_no="HWRF-2", name="Lata", age=30, sex="female", mobile="9000000002")
    db_session.add(no_show)
    db_session.flush()
    camp.patients.append(no_show)
    db_session.commit()
    return camp


async def test_camp_details_report(async_client, admin_headers, busy_camp):
    r = await async_client.get(f"/clinics/camps/{busy_camp.id}", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["camp"]["id"] == busy_camp.id

    rows = data["patients"]
    assert len(rows) == 3
    ravi_rows = [row for row in rows if row["name"] == "Ravi Kumar"]
    assert {row["token_number"] for row in ravi_rows} == {1}
    assert set(ravi_rows[0]["services_taken"]) == {"Dentistry", "GP"}
    by_service = {row["service_taken"]: row for row in ravi_rows}
    assert by_service["Dentistry"]["paid_amount"] == 500
    assert by_service["Dentistry"]["treating_doctors"] == [{"label": "Dr Rao", "value": "doc-1"}]
    assert by_service["GP"]["paid_amount"] == 150
    assert by_service["GP"]["treating_doctors"] is None
    lata = next(row for row in rows if row["name"] == "Lata")
    assert lata["appointment_id"] is None
    assert lata["services_taken"] == []
    assert lata["service_taken"] is None
    assert lata["paid_amount"] is None

    analytics = data["analytics"]
    assert analytics["total_patients"] == 2
    assert analytics["total_attended"] == 1
    assert analytics["missed"] == 1

    dentistry = analytics["dentistry_analytics"]
    assert dentistry["total_dentistry_patients"] == 1
    assert dentistry["total_attended"] == 1
    assert dentistry["opd_patients"] == 0
    assert dentistry["total_treatments"] == 1
    assert dentistry["total_earnings"] == 500
    assert dentistry["online_earnings"] == 300
    assert dentistry["offline_earnings"] == 200
    assert dentistry["doctor_wise_data"]["Dr Rao"] == {
        "patients_treated": 1,
        "online_earnings": 300,
        "offline_earnings": 200,
        "treatment_statuses": {"started": 1},
    }

    gp = analytics["gp_analytics"]
    assert gp["total_gp_patients"] == 1
    # attendance is per patient, not per department
    assert gp["total_attended"] == 1
    assert gp["missed"] == 0
    assert gp["total_records"] == 1
    assert gp["offline_earnings"] == 150

    assert analytics["mammo_analytics"]["total_mammography_patients"] == 0


async def test_all_camps_analytics(async_client, admin_headers, busy_camp):
    r = await async_client.get("/clinics/camps/analytics", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["total_camps"] == 1
    assert data["total_registered_patients"] == 2
    assert data["total_attended"] == 1
    assert data["total_missed"] == 1
    assert data["total_earnings"] == 650
    assert data["dentistry_analytics"]["total_earnings"] == 500
    assert data["gp_analytics"]["total_earnings"] == 150


async def test_all_camps_analytics_without_camps(async_client, admin_headers):
    r = await async_client.get("/clinics/camps/analytics", headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "No camps found"


async def test_broadcast_to_camp_patients(async_client, admin_headers, busy_camp, whatsapp_calls):
    r = await async_client.post(
        f"/clinics/camps/{busy_camp.id}/broadcast",
        json={"template_name": "camp_reminder", "variables": ["Village Outreach"]},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert [res["status"] for res in r.json()["data"]] == ["success", "success"]
    assert len(whatsapp_calls) == 1
    assert sorted(whatsapp_calls[0]["recipients"]) == ["9000000001", "9000000002"]
    assert whatsapp_calls[0]["template_name"] == "camp_reminder"
    assert whatsapp_calls[0]["variables"] == ["Village Outreach"]

    r = await async_client.post(
        f"/clinics/camps/{busy_camp.id}/broadcast",
        json={"template_name": "camp_reminder", "recipients": ["9111111111"]},
        headers=admin_headers,
    )
    assert [res["recipient_phone"] for res in r.json()["data"]] == ["9111111111"]


async def test_broadcast_without_recipients(async_client, admin_headers, camp, whatsapp_calls):
    r = await async_client.post(
        f"/clinics/camps/{camp.id}/broadcast",
        json={"template_name": "camp_reminder"},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "No recipients to message"
    assert whatsapp_calls == []


async def test_broadcast_in_background(async_client, admin_headers, busy_camp, whatsapp_calls):
    # CELERY_TASK_ALWAYS_EAGER is on for the suite, so the queued task runs inline
    r = await async_client.post(
        f"/clinics/camps/{busy_camp.id}/broadcast",
        params={"background": "true"},
        json={"template_name": "camp_reminder", "variables": ["Village Outreach"]},
        headers=admin_headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["task_id"]
    assert data["recipients"] == 2
    assert len(whatsapp_calls) == 1
    assert sorted(whatsapp_calls[0]["recipients"]) == ["9000000001", "9000000002"]


async def test_background_broadcast_without_recipients(async_client, admin_headers, camp, whatsapp_calls):
    r = await async_client.post(
        f"/clinics/camps/{camp.id}/broadcast",
        params={"background": "true"},
        json={"template_name": "camp_reminder", "recipients": []},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "No recipients to message"
    assert whatsapp_calls == []
