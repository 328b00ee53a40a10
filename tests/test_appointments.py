"""Booking, same-day queue tokens and the front-desk appointment list."""
from datetime import date, timedelta

import pytest

from app.models.appointment import Appointment, Queue


@pytest.fixture
def second_patient(db_session, clinic):
    from app.models.patient import Patient

    patient = Patient(clinic_id=clinic.id, reg_no="HWRF-2", name="Lata", age=30, sex="female", mobile="9000000002")
    db_session.add(patient)
    db_session.commit()
    return patient


async def _book(client, headers, patient_id, specialty_ids, day=None):
    return await client.post(
        "/clinics/appointments/book",
        json={
            "patient_id": patient_id,
            "specialties": specialty_ids,
            "appointment_date": (day or date.today()).isoformat(),
        },
        headers=headers,
    )


async def test_same_day_booking_issues_sequential_tokens(
    async_client, db_session, admin_headers, camp, specialties, patient, second_patient
):
    r = await _book(async_client, admin_headers, patient.id, [specialties["GP"], specialties["Dentistry"]])
    assert r.status_code == 201
    assert len(r.json()["data"]) == 2
    assert {a["status"] for a in r.json()["data"]} == {"in queue"}

    r = await _book(async_client, admin_headers, second_patient.id, [specialties["GP"]])
    assert r.status_code == 201

    tokens = {
        (q.patient_id, q.queue_type): q.token_number
        for q in db_session.query(Queue).filter(Queue.camp_id == camp.id).all()
    }
    assert tokens == {
        (patient.id, "GP"): 1,
        (patient.id, "Dentistry"): 1,
        (second_patient.id, "GP"): 2,
    }

    db_session.expire_all()
    assert {p.id for p in camp.patients} == {patient.id, second_patient.id}


async def test_duplicate_booking_is_rejected_atomically(async_client, db_session, admin_headers, camp, specialties, patient):
    r = await _book(async_client, admin_headers, patient.id, [specialties["GP"]])
    assert r.status_code == 201

    r = await _book(async_client, admin_headers, patient.id, [specialties["Dentistry"], specialties["GP"]])
    assert r.status_code == 400
    assert r.json() == {"code": 400, "message": "Already added into queue."}

    # the Dentistry appointment from the failed request was rolled back
    assert db_session.query(Appointment).count() == 1
    assert db_session.query(Queue).count() == 1


async def test_future_booking_is_not_queued(async_client, db_session, admin_headers, camp, specialties, patient):
    r = await _book(async_client, admin_headers, patient.id, [specialties["GP"]], day=date.today() + timedelta(days=1))
    assert r.status_code == 201
    assert db_session.query(Queue).count() == 0


async def test_booking_errors(async_client, admin_headers, camp, specialties, patient):
    r = await _book(async_client, admin_headers, "missing", [specialties["GP"]])
    assert r.status_code == 404
    assert r.json()["message"] == "Patient not found"

    r = await _book(async_client, admin_headers, patient.id, ["no-such-specialty"])
    assert r.status_code == 400
    assert r.json()["message"] == "Service not found."

    r = await _book(async_client, admin_headers, patient.id, [])
    assert r.status_code == 400


async def test_update_status(async_client, admin_headers, camp, specialties, patient):
    r = await _book(async_client, admin_headers, patient.id, [specialties["GP"]])
    appointment_id = r.json()["data"][0]["id"]

    r = await async_client.patch(
        f"/clinics/appointments/{appointment_id}", json={"status": "in"}, headers=admin_headers
    )
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "in"
    assert r.json()["data"]["status_updated_at"] is not None

    r = await async_client.patch(
        f"/clinics/appointments/{appointment_id}",
        json={"status": "out", "status_updated_at": "2026-01-05T10:30:00"},
        headers=admin_headers,
    )
    assert r.json()["data"]["status_updated_at"] == "2026-01-05T10:30:00"

    r = await async_client.patch(
        f"/clinics/appointments/{appointment_id}", json={"status": "waiting"}, headers=admin_headers
    )
    assert r.status_code == 400

    r = await async_client.patch("/clinics/appointments/missing", json={"status": "in"}, headers=admin_headers)
    assert r.status_code == 404


async def test_list_appointments_flattens_queue_and_records(
    async_client, db_session, admin_headers, camp, specialties, patient, second_patient
):
    from app.models.patient_record import PatientRecord

    await _book(async_client, admin_headers, patient.id, [specialties["GP"], specialties["Dentistry"]])
    await _book(async_client, admin_headers, second_patient.id, [specialties["GP"]])
    await _book(
        async_client, admin_headers, second_patient.id, [specialties["Dentistry"]],
        day=date.today() + timedelta(days=2),
    )

    dental = (
        db_session.query(Appointment)
        .filter(Appointment.patient_id == patient.id, Appointment.specialty_id == specialties["Dentistry"])
        .first()
    )
    db_session.add(PatientRecord(appointment_id=dental.id, patient_id=patient.id, description="Pain"))
    db_session.commit()

    r = await async_client.get(
        "/clinics/appointments", params={"date": date.today().isoformat()}, headers=admin_headers
    )
    assert r.status_code == 200
    rows = r.json()["data"]
    assert len(rows) == 3
    by_key = {(row["patient_name"], row["queue_type"]): row for row in rows}
    assert by_key[("Lata", "GP")]["token_number"] == 2
    assert by_key[("Ravi Kumar", "Dentistry")]["medical_records"][0]["description"] == "Pain"
    assert by_key[("Ravi Kumar", "GP")]["reg_no"] == "HWRF-1"

    r = await async_client.get(
        "/clinics/appointments", params={"specialty_id": specialties["Dentistry"]}, headers=admin_headers
    )
    # newest booking first by default
    rows = r.json()["data"]
    assert [row["patient_name"] for row in rows] == ["Lata", "Ravi Kumar"]
    # the future appointment has no token yet
    assert rows[0]["token_number"] is None

    r = await async_client.get(
        "/clinics/appointments",
        params={"specialty_id": specialties["Dentistry"], "sort_by": "appointment_date", "order": "asc"},
        headers=admin_headers,
    )
    assert [row["patient_name"] for row in r.json()["data"]] == ["Ravi Kumar", "Lata"]

    r = await async_client.get("/clinics/appointments", params={"status": "out"}, headers=admin_headers)
    assert r.json()["data"] == []


async def test_list_is_scoped_to_current_camp(async_client, db_session, admin_headers, clinic_admin, camp, specialties, patient):
    await _book(async_client, admin_headers, patient.id, [specialties["GP"]])

    clinic_admin.current_camp_id = None
    db_session.commit()

    r = await async_client.get("/clinics/appointments", headers=admin_headers)
    assert r.json()["data"] == []
