"""Camp analytics over patient snapshots.

A patient snapshot is a plain dict built from ORM rows (see
`CampService._patient_snapshot`)::

    {
        "id", "name", "reg_no", "age", "sex", "mobile",
        "appointments": [{"status", "specialty_id", "appointment_date", ...}],
        "queues": [{"token_number", "queue_date", "queue_type", "specialty_id"}],
        "diagnoses": [{"treatment": None | {
            "paid_amount", "status",
            "treatment_settings": [{"treating_doctor", "online_amount",
                                    "offline_amount", "crown_status"}],
        }}],
        "mammography": None | {"online_amount", "offline_amount"},
        "gp_records": [{"online_amount", "offline_amount"}],
    }

Everything here is a pure function so it can be tested without a database.
"""
from typing import Any, Iterable

from app.core.constants import Department
from app.utils.helpers import to_number

CHECKED_IN = {"in", "out"}
REGISTERED_OR_CHECKED_IN = {"in", "out", "in queue"}
UNASSIGNED_DOCTOR = "Unassigned"


def with_service_flags(patient: dict) -> dict:
    """Attach has_appointments / has_queues / services_taken to a snapshot."""
    services: list[str] = []
    for queue in patient.get("queues") or []:
        queue_type = queue.get("queue_type")
        if queue_type and queue_type not in services:
            services.append(queue_type)
    return {
        **patient,
        "has_appointments": bool(patient.get("appointments")),
        "has_queues": bool(patient.get("queues")),
        "services_taken": services,
    }


def _attended(patient: dict, statuses: set) -> bool:
    return patient.get("has_appointments", False) and any(
        a.get("status") in statuses for a in patient.get("appointments") or []
    )


def _settings(patient: dict) -> Iterable[tuple[dict, dict]]:
    for diagnosis in patient.get("diagnoses") or []:
        treatment = diagnosis.get("treatment")
        if not treatment:
            continue
        for setting in treatment.get("treatment_settings") or []:
            yield treatment, setting


def _has_settings(patient: dict) -> bool:
    return any(True for _ in _settings(patient))


def calculate_camp_analytics(patients: list[dict]) -> dict:
    total_patients = len(patients)
    total_attended = sum(1 for p in patients if _attended(p, REGISTERED_OR_CHECKED_IN))
    return {
        "total_patients": total_patients,
        "total_attended": total_attended,
        "missed": total_patients - total_attended,
    }


def calculate_dentistry_analytics(patients: list[dict]) -> dict:
    dentistry = [p for p in patients if Department.DENTISTRY.value in p.get("services_taken", [])]
    total = len(dentistry)
    attended = sum(1 for p in dentistry if _attended(p, CHECKED_IN))

    # diagnosed but no sitting recorded yet
    opd_patients = sum(1 for p in dentistry if p.get("diagnoses") and not _has_settings(p))
    total_treatments = sum(1 for p in dentistry if p.get("diagnoses") and _has_settings(p))

    total_earnings = 0.0
    online = 0.0
    offline = 0.0
    crown = 0.0
    doctor_wise: dict[str, dict[str, Any]] = {}

    for p in dentistry:
        for diagnosis in p.get("diagnoses") or []:
            treatment = diagnosis.get("treatment")
            if treatment:
                total_earnings += to_number(treatment.get("paid_amount"))

        for treatment, setting in _settings(p):
            setting_online = to_number(setting.get("online_amount"))
            setting_offline = to_number(setting.get("offline_amount"))
            online += setting_online
            offline += setting_offline
            if setting.get("crown_status"):
                crown += setting_online + setting_offline

            label = (setting.get("treating_doctor") or {}).get("label") or UNASSIGNED_DOCTOR
            doctor = doctor_wise.setdefault(
                label,
                {"patients_treated": 0, "online_earnings": 0.0, "offline_earnings": 0.0, "treatment_statuses": {}},
            )
            doctor["patients_treated"] += 1
            # crown work is reported separately
            if not setting.get("crown_status"):
                doctor["online_earnings"] += setting_online
                doctor["offline_earnings"] += setting_offline
            status = treatment.get("status")
            doctor["treatment_statuses"][status] = doctor["treatment_statuses"].get(status, 0) + 1

    return {
        "total_dentistry_patients": total,
        "total_attended": attended,
        "missed": total - attended,
        "opd_patients": opd_patients,
        "total_treatments": total_treatments,
        "total_earnings": total_earnings,
        "online_earnings": online,
        "offline_earnings": offline,
        "crown_earnings": crown,
        "doctor_wise_data": doctor_wise,
    }


def calculate_gp_analytics(patients: list[dict]) -> dict:
    gp = [p for p in patients if Department.GP.value in p.get("services_taken", [])]
    attended = sum(1 for p in gp if _attended(p, CHECKED_IN))
    online = sum(to_number(r.get("online_amount")) for p in gp for r in p.get("gp_records") or [])
    offline = sum(to_number(r.get("offline_amount")) for p in gp for r in p.get("gp_records") or [])
    return {
        "total_gp_patients": len(gp),
        "total_attended": attended,
        "missed": len(gp) - attended,
        "total_records": sum(len(p.get("gp_records") or []) for p in gp),
        "online_earnings": online,
        "offline_earnings": offline,
    }


def calculate_mammography_analytics(patients: list[dict]) -> dict:
    mammo = [p for p in patients if Department.MAMMOGRAPHY.value in p.get("services_taken", [])]
    attended = sum(1 for p in mammo if _attended(p, CHECKED_IN))
    screened = [p["mammography"] for p in mammo if p.get("mammography")]
    return {
        "total_mammography_patients": len(mammo),
        "total_attended": attended,
        "missed": len(mammo) - attended,
        "total_screenings": len(screened),
        "online_earnings": sum(to_number(m.get("online_amount")) for m in screened),
        "offline_earnings": sum(to_number(m.get("offline_amount")) for m in screened),
    }


def calculate_full_analytics(patients: list[dict]) -> dict:
    """Camp-wide numbers plus one block per department."""
    analytics = calculate_camp_analytics(patients)
    analytics["dentistry_analytics"] = calculate_dentistry_analytics(patients)
    analytics["gp_analytics"] = calculate_gp_analytics(patients)
    analytics["mammo_analytics"] = calculate_mammography_analytics(patients)
    return analytics


def _department_totals() -> dict:
    return {"total_patients": 0, "total_attended": 0, "total_missed": 0, "total_earnings": 0.0}


def aggregate_camps_analytics(camps_patients: list[list[dict]]) -> dict:
    """Roll per-camp patient snapshots up into clinic-wide totals.

    Attendance at this level means the patient has any appointment in the
    camp; missed is accumulated per camp.
    """
    totals = {
        "total_camps": len(camps_patients),
        "total_registered_patients": 0,
        "total_attended": 0,
        "total_missed": 0,
        "total_earnings": 0.0,
        "dentistry_analytics": _department_totals(),
        "gp_analytics": _department_totals(),
        "mammo_analytics": _department_totals(),
    }

    for patients in camps_patients:
        registered = len(patients)
        attended = sum(1 for p in patients if p.get("has_appointments"))
        totals["total_registered_patients"] += registered
        totals["total_attended"] += attended
        totals["total_missed"] += registered - attended

        dentistry = calculate_dentistry_analytics(patients)
        gp = calculate_gp_analytics(patients)
        mammo = calculate_mammography_analytics(patients)

        gp_earnings = gp["online_earnings"] + gp["offline_earnings"]
        mammo_earnings = mammo["online_earnings"] + mammo["offline_earnings"]

        for key, block, patients_key, earnings in (
            ("dentistry_analytics", dentistry, "total_dentistry_patients", dentistry["total_earnings"]),
            ("gp_analytics", gp, "total_gp_patients", gp_earnings),
            ("mammo_analytics", mammo, "total_mammography_patients", mammo_earnings),
        ):
            totals[key]["total_patients"] += block[patients_key]
            totals[key]["total_attended"] += block["total_attended"]
            totals[key]["total_missed"] += block["missed"]
            totals[key]["total_earnings"] += earnings

        totals["total_earnings"] += dentistry["total_earnings"] + gp_earnings + mammo_earnings

    return totals
