"""Clinic staff accounts, roles and permission guards."""
import pytest

from conftest import PASSWORD, login_headers, make_clinic_user


@pytest.fixture
def permissions(db_session):
    from app.core.constants import PermissionAction
    from app.models.role import Permission

    rows = {action.value: Permission(action=action.value) for action in PermissionAction}
    db_session.add_all(rows.values())
    db_session.commit()
    return {action: p.id for action, p in rows.items()}


async def test_create_user_sends_set_password_link(async_client, db_session, admin_headers, specialties, sent_emails):
    from app.models.token import Token
    from app.models.user import User

    payload = {
        "email": "Dr.Neha@sunrise.example.com",
        "name": "Dr Neha",
        "phone_number": "9000011111",
        "roles": ["doctor"],
        "specialties": [specialties["Dentistry"]],
    }
    r = await async_client.post("/clinics/users", json=payload, headers=admin_headers)
    assert r.status_code == 204

    user = db_session.query(User).filter(User.email == "dr.neha@sunrise.example.com").first()
    assert user.status == "inactive"
    assert user.role_names == ["doctor"]
    assert [s.department_name for s in user.specialties] == ["Dentistry"]
    assert sent_emails[-1]["to"] == "dr.neha@sunrise.example.com"

    r = await async_client.post("/clinics/users", json=payload, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Email already taken"

    # the new account activates through its link
    token = db_session.query(Token).filter(Token.user_id == user.id, Token.type == "setPassword").first()
    r = await async_client.post("/auth/reset-password", params={"token": token.token}, json={"password": PASSWORD})
    assert r.status_code == 204
    await login_headers(async_client, "dr.neha@sunrise.example.com")


async def test_create_user_unknown_specialty(async_client, admin_headers):
    r = await async_client.post(
        "/clinics/users",
        json={"email": "x@sunrise.example.com", "name": "X", "specialties": ["missing"]},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "One or more specialties not found"


async def test_list_update_delete_users(async_client, db_session, clinic, clinic_admin, admin_headers):
    doctor = make_clinic_user(db_session, clinic, "doc@sunrise.example.com", "Dr Rao", "doctor")
    make_clinic_user(db_session, clinic, "desk@sunrise.example.com", "Front Desk", "receptionist")

    r = await async_client.get("/clinics/users", params={"role": "doctor"}, headers=admin_headers)
    assert [u["email"] for u in r.json()["data"]] == ["doc@sunrise.example.com"]

    r = await async_client.get("/clinics/users", params={"name": "desk"}, headers=admin_headers)
    assert [u["name"] for u in r.json()["data"]] == ["Front Desk"]

    receptionist_role = next(role for role in clinic.roles if role.role_name == "receptionist")
    r = await async_client.patch(
        f"/clinics/users/{doctor.id}",
        json={"name": "Dr Rao Senior", "roles": [receptionist_role.id]},
        headers=admin_headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "Dr Rao Senior"
    assert [role["role_name"] for role in data["roles"]] == ["receptionist"]

    r = await async_client.patch(
        f"/clinics/users/{doctor.id}", json={"email": clinic_admin.email}, headers=admin_headers
    )
    assert r.status_code == 400

    r = await async_client.delete(f"/clinics/users/{doctor.id}", headers=admin_headers)
    assert r.status_code == 204

    r = await async_client.get(f"/clinics/users/{doctor.id}", headers=admin_headers)
    assert r.status_code == 404

    r = await async_client.post("/auth/login", json={"email": "doc@sunrise.example.com", "password": PASSWORD})
    assert r.status_code == 401


async def test_users_are_clinic_scoped(async_client, db_session, admin_headers):
    from app.models.clinic import Clinic

    other = Clinic(clinic_name="Elsewhere", status="active")
    db_session.add(other)
    db_session.commit()
    outsider = make_clinic_user(db_session, other, "outsider@elsewhere.example.com", "Outsider", "admin")

    r = await async_client.get(f"/clinics/users/{outsider.id}", headers=admin_headers)
    assert r.status_code == 404

    r = await async_client.get("/clinics/users", headers=admin_headers)
    assert "outsider@elsewhere.example.com" not in [u["email"] for u in r.json()["data"]]


async def test_roles_and_permissions(async_client, admin_headers, permissions):
    r = await async_client.get("/clinics/role-permission/permissions", headers=admin_headers)
    assert r.status_code == 200
    assert {p["action"] for p in r.json()["data"]} == set(permissions)

    r = await async_client.post(
        "/clinics/role-permission",
        json={"role_name": "nurse", "permissions": [permissions["patients:read"]]},
        headers=admin_headers,
    )
    assert r.status_code == 201
    role = r.json()["data"]
    assert [p["action"] for p in role["permissions"]] == ["patients:read"]

    r = await async_client.post(
        "/clinics/role-permission",
        json={"role_name": "nurse", "permissions": []},
        headers=admin_headers,
    )
    assert r.status_code == 400

    r = await async_client.post(
        "/clinics/role-permission",
        json={"role_name": "scribe", "permissions": ["nope"]},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Some permissions not found"

    # permissions accumulate on update
    r = await async_client.put(
        "/clinics/role-permission",
        params={"role_id": role["id"]},
        json={"role_name": "senior nurse", "permissions": [permissions["patients:write"]]},
        headers=admin_headers,
    )
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["role_name"] == "senior nurse"
    assert {p["action"] for p in updated["permissions"]} == {"patients:read", "patients:write"}

    r = await async_client.get("/clinics/role-permission", headers=admin_headers)
    assert "senior nurse" in [row["role_name"] for row in r.json()["data"]]

    r = await async_client.put(
        "/clinics/role-permission",
        params={"role_id": "missing"},
        json={"role_name": "x", "permissions": []},
        headers=admin_headers,
    )
    assert r.status_code == 404


async def test_write_routes_need_administration_permission(
    async_client, db_session, clinic, clinic_admin, permissions
):
    from app.models.role import Permission, Role

    make_clinic_user(db_session, clinic, "desk@sunrise.example.com", "Front Desk", "receptionist")
    headers = await login_headers(async_client, "desk@sunrise.example.com")

    r = await async_client.post(
        "/clinics/users", json={"email": "new@sunrise.example.com", "name": "New"}, headers=headers
    )
    assert r.status_code == 403

    # reads only need clinic membership
    r = await async_client.get("/clinics/users", headers=headers)
    assert r.status_code == 200

    role = db_session.query(Role).filter(Role.clinic_id == clinic.id, Role.role_name == "receptionist").first()
    role.permissions.append(
        db_session.query(Permission).filter(Permission.action == "administration:write").first()
    )
    db_session.commit()

    r = await async_client.post(
        "/clinics/users", json={"email": "new@sunrise.example.com", "name": "New"}, headers=headers
    )
    assert r.status_code == 204


async def test_superadmin_is_not_a_clinic_user(async_client, superadmin_headers):
    r = await async_client.get("/clinics/users", headers=superadmin_headers)
    assert r.status_code == 403


async def test_clinic_cannot_grant_platform_superadmin(async_client, db_session, clinic, admin_headers, permissions):
    from app.models.role import Role

    r = await async_client.post(
        "/clinics/users",
        json={"email": "mole@example.com", "name": "Mole", "password": PASSWORD, "roles": ["superadmin"]},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["message"].startswith("roles:")

    r = await async_client.post(
        "/clinics/role-permission",
        json={"role_name": " SuperAdmin ", "permissions": []},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert db_session.query(Role).filter(Role.role_name.ilike("%superadmin%")).count() == 0


async def test_clinic_scoped_superadmin_role_has_no_platform_access(async_client, db_session, clinic):
    # a role carrying the name but belonging to a clinic, e.g. legacy data
    make_clinic_user(db_session, clinic, "legacy@sunrise.example.com", "Legacy", "superadmin")
    headers = await login_headers(async_client, "legacy@sunrise.example.com")

    r = await async_client.get("/superadmin/clinics", headers=headers)
    assert r.status_code == 403

    r = await async_client.get(f"/clinics/{clinic.id}", headers=headers)
    assert r.status_code == 403


async def test_only_admins_hand_out_the_admin_role(async_client, db_session, clinic, clinic_admin, permissions):
    from app.models.role import Permission, Role

    desk = make_clinic_user(db_session, clinic, "desk@sunrise.example.com", "Front Desk", "receptionist")
    role = db_session.query(Role).filter(Role.clinic_id == clinic.id, Role.role_name == "receptionist").first()
    role.permissions.append(
        db_session.query(Permission).filter(Permission.action == "administration:write").first()
    )
    db_session.commit()
    headers = await login_headers(async_client, "desk@sunrise.example.com")

    r = await async_client.post(
        "/clinics/users",
        json={"email": "boss@sunrise.example.com", "name": "Boss", "roles": ["admin"]},
        headers=headers,
    )
    assert r.status_code == 403

    admin_role = db_session.query(Role).filter(Role.clinic_id == clinic.id, Role.role_name == "admin").first()
    r = await async_client.patch(f"/clinics/users/{desk.id}", json={"roles": [admin_role.id]}, headers=headers)
    assert r.status_code == 403

    r = await async_client.put(
        "/clinics/role-permission",
        params={"role_id": role.id},
        json={"role_name": "admin", "permissions": []},
        headers=headers,
    )
    assert r.status_code == 403

    # other roles are still fine
    r = await async_client.post(
        "/clinics/users",
        json={"email": "aide@sunrise.example.com", "name": "Aide", "roles": ["assistant"]},
        headers=headers,
    )
    assert r.status_code == 204
