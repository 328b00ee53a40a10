"""Developer commands, exposed as console scripts in pyproject.toml.

Usage (from project root):
  runserver --host=0.0.0.0 --port=8000 --no-reload
  migrate                    # defaults to `alembic upgrade head`
  seed-permissions           # inserts the permission catalogue
  create-superadmin --email=ops@example.com --name=Ops
  init-env                   # copies .env.example -> .env if missing
"""
from __future__ import annotations

import sys
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List


def _args() -> List[str]:
    return sys.argv[1:]


def _options() -> Dict[str, str]:
    opts = {}
    for a in _args():
        if a.startswith("--") and "=" in a:
            key, value = a[2:].split("=", 1)
            opts[key] = value
    return opts


def runserver() -> None:
    """Run Uvicorn programmatically. Flags: --host=, --port=, --no-reload, --reload."""
    import uvicorn

    opts = _options()
    host = opts.get("host", "127.0.0.1")
    port = int(opts.get("port", 8000))
    reload = "--no-reload" not in _args()

    print(f"Starting uvicorn on {host}:{port} (reload={reload})")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)


def run_migrations() -> None:
    """Run alembic. If no args provided, runs `alembic upgrade head`."""
    args = _args()
    cmd = ["alembic"] + args if args else ["alembic", "upgrade", "head"]
    subprocess.run(cmd, check=True)


def seed_permissions() -> None:
    """Insert every PermissionAction that is not in the database yet."""
    from app.core.constants import PermissionAction
    from app.core.database import SessionLocal
    from app.models.role import Permission

    db = SessionLocal()
    try:
        existing = {action for (action,) in db.query(Permission.action).all()}
        added = 0
        for action in PermissionAction:
            if action.value not in existing:
                db.add(Permission(action=action.value))
                added += 1
        db.commit()
        print(f"Added {added} permissions")
    finally:
        db.close()


def create_superadmin() -> None:
    """Create a superadmin; without --password a set-password link is emailed."""
    from app.core.database import SessionLocal
    from app.services.auth_service import AuthService

    opts = _options()
    if "email" not in opts or "name" not in opts:
        print("Usage: create-superadmin --email=<email> --name=<name> [--password=<password>]")
        sys.exit(1)

    db = SessionLocal()
    try:
        user = AuthService.register(db, email=opts["email"], name=opts["name"], password=opts.get("password"))
        print(f"Created superadmin {user.email} ({user.id})")
    finally:
        db.close()


def init_env() -> None:
    """Copy `.env.example` to `.env` if `.env` is missing."""
    root = Path(__file__).resolve().parents[1]
    src = root / ".env.example"
    dst = root / ".env"
    if dst.exists():
        print(f".env already exists at {dst}")
        return
    if not src.exists():
        print(f".env.example not found at {src}")
        return
    shutil.copy(src, dst)
    print(f"Created .env from .env.example at {dst}")


COMMANDS = {
    "runserver": runserver,
    "migrate": run_migrations,
    "seed-permissions": seed_permissions,
    "create-superadmin": create_superadmin,
    "init-env": init_env,
}


if __name__ == "__main__":
    # python -m app.cli <command> [options]
    if len(sys.argv) <= 1 or sys.argv[1] not in COMMANDS:
        print(__doc__)
        sys.exit(0 if len(sys.argv) <= 1 else 1)
    command = COMMANDS[sys.argv.pop(1)]
    command()
