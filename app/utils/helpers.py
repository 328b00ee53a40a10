"""Helper utilities (request helpers, paging, small transforms)."""
import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from fastapi import Request
from sqlalchemy import inspect as sa_inspect

from app.core.constants import REG_NO_PREFIX


def get_client_ip(request: Request) -> str:
    """Return client's IP address from request headers or connection info.

    Checks `X-Forwarded-For` first (comma-separated), then falls back to
    `request.client.host`. Returns 'unknown' if not found.
    """
    x_forwarded_for = request.headers.get("x-forwarded-for")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()

    client = getattr(request, "client", None)
    if client and getattr(client, "host", None):
        return client.host

    return "unknown"


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def paginate_meta(total: int, page: int, limit: int) -> dict:
    return {
        "total": total,
        "current_page": page,
        "total_pages": math.ceil(total / limit) if limit else 0,
        "page_size": limit,
    }


_REG_NO_RE = re.compile(rf"^{re.escape(REG_NO_PREFIX)}(\d+)$")


def next_reg_no(existing: Iterable[str]) -> str:
    """Next registration number after the highest numeric suffix in `existing`.

    >>> next_reg_no(["HWRF-2", "HWRF-10", "legacy"])
    'HWRF-11'
    """
    highest = 0
    for reg_no in existing:
        match = _REG_NO_RE.match(reg_no or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{REG_NO_PREFIX}{highest + 1}"


def flatten_quadrants(dental_quadrant: Optional[dict]) -> list[Any]:
    """Teeth from all quadrants in quadrant key order."""
    if not dental_quadrant:
        return []
    teeth: list[Any] = []
    for key in sorted(dental_quadrant.keys()):
        teeth.extend(dental_quadrant[key] or [])
    return teeth


def to_number(value) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def column_updates(model, data: dict) -> dict:
    """Partial update values for `model`, minus explicit nulls aimed at required or defaulted columns."""
    columns = sa_inspect(model).columns
    updates = {}
    for field, value in data.items():
        column = columns.get(field)
        if value is None and column is not None and (not column.nullable or column.default is not None):
            continue
        updates[field] = value
    return updates
