"""CRUD helpers for activity records (time entries).

Activities are stored with three fixed columns (``id``, ``username``, ``date``)
and a JSON map holding everything else the client sends. Callers only ever see
the flattened form produced by :func:`activity_to_payload`.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import InvalidInput, StoreError, require_fields
from ..models.activity import Activity

RESERVED_FIELDS = ("id", "username", "date")
MAX_RECORD_ID = 2**63 - 1


def _canonical(fields: Mapping[str, Any]) -> str:
    # Type-aware comparison: 1, 1.0 and true are different stored values.
    return json.dumps(fields, sort_keys=True, default=str)


def _utcnow() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def parse_record_id(value: object) -> int:
    """Turn a client supplied id into a primary key or raise :class:`InvalidInput`.

    Only plain ASCII digits within the signed 64-bit range are accepted.
    """

    if isinstance(value, bool):
        raise InvalidInput("Invalid activity id")
    text = str(value).strip() if value is not None else ""
    if not (text.isascii() and text.isdigit()):
        raise InvalidInput("Invalid activity id")
    try:
        record_id = int(text)
    except ValueError as exc:
        raise InvalidInput("Invalid activity id") from exc
    if record_id > MAX_RECORD_ID:
        raise InvalidInput("Invalid activity id")
    return record_id


def activity_to_payload(activity: Activity) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": activity.id,
        "username": activity.username,
        "date": activity.date,
    }
    for key, value in (activity.fields or {}).items():
        if key not in RESERVED_FIELDS:
            payload[key] = value
    return payload


def list_activities(db: Session, username: str, date: str | None = None) -> list[Activity]:
    stmt = select(Activity).where(Activity.username == username)
    if date is not None:
        stmt = stmt.where(Activity.date == date)
    stmt = stmt.order_by(Activity.id)
    try:
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as exc:
        raise StoreError("Could not load activities") from exc


def get_activity(db: Session, record_id: int) -> Activity | None:
    try:
        return db.get(Activity, record_id)
    except SQLAlchemyError as exc:
        raise StoreError("Could not load activity") from exc


def create_activity(db: Session, payload: Mapping[str, Any]) -> Activity:
    require_fields(payload, "username", "date")
    data = dict(payload)
    # ids are always assigned by the database
    data.pop("id", None)
    now = _utcnow()
    activity = Activity(
        username=str(data.pop("username")),
        date=str(data.pop("date")),
        fields=data,
        created_at=now,
        updated_at=now,
    )
    db.add(activity)
    try:
        db.commit()
        db.refresh(activity)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("Could not create activity") from exc
    return activity


def update_activity(db: Session, payload: Mapping[str, Any]) -> int:
    """Merge ``payload`` into the activity it names and return the modified count.

    Fields missing from ``payload`` are kept. The count is 0 both when no
    activity has that id and when the merge would not change anything.
    """

    require_fields(payload, "id")
    record_id = parse_record_id(payload["id"])
    changes = {key: value for key, value in payload.items() if key != "id"}

    activity = get_activity(db, record_id)
    if activity is None:
        return 0

    username = changes.pop("username", activity.username)
    if username != activity.username:
        raise InvalidInput("An activity cannot be moved to another user")
    date = changes.pop("date", activity.date)
    if date in (None, ""):
        raise InvalidInput("Missing required field(s): date")

    current = dict(activity.fields or {})
    merged = {**current, **changes}
    if str(date) == activity.date and _canonical(merged) == _canonical(current):
        return 0

    activity.date = str(date)
    activity.fields = merged
    activity.updated_at = _utcnow()
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("Could not update activity") from exc
    return 1


def delete_activity(db: Session, record_id: object) -> int:
    """Delete one activity by id and return how many rows went away (0 or 1)."""

    pk = parse_record_id(record_id)
    try:
        result = db.execute(delete(Activity).where(Activity.id == pk))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("Could not delete activity") from exc
    return result.rowcount
