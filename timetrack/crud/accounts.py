"""CRUD helpers for user accounts: registration and login."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import (
    AccountNotFound,
    DuplicateAccount,
    InvalidCredentials,
    StoreError,
    require_fields,
)
from ..core.security import hash_password, verify_password
from ..models.account import Account

logger = logging.getLogger(__name__)


def _utcnow() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def get_account(db: Session, uid: str) -> Account | None:
    try:
        return db.execute(select(Account).where(Account.uid == uid)).scalars().first()
    except SQLAlchemyError as exc:
        raise StoreError("Account lookup failed") from exc


def account_to_payload(account: Account) -> dict[str, Any]:
    """Public view of an account: profile fields and uid, never the hash."""

    payload = dict(account.profile or {})
    payload["uid"] = account.uid
    return payload


def register_account(db: Session, payload: Mapping[str, Any]) -> Account:
    require_fields(payload, "uid", "password")
    profile = dict(payload)
    uid = str(profile.pop("uid"))
    password = profile.pop("password")

    if get_account(db, uid) is not None:
        raise DuplicateAccount()

    account = Account(
        uid=uid,
        password_hash=hash_password(password),
        profile=profile,
        created_at=_utcnow(),
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration; the UNIQUE index on uid
        # is the authority here, not the lookup above.
        db.rollback()
        raise DuplicateAccount() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("Could not create account") from exc
    logger.info("account.registered", extra={"extra_data": {"uid": uid}})
    return account


def authenticate_account(db: Session, uid: str | None, password: str | None) -> dict[str, Any]:
    """Check ``password`` for ``uid`` and return the public account view.

    The returned map carries a ``token`` entry. It is the configured placeholder
    string, not a signed credential, and nothing else in the API checks it.
    """

    require_fields({"username": uid, "password": password}, "username", "password")
    account = get_account(db, uid)
    if account is None:
        raise AccountNotFound()
    if not verify_password(password, account.password_hash):
        raise InvalidCredentials()
    payload = account_to_payload(account)
    payload["token"] = settings.PLACEHOLDER_TOKEN
    return payload
