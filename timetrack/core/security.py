"""Password hashing built on bcrypt.

Only two operations are needed: turn a cleartext password into a salted hash at
registration time and check a login attempt against the stored hash. Both turn
low-level bcrypt failures into :class:`HashError` so callers can tell "the
hashing machinery broke" apart from "the password is wrong".
"""

from __future__ import annotations

import bcrypt

from .config import settings
from .errors import HashError

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return str(password).encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    try:
        salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
    except (TypeError, ValueError) as exc:
        raise HashError() from exc
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Return ``True`` when ``password`` matches ``password_hash``.

    A mismatch is a plain ``False``; a stored value bcrypt cannot parse raises
    :class:`HashError`.
    """

    try:
        return bcrypt.checkpw(_password_bytes(password), (password_hash or "").encode("utf-8"))
    except (TypeError, ValueError) as exc:
        raise HashError() from exc
