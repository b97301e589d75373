"""Create the tables the API needs.

Runs automatically when the application starts and can also be invoked by hand
to prepare a fresh database::

    python -m timetrack.db.setup --db-url sqlite:///./time-tracker.db
"""

from __future__ import annotations

import argparse
import logging
from typing import Iterable, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from ..core.config import settings
from .session import Base, connect_args_for

# Importing the models registers them with ``Base.metadata``.
from ..models import account as _account  # noqa: F401
from ..models import activity as _activity  # noqa: F401

logger = logging.getLogger(__name__)


def _create_index_if_not_exists(engine: Engine, table: str, name: str, cols: Iterable[str], unique: bool = False) -> None:
    """Build an index only if it hasn't already been defined."""

    cols_sql = ", ".join(cols)
    unique_sql = "UNIQUE " if unique else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {name} ON {table} ({cols_sql})"))


def init_db(engine: Engine) -> None:
    """Create missing tables and make sure ``accounts.uid`` is unique.

    Safe to call repeatedly. The explicit index covers databases whose
    ``accounts`` table predates the UNIQUE column constraint.
    """

    Base.metadata.create_all(bind=engine)
    _create_index_if_not_exists(engine, "accounts", "ix_accounts_uid", ["uid"], unique=True)
    logger.info("database.ready", extra={"extra_data": {"driver": engine.url.drivername}})


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the Time Tracker database tables.")
    parser.add_argument("--db-url", default=settings.DB_URL, help="SQLAlchemy database URL")
    args = parser.parse_args(argv)

    engine = create_engine(args.db_url, connect_args=connect_args_for(args.db_url))
    try:
        init_db(engine)
    finally:
        engine.dispose()
    print("Database created!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
