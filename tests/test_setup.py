import os
import sys
from pathlib import Path

from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("BCRYPT_ROUNDS", "4")

from timetrack.db.setup import init_db, main


def test_init_db_is_idempotent(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'tracker.db'}")
    init_db(engine)
    init_db(engine)

    inspector = inspect(engine)
    assert {"accounts", "activities"} <= set(inspector.get_table_names())
    unique_uid = [
        index for index in inspector.get_indexes("accounts")
        if index["column_names"] == ["uid"] and index["unique"]
    ]
    assert unique_uid
    engine.dispose()


def test_cli_creates_database(tmp_path, capsys):
    db_file = tmp_path / "cli.db"

    assert main(["--db-url", f"sqlite:///{db_file}"]) == 0

    assert db_file.exists()
    assert "Database created!" in capsys.readouterr().out
