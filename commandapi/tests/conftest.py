import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["DISABLE_DOTENV"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_ENABLED", "0")


@pytest.fixture()
def sqlite_engine(tmp_path: Path, monkeypatch):
    """A throwaway SQLite engine patched into the shared database module."""
    from commandapi.app import database as db

    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'crud.sqlite3'}",
        connect_args={"check_same_thread": False},
    )
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(db, "SessionLocal", sessionmaker(autocommit=False, autoflush=False, bind=engine))
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(sqlite_engine):
    from commandapi.app import database as db

    db.init_db()
    session = db.SessionLocal()
    try:
        yield session
    finally:
        session.close()
