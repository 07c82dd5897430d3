import os
import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


# Ensure `import commandapi.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Config is read at import time, so these must be set before anything imports commandapi.app.
os.environ["DISABLE_DOTENV"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_ENABLED"] = "0"
os.environ["APP_ENV"] = "test"


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite3"


@pytest.fixture()
def app(test_db_path: Path) -> FastAPI:
    """
    The real FastAPI app wired to a temporary SQLite DB.

    TestClient is used without a `with` block, so the startup hook never runs
    against the default database.
    """
    from commandapi.app import database as db

    engine = create_engine(
        f"sqlite+pysqlite:///{test_db_path}",
        connect_args={"check_same_thread": False},
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the shared database module so router dependencies use the test DB.
    db.engine = engine
    db.SessionLocal = TestingSessionLocal

    # Import models so Base metadata is populated, then create tables.
    from commandapi.app.models import command  # noqa: F401

    db.Base.metadata.drop_all(bind=engine)
    db.Base.metadata.create_all(bind=engine)

    from commandapi.app.main import app as fastapi_app

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(app: FastAPI):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    from commandapi.app.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
