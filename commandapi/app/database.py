import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL, DB_PASSWORD, DB_USER

logger = logging.getLogger(__name__)


def _normalize_database_url(url: str) -> str:
    # Allow simpler `.env` values like `postgres://...` and upgrade to the driver form.
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return url.replace(prefix, "postgresql+psycopg2://", 1)
    return url


def build_database_url(url: str, user: str | None = None, password: str | None = None) -> URL:
    """Resolve the configured URL, overlaying separately configured credentials."""
    resolved = make_url(_normalize_database_url((url or "").strip()))
    if user:
        resolved = resolved.set(username=user)
    if password:
        resolved = resolved.set(password=password)
    return resolved


_db_url = build_database_url(DATABASE_URL, DB_USER, DB_PASSWORD)
_engine_kwargs = {"pool_pre_ping": True}
if _db_url.get_backend_name() == "sqlite":
    # Needed for SQLite when used with FastAPI/uvicorn (multiple threads).
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(_db_url, **_engine_kwargs)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Import models so they register with SQLAlchemy metadata before create_all.
    from .models import command  # noqa: F401

    logger.info("Creating tables on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
