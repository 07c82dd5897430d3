import os
from pathlib import Path
from dotenv import load_dotenv

# Override=True so edits to .env apply on reload instead of sticking to old env vars.
#
# For automated tests (SQLite), we need to prevent .env from overriding the
# test DATABASE_URL. Set DISABLE_DOTENV=1 to skip loading .env.
if os.getenv("DISABLE_DOTENV") != "1":
    load_dotenv(override=True)


def _flag(value: str | None) -> bool:
    return (value or "").strip() in {"1", "true", "True", "yes", "YES"}


# -------------------- Database --------------------
_raw_database_url = (os.getenv("DATABASE_URL") or "").strip()
# Default to a local SQLite DB so the service starts out-of-the-box.
# Use an absolute path so it works regardless of current working directory.
_default_sqlite_path = (Path(__file__).resolve().parent.parent / "commands.db").as_posix()
DATABASE_URL = _raw_database_url or f"sqlite:///{_default_sqlite_path}"

# Credentials are kept out of the connection string and overlaid at engine creation.
DB_USER = os.getenv("DB_USER") or None
DB_PASSWORD = os.getenv("DB_PASSWORD") or None

# -------------------- App --------------------
APP_NAME = os.getenv("APP_NAME", "Command API")
APP_ENV = (os.getenv("APP_ENV", "production") or "production").strip().lower()
DEBUG = APP_ENV == "development"
LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()

# -------------------- Auth (bearer tokens) --------------------
AUTH_INSTANCE = os.getenv("AUTH_INSTANCE", "https://login.microsoftonline.com/")
AUTH_TENANT_ID = os.getenv("AUTH_TENANT_ID") or None
AUTH_RESOURCE_ID = os.getenv("AUTH_RESOURCE_ID") or None  # expected token audience
AUTH_AUTHORITY = f"{AUTH_INSTANCE}{AUTH_TENANT_ID}" if AUTH_TENANT_ID else None

_raw_auth_enabled = os.getenv("AUTH_ENABLED")
AUTH_ENABLED = (
    _flag(_raw_auth_enabled)
    if _raw_auth_enabled not in (None, "")
    else bool(AUTH_TENANT_ID and AUTH_RESOURCE_ID)
)

AUTH_ALGORITHMS = [
    alg.strip()
    for alg in (os.getenv("AUTH_ALGORITHMS", "RS256") or "RS256").split(",")
    if alg.strip()
]
AUTH_HTTP_TIMEOUT_S = float(os.getenv("AUTH_HTTP_TIMEOUT_S", "10") or "10")
AUTH_JWKS_TTL_S = int(os.getenv("AUTH_JWKS_TTL_S", "3600") or "3600")
