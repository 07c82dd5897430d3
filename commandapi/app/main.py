import logging

from fastapi import FastAPI, HTTPException, Request
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from .api import commands as commands_api
from .config import APP_NAME, AUTH_ENABLED, DEBUG, LOG_LEVEL
from .database import init_db
from .utils.error_handlers import AppError, create_error_response, get_error_message

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Debug mode serves a traceback page for unhandled errors (development only).
app = FastAPI(title=APP_NAME, debug=DEBUG)

app.include_router(commands_api.router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTPException with user-friendly messages."""
    return create_error_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning("%s: %s", type(exc).__name__, exc.message)
    return create_error_response(exc.status_code, exc.message, details=exc.details)


@app.exception_handler(OperationalError)
async def sqlalchemy_operational_error_handler(request: Request, exc: OperationalError):
    """Handle database operational errors."""
    logger.exception("Database OperationalError: %s", exc)
    return create_error_response(503, get_error_message("database_error"))


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle general database errors."""
    logger.exception("Database SQLAlchemyError: %s", exc)
    return create_error_response(500, get_error_message("database_error"))


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError with user-friendly message."""
    logger.warning("ValueError: %s", exc)
    return create_error_response(400, str(exc) or get_error_message("validation_error"))


if not DEBUG:
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors globally."""
        logger.exception("Unhandled exception: %s", exc)
        return create_error_response(500, get_error_message("server_error"))


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": APP_NAME,
    }


@app.on_event("startup")
def on_startup() -> None:
    # Bring the schema up to date before serving requests.
    init_db()
    logger.info("%s started (auth %s)", APP_NAME, "enabled" if AUTH_ENABLED else "disabled")
