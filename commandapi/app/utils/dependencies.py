import logging
from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from ..config import (
    AUTH_ALGORITHMS,
    AUTH_AUTHORITY,
    AUTH_ENABLED,
    AUTH_HTTP_TIMEOUT_S,
    AUTH_JWKS_TTL_S,
    AUTH_RESOURCE_ID,
)
from .error_handlers import AppError, UnauthorizedError, get_error_message
from .jwt import TokenValidator

logger = logging.getLogger(__name__)

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


@lru_cache(maxsize=1)
def _configured_validator() -> TokenValidator:
    logger.info("Bearer auth enabled authority=%s audience=%s", AUTH_AUTHORITY, AUTH_RESOURCE_ID)
    return TokenValidator(
        authority=AUTH_AUTHORITY,
        audience=AUTH_RESOURCE_ID,
        algorithms=AUTH_ALGORITHMS,
        timeout_s=AUTH_HTTP_TIMEOUT_S,
        jwks_ttl_s=AUTH_JWKS_TTL_S,
    )


def get_token_validator() -> TokenValidator | None:
    """Process-wide validator, or None when bearer auth is switched off."""
    if not AUTH_ENABLED:
        return None
    return _configured_validator()


def get_current_user(
    authorization: str | None = Header(None),
    validator: TokenValidator | None = Depends(get_token_validator),
) -> dict | None:
    """
    Validate `Authorization: Bearer <token>` and return the token claims.

    Returns None when auth is disabled; raises 401 otherwise on a missing or bad token.
    """
    if validator is None:
        return None

    if not authorization:
        logger.warning("Request missing Authorization header")
        raise HTTPException(status_code=401, detail=get_error_message("unauthorized"), headers=_BEARER_CHALLENGE)

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        logger.warning("Authorization header is not a bearer token")
        raise HTTPException(status_code=401, detail=get_error_message("unauthorized"), headers=_BEARER_CHALLENGE)

    try:
        claims = validator.validate(token.strip())
    except UnauthorizedError as e:
        raise HTTPException(status_code=401, detail=e.message, headers=_BEARER_CHALLENGE) from e
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    logger.debug("Authenticated subject=%s", claims.get("sub"))
    return claims
