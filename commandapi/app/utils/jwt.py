"""
Bearer-token validation against an OpenID Connect identity provider.

The authority publishes its issuer and signing keys at
`{authority}/.well-known/openid-configuration`; tokens are accepted when the
signature matches one of those keys, the token is unexpired, and the `aud` /
`iss` claims match the configured resource id and the published issuer.
"""
import logging
import threading
import time
from typing import Any

import httpx
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from .error_handlers import AppError, UnauthorizedError, get_error_message

logger = logging.getLogger(__name__)

OPENID_CONFIG_PATH = "/.well-known/openid-configuration"


class IdentityProviderError(AppError):
    """The identity provider's metadata or key set could not be fetched."""
    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(
            message or get_error_message("identity_provider_unavailable"),
            status_code=503,
            details=details,
        )


class TokenValidator:
    def __init__(
        self,
        *,
        authority: str | None,
        audience: str | None,
        algorithms: list[str] | None = None,
        jwks: dict | None = None,
        issuer: str | None = None,
        timeout_s: float = 10.0,
        jwks_ttl_s: int = 3600,
    ):
        self.authority = (authority or "").rstrip("/") or None
        self.audience = audience
        self.algorithms = list(algorithms or ["RS256"])
        self.timeout_s = timeout_s
        self.jwks_ttl_s = jwks_ttl_s

        # A static key set skips discovery entirely.
        self._static = jwks is not None
        self._jwks: dict | None = jwks
        self._issuer: str | None = issuer
        self._fetched_at = time.time() if jwks is not None else 0.0
        self._lock = threading.Lock()

    # -------------------- discovery --------------------

    def _get_json(self, url: str) -> dict:
        try:
            r = httpx.get(url, timeout=self.timeout_s)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Identity provider returned %s for %s", e.response.status_code, url)
            raise IdentityProviderError() from e
        except (httpx.RequestError, ValueError) as e:
            logger.warning("Identity provider request failed for %s: %s", url, type(e).__name__)
            raise IdentityProviderError() from e

        if not isinstance(data, dict):
            logger.warning("Identity provider returned a non-object JSON document for %s", url)
            raise IdentityProviderError(details={"reason": "expected a JSON object"})
        return data

    def _refresh(self) -> None:
        if self.authority is None:
            raise IdentityProviderError("No authority configured for bearer-token validation")

        metadata = self._get_json(f"{self.authority}{OPENID_CONFIG_PATH}")
        jwks_uri = metadata.get("jwks_uri")
        if not jwks_uri:
            raise IdentityProviderError(details={"reason": "metadata has no jwks_uri"})

        self._jwks = self._get_json(jwks_uri)
        self._issuer = metadata.get("issuer") or self._issuer
        self._fetched_at = time.time()
        logger.info(
            "Loaded %s signing key(s) from %s",
            len(self._jwks.get("keys") or []),
            jwks_uri,
        )

    def _key_set(self, force_refresh: bool = False) -> dict:
        with self._lock:
            if self._static:
                return self._jwks or {"keys": []}
            stale = (time.time() - self._fetched_at) > self.jwks_ttl_s
            if force_refresh or self._jwks is None or stale:
                self._refresh()
            return self._jwks or {"keys": []}

    @staticmethod
    def _find_key(jwks: dict, kid: str | None) -> dict | None:
        keys = jwks.get("keys") or []
        if kid is None:
            return keys[0] if len(keys) == 1 else None
        for key in keys:
            if key.get("kid") == kid:
                return key
        return None

    # -------------------- validation --------------------

    def validate(self, token: str) -> dict[str, Any]:
        """Return the token's claims, or raise UnauthorizedError."""
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise UnauthorizedError(get_error_message("invalid_token")) from e

        if self.audience is None:
            # Without an audience any token from the authority would pass.
            logger.error("Bearer auth has no audience configured; rejecting token")
            raise IdentityProviderError("No audience configured for bearer-token validation")

        kid = header.get("kid")
        key = self._find_key(self._key_set(), kid)
        if key is None and not self._static:
            # Keys rotate; re-fetch once before giving up.
            key = self._find_key(self._key_set(force_refresh=True), kid)
        if key is None:
            logger.warning("No signing key matches token kid=%s", kid)
            raise UnauthorizedError(get_error_message("invalid_token"))

        options = {
            "verify_aud": True,
            "require_aud": True,
            "verify_iss": self._issuer is not None,
            "require_iss": self._issuer is not None,
            "require_exp": True,
        }
        try:
            return jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self._issuer,
                options=options,
            )
        except ExpiredSignatureError as e:
            logger.warning("Bearer token has expired")
            raise UnauthorizedError(get_error_message("invalid_token")) from e
        except JWTClaimsError as e:
            logger.warning("Bearer token claims rejected: %s", e)
            raise UnauthorizedError(get_error_message("invalid_token")) from e
        except JWTError as e:
            logger.warning("Bearer token validation failed: %s", e)
            raise UnauthorizedError(get_error_message("invalid_token")) from e
