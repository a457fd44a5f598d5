"""Security dependencies for API key validation."""
from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from forge_escrow.config import Settings, get_settings
from forge_escrow.utils.errors import error_response


@dataclass(frozen=True)
class ApiClient:
    """Authenticated API caller, identified by a short fingerprint of its key."""

    prefix: str


def _extract_key(
    authorization: str | None = Header(default=None),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str | None:
    """Read the key from ``Authorization: Bearer ...`` or ``X-API-Key``."""
    if x_api_key:
        return x_api_key.strip()
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip()
    return None


def _fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:8]


def require_api_key(
    token: str | None = Depends(_extract_key),
    settings: Settings = Depends(get_settings),
) -> ApiClient:
    """Validate the API key token and return the calling client."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_response("NO_API_KEY", "API key required."),
        )
    if not hmac.compare_digest(token.encode("utf-8"), settings.API_KEY.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_response("INVALID_API_KEY", "Invalid API key."),
        )
    return ApiClient(prefix=_fingerprint(token))


__all__ = ["ApiClient", "require_api_key"]
