"""
Status API authorization.

Modes (AUTH_MODE):
- api_key: X-API-Key must be one of API_KEYS
- none: no auth (dev ONLY)
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from .config import get_settings
from .errors import UnauthorizedError


def _parse_api_keys(raw: str) -> set[str]:
    """
    API_KEYS from ENV (comma separated) -> set.
    """
    return {k.strip() for k in (raw or "").split(",") if k.strip()}


def _is_prod_env(app_env: str | None) -> bool:
    env = (app_env or "").strip().lower()
    return env in {"prod", "production"}


@dataclass(frozen=True)
class AuthContext:
    subject: str
    auth_type: str


def require_auth(*, x_api_key: str | None) -> AuthContext:
    settings = get_settings()
    mode = (settings.auth_mode or "api_key").lower().strip()

    if mode == "none":
        if _is_prod_env(settings.app_env):
            raise UnauthorizedError("AUTH_MODE=none is not allowed in APP_ENV=prod")
        return AuthContext(subject="anonymous", auth_type="none")

    if mode != "api_key":
        raise UnauthorizedError("Unknown auth mode")

    if not x_api_key:
        raise UnauthorizedError("Missing API key")
    presented = x_api_key.encode("utf-8")
    for key in _parse_api_keys(settings.api_keys):
        if hmac.compare_digest(key.encode("utf-8"), presented):
            return AuthContext(subject="api_key", auth_type="api_key")
    raise UnauthorizedError("Invalid API key")
