from __future__ import annotations

import pytest

from grievance_ledger.common.config import get_settings
from grievance_ledger.common.errors import UnauthorizedError
from grievance_ledger.common.security import require_auth


@pytest.fixture()
def auth_settings():
    s = get_settings()
    keys = ["app_env", "auth_mode", "api_keys"]
    snapshot = {k: getattr(s, k) for k in keys}
    try:
        yield s
    finally:
        for k, v in snapshot.items():
            setattr(s, k, v)


def test_auth_none_mode_allows_request(auth_settings) -> None:
    auth_settings.app_env = "dev"
    auth_settings.auth_mode = "none"
    ctx = require_auth(x_api_key=None)
    assert ctx.auth_type == "none"


def test_auth_none_mode_rejected_in_prod(auth_settings) -> None:
    auth_settings.app_env = "prod"
    auth_settings.auth_mode = "none"
    with pytest.raises(UnauthorizedError):
        require_auth(x_api_key=None)


def test_auth_api_key_mode_rejects_invalid_key(auth_settings) -> None:
    auth_settings.auth_mode = "api_key"
    auth_settings.api_keys = "k1,k2"
    with pytest.raises(UnauthorizedError):
        require_auth(x_api_key="bad")


def test_auth_api_key_mode_rejects_missing_key(auth_settings) -> None:
    auth_settings.auth_mode = "api_key"
    auth_settings.api_keys = "k1"
    with pytest.raises(UnauthorizedError, match="Missing"):
        require_auth(x_api_key=None)


def test_auth_api_key_mode_accepts_valid_key(auth_settings) -> None:
    auth_settings.auth_mode = "api_key"
    auth_settings.api_keys = "k1, k2"
    ctx = require_auth(x_api_key="k2")
    assert ctx.auth_type == "api_key"


def test_auth_unknown_mode_rejected(auth_settings) -> None:
    auth_settings.auth_mode = "jwt"
    with pytest.raises(UnauthorizedError):
        require_auth(x_api_key="k1")
