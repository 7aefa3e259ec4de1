from __future__ import annotations

from grievance_ledger.common.config import Settings, get_settings
from grievance_ledger.common.errors import ErrCode, ValidationError
from grievance_ledger.pinning.base import ContentPinner, PinResult
from grievance_ledger.pinning.mock import MockContentPinner
from grievance_ledger.pinning.pinata import PinataPinner

__all__ = ["ContentPinner", "MockContentPinner", "PinResult", "PinataPinner", "resolve_pinner"]


def resolve_pinner(settings: Settings | None = None) -> ContentPinner:
    s = settings or get_settings()
    provider = (s.pinner_provider or "pinata").strip().lower()
    if provider == "pinata":
        return PinataPinner(
            api_base=s.pinata_api_base, jwt=s.pinata_jwt, timeout_sec=s.pinata_timeout_sec
        )
    if provider == "mock":
        return MockContentPinner()
    raise ValidationError(
        f"Unknown PINNER_PROVIDER: {provider}",
        details={"allowed": "pinata,mock"},
        code=ErrCode.CONFIG_ERROR,
    )
