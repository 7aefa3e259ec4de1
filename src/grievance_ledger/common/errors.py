"""
Shared errors and error codes.

Purpose:
- stable codes for queue outcomes / HTTP responses / logs
- one exception style across the project
- retryable flag splits transient infrastructure failures from permanent ones
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


class ErrCode:
    # Generic
    UNKNOWN = "unknown"
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"

    # Task intake
    MALFORMED_TASK = "malformed_task"
    UNKNOWN_CATEGORY = "unknown_category"

    # Providers
    PINNER_PROVIDER_ERROR = "pinner_provider_error"
    LEDGER_TRANSIENT = "ledger_transient"
    LEDGER_REJECTED = "ledger_rejected"

    # Infra
    REDIS_ERROR = "redis_error"
    CONFIG_ERROR = "config_error"


@dataclass
class AppError(Exception):
    """
    Base application error.
    - code: stable error code
    - message: safe message (no secrets/PII)
    - details: extra data (no secrets/PII)
    """

    retryable: ClassVar[bool] = False

    code: str
    message: str
    details: dict | None = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


class ValidationError(AppError):
    def __init__(
        self,
        message: str = "Validation failed",
        details: dict | None = None,
        *,
        code: str = ErrCode.VALIDATION,
    ) -> None:
        super().__init__(code, message, details)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized", details: dict | None = None) -> None:
        super().__init__(ErrCode.UNAUTHORIZED, message, details)


class TransientError(AppError):
    """Infrastructure failure that may succeed on resubmission."""

    retryable: ClassVar[bool] = True

    def __init__(self, code: str, message: str, details: dict | None = None) -> None:
        super().__init__(code, message, details)


class PinningError(TransientError):
    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(ErrCode.PINNER_PROVIDER_ERROR, message, details)


class LedgerTransientError(TransientError):
    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(ErrCode.LEDGER_TRANSIENT, message, details)
