"""
Ledger client contract.

Two failure classes are kept apart:
- LedgerRejectedError: the contract refused the write (deterministic, never
  resubmitted as-is); the reason is a RejectionReason, not a message to parse
- LedgerTransientError (common.errors): RPC/network/timeout, safe to resubmit
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

from grievance_ledger.common.errors import AppError, ErrCode


class RejectionReason(str, enum.Enum):
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED = "unauthorized"
    REVERTED = "reverted"


class LedgerRejectedError(AppError):
    def __init__(
        self, reason: RejectionReason, message: str, details: dict | None = None
    ) -> None:
        super().__init__(ErrCode.LEDGER_REJECTED, message, details)
        self.reason = reason

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}[{self.reason.value}]: {self.message}"


@dataclass
class InclusionReceipt:
    tx_hash: str
    block_number: int
    gas_used: int | None = None


class LedgerClient(Protocol):
    def register_user(
        self,
        *,
        user_id: str,
        name: str,
        role: str,
        email_hash: bytes,
        national_id_hash: bytes,
        location_hash: bytes,
        pin: str,
        district: str,
        city: str,
        state: str,
        municipal: str,
    ) -> InclusionReceipt: ...

    def register_complaint(
        self,
        *,
        complaint_id: str,
        user_id: str,
        category_id: str,
        sub_category: str,
        department: str,
        urgency: int,
        description_hash: bytes,
        attachment_hash: bytes,
        location_hash: bytes,
        is_public: bool,
        pin: str,
        district: str,
        city: str,
        locality: str,
        state: str,
    ) -> InclusionReceipt: ...

    def update_complaint_status(self, *, complaint_id: str, status: int) -> InclusionReceipt: ...

    def assign_complaint(self, *, complaint_id: str, department_id: str) -> InclusionReceipt: ...

    def resolve_complaint(
        self, *, complaint_id: str, resolution_date: str
    ) -> InclusionReceipt: ...
