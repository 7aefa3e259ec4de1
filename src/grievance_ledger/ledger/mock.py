"""
In-memory ledger.

Enforces the same rules the contract does for the worker's writes:
- user and complaint ids are unique ("already exists")
- lifecycle writes need an existing complaint ("does not exist")
Every accepted write gets its own block number.
"""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass, field
from typing import Any

from grievance_ledger.ledger.base import (
    InclusionReceipt,
    LedgerClient,
    LedgerRejectedError,
    RejectionReason,
)


@dataclass
class LedgerEntry:
    fn: str
    args: dict[str, Any]
    receipt: InclusionReceipt


@dataclass
class InMemoryLedger(LedgerClient):
    users: dict[str, dict[str, Any]] = field(default_factory=dict)
    complaints: dict[str, dict[str, Any]] = field(default_factory=dict)
    entries: list[LedgerEntry] = field(default_factory=list)
    # every call, including rejected ones
    submissions: int = 0
    _block: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _include(self, fn: str, args: dict[str, Any]) -> InclusionReceipt:
        self._block += 1
        tx_hash = "0x" + hashlib.sha256(f"{fn}:{self._block}".encode()).hexdigest()
        receipt = InclusionReceipt(tx_hash=tx_hash, block_number=self._block, gas_used=21_000)
        self.entries.append(LedgerEntry(fn=fn, args=dict(args), receipt=receipt))
        return receipt

    def _complaint(self, complaint_id: str) -> dict[str, Any]:
        complaint = self.complaints.get(complaint_id)
        if complaint is None:
            raise LedgerRejectedError(RejectionReason.NOT_FOUND, "Complaint does not exist")
        return complaint

    def register_user(self, **kwargs: Any) -> InclusionReceipt:
        with self._lock:
            self.submissions += 1
            user_id = kwargs["user_id"]
            if user_id in self.users:
                raise LedgerRejectedError(RejectionReason.ALREADY_EXISTS, "User already registered")
            self.users[user_id] = dict(kwargs)
            return self._include("registerUser", kwargs)

    def register_complaint(self, **kwargs: Any) -> InclusionReceipt:
        with self._lock:
            self.submissions += 1
            complaint_id = kwargs["complaint_id"]
            if complaint_id in self.complaints:
                raise LedgerRejectedError(
                    RejectionReason.ALREADY_EXISTS, "Complaint already exists"
                )
            self.complaints[complaint_id] = {**kwargs, "status": 1, "assigned_to": ""}
            return self._include("registerComplaint", kwargs)

    def update_complaint_status(self, *, complaint_id: str, status: int) -> InclusionReceipt:
        with self._lock:
            self.submissions += 1
            self._complaint(complaint_id)["status"] = int(status)
            return self._include(
                "updateComplaintStatus", {"complaint_id": complaint_id, "status": status}
            )

    def assign_complaint(self, *, complaint_id: str, department_id: str) -> InclusionReceipt:
        with self._lock:
            self.submissions += 1
            complaint = self._complaint(complaint_id)
            complaint["assigned_to"] = department_id
            complaint["status"] = 2
            return self._include(
                "assignComplaint", {"complaint_id": complaint_id, "department_id": department_id}
            )

    def resolve_complaint(self, *, complaint_id: str, resolution_date: str) -> InclusionReceipt:
        with self._lock:
            self.submissions += 1
            complaint = self._complaint(complaint_id)
            complaint["status"] = 5
            complaint["resolution_date"] = resolution_date
            return self._include(
                "resolveComplaint",
                {"complaint_id": complaint_id, "resolution_date": resolution_date},
            )
