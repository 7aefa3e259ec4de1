from __future__ import annotations

from grievance_ledger.common.config import Settings, get_settings
from grievance_ledger.common.errors import ErrCode, ValidationError
from grievance_ledger.ledger.base import (
    InclusionReceipt,
    LedgerClient,
    LedgerRejectedError,
    RejectionReason,
)
from grievance_ledger.ledger.mock import InMemoryLedger

__all__ = [
    "InMemoryLedger",
    "InclusionReceipt",
    "LedgerClient",
    "LedgerRejectedError",
    "RejectionReason",
    "resolve_ledger_client",
]


def resolve_ledger_client(settings: Settings | None = None) -> LedgerClient:
    s = settings or get_settings()
    provider = (s.ledger_provider or "web3").strip().lower()
    if provider == "web3":
        from grievance_ledger.ledger.web3_client import Web3LedgerClient

        return Web3LedgerClient(
            rpc_url=s.blockchain_rpc_url,
            private_key=s.private_key,
            contract_address=s.contract_address,
            rpc_timeout_sec=s.ledger_rpc_timeout_sec,
            receipt_timeout_sec=s.ledger_receipt_timeout_sec,
            gas_price_wei=s.ledger_gas_price_wei,
        )
    if provider == "mock":
        return InMemoryLedger()
    raise ValidationError(
        f"Unknown LEDGER_PROVIDER: {provider}",
        details={"allowed": "web3,mock"},
        code=ErrCode.CONFIG_ERROR,
    )
