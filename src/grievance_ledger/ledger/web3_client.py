"""
Ledger client over EVM JSON-RPC (web3.py).

Algorithm per write:
- build_transaction() estimates gas, which simulates the call: a contract
  revert surfaces here as ContractLogicError, before anything is sent
- sign locally with PRIVATE_KEY, send the raw transaction
- wait for the receipt (bounded by LEDGER_RECEIPT_TIMEOUT_SEC)
- a mined receipt with status=0 is replayed with eth_call to recover the
  revert reason (two workers racing on the same id end up here)

The revert-string -> RejectionReason mapping is kept in this module only.
"""

from __future__ import annotations

from typing import Any

import requests
from eth_account import Account
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from grievance_ledger.common.config import get_settings
from grievance_ledger.common.errors import ErrCode, LedgerTransientError, ValidationError
from grievance_ledger.common.logging import get_ledger_logger
from grievance_ledger.ledger.abi import GRIEVANCE_CONTRACT_ABI
from grievance_ledger.ledger.base import (
    InclusionReceipt,
    LedgerClient,
    LedgerRejectedError,
    RejectionReason,
)

log = get_ledger_logger()

_REVERT_PATTERNS: list[tuple[RejectionReason, tuple[str, ...]]] = [
    (RejectionReason.ALREADY_EXISTS, ("already exists", "already registered", "duplicate")),
    (RejectionReason.NOT_FOUND, ("does not exist", "not found", "not registered")),
    (RejectionReason.UNAUTHORIZED, ("unauthorized", "not authorized", "only owner", "caller is not")),
    (RejectionReason.INVALID_INPUT, ("invalid", "empty", "required", "must be")),
]


def classify_revert(message: str | None) -> RejectionReason:
    text = (message or "").lower()
    for reason, needles in _REVERT_PATTERNS:
        if any(n in text for n in needles):
            return reason
    return RejectionReason.REVERTED


def _revert_message(e: ContractLogicError) -> str:
    return str(getattr(e, "message", None) or e)


class Web3LedgerClient(LedgerClient):
    def __init__(
        self,
        *,
        rpc_url: str | None = None,
        private_key: str | None = None,
        contract_address: str | None = None,
        rpc_timeout_sec: int | None = None,
        receipt_timeout_sec: int | None = None,
        gas_price_wei: int | None = None,
        w3: Any | None = None,
    ) -> None:
        s = get_settings()
        rpc_url = (rpc_url or s.blockchain_rpc_url or "").strip()
        private_key = (private_key or s.private_key or "").strip()
        contract_address = (contract_address or s.contract_address or "").strip()
        if not private_key:
            raise ValidationError("PRIVATE_KEY is not configured", code=ErrCode.CONFIG_ERROR)
        if not contract_address:
            raise ValidationError("CONTRACT_ADDRESS is not configured", code=ErrCode.CONFIG_ERROR)

        self.rpc_timeout_sec = int(
            rpc_timeout_sec if rpc_timeout_sec is not None else s.ledger_rpc_timeout_sec
        )
        self.receipt_timeout_sec = int(
            receipt_timeout_sec if receipt_timeout_sec is not None else s.ledger_receipt_timeout_sec
        )
        self.gas_price_wei = gas_price_wei if gas_price_wei is not None else s.ledger_gas_price_wei

        if w3 is None:
            if not rpc_url:
                raise ValidationError(
                    "BLOCKCHAIN_RPC_URL is not configured", code=ErrCode.CONFIG_ERROR
                )
            w3 = Web3(
                Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": self.rpc_timeout_sec})
            )
        self.w3 = w3
        self.account = Account.from_key(private_key)
        self.contract = w3.eth.contract(
            address=Web3.to_checksum_address(contract_address), abi=GRIEVANCE_CONTRACT_ABI
        )
        self._chain_id: int | None = None

    # ------------------------------------------------------------------
    # write operations
    # ------------------------------------------------------------------
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
    ) -> InclusionReceipt:
        return self._submit(
            "registerUser",
            user_id,
            name,
            role,
            email_hash,
            national_id_hash,
            location_hash,
            pin,
            district,
            city,
            state,
            municipal,
        )

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
    ) -> InclusionReceipt:
        return self._submit(
            "registerComplaint",
            complaint_id,
            user_id,
            category_id,
            sub_category,
            department,
            int(urgency),
            description_hash,
            attachment_hash,
            location_hash,
            bool(is_public),
            pin,
            district,
            city,
            locality,
            state,
        )

    def update_complaint_status(self, *, complaint_id: str, status: int) -> InclusionReceipt:
        return self._submit("updateComplaintStatus", complaint_id, int(status))

    def assign_complaint(self, *, complaint_id: str, department_id: str) -> InclusionReceipt:
        return self._submit("assignComplaint", complaint_id, department_id)

    def resolve_complaint(self, *, complaint_id: str, resolution_date: str) -> InclusionReceipt:
        return self._submit("resolveComplaint", complaint_id, resolution_date)

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    def _tx_params(self) -> dict[str, Any]:
        if self._chain_id is None:
            self._chain_id = int(self.w3.eth.chain_id)
        params: dict[str, Any] = {
            "from": self.account.address,
            "nonce": self.w3.eth.get_transaction_count(self.account.address, "pending"),
            "chainId": self._chain_id,
        }
        if self.gas_price_wei is not None:
            params["gasPrice"] = int(self.gas_price_wei)
        return params

    def _rejected(self, fn_name: str, message: str) -> LedgerRejectedError:
        reason = classify_revert(message)
        log.warning(
            "ledger_write_rejected",
            extra={"payload": {"fn": fn_name, "reason": reason.value, "message": message[:200]}},
        )
        return LedgerRejectedError(reason, message[:500], {"fn": fn_name})

    def _submit(self, fn_name: str, *args: Any) -> InclusionReceipt:
        fn = getattr(self.contract.functions, fn_name)(*args)
        try:
            tx = fn.build_transaction(self._tx_params())
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout_sec
            )
        except ContractLogicError as e:
            raise self._rejected(fn_name, _revert_message(e)) from e
        except TimeExhausted as e:
            raise LedgerTransientError(
                "Timed out waiting for ledger inclusion",
                {"fn": fn_name, "timeout_sec": self.receipt_timeout_sec},
            ) from e
        except (Web3Exception, requests.RequestException, OSError) as e:
            log.error(
                "ledger_rpc_error",
                extra={"payload": {"fn": fn_name, "err": str(e)[:200]}},
            )
            raise LedgerTransientError("Ledger RPC failure", {"fn": fn_name, "err": str(e)[:200]}) from e

        tx_hex = Web3.to_hex(tx_hash)
        if int(receipt.get("status", 1)) == 0:
            raise self._mined_revert(fn_name, fn, receipt, tx_hex)

        block_number = int(receipt["blockNumber"])
        log.info(
            "ledger_write_included",
            extra={"payload": {"fn": fn_name, "tx_hash": tx_hex, "block": block_number}},
        )
        gas_used = receipt.get("gasUsed")
        return InclusionReceipt(
            tx_hash=tx_hex,
            block_number=block_number,
            gas_used=int(gas_used) if gas_used is not None else None,
        )

    def _mined_revert(
        self, fn_name: str, fn: Any, receipt: Any, tx_hex: str
    ) -> LedgerRejectedError | LedgerTransientError:
        try:
            fn.call({"from": self.account.address}, block_identifier=receipt["blockNumber"])
        except ContractLogicError as e:
            return self._rejected(fn_name, _revert_message(e))
        except (Web3Exception, requests.RequestException, OSError) as e:
            return LedgerTransientError(
                "Mined transaction reverted, replay failed",
                {"fn": fn_name, "tx_hash": tx_hex, "err": str(e)[:200]},
            )
        # replay succeeded: nothing deterministic to report, the revert came
        # from conditions at inclusion time (gas, ordering)
        return LedgerTransientError(
            "Mined transaction reverted without a reproducible reason",
            {"fn": fn_name, "tx_hash": tx_hex},
        )
