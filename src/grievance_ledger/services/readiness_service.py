"""
Runtime readiness checks for production rollout.
"""

from __future__ import annotations

from dataclasses import dataclass

from grievance_ledger.common.config import get_settings
from grievance_ledger.common.errors import AppError
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.queue.dispatcher import parse_queue_priority

log = get_project_logger()


@dataclass
class ReadinessIssue:
    severity: str  # error|warning
    code: str
    message: str


@dataclass
class ReadinessState:
    ready: bool
    issues: list[ReadinessIssue]


def _is_prod_env(app_env: str | None) -> bool:
    env = (app_env or "").strip().lower()
    return env in {"prod", "production"}


def evaluate_readiness() -> ReadinessState:
    s = get_settings()
    issues: list[ReadinessIssue] = []
    is_prod = _is_prod_env(s.app_env)

    auth_mode = (s.auth_mode or "").strip().lower()
    if auth_mode == "api_key" and not (s.api_keys or "").strip():
        issues.append(
            ReadinessIssue(
                severity="error",
                code="auth_api_keys_empty",
                message="AUTH_MODE=api_key requires a non-empty API_KEYS",
            )
        )
    if auth_mode not in {"api_key", "none"}:
        issues.append(
            ReadinessIssue(
                severity="error",
                code="auth_mode_unknown",
                message=f"Unknown AUTH_MODE={auth_mode}",
            )
        )

    try:
        parse_queue_priority(s.worker_queue_priority)
    except AppError as e:
        issues.append(
            ReadinessIssue(severity="error", code="queue_priority_invalid", message=e.message)
        )

    if int(s.retry_limit) < 0:
        issues.append(
            ReadinessIssue(
                severity="error",
                code="retry_limit_negative",
                message="RETRY_LIMIT must be >= 0",
            )
        )

    pinner = (s.pinner_provider or "").strip().lower()
    if pinner == "pinata" and not (s.pinata_jwt or "").strip():
        issues.append(
            ReadinessIssue(
                severity="error" if is_prod else "warning",
                code="pinata_jwt_empty",
                message="PINNER_PROVIDER=pinata requires PINATA_JWT",
            )
        )
    elif pinner not in {"pinata", "mock"}:
        issues.append(
            ReadinessIssue(
                severity="error",
                code="pinner_provider_unknown",
                message=f"Unknown PINNER_PROVIDER={pinner}",
            )
        )

    ledger = (s.ledger_provider or "").strip().lower()
    if ledger == "web3":
        for code, env_name, value in (
            ("ledger_rpc_url_empty", "BLOCKCHAIN_RPC_URL", s.blockchain_rpc_url),
            ("ledger_private_key_empty", "PRIVATE_KEY", s.private_key),
            ("ledger_contract_address_empty", "CONTRACT_ADDRESS", s.contract_address),
        ):
            if not (value or "").strip():
                issues.append(
                    ReadinessIssue(
                        severity="error" if is_prod else "warning",
                        code=code,
                        message=f"LEDGER_PROVIDER=web3 requires {env_name}",
                    )
                )
    elif ledger not in {"web3", "mock"}:
        issues.append(
            ReadinessIssue(
                severity="error",
                code="ledger_provider_unknown",
                message=f"Unknown LEDGER_PROVIDER={ledger}",
            )
        )

    if is_prod:
        if auth_mode == "none":
            issues.append(
                ReadinessIssue(
                    severity="error",
                    code="auth_none_in_prod",
                    message="AUTH_MODE=none is not allowed in prod",
                )
            )
        if pinner == "mock":
            issues.append(
                ReadinessIssue(
                    severity="error",
                    code="mock_pinner_in_prod",
                    message="PINNER_PROVIDER=mock is not allowed in prod",
                )
            )
        if ledger == "mock":
            issues.append(
                ReadinessIssue(
                    severity="error",
                    code="mock_ledger_in_prod",
                    message="LEDGER_PROVIDER=mock is not allowed in prod",
                )
            )
        if (s.pinata_api_base or "").strip().lower().startswith("http://"):
            issues.append(
                ReadinessIssue(
                    severity="warning",
                    code="pinata_api_base_not_https",
                    message="PINATA_API_BASE should use https:// in prod",
                )
            )

    ready = all(i.severity != "error" for i in issues)
    return ReadinessState(ready=ready, issues=issues)


def enforce_startup_readiness(*, service_name: str) -> ReadinessState:
    s = get_settings()
    state = evaluate_readiness()
    errors = [i for i in state.issues if i.severity == "error"]

    if errors:
        log.error(
            "startup_readiness_failed",
            extra={
                "payload": {
                    "service": service_name,
                    "app_env": s.app_env,
                    "error_codes": [e.code for e in errors],
                }
            },
        )
    else:
        log.info(
            "startup_readiness_ok",
            extra={
                "payload": {
                    "service": service_name,
                    "app_env": s.app_env,
                    "warnings": [i.code for i in state.issues],
                }
            },
        )

    should_fail_fast = _is_prod_env(s.app_env) and bool(s.readiness_fail_fast_in_prod)
    if should_fail_fast and errors:
        msg = ", ".join(e.code for e in errors)
        raise RuntimeError(f"startup readiness failed for {service_name}: {msg}")
    return state
