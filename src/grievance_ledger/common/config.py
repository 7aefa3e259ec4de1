"""
Centralized project configuration (ENV / .env).

Notes:
- settings are read from .env and environment variables
- typed values via pydantic-settings
- any setting can be loaded from a file through <ENV_NAME>_FILE (docker secrets)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Runtime
    # -------------------------------------------------------------------------
    app_env: str = Field(default="dev", alias="APP_ENV")
    service_name: str = Field(default="worker-ledger", alias="SERVICE_NAME")
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8020, alias="API_PORT")

    # -------------------------------------------------------------------------
    # Auth (status API)
    # -------------------------------------------------------------------------
    auth_mode: str = Field(default="api_key", alias="AUTH_MODE")  # api_key|none
    api_keys: str = Field(default="", alias="API_KEYS")

    # -------------------------------------------------------------------------
    # Queue / worker
    # -------------------------------------------------------------------------
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    worker_poll_interval_ms: int = Field(default=5000, alias="WORKER_POLL_INTERVAL")
    worker_queue_priority: str = Field(
        default="USER_REGISTRATION,COMPLAINT_REGISTRATION,STATUS_UPDATE,ASSIGNMENT,RESOLUTION",
        alias="WORKER_QUEUE_PRIORITY",
    )
    retry_limit: int = Field(default=3, alias="RETRY_LIMIT")
    retry_backoff_ms: int = Field(default=0, alias="RETRY_BACKOFF_MS")

    # -------------------------------------------------------------------------
    # Result store / content-id cache
    # -------------------------------------------------------------------------
    result_ttl_sec: int = Field(default=7 * 24 * 3600, alias="RESULT_TTL_SEC")
    content_cache_ttl_sec: int = Field(default=7 * 24 * 3600, alias="CONTENT_CACHE_TTL_SEC")

    # -------------------------------------------------------------------------
    # Domain defaults
    # -------------------------------------------------------------------------
    default_state_region: str = Field(default="Jharkhand", alias="DEFAULT_STATE_REGION")

    # -------------------------------------------------------------------------
    # Content pinner (IPFS)
    # -------------------------------------------------------------------------
    pinner_provider: str = Field(default="pinata", alias="PINNER_PROVIDER")  # pinata|mock
    pinata_api_base: str = Field(default="https://api.pinata.cloud", alias="PINATA_API_BASE")
    pinata_jwt: str | None = Field(default=None, alias="PINATA_JWT")
    pinata_timeout_sec: int = Field(default=30, alias="PINATA_TIMEOUT_SEC")

    # -------------------------------------------------------------------------
    # Ledger (EVM JSON-RPC)
    # -------------------------------------------------------------------------
    ledger_provider: str = Field(default="web3", alias="LEDGER_PROVIDER")  # web3|mock
    blockchain_rpc_url: str | None = Field(default=None, alias="BLOCKCHAIN_RPC_URL")
    private_key: str | None = Field(default=None, alias="PRIVATE_KEY")
    contract_address: str | None = Field(default=None, alias="CONTRACT_ADDRESS")
    ledger_rpc_timeout_sec: int = Field(default=30, alias="LEDGER_RPC_TIMEOUT_SEC")
    ledger_receipt_timeout_sec: int = Field(default=120, alias="LEDGER_RECEIPT_TIMEOUT_SEC")
    # Private Besu/Quorum networks often run with free gas
    ledger_gas_price_wei: int | None = Field(default=None, alias="LEDGER_GAS_PRICE_WEI")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")  # json|text
    readiness_fail_fast_in_prod: bool = Field(default=True, alias="READINESS_FAIL_FAST_IN_PROD")

    def model_post_init(self, __context) -> None:
        _apply_file_overrides(self)


def _apply_file_overrides(settings: Settings) -> None:
    alias_to_field = {}
    for name, field in Settings.model_fields.items():
        alias = field.alias or name
        alias_to_field[str(alias)] = name
        alias_to_field[str(name)] = name

    for key, path in os.environ.items():
        if not key.endswith("_FILE"):
            continue
        base = key[: -len("_FILE")]
        target = alias_to_field.get(base)
        if not target:
            continue
        file_path = (path or "").strip()
        if not file_path:
            continue
        try:
            raw = Path(file_path).read_text(encoding="utf-8")
        except Exception as e:
            logging.getLogger("grievance-ledger").error(
                "config_file_read_failed",
                extra={"payload": {"env_key": key, "path": file_path, "error": str(e)[:200]}},
            )
            raise RuntimeError(f"Failed to read {key} from {file_path}") from e
        setattr(settings, target, raw.strip())


_SETTINGS = Settings()


def get_settings() -> Settings:
    return _SETTINGS
