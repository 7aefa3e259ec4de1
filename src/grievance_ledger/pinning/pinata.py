"""
Pinata adapter (IPFS pinning over HTTP).

- POST /pinning/pinFileToIPFS, multipart upload, Bearer JWT
- response {"IpfsHash": ..., "PinSize": ...}
"""

from __future__ import annotations

import json

import requests

from grievance_ledger.common.config import get_settings
from grievance_ledger.common.errors import PinningError
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.pinning.base import ContentPinner, PinResult

log = get_project_logger()


class PinataPinner(ContentPinner):
    def __init__(
        self,
        *,
        api_base: str | None = None,
        jwt: str | None = None,
        timeout_sec: int | None = None,
    ) -> None:
        s = get_settings()
        self.api_base = (api_base or s.pinata_api_base or "").rstrip("/")
        self.jwt = (jwt or s.pinata_jwt or "").strip()
        self.timeout_sec = int(timeout_sec if timeout_sec is not None else s.pinata_timeout_sec)

    def pin(self, data: bytes, filename: str) -> PinResult:
        if not self.jwt:
            raise PinningError("PINATA_JWT is not configured")

        url = f"{self.api_base}/pinning/pinFileToIPFS"
        files = {"file": (filename, data, "application/json")}
        form = {"pinataMetadata": json.dumps({"name": filename})}
        headers = {"Authorization": f"Bearer {self.jwt}"}

        try:
            resp = requests.post(
                url, files=files, data=form, headers=headers, timeout=self.timeout_sec
            )
        except requests.RequestException as e:
            log.error(
                "pinata_http_error",
                extra={"payload": {"filename": filename, "err": str(e)[:200]}},
            )
            raise PinningError("HTTP error while pinning to Pinata", {"err": str(e)}) from e

        if resp.status_code >= 400:
            raise PinningError(
                "Pinata returned an error",
                {"status": resp.status_code, "text_head": resp.text[:500]},
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise PinningError(
                "Pinata returned invalid JSON", {"text_head": resp.text[:500]}
            ) from e

        cid = str((body or {}).get("IpfsHash") or "").strip() if isinstance(body, dict) else ""
        if not cid:
            raise PinningError("Pinata response has no IpfsHash", {"body_head": str(body)[:500]})

        size = body.get("PinSize")
        log.info(
            "pinata_pin_ok",
            extra={"payload": {"filename": filename, "cid": cid, "size": size}},
        )
        return PinResult(content_id=cid, size=int(size) if isinstance(size, int) else None)
