from __future__ import annotations

import base64
import hashlib

from grievance_ledger.pinning.base import ContentPinner, PinResult


def fake_cid(data: bytes) -> str:
    """CIDv1-looking identifier (base32, "b" prefix) derived from sha256."""
    digest = hashlib.sha256(data).digest()
    return "bafk" + base64.b32encode(digest).decode("ascii").lower().rstrip("=")


class MockContentPinner(ContentPinner):
    """Pinner stub: deterministic content id, keeps uploads in memory for local runs."""

    def __init__(self) -> None:
        self.pinned: dict[str, bytes] = {}
        self.calls = 0

    def pin(self, data: bytes, filename: str) -> PinResult:
        self.calls += 1
        cid = fake_cid(data)
        self.pinned[cid] = data
        return PinResult(content_id=cid, size=len(data))
