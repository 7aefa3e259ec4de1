"""
Content pinner contract.

- pin(bytes, filename) -> content identifier (IPFS CID)
- failures raise PinningError, which the worker retries
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass
class PinResult:
    content_id: str
    size: int | None = None


class ContentPinner(Protocol):
    def pin(self, data: bytes, filename: str) -> PinResult: ...
