"""
Identifier generation.

- task_id for queued work
- complaint_id when the producer did not assign one
"""

from __future__ import annotations

import secrets
import uuid
from datetime import UTC, datetime


def new_task_id(prefix: str = "task") -> str:
    """
    Task identifier.
    Format: <prefix>_<UTCYYYYMMDDHHMMSS>_<rand>
    """
    ts = datetime.now(UTC).strftime("%Y%m%d%H%M%S")
    rnd = secrets.token_hex(6)
    return f"{prefix}_{ts}_{rnd}"


def new_complaint_id(prefix: str = "COMP") -> str:
    """
    Complaint identifier: random, never derived from the complaint content.
    """
    return f"{prefix}-{uuid.uuid4()}"
