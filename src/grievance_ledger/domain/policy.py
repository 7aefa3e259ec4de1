"""
Defaulting policy for incoming records.

All implicit defaults live here so they are applied in one place (the
validation boundary in domain.records) and can be targeted by tests.
"""

from __future__ import annotations

from .enums import ComplaintStatus, Urgency

# Role tag written to the pinned user document and to the ledger
USER_ROLE = "CITIZEN"

# Hashed in place of a missing national id
NATIONAL_ID_SENTINEL = "NOT_PROVIDED"

# Unknown or absent urgency is downgraded to this level
DEFAULT_URGENCY = Urgency.MEDIUM

# Absent complaint state falls back to the deployment region (DEFAULT_STATE_REGION)
DEFAULT_STATE_REGION = "Jharkhand"

DEFAULT_IS_PUBLIC = False


def resolve_urgency(raw: object) -> Urgency:
    """
    "low"/"LOW"/1 -> Urgency.LOW; absent or unrecognized -> DEFAULT_URGENCY.
    """
    if isinstance(raw, bool) or raw is None:
        return DEFAULT_URGENCY
    if isinstance(raw, int):
        try:
            return Urgency(raw)
        except ValueError:
            return DEFAULT_URGENCY
    name = str(raw).strip().upper()
    try:
        return Urgency[name]
    except KeyError:
        return DEFAULT_URGENCY


def resolve_state(raw: object, default_region: str | None = None) -> str:
    value = str(raw).strip() if raw is not None else ""
    if value:
        return value
    return (default_region or "").strip() or DEFAULT_STATE_REGION


def parse_complaint_status(raw: object) -> ComplaintStatus | None:
    """
    Status by name or ordinal; None when unrecognized (no silent default here).
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        try:
            return ComplaintStatus(raw)
        except ValueError:
            return None
    text = str(raw).strip()
    if text.isdigit():
        return parse_complaint_status(int(text))
    try:
        return ComplaintStatus[text.upper()]
    except KeyError:
        return None
