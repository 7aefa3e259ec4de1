"""
Time helpers (ISO UTC everywhere).
"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def utc_today_iso() -> str:
    """
    Current UTC date, YYYY-MM-DD.
    """
    return utc_now().date().isoformat()
