"""
Domain enums.

Used across the system:
- task categories (one queue per category)
- terminal task statuses in the result store
- urgency and complaint status ordinals as the ledger contract stores them
"""

from __future__ import annotations

import enum


class TaskCategory(str, enum.Enum):
    """
    Kind of queued work. Closed set: anything else is a malformed task.
    """

    USER_REGISTRATION = "USER_REGISTRATION"
    COMPLAINT_REGISTRATION = "COMPLAINT_REGISTRATION"
    STATUS_UPDATE = "STATUS_UPDATE"
    ASSIGNMENT = "ASSIGNMENT"
    RESOLUTION = "RESOLUTION"


class TaskStatus(str, enum.Enum):
    """
    Terminal task outcome.
    """

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class Urgency(enum.IntEnum):
    """
    Complaint urgency, ordered. Values are the ledger ordinals.
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class ComplaintStatus(enum.IntEnum):
    """
    Complaint lifecycle status. Values are the ledger ordinals.
    """

    REGISTERED = 1
    UNDER_PROCESSING = 2
    FORWARDED = 3
    ON_HOLD = 4
    COMPLETED = 5
    REJECTED = 6
    ESCALATED_TO_MUNICIPAL_LEVEL = 7
    ESCALATED_TO_STATE_LEVEL = 8
    DELETED = 9
