"""Shared enum values used by the database models and schemas."""

from __future__ import annotations

import enum


class Role(str, enum.Enum):
    admin = "admin"
    organization = "organization"
    operator = "operator"
    owner = "owner"


class TicketStatus(str, enum.Enum):
    new = "new"
    in_progress = "in_progress"
    resolved = "resolved"
    rejected = "rejected"
    irrelevant = "irrelevant"


FINAL_STATUSES = frozenset({TicketStatus.resolved, TicketStatus.rejected, TicketStatus.irrelevant})


def is_final(status: TicketStatus) -> bool:
    return status in FINAL_STATUSES
