from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LockerStatus(str, Enum):
    ASSIGNED = "assigned"
    LOADED = "loaded"
    NOTIFIED = "notified"
    PICKED_UP = "picked_up"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class OtherStatus:
    """
    Any status string the locker service sends that is not one of LockerStatus.
    Stored verbatim and reported generically.
    """
    value: str


Status = LockerStatus | OtherStatus


def parse_status(raw: str) -> Status:
    try:
        return LockerStatus(raw)
    except ValueError:
        return OtherStatus(raw)
