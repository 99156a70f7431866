from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PickupReadyNotification:
    """
    Everything the pickup-ready email needs, taken from the order as it was saved.
    """
    order_id: int
    order_number: str = ""
    billing_email: str = ""
    locker_name: str = ""
    compartment_label: str = ""
    pickup_url: str = ""
