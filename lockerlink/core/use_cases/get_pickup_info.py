from __future__ import annotations

from dataclasses import dataclass

from lockerlink.core.entities.order import (
    COMPARTMENT_FIELD,
    LOCKER_FIELD,
    PICKUP_URL_FIELD,
    STATUS_FIELD,
)
from lockerlink.core.entities.status import LockerStatus
from lockerlink.core.repositories.order_repository import OrderRepository

AWAITING_ASSIGNMENT = "awaiting_assignment"

_STATUS_LABELS = {
    AWAITING_ASSIGNMENT: "Awaiting Assignment",
    LockerStatus.ASSIGNED.value: "Assigned",
    LockerStatus.LOADED.value: "Loaded",
    LockerStatus.NOTIFIED.value: "Notified",
    "unlocked": "Unlocked",
    LockerStatus.PICKED_UP.value: "Picked Up",
    LockerStatus.CANCELLED.value: "Cancelled",
}

# Statuses for which the customer sees locker, compartment and unlock link
_CUSTOMER_VISIBLE = {LockerStatus.ASSIGNED.value, LockerStatus.LOADED.value, LockerStatus.NOTIFIED.value}


class NotFoundError(Exception):
    """Raise to map to HTTP 404."""


def status_label(status: str) -> str:
    if status in _STATUS_LABELS:
        return _STATUS_LABELS[status]
    label = status.replace("_", " ")
    return label[:1].upper() + label[1:]


@dataclass(frozen=True, slots=True)
class PickupInfoDTO:
    """
    Use-case return type for GET /orders/{order_id}/pickup
    """
    order_id: int
    status: str
    status_label: str
    locker_name: str
    compartment_label: str
    pickup_url: str
    is_locker_order: bool
    awaiting_assignment: bool
    show_customer_details: bool


class GetPickupInfoUseCase:
    def __init__(self, *, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def execute(self, *, order_id: int) -> PickupInfoDTO:
        order = self._order_repo.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        status = order.get_field(STATUS_FIELD)
        is_locker_order = order.uses_locker_pickup()
        awaiting = not status and is_locker_order
        if awaiting:
            status = AWAITING_ASSIGNMENT

        return PickupInfoDTO(
            order_id=order.order_id,
            status=status,
            status_label=status_label(status) if status else "",
            locker_name=order.get_field(LOCKER_FIELD),
            compartment_label=order.get_field(COMPARTMENT_FIELD),
            pickup_url=order.get_field(PICKUP_URL_FIELD),
            is_locker_order=is_locker_order,
            awaiting_assignment=awaiting,
            show_customer_details=status in _CUSTOMER_VISIBLE,
        )
