from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from lockerlink.core.entities.notification import PickupReadyNotification
from lockerlink.core.entities.order import (
    COMPARTMENT_FIELD,
    LOCKER_FIELD,
    PICKUP_URL_FIELD,
    STATUS_FIELD,
    UNLOCK_TOKEN_FIELD,
    Order,
)
from lockerlink.core.entities.status import LockerStatus, OtherStatus, Status, parse_status
from lockerlink.core.repositories.notification_sink import NotificationSink
from lockerlink.core.repositories.order_repository import OrderRepository
from lockerlink.core.sanitize import sanitize_text, sanitize_url

logger = logging.getLogger(__name__)


class MissingFieldsError(Exception):
    """Raise to map to HTTP 400."""
    code = "missing_fields"


class OrderNotFoundError(Exception):
    """Raise to map to HTTP 404."""
    code = "order_not_found"


# (note text, append locker/compartment detail)
_STATUS_NOTES: dict[LockerStatus, tuple[str, bool]] = {
    LockerStatus.ASSIGNED: ("Order assigned.", True),
    LockerStatus.LOADED: ("Order loaded into locker.", True),
    LockerStatus.NOTIFIED: ("Pickup email sent to customer.", True),
    LockerStatus.PICKED_UP: ("Order picked up from locker.", False),
    LockerStatus.CANCELLED: ("Locker assignment cancelled.", False),
}


def detail_suffix(locker_name: str, compartment_label: str) -> str:
    if locker_name and compartment_label:
        return f" Locker: {locker_name}, Compartment: {compartment_label}."
    if locker_name:
        return f" Locker: {locker_name}."
    if compartment_label:
        return f" Compartment: {compartment_label}."
    return ""


def build_status_note(status: Status, *, locker_name: str = "", compartment_label: str = "") -> str:
    if isinstance(status, OtherStatus):
        return f"LockerLink status updated: {status.value}"

    text, with_detail = _STATUS_NOTES[status]
    if with_detail:
        text += detail_suffix(locker_name, compartment_label)
    return text


@dataclass(frozen=True, slots=True)
class AssignmentUpdate:
    """A sanitized callback body."""
    order_id: int
    status: str
    compartment_label: str = ""
    locker_name: str = ""
    pickup_url: str = ""
    unlock_token: str = ""


@dataclass(frozen=True, slots=True)
class AssignmentUpdateResult:
    order_id: int
    status: str
    note: str
    notified: bool


class ApplyAssignmentUpdateUseCase:
    """
    Applies a status push from the locker service to an order.

    Everything is validated before the order is touched; the field changes and
    the audit note are written with a single save. A `notified` status hands a
    pickup-ready notification to the sink on every call, repeats included.
    """

    def __init__(self, *, order_repo: OrderRepository, notification_sink: NotificationSink) -> None:
        self._order_repo = order_repo
        self._notification_sink = notification_sink

    def execute(self, payload: Any) -> AssignmentUpdateResult:
        update = self.parse(payload)

        order = self._order_repo.get(update.order_id)
        if order is None:
            raise OrderNotFoundError("Order not found.")

        self._apply_fields(order, update)

        status = parse_status(update.status)
        note = build_status_note(
            status,
            locker_name=update.locker_name,
            compartment_label=update.compartment_label,
        )
        order.add_note(note, customer_visible=False)
        self._order_repo.save(order)

        notified = status is LockerStatus.NOTIFIED
        if notified:
            self._notification_sink.pickup_ready(
                PickupReadyNotification(
                    order_id=order.order_id,
                    order_number=order.order_number,
                    billing_email=order.billing_email,
                    locker_name=order.get_field(LOCKER_FIELD),
                    compartment_label=order.get_field(COMPARTMENT_FIELD),
                    pickup_url=order.get_field(PICKUP_URL_FIELD),
                )
            )

        logger.info("Order %s lockerlink status -> %s", order.order_id, update.status)
        return AssignmentUpdateResult(order_id=order.order_id, status=update.status, note=note, notified=notified)

    @staticmethod
    def parse(payload: Any) -> AssignmentUpdate:
        """Raises MissingFieldsError unless orderId is a positive integer and status is non-empty."""
        if not isinstance(payload, dict):
            payload = {}

        order_id = ApplyAssignmentUpdateUseCase._positive_int(payload.get("orderId"))
        status = sanitize_text(payload.get("status"))
        if order_id is None or not status:
            raise MissingFieldsError("orderId and status are required.")

        return AssignmentUpdate(
            order_id=order_id,
            status=status,
            compartment_label=sanitize_text(payload.get("compartmentLabel")),
            locker_name=sanitize_text(payload.get("lockerName")),
            pickup_url=sanitize_url(payload.get("pickupUrl")),
            unlock_token=sanitize_text(payload.get("unlockToken")),
        )

    @staticmethod
    def _positive_int(value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not isinstance(value, int) or value <= 0:
            return None
        return value

    @staticmethod
    def _apply_fields(order: Order, update: AssignmentUpdate) -> None:
        order.set_field(STATUS_FIELD, update.status)

        # Omitted optional fields keep whatever was stored before
        optional = {
            COMPARTMENT_FIELD: update.compartment_label,
            LOCKER_FIELD: update.locker_name,
            PICKUP_URL_FIELD: update.pickup_url,
            UNLOCK_TOKEN_FIELD: update.unlock_token,
        }
        for key, value in optional.items():
            if value:
                order.set_field(key, value)
