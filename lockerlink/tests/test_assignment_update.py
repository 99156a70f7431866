from __future__ import annotations

import copy
from typing import Any

import pytest

from lockerlink.core.entities.notification import PickupReadyNotification
from lockerlink.core.entities.order import (
    COMPARTMENT_FIELD,
    LOCKER_FIELD,
    PICKUP_URL_FIELD,
    STATUS_FIELD,
    UNLOCK_TOKEN_FIELD,
    Order,
)
from lockerlink.core.entities.status import LockerStatus, OtherStatus, parse_status
from lockerlink.core.repositories.notification_sink import NotificationSink
from lockerlink.core.repositories.order_repository import OrderRepository
from lockerlink.core.use_cases.apply_assignment_update import (
    ApplyAssignmentUpdateUseCase,
    MissingFieldsError,
    OrderNotFoundError,
    build_status_note,
)


class _InMemoryOrderRepository(OrderRepository):
    """Stores copies so unsaved changes on a loaded Order never leak into the store."""

    def __init__(self, *orders: Order) -> None:
        self.orders = {o.order_id: copy.deepcopy(o) for o in orders}
        self.notes: dict[int, list[str]] = {o.order_id: [] for o in orders}
        self.saves = 0

    def get(self, order_id: int) -> Order | None:
        order = self.orders.get(order_id)
        return copy.deepcopy(order) if order is not None else None

    def save(self, order: Order) -> None:
        self.saves += 1
        self.notes.setdefault(order.order_id, []).extend(n.text for n in order.new_notes)
        order.new_notes.clear()
        self.orders[order.order_id] = copy.deepcopy(order)


class _FailingOrderRepository(_InMemoryOrderRepository):
    def save(self, order: Order) -> None:
        raise RuntimeError("database is gone")


class _RecordingSink(NotificationSink):
    def __init__(self) -> None:
        self.sent: list[PickupReadyNotification] = []

    def pickup_ready(self, notification: PickupReadyNotification) -> None:
        self.sent.append(notification)


def _make(*orders: Order) -> tuple[ApplyAssignmentUpdateUseCase, _InMemoryOrderRepository, _RecordingSink]:
    repo = _InMemoryOrderRepository(*orders)
    sink = _RecordingSink()
    return ApplyAssignmentUpdateUseCase(order_repo=repo, notification_sink=sink), repo, sink


def _order(order_id: int = 42) -> Order:
    return Order(order_id=order_id, order_number=str(order_id), shipping_method_ids=["lockerlink"])


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "assigned"},
        {"orderId": 42},
        {"orderId": 42, "status": ""},
        {"orderId": 42, "status": "   "},
        {"orderId": 42, "status": "<b></b>"},
        {"orderId": 0, "status": "assigned"},
        {"orderId": -3, "status": "assigned"},
        {"orderId": True, "status": "assigned"},
        {"orderId": "abc", "status": "assigned"},
        {"orderId": 4.5, "status": "assigned"},
        {"orderId": 42, "status": ["assigned"]},
        [],
        "not an object",
        None,
    ],
)
def test_missing_or_invalid_required_fields_raise_without_mutation(payload: Any) -> None:
    use_case, repo, sink = _make(_order())

    with pytest.raises(MissingFieldsError) as exc:
        use_case.execute(payload)

    assert exc.value.code == "missing_fields"
    assert repo.saves == 0
    assert repo.orders[42].fields == {}
    assert sink.sent == []


def test_unknown_order_raises_not_found_without_mutation() -> None:
    use_case, repo, sink = _make(_order())

    with pytest.raises(OrderNotFoundError) as exc:
        use_case.execute({"orderId": 999, "status": "assigned"})

    assert exc.value.code == "order_not_found"
    assert repo.saves == 0
    assert sink.sent == []


def test_notified_stores_fields_notes_and_emits_one_notification() -> None:
    use_case, repo, sink = _make(_order())

    result = use_case.execute(
        {
            "orderId": 42,
            "status": "notified",
            "lockerName": "A12",
            "compartmentLabel": "3",
            "pickupUrl": "https://pickup.lockerlink.example/p/abc",
            "unlockToken": "tok-1",
        }
    )

    stored = repo.orders[42]
    assert stored.fields == {
        STATUS_FIELD: "notified",
        LOCKER_FIELD: "A12",
        COMPARTMENT_FIELD: "3",
        PICKUP_URL_FIELD: "https://pickup.lockerlink.example/p/abc",
        UNLOCK_TOKEN_FIELD: "tok-1",
    }
    assert repo.notes[42] == ["Pickup email sent to customer. Locker: A12, Compartment: 3."]
    assert repo.saves == 1
    assert result.notified is True
    assert sink.sent == [
        PickupReadyNotification(
            order_id=42,
            order_number="42",
            locker_name="A12",
            compartment_label="3",
            pickup_url="https://pickup.lockerlink.example/p/abc",
        )
    ]


def test_omitted_optional_fields_keep_previous_values() -> None:
    use_case, repo, _ = _make(_order())

    use_case.execute(
        {
            "orderId": 42,
            "status": "assigned",
            "lockerName": "A12",
            "compartmentLabel": "3",
            "pickupUrl": "https://pickup.lockerlink.example/p/abc",
            "unlockToken": "tok-1",
        }
    )
    use_case.execute({"orderId": 42, "status": "loaded", "lockerName": "", "compartmentLabel": None})

    stored = repo.orders[42]
    assert stored.get_field(STATUS_FIELD) == "loaded"
    assert stored.get_field(LOCKER_FIELD) == "A12"
    assert stored.get_field(COMPARTMENT_FIELD) == "3"
    assert stored.get_field(PICKUP_URL_FIELD) == "https://pickup.lockerlink.example/p/abc"
    assert stored.get_field(UNLOCK_TOKEN_FIELD) == "tok-1"
    assert repo.notes[42] == [
        "Order assigned. Locker: A12, Compartment: 3.",
        "Order loaded into locker.",
    ]


def test_notified_without_details_uses_previously_stored_values_in_notification() -> None:
    use_case, _, sink = _make(_order())

    use_case.execute({"orderId": 42, "status": "loaded", "lockerName": "A12", "compartmentLabel": "3"})
    use_case.execute({"orderId": 42, "status": "notified"})

    assert sink.sent == [PickupReadyNotification(order_id=42, order_number="42", locker_name="A12", compartment_label="3")]


def test_repeated_notified_callbacks_each_emit_a_notification() -> None:
    use_case, repo, sink = _make(_order())

    for _ in range(3):
        use_case.execute({"orderId": 42, "status": "notified", "lockerName": "A12"})

    assert len(sink.sent) == 3
    assert repo.notes[42] == ["Pickup email sent to customer. Locker: A12."] * 3


@pytest.mark.parametrize("status", ["assigned", "loaded", "picked_up", "cancelled", "unlocked", "expired"])
def test_statuses_other_than_notified_do_not_emit(status: str) -> None:
    use_case, repo, sink = _make(_order())

    use_case.execute({"orderId": 42, "status": status, "lockerName": "A12"})

    assert sink.sent == []
    assert repo.orders[42].get_field(STATUS_FIELD) == status


def test_unknown_status_is_stored_verbatim_with_generic_note() -> None:
    use_case, repo, _ = _make(_order())

    use_case.execute({"orderId": 42, "status": "door_jammed", "lockerName": "A12"})

    assert repo.orders[42].get_field(STATUS_FIELD) == "door_jammed"
    assert repo.notes[42] == ["LockerLink status updated: door_jammed"]


def test_malformed_pickup_url_is_dropped_silently() -> None:
    use_case, repo, _ = _make(_order())

    use_case.execute({"orderId": 42, "status": "loaded", "pickupUrl": "javascript:alert(1)"})
    use_case.execute({"orderId": 42, "status": "loaded", "pickupUrl": "not a url"})

    assert PICKUP_URL_FIELD not in repo.orders[42].fields
    assert repo.orders[42].get_field(STATUS_FIELD) == "loaded"


def test_string_inputs_are_sanitized() -> None:
    use_case, repo, _ = _make(_order())

    use_case.execute(
        {
            "orderId": "42",
            "status": " assigned\n",
            "lockerName": "<b>Main\tStreet</b>",
            "compartmentLabel": 7,
        }
    )

    stored = repo.orders[42]
    assert stored.get_field(STATUS_FIELD) == "assigned"
    assert stored.get_field(LOCKER_FIELD) == "Main Street"
    assert stored.get_field(COMPARTMENT_FIELD) == "7"


def test_storage_failure_propagates_and_skips_notification() -> None:
    repo = _FailingOrderRepository(_order())
    sink = _RecordingSink()
    use_case = ApplyAssignmentUpdateUseCase(order_repo=repo, notification_sink=sink)

    with pytest.raises(RuntimeError):
        use_case.execute({"orderId": 42, "status": "notified"})

    assert sink.sent == []
    assert repo.orders[42].fields == {}


@pytest.mark.parametrize(
    "status, locker, compartment, expected",
    [
        ("assigned", "A12", "3", "Order assigned. Locker: A12, Compartment: 3."),
        ("assigned", "A12", "", "Order assigned. Locker: A12."),
        ("loaded", "", "3", "Order loaded into locker. Compartment: 3."),
        ("loaded", "", "", "Order loaded into locker."),
        ("notified", "A12", "3", "Pickup email sent to customer. Locker: A12, Compartment: 3."),
        ("picked_up", "A12", "3", "Order picked up from locker."),
        ("cancelled", "A12", "3", "Locker assignment cancelled."),
        ("unlocked", "A12", "3", "LockerLink status updated: unlocked"),
    ],
)
def test_status_note_text(status: str, locker: str, compartment: str, expected: str) -> None:
    note = build_status_note(parse_status(status), locker_name=locker, compartment_label=compartment)
    assert note == expected


def test_parse_status_separates_known_and_other_values() -> None:
    assert parse_status("picked_up") is LockerStatus.PICKED_UP
    assert parse_status("PICKED_UP") == OtherStatus("PICKED_UP")
