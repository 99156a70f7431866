from __future__ import annotations

from dataclasses import dataclass, field

LOCKER_PICKUP_METHOD_ID = "lockerlink"

STATUS_FIELD = "lockerlink_status"
LOCKER_FIELD = "lockerlink_locker"
COMPARTMENT_FIELD = "lockerlink_compartment"
PICKUP_URL_FIELD = "lockerlink_pickup_url"
UNLOCK_TOKEN_FIELD = "lockerlink_unlock_token"


@dataclass(frozen=True, slots=True)
class OrderNote:
    text: str
    customer_visible: bool = False


@dataclass(slots=True)
class Order:
    """
    The slice of a store order this integration reads and writes.

    `fields` holds the persisted lockerlink_* values; `new_notes` collects notes
    added since load, written by the repository on save.
    """
    order_id: int
    order_number: str = ""
    billing_email: str = ""
    shipping_method_ids: list[str] = field(default_factory=list)
    fields: dict[str, str] = field(default_factory=dict)
    new_notes: list[OrderNote] = field(default_factory=list)

    def get_field(self, key: str) -> str:
        return self.fields.get(key, "")

    def set_field(self, key: str, value: str) -> None:
        self.fields[key] = value

    def add_note(self, text: str, *, customer_visible: bool = False) -> None:
        self.new_notes.append(OrderNote(text=text, customer_visible=customer_visible))

    def uses_locker_pickup(self) -> bool:
        return LOCKER_PICKUP_METHOD_ID in self.shipping_method_ids
