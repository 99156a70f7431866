from __future__ import annotations

from sqlalchemy.orm import Session

from lockerlink.core.entities.order import Order
from lockerlink.core.repositories.order_repository import OrderRepository
from lockerlink.infrastructure.models.models import (
    OrderMetaModel,
    OrderModel,
    OrderNoteModel,
    OrderShippingLineModel,
)


# Order ids are stored in a signed 64-bit integer column
_MIN_ORDER_ID = -(2**63)
_MAX_ORDER_ID = 2**63 - 1


class OrderRepositoryImpl(OrderRepository):
    """
    SQLAlchemy implementation over the store's order tables.

    Orders are owned by the store; save() only creates a row (with its shipping
    lines) when none exists yet, otherwise it touches lockerlink_* meta and notes.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get(self, order_id: int) -> Order | None:
        if not _MIN_ORDER_ID <= order_id <= _MAX_ORDER_ID:
            return None

        row = self._db.get(OrderModel, order_id)
        if row is None:
            return None

        return Order(
            order_id=row.order_id,
            order_number=row.order_number or str(row.order_id),
            billing_email=row.billing_email,
            shipping_method_ids=[line.method_id for line in row.shipping_lines],
            fields={meta.meta_key: meta.meta_value for meta in row.meta},
        )

    def save(self, order: Order) -> None:
        row = self._db.get(OrderModel, order.order_id)
        if row is None:
            row = OrderModel(
                order_id=order.order_id,
                order_number=order.order_number or str(order.order_id),
                billing_email=order.billing_email,
            )
            row.shipping_lines = [OrderShippingLineModel(method_id=m) for m in order.shipping_method_ids]

        existing = {meta.meta_key: meta for meta in row.meta}
        for key, value in order.fields.items():
            meta = existing.get(key)
            if meta is None:
                row.meta.append(OrderMetaModel(meta_key=key, meta_value=value))
            else:
                meta.meta_value = value

        for note in order.new_notes:
            row.notes.append(OrderNoteModel(content=note.text, customer_visible=note.customer_visible))

        self._db.add(row)
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

        order.new_notes.clear()

    def list_notes(self, order_id: int) -> list[OrderNoteModel]:
        row = self._db.get(OrderModel, order_id)
        if row is None:
            return []
        return list(row.notes)
