from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from lockerlink.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    order_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_number: Mapped[str] = mapped_column(String, nullable=False, default="")
    billing_email: Mapped[str] = mapped_column(String, nullable=False, default="")

    shipping_lines = relationship("OrderShippingLineModel", back_populates="order", cascade="all, delete-orphan")
    meta = relationship("OrderMetaModel", back_populates="order", cascade="all, delete-orphan")
    notes = relationship(
        "OrderNoteModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderNoteModel.note_id",
    )


class OrderShippingLineModel(Base):
    __tablename__ = "order_shipping_lines"

    line_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.order_id"), nullable=False, index=True)
    method_id: Mapped[str] = mapped_column(String, nullable=False)

    order = relationship("OrderModel", back_populates="shipping_lines")


class OrderMetaModel(Base):
    __tablename__ = "order_meta"
    __table_args__ = (UniqueConstraint("order_id", "meta_key"),)

    meta_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.order_id"), nullable=False, index=True)
    meta_key: Mapped[str] = mapped_column(String, nullable=False)
    meta_value: Mapped[str] = mapped_column(Text, nullable=False, default="")

    order = relationship("OrderModel", back_populates="meta")


class OrderNoteModel(Base):
    __tablename__ = "order_notes"

    note_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.order_id"), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    customer_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    order = relationship("OrderModel", back_populates="notes")


class WebhookModel(Base):
    __tablename__ = "webhooks"
    # Ids are recorded in options; never hand a deleted id to a new webhook
    __table_args__ = {"sqlite_autoincrement": True}

    webhook_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    topic: Mapped[str] = mapped_column(String, nullable=False)
    delivery_url: Mapped[str] = mapped_column(String, nullable=False)
    secret: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")


class OptionModel(Base):
    __tablename__ = "options"

    option_key: Mapped[str] = mapped_column(String, primary_key=True)
    option_value: Mapped[Any] = mapped_column(JSON, nullable=True)
