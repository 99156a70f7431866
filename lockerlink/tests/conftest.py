from __future__ import annotations

from typing import Callable, Iterator

import pytest
from sqlalchemy.orm import Session

import lockerlink.main  # noqa: F401  registers every model on Base.metadata
from lockerlink.core.entities.credentials import API_KEY_OPTION, WEBHOOK_URL_OPTION
from lockerlink.core.entities.order import Order
from lockerlink.infrastructure.database import Base, SessionLocal, engine
from lockerlink.infrastructure.repositories.option_repository_impl import OptionRepositoryImpl
from lockerlink.infrastructure.repositories.order_repository_impl import OrderRepositoryImpl

API_KEY = "ll_sk_test_secret"
WEBHOOK_URL = "https://lockerlink.example/api/webhooks/woocommerce/ll_id_123"


@pytest.fixture(autouse=True)
def _reset_database_before_each_test() -> None:
    """
    Ensure tests don't leak orders, webhooks or options into each other via the shared in-memory DB.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def seed_order() -> Callable[..., Order]:
    """Insert an order through its own session so request sessions see committed data."""

    def _seed(order_id: int, *, shipping: tuple[str, ...] = ("lockerlink",), email: str = "jo@example.com") -> Order:
        order = Order(
            order_id=order_id,
            order_number=str(order_id),
            billing_email=email,
            shipping_method_ids=list(shipping),
        )
        session = SessionLocal()
        try:
            OrderRepositoryImpl(session).save(order)
        finally:
            session.close()
        return order

    return _seed


@pytest.fixture()
def configure_credentials() -> Callable[..., None]:
    def _configure(*, webhook_url: str = WEBHOOK_URL, api_key: str = API_KEY) -> None:
        session = SessionLocal()
        try:
            options = OptionRepositoryImpl(session)
            options.set_option(WEBHOOK_URL_OPTION, webhook_url)
            options.set_option(API_KEY_OPTION, api_key)
        finally:
            session.close()

    return _configure
