from __future__ import annotations

from dataclasses import replace
from email.message import EmailMessage

import pytest
from starlette.background import BackgroundTasks

from lockerlink.core.entities.notification import PickupReadyNotification
from lockerlink.infrastructure.config import Settings
from lockerlink.infrastructure.notifications import email as email_module
from lockerlink.infrastructure.notifications.email import (
    BackgroundEmailNotificationSink,
    SmtpMailer,
    build_pickup_ready_email,
)

NOTIFICATION = PickupReadyNotification(
    order_id=42,
    order_number="1042",
    billing_email="jo@example.com",
    locker_name="A12",
    compartment_label="3",
    pickup_url="https://pickup.lockerlink.example/p/abc",
)


def _mailer(**overrides) -> SmtpMailer:
    values = {"smtp_host": "smtp.example", "smtp_from": "shop@example.com", **overrides}
    return SmtpMailer(Settings(**values))


def test_build_pickup_ready_email() -> None:
    msg = build_pickup_ready_email(NOTIFICATION, sender="shop@example.com")

    assert msg is not None
    assert msg["Subject"] == "Your order #1042 is ready for locker pickup"
    assert msg["To"] == "jo@example.com"
    assert msg["From"] == "shop@example.com"
    body = msg.get_content()
    assert body.startswith("Your order is ready for pickup!")
    assert "Locker: A12" in body
    assert "Compartment: 3" in body
    assert "https://pickup.lockerlink.example/p/abc" in body


def test_build_pickup_ready_email_omits_missing_details() -> None:
    msg = build_pickup_ready_email(
        PickupReadyNotification(order_id=42, order_number="1042", billing_email="jo@example.com"),
        sender="shop@example.com",
    )

    body = msg.get_content()
    assert "Locker:" not in body
    assert "Compartment:" not in body
    assert "Unlock" not in body


def test_build_pickup_ready_email_needs_a_recipient() -> None:
    assert build_pickup_ready_email(replace(NOTIFICATION, billing_email=""), sender="shop@example.com") is None


def test_sink_enqueues_send_as_background_task() -> None:
    tasks = BackgroundTasks()
    mailer = _mailer()
    sink = BackgroundEmailNotificationSink(background_tasks=tasks, mailer=mailer)

    sink.pickup_ready(NOTIFICATION)

    assert len(tasks.tasks) == 1
    task = tasks.tasks[0]
    assert task.func == mailer.send
    assert task.args[0]["To"] == "jo@example.com"


def test_sink_skips_orders_without_billing_email() -> None:
    tasks = BackgroundTasks()
    sink = BackgroundEmailNotificationSink(background_tasks=tasks, mailer=_mailer())

    sink.pickup_ready(replace(NOTIFICATION, billing_email=""))

    assert tasks.tasks == []


def test_unconfigured_mailer_drops_the_message() -> None:
    mailer = SmtpMailer(Settings(smtp_host="", smtp_from=""))
    msg = build_pickup_ready_email(NOTIFICATION, sender="shop@example.com")

    assert mailer.is_configured is False
    assert mailer.send(msg) is False


class _FakeSMTP:
    instances: list["_FakeSMTP"] = []

    def __init__(self, host: str, port: int, timeout: float) -> None:
        self.host = host
        self.port = port
        self.calls: list[str] = []
        self.sent: list[EmailMessage] = []
        _FakeSMTP.instances.append(self)

    def __enter__(self) -> "_FakeSMTP":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def starttls(self) -> None:
        self.calls.append("starttls")

    def login(self, user: str, password: str) -> None:
        self.calls.append(f"login:{user}")

    def send_message(self, msg: EmailMessage) -> None:
        self.sent.append(msg)


def test_mailer_sends_over_smtp(monkeypatch: pytest.MonkeyPatch) -> None:
    _FakeSMTP.instances = []
    monkeypatch.setattr(email_module.smtplib, "SMTP", _FakeSMTP)
    mailer = _mailer(smtp_user="shop", smtp_password="pw", smtp_port=2525)
    msg = build_pickup_ready_email(NOTIFICATION, sender=mailer.sender)

    assert mailer.send(msg) is True

    (server,) = _FakeSMTP.instances
    assert (server.host, server.port) == ("smtp.example", 2525)
    assert server.calls == ["starttls", "login:shop"]
    assert server.sent == [msg]


def test_mailer_reports_transport_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(email_module.smtplib, "SMTP", _refuse)
    msg = build_pickup_ready_email(NOTIFICATION, sender="shop@example.com")

    assert _mailer().send(msg) is False
