"""Pickup-ready customer email.

The sink builds the message from the saved order details carried by the
notification, and leaves the SMTP round-trip to a Starlette background task that
runs once the callback has been answered.
"""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from starlette.background import BackgroundTasks

from lockerlink.core.entities.notification import PickupReadyNotification
from lockerlink.core.repositories.notification_sink import NotificationSink
from lockerlink.infrastructure.config import Settings

logger = logging.getLogger(__name__)

PICKUP_READY_SUBJECT = "Your order #{order_number} is ready for locker pickup"
PICKUP_READY_HEADING = "Your order is ready for pickup!"


def build_pickup_ready_email(notification: PickupReadyNotification, *, sender: str) -> EmailMessage | None:
    """Return the customer email, or None when the order has no billing address."""
    if not notification.billing_email:
        return None

    lines = [PICKUP_READY_HEADING, ""]
    lines.append(f"Your order #{notification.order_number} has been loaded into a locker and is ready to collect.")
    if notification.locker_name:
        lines.append(f"Locker: {notification.locker_name}")
    if notification.compartment_label:
        lines.append(f"Compartment: {notification.compartment_label}")
    if notification.pickup_url:
        lines.extend(["", f"Unlock & pick up: {notification.pickup_url}"])

    msg = EmailMessage()
    msg["Subject"] = PICKUP_READY_SUBJECT.format(order_number=notification.order_number)
    msg["From"] = sender
    msg["To"] = notification.billing_email
    msg.set_content("\n".join(lines) + "\n")
    return msg


class SmtpMailer:
    """Sends messages over SMTP (STARTTLS by default)."""

    def __init__(self, settings: Settings) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._user = settings.smtp_user
        self._password = settings.smtp_password
        self._from = settings.smtp_from or settings.smtp_user
        self._starttls = settings.smtp_starttls

    @property
    def sender(self) -> str:
        return self._from

    @property
    def is_configured(self) -> bool:
        return bool(self._host and self._from)

    def send(self, msg: EmailMessage) -> bool:
        if not self.is_configured:
            logger.warning("SMTP not configured, dropping email to %s", msg["To"])
            return False

        try:
            with smtplib.SMTP(self._host, self._port, timeout=15) as server:
                if self._starttls:
                    server.starttls()
                if self._user and self._password:
                    server.login(self._user, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            # Runs after the response is sent
            logger.error("Failed to send email to %s: %s", msg["To"], e)
            return False

        logger.info("Sent email %r to %s", msg["Subject"], msg["To"])
        return True


class BackgroundEmailNotificationSink(NotificationSink):
    def __init__(
            self,
            *,
            background_tasks: BackgroundTasks,
            mailer: SmtpMailer,
    ) -> None:
        self._background_tasks = background_tasks
        self._mailer = mailer

    def pickup_ready(self, notification: PickupReadyNotification) -> None:
        msg = build_pickup_ready_email(notification, sender=self._mailer.sender)
        if msg is None:
            logger.warning("Pickup-ready email skipped: order %s has no billing email", notification.order_id)
            return

        self._background_tasks.add_task(self._mailer.send, msg)
