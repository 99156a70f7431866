from __future__ import annotations

from dataclasses import dataclass

WEBHOOK_NAME_PREFIX = "LockerLink - "
WEBHOOK_TOPICS = ("order.created", "order.updated")


@dataclass(slots=True)
class Webhook:
    """A subscription on the store's order-event bus."""
    name: str
    topic: str
    delivery_url: str
    secret: str
    status: str = "active"
    webhook_id: int | None = None

    @classmethod
    def for_topic(cls, topic: str, *, delivery_url: str, secret: str) -> Webhook:
        return cls(
            name=f"{WEBHOOK_NAME_PREFIX}{topic}",
            topic=topic,
            delivery_url=delivery_url,
            secret=secret,
        )
