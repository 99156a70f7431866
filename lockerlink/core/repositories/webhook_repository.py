from __future__ import annotations

from abc import ABC, abstractmethod

from lockerlink.core.entities.webhook import Webhook


class WebhookRepository(ABC):
    """
    Subscription API of the store's order-event bus.
    """

    @abstractmethod
    def create(self, webhook: Webhook) -> int:
        """Persist a new subscription and return its id."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, webhook_id: int) -> bool:
        """Return True if a subscription was removed, False if it did not exist."""
        raise NotImplementedError

    @abstractmethod
    def list_ids_by_name_prefix(self, prefix: str) -> list[int]:
        raise NotImplementedError
