from __future__ import annotations

from abc import ABC, abstractmethod

from lockerlink.core.entities.notification import PickupReadyNotification


class NotificationSink(ABC):
    @abstractmethod
    def pickup_ready(self, notification: PickupReadyNotification) -> None:
        """Hand off a pickup-ready notification. Must not block on delivery."""
        raise NotImplementedError
