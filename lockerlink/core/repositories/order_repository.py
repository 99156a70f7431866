from __future__ import annotations

from abc import ABC, abstractmethod

from lockerlink.core.entities.order import Order


class OrderRepository(ABC):
    @abstractmethod
    def get(self, order_id: int) -> Order | None:
        """Return the order with its lockerlink_* fields and shipping method ids, or None if missing."""
        raise NotImplementedError

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist fields and pending notes as one unit."""
        raise NotImplementedError
