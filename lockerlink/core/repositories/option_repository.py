from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class OptionRepository(ABC):
    """Process-wide key/value configuration store."""

    @abstractmethod
    def get_option(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    @abstractmethod
    def set_option(self, key: str, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_option(self, key: str) -> None:
        raise NotImplementedError
