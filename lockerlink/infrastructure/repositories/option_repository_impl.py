from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from lockerlink.core.repositories.option_repository import OptionRepository
from lockerlink.infrastructure.models.models import OptionModel


class OptionRepositoryImpl(OptionRepository):
    """Options table with JSON values; each call commits on its own."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_option(self, key: str, default: Any = None) -> Any:
        row = self._db.get(OptionModel, key)
        if row is None:
            return default
        return row.option_value

    def set_option(self, key: str, value: Any) -> None:
        row = self._db.get(OptionModel, key)
        if row is None:
            row = OptionModel(option_key=key)

        row.option_value = value

        self._db.add(row)
        self._db.commit()

    def delete_option(self, key: str) -> None:
        row = self._db.get(OptionModel, key)
        if row is None:
            return

        self._db.delete(row)
        self._db.commit()
