from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from lockerlink.core.entities.webhook import Webhook
from lockerlink.core.repositories.webhook_repository import WebhookRepository
from lockerlink.infrastructure.models.models import WebhookModel


class WebhookRepositoryImpl(WebhookRepository):
    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, webhook: Webhook) -> int:
        row = WebhookModel(
            name=webhook.name,
            topic=webhook.topic,
            delivery_url=webhook.delivery_url,
            secret=webhook.secret,
            status=webhook.status,
        )
        self._db.add(row)
        self._db.commit()

        webhook.webhook_id = row.webhook_id
        return row.webhook_id

    def delete(self, webhook_id: int) -> bool:
        row = self._db.get(WebhookModel, webhook_id)
        if row is None:
            return False

        self._db.delete(row)
        self._db.commit()
        return True

    def list_ids_by_name_prefix(self, prefix: str) -> list[int]:
        stmt = (
            select(WebhookModel.webhook_id)
            .where(WebhookModel.name.startswith(prefix, autoescape=True))
            .order_by(WebhookModel.webhook_id)
        )
        return list(self._db.scalars(stmt))
