from __future__ import annotations

import logging
from typing import Any

from lockerlink.core.entities.credentials import WEBHOOK_IDS_OPTION, IntegrationCredentials
from lockerlink.core.entities.webhook import WEBHOOK_NAME_PREFIX, WEBHOOK_TOPICS, Webhook
from lockerlink.core.repositories.option_repository import OptionRepository
from lockerlink.core.repositories.order_repository import OrderRepository
from lockerlink.core.repositories.webhook_repository import WebhookRepository

logger = logging.getLogger(__name__)


class WebhookRegistrar:
    """
    Owns the order.created / order.updated subscriptions pointing at LockerLink.

    The id list stored under WEBHOOK_IDS_OPTION is the source of truth for
    ownership. The name-prefix sweep in delete() only clears orphans left by
    earlier releases that did not record their ids.
    """

    def __init__(
            self,
            *,
            credentials: IntegrationCredentials,
            webhook_repo: WebhookRepository,
            option_repo: OptionRepository,
            order_repo: OrderRepository,
    ) -> None:
        self._credentials = credentials
        self._webhook_repo = webhook_repo
        self._option_repo = option_repo
        self._order_repo = order_repo

    def owned_ids(self) -> list[int]:
        stored = self._option_repo.get_option(WEBHOOK_IDS_OPTION, [])
        if not isinstance(stored, list):
            return []
        return [i for i in stored if isinstance(i, int) and not isinstance(i, bool)]

    def create(self) -> list[int]:
        """
        Recreate both subscriptions from scratch. Silent no-op without credentials.
        """
        if not self._credentials.configured:
            logger.info("Skipping webhook registration: webhook_url or api_key not set")
            return []

        self.delete()

        delivery_url = self._credentials.webhook_url.rstrip("/")
        webhook_ids: list[int] = []
        for topic in WEBHOOK_TOPICS:
            webhook = Webhook.for_topic(topic, delivery_url=delivery_url, secret=self._credentials.api_key)
            webhook_ids.append(self._webhook_repo.create(webhook))

        self._option_repo.set_option(WEBHOOK_IDS_OPTION, webhook_ids)
        logger.info("Registered LockerLink webhooks %s -> %s", webhook_ids, delivery_url)
        return webhook_ids

    def delete(self) -> None:
        targets = set(self.owned_ids())
        targets.update(self._webhook_repo.list_ids_by_name_prefix(WEBHOOK_NAME_PREFIX))

        removed = [webhook_id for webhook_id in sorted(targets) if self._webhook_repo.delete(webhook_id)]
        self._option_repo.delete_option(WEBHOOK_IDS_OPTION)

        if removed:
            logger.info("Deleted LockerLink webhooks %s", removed)

    def should_deliver(self, default: bool, webhook_id: int, order_id: Any) -> bool:
        """
        Delivery filter for the order-event bus.

        Foreign subscriptions get the upstream decision back untouched; ours only
        deliver orders that ship with the locker-pickup method.
        """
        if webhook_id not in self.owned_ids():
            return default

        try:
            order = self._order_repo.get(int(order_id))
        except (TypeError, ValueError):
            return False
        if order is None:
            return False

        return order.uses_locker_pickup()
