from __future__ import annotations

import logging
from typing import Any, Callable

from lockerlink.core.entities.credentials import (
    API_KEY_OPTION,
    ENABLED_OPTION,
    LEGACY_OPTIONS,
    WEBHOOK_URL_OPTION,
    IntegrationCredentials,
)
from lockerlink.core.repositories.option_repository import OptionRepository
from lockerlink.core.sanitize import sanitize_text, sanitize_url
from lockerlink.core.use_cases.get_settings import SettingsDTO, load_credentials
from lockerlink.core.use_cases.register_webhooks import WebhookRegistrar

logger = logging.getLogger(__name__)


class SaveSettingsUseCase:
    """
    The only write path for integration credentials.

    A changed webhook_url or api_key tears the subscriptions down and, when both
    new values are set, registers a fresh pair signed with the new key.
    """

    def __init__(
            self,
            *,
            option_repo: OptionRepository,
            registrar_factory: Callable[[IntegrationCredentials], WebhookRegistrar],
    ) -> None:
        self._option_repo = option_repo
        self._registrar_factory = registrar_factory

    def execute(self, *, webhook_url: Any, api_key: Any, enabled: bool) -> SettingsDTO:
        old = load_credentials(self._option_repo)

        new = IntegrationCredentials(
            webhook_url=sanitize_url(webhook_url).rstrip("/"),
            api_key=sanitize_text(api_key),
            enabled=bool(enabled),
        )

        self._option_repo.set_option(WEBHOOK_URL_OPTION, new.webhook_url)
        self._option_repo.set_option(API_KEY_OPTION, new.api_key)
        self._option_repo.set_option(ENABLED_OPTION, "yes" if new.enabled else "no")
        for key in LEGACY_OPTIONS:
            self._option_repo.delete_option(key)

        if new.webhook_url != old.webhook_url or new.api_key != old.api_key:
            logger.info("LockerLink credentials changed, re-registering webhooks")
            registrar = self._registrar_factory(new)
            registrar.delete()
            if new.configured:
                registrar.create()

        return SettingsDTO.from_credentials(new)
