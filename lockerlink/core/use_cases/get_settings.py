from __future__ import annotations

from dataclasses import dataclass

from lockerlink.core.entities.credentials import (
    API_KEY_OPTION,
    ENABLED_OPTION,
    WEBHOOK_URL_OPTION,
    IntegrationCredentials,
)
from lockerlink.core.repositories.option_repository import OptionRepository


def load_credentials(option_repo: OptionRepository) -> IntegrationCredentials:
    webhook_url = option_repo.get_option(WEBHOOK_URL_OPTION, "") or ""
    api_key = option_repo.get_option(API_KEY_OPTION, "") or ""
    enabled = option_repo.get_option(ENABLED_OPTION, "yes")

    return IntegrationCredentials(
        webhook_url=str(webhook_url),
        api_key=str(api_key),
        enabled=enabled == "yes",
    )


@dataclass(frozen=True, slots=True)
class SettingsDTO:
    """
    Use-case return type for GET /settings. The api_key is never returned.
    """
    webhook_url: str
    enabled: bool
    configured: bool
    active: bool

    @classmethod
    def from_credentials(cls, credentials: IntegrationCredentials) -> SettingsDTO:
        return cls(
            webhook_url=credentials.webhook_url,
            enabled=credentials.enabled,
            configured=credentials.configured,
            active=credentials.active,
        )


class GetSettingsUseCase:
    def __init__(self, *, option_repo: OptionRepository) -> None:
        self._option_repo = option_repo

    def execute(self) -> SettingsDTO:
        return SettingsDTO.from_credentials(load_credentials(self._option_repo))
