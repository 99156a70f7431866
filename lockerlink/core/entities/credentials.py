from __future__ import annotations

from dataclasses import dataclass

WEBHOOK_URL_OPTION = "lockerlink_webhook_url"
API_KEY_OPTION = "lockerlink_api_key"
ENABLED_OPTION = "lockerlink_enabled"
WEBHOOK_IDS_OPTION = "lockerlink_webhook_ids"

# Left behind by earlier releases; removed on every settings save.
LEGACY_OPTIONS = ("lockerlink_server_url", "lockerlink_api_id")


@dataclass(frozen=True, slots=True)
class IntegrationCredentials:
    webhook_url: str = ""
    api_key: str = ""
    enabled: bool = True

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url) and bool(self.api_key)

    @property
    def active(self) -> bool:
        return self.enabled and self.configured
