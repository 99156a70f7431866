from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from lockerlink.core.sanitize import sanitize_url

logger = logging.getLogger(__name__)


class PingError(Exception):
    """Transport-level failure reaching the webhook URL."""


class WebhookPinger(Protocol):
    """
    Sends {"ping": true} to a URL and returns the HTTP status code.
    Raises PingError when no response was received.
    """

    def ping(self, url: str) -> int:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ConnectionCheckResult:
    success: bool
    message: str = ""


class CheckConnectionUseCase:
    def __init__(self, *, pinger: WebhookPinger) -> None:
        self._pinger = pinger

    def execute(self, *, webhook_url: str) -> ConnectionCheckResult:
        url = sanitize_url(webhook_url)
        if not url:
            return ConnectionCheckResult(success=False, message="Webhook URL is required.")

        try:
            status_code = self._pinger.ping(url)
        except PingError as e:
            logger.warning("LockerLink connection test to %s failed: %s", url, e)
            return ConnectionCheckResult(success=False, message=str(e))

        if 200 <= status_code < 300:
            return ConnectionCheckResult(success=True)
        return ConnectionCheckResult(success=False, message=f"Server returned HTTP {status_code}")
