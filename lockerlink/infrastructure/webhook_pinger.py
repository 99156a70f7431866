from __future__ import annotations

import httpx

from lockerlink.core.use_cases.check_connection import PingError


class HttpxWebhookPinger:
    def __init__(self, *, timeout: float = 15.0, client: httpx.Client | None = None) -> None:
        self._timeout = timeout
        self._client = client

    def ping(self, url: str) -> int:
        try:
            if self._client is not None:
                response = self._client.post(url, json={"ping": True}, timeout=self._timeout)
            else:
                response = httpx.post(url, json={"ping": True}, timeout=self._timeout)
        except httpx.HTTPError as e:
            raise PingError(str(e) or e.__class__.__name__) from e

        return response.status_code
