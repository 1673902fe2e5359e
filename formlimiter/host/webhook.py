"""Webhook notifier: POST notifications as JSON using httpx."""

from __future__ import annotations

import httpx
from loguru import logger

from formlimiter.host.base import Notifier


class WebhookNotifier(Notifier):
    """POST ``{"to", "subject", "body"}`` to *url*.

    Non-2xx responses raise :class:`httpx.HTTPStatusError`; the scheduler
    wraps that in a ``CollaboratorError``.
    """

    def __init__(
        self,
        url: str,
        timeout_s: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self._client = httpx.Client(timeout=timeout_s, transport=transport)

    def send(self, recipient: str, subject: str, body: str) -> None:
        r = self._client.post(self.url, json={"to": recipient, "subject": subject, "body": body})
        r.raise_for_status()
        logger.debug("Webhook: delivered '{}' to {} ({})", subject, recipient, r.status_code)

    def close(self) -> None:
        self._client.close()
