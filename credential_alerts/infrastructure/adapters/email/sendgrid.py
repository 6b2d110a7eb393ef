"""E-mail sender using the SendGrid v3 Web API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx

from ....application.exceptions import RemoteError, ThrottlingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SendGridConfig:
    """SendGrid configuration."""

    api_key: str = ""
    timeout: float = 30.0


class SendGridEmailSender:
    """Send e-mail via SendGrid."""

    SEND_URL: ClassVar[str] = "https://api.sendgrid.com/v3/mail/send"

    def __init__(self, config: SendGridConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the SendGrid sender."""
        self._config = config
        self._transport = transport

    async def send(
        self,
        from_address: str,
        from_name: str,
        to_addresses: Sequence[str],
        subject: str,
        html_body: str,
    ) -> bool:
        """Send one HTML message; all recipients share one personalization."""
        payload = self._build_payload(from_address, from_name, to_addresses, subject, html_body)
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport) as client:
                response = await client.post(self.SEND_URL, json=payload, headers=headers)
        except httpx.HTTPError as e:
            msg = f"SendGrid request failed: {e}"
            raise RemoteError(msg) from e

        if response.status_code == 429:
            msg = "SendGrid rate limit reached"
            raise ThrottlingError(msg, retry_after=None)
        if response.is_error:
            logger.warning("SendGrid returned %d: %s", response.status_code, response.text[:200])
            return False

        logger.info("SendGrid e-mail accepted for %s", ", ".join(to_addresses))
        return True

    @staticmethod
    def _build_payload(
        from_address: str,
        from_name: str,
        to_addresses: Sequence[str],
        subject: str,
        html_body: str,
    ) -> dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": addr} for addr in to_addresses]}],
            "from": {"email": from_address, "name": from_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_body}],
        }
