"""E-mail sender using Microsoft Graph sendMail."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..entra_id.graph_client import GraphClient, GraphClientConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GraphMailConfig:
    """Microsoft Graph e-mail configuration."""

    save_to_sent_items: bool = False


class GraphMailSender:
    """
    Send e-mail via Microsoft Graph API.

    The sending mailbox is the ``from_address``; the app registration needs
    the Mail.Send application permission on it.
    """

    def __init__(
        self,
        graph_config: GraphClientConfig,
        config: GraphMailConfig | None = None,
        *,
        client: GraphClient | None = None,
    ) -> None:
        """Initialize the Graph mail sender."""
        self._client = client or GraphClient(graph_config)
        self._config = config or GraphMailConfig()

    async def send(
        self,
        from_address: str,
        from_name: str,
        to_addresses: Sequence[str],
        subject: str,
        html_body: str,
    ) -> bool:
        """Send one HTML message to all recipients."""
        message = self._build_message(from_address, from_name, to_addresses, subject, html_body)
        await self._client.post(f"/users/{from_address}/sendMail", message)
        logger.info("Graph e-mail sent to %s", ", ".join(to_addresses))
        return True

    def _build_message(
        self,
        from_address: str,
        from_name: str,
        to_addresses: Sequence[str],
        subject: str,
        html_body: str,
    ) -> dict[str, Any]:
        """Build the Graph API sendMail payload."""
        return {
            "message": {
                "subject": subject,
                "body": {
                    "contentType": "HTML",
                    "content": html_body,
                },
                "from": {"emailAddress": {"address": from_address, "name": from_name}},
                "toRecipients": [{"emailAddress": {"address": addr}} for addr in to_addresses],
            },
            "saveToSentItems": self._config.save_to_sent_items,
        }
