"""Port for e-mail delivery - driven/secondary port."""

from collections.abc import Sequence
from typing import Protocol


class EmailSender(Protocol):
    """
    Port for sending HTML e-mail.

    This is a driven (secondary) port; adapters wrap a transactional
    e-mail provider.
    """

    async def send(
        self,
        from_address: str,
        from_name: str,
        to_addresses: Sequence[str],
        subject: str,
        html_body: str,
    ) -> bool:
        """
        Send one message to all recipients.

        Returns:
            True if the provider accepted the message.
        """
        ...
