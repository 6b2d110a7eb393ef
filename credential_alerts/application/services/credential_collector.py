"""Collects credential records from the identity directory."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

from ...domain.entities import Application, CredentialRecord, Owner, Snapshot
from ...domain.services import EmailNormalizer, strip_mailbox_prefix
from ..exceptions import CollectionFailedError
from ..ports import Directory
from .item_result import ItemResult
from .retrying_client import RetryingClient

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "AppCredentialReport"


class CredentialCollector:
    """
    Pairs every application with its credentials and owners.

    Applications are processed concurrently, bounded by ``max_concurrency``.
    A failure on one application is logged and that application skipped;
    output order always follows the directory listing order.
    """

    def __init__(
        self,
        directory: Directory,
        retrying_client: RetryingClient,
        *,
        report_name: str = DEFAULT_REPORT_NAME,
        email_normalizer: EmailNormalizer = strip_mailbox_prefix,
        max_concurrency: int = 8,
    ) -> None:
        """
        Initialize the collector.

        Args:
            directory: Adapter for the identity directory.
            retrying_client: Backoff wrapper applied to every remote call.
            report_name: Logical name given to produced snapshots.
            email_normalizer: Maps raw owner mail attributes to addresses.
            max_concurrency: Upper bound on applications processed at once.
        """
        if max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {max_concurrency}"
            raise ValueError(msg)
        self._directory = directory
        self._retrying = retrying_client
        self._report_name = report_name
        self._normalize_email = email_normalizer
        self._max_concurrency = max_concurrency

    async def collect(self) -> Snapshot:
        """
        Run one collection pass.

        Raises:
            CollectionFailedError: If applications cannot be listed, or if
                every listed application fails.
        """
        logger.info("Starting credential collection...")
        try:
            applications = await self._retrying.execute(
                self._directory.list_applications,
                description="list applications",
            )
        except Exception as e:
            msg = f"Failed to list applications: {e}"
            raise CollectionFailedError(msg) from e

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(app: Application) -> ItemResult[list[CredentialRecord]]:
            async with semaphore:
                return await self._process_application(app)

        results = await asyncio.gather(*(bounded(app) for app in applications))

        if applications and not any(result.ok for result in results):
            msg = f"All {len(applications)} applications failed to collect; keeping the previous snapshot"
            raise CollectionFailedError(msg)

        records: list[CredentialRecord] = []
        skipped = 0
        for result in results:
            if result.ok and result.value is not None:
                records.extend(result.value)
            else:
                skipped += 1

        logger.info(
            "Collected %d credentials from %d applications (%d skipped)",
            len(records),
            len(applications),
            skipped,
        )
        return Snapshot(
            name=self._report_name,
            records=tuple(records),
            generated_at=datetime.now(UTC),
        )

    async def _process_application(self, app: Application) -> ItemResult[list[CredentialRecord]]:
        """Fetch detail and owners for one application; never raises."""
        try:
            credentials = await self._retrying.execute(
                lambda: self._directory.get_application_detail(app.id),
                description=f"credentials of {app.display_name}",
            )
            owners = await self._retrying.execute(
                lambda: self._directory.list_owners(app.id),
                description=f"owners of {app.display_name}",
            )
        except Exception as e:
            logger.warning("Skipping application %s (%s): %s", app.display_name, app.id, e)
            return ItemResult.failure(app.id, e)

        owner_names, owner_emails = self._resolve_owners(owners)
        records = [
            CredentialRecord(
                application_name=app.display_name,
                expiry_date=credential.expiry_date,
                kind=credential.kind,
                owner_names=owner_names,
                owner_emails=owner_emails,
            )
            for credential in credentials
        ]
        return ItemResult.success(app.id, records)

    def _resolve_owners(self, owners: list[Owner]) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Owner display names in order, and deduplicated deliverable addresses."""
        names = tuple(o.display_name for o in owners if o.display_name)
        emails: dict[str, None] = {}
        for owner in owners:
            address = self._normalize_email(owner.email)
            if address:
                emails.setdefault(address, None)
        return names, tuple(emails)
