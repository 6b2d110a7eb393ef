"""Entra ID directory adapter backed by Microsoft Graph."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from ....domain.entities import Application, Credential, Owner
from ....domain.value_objects import CredentialKind
from .graph_client import GraphClient, GraphClientConfig

logger = logging.getLogger(__name__)

CREDENTIAL_COLLECTIONS = ("passwordCredentials", "keyCredentials")


class GraphDirectory:
    """
    Directory implementation using Microsoft Graph API.

    Implements the Directory port for Entra ID app registrations.
    """

    PAGE_SIZE = "999"

    def __init__(self, config: GraphClientConfig, *, client: GraphClient | None = None) -> None:
        """
        Initialize the directory.

        Args:
            config: Configuration for the Graph API client.
            client: Pre-built client, mainly for tests.
        """
        self._client = client or GraphClient(config)

    async def list_applications(self) -> list[Application]:
        """Retrieve all application registrations."""
        logger.info("Fetching application registrations from Entra ID...")
        raw_apps = await self._client.get_all_pages(
            "/applications",
            params={"$select": "id,appId,displayName", "$top": self.PAGE_SIZE},
        )
        logger.info("Found %d application registrations", len(raw_apps))
        return [
            Application(
                id=raw.get("id", ""),
                app_id=raw.get("appId", ""),
                display_name=raw.get("displayName") or "Unknown",
            )
            for raw in raw_apps
        ]

    async def get_application_detail(self, object_id: str) -> list[Credential]:
        """Retrieve secrets and certificates of one application in one request."""
        raw = await self._client.get(
            f"/applications/{object_id}",
            params={"$select": "id,displayName,passwordCredentials,keyCredentials"},
        )
        credentials: list[Credential] = []
        for collection in CREDENTIAL_COLLECTIONS:
            kind = CredentialKind.from_graph_collection(collection)
            for cred in raw.get(collection) or []:
                credential = self._map_credential(cred, kind, object_id, raw.get("displayName", ""))
                if credential:
                    credentials.append(credential)
        return credentials

    async def list_owners(self, object_id: str) -> list[Owner]:
        """Retrieve the owners of one application."""
        raw_owners = await self._client.get_all_pages(
            f"/applications/{object_id}/owners",
            params={"$select": "displayName,mail,userPrincipalName"},
        )
        return [
            Owner(
                display_name=raw.get("displayName") or raw.get("userPrincipalName") or "",
                email=raw.get("mail"),
            )
            for raw in raw_owners
        ]

    def _map_credential(
        self,
        raw: dict[str, Any],
        kind: CredentialKind,
        object_id: str,
        app_name: str,
    ) -> Credential | None:
        """
        Map raw Graph API credential data to domain entity.

        Returns:
            Credential entity or None if it carries no usable expiry.
        """
        expiry_str = raw.get("endDateTime")
        if not expiry_str:
            logger.warning(
                "%s %s in %s has no expiry date",
                kind,
                raw.get("keyId", "unknown"),
                app_name,
            )
            return None

        end_time = self._parse_datetime(expiry_str)
        if not end_time:
            return None

        start_str = raw.get("startDateTime")
        return Credential(
            kind=kind,
            display_name=raw.get("displayName"),
            start_time=self._parse_datetime(start_str) if start_str else None,
            end_time=end_time,
            application_id=object_id,
            key_id=raw.get("keyId", ""),
        )

    @staticmethod
    def _parse_datetime(dt_string: str) -> datetime | None:
        """Parse ISO datetime string to datetime object."""
        try:
            # Handle various formats from Graph API
            dt_string = dt_string.replace("Z", "+00:00")
            dt = datetime.fromisoformat(dt_string)
            # Ensure timezone-aware
            return dt if dt.tzinfo else dt.replace(tzinfo=UTC)
        except ValueError:
            logger.warning("Failed to parse datetime: %s", dt_string)
            return None
