"""Microsoft Graph API client for Entra ID."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, ClassVar

import httpx
import msal

from ....application.exceptions import RemoteError, ThrottlingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GraphClientConfig:
    """Configuration for Microsoft Graph API client."""

    tenant_id: str
    client_id: str
    client_secret: str
    timeout: float = 30.0


class GraphClient:
    """
    Async client for Microsoft Graph API.

    Handles authentication and paginated requests to the Graph API. HTTP 429
    and 503 responses raise ThrottlingError; any other failure raises
    RemoteError.
    """

    GRAPH_BASE_URL: ClassVar[str] = "https://graph.microsoft.com/v1.0"
    AUTHORITY_BASE: ClassVar[str] = "https://login.microsoftonline.com"
    SCOPE: ClassVar[list[str]] = ["https://graph.microsoft.com/.default"]
    THROTTLING_STATUS_CODES: ClassVar[frozenset[int]] = frozenset({429, 503})

    def __init__(
        self,
        config: GraphClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the Graph client.

        Args:
            config: Tenant and app credentials.
            transport: Optional httpx transport, used by tests.
        """
        self._config = config
        self._transport = transport
        self._access_token: str | None = None
        self._token_expiry: datetime | None = None
        self._msal_app: msal.ConfidentialClientApplication | None = None

    def _get_msal_app(self) -> msal.ConfidentialClientApplication:
        """Get or create MSAL application instance."""
        if self._msal_app is None:
            authority = f"{self.AUTHORITY_BASE}/{self._config.tenant_id}"
            self._msal_app = msal.ConfidentialClientApplication(
                client_id=self._config.client_id,
                client_credential=self._config.client_secret,
                authority=authority,
            )
        return self._msal_app

    async def _acquire_token(self) -> str:
        """Acquire access token using client credentials flow."""
        # Check if existing token is still valid
        if self._access_token and self._token_expiry and datetime.now(UTC) < self._token_expiry:
            return self._access_token

        app = self._get_msal_app()
        result = app.acquire_token_for_client(scopes=self.SCOPE)

        if "access_token" not in result:
            error = result.get("error_description", result.get("error", "Unknown error"))
            msg = f"Failed to acquire access token: {error}"
            raise RemoteError(msg)

        self._access_token = result["access_token"]
        expires_in = result.get("expires_in", 3600)
        # Refresh 5 minutes before expiry
        self._token_expiry = datetime.now(UTC) + timedelta(seconds=expires_in - 300)

        return self._access_token

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport)

    async def _headers(self) -> dict[str, str]:
        token = await self._acquire_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _url(self, endpoint: str) -> str:
        # Handle both relative and absolute URLs
        return endpoint if endpoint.startswith("http") else f"{self.GRAPH_BASE_URL}{endpoint}"

    async def get(self, endpoint: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """GET a single Graph resource."""
        async with self._client() as client:
            response = await self._send(client, "GET", self._url(endpoint), params=params)
        return response.json()

    async def get_all_pages(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Retrieve all pages from a paginated Graph API endpoint.

        Args:
            endpoint: The API endpoint path.
            params: Query parameters for the first page only; next links
                already carry them.

        Returns:
            Combined list of all results across pages.
        """
        results: list[dict[str, Any]] = []
        url: str | None = self._url(endpoint)
        page_params = params

        async with self._client() as client:
            while url:
                response = await self._send(client, "GET", url, params=page_params)
                data = response.json()

                results.extend(data.get("value", []))
                url = data.get("@odata.nextLink")
                page_params = None

        return results

    async def post(self, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        """POST a JSON payload."""
        async with self._client() as client:
            return await self._send(client, "POST", self._url(endpoint), json=payload)

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send an authenticated request and translate failures."""
        headers = await self._headers()
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            msg = f"Graph request {method} {url} failed: {e}"
            raise RemoteError(msg) from e

        if response.status_code in self.THROTTLING_STATUS_CODES:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            msg = f"Graph throttled {method} {url} ({response.status_code})"
            raise ThrottlingError(msg, retry_after=retry_after, status_code=response.status_code)

        if response.is_error:
            msg = f"Graph request {method} {url} returned {response.status_code}: {response.text[:200]}"
            raise RemoteError(msg, status_code=response.status_code)

        return response


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
