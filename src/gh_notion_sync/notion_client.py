"""
Notion API client for reading and writing database rows.

This module handles all interactions with the Notion REST API:
cursor-paginated database queries, page property lookups, and
page creation and updates.
"""

import logging
from typing import Any

import httpx

from .exceptions import (
    NotionAPIError,
    NotionAuthError,
    NotionNetworkError,
    NotionRateLimitError,
    NotionSchemaError,
    NotionTimeoutError,
)
from .models import RowHandle
from .properties import ISSUE_NUMBER

logger = logging.getLogger(__name__)


class NotionClient:
    """
    Client for interacting with Notion via its REST API.

    Pages are addressed by their opaque id and properties by name or id.
    Nothing is retried: the first failure propagates to the caller.
    """

    DEFAULT_BASE_URL = "https://api.notion.com/v1"
    DEFAULT_TIMEOUT = 30  # seconds
    NOTION_VERSION = "2022-06-28"

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the Notion client.

        Args:
            token: Internal integration token
            base_url: API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Notion-Version": self.NOTION_VERSION,
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an API request with error handling.

        Args:
            method: HTTP method
            path: API path (without base URL)
            json: Request body

        Returns:
            JSON response data

        Raises:
            Various NotionClientError subclasses based on failure type
        """
        client = await self._get_client()
        logger.debug(f"{method} {path}")

        try:
            response = await client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            raise NotionTimeoutError(self.timeout) from e
        except httpx.TransportError as e:
            raise NotionNetworkError(str(e)) from e

        if response.status_code == 401:
            raise NotionAuthError("Invalid integration token")

        if response.status_code == 429:
            raise NotionRateLimitError(response.headers.get("retry-after"))

        if response.status_code >= 400:
            message, code = self._error_details(response)
            raise NotionAPIError(message, response.status_code, code)

        return response.json()

    def _error_details(self, response: httpx.Response) -> tuple[str, str | None]:
        """Extract the message and error code from a Notion error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text, None
        if not isinstance(body, dict):
            return response.text, None
        return body.get("message", response.text), body.get("code")

    async def check_connection(self, database_id: str) -> bool:
        """
        Check that the token is accepted and the database is reachable.

        Args:
            database_id: Database to look up

        Returns:
            True if connection is successful

        Raises:
            NotionAuthError: If authentication fails
            NotionAPIError: If the database cannot be read
        """
        await self._request("GET", f"/databases/{database_id}")
        return True

    async def query_database(self, database_id: str) -> list[dict[str, Any]]:
        """
        Fetch every page of a database, following the cursor.

        Args:
            database_id: Database to query

        Returns:
            List of raw page objects
        """
        pages: list[dict[str, Any]] = []
        cursor: str | None = None

        while True:
            body: dict[str, Any] = {}
            if cursor:
                body["start_cursor"] = cursor
            data = await self._request("POST", f"/databases/{database_id}/query", json=body)
            pages.extend(data.get("results", []))

            cursor = data.get("next_cursor")
            if not cursor:
                break

        return pages

    async def retrieve_page_property(self, page_id: str, property_id: str) -> dict[str, Any]:
        """
        Resolve a single property of a page to its value.

        Args:
            page_id: Page to read
            property_id: Property id as listed on the page

        Returns:
            Raw property item object
        """
        return await self._request("GET", f"/pages/{page_id}/properties/{property_id}")

    async def create_page(self, database_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        """
        Create a new row in a database.

        Args:
            database_id: Parent database
            properties: Property values keyed by property name

        Returns:
            The created page object
        """
        return await self._request(
            "POST",
            "/pages",
            json={"parent": {"database_id": database_id}, "properties": properties},
        )

    async def update_page(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        """
        Overwrite properties of an existing row.

        Args:
            page_id: Page to update
            properties: Property values keyed by property name

        Returns:
            The updated page object
        """
        return await self._request("PATCH", f"/pages/{page_id}", json={"properties": properties})

    async def fetch_row_handles(self, database_id: str) -> list[RowHandle]:
        """
        Read the issue number of every row in the database.

        The query listing only carries a reference to each row's
        "Issue Number" property, so every row needs its own lookup.

        Args:
            database_id: Database to read

        Returns:
            List of RowHandle objects for rows that have an issue number

        Raises:
            NotionSchemaError: If a row has no "Issue Number" property
        """
        pages = await self.query_database(database_id)
        logger.info(f"{len(pages)} rows fetched from Notion database")

        handles: list[RowHandle] = []
        for page in pages:
            prop = page.get("properties", {}).get(ISSUE_NUMBER)
            if prop is None:
                raise NotionSchemaError(page.get("id", "?"), ISSUE_NUMBER)

            item = await self.retrieve_page_property(page["id"], prop["id"])
            number = item.get("number")
            if number is None:
                logger.warning(f"Row {page['id']} has no issue number, skipping")
                continue

            handles.append(RowHandle(row_id=page["id"], issue_number=int(number)))

        return handles
