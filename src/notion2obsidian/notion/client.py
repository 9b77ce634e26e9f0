"""Async client for the Notion REST API."""

import logging

import httpx

from notion2obsidian.config import DEFAULT_NOTION_VERSION
from notion2obsidian.exceptions import NotionAPIError, RateLimitError, TransportError
from notion2obsidian.models import Database, QueryPage

NOTION_API_BASE = "https://api.notion.com/v1"
DEFAULT_PAGE_SIZE = 100

logger = logging.getLogger(__name__)


class NotionClient:
    """Async client for the Notion API using an integration token.

    Requests are never retried: a failed call raises TransportError (or one
    of its subclasses) and the caller decides what to do.
    """

    def __init__(
        self,
        token: str,
        notion_version: str = DEFAULT_NOTION_VERSION,
        base_url: str = NOTION_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.notion_version = notion_version
        self.base_url = base_url
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=30.0,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Notion-Version": self.notion_version,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _request(self, method: str, endpoint: str, json: dict | None = None) -> dict:
        """Make authenticated API request."""
        client = await self._get_client()

        try:
            response = await client.request(method, endpoint, json=json)
        except httpx.HTTPError as e:
            raise TransportError(f"Notion API request failed: {e}") from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(int(retry_after) if retry_after and retry_after.isdigit() else None)

        if response.status_code >= 400:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            raise NotionAPIError(response.status_code, message)

        return response.json()

    async def search_databases(self) -> list[Database]:
        """
        List every database shared with the integration.

        Uses /search with an object filter, following next_cursor.
        """
        databases = []
        cursor = None

        while True:
            body: dict = {"filter": {"property": "object", "value": "database"}}
            if cursor:
                body["start_cursor"] = cursor

            data = await self._request("POST", "/search", json=body)
            for raw in data.get("results", []):
                databases.append(Database.from_notion(raw))

            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break

        return databases

    async def get_database(self, database_id: str) -> dict:
        """Fetch a database object, including its property schema."""
        return await self._request("GET", f"/databases/{database_id}")

    async def query_database(
        self,
        database_id: str,
        start_cursor: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> QueryPage:
        """Fetch one page of results from a database query."""
        body: dict = {"page_size": page_size}
        if start_cursor:
            body["start_cursor"] = start_cursor

        data = await self._request("POST", f"/databases/{database_id}/query", json=body)
        return QueryPage.from_notion(data)

