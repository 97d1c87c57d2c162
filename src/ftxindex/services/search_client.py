"""Search service REST client.

This module provides the SearchServiceClient for the subset of the
Meilisearch REST API that ftxindex uses: index management, attribute
settings, bulk upserts, deletes and filtered search.
"""

from __future__ import annotations

import contextlib
import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from opentelemetry import trace

from ftxindex.config.settings import ServiceConfig
from ftxindex.lib.errors import (
    SearchServiceAPIError,
    SearchServiceConnectionError,
)

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("ftxindex.search_client")


def build_equality_filter(field: str, value: str) -> str:
    """Build a ``<field> = "<value>"`` filter expression."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'{field} = "{escaped}"'


class SearchServiceClient:
    """Async client for the search service.

    Use as an async context manager so the underlying connection pool is
    closed when the run finishes.

    Example:
        >>> async with SearchServiceClient(config) as client:
        ...     if not await client.index_exists("ftx_docs"):
        ...         await client.create_index("ftx_docs", "doc_id")
    """

    def __init__(
        self,
        config: ServiceConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client from connection settings.

        Args:
            config: Service connection settings
            transport: Optional transport override (used by tests)
        """
        self.config = config
        self.base_url = config.base_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {config.api_key.get_secret_value()}",
            },
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SearchServiceClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def index_exists(self, index: str) -> bool:
        """Probe whether an index exists.

        Raises:
            SearchServiceConnectionError: Network/timeout issues
            SearchServiceAPIError: Any error other than "not found"
        """
        try:
            await self._request("GET", f"/indexes/{_segment(index)}")
        except SearchServiceAPIError as e:
            if e.is_not_found:
                return False
            raise
        return True

    async def create_index(self, index: str, primary_key: str) -> dict[str, Any]:
        """Create an index with the given primary key."""
        return await self._request(
            "POST", "/indexes", json={"uid": index, "primaryKey": primary_key}
        )

    async def update_setting(
        self, index: str, setting: str, attributes: list[str]
    ) -> dict[str, Any]:
        """Overwrite one attribute setting (e.g. ``filterable-attributes``)."""
        return await self._request(
            "PUT", f"/indexes/{_segment(index)}/settings/{setting}", json=attributes
        )

    async def add_documents(
        self, index: str, records: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Bulk upsert records into an index."""
        return await self._request(
            "POST", f"/indexes/{_segment(index)}/documents", json=records
        )

    async def delete_document(self, index: str, record_id: str) -> dict[str, Any]:
        """Delete one record by primary key."""
        return await self._request(
            "DELETE", f"/indexes/{_segment(index)}/documents/{_segment(record_id)}"
        )

    async def delete_documents(
        self, index: str, record_ids: list[str]
    ) -> dict[str, Any]:
        """Bulk delete records by primary key."""
        path = f"/indexes/{_segment(index)}/documents/delete-batch"
        return await self._request("POST", path, json=record_ids)

    async def search(
        self, index: str, filter: str, limit: int, query: str = ""
    ) -> list[dict[str, Any]]:
        """Run a filtered search and return the hits.

        Args:
            index: Index name
            filter: Filter expression, e.g. ``doc_id = "acme_corp"``
            limit: Maximum number of hits
            query: Optional full-text query (empty matches everything)

        Returns:
            List of hit records (at most ``limit``)
        """
        data = await self._request(
            "POST",
            f"/indexes/{_segment(index)}/search",
            json={"q": query, "filter": filter, "limit": limit},
        )
        hits = data.get("hits", [])
        return hits if isinstance(hits, list) else []

    async def delete_index(self, index: str) -> dict[str, Any]:
        """Drop an entire index."""
        return await self._request("DELETE", f"/indexes/{_segment(index)}")

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
    ) -> dict[str, Any]:
        """Execute HTTP request with error handling.

        Args:
            method: HTTP method
            path: Request path relative to the base URL
            json: Optional JSON body

        Returns:
            Decoded JSON object (empty dict for empty or non-object bodies)

        Raises:
            SearchServiceConnectionError: Connection/timeout issues
            SearchServiceAPIError: Non-2xx status code
        """
        with tracer.start_as_current_span(
            "search_service.request",
            attributes={"http.method": method, "search_service.path": path},
        ) as span:
            try:
                response = await self._client.request(method, path, json=json)
            except httpx.TransportError as e:
                span.record_exception(e)
                raise SearchServiceConnectionError(
                    self.base_url, original_error=e
                ) from e

            span.set_attribute("http.status_code", response.status_code)
            logger.debug(f"{method} {path} -> {response.status_code}")

            if not response.is_success:
                detail = None
                with contextlib.suppress(ValueError, AttributeError):
                    detail = response.json().get("message")
                raise SearchServiceAPIError(
                    str(response.request.url), response.status_code, detail
                )

            if not response.content:
                return {}
            with contextlib.suppress(ValueError):
                data = response.json()
                if isinstance(data, dict):
                    return data
            return {}


def _segment(value: str) -> str:
    # Identifiers go into URL paths verbatim; escape anything path-unsafe
    return quote(value, safe="")
