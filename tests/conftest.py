"""Pytest configuration and shared fixtures for ftxindex tests."""

import json
import os
import re
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import httpx
import pytest
import pytest_asyncio

from ftxindex.config.settings import ServiceConfig
from ftxindex.services.search_client import SearchServiceClient

TEST_API_KEY = "test-key"

_FILTER_RE = re.compile(r'^(\w+) = "(.*)"$')


class FakeSearchService:
    """In-memory stand-in for the search service REST API.

    Implements just enough of the index, document, settings and search
    endpoints for the ingest and cascade flows. Index creation and deletes
    complete synchronously, so state is observable right after a call.

    Attributes:
        indexes: Index name -> {"primaryKey", "settings", "documents"}
        requests: (method, path) of every request received
        failures: (method, path) -> (status, message) to answer with instead
    """

    def __init__(self) -> None:
        self.indexes: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], tuple[int, str]] = {}
        self._task_uid = 0

    def fail(self, method: str, path: str, status: int = 500, message: str = "boom") -> None:
        """Answer ``method path`` with an error from now on."""
        self.failures[(method, path)] = (status, message)

    def documents(self, index: str) -> dict[str, dict[str, Any]]:
        """Stored records of an index keyed by primary key."""
        return self.indexes.get(index, {}).get("documents", {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.requests.append((method, path))

        if request.headers.get("Authorization") != f"Bearer {TEST_API_KEY}":
            return self._error(401, "The provided API key is invalid.")
        if (method, path) in self.failures:
            status, message = self.failures[(method, path)]
            return self._error(status, message)

        body = json.loads(request.content) if request.content else None
        parts = path.strip("/").split("/")
        if parts[0] != "indexes":
            return self._error(404, "Route not found")

        if len(parts) == 1 and method == "POST":
            return self._create_index(body["uid"], body.get("primaryKey"))

        name = parts[1]
        rest = parts[2:]
        if not rest:
            if method == "GET":
                if name not in self.indexes:
                    return self._index_not_found(name)
                return httpx.Response(
                    200, json={"uid": name, "primaryKey": self.indexes[name]["primaryKey"]}
                )
            if method == "DELETE":
                if name not in self.indexes:
                    return self._index_not_found(name)
                del self.indexes[name]
                return self._task()

        if rest[0] == "settings" and method == "PUT":
            index = self.indexes.setdefault(name, self._new_index(None))
            index["settings"][rest[1]] = body
            return self._task()

        if rest == ["documents"] and method == "POST":
            return self._add_documents(name, body)

        if name not in self.indexes:
            return self._index_not_found(name)
        index = self.indexes[name]

        if rest == ["documents", "delete-batch"] and method == "POST":
            for record_id in body:
                index["documents"].pop(str(record_id), None)
            return self._task()

        if rest[0] == "documents" and len(rest) == 2 and method == "DELETE":
            index["documents"].pop(rest[1], None)
            return self._task()

        if rest == ["search"] and method == "POST":
            return self._search(index, body)

        return self._error(404, "Route not found")

    def _create_index(self, name: str, primary_key: str | None) -> httpx.Response:
        if name in self.indexes:
            return self._error(409, f"Index `{name}` already exists.")
        self.indexes[name] = self._new_index(primary_key)
        return self._task()

    def _add_documents(self, name: str, records: list[dict[str, Any]]) -> httpx.Response:
        index = self.indexes.setdefault(name, self._new_index(None))
        key = index["primaryKey"]
        for record in records:
            index["documents"][str(record[key])] = record
        return self._task()

    def _search(self, index: dict[str, Any], body: dict[str, Any]) -> httpx.Response:
        hits = list(index["documents"].values())
        match = _FILTER_RE.match(body.get("filter") or "")
        if match:
            field, value = match.groups()
            hits = [h for h in hits if str(h.get(field)) == value]
        limit = body.get("limit", 20)
        return httpx.Response(200, json={"hits": hits[:limit], "query": body.get("q", "")})

    @staticmethod
    def _new_index(primary_key: str | None) -> dict[str, Any]:
        return {"primaryKey": primary_key, "settings": {}, "documents": {}}

    def _task(self) -> httpx.Response:
        self._task_uid += 1
        return httpx.Response(202, json={"taskUid": self._task_uid, "status": "enqueued"})

    def _index_not_found(self, name: str) -> httpx.Response:
        return self._error(404, f"Index `{name}` not found.")

    @staticmethod
    def _error(status: int, message: str) -> httpx.Response:
        return httpx.Response(status, json={"message": message, "code": "fake_error"})


@pytest.fixture
def isolated_env() -> Generator[dict[str, str]]:
    """Provide isolated environment variables for testing.

    Saves current environment and restores after test.

    Yields:
        Dictionary of original environment variables
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def fake_service() -> FakeSearchService:
    """Empty in-memory search service."""
    return FakeSearchService()


@pytest.fixture
def service_config() -> ServiceConfig:
    """Connection settings matching the fake service's API key."""
    return ServiceConfig(api_key=TEST_API_KEY)


@pytest.fixture
def client_factory(
    fake_service: FakeSearchService,
) -> Callable[[ServiceConfig], SearchServiceClient]:
    """Build SearchServiceClients wired to the fake service."""

    def _create(config: ServiceConfig) -> SearchServiceClient:
        return SearchServiceClient(config, transport=httpx.MockTransport(fake_service.handler))

    return _create


@pytest_asyncio.fixture
async def client(
    client_factory: Callable[[ServiceConfig], SearchServiceClient],
    service_config: ServiceConfig,
) -> AsyncGenerator[SearchServiceClient]:
    """SearchServiceClient talking to the fake service."""
    async with client_factory(service_config) as search_client:
        yield search_client


# Configure pytest
def pytest_configure(config: Any) -> None:
    """Configure pytest with marker options."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests",
    )
