"""Unit tests for ftxindex.services.search_client."""

import json
from typing import Any

import httpx
import pytest

from ftxindex.config.settings import ServiceConfig
from ftxindex.lib.errors import SearchServiceAPIError, SearchServiceConnectionError
from ftxindex.services.search_client import SearchServiceClient, build_equality_filter


def _recording_client(
    config: ServiceConfig, response: httpx.Response, seen: list[httpx.Request]
) -> SearchServiceClient:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response

    return SearchServiceClient(config, transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestBuildEqualityFilter:
    """Tests for build_equality_filter."""

    def test_quotes_value(self) -> None:
        assert build_equality_filter("doc_id", "acme_corp") == 'doc_id = "acme_corp"'

    def test_escapes_quotes(self) -> None:
        assert build_equality_filter("doc_id", 'a"b') == 'doc_id = "a\\"b"'


@pytest.mark.unit
class TestSearchServiceClientRequests:
    """Tests for request shape sent to the service."""

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, service_config: ServiceConfig) -> None:
        seen: list[httpx.Request] = []
        async with _recording_client(
            service_config, httpx.Response(202, json={"taskUid": 1}), seen
        ) as client:
            await client.create_index("ftx_docs", "doc_id")

        request = seen[0]
        assert request.headers["Authorization"] == "Bearer test-key"
        assert request.url.path == "/indexes"
        assert json.loads(request.content) == {"uid": "ftx_docs", "primaryKey": "doc_id"}

    @pytest.mark.asyncio
    async def test_search_body_and_hits(self, service_config: ServiceConfig) -> None:
        seen: list[httpx.Request] = []
        hits: list[dict[str, Any]] = [{"File_Para_ID": "a"}]
        async with _recording_client(
            service_config, httpx.Response(200, json={"hits": hits}), seen
        ) as client:
            result = await client.search("ftx_paras", filter='doc_id = "x"', limit=1000)

        assert result == hits
        assert seen[0].url.path == "/indexes/ftx_paras/search"
        assert json.loads(seen[0].content) == {
            "q": "",
            "filter": 'doc_id = "x"',
            "limit": 1000,
        }

    @pytest.mark.asyncio
    async def test_delete_document_escapes_id(self, service_config: ServiceConfig) -> None:
        seen: list[httpx.Request] = []
        async with _recording_client(
            service_config, httpx.Response(202, json={"taskUid": 2}), seen
        ) as client:
            data = await client.delete_document("ftx_docs", "a/b c")

        assert data == {"taskUid": 2}
        assert seen[0].method == "DELETE"
        assert seen[0].url.raw_path == b"/indexes/ftx_docs/documents/a%2Fb%20c"

    @pytest.mark.asyncio
    async def test_update_setting_sends_attribute_list(
        self, service_config: ServiceConfig
    ) -> None:
        seen: list[httpx.Request] = []
        async with _recording_client(
            service_config, httpx.Response(202, json={"taskUid": 3}), seen
        ) as client:
            await client.update_setting("ftx_defs", "filterable-attributes", ["doc_id"])

        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/indexes/ftx_defs/settings/filterable-attributes"
        assert json.loads(seen[0].content) == ["doc_id"]

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self, service_config: ServiceConfig) -> None:
        async with _recording_client(service_config, httpx.Response(204), []) as client:
            assert await client.delete_index("ftx_docs") == {}


@pytest.mark.unit
class TestSearchServiceClientErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    async def test_non_success_raises_api_error(self, service_config: ServiceConfig) -> None:
        response = httpx.Response(400, json={"message": "Invalid filter", "code": "x"})
        async with _recording_client(service_config, response, []) as client:
            with pytest.raises(SearchServiceAPIError) as exc_info:
                await client.search("ftx_paras", filter="bad", limit=1)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid filter"
        assert not exc_info.value.is_not_found

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, service_config: ServiceConfig) -> None:
        response = httpx.Response(502, text="Bad Gateway")
        async with _recording_client(service_config, response, []) as client:
            with pytest.raises(SearchServiceAPIError) as exc_info:
                await client.delete_index("ftx_docs")

        assert exc_info.value.detail is None

    @pytest.mark.asyncio
    async def test_transport_error_raises_connection_error(
        self, service_config: ServiceConfig
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with SearchServiceClient(
            service_config, transport=httpx.MockTransport(handler)
        ) as client:
            with pytest.raises(SearchServiceConnectionError) as exc_info:
                await client.index_exists("ftx_docs")

        assert exc_info.value.base_url == "http://localhost:7700"

    @pytest.mark.asyncio
    async def test_index_exists(self, client: SearchServiceClient, fake_service) -> None:
        assert await client.index_exists("ftx_docs") is False
        await client.create_index("ftx_docs", "doc_id")
        assert await client.index_exists("ftx_docs") is True

    @pytest.mark.asyncio
    async def test_index_exists_propagates_other_errors(
        self, client: SearchServiceClient, fake_service
    ) -> None:
        fake_service.fail("GET", "/indexes/ftx_docs", status=500, message="internal")
        with pytest.raises(SearchServiceAPIError):
            await client.index_exists("ftx_docs")
