# tests/unit/http/test_api_client.py

import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest

from pinecone_kit.errors import ErrorDetail, PineconeError
from pinecone_kit.http import ApiClient

BASE_URL = "https://test-index.svc.pinecone.io"


def _api(handler, **kwargs) -> ApiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ApiClient(
        api_key="test-key", base_url=BASE_URL, http_client=http_client, **kwargs
    )


class TestApiClient:
    @pytest.mark.asyncio
    async def test_prefixes_path_and_sends_api_key(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        api = _api(handler)
        response = await api.post("vectors/upsert", json={"vectors": []})

        assert response.json() == {"ok": True}
        assert str(seen[0].url) == f"{BASE_URL}/vectors/upsert"
        assert seen[0].headers["Api-Key"] == "test-key"
        assert json.loads(seen[0].content) == {"vectors": []}

    @pytest.mark.asyncio
    async def test_trailing_slash_on_base_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        api = ApiClient(
            api_key="k", base_url=f"{BASE_URL}/", http_client=http_client
        )
        await api.get("vectors/fetch", params=[("ids", "a")])

        assert str(seen[0].url) == f"{BASE_URL}/vectors/fetch?ids=a"

    @pytest.mark.asyncio
    async def test_structured_error_becomes_pinecone_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={
                    "code": 3,
                    "message": "Vector dimension 2 does not match the index",
                    "details": [{"typeUrl": "type.googleapis.com/x", "value": "v"}],
                },
            )

        api = _api(handler)

        with pytest.raises(PineconeError) as exc_info:
            await api.post("vectors/upsert", json={})

        error = exc_info.value
        assert error.message == "Vector dimension 2 does not match the index"
        assert error.code == 3
        assert error.status == 400
        assert error.details == [
            ErrorDetail(type_url="type.googleapis.com/x", value="v")
        ]
        assert isinstance(error.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "details", ["oops", {"typeUrl": "t"}, [1, 2]], ids=["str", "dict", "ints"]
    )
    async def test_malformed_details_reraise_transport_error(
        self, details: object, caplog: pytest.LogCaptureFixture
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400, json={"message": "bad", "code": 3, "details": details}
            )

        api = _api(handler)

        with caplog.at_level(logging.ERROR, logger="pinecone_kit.http"):
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await api.post("vectors/upsert", json={})

        assert exc_info.value.response.status_code == 400
        assert "Unexpected error details" in caplog.text

    @pytest.mark.asyncio
    async def test_details_are_optional(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"code": 5, "message": "Not found"})

        api = _api(handler)

        with pytest.raises(PineconeError) as exc_info:
            await api.get("vectors/fetch")

        assert exc_info.value.details is None
        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_unparseable_body_reraises_transport_error(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        api = _api(handler)

        with caplog.at_level(logging.ERROR, logger="pinecone_kit.http"):
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await api.post("query", json={})

        assert exc_info.value.response.status_code == 502
        assert "Failed reading HTTPError response body" in caplog.text

    @pytest.mark.asyncio
    async def test_body_without_message_reraises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        api = _api(handler)

        with pytest.raises(httpx.HTTPStatusError):
            await api.post("query", json={})

    @pytest.mark.asyncio
    async def test_empty_body_reraises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        api = _api(handler)

        with pytest.raises(httpx.HTTPStatusError):
            await api.delete("databases/idx")

    @pytest.mark.asyncio
    async def test_network_error_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api = _api(handler)

        with pytest.raises(httpx.ConnectError):
            await api.post("query", json={})

    @pytest.mark.asyncio
    async def test_error_counter_incremented(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"code": 8, "message": "Too many"})

        metrics_hook = MagicMock()
        api = _api(handler, metrics_hook=metrics_hook)

        with pytest.raises(PineconeError):
            await api.post("query", json={})

        metrics_hook.increment.assert_called_once_with(
            "pinecone_errors_total", labels={"status": "429"}
        )

    @pytest.mark.asyncio
    async def test_extend_uses_new_base_url_and_same_credentials(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, text="created")

        api = _api(handler)
        controller = api.extend(base_url="https://controller.us-east1-gcp.pinecone.io")
        await controller.post("databases", json={"name": "idx"})

        assert controller.base_url == "https://controller.us-east1-gcp.pinecone.io"
        assert api.base_url == BASE_URL
        assert str(seen[0].url) == "https://controller.us-east1-gcp.pinecone.io/databases"
        assert seen[0].headers["Api-Key"] == "test-key"

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_client_open(self) -> None:
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200))
        )
        api = ApiClient(api_key="k", base_url=BASE_URL, http_client=http_client)

        await api.aclose()

        assert not http_client.is_closed
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_closes_owned_client(self) -> None:
        api = ApiClient(api_key="k", base_url=BASE_URL)

        await api.aclose()

        assert api._http.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_has_no_timeout(self) -> None:
        api = ApiClient(api_key="k", base_url=BASE_URL)

        timeout = api._http.timeout
        assert timeout.connect is None
        assert timeout.read is None
        assert timeout.write is None
        assert timeout.pool is None

        await api.aclose()
