import json

import httpx
import pytest
import respx
from httpx import AsyncClient, Response

from gateway.services.transport import TransportClient

URL = "https://api.test/items"


@pytest.fixture
def transport():
    return TransportClient(AsyncClient(), "svc", "https://api.test/", headers={"X-Key": "secret"})


@respx.mock
@pytest.mark.asyncio
async def test_get_success(transport):
    route = respx.get(URL).mock(return_value=Response(200, json={"items": [1, 2]}))

    envelope = await transport.get("/items", {"q": "casa"})

    assert envelope.success is True
    assert envelope.status == 200
    assert envelope.data == {"items": [1, 2]}
    assert envelope.error is None
    request = route.calls.last.request
    assert request.url.params["q"] == "casa"
    assert request.headers["X-Key"] == "secret"
    assert request.headers["Content-Type"] == "application/json"


@respx.mock
@pytest.mark.asyncio
async def test_http_error_uses_body_message(transport):
    respx.get(URL).mock(return_value=Response(404, json={"message": "Hotel not found"}))

    envelope = await transport.get("items")

    assert envelope.success is False
    assert envelope.status == 404
    assert envelope.error.status == 404
    assert envelope.error.service == "svc"
    assert envelope.error.message == "Hotel not found"
    assert envelope.error.kind == "http"


@respx.mock
@pytest.mark.asyncio
async def test_http_error_default_message(transport):
    respx.get(URL).mock(return_value=Response(403, text="Forbidden"))

    envelope = await transport.get("items")

    assert envelope.error.message == "HTTP 403 Error"


@respx.mock
@pytest.mark.asyncio
async def test_get_retries_once_on_server_error(transport):
    route = respx.get(URL).mock(side_effect=[Response(503), Response(200, json=[])])

    envelope = await transport.get("items")

    assert envelope.success is True
    assert route.call_count == 2


@respx.mock
@pytest.mark.asyncio
async def test_get_gives_up_after_one_retry(transport):
    route = respx.get(URL).mock(return_value=Response(500, json={"error": "boom"}))

    envelope = await transport.get("items")

    assert envelope.status == 500
    assert envelope.error.message == "boom"
    assert route.call_count == 2


@respx.mock
@pytest.mark.asyncio
async def test_client_errors_are_not_retried(transport):
    route = respx.get(URL).mock(return_value=Response(429))

    await transport.get("items")

    assert route.call_count == 1


@respx.mock
@pytest.mark.asyncio
async def test_network_error_has_status_zero(transport):
    route = respx.get(URL).mock(side_effect=httpx.ConnectError("connection refused"))

    envelope = await transport.get("items")

    assert envelope.success is False
    assert envelope.status == 0
    assert envelope.error.kind == "network"
    assert route.call_count == 2


@respx.mock
@pytest.mark.asyncio
async def test_timeout_is_a_network_error(transport):
    respx.get(URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    envelope = await transport.get("items")

    assert envelope.status == 0


@respx.mock
@pytest.mark.asyncio
async def test_post_is_never_retried(transport):
    route = respx.post(URL).mock(return_value=Response(502))

    envelope = await transport.post("items", {"itemId": "1"})

    assert envelope.success is False
    assert route.call_count == 1
    assert json.loads(route.calls.last.request.content) == {"itemId": "1"}


@respx.mock
@pytest.mark.asyncio
async def test_non_json_body_is_malformed(transport):
    respx.get(URL).mock(return_value=Response(200, text="<html>oops</html>"))

    envelope = await transport.get("items")

    assert envelope.success is False
    assert envelope.status == 502
    assert envelope.error.kind == "malformed"


@respx.mock
@pytest.mark.asyncio
async def test_error_kind_is_not_serialized(transport):
    respx.get(URL).mock(return_value=Response(404))

    envelope = await transport.get("items")

    assert envelope.model_dump()["error"] == {"service": "svc", "message": "HTTP 404 Error", "status": 404}
