from __future__ import annotations

import json

import httpx
import pytest

from sharepoint_sync_adapter.adapters import ConfigurationError
from sharepoint_sync_adapter.adapters.api import APIError, SharePointClient

SITE = "https://contoso.sharepoint.com/sites/field"
LIST_ID = "6f1c1f3e-aaaa-bbbb-cccc-000000000001"
ITEMS = f"/sites/field/_api/web/lists(guid'{LIST_ID}')/items"

pytestmark = pytest.mark.anyio


class Recorder:
    """Collect requests and answer them from a route table."""

    def __init__(self, routes):  # type: ignore[no-untyped-def]
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path, request.headers.get("X-HTTP-Method"))
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, text=f"no route for {key}")
        return handler(request)


def build_client(routes, **kwargs) -> tuple[SharePointClient, Recorder]:  # type: ignore[no-untyped-def]
    recorder = Recorder(routes)
    client = SharePointClient(site_url=SITE, transport=httpx.MockTransport(recorder), **kwargs)
    return client, recorder


def digest_route(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"FormDigestValue": "0xDIGEST"})


async def test_login_stores_form_digest_and_sends_token():
    client, recorder = build_client({("POST", "/sites/field/_api/contextinfo", None): digest_route}, access_token="token")

    await client.login()

    assert client.form_digest == "0xDIGEST"
    assert recorder.requests[0].headers["Authorization"] == "Bearer token"
    assert recorder.requests[0].headers["Accept"] == "application/json;odata=nometadata"
    await client.aclose()


async def test_login_uses_basic_auth_credentials():
    client, recorder = build_client(
        {("POST", "/sites/field/_api/contextinfo", None): digest_route},
        username="evan",
        password="secret",
    )

    await client.login()

    assert recorder.requests[0].headers["Authorization"].startswith("Basic ")
    await client.aclose()


async def test_login_rejects_missing_digest():
    client, _ = build_client({("POST", "/sites/field/_api/contextinfo", None): lambda request: httpx.Response(200, json={})})

    with pytest.raises(APIError, match="FormDigestValue"):
        await client.login()


async def test_login_http_failure_raises_api_error():
    client, _ = build_client({("POST", "/sites/field/_api/contextinfo", None): lambda request: httpx.Response(401, text="denied")})

    with pytest.raises(APIError, match="HTTP 401"):
        await client.login()


async def test_transport_error_raises_api_error():
    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = SharePointClient(site_url=SITE, transport=httpx.MockTransport(broken))

    with pytest.raises(APIError, match="connection refused"):
        await client.read_item(LIST_ID, 1)


async def test_create_item_posts_fields_with_digest():
    def create(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        return httpx.Response(201, json={"Id": 7, **body})

    client, recorder = build_client(
        {
            ("POST", "/sites/field/_api/contextinfo", None): digest_route,
            ("POST", ITEMS, None): create,
        }
    )
    await client.login()

    record = await client.create_item(LIST_ID, {"Title": "evan"})

    assert record == {"Id": 7, "Title": "evan", "itemId": 7}
    request = recorder.requests[-1]
    assert request.headers["X-RequestDigest"] == "0xDIGEST"
    assert json.loads(request.content) == {"Title": "evan"}


async def test_read_item_normalises_identifier():
    client, recorder = build_client(
        {("GET", f"{ITEMS}(3)", None): lambda request: httpx.Response(200, json={"ID": 3, "odata.etag": '"1"', "Title": "a"})}
    )

    record = await client.read_item(LIST_ID, 3)

    assert record == {"ID": 3, "Title": "a", "itemId": 3}
    assert recorder.requests[0].method == "GET"


async def test_update_item_merges_then_rereads():
    client, recorder = build_client(
        {
            ("POST", f"{ITEMS}(3)", "MERGE"): lambda request: httpx.Response(204),
            ("GET", f"{ITEMS}(3)", None): lambda request: httpx.Response(200, json={"Id": 3, "Title": "b"}),
        }
    )

    record = await client.update_item(LIST_ID, {"Title": "b", "itemId": 3})

    assert record == {"Id": 3, "Title": "b", "itemId": 3}
    merge = recorder.requests[0]
    assert merge.headers["IF-MATCH"] == "*"
    assert json.loads(merge.content) == {"Title": "b"}
    assert recorder.requests[1].method == "GET"


async def test_update_item_requires_item_id():
    client, recorder = build_client({})

    with pytest.raises(APIError, match="itemId"):
        await client.update_item(LIST_ID, {"Title": "b"})
    assert recorder.requests == []


async def test_delete_item_sends_delete_override():
    client, recorder = build_client({("POST", f"{ITEMS}(3)", "DELETE"): lambda request: httpx.Response(200)})

    assert await client.delete_item(LIST_ID, 3) is None
    assert recorder.requests[0].headers["IF-MATCH"] == "*"


async def test_read_list_wraps_values_as_items():
    payload = {"value": [{"Id": 10, "Title": "a"}, {"Id": 11, "Title": "b"}]}
    client, _ = build_client({("GET", ITEMS, None): lambda request: httpx.Response(200, json=payload)})

    result = await client.read_list(LIST_ID)

    assert [item["itemId"] for item in result["Items"]] == [10, 11]


async def test_read_list_rejects_unexpected_payload():
    client, _ = build_client({("GET", ITEMS, None): lambda request: httpx.Response(200, json={"d": {}})})

    with pytest.raises(APIError, match="Unexpected payload"):
        await client.read_list(LIST_ID)


async def test_client_closes_as_context_manager():
    client, _ = build_client({("GET", ITEMS, None): lambda request: httpx.Response(200, json={"value": []})})

    async with client:
        await client.read_list(LIST_ID)
        assert client._client is not None

    assert client._client is None


def test_from_options_requires_site_url():
    with pytest.raises(ConfigurationError, match="site_url"):
        SharePointClient.from_options({"access_token": "token"})


def test_from_options_builds_client():
    client = SharePointClient.from_options({"site_url": f"{SITE}/", "access_token": "token", "timeout": 5})

    assert client.base_url == SITE
    assert client.timeout == 5.0
    assert client.default_headers["Authorization"] == "Bearer token"
