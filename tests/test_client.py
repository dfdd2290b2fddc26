"""
QuoteApiClient against an in-memory API (httpx.MockTransport).
"""

from __future__ import annotations

import json
import random

import httpx
import pytest

from conftest import make_quote_row
from delivery.client import QuoteApiClient, QuoteApiError
from delivery.feed import QuoteFeed

BASE_URL = "http://quotes.test"


def serialize(row: dict) -> dict:
    out = dict(row)
    out["created_at"] = row["created_at"].isoformat()
    out["updated_at"] = row["updated_at"].isoformat()
    return out


class FakeQuoteApi:
    def __init__(self, count: int = 12) -> None:
        self.rows = {f"q{i}": make_quote_row(f"q{i}") for i in range(count)}
        self.favorites: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/login":
            body = json.loads(request.content)
            if body["password"] != "demo123":
                return httpx.Response(401, json={"detail": "Invalid email or password."})
            return httpx.Response(200, json={"user": {"id": 1}, "access_token": "tok", "token_type": "bearer"})

        if request.headers.get("Authorization") != "Bearer tok":
            return httpx.Response(401, json={"detail": "Missing Authorization header."})

        if path == "/quotes/ids":
            ids = list(self.rows)
            return httpx.Response(200, json={"ids": ids, "total": len(ids)})
        if path == "/quotes/batch":
            ids = json.loads(request.content)["ids"]
            if len(ids) > 50:
                return httpx.Response(422, json={"detail": "too many ids"})
            quotes = [
                serialize({**self.rows[i], "is_favorited": i in self.favorites})
                for i in ids
                if i in self.rows
            ]
            return httpx.Response(200, json={"quotes": quotes})
        if path == "/favorites" and request.method == "POST":
            quote_id = json.loads(request.content)["quote_id"]
            self.favorites.add(quote_id)
            return httpx.Response(201, json={"quote_id": quote_id, "is_favorited": True})
        if path.startswith("/favorites/") and request.method == "DELETE":
            quote_id = path.rsplit("/", 1)[1]
            if quote_id not in self.favorites:
                return httpx.Response(404, json={"detail": "Favorite not found."})
            self.favorites.discard(quote_id)
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404, json={"detail": "Not Found"})


def make_client(api: FakeQuoteApi, token: str | None = "tok") -> QuoteApiClient:
    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(api.handler))
    return QuoteApiClient(BASE_URL, token=token, client=http)


def test_empty_base_url_is_rejected() -> None:
    with pytest.raises(QuoteApiError):
        QuoteApiClient("  ")


@pytest.mark.asyncio
async def test_login_stores_token() -> None:
    api = FakeQuoteApi()
    client = make_client(api, token=None)

    await client.login("demo@example.com", "demo123")

    assert client.token == "tok"
    assert await client.list_ids() == list(api.rows)


@pytest.mark.asyncio
async def test_failed_login_raises_with_status() -> None:
    client = make_client(FakeQuoteApi(), token=None)
    with pytest.raises(QuoteApiError) as excinfo:
        await client.login("demo@example.com", "wrong")
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_list_ids_sends_selector_and_bearer_token() -> None:
    api = FakeQuoteApi()
    client = make_client(api)

    await client.list_ids(source="FAVORITES", category="wisdom")

    request = api.requests[-1]
    assert request.url.params["source"] == "FAVORITES"
    assert request.url.params["category"] == "wisdom"
    assert request.headers["Authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_fetch_batch_splits_large_requests() -> None:
    api = FakeQuoteApi(count=120)
    client = make_client(api)

    records = await client.fetch_batch(list(api.rows))

    batch_sizes = [len(json.loads(r.content)["ids"]) for r in api.requests]
    assert batch_sizes == [50, 50, 20]
    assert [r.id for r in records] == list(api.rows)


@pytest.mark.asyncio
async def test_fetch_batch_with_no_ids_makes_no_request() -> None:
    api = FakeQuoteApi()
    assert await make_client(api).fetch_batch([]) == []
    assert api.requests == []


@pytest.mark.asyncio
async def test_error_status_raises_quote_api_error() -> None:
    api = FakeQuoteApi()
    client = make_client(api)
    with pytest.raises(QuoteApiError) as excinfo:
        await client.remove_favorite("q1")
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_transport_failure_raises_quote_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    client = QuoteApiClient(BASE_URL, token="tok", client=http)

    with pytest.raises(QuoteApiError) as excinfo:
        await client.list_ids()
    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_feed_over_http_client() -> None:
    api = FakeQuoteApi(count=12)
    async with make_client(api) as client:
        feed = QuoteFeed(client, batch_size=5, prefetch_threshold=2, rng=random.Random(9))

        first = await feed.start()
        seen = [first.id]
        for _ in range(11):
            quote = await feed.next_quote()
            await feed.wait_idle()
            seen.append(quote.id)

        assert sorted(seen) == sorted(api.rows)
        batch_requests = [r for r in api.requests if r.url.path == "/quotes/batch"]
        assert len(batch_requests) == 3

        current = feed.current
        toggled = await feed.toggle_favorite(current.id)
        assert toggled.is_favorited is True
        assert current.id in api.favorites
        await feed.aclose()
