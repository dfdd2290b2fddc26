"""
Shared fixtures: fake quote rows, an in-memory quote provider, and an API
client with authentication stubbed out.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from delivery.client import QuoteApiError
from delivery.records import QuoteRecord
from main import app

CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)

TEST_USER = {
    "id": 7,
    "email": "reader@example.com",
    "name": "Reader",
    "password_hash": "",
    "is_active": True,
    "created_at": CREATED_AT,
    "updated_at": CREATED_AT,
}


def make_quote_row(quote_id: str, **overrides) -> dict:
    row = {
        "id": quote_id,
        "text": f"Quote text {quote_id}",
        "author": f"Author {quote_id}",
        "category": None,
        "source": None,
        "is_preloaded": True,
        "is_favorited": False,
        "created_at": CREATED_AT,
        "updated_at": CREATED_AT,
    }
    row.update(overrides)
    return row


def make_record(quote_id: str, **overrides) -> QuoteRecord:
    return QuoteRecord.model_validate(make_quote_row(quote_id, **overrides))


class FakeQuoteProvider:
    """
    In-memory `QuoteProvider` that records every call.

    `missing` ids are listed by `list_ids` but never returned by
    `fetch_batch`, like quotes deleted after the id list was loaded.
    """

    def __init__(self, count: int = 30, *, ids: list[str] | None = None, missing=()) -> None:
        self.ids = list(ids) if ids is not None else [f"q{i:03d}" for i in range(count)]
        self.records = {quote_id: make_record(quote_id) for quote_id in self.ids}
        self.missing = set(missing)
        self.list_calls: list[tuple[str, str | None]] = []
        self.batch_calls: list[list[str]] = []
        self.favorite_calls: list[tuple[str, str]] = []
        self.fail_batches = 0
        self.fail_favorites = False

    async def list_ids(self, *, source: str = "BOTH", category: str | None = None) -> list[str]:
        self.list_calls.append((source, category))
        return list(self.ids)

    async def fetch_batch(self, ids: list[str]) -> list[QuoteRecord]:
        self.batch_calls.append(list(ids))
        if self.fail_batches:
            self.fail_batches -= 1
            raise QuoteApiError("POST /quotes/batch failed: 500", status_code=500)
        return [self.records[i] for i in ids if i in self.records and i not in self.missing]

    async def add_favorite(self, quote_id: str) -> None:
        self.favorite_calls.append(("add", quote_id))
        if self.fail_favorites:
            raise QuoteApiError("POST /favorites failed: 500", status_code=500)

    async def remove_favorite(self, quote_id: str) -> None:
        self.favorite_calls.append(("remove", quote_id))
        if self.fail_favorites:
            raise QuoteApiError("DELETE /favorites failed: 500", status_code=500)

    @property
    def requested_ids(self) -> list[str]:
        return [quote_id for call in self.batch_calls for quote_id in call]


@pytest.fixture
def provider() -> FakeQuoteProvider:
    return FakeQuoteProvider()


@pytest.fixture
def api_client():
    """
    TestClient with the current user fixed to TEST_USER. The lifespan (and
    so the DB pool) is not started; tests monkeypatch repository functions.
    """
    app.dependency_overrides[auth_dependencies.get_current_user] = lambda: dict(TEST_USER)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    app.dependency_overrides.clear()
    return TestClient(app)
