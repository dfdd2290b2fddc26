"""
Tests for the seed script: CSV parsing and the import flow with the
database layer monkeypatched.
"""

from __future__ import annotations

import pytest

import seed
from auth import repository as auth_repository
from auth import security
from core import db
from favorites import repository as favorites_repository
from preferences import repository as preferences_repository
from quotes import repository as quotes_repository


def write_csv(tmp_path, lines: list[str]):
    path = tmp_path / "quotes.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_read_quotes_csv_trims_and_drops_blank_rows(tmp_path) -> None:
    path = write_csv(
        tmp_path,
        [
            "Author,Quote",
            "  Seneca , Luck is what happens when preparation meets opportunity. ",
            ",No author here",
            "Nobody,",
            "   ,   ",
            '"Twain, Mark","Get your facts first, then distort them as you please."',
        ],
    )

    quotes = seed.read_quotes_csv(path)

    assert quotes == [
        ("Luck is what happens when preparation meets opportunity.", "Seneca"),
        ("Get your facts first, then distort them as you please.", "Twain, Mark"),
    ]


def test_read_quotes_csv_without_rows(tmp_path) -> None:
    path = write_csv(tmp_path, ["Author,Quote"])
    assert seed.read_quotes_csv(path) == []


@pytest.mark.asyncio
async def test_seed_imports_in_batches_and_creates_demo_data(tmp_path, monkeypatch) -> None:
    path = write_csv(tmp_path, ["Author,Quote"] + [f"Author {i},Quote {i}" for i in range(250)])
    calls: dict[str, list] = {
        "pool": [],
        "executed": [],
        "users": [],
        "preferences": [],
        "batches": [],
        "custom": [],
        "favorites": [],
    }

    async def init_pool():
        calls["pool"].append("init")

    async def apply_schema():
        calls["pool"].append("schema")

    async def close_pool():
        calls["pool"].append("close")

    async def execute(query, *args):
        calls["executed"].append(query)
        return "DELETE 0"

    async def create_user(*, email, password_hash, name=None):
        calls["users"].append((email, password_hash, name))
        return {"id": 42, "email": email}

    async def upsert_preferences(user_id, values):
        calls["preferences"].append((user_id, values))
        return values

    async def insert_preloaded_quotes(rows):
        calls["batches"].append(list(rows))

    async def create_custom_quote(*, user_id, text, author, category, source):
        calls["custom"].append((user_id, text, author))
        return {"id": f"c{len(calls['custom'])}"}

    async def first_preloaded_ids(limit):
        return [f"p{i}" for i in range(limit)]

    async def add_favorites(user_id, quote_ids):
        calls["favorites"].append((user_id, list(quote_ids)))

    monkeypatch.setattr(db, "init_pool", init_pool)
    monkeypatch.setattr(db, "apply_schema", apply_schema)
    monkeypatch.setattr(db, "close_pool", close_pool)
    monkeypatch.setattr(db, "execute", execute)
    monkeypatch.setattr(security, "hash_password", lambda plain: f"hashed:{plain}")
    monkeypatch.setattr(auth_repository, "create_user", create_user)
    monkeypatch.setattr(preferences_repository, "upsert_preferences", upsert_preferences)
    monkeypatch.setattr(quotes_repository, "insert_preloaded_quotes", insert_preloaded_quotes)
    monkeypatch.setattr(quotes_repository, "create_custom_quote", create_custom_quote)
    monkeypatch.setattr(quotes_repository, "first_preloaded_ids", first_preloaded_ids)
    monkeypatch.setattr(favorites_repository, "add_favorites", add_favorites)

    await seed.seed(path)

    assert calls["pool"] == ["init", "schema", "close"]
    assert len(calls["executed"]) == 4
    assert all(query.startswith("DELETE FROM") for query in calls["executed"])
    assert calls["users"] == [(seed.DEMO_EMAIL, f"hashed:{seed.DEMO_PASSWORD}", "Demo User")]
    assert [user_id for user_id, _ in calls["preferences"]] == [42]

    assert [len(batch) for batch in calls["batches"]] == [100, 100, 50]
    assert calls["batches"][0][0] == ("Quote 0", "Author 0")
    assert calls["batches"][-1][-1] == ("Quote 249", "Author 249")

    assert len(calls["custom"]) == len(seed.DEMO_CUSTOM_QUOTES)
    assert all(user_id == 42 for user_id, _, _ in calls["custom"])
    assert calls["favorites"] == [(42, ["p0", "p1", "p2", "p3", "p4"])]


@pytest.mark.asyncio
async def test_seed_closes_pool_when_import_fails(tmp_path, monkeypatch) -> None:
    path = write_csv(tmp_path, ["Author,Quote", "Someone,Something"])
    closed = []

    async def noop(*args, **kwargs):
        return None

    async def close_pool():
        closed.append(True)

    async def create_user(**kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(db, "init_pool", noop)
    monkeypatch.setattr(db, "apply_schema", noop)
    monkeypatch.setattr(db, "execute", noop)
    monkeypatch.setattr(db, "close_pool", close_pool)
    monkeypatch.setattr(security, "hash_password", lambda plain: "hashed")
    monkeypatch.setattr(auth_repository, "create_user", create_user)

    with pytest.raises(RuntimeError):
        await seed.seed(path)
    assert closed == [True]
