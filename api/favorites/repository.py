"""
Favorite persistence (raw SQL).
"""

from __future__ import annotations

from core import db


async def list_favorites(user_id: int) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT q.id, q.text, q.author, q.category, q.source, q.is_preloaded,
               q.created_at, q.updated_at,
               f.created_at AS favorited_at
        FROM favorites f
        JOIN quotes q ON q.id = f.quote_id
        WHERE f.user_id = $1
        ORDER BY f.created_at DESC
        """,
        user_id,
    )


async def add_favorite(*, user_id: int, quote_id: str) -> dict | None:
    """
    Insert a favorite. Returns None if it already existed.
    """
    return await db.fetch_one(
        """
        INSERT INTO favorites (user_id, quote_id)
        VALUES ($1, $2)
        ON CONFLICT (user_id, quote_id) DO NOTHING
        RETURNING user_id, quote_id, created_at
        """,
        user_id,
        quote_id,
    )


async def remove_favorite(*, user_id: int, quote_id: str) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM favorites
        WHERE user_id = $1
          AND quote_id = $2
        RETURNING quote_id
        """,
        user_id,
        quote_id,
    )
    return row is not None


async def add_favorites(user_id: int, quote_ids: list[str]) -> None:
    await db.execute_many(
        """
        INSERT INTO favorites (user_id, quote_id)
        VALUES ($1, $2)
        ON CONFLICT (user_id, quote_id) DO NOTHING
        """,
        [(user_id, quote_id) for quote_id in quote_ids],
    )
