"""
Quote persistence (raw SQL).

Visibility rules shared by every query:
- PRELOADED: is_preloaded = true
- CUSTOM:    owned by the user and not preloaded
- FAVORITES: favorited by the user
- BOTH:      PRELOADED or CUSTOM
"""

from __future__ import annotations

from core import db

# $1 = source selector, $2 = user id, $3 = category (NULL = any).
_SOURCE_FILTER = """
    (
        ($1 = 'PRELOADED' AND q.is_preloaded)
        OR ($1 = 'CUSTOM' AND NOT q.is_preloaded AND q.user_id = $2)
        OR ($1 = 'BOTH' AND (q.is_preloaded OR (NOT q.is_preloaded AND q.user_id = $2)))
        OR ($1 = 'FAVORITES' AND EXISTS (
            SELECT 1 FROM favorites fv
            WHERE fv.quote_id = q.id AND fv.user_id = $2
        ))
    )
    AND ($3::text IS NULL OR q.category = $3)
"""

_QUOTE_COLUMNS = """
    q.id, q.text, q.author, q.category, q.source, q.is_preloaded,
    q.created_at, q.updated_at
"""


async def list_quote_ids(*, source: str, user_id: int, category: str | None = None) -> list[str]:
    """
    Return only ids, in creation order. This is the lightweight query the
    client shuffles locally.
    """
    rows = await db.fetch_all(
        f"""
        SELECT q.id
        FROM quotes q
        WHERE {_SOURCE_FILTER}
        ORDER BY q.created_at ASC, q.id ASC
        """,
        source,
        user_id,
        category,
    )
    return [str(row["id"]) for row in rows]


async def get_quotes_by_ids(ids: list[str], *, user_id: int) -> list[dict]:
    """
    Fetch quote bodies for `ids` with the caller's favorite flag.

    Only quotes the user can see are returned (preloaded, own, or favorited).
    """
    return await db.fetch_all(
        f"""
        SELECT {_QUOTE_COLUMNS},
               (f.quote_id IS NOT NULL) AS is_favorited
        FROM quotes q
        LEFT JOIN favorites f
          ON f.quote_id = q.id
         AND f.user_id = $2
        WHERE q.id = ANY($1::text[])
          AND (q.is_preloaded OR q.user_id = $2 OR f.quote_id IS NOT NULL)
        """,
        ids,
        user_id,
    )


async def list_quotes(
    *,
    source: str,
    user_id: int,
    category: str | None,
    limit: int,
    offset: int,
) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_QUOTE_COLUMNS},
               EXISTS (
                   SELECT 1 FROM favorites f
                   WHERE f.quote_id = q.id AND f.user_id = $2
               ) AS is_favorited
        FROM quotes q
        WHERE {_SOURCE_FILTER}
        ORDER BY q.created_at DESC, q.id DESC
        LIMIT $4 OFFSET $5
        """,
        source,
        user_id,
        category,
        limit,
        offset,
    )


async def count_quotes(*, source: str, user_id: int, category: str | None) -> int:
    value = await db.fetch_val(
        f"""
        SELECT count(*)
        FROM quotes q
        WHERE {_SOURCE_FILTER}
        """,
        source,
        user_id,
        category,
    )
    return int(value or 0)


async def is_visible(quote_id: str, *, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM quotes
        WHERE id = $1
          AND (is_preloaded OR user_id = $2)
        LIMIT 1
        """,
        quote_id,
        user_id,
    )
    return row is not None


async def create_custom_quote(
    *,
    user_id: int,
    text: str,
    author: str,
    category: str | None,
    source: str | None,
) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO quotes (text, author, category, source, user_id, is_preloaded)
        VALUES ($1, $2, $3, $4, $5, false)
        RETURNING id, text, author, category, source, is_preloaded, created_at, updated_at
        """,
        text,
        author,
        category,
        source,
        user_id,
    )
    if row is None:
        raise RuntimeError("Failed to create quote.")
    return row


async def delete_custom_quote(quote_id: str, *, user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        DELETE FROM quotes
        WHERE id = $1
          AND user_id = $2
          AND is_preloaded = false
        RETURNING id
        """,
        quote_id,
        user_id,
    )


async def insert_preloaded_quotes(rows: list[tuple[str, str]]) -> None:
    """
    Bulk insert (text, author) pairs as preloaded quotes.
    """
    await db.execute_many(
        """
        INSERT INTO quotes (text, author, is_preloaded)
        VALUES ($1, $2, true)
        """,
        rows,
    )


async def first_preloaded_ids(limit: int) -> list[str]:
    rows = await db.fetch_all(
        """
        SELECT id
        FROM quotes
        WHERE is_preloaded = true
        ORDER BY created_at ASC, id ASC
        LIMIT $1
        """,
        limit,
    )
    return [str(row["id"]) for row in rows]
