"""
Quote business logic.

The browsing client never asks the server for "a random quote". It asks for
the id list once (`quote_ids`), shuffles locally and pulls bodies through
`quotes_batch`. See `delivery/feed.py`.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException

from . import repository, schemas

logger = logging.getLogger(__name__)

MAX_PAGE_LIMIT = 100


def _normalize_category(category: str | None) -> str | None:
    return (category or "").strip() or None


def _to_quote(row: dict, *, is_favorited: bool | None = None) -> schemas.QuoteOut:
    favorited = row.get("is_favorited", False) if is_favorited is None else is_favorited
    return schemas.QuoteOut(
        id=str(row["id"]),
        text=str(row["text"]),
        author=str(row["author"]),
        category=row.get("category"),
        source=row.get("source"),
        is_preloaded=bool(row.get("is_preloaded", False)),
        is_favorited=bool(favorited),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


async def quote_ids(
    *,
    user_id: int,
    source: schemas.QuoteSource = schemas.QuoteSource.BOTH,
    category: str | None = None,
) -> schemas.QuoteIdsResponse:
    ids = await repository.list_quote_ids(
        source=source.value,
        user_id=user_id,
        category=_normalize_category(category),
    )
    return schemas.QuoteIdsResponse(ids=ids, total=len(ids))


async def quotes_batch(ids: list[str], *, user_id: int) -> schemas.BatchResponse:
    """
    Return the visible quotes among `ids`, in request order.

    Duplicates collapse to one entry; unknown ids are dropped silently so a
    client holding a stale id list keeps working.
    """
    wanted = list(dict.fromkeys(ids))

    rows = await repository.get_quotes_by_ids(wanted, user_id=user_id)
    by_id = {str(row["id"]): row for row in rows}
    quotes = [_to_quote(by_id[i]) for i in wanted if i in by_id]
    if len(quotes) < len(wanted):
        logger.debug(
            "quotes_batch_partial user_id=%s requested=%s returned=%s",
            user_id,
            len(wanted),
            len(quotes),
        )
    return schemas.BatchResponse(quotes=quotes)


async def list_quotes(
    *,
    user_id: int,
    source: schemas.QuoteSource = schemas.QuoteSource.BOTH,
    category: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> schemas.QuotePage:
    page = max(1, page)
    limit = max(1, min(limit, MAX_PAGE_LIMIT))
    category = _normalize_category(category)

    rows = await repository.list_quotes(
        source=source.value,
        user_id=user_id,
        category=category,
        limit=limit,
        offset=(page - 1) * limit,
    )
    total = await repository.count_quotes(source=source.value, user_id=user_id, category=category)
    return schemas.QuotePage(
        quotes=[_to_quote(row) for row in rows],
        total=total,
        page=page,
        limit=limit,
    )


async def create_quote(payload: schemas.CreateQuoteRequest, *, user_id: int) -> schemas.QuoteOut:
    text = payload.text.strip()
    author = payload.author.strip()
    if not text or not author:
        raise HTTPException(status_code=400, detail="Quote text and author are required.")

    row = await repository.create_custom_quote(
        user_id=user_id,
        text=text,
        author=author,
        category=_normalize_category(payload.category),
        source=(payload.source or "").strip() or None,
    )
    logger.info("quote_created id=%s user_id=%s", row["id"], user_id)
    return _to_quote(row, is_favorited=False)


async def delete_quote(quote_id: str, *, user_id: int) -> dict:
    row = await repository.delete_custom_quote(quote_id, user_id=user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Quote not found.")
    logger.info("quote_deleted id=%s user_id=%s", quote_id, user_id)
    return {"ok": True, "id": str(row["id"])}
