"""
Favorite toggling.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from quotes import repository as quotes_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


async def list_favorites(*, user_id: int) -> schemas.FavoritesResponse:
    rows = await repository.list_favorites(user_id)
    favorites = [
        schemas.FavoriteQuote(
            id=str(row["id"]),
            text=str(row["text"]),
            author=str(row["author"]),
            category=row.get("category"),
            source=row.get("source"),
            is_preloaded=bool(row["is_preloaded"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            favorited_at=row["favorited_at"],
        )
        for row in rows
    ]
    return schemas.FavoritesResponse(favorites=favorites, count=len(favorites))


async def add_favorite(quote_id: str, *, user_id: int) -> dict:
    quote_id = (quote_id or "").strip()
    if not await quotes_repository.is_visible(quote_id, user_id=user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found.")

    row = await repository.add_favorite(user_id=user_id, quote_id=quote_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Quote already favorited.")

    logger.info("favorite_added quote_id=%s user_id=%s", quote_id, user_id)
    return {
        "quote_id": str(row["quote_id"]),
        "is_favorited": True,
        "favorited_at": row["created_at"],
    }


async def remove_favorite(quote_id: str, *, user_id: int) -> dict:
    removed = await repository.remove_favorite(user_id=user_id, quote_id=quote_id)
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Favorite not found.")

    logger.info("favorite_removed quote_id=%s user_id=%s", quote_id, user_id)
    return {"ok": True, "quote_id": quote_id, "is_favorited": False}
