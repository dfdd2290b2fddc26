"""
Favorite endpoint schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from quotes.schemas import QuoteOut


class AddFavoriteRequest(BaseModel):
    quote_id: str = Field(..., min_length=1, max_length=64)


class FavoriteQuote(QuoteOut):
    is_favorited: bool = True
    favorited_at: datetime


class FavoritesResponse(BaseModel):
    favorites: list[FavoriteQuote]
    count: int
