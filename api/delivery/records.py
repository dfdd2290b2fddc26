"""
Types shared by the quote feed and its providers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from quotes.schemas import QuoteOut

# Client-side view of one quote; same wire shape as the API response.
QuoteRecord = QuoteOut


class QuoteProvider(Protocol):
    """
    The two read operations the feed is built on, plus favorite persistence.
    """

    async def list_ids(self, *, source: str = "BOTH", category: str | None = None) -> list[str]: ...

    async def fetch_batch(self, ids: list[str]) -> list[QuoteRecord]: ...

    async def add_favorite(self, quote_id: str) -> None: ...

    async def remove_favorite(self, quote_id: str) -> None: ...


@dataclass(frozen=True)
class FeedStats:
    total_quotes: int
    cached_quotes: int
    current_position: int
    remaining_in_shuffle: int
    reshuffles: int
