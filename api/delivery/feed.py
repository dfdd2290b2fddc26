"""
Client-side quote feed: shuffle once, fetch bodies lazily in batches.

Strategy:
1. Load all quote ids once (`QuoteProvider.list_ids`).
2. Shuffle them locally (Fisher-Yates).
3. Fetch bodies by id in batches (`QuoteProvider.fetch_batch`), starting with
   the first window and topping up in the background when the cached run
   ahead of the cursor gets short.
4. When the shuffle is exhausted, reshuffle the same ids; bodies stay cached,
   so later passes cost no requests at all.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator
from typing import Any

from quotes.schemas import MAX_BATCH_IDS

from .client import QuoteApiError
from .records import FeedStats, QuoteProvider, QuoteRecord
from .shuffle import next_batch, shuffle_ids

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20
DEFAULT_PREFETCH_THRESHOLD = 5


class QuoteFeed:
    def __init__(
        self,
        provider: QuoteProvider,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        prefetch_threshold: int = DEFAULT_PREFETCH_THRESHOLD,
        source: str = "BOTH",
        category: str | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if not 1 <= batch_size <= MAX_BATCH_IDS:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_IDS}.")
        if prefetch_threshold < 0:
            raise ValueError("prefetch_threshold must be >= 0.")

        self._provider = provider
        self._batch_size = batch_size
        self._prefetch_threshold = prefetch_threshold
        self._source = source
        self._category = category
        self._rng = rng or random.Random()

        self._all_ids: list[str] = []
        self._shuffled: list[str] = []
        self._position = 0
        self._cache: dict[str, QuoteRecord] = {}
        # Ids already sent to fetch_batch, whether or not a body came back.
        self._requested: set[str] = set()
        self._current: QuoteRecord | None = None
        self._initialized = False
        self._reshuffles = 0

        self._generation = 0
        self._inflight = 0
        self._fetch_lock = asyncio.Lock()
        self._prefetch_task: asyncio.Task | None = None

    async def __aenter__(self) -> QuoteFeed:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def current(self) -> QuoteRecord | None:
        return self._current

    @property
    def is_loading(self) -> bool:
        prefetching = self._prefetch_task is not None and not self._prefetch_task.done()
        return self._inflight > 0 or prefetching

    @property
    def stats(self) -> FeedStats:
        return FeedStats(
            total_quotes=len(self._all_ids),
            cached_quotes=len(self._cache),
            current_position=self._position,
            remaining_in_shuffle=max(0, len(self._shuffled) - self._position),
            reshuffles=self._reshuffles,
        )

    async def start(self) -> QuoteRecord | None:
        """
        Load and shuffle the id list, fetch the first batch, show the first
        quote. Calling it again once started returns the current quote, or
        retries the first quote if the first batch failed.
        """
        if self._initialized:
            if self._current is None and self._shuffled:
                return await self._advance()
            return self._current

        ids = await self._provider.list_ids(source=self._source, category=self._category)
        self._all_ids = list(dict.fromkeys(ids))
        self._shuffled = shuffle_ids(self._all_ids, self._rng)
        self._position = 0
        self._initialized = True
        logger.info(
            "quote_feed_started total=%s source=%s category=%s",
            len(self._all_ids),
            self._source,
            self._category,
        )

        if not self._shuffled:
            return None
        await self._fetch(next_batch(self._shuffled, 0, self._batch_size))
        return await self._advance()

    async def next_quote(self) -> QuoteRecord | None:
        if not self._initialized:
            return await self.start()
        if not self._shuffled:
            return None
        return await self._advance()

    async def toggle_favorite(self, quote_id: str) -> QuoteRecord | None:
        """
        Flip the favorite flag optimistically, then persist it.

        On failure the cached record is restored and the error re-raised.
        Quotes that are not cached are ignored.
        """
        quote = self._cache.get(quote_id)
        if quote is None:
            return None

        updated = quote.model_copy(update={"is_favorited": not quote.is_favorited})
        self._replace(updated)
        try:
            if updated.is_favorited:
                await self._provider.add_favorite(quote_id)
            else:
                await self._provider.remove_favorite(quote_id)
        except Exception:
            if self._cache.get(quote_id) is updated:
                self._replace(quote)
            logger.warning("favorite_toggle_reverted quote_id=%s", quote_id)
            raise
        return updated

    async def reset(self) -> QuoteRecord | None:
        """
        Forget everything (ids, order, cached bodies) and start over.

        Used when the quote set changed, e.g. a quote was added or the
        source preference was switched.
        """
        await self._cancel_prefetch()
        self._generation += 1
        self._all_ids = []
        self._shuffled = []
        self._position = 0
        self._cache = {}
        self._requested = set()
        self._current = None
        self._initialized = False
        self._reshuffles = 0
        logger.info("quote_feed_reset source=%s category=%s", self._source, self._category)
        return await self.start()

    async def reconfigure(self, *, source: str = "BOTH", category: str | None = None) -> QuoteRecord | None:
        self._source = source
        self._category = category
        return await self.reset()

    async def rotate(self, interval_s: float) -> AsyncIterator[QuoteRecord]:
        """
        Yield the current quote, then a fresh one every `interval_s` seconds.
        """
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0.")

        quote = self._current if self._initialized else await self.start()
        if quote is None:
            quote = await self.next_quote()
        while quote is not None:
            yield quote
            await asyncio.sleep(interval_s)
            quote = await self.next_quote()

    async def wait_idle(self) -> None:
        """
        Wait for an in-flight background prefetch to finish.
        """
        await self._wait_for_prefetch()

    async def aclose(self) -> None:
        await self._cancel_prefetch()

    async def _advance(self) -> QuoteRecord | None:
        quote = await self._scan(self._position)
        if quote is None and self._cache:
            # Nothing displayable left in this pass.
            self._reshuffle()
            quote = await self._scan(0)
        return quote

    async def _scan(self, start: int) -> QuoteRecord | None:
        for index in range(start, len(self._shuffled)):
            quote_id = self._shuffled[index]
            if quote_id not in self._cache and quote_id not in self._requested:
                await self._wait_for_prefetch()
                if quote_id not in self._requested:
                    await self._fetch(self._unrequested_window(index))

            quote = self._cache.get(quote_id)
            if quote is None:
                # Deleted or no longer visible.
                continue

            self._current = quote
            self._position = index + 1
            if self._position >= len(self._shuffled):
                self._reshuffle()
            else:
                self._schedule_prefetch()
            return quote
        return None

    def _reshuffle(self) -> None:
        self._shuffled = shuffle_ids(self._all_ids, self._rng)
        self._position = 0
        self._reshuffles += 1
        logger.info("quote_feed_reshuffled total=%s pass=%s", len(self._all_ids), self._reshuffles)

    def _unrequested_window(self, index: int) -> list[str]:
        return [
            quote_id
            for quote_id in next_batch(self._shuffled, index, self._batch_size)
            if quote_id not in self._requested
        ]

    def _prefetch_window(self) -> list[str]:
        cached_ahead = 0
        for index in range(self._position, len(self._shuffled)):
            quote_id = self._shuffled[index]
            if quote_id not in self._requested:
                return self._unrequested_window(index)
            if quote_id in self._cache:
                cached_ahead += 1
                if cached_ahead > self._prefetch_threshold:
                    return []
        return []

    def _schedule_prefetch(self) -> None:
        if self._prefetch_task is not None:
            if not self._prefetch_task.done():
                return
            self._reap_prefetch()
        window = self._prefetch_window()
        if not window:
            return
        self._prefetch_task = asyncio.create_task(self._prefetch(window))

    async def _prefetch(self, ids: list[str]) -> None:
        """
        Background entrypoint. Failures are logged, not raised: the ids stay
        unrequested, so the next foreground advance fetches them again.
        """
        try:
            await self._fetch(ids)
        except QuoteApiError:
            logger.warning("quote_prefetch_failed count=%s", len(ids), exc_info=True)

    async def _wait_for_prefetch(self) -> None:
        task = self._prefetch_task
        if task is None:
            return
        if not task.done():
            await asyncio.wait([task])
        self._reap_prefetch()

    def _reap_prefetch(self) -> None:
        """
        Drop a finished prefetch task, re-raising anything it did not handle.
        """
        task = self._prefetch_task
        self._prefetch_task = None
        if task is not None and not task.cancelled():
            task.result()

    async def _cancel_prefetch(self) -> None:
        task = self._prefetch_task
        self._prefetch_task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait([task])

    async def _fetch(self, ids: list[str]) -> int:
        async with self._fetch_lock:
            ids = [quote_id for quote_id in ids if quote_id not in self._requested]
            if not ids:
                return 0

            generation = self._generation
            self._inflight += 1
            try:
                records = await self._provider.fetch_batch(ids)
            finally:
                self._inflight -= 1

            if generation != self._generation:
                # reset() ran while this batch was in flight.
                return 0

            self._requested.update(ids)
            for record in records:
                self._cache[record.id] = record
            logger.debug(
                "quote_batch_fetched requested=%s returned=%s cached=%s",
                len(ids),
                len(records),
                len(self._cache),
            )
            return len(records)

    def _replace(self, record: QuoteRecord) -> None:
        self._cache[record.id] = record
        if self._current is not None and self._current.id == record.id:
            self._current = record
