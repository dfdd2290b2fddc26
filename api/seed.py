"""
Seed the database with preloaded quotes and a demo account.

Usage: python seed.py [quotes.csv]

The CSV needs `Author` and `Quote` columns; rows missing either are skipped.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
from pathlib import Path

from auth import repository as auth_repository
from auth import security
from core import db, logs
from favorites import repository as favorites_repository
from preferences import repository as preferences_repository
from preferences.schemas import DEFAULT_PREFERENCES
from quotes import repository as quotes_repository

logger = logging.getLogger("seed")

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123"
IMPORT_BATCH_SIZE = 100
DEMO_FAVORITE_COUNT = 5

DEMO_CUSTOM_QUOTES = [
    ("The only way to do great work is to love what you do.", "Steve Jobs"),
    ("Innovation distinguishes between a leader and a follower.", "Steve Jobs"),
    ("Life is what happens when you're busy making other plans.", "John Lennon"),
]


def read_quotes_csv(path: Path) -> list[tuple[str, str]]:
    """
    Return (text, author) pairs from the CSV, trimmed, blanks dropped.
    """
    with path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))

    quotes: list[tuple[str, str]] = []
    for row in rows:
        text = (row.get("Quote") or "").strip()
        author = (row.get("Author") or "").strip()
        if text and author:
            quotes.append((text, author))
    logger.info("csv_parsed path=%s rows=%s valid=%s", path, len(rows), len(quotes))
    return quotes


async def clear_data() -> None:
    for table in ("favorites", "quotes", "user_preferences", "users"):
        await db.execute(f"DELETE FROM {table}")
    logger.info("seed_cleared")


async def seed(csv_path: Path) -> None:
    quotes = read_quotes_csv(csv_path)

    await db.init_pool()
    try:
        await db.apply_schema()
        await clear_data()

        demo_user = await auth_repository.create_user(
            email=DEMO_EMAIL,
            password_hash=security.hash_password(DEMO_PASSWORD),
            name="Demo User",
        )
        demo_user_id = int(demo_user["id"])
        await preferences_repository.upsert_preferences(demo_user_id, dict(DEFAULT_PREFERENCES))
        logger.info("demo_user_created user_id=%s email=%s", demo_user_id, DEMO_EMAIL)

        imported = 0
        for start in range(0, len(quotes), IMPORT_BATCH_SIZE):
            batch = quotes[start:start + IMPORT_BATCH_SIZE]
            await quotes_repository.insert_preloaded_quotes(batch)
            imported += len(batch)
            logger.info("quotes_imported count=%s total=%s", imported, len(quotes))

        for text, author in DEMO_CUSTOM_QUOTES:
            await quotes_repository.create_custom_quote(
                user_id=demo_user_id,
                text=text,
                author=author,
                category=None,
                source=None,
            )

        favorite_ids = await quotes_repository.first_preloaded_ids(DEMO_FAVORITE_COUNT)
        await favorites_repository.add_favorites(demo_user_id, favorite_ids)
        logger.info(
            "seed_complete preloaded=%s custom=%s favorites=%s",
            imported,
            len(DEMO_CUSTOM_QUOTES),
            len(favorite_ids),
        )
    finally:
        await db.close_pool()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the quote browser database.")
    parser.add_argument("csv_path", nargs="?", default="quotes.csv", type=Path)
    args = parser.parse_args()

    logs.configure_logging()
    asyncio.run(seed(args.csv_path))


if __name__ == "__main__":
    main()
