"""
Preference persistence (raw SQL).
"""

from __future__ import annotations

from core import db

_COLUMNS = """
    user_id, rotation_interval, quote_source, theme, show_author,
    enable_animations, font_size, created_at, updated_at
"""


async def get_preferences(user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM user_preferences
        WHERE user_id = $1
        """,
        user_id,
    )


async def upsert_preferences(user_id: int, values: dict) -> dict:
    """
    Write a full preference row. `values` must hold every column.
    """
    row = await db.fetch_one(
        f"""
        INSERT INTO user_preferences (
            user_id, rotation_interval, quote_source, theme,
            show_author, enable_animations, font_size
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        ON CONFLICT (user_id) DO UPDATE
        SET rotation_interval = EXCLUDED.rotation_interval,
            quote_source = EXCLUDED.quote_source,
            theme = EXCLUDED.theme,
            show_author = EXCLUDED.show_author,
            enable_animations = EXCLUDED.enable_animations,
            font_size = EXCLUDED.font_size,
            updated_at = now()
        RETURNING {_COLUMNS}
        """,
        user_id,
        int(values["rotation_interval"]),
        str(values["quote_source"]),
        str(values["theme"]),
        bool(values["show_author"]),
        bool(values["enable_animations"]),
        str(values["font_size"]),
    )
    if row is None:
        raise RuntimeError("Failed to upsert preferences.")
    return row
