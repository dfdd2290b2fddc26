"""
Preference business logic.

Rows are created lazily: the first read stores the defaults.
"""

from __future__ import annotations

import logging

from . import intervals, repository, schemas

logger = logging.getLogger(__name__)


def _to_response(row: dict) -> schemas.PreferencesResponse:
    rotation_interval = int(row["rotation_interval"])
    return schemas.PreferencesResponse(
        user_id=int(row["user_id"]),
        rotation_interval=rotation_interval,
        rotation_label=intervals.format_interval(rotation_interval),
        quote_source=row["quote_source"],
        theme=row["theme"],
        show_author=bool(row["show_author"]),
        enable_animations=bool(row["enable_animations"]),
        font_size=row["font_size"],
        updated_at=row.get("updated_at"),
    )


def merge_preferences(current: dict | None, update: schemas.PreferencesUpdate) -> dict:
    """
    Overlay the fields set in `update` on the stored row (or the defaults).
    """
    merged = dict(schemas.DEFAULT_PREFERENCES)
    if current is not None:
        merged.update({key: current[key] for key in schemas.DEFAULT_PREFERENCES})
    for key, value in update.model_dump(exclude_none=True, mode="json").items():
        merged[key] = value
    return merged


async def get_preferences(*, user_id: int) -> schemas.PreferencesResponse:
    row = await repository.get_preferences(user_id)
    if row is None:
        row = await repository.upsert_preferences(user_id, dict(schemas.DEFAULT_PREFERENCES))
        logger.info("preferences_created user_id=%s", user_id)
    return _to_response(row)


async def update_preferences(
    payload: schemas.PreferencesUpdate,
    *,
    user_id: int,
) -> schemas.PreferencesResponse:
    current = await repository.get_preferences(user_id)
    row = await repository.upsert_preferences(user_id, merge_preferences(current, payload))
    logger.info(
        "preferences_updated user_id=%s fields=%s",
        user_id,
        ",".join(sorted(payload.model_dump(exclude_none=True))),
    )
    return _to_response(row)


def rotation_intervals() -> list[dict]:
    return [dict(item) for item in intervals.ROTATION_INTERVALS]
