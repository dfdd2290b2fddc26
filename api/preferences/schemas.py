"""
Preference schemas.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .intervals import MAX_ROTATION_INTERVAL_S, MIN_ROTATION_INTERVAL_S


class PreferredSource(str, Enum):
    # FAVORITES is a browsing filter, not a stored default.
    PRELOADED = "PRELOADED"
    CUSTOM = "CUSTOM"
    BOTH = "BOTH"


class Theme(str, Enum):
    LIGHT = "LIGHT"
    DARK = "DARK"
    SYSTEM = "SYSTEM"


class FontSize(str, Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    EXTRA_LARGE = "EXTRA_LARGE"


DEFAULT_PREFERENCES: dict = {
    "rotation_interval": 30,
    "quote_source": PreferredSource.BOTH.value,
    "theme": Theme.SYSTEM.value,
    "show_author": True,
    "enable_animations": True,
    "font_size": FontSize.MEDIUM.value,
}


class PreferencesUpdate(BaseModel):
    rotation_interval: int | None = Field(
        default=None,
        ge=MIN_ROTATION_INTERVAL_S,
        le=MAX_ROTATION_INTERVAL_S,
    )
    quote_source: PreferredSource | None = None
    theme: Theme | None = None
    show_author: bool | None = None
    enable_animations: bool | None = None
    font_size: FontSize | None = None


class PreferencesResponse(BaseModel):
    user_id: int
    rotation_interval: int
    rotation_label: str
    quote_source: PreferredSource
    theme: Theme
    show_author: bool
    enable_animations: bool
    font_size: FontSize
    updated_at: datetime | None = None
