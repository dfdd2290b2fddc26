"""
Pydantic schemas for quote endpoints.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

# Upper bound for one POST /quotes/batch request.
MAX_BATCH_IDS = 50


class QuoteSource(str, Enum):
    PRELOADED = "PRELOADED"
    CUSTOM = "CUSTOM"
    FAVORITES = "FAVORITES"
    BOTH = "BOTH"


class QuoteOut(BaseModel):
    id: str
    text: str
    author: str
    category: str | None = None
    source: str | None = None
    is_preloaded: bool = False
    is_favorited: bool = False
    created_at: datetime
    updated_at: datetime


class QuoteIdsResponse(BaseModel):
    ids: list[str]
    total: int


QuoteId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


class BatchRequest(BaseModel):
    ids: list[QuoteId] = Field(..., min_length=1, max_length=MAX_BATCH_IDS)


class BatchResponse(BaseModel):
    quotes: list[QuoteOut]


class QuotePage(BaseModel):
    quotes: list[QuoteOut]
    total: int
    page: int
    limit: int


class CreateQuoteRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=1000)
    author: str = Field(..., min_length=1, max_length=100)
    category: str | None = Field(default=None, max_length=100)
    source: str | None = Field(default=None, max_length=200)
