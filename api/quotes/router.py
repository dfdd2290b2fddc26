"""
Quote API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/quotes")


@router.get("/ids")
async def get_quote_ids(
    source: schemas.QuoteSource = Query(default=schemas.QuoteSource.BOTH),
    category: str | None = Query(default=None, max_length=100),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.QuoteIdsResponse:
    """
    All quote ids available to the user (lightweight; no bodies).
    """
    return await service.quote_ids(
        user_id=auth_dependencies.current_user_id(current_user),
        source=source,
        category=category,
    )


@router.post("/batch")
async def get_quotes_batch(
    request: schemas.BatchRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.BatchResponse:
    return await service.quotes_batch(
        request.ids,
        user_id=auth_dependencies.current_user_id(current_user),
    )


@router.get("")
async def list_quotes(
    source: schemas.QuoteSource = Query(default=schemas.QuoteSource.BOTH),
    category: str | None = Query(default=None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=service.MAX_PAGE_LIMIT),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.QuotePage:
    return await service.list_quotes(
        user_id=auth_dependencies.current_user_id(current_user),
        source=source,
        category=category,
        page=page,
        limit=limit,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_quote(
    request: schemas.CreateQuoteRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.QuoteOut:
    return await service.create_quote(
        request,
        user_id=auth_dependencies.current_user_id(current_user),
    )


@router.delete("/{quote_id}")
async def delete_quote(
    quote_id: str,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_quote(
        quote_id,
        user_id=auth_dependencies.current_user_id(current_user),
    )
