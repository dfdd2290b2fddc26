"""
Favorite API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/favorites")


@router.get("")
async def list_favorites(
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.FavoritesResponse:
    return await service.list_favorites(user_id=auth_dependencies.current_user_id(current_user))


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_favorite(
    request: schemas.AddFavoriteRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.add_favorite(
        request.quote_id,
        user_id=auth_dependencies.current_user_id(current_user),
    )


@router.delete("/{quote_id}")
async def remove_favorite(
    quote_id: str,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.remove_favorite(
        quote_id,
        user_id=auth_dependencies.current_user_id(current_user),
    )
