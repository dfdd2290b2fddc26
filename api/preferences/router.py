"""
Preference API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/preferences")


@router.get("")
async def get_preferences(
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PreferencesResponse:
    return await service.get_preferences(user_id=auth_dependencies.current_user_id(current_user))


@router.put("")
async def update_preferences(
    request: schemas.PreferencesUpdate,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PreferencesResponse:
    return await service.update_preferences(
        request,
        user_id=auth_dependencies.current_user_id(current_user),
    )


@router.get("/intervals")
async def get_rotation_intervals(
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    items = service.rotation_intervals()
    return {"intervals": items, "count": len(items)}
