"""
GardenGrid Backend — Garden Route Handlers
============================================

What:  POST/GET/PUT/DELETE /api/gardens.
How:   Ids travel as query parameters (`userId`, `gardenId`), matching the
       garden editor client. Handlers stay thin; GardenService does the work
       inside the request's transaction (see database.get_db_session).
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from gardengrid.database import get_db_session
from gardengrid.schemas.common import ErrorResponse
from gardengrid.schemas.garden import (
    GardenCreate,
    GardenDeleteResponse,
    GardenResponse,
    GardenUpdate,
    GardenUpdateResponse,
)
from gardengrid.services.garden_service import garden_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Gardens"])


@router.post(
    "/gardens",
    response_model=GardenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid dimensions", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a garden and make it active",
    description=(
        "Creates a garden for `userId` (in the body). The new garden becomes the "
        "owner's only active garden; every other garden of the owner is deactivated "
        "in the same transaction."
    ),
)
async def create_garden(
    body: GardenCreate,
    db: AsyncSession = Depends(get_db_session),
) -> GardenResponse:
    return await garden_service.create_and_activate(db=db, owner_id=body.owner_id, data=body)


@router.get(
    "/gardens",
    response_model=Union[GardenResponse, List[GardenResponse]],
    responses={
        404: {"description": "Garden not found or not owned", "model": ErrorResponse},
    },
    summary="List an owner's gardens, or get one",
)
async def get_gardens(
    user_id: int = Query(alias="userId", description="Owning user id"),
    garden_id: int | None = Query(
        default=None, alias="gardenId",
        description="Return only this garden. Omit to list all of the owner's gardens.",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> Union[GardenResponse, List[GardenResponse]]:
    if garden_id is not None:
        return await garden_service.get_garden(db=db, owner_id=user_id, garden_id=garden_id)
    return await garden_service.list_gardens(db=db, owner_id=user_id)


@router.put(
    "/gardens",
    response_model=GardenUpdateResponse,
    responses={
        400: {"description": "Invalid dimensions", "model": ErrorResponse},
        404: {"description": "Garden not found or not owned", "model": ErrorResponse},
    },
    summary="Update, resize or activate a garden",
    description=(
        "Partial update. `is_active: true` deactivates the owner's other gardens. "
        "Shrinking moves beds that no longer fit to the unplaced list; their ids "
        "are returned in `unplaced_bed_ids`."
    ),
)
async def update_garden(
    body: GardenUpdate,
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    db: AsyncSession = Depends(get_db_session),
) -> GardenUpdateResponse:
    return await garden_service.update_garden(
        db=db, owner_id=user_id, garden_id=garden_id, data=body
    )


@router.delete(
    "/gardens",
    response_model=GardenDeleteResponse,
    responses={
        404: {"description": "Garden not found or not owned", "model": ErrorResponse},
    },
    summary="Delete a garden with its beds and plants",
    description=(
        "If the deleted garden was active, the owner's most recently created "
        "remaining garden becomes active and is returned as `activated_garden_id`."
    ),
)
async def delete_garden(
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    db: AsyncSession = Depends(get_db_session),
) -> GardenDeleteResponse:
    return await garden_service.delete_garden(db=db, owner_id=user_id, garden_id=garden_id)
