"""
GardenGrid Backend — Bed Route Handlers
=========================================

What:  /api/beds CRUD and the bed placement preview.
Who:   Called by the garden view (drag, drop, resize, unplaced list).
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from gardengrid.database import get_db_session
from gardengrid.schemas.bed import BedCreate, BedResponse, BedUpdate, BedUpdateResponse
from gardengrid.schemas.common import ErrorResponse, MessageResponse, PlacementCheckResponse
from gardengrid.services.bed_service import bed_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Beds"])


@router.get(
    "/beds/can-place",
    response_model=PlacementCheckResponse,
    responses={404: {"description": "Garden not found or not owned", "model": ErrorResponse}},
    summary="Preview whether a bed fits at a position",
    description=(
        "Pure check against the garden's placed beds; nothing is written. "
        "Pass `bedId` while dragging an existing bed so it does not collide "
        "with its own current position."
    ),
)
async def can_place_bed(
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    top: int = Query(description="Row of the top-left cell"),
    left: int = Query(description="Column of the top-left cell"),
    width: int = Query(description="Columns, in cells"),
    height: int = Query(description="Rows, in cells"),
    bed_id: int | None = Query(default=None, alias="bedId"),
    db: AsyncSession = Depends(get_db_session),
) -> PlacementCheckResponse:
    return await bed_service.can_place_bed(
        db=db,
        owner_id=user_id,
        garden_id=garden_id,
        top=top,
        left=left,
        width=width,
        height=height,
        ignore_bed_id=bed_id,
    )


@router.post(
    "/beds",
    response_model=BedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid size or placement", "model": ErrorResponse},
        404: {"description": "Garden not found or not owned", "model": ErrorResponse},
    },
    summary="Create a bed",
    description="Omit top_position/left_position (or send -1) to create an unplaced bed.",
)
async def create_bed(
    body: BedCreate,
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    db: AsyncSession = Depends(get_db_session),
) -> BedResponse:
    return await bed_service.create_bed(db=db, owner_id=user_id, garden_id=garden_id, data=body)


@router.get(
    "/beds",
    response_model=Union[BedResponse, List[BedResponse]],
    responses={404: {"description": "Garden or bed not found", "model": ErrorResponse}},
    summary="List a garden's beds, or get one",
)
async def get_beds(
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    bed_id: int | None = Query(default=None, alias="bedId"),
    placed: bool | None = Query(
        default=None,
        description="true: only beds on the grid; false: only the unplaced list",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> Union[BedResponse, List[BedResponse]]:
    if bed_id is not None:
        return await bed_service.get_bed(db=db, owner_id=user_id, garden_id=garden_id, bed_id=bed_id)
    return await bed_service.list_beds(db=db, owner_id=user_id, garden_id=garden_id, placed=placed)


@router.put(
    "/beds",
    response_model=BedUpdateResponse,
    responses={
        400: {"description": "Invalid size or placement", "model": ErrorResponse},
        404: {"description": "Garden or bed not found", "model": ErrorResponse},
        409: {"description": "Shrink would drop plants; repeat with confirmDrop=true", "model": ErrorResponse},
    },
    summary="Rename, move, unplace or resize a bed",
)
async def update_bed(
    body: BedUpdate,
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    bed_id: int = Query(alias="bedId"),
    confirm_drop: bool = Query(
        default=False, alias="confirmDrop",
        description="Allow a shrink that deletes plants which no longer fit",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> BedUpdateResponse:
    return await bed_service.update_bed(
        db=db,
        owner_id=user_id,
        garden_id=garden_id,
        bed_id=bed_id,
        data=body,
        confirm_drop=confirm_drop,
    )


@router.delete(
    "/beds",
    response_model=MessageResponse,
    responses={404: {"description": "Garden or bed not found", "model": ErrorResponse}},
    summary="Delete a bed and its plants",
)
async def delete_bed(
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    bed_id: int = Query(alias="bedId"),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await bed_service.delete_bed(db=db, owner_id=user_id, garden_id=garden_id, bed_id=bed_id)
