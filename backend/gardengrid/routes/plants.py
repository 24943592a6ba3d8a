"""
GardenGrid Backend — Plant Route Handlers
===========================================

What:  Plants inside a bed (save, list, preview) and the plant catalog.
Who:   Called by the bed editor and the plant catalog picker.

Endpoints:
    POST /api/plants/save-plants        full overwrite of one bed
    GET  /api/plants/all-plants         plants in one bed
    GET  /api/plants/can-place          hover preview for a catalog plant
    GET  /api/plants/catalog            whole catalog
    GET  /api/plants/catalog/{plant_id} one catalog entry
"""

import logging
from typing import List

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gardengrid.database import get_db_session
from gardengrid.schemas.common import ErrorResponse, PlacementCheckResponse
from gardengrid.schemas.plant import (
    CatalogPlantResponse,
    PlantInBedResponse,
    PlantPlacement,
    SavePlantsResponse,
)
from gardengrid.services.catalog_service import catalog_service
from gardengrid.services.plant_service import plant_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/plants", tags=["Plants"])


@router.post(
    "/save-plants",
    response_model=SavePlantsResponse,
    responses={
        400: {"description": "Unknown plant, out of bounds or overlapping", "model": ErrorResponse},
        404: {"description": "Garden or bed not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Replace all plants in a bed",
    description=(
        "The body is the complete list of plants for the bed. Every placement is "
        "checked for bounds and overlaps before anything is written; on success the "
        "bed's previous plants are replaced in one transaction."
    ),
)
async def save_plants(
    placements: List[PlantPlacement] = Body(...),
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    bed_id: int = Query(alias="bedId"),
    db: AsyncSession = Depends(get_db_session),
) -> SavePlantsResponse:
    return await plant_service.save_plants(
        db=db,
        owner_id=user_id,
        garden_id=garden_id,
        bed_id=bed_id,
        placements=placements,
    )


@router.get(
    "/all-plants",
    response_model=List[PlantInBedResponse],
    responses={404: {"description": "Garden or bed not found", "model": ErrorResponse}},
    summary="List the plants in a bed",
)
async def get_plants_in_bed(
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    bed_id: int = Query(alias="bedId"),
    db: AsyncSession = Depends(get_db_session),
) -> List[PlantInBedResponse]:
    return await plant_service.get_plants(db=db, owner_id=user_id, garden_id=garden_id, bed_id=bed_id)


@router.get(
    "/can-place",
    response_model=PlacementCheckResponse,
    responses={404: {"description": "Bed or catalog plant not found", "model": ErrorResponse}},
    summary="Preview whether a catalog plant fits at a cell",
    description="Checks against the bed's saved plants using the plant's spacing footprint.",
)
async def can_place_plant(
    user_id: int = Query(alias="userId"),
    garden_id: int = Query(alias="gardenId"),
    bed_id: int = Query(alias="bedId"),
    plant_id: int = Query(alias="plantId"),
    x: int = Query(description="Column of the top-left cell"),
    y: int = Query(description="Row of the top-left cell"),
    db: AsyncSession = Depends(get_db_session),
) -> PlacementCheckResponse:
    return await plant_service.can_place_plant(
        db=db,
        owner_id=user_id,
        garden_id=garden_id,
        bed_id=bed_id,
        plant_id=plant_id,
        x=x,
        y=y,
    )


@router.get(
    "/catalog",
    response_model=List[CatalogPlantResponse],
    summary="List the plant catalog",
)
async def list_catalog(db: AsyncSession = Depends(get_db_session)) -> List[CatalogPlantResponse]:
    return await catalog_service.list_catalog(db)


@router.get(
    "/catalog/{plant_id}",
    response_model=CatalogPlantResponse,
    responses={404: {"description": "Catalog plant not found", "model": ErrorResponse}},
    summary="Get one catalog plant",
)
async def get_catalog_plant(
    plant_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> CatalogPlantResponse:
    return await catalog_service.get_catalog_plant(db, plant_id)
