"""
GardenGrid Backend — Plant Service
====================================

What:  Plants inside a bed: full-overwrite save, listing, hover preview, and
       reconciliation when a bed is resized.
Who:   /api/plants route handlers; BedService for resizes.

Save Flow (POST /api/plants/save-plants):
    ┌──────────┐   ┌────────────────┐   ┌─────────────────┐   ┌──────────────┐
    │ Owner /  │──▶│ Resolve catalog│──▶│ Replay through  │──▶│ Delete all + │
    │ bed check│   │ spacing        │   │ OccupancyGrid   │   │ insert all   │
    └──────────┘   └────────────────┘   └─────────────────┘   └──────────────┘

    Every check runs before the first write. Delete and insert share the
    request transaction, so a bed is never left half-saved. There is no
    version token: two editors saving the same bed means the last save wins.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from gardengrid.exceptions import (
    NotFoundError,
    PlacementError,
    ResizeConfirmationRequired,
    ValidationError,
)
from gardengrid.layout.footprint import Footprint, footprint_for_spacing
from gardengrid.layout.grid import OccupancyGrid
from gardengrid.layout.placement import check_placement
from gardengrid.models.bed import Bed
from gardengrid.models.plant import CatalogPlant, PlantInBed
from gardengrid.schemas.common import PlacementCheckResponse
from gardengrid.schemas.plant import (
    PlantInBedResponse,
    PlantPlacement,
    SavePlantsResponse,
)
from gardengrid.services.ownership import get_owned_bed

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PlantSlot:
    """
    A plant as an occupant of a bed's grid.

    `row` is set when the slot was loaded from the database and is None for
    a placement that has not been saved yet. eq=False keeps identity
    semantics, which OccupancyGrid relies on.
    """

    catalog: CatalogPlant
    x: int
    y: int
    role: Optional[str] = None
    row: Optional[PlantInBed] = None

    @property
    def footprint(self) -> Footprint:
        return footprint_for_spacing(self.x, self.y, self.catalog.spacing)


def _slot_footprint(slot: PlantSlot) -> Footprint:
    return slot.footprint


def _plant_response(row: PlantInBed, catalog: CatalogPlant) -> PlantInBedResponse:
    return PlantInBedResponse(
        plant_in_bed_id=row.id,
        bed_id=row.bed_id,
        plant_id=row.plant_id,
        planted_date=row.planted_date,
        x_position=row.x_position,
        y_position=row.y_position,
        plant_role=row.plant_role,
        common_name=catalog.common_name,
        scientific_name=catalog.scientific_name,
        icon_image=catalog.icon_image,
        spacing=catalog.spacing,
        footprint_size=catalog.footprint_side,
    )


class PlantService:
    """
    Business logic for plants in beds.

    Responsibilities:
        - save_plants(): validated full overwrite of a bed's plants
        - get_plants(): a bed's plants joined with catalog data
        - can_place_plant(): hover preview for a catalog plant
        - reconcile_bed_resize(): which plants a bed resize drops
    """

    async def save_plants(
        self,
        db: AsyncSession,
        owner_id: int,
        garden_id: int,
        bed_id: int,
        placements: Sequence[PlantPlacement],
    ) -> SavePlantsResponse:
        """
        Replace every plant in the bed with `placements`.

        Raises:
            NotFoundError: bed missing or not owned (nothing written)
            ValidationError: unknown catalog plant id (nothing written)
            PlacementError: a placement is out of bounds or overlaps an
                earlier one in the list; `details.index` names it
        """
        _, bed = await get_owned_bed(db, owner_id, garden_id, bed_id)
        catalog = await self._catalog_by_id(db, (p.plant_id for p in placements))

        grid: OccupancyGrid[PlantSlot] = OccupancyGrid(bed.width, bed.height, _slot_footprint)
        for index, placement in enumerate(placements):
            slot = PlantSlot(
                catalog=catalog[placement.plant_id],
                x=placement.x_position,
                y=placement.y_position,
                role=placement.plant_role,
            )
            try:
                check_placement(
                    bed.width, bed.height, grid.footprints(), slot.footprint, label="plant"
                )
            except PlacementError as exc:
                exc.context.update(index=index, plant_id=placement.plant_id)
                raise
            grid.add(slot)

        await db.execute(delete(PlantInBed).where(PlantInBed.bed_id == bed.id))
        db.add_all(
            PlantInBed(
                bed_id=bed.id,
                plant_id=slot.catalog.id,
                x_position=slot.x,
                y_position=slot.y,
                plant_role=slot.role,
            )
            for slot in grid.occupants
        )
        await db.flush()

        logger.info("Bed %s saved with %d plant(s)", bed.id, len(grid))
        return SavePlantsResponse(
            message=f"Successfully saved all plants to bed {bed.id}.",
            bed_id=bed.id,
            saved_count=len(grid),
        )

    async def get_plants(
        self, db: AsyncSession, owner_id: int, garden_id: int, bed_id: int
    ) -> List[PlantInBedResponse]:
        _, bed = await get_owned_bed(db, owner_id, garden_id, bed_id)
        slots = await self._load_slots(db, bed)
        return [_plant_response(slot.row, slot.catalog) for slot in slots]

    async def can_place_plant(
        self,
        db: AsyncSession,
        owner_id: int,
        garden_id: int,
        bed_id: int,
        plant_id: int,
        x: int,
        y: int,
    ) -> PlacementCheckResponse:
        """
        Would catalog plant `plant_id` fit at column x, row y of the saved bed?

        Raises:
            NotFoundError: bed or catalog plant missing
        """
        _, bed = await get_owned_bed(db, owner_id, garden_id, bed_id)
        catalog_plant = await db.get(CatalogPlant, plant_id)
        if catalog_plant is None:
            raise NotFoundError(resource="catalog plant", resource_id=plant_id)

        grid = await self._load_grid(db, bed)
        candidate = footprint_for_spacing(x, y, catalog_plant.spacing)
        return PlacementCheckResponse(valid=grid.can_place(candidate), **candidate.as_dict())

    async def reconcile_bed_resize(
        self,
        db: AsyncSession,
        bed: Bed,
        width: int,
        height: int,
        confirm_drop: bool,
    ) -> List[PlantInBedResponse]:
        """
        Drop the plants that do not fit a width × height bed.

        Plants that still fit keep their id and position. Plants that do not
        are deleted outright, never clipped or moved. Without `confirm_drop`
        the loss is reported instead of applied.

        Raises:
            ResizeConfirmationRequired: plants would be dropped and
                confirm_drop is False (nothing written)
        """
        grid = await self._load_grid(db, bed)
        plan = grid.plan_resize(width, height)
        if not plan.destructive:
            return []

        dropped_ids = [slot.row.id for slot in plan.dropped]
        if not confirm_drop:
            raise ResizeConfirmationRequired(
                dropped_plant_ids=dropped_ids,
                context={"bed_id": bed.id, "width": width, "height": height},
            )

        await db.execute(delete(PlantInBed).where(PlantInBed.id.in_(dropped_ids)))
        logger.warning(
            "Bed %s resized to %dx%d: dropped %d plant(s) %s",
            bed.id, width, height, len(dropped_ids), dropped_ids,
        )
        return [_plant_response(slot.row, slot.catalog) for slot in plan.dropped]

    # ── Internals ─────────────────────────────────────────────────────────

    async def _catalog_by_id(
        self, db: AsyncSession, plant_ids: Iterable[int]
    ) -> Dict[int, CatalogPlant]:
        wanted = set(plant_ids)
        if not wanted:
            return {}
        result = await db.execute(select(CatalogPlant).where(CatalogPlant.id.in_(wanted)))
        found = {plant.id: plant for plant in result.scalars().all()}
        missing = sorted(wanted - found.keys())
        if missing:
            raise ValidationError(
                message=f"Unknown catalog plant id(s): {', '.join(map(str, missing))}",
                field="plant_id",
                context={"missing": missing},
            )
        return found

    async def _load_slots(self, db: AsyncSession, bed: Bed) -> List[PlantSlot]:
        result = await db.execute(
            select(PlantInBed, CatalogPlant)
            .join(CatalogPlant, PlantInBed.plant_id == CatalogPlant.id)
            .where(PlantInBed.bed_id == bed.id)
            .order_by(PlantInBed.id)
        )
        return [
            PlantSlot(
                catalog=catalog,
                x=row.x_position,
                y=row.y_position,
                role=row.plant_role,
                row=row,
            )
            for row, catalog in result.all()
        ]

    async def _load_grid(self, db: AsyncSession, bed: Bed) -> OccupancyGrid[PlantSlot]:
        slots = await self._load_slots(db, bed)
        return OccupancyGrid.from_occupants(
            bed.width, bed.height, _slot_footprint, slots, label="plant"
        )


# ── Singleton Instance ────────────────────────────────────────────────────
plant_service = PlantService()
