"""
GardenGrid Backend — Bed Service
==================================

What:  Beds inside a garden: create, read, move, resize, unplace, delete.
Who:   /api/beds route handlers.

Placement Rules:
    - width/height positive and no larger than the garden
    - a placed bed lies inside the garden and overlaps no other placed bed
    - unplaced beds (position -1/-1 on the wire) are ignored by both checks

Bed Lifecycle:
    Unplaced ──place(row, col)──▶ Placed ──place(row', col')──▶ Placed
        ▲                            │
        └────────── unplace() ───────┘

    Unplacing keeps size and plants; the bed just leaves the garden grid.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from gardengrid.exceptions import ValidationError
from gardengrid.layout.footprint import Footprint
from gardengrid.layout.placement import can_place, check_placement
from gardengrid.layout.position import Placed, Position, position_from_wire
from gardengrid.models.bed import Bed
from gardengrid.models.garden import Garden
from gardengrid.models.plant import PlantInBed
from gardengrid.schemas.bed import BedCreate, BedResponse, BedUpdate, BedUpdateResponse
from gardengrid.schemas.common import MessageResponse, PlacementCheckResponse
from gardengrid.services.garden_service import validate_dimensions
from gardengrid.services.ownership import get_owned_bed, get_owned_garden
from gardengrid.services.plant_service import plant_service

logger = logging.getLogger(__name__)


def _validate_bed_size(garden: Garden, width: int, height: int) -> None:
    validate_dimensions(width, height, "bed")
    if width > garden.width or height > garden.height:
        raise ValidationError(
            message=(
                f"A {width}x{height} bed does not fit in the "
                f"{garden.width}x{garden.height} garden"
            ),
            field="dimensions",
            context={"garden_width": garden.width, "garden_height": garden.height},
        )


class BedService:
    """
    Business logic for beds.

    Responsibilities:
        - create_bed(): add a placed or unplaced bed
        - list_beds() / get_bed(): owner-scoped reads
        - update_bed(): rename, move, unplace, resize (with plant reconciliation)
        - delete_bed(): delete a bed with its plants
        - can_place_bed(): hover preview for the garden editor
    """

    async def create_bed(
        self, db: AsyncSession, owner_id: int, garden_id: int, data: BedCreate
    ) -> BedResponse:
        """
        Raises:
            NotFoundError: garden missing or not owned
            ValidationError: bad size or malformed position
            PlacementError: out of the garden or overlapping a placed bed
        """
        garden = await get_owned_garden(db, owner_id, garden_id)
        _validate_bed_size(garden, data.width, data.height)
        position = position_from_wire(data.top_position, data.left_position)
        await self._check_fits(db, garden, position, data.width, data.height)

        bed = Bed(garden_id=garden.id, name=data.name, width=data.width, height=data.height)
        self._apply_position(bed, position)
        db.add(bed)
        await db.flush()

        logger.info("Bed %s created in garden %s at %r", bed.id, garden.id, position)
        return BedResponse.model_validate(bed)

    async def list_beds(
        self,
        db: AsyncSession,
        owner_id: int,
        garden_id: int,
        placed: Optional[bool] = None,
    ) -> List[BedResponse]:
        """All beds of a garden; `placed` narrows to placed or unplaced beds."""
        garden = await get_owned_garden(db, owner_id, garden_id)
        result = await db.execute(
            select(Bed).where(Bed.garden_id == garden.id).order_by(Bed.id)
        )
        beds = result.scalars().all()
        if placed is not None:
            beds = [bed for bed in beds if bed.is_placed == placed]
        return [BedResponse.model_validate(bed) for bed in beds]

    async def get_bed(
        self, db: AsyncSession, owner_id: int, garden_id: int, bed_id: int
    ) -> BedResponse:
        _, bed = await get_owned_bed(db, owner_id, garden_id, bed_id)
        return BedResponse.model_validate(bed)

    async def update_bed(
        self,
        db: AsyncSession,
        owner_id: int,
        garden_id: int,
        bed_id: int,
        data: BedUpdate,
        confirm_drop: bool = False,
    ) -> BedUpdateResponse:
        """
        Apply a partial update; omitted fields keep their value.

        A size change replays the bed's plants at the new size. Plants that
        would fall outside are only deleted when `confirm_drop` is set;
        otherwise ResizeConfirmationRequired is raised and nothing changes.

        Raises:
            NotFoundError: bed missing or not owned
            ValidationError: bad size or malformed position
            PlacementError: new rectangle leaves the garden or overlaps a bed
            ResizeConfirmationRequired: shrink would drop plants
        """
        garden, bed = await get_owned_bed(db, owner_id, garden_id, bed_id)

        width = data.width if data.width is not None else bed.width
        height = data.height if data.height is not None else bed.height
        top = data.top_position if data.top_position is not None else bed.top_position
        left = data.left_position if data.left_position is not None else bed.left_position
        position = position_from_wire(top, left)

        # A garden shrink can leave an unplaced bed larger than the garden;
        # it stays editable until it is resized or placed.
        if (width, height) != (bed.width, bed.height) or isinstance(position, Placed):
            _validate_bed_size(garden, width, height)
        await self._check_fits(db, garden, position, width, height, ignore_id=bed.id)

        dropped = []
        if (width, height) != (bed.width, bed.height):
            dropped = await plant_service.reconcile_bed_resize(
                db, bed, width, height, confirm_drop
            )

        if data.name is not None:
            bed.name = data.name
        bed.width = width
        bed.height = height
        self._apply_position(bed, position)
        await db.flush()

        logger.info(
            "Bed %s updated (size=%dx%d, position=%r, dropped_plants=%d)",
            bed.id, width, height, position, len(dropped),
        )
        return BedUpdateResponse(
            **BedResponse.model_validate(bed).model_dump(),
            dropped_plants=dropped,
        )

    async def delete_bed(
        self, db: AsyncSession, owner_id: int, garden_id: int, bed_id: int
    ) -> MessageResponse:
        _, bed = await get_owned_bed(db, owner_id, garden_id, bed_id)
        await db.execute(
            delete(PlantInBed)
            .where(PlantInBed.bed_id == bed.id)
            .execution_options(synchronize_session=False)
        )
        await db.delete(bed)
        await db.flush()
        logger.info("Bed %s deleted from garden %s", bed_id, garden_id)
        return MessageResponse(message="Bed deleted successfully", id=bed_id)

    async def can_place_bed(
        self,
        db: AsyncSession,
        owner_id: int,
        garden_id: int,
        top: int,
        left: int,
        width: int,
        height: int,
        ignore_bed_id: Optional[int] = None,
    ) -> PlacementCheckResponse:
        """
        Would a width × height bed fit at (top, left)?

        `ignore_bed_id` excludes the bed being dragged, so moving a bed onto
        a spot that overlaps its own old position is still valid.
        """
        garden = await get_owned_garden(db, owner_id, garden_id)
        candidate = Footprint(x=left, y=top, w=width, h=height)
        others = await self._placed_beds(db, garden.id, ignore_id=ignore_bed_id)
        valid = can_place(
            garden.width, garden.height, [bed.footprint for bed in others], candidate
        )
        return PlacementCheckResponse(valid=valid, **candidate.as_dict())

    # ── Internals ─────────────────────────────────────────────────────────

    async def _placed_beds(
        self, db: AsyncSession, garden_id: int, ignore_id: Optional[int] = None
    ) -> List[Bed]:
        stmt = select(Bed).where(Bed.garden_id == garden_id).order_by(Bed.id)
        if ignore_id is not None:
            stmt = stmt.where(Bed.id != ignore_id)
        result = await db.execute(stmt)
        return [bed for bed in result.scalars().all() if bed.is_placed]

    async def _check_fits(
        self,
        db: AsyncSession,
        garden: Garden,
        position: Position,
        width: int,
        height: int,
        ignore_id: Optional[int] = None,
    ) -> None:
        if not isinstance(position, Placed):
            return
        others = await self._placed_beds(db, garden.id, ignore_id=ignore_id)
        check_placement(
            garden.width,
            garden.height,
            [bed.footprint for bed in others],
            Footprint(x=position.col, y=position.row, w=width, h=height),
            label="bed",
        )

    @staticmethod
    def _apply_position(bed: Bed, position: Position) -> None:
        if isinstance(position, Placed):
            bed.place(position.row, position.col)
        else:
            bed.unplace()


# ── Singleton Instance ────────────────────────────────────────────────────
bed_service = BedService()
