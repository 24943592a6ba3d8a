"""
GardenGrid Backend — Garden Service (Activation Manager)
==========================================================

What:  Garden CRUD plus the rule that an owner has at most one active garden.
Who:   Called by the /api/gardens route handlers.

Activation Sequences (each one transaction, see database.session_scope):
    create_and_activate:  deactivate owner's gardens → insert new, active
    set_active / update:  deactivate owner's other gardens → update target
    delete_garden:        delete plants, beds, garden → if it was active,
                          activate the owner's newest remaining garden

    Deactivation always runs before activation. The partial unique index on
    (owner_id) WHERE is_active would reject the reverse order, and it is
    also what makes a concurrent double activation fail one of the two
    transactions instead of committing both.

Design Decision:
    The service flushes but never commits. The surrounding session scope
    commits once at the end or rolls back everything, so a failure between
    "deactivate" and "insert" can never leave an owner with zero or two
    active gardens in the committed state.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gardengrid.config import settings
from gardengrid.exceptions import ValidationError
from gardengrid.layout.grid import OccupancyGrid
from gardengrid.models.bed import Bed
from gardengrid.models.garden import Garden
from gardengrid.models.plant import PlantInBed
from gardengrid.schemas.garden import (
    GardenCreate,
    GardenDeleteResponse,
    GardenResponse,
    GardenUpdate,
    GardenUpdateResponse,
)
from gardengrid.services.ownership import get_owned_garden

logger = logging.getLogger(__name__)


def validate_dimensions(width: int, height: int, label: str) -> None:
    """
    Raises:
        ValidationError: width/height not in 1..max_grid_dimension
    """
    limit = settings.max_grid_dimension
    for name, value in (("width", width), ("height", height)):
        if value < 1:
            raise ValidationError(
                message=f"{label.capitalize()} {name} must be a positive number of cells",
                field=name,
            )
        if value > limit:
            raise ValidationError(
                message=f"{label.capitalize()} {name} must not exceed {limit} cells",
                field=name,
                context={"max": limit},
            )


class GardenService:
    """
    Business logic for gardens.

    Responsibilities:
        - create_and_activate(): new garden becomes the owner's only active one
        - list_gardens() / get_garden(): owner-scoped reads
        - update_garden() / set_active(): partial updates, activation, resize
        - delete_garden(): cascade delete + fallback activation
    """

    async def create_and_activate(
        self, db: AsyncSession, owner_id: int, data: GardenCreate
    ) -> GardenResponse:
        """
        Create a garden and make it the owner's active garden.

        Raises:
            ValidationError: dimensions out of range (nothing is written)
        """
        validate_dimensions(data.width, data.height, "garden")

        await self._deactivate_gardens(db, owner_id)
        garden = await self._insert_active_garden(db, owner_id, data)

        logger.info(
            "Garden %s created and activated for owner %s (%dx%d)",
            garden.id, owner_id, garden.width, garden.height,
        )
        return GardenResponse.model_validate(garden)

    async def list_gardens(self, db: AsyncSession, owner_id: int) -> List[GardenResponse]:
        result = await db.execute(
            select(Garden)
            .where(Garden.owner_id == owner_id)
            .order_by(Garden.created_at, Garden.id)
        )
        return [GardenResponse.model_validate(g) for g in result.scalars().all()]

    async def get_garden(
        self, db: AsyncSession, owner_id: int, garden_id: int
    ) -> GardenResponse:
        garden = await get_owned_garden(db, owner_id, garden_id)
        return GardenResponse.model_validate(garden)

    async def update_garden(
        self,
        db: AsyncSession,
        owner_id: int,
        garden_id: int,
        data: GardenUpdate,
    ) -> GardenUpdateResponse:
        """
        Apply a partial update; omitted fields keep their value.

        Workflow Steps:
            1. Load the garden scoped to owner_id (mismatch → 404, no writes)
            2. Validate the resulting dimensions
            3. On a size change, reconcile beds: any placed bed that no
               longer fits is moved to the unplaced list
            4. If activating, deactivate the owner's other gardens
            5. Write the garden's own fields

        Raises:
            NotFoundError: garden missing or owned by someone else
            ValidationError: dimensions out of range
            PlacementError: stored beds already violate the layout
        """
        garden = await get_owned_garden(db, owner_id, garden_id)

        new_width = data.width if data.width is not None else garden.width
        new_height = data.height if data.height is not None else garden.height
        validate_dimensions(new_width, new_height, "garden")

        unplaced_ids: List[int] = []
        if (new_width, new_height) != (garden.width, garden.height):
            unplaced_ids = await self._reconcile_beds(db, garden, new_width, new_height)

        if data.is_active is True:
            await self._deactivate_gardens(db, owner_id, keep_id=garden.id)

        if data.garden_name is not None:
            garden.garden_name = data.garden_name
        garden.width = new_width
        garden.height = new_height
        if data.is_active is not None:
            garden.is_active = data.is_active
        await db.flush()

        logger.info(
            "Garden %s updated (size=%dx%d, active=%s, unplaced_beds=%s)",
            garden.id, garden.width, garden.height, garden.is_active, unplaced_ids,
        )
        return GardenUpdateResponse(
            **GardenResponse.model_validate(garden).model_dump(),
            unplaced_bed_ids=unplaced_ids,
        )

    async def set_active(
        self, db: AsyncSession, garden_id: int, owner_id: int
    ) -> GardenUpdateResponse:
        """Make `garden_id` the owner's only active garden."""
        return await self.update_garden(
            db, owner_id, garden_id, GardenUpdate(is_active=True)
        )

    async def delete_garden(
        self, db: AsyncSession, owner_id: int, garden_id: int
    ) -> GardenDeleteResponse:
        """
        Delete a garden with all of its beds and their plants.

        When the deleted garden was active, the owner's most recently
        created remaining garden (highest id on ties) becomes active. When
        it was the owner's last garden, the owner is left with none.

        Raises:
            NotFoundError: garden missing or owned by someone else
        """
        garden = await get_owned_garden(db, owner_id, garden_id)
        was_active = garden.is_active

        bed_ids = select(Bed.id).where(Bed.garden_id == garden.id)
        await db.execute(
            delete(PlantInBed)
            .where(PlantInBed.bed_id.in_(bed_ids))
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(Bed)
            .where(Bed.garden_id == garden.id)
            .execution_options(synchronize_session=False)
        )
        await db.delete(garden)
        await db.flush()

        activated_id: Optional[int] = None
        if was_active:
            activated_id = await self._activate_newest(db, owner_id)

        logger.info(
            "Garden %s deleted for owner %s (was_active=%s, activated=%s)",
            garden_id, owner_id, was_active, activated_id,
        )
        return GardenDeleteResponse(
            message="Garden deleted successfully",
            id=garden_id,
            activated_garden_id=activated_id,
        )

    # ── Internals ─────────────────────────────────────────────────────────

    async def _deactivate_gardens(
        self, db: AsyncSession, owner_id: int, keep_id: Optional[int] = None
    ) -> None:
        stmt = update(Garden).where(Garden.owner_id == owner_id)
        if keep_id is not None:
            stmt = stmt.where(Garden.id != keep_id)
        await db.execute(stmt.values(is_active=False))

    async def _insert_active_garden(
        self, db: AsyncSession, owner_id: int, data: GardenCreate
    ) -> Garden:
        garden = Garden(
            owner_id=owner_id,
            garden_name=data.garden_name,
            width=data.width,
            height=data.height,
            is_active=True,
        )
        db.add(garden)
        await db.flush()
        return garden

    async def _activate_newest(self, db: AsyncSession, owner_id: int) -> Optional[int]:
        result = await db.execute(
            select(Garden)
            .where(Garden.owner_id == owner_id)
            .order_by(Garden.created_at.desc(), Garden.id.desc())
            .limit(1)
        )
        newest = result.scalar_one_or_none()
        if newest is None:
            return None
        newest.is_active = True
        await db.flush()
        return newest.id

    async def _reconcile_beds(
        self, db: AsyncSession, garden: Garden, width: int, height: int
    ) -> List[int]:
        """Unplace every placed bed that does not fit a width × height garden."""
        result = await db.execute(
            select(Bed).where(Bed.garden_id == garden.id).order_by(Bed.id)
        )
        placed = [bed for bed in result.scalars().all() if bed.is_placed]

        grid = OccupancyGrid.from_occupants(
            garden.width, garden.height, lambda bed: bed.footprint, placed, label="bed"
        )
        outcome = grid.resize(width, height)
        for bed in outcome.dropped:
            bed.unplace()

        if outcome.destructive:
            logger.warning(
                "Garden %s resized to %dx%d: %d bed(s) moved to unplaced",
                garden.id, width, height, len(outcome.dropped),
            )
        return [bed.id for bed in outcome.dropped]


# ── Singleton Instance ────────────────────────────────────────────────────
garden_service = GardenService()
