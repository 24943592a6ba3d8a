"""
GardenGrid Backend — Ownership-Scoped Lookups
===============================================

What:  Loads a garden or bed only if it belongs to the requesting owner.
Why:   Every query that touches a garden or bed filters by owner_id in SQL,
       so another owner's id simply matches zero rows. The caller cannot
       tell "does not exist" from "belongs to someone else".
Who:   GardenService, BedService and PlantService.
"""

from typing import Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gardengrid.exceptions import NotFoundError
from gardengrid.models.bed import Bed
from gardengrid.models.garden import Garden


async def get_owned_garden(db: AsyncSession, owner_id: int, garden_id: int) -> Garden:
    """
    Raises:
        NotFoundError: no garden with this id for this owner (→ 404)
    """
    result = await db.execute(
        select(Garden).where(Garden.id == garden_id, Garden.owner_id == owner_id)
    )
    garden = result.scalar_one_or_none()
    if garden is None:
        raise NotFoundError(resource="garden", resource_id=garden_id)
    return garden


async def get_owned_bed(
    db: AsyncSession, owner_id: int, garden_id: int, bed_id: int
) -> Tuple[Garden, Bed]:
    """
    Load a bed together with its garden, both scoped to the owner.

    Raises:
        NotFoundError: the garden or the bed is missing or not owned (→ 404)
    """
    garden = await get_owned_garden(db, owner_id, garden_id)
    result = await db.execute(
        select(Bed).where(Bed.id == bed_id, Bed.garden_id == garden.id)
    )
    bed = result.scalar_one_or_none()
    if bed is None:
        raise NotFoundError(resource="bed", resource_id=bed_id)
    return garden, bed
