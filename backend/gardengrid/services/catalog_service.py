"""
GardenGrid Backend — Plant Catalog Service
============================================

What:  Read access to the plant catalog plus one-time seeding from a JSON file.
Who:   /api/plants/catalog routes; the application lifespan for seeding.
When:  Seeding runs at startup when CATALOG_SEED_PATH is set and the
       `plants` table is still empty.

Seed File Format:
    [
      {"common_name": "Tomato", "scientific_name": "Solanum lycopersicum",
       "icon_image": "tomato.png", "spacing": 4},
      ...
    ]

    Only `common_name` is required; `spacing` defaults to 1. A spacing
    outside 1/4/9 is still stored, but it is logged as a warning and listed
    in the seed result, because the editor will draw it as 1×1.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiofiles
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gardengrid.database import session_scope
from gardengrid.exceptions import CatalogLoadError, NotFoundError
from gardengrid.layout.footprint import is_supported_spacing
from gardengrid.models.plant import CatalogPlant
from gardengrid.schemas.plant import CatalogPlantResponse

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    inserted: int = 0
    skipped: bool = False
    unsupported: List[Dict[str, Any]] = field(default_factory=list)


def _to_catalog_response(plant: CatalogPlant) -> CatalogPlantResponse:
    return CatalogPlantResponse(
        id=plant.id,
        common_name=plant.common_name,
        scientific_name=plant.scientific_name,
        icon_image=plant.icon_image,
        spacing=plant.spacing,
        footprint_size=plant.footprint_side,
        spacing_supported=is_supported_spacing(plant.spacing),
    )


def _parse_entry(index: int, raw: Any) -> CatalogPlant:
    if not isinstance(raw, dict):
        raise CatalogLoadError(
            message=f"Catalog entry {index} is not an object",
            context={"index": index},
        )
    name = raw.get("common_name")
    if not isinstance(name, str) or not name.strip():
        raise CatalogLoadError(
            message=f"Catalog entry {index} has no common_name",
            context={"index": index},
        )
    spacing = raw.get("spacing", 1)
    if isinstance(spacing, bool) or not isinstance(spacing, int):
        raise CatalogLoadError(
            message=f"Catalog entry {index} ('{name}') has a non-integer spacing",
            context={"index": index, "spacing": spacing},
        )
    return CatalogPlant(
        common_name=name.strip(),
        scientific_name=raw.get("scientific_name"),
        icon_image=raw.get("icon_image"),
        spacing=spacing,
    )


class CatalogService:
    """
    Plant catalog reads and seeding.

    Responsibilities:
        - list_catalog() / get_catalog_plant(): catalog reads
        - read_seed_file(): load and parse the JSON seed file
        - seed_catalog(): insert entries into an empty catalog
        - seed_catalog_from_file(): both of the above in one transaction
    """

    async def list_catalog(self, db: AsyncSession) -> List[CatalogPlantResponse]:
        result = await db.execute(
            select(CatalogPlant).order_by(CatalogPlant.common_name, CatalogPlant.id)
        )
        return [_to_catalog_response(p) for p in result.scalars().all()]

    async def get_catalog_plant(self, db: AsyncSession, plant_id: int) -> CatalogPlantResponse:
        """
        Raises:
            NotFoundError: no catalog plant with this id
        """
        plant = await db.get(CatalogPlant, plant_id)
        if plant is None:
            raise NotFoundError(resource="catalog plant", resource_id=plant_id)
        return _to_catalog_response(plant)

    async def read_seed_file(self, path: str) -> List[CatalogPlant]:
        """
        Read and validate a catalog seed file.

        Raises:
            CatalogLoadError: file missing/unreadable, invalid JSON, not a
                list, or an entry without a usable common_name/spacing
        """
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            raise CatalogLoadError(
                message=f"Could not read catalog seed file: {path}",
                context={"path": path, "error": str(e)},
            ) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CatalogLoadError(
                message=f"Catalog seed file is not valid JSON: {e.msg}",
                context={"path": path, "line": e.lineno},
            ) from e

        if not isinstance(data, list):
            raise CatalogLoadError(
                message="Catalog seed file must contain a JSON list",
                context={"path": path},
            )
        return [_parse_entry(i, entry) for i, entry in enumerate(data)]

    async def seed_catalog(
        self, db: AsyncSession, plants: List[CatalogPlant]
    ) -> SeedResult:
        """Insert `plants` unless the catalog already has rows."""
        existing = await db.scalar(select(func.count()).select_from(CatalogPlant))
        if existing:
            logger.info("Plant catalog already has %d entries; seeding skipped", existing)
            return SeedResult(skipped=True)

        result = SeedResult()
        for plant in plants:
            if not is_supported_spacing(plant.spacing):
                logger.warning(
                    "Catalog plant '%s' has unsupported spacing %s; it will be drawn as 1x1",
                    plant.common_name, plant.spacing,
                )
                result.unsupported.append(
                    {"common_name": plant.common_name, "spacing": plant.spacing}
                )
        db.add_all(plants)
        await db.flush()
        result.inserted = len(plants)

        logger.info(
            "Plant catalog seeded with %d entries (%d unsupported spacing)",
            result.inserted, len(result.unsupported),
        )
        return result

    async def seed_catalog_from_file(
        self, path: str, factory: Optional[async_sessionmaker] = None
    ) -> SeedResult:
        """
        Raises:
            CatalogLoadError: see read_seed_file(); nothing is written
        """
        plants = await self.read_seed_file(path)
        async with session_scope(factory) as db:
            return await self.seed_catalog(db, plants)


# ── Singleton Instance ────────────────────────────────────────────────────
catalog_service = CatalogService()
