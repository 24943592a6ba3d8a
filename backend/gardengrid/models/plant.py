"""
GardenGrid Backend — Plant SQLAlchemy Models
==============================================

What:  The plant catalog (`plants`) and plant placements inside beds
       (`plants_in_beds`).

Footprints:
    A placement's footprint comes from its catalog entry's `spacing`:
    1 → 1×1, 4 → 2×2, 9 → 3×3, anything else → 1×1. The catalog loader
    warns about entries outside that set (see CatalogService).

Save semantics:
    A bed's placements are replaced wholesale on every save (delete all,
    insert all, one transaction). Rows are never patched individually, so
    `id` is not stable across saves.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from gardengrid.database import Base
from gardengrid.layout.footprint import side_for_spacing


class CatalogPlant(Base):
    """A plant species the editor can place."""

    __tablename__ = "plants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    common_name: Mapped[str] = mapped_column(String(100), nullable=False)
    scientific_name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    icon_image: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    spacing: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default=text("1"),
        comment="Cells per plant: 1, 4 or 9",
    )

    @property
    def footprint_side(self) -> int:
        return side_for_spacing(self.spacing)

    def __repr__(self) -> str:
        return f"<CatalogPlant(id={self.id}, common_name='{self.common_name}', spacing={self.spacing})>"


class PlantInBed(Base):
    """One plant placed in a bed at column x_position, row y_position."""

    __tablename__ = "plants_in_beds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    bed_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("garden_beds.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    plant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("plants.id"),
        nullable=False,
    )

    planted_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    x_position: Mapped[int] = mapped_column(Integer, nullable=False, comment="Column")
    y_position: Mapped[int] = mapped_column(Integer, nullable=False, comment="Row")

    plant_role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<PlantInBed(id={self.id}, bed_id={self.bed_id}, plant_id={self.plant_id}, "
            f"at=({self.x_position}, {self.y_position}))>"
        )
