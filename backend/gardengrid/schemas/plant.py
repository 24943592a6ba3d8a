"""
GardenGrid Backend — Plant Request/Response Schemas
=====================================================

What:  API contract for /api/plants (bed contents and the catalog).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlantPlacement(BaseModel):
    """
    One element of the POST /api/plants/save-plants body.

    The body is the complete plant list for the bed; anything not in it is
    removed. Bounds and overlaps are checked server-side before any write.
    """
    plant_id: int = Field(description="Catalog plant id")
    x_position: int = Field(description="Column of the top-left cell")
    y_position: int = Field(description="Row of the top-left cell")
    plant_role: Optional[str] = Field(default=None, max_length=50)


class PlantInBedResponse(BaseModel):
    """A placed plant joined with its catalog entry."""
    plant_in_bed_id: int
    bed_id: int
    plant_id: int
    planted_date: Optional[datetime] = None
    x_position: int
    y_position: int
    plant_role: Optional[str] = None
    common_name: str
    scientific_name: Optional[str] = None
    icon_image: Optional[str] = None
    spacing: int
    footprint_size: int = Field(description="Side length of the square footprint, in cells")


class SavePlantsResponse(BaseModel):
    message: str
    bed_id: int
    saved_count: int = Field(description="Number of plants now in the bed")


class CatalogPlantResponse(BaseModel):
    id: int
    common_name: str
    scientific_name: Optional[str] = None
    icon_image: Optional[str] = None
    spacing: int
    footprint_size: int = Field(description="Side length of the square footprint, in cells")
    spacing_supported: bool = Field(
        description="False when spacing is outside 1/4/9 and the editor falls back to 1x1",
    )
