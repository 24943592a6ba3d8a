"""
GardenGrid Backend — Bed Request/Response Schemas
===================================================

What:  API contract for /api/beds.

Unplaced beds are encoded as top_position = left_position = -1 on the wire.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from gardengrid.layout.position import UNPLACED_SENTINEL
from gardengrid.schemas.plant import PlantInBedResponse


class BedCreate(BaseModel):
    """Body of POST /api/beds. Omitting the position creates an unplaced bed."""
    name: str = Field(min_length=1, max_length=100)
    width: int = Field(gt=0, description="Columns, in cells")
    height: int = Field(gt=0, description="Rows, in cells")
    top_position: int = Field(default=UNPLACED_SENTINEL, description="Row; -1 when unplaced")
    left_position: int = Field(default=UNPLACED_SENTINEL, description="Column; -1 when unplaced")


class BedUpdate(BaseModel):
    """
    Body of PUT /api/beds. Omitted fields keep their current value.

    Send top_position = left_position = -1 to unplace the bed.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    top_position: Optional[int] = Field(default=None)
    left_position: Optional[int] = Field(default=None)


class BedResponse(BaseModel):
    id: int
    garden_id: int
    name: str
    width: int
    height: int
    top_position: int
    left_position: int
    is_placed: bool = Field(description="False when the bed is in the unplaced list")

    model_config = {"from_attributes": True}


class BedUpdateResponse(BedResponse):
    """BedResponse plus the plants a confirmed shrink removed."""
    dropped_plants: List[PlantInBedResponse] = Field(
        default_factory=list,
        description="Plants deleted because they no longer fit the resized bed",
    )
