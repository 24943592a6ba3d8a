"""
GardenGrid Backend — Garden Request/Response Schemas
======================================================

What:  API contract for /api/gardens.

Field names follow the JSON the grid editors already send and read
(`garden_name`, `is_active`, `userId` in the create body).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class GardenCreate(BaseModel):
    """
    Body of POST /api/gardens.

    The owner travels in the body as `userId`; the new garden always starts
    active.
    """
    owner_id: int = Field(alias="userId", description="Owning user id")
    garden_name: str = Field(min_length=1, max_length=100)
    width: int = Field(gt=0, description="Columns, in cells")
    height: int = Field(gt=0, description="Rows, in cells")

    model_config = {"populate_by_name": True}


class GardenUpdate(BaseModel):
    """
    Body of PUT /api/gardens. Omitted fields keep their current value.

    is_active=true deactivates the owner's other gardens in the same
    transaction. Shrinking width/height moves beds that no longer fit to the
    unplaced list.
    """
    garden_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = Field(default=None)


class GardenResponse(BaseModel):
    id: int = Field(description="Garden id")
    owner_id: int = Field(description="Owning user id")
    garden_name: str
    width: int
    height: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class GardenUpdateResponse(GardenResponse):
    """
    GardenResponse plus the beds a resize took off the grid.

    Those beds still exist with their plants; they now show up as unplaced.
    """
    unplaced_bed_ids: List[int] = Field(
        default_factory=list,
        description="Beds moved to the unplaced state because they no longer fit",
    )


class GardenDeleteResponse(BaseModel):
    message: str
    id: int = Field(description="ID of the deleted garden")
    activated_garden_id: Optional[int] = Field(
        default=None,
        description="Garden that became active because the deleted one was active",
    )
