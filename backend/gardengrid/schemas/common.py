"""
GardenGrid Backend — Shared Response Schemas
==============================================

What:  Response models used by more than one resource: errors, plain
       messages, placement previews, health.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""
    message: str = Field(description="Human-readable result")
    id: Optional[int] = Field(default=None, description="ID of the affected resource")


class PlacementCheckResponse(BaseModel):
    """
    What:  Hover-preview answer for the grid editors.
    Who:   GET /api/beds/can-place and GET /api/plants/can-place.

    The editor colors the preview rectangle affirmative when `valid` is
    true and negative otherwise. `x`, `y`, `w`, `h` echo the footprint that
    was tested, so a plant preview shows its real 2×2 or 3×3 size.
    """
    valid: bool = Field(description="Whether the footprint fits at this position")
    x: int = Field(description="Column of the tested footprint")
    y: int = Field(description="Row of the tested footprint")
    w: int = Field(description="Width of the tested footprint, in cells")
    h: int = Field(description="Height of the tested footprint, in cells")


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {
            "error": "validation_error",
            "message": "The bed at (2, 2) overlaps another bed at (0, 0)",
            "details": {"reason": "overlap", "conflict": {"x": 0, "y": 0, "w": 3, "h": 3}},
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
