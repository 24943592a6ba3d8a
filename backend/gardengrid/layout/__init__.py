"""
GardenGrid — Layout Core
==========================

What:  Pure placement and occupancy logic shared by beds-in-garden and
       plants-in-bed.
How:   Everything is expressed as a `Footprint` (x, y, w, h) on a
       width × height grid of integer cells. No database, no HTTP.

Module Inventory:
    - footprint.py:  Footprint rectangle + spacing → footprint mapping
    - placement.py:  can_place / check_placement (bounds + overlap)
    - position.py:   Placed | Unplaced position variant, wire conversion
    - grid.py:       OccupancyGrid (add, remove, delete-by-click, resize)
"""

from gardengrid.layout.footprint import (
    Footprint,
    SUPPORTED_SPACINGS,
    footprint_for_spacing,
    is_supported_spacing,
    side_for_spacing,
)
from gardengrid.layout.grid import OccupancyGrid, ResizeResult
from gardengrid.layout.placement import can_place, check_placement, in_bounds
from gardengrid.layout.position import (
    UNPLACED,
    Placed,
    Position,
    Unplaced,
    position_from_wire,
    position_to_wire,
)

__all__ = [
    "Footprint",
    "SUPPORTED_SPACINGS",
    "footprint_for_spacing",
    "is_supported_spacing",
    "side_for_spacing",
    "OccupancyGrid",
    "ResizeResult",
    "can_place",
    "check_placement",
    "in_bounds",
    "UNPLACED",
    "Placed",
    "Position",
    "Unplaced",
    "position_from_wire",
    "position_to_wire",
]
