"""
GardenGrid — Placement Validator
==================================

What:  Decides whether a candidate footprint fits in a container that
       already holds other footprints.
How:   Bounds check first, then a pairwise rectangle overlap test against
       every existing occupant. Pure and deterministic: the same function
       serves bed-in-garden and plant-in-bed placement, server-side and in
       the hover-preview endpoints.

Rules:
    - reject if x < 0, y < 0, x + w > width or y + h > height
    - reject if the candidate overlaps any occupant
    - reject degenerate footprints (w < 1 or h < 1)
    - accept otherwise; never adjust the candidate to a nearby valid spot
"""

from typing import Iterable, Optional

from gardengrid.exceptions import PlacementError
from gardengrid.layout.footprint import Footprint


def in_bounds(container_width: int, container_height: int, candidate: Footprint) -> bool:
    if candidate.w < 1 or candidate.h < 1:
        return False
    return not (
        candidate.x < 0
        or candidate.y < 0
        or candidate.right > container_width
        or candidate.bottom > container_height
    )


def first_conflict(
    occupants: Iterable[Footprint], candidate: Footprint
) -> Optional[Footprint]:
    for occupant in occupants:
        if candidate.overlaps(occupant):
            return occupant
    return None


def can_place(
    container_width: int,
    container_height: int,
    occupants: Iterable[Footprint],
    candidate: Footprint,
) -> bool:
    """
    True when `candidate` lies fully inside the container and overlaps no
    occupant.

    Args:
        container_width: Container width in cells
        container_height: Container height in cells
        occupants: Footprints already placed in the container
        candidate: Footprint being placed
    """
    if not in_bounds(container_width, container_height, candidate):
        return False
    return first_conflict(occupants, candidate) is None


def check_placement(
    container_width: int,
    container_height: int,
    occupants: Iterable[Footprint],
    candidate: Footprint,
    label: str = "occupant",
) -> None:
    """
    Same test as `can_place`, raising `PlacementError` with the reason.

    Used by services, where the caller needs to tell the user why a bed or
    plant was refused.

    Raises:
        PlacementError: reason "out_of_bounds" or "overlap"
    """
    if not in_bounds(container_width, container_height, candidate):
        raise PlacementError(
            message=(
                f"The {label} at ({candidate.x}, {candidate.y}) sized "
                f"{candidate.w}x{candidate.h} does not fit inside the "
                f"{container_width}x{container_height} grid"
            ),
            reason=PlacementError.OUT_OF_BOUNDS,
            context={"candidate": candidate.as_dict()},
        )

    conflict = first_conflict(occupants, candidate)
    if conflict is not None:
        raise PlacementError(
            message=(
                f"The {label} at ({candidate.x}, {candidate.y}) overlaps "
                f"another {label} at ({conflict.x}, {conflict.y})"
            ),
            reason=PlacementError.OVERLAP,
            conflict=conflict.as_dict(),
            context={"candidate": candidate.as_dict()},
        )
