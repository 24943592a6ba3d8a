"""Footprint rectangles and the catalog spacing → footprint mapping."""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

# Catalog spacing value → side length in cells. Only these three sizes
# exist in the editor; everything else falls back to DEFAULT_SIDE.
SPACING_SIDES: Dict[int, int] = {1: 1, 4: 2, 9: 3}
SUPPORTED_SPACINGS = frozenset(SPACING_SIDES)
DEFAULT_SIDE = 1


@dataclass(frozen=True)
class Footprint:
    """
    Axis-aligned rectangle of grid cells.

    `x` is the column and `y` the row of the top-left cell; `w` and `h` are
    the extent in cells. The rectangle covers columns x..x+w-1 and rows
    y..y+h-1.
    """

    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every covered cell as (row, col), row-major."""
        for row in range(self.y, self.bottom):
            for col in range(self.x, self.right):
                yield row, col

    def overlaps(self, other: "Footprint") -> bool:
        """Standard AABB test; rectangles that only share an edge do not overlap."""
        return not (
            self.right <= other.x
            or other.right <= self.x
            or self.bottom <= other.y
            or other.bottom <= self.y
        )

    def moved_to(self, x: int, y: int) -> "Footprint":
        return Footprint(x=x, y=y, w=self.w, h=self.h)

    def as_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


def side_for_spacing(spacing: Any) -> int:
    """
    Side length in cells for a catalog spacing value.

    Accepts ints and numeric strings (catalog rows have carried both).
    Unparseable or unlisted values fall back to a single cell; callers
    that load catalog data use `is_supported_spacing` to flag those.
    """
    try:
        value = int(spacing)
    except (TypeError, ValueError):
        return DEFAULT_SIDE
    return SPACING_SIDES.get(value, DEFAULT_SIDE)


def is_supported_spacing(spacing: Any) -> bool:
    try:
        return int(spacing) in SUPPORTED_SPACINGS
    except (TypeError, ValueError):
        return False


def footprint_for_spacing(x: int, y: int, spacing: Any) -> Footprint:
    """Square footprint at (x, y) sized from the catalog spacing."""
    side = side_for_spacing(spacing)
    return Footprint(x=x, y=y, w=side, h=side)
