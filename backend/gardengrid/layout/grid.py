"""
GardenGrid — Layout Reconciler
================================

What:  A height × width array of cells, each holding None or a reference to
       the occupant covering it, kept in step with the occupant list.
Why:   The editors ask two kinds of question: "what is under this cell?"
       (delete-by-click, hover) and "does this rectangle fit?" (placement).
       The cell array answers the first, the footprint list the second.
How:   The grid is a derived cache. It is rebuilt from the flat occupant
       list whenever a container is loaded and never stored.

Operations:
    add        → validate, then write the reference into every footprint cell
    remove     → clear the footprint cells, drop from the list
    remove_at  → delete-by-click on any cell of a multi-cell occupant
    resize     → rebuild at new dimensions, dropping occupants that no
                 longer fit (never clipped, never moved)

Occupants are compared by identity, so two plants of the same catalog
species at different spots are separate occupants.
"""

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

from gardengrid.exceptions import ValidationError
from gardengrid.layout.footprint import Footprint
from gardengrid.layout.placement import can_place, check_placement, in_bounds

T = TypeVar("T")


def _check_dimensions(width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise ValidationError(
            message=f"Grid dimensions must be positive; got {width}x{height}",
            field="dimensions",
        )


@dataclass
class ResizeResult(Generic[T]):
    """Outcome of a container resize: who survives and who is dropped."""

    width: int
    height: int
    kept: List[T] = field(default_factory=list)
    dropped: List[T] = field(default_factory=list)

    @property
    def destructive(self) -> bool:
        return bool(self.dropped)


class OccupancyGrid(Generic[T]):
    """
    Occupancy grid for one container (a garden's beds or a bed's plants).

    Args:
        width: Container width in cells
        height: Container height in cells
        footprint_of: Maps an occupant to its Footprint. Called once when the
            occupant is added; the grid keeps that footprint so later changes
            to the occupant object cannot desynchronize the cells.
    """

    def __init__(
        self,
        width: int,
        height: int,
        footprint_of: Callable[[T], Footprint],
    ):
        _check_dimensions(width, height)
        self.width = width
        self.height = height
        self._footprint_of = footprint_of
        self._entries: List[Tuple[T, Footprint]] = []
        self.cells: List[List[Optional[T]]] = self._empty_cells(width, height)

    @classmethod
    def from_occupants(
        cls,
        width: int,
        height: int,
        footprint_of: Callable[[T], Footprint],
        occupants: Iterable[T],
        label: str = "occupant",
    ) -> "OccupancyGrid[T]":
        """
        Rebuild a grid from stored occupants.

        Unlike `add`, this raises on the first occupant that does not fit:
        stored data that violates the layout invariants is an error, not
        something to skip quietly.

        Raises:
            PlacementError: an occupant is out of bounds or overlaps another
        """
        grid = cls(width, height, footprint_of)
        for occupant in occupants:
            footprint = footprint_of(occupant)
            check_placement(width, height, grid.footprints(), footprint, label=label)
            grid._write(occupant, footprint)
        return grid

    # ── Queries ───────────────────────────────────────────────────────────

    @property
    def occupants(self) -> List[T]:
        return [occupant for occupant, _ in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def footprints(self, ignore: Optional[T] = None) -> List[Footprint]:
        return [fp for occupant, fp in self._entries if occupant is not ignore]

    def footprint(self, occupant: T) -> Optional[Footprint]:
        index = self._index(occupant)
        return None if index is None else self._entries[index][1]

    def can_place(self, candidate: Footprint, ignore: Optional[T] = None) -> bool:
        """Validate `candidate` against every occupant except `ignore`."""
        return can_place(self.width, self.height, self.footprints(ignore), candidate)

    def occupant_at(self, row: int, col: int) -> Optional[T]:
        if not (0 <= row < self.height and 0 <= col < self.width):
            return None
        return self.cells[row][col]

    def origin_of(self, row: int, col: int) -> Optional[Tuple[int, int]]:
        """
        Top-left (row, col) of the occupant covering (row, col).

        Walks up while the cell above holds the same reference, then left
        while the cell to the left does.
        """
        occupant = self.occupant_at(row, col)
        if occupant is None:
            return None
        while row > 0 and self.cells[row - 1][col] is occupant:
            row -= 1
        while col > 0 and self.cells[row][col - 1] is occupant:
            col -= 1
        return row, col

    # ── Mutations ─────────────────────────────────────────────────────────

    def add(self, occupant: T) -> bool:
        """
        Place `occupant` if its footprint fits.

        Returns False and leaves the grid untouched when it does not, or when
        the same occupant is already on the grid. User feedback is the
        caller's job.
        """
        if self._index(occupant) is not None:
            return False
        footprint = self._footprint_of(occupant)
        if not self.can_place(footprint):
            return False
        self._write(occupant, footprint)
        return True

    def remove(self, occupant: T) -> bool:
        index = self._index(occupant)
        if index is None:
            return False
        _, footprint = self._entries.pop(index)
        self._clear(footprint)
        return True

    def remove_at(self, row: int, col: int) -> Optional[T]:
        """
        Delete-by-click: remove the whole occupant covering (row, col).

        Clicking any cell of a 3×3 plant removes all nine cells of that plant
        and nothing else. Returns the removed occupant, or None for an empty
        or out-of-range cell.
        """
        occupant = self.occupant_at(row, col)
        if occupant is None:
            return None
        origin_row, origin_col = self.origin_of(row, col)
        index = self._index(occupant)
        _, footprint = self._entries.pop(index)
        self._clear(footprint.moved_to(origin_col, origin_row))
        return occupant

    def plan_resize(self, width: int, height: int) -> ResizeResult[T]:
        """Report what `resize` would keep and drop, without changing anything."""
        _check_dimensions(width, height)
        result: ResizeResult[T] = ResizeResult(width=width, height=height)
        for occupant, footprint in self._entries:
            if in_bounds(width, height, footprint):
                result.kept.append(occupant)
            else:
                result.dropped.append(occupant)
        return result

    def resize(self, width: int, height: int) -> ResizeResult[T]:
        """
        Rebuild the grid at new dimensions.

        Occupants whose footprint no longer fits are removed from the
        occupant list entirely. Kept occupants retain identity, position and
        order. Callers must surface `result.dropped` before persisting.
        """
        result = self.plan_resize(width, height)
        kept = [(o, fp) for o, fp in self._entries if in_bounds(width, height, fp)]
        self.width = width
        self.height = height
        self.cells = self._empty_cells(width, height)
        self._entries = []
        for occupant, footprint in kept:
            self._write(occupant, footprint)
        return result

    # ── Internals ─────────────────────────────────────────────────────────

    @staticmethod
    def _empty_cells(width: int, height: int) -> List[List[Optional[T]]]:
        return [[None] * width for _ in range(height)]

    def _index(self, occupant: T) -> Optional[int]:
        for index, (existing, _) in enumerate(self._entries):
            if existing is occupant:
                return index
        return None

    def _write(self, occupant: T, footprint: Footprint) -> None:
        for row, col in footprint.cells():
            self.cells[row][col] = occupant
        self._entries.append((occupant, footprint))

    def _clear(self, footprint: Footprint) -> None:
        for row, col in footprint.cells():
            self.cells[row][col] = None
