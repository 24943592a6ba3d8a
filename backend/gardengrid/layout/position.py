"""
Bed positions inside a garden.

A bed is either `Placed(row, col)` or `UNPLACED`. Storage and JSON keep the
legacy encoding top_position = left_position = -1 for unplaced beds; the
conversion happens only through `position_from_wire` / `position_to_wire`.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from gardengrid.exceptions import ValidationError

UNPLACED_SENTINEL = -1


@dataclass(frozen=True)
class Placed:
    row: int
    col: int


class Unplaced:
    """Singleton marker for a bed that exists but sits outside the grid."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNPLACED"


UNPLACED = Unplaced()

Position = Union[Placed, Unplaced]


def position_from_wire(top: int, left: int) -> Position:
    """
    Decode a (top_position, left_position) pair.

    Raises:
        ValidationError: half-sentinel pairs such as (-1, 3), or any other
            negative coordinate
    """
    if top == UNPLACED_SENTINEL and left == UNPLACED_SENTINEL:
        return UNPLACED
    if top < 0 or left < 0:
        raise ValidationError(
            message=(
                "Bed position must be non-negative, or (-1, -1) for an unplaced bed; "
                f"got ({top}, {left})"
            ),
            field="position",
        )
    return Placed(row=top, col=left)


def position_to_wire(position: Position) -> Tuple[int, int]:
    if isinstance(position, Placed):
        return position.row, position.col
    return UNPLACED_SENTINEL, UNPLACED_SENTINEL
