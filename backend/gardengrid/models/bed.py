"""
GardenGrid Backend — Bed SQLAlchemy Model
===========================================

What:  ORM model for the `garden_beds` table: a rectangle inside a garden
       that holds plants.

Position storage:
    top_position / left_position hold the row / column of the bed's
    top-left cell. The pair (-1, -1) marks an unplaced bed (it exists and
    keeps its plants, but is not drawn on the garden grid). Code outside
    this module reads `bed.position`, which is `Placed(row, col)` or
    `UNPLACED`, and never compares against -1 itself.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from gardengrid.database import Base
from gardengrid.layout.footprint import Footprint
from gardengrid.layout.position import (
    UNPLACED,
    UNPLACED_SENTINEL,
    Placed,
    Position,
    position_from_wire,
    position_to_wire,
)


class Bed(Base):
    """A bed within a garden; either placed at (row, col) or unplaced."""

    __tablename__ = "garden_beds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    garden_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("gardens.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)

    top_position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=UNPLACED_SENTINEL,
        server_default=text(str(UNPLACED_SENTINEL)),
        comment="Row of the top-left cell; -1 when unplaced",
    )
    left_position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=UNPLACED_SENTINEL,
        server_default=text(str(UNPLACED_SENTINEL)),
        comment="Column of the top-left cell; -1 when unplaced",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("width > 0", name="ck_garden_beds_width_positive"),
        CheckConstraint("height > 0", name="ck_garden_beds_height_positive"),
    )

    # ── Position ──────────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return position_from_wire(self.top_position, self.left_position)

    @property
    def is_placed(self) -> bool:
        return isinstance(self.position, Placed)

    @property
    def footprint(self) -> Optional[Footprint]:
        """Footprint on the garden grid, or None while unplaced."""
        position = self.position
        if not isinstance(position, Placed):
            return None
        return Footprint(x=position.col, y=position.row, w=self.width, h=self.height)

    def place(self, row: int, col: int) -> None:
        self.top_position, self.left_position = position_to_wire(Placed(row=row, col=col))

    def unplace(self) -> None:
        """Take the bed off the garden grid; size and plants are untouched."""
        self.top_position, self.left_position = position_to_wire(UNPLACED)

    def __repr__(self) -> str:
        return (
            f"<Bed(id={self.id}, garden_id={self.garden_id}, "
            f"size={self.width}x{self.height}, position={self.position!r})>"
        )
