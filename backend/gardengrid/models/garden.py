"""
GardenGrid Backend — Garden SQLAlchemy Model
==============================================

What:  ORM model for the `gardens` table: a width × height grid owned by one user.
Who:   Used by GardenService (activation, CRUD) and BedService (container bounds).

Table Design Rationale:
    - owner_id: The user id from the auth layer. Auth is a separate service,
      so there is no FK to a users table here.
    - is_active: At most one TRUE per owner. GardenService flips flags inside
      one transaction; the partial unique index below makes the database
      refuse any commit that would leave two active gardens, which is what
      protects concurrent requests across several server processes.
    - created_at: Orders the fallback choice when the active garden is deleted.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    false,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from gardengrid.database import Base


class Garden(Base):
    """
    A user's garden.

    Lifecycle:
        1. Created active; every other garden of the owner is deactivated
        2. Renamed, resized or re-activated through PUT /api/gardens
        3. Deleted together with its beds and their plants; if it was the
           active one, the owner's newest remaining garden becomes active
    """

    __tablename__ = "gardens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    owner_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Owning user id (issued by the auth service)",
    )

    garden_name: Mapped[str] = mapped_column(String(100), nullable=False)

    width: Mapped[int] = mapped_column(Integer, nullable=False, comment="Columns, in cells")
    height: Mapped[int] = mapped_column(Integer, nullable=False, comment="Rows, in cells")

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("width > 0", name="ck_gardens_width_positive"),
        CheckConstraint("height > 0", name="ck_gardens_height_positive"),
        Index(
            "uq_gardens_one_active_per_owner",
            "owner_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Garden(id={self.id}, owner_id={self.owner_id}, "
            f"size={self.width}x{self.height}, is_active={self.is_active})>"
        )
