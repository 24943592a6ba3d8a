"""Create garden, bed and plant tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `gardens`, `garden_beds`, `plants` (the catalog) and
       `plants_in_beds`.

The partial unique index `uq_gardens_one_active_per_owner` allows at most
one active garden per owner. Activation code must therefore deactivate the
owner's other gardens before it activates one.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "gardens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "owner_id",
            sa.Integer(),
            nullable=False,
            comment="Owning user id (issued by the auth service)",
        ),
        sa.Column("garden_name", sa.String(100), nullable=False),
        sa.Column("width", sa.Integer(), nullable=False, comment="Columns, in cells"),
        sa.Column("height", sa.Integer(), nullable=False, comment="Rows, in cells"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("width > 0", name="ck_gardens_width_positive"),
        sa.CheckConstraint("height > 0", name="ck_gardens_height_positive"),
    )
    op.create_index("ix_gardens_owner_id", "gardens", ["owner_id"])
    op.create_index(
        "uq_gardens_one_active_per_owner",
        "gardens",
        ["owner_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active = 1"),
    )

    op.create_table(
        "garden_beds",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("garden_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column(
            "top_position",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("-1"),
            comment="Row of the top-left cell; -1 when unplaced",
        ),
        sa.Column(
            "left_position",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("-1"),
            comment="Column of the top-left cell; -1 when unplaced",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["garden_id"], ["gardens.id"], ondelete="CASCADE"),
        sa.CheckConstraint("width > 0", name="ck_garden_beds_width_positive"),
        sa.CheckConstraint("height > 0", name="ck_garden_beds_height_positive"),
    )
    op.create_index("ix_garden_beds_garden_id", "garden_beds", ["garden_id"])

    op.create_table(
        "plants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("common_name", sa.String(100), nullable=False),
        sa.Column("scientific_name", sa.String(150), nullable=True),
        sa.Column("icon_image", sa.String(255), nullable=True),
        sa.Column(
            "spacing",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("1"),
            comment="Cells per plant: 1, 4 or 9",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "plants_in_beds",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("bed_id", sa.Integer(), nullable=False),
        sa.Column("plant_id", sa.Integer(), nullable=False),
        sa.Column(
            "planted_date",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("x_position", sa.Integer(), nullable=False, comment="Column"),
        sa.Column("y_position", sa.Integer(), nullable=False, comment="Row"),
        sa.Column("plant_role", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["bed_id"], ["garden_beds.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["plant_id"], ["plants.id"]),
    )
    op.create_index("ix_plants_in_beds_bed_id", "plants_in_beds", ["bed_id"])


def downgrade() -> None:
    op.drop_index("ix_plants_in_beds_bed_id", table_name="plants_in_beds")
    op.drop_table("plants_in_beds")
    op.drop_table("plants")
    op.drop_index("ix_garden_beds_garden_id", table_name="garden_beds")
    op.drop_table("garden_beds")
    op.drop_index("uq_gardens_one_active_per_owner", table_name="gardens")
    op.drop_index("ix_gardens_owner_id", table_name="gardens")
    op.drop_table("gardens")
