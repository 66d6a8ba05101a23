"""Create plants table

Revision ID: 001
Revises: None
Create Date: 2025-01-04 00:00:00.000000+00:00

What:  Creates the `plants` table, one row per tracked plant.
How:   INTEGER AUTOINCREMENT primary key; every other column is TEXT.
       Column names are camelCase to match databases created by earlier
       versions of the API.

Rollback: downgrade() drops the table (all plant data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_OPTIONAL_TEXT_COLUMNS = (
    "variety",
    "cultivar",
    "notes",
    "lastWateredOn",
    "seededDate",
    "sproutedDate",
    "transplantedDate",
    "firstFlowerDate",
    "firstFruitDate",
    "lastPrunedDate",
    "lastFertilizedDate",
    "lastHarvestedDate",
)


def upgrade() -> None:
    """Create the plants table; a no-op if the API already created it."""
    bind = op.get_bind()
    if sa.inspect(bind).has_table("plants"):
        return

    op.create_table(
        "plants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("commonName", sa.Text(), nullable=False),
        *(sa.Column(name, sa.Text(), nullable=True) for name in _OPTIONAL_TEXT_COLUMNS),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    op.drop_table("plants")
