"""
RootNote Backend — Plant SQLAlchemy Model
=========================================

What:  ORM model representing the `plants` table.
Who:   Used by the plant store for CRUD and by Alembic for schema management.

Table Design:
    - Integer AUTOINCREMENT primary key: ids are never reused, even after
      the highest row is deleted (plain INTEGER PRIMARY KEY would reuse it).
    - Column names are camelCase (`commonName`, `lastWateredOn`, ...) so an
      existing rootnote.db created by earlier versions of the API is read
      as-is. Python attributes use snake_case.
    - Care dates are free-form TEXT; the client decides their format.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from rootnote.database import Base


# SQLite INTEGER is a signed 64-bit value; no row can hold an id above this.
MAX_PLANT_ID = 2**63 - 1

# Columns a client may write, in table order. `id` is excluded: it is
# assigned by the database and never changes.
EDITABLE_FIELDS = (
    "common_name",
    "variety",
    "cultivar",
    "notes",
    "last_watered_on",
    "seeded_date",
    "sprouted_date",
    "transplanted_date",
    "first_flower_date",
    "first_fruit_date",
    "last_pruned_date",
    "last_fertilized_date",
    "last_harvested_date",
)


class Plant(Base):
    """
    One tracked plant.

    Lifecycle:
        1. Created by PlantStore.create_plant() (id assigned by SQLite)
        2. Mutated only by PlantStore.update_plant() (listed columns only)
        3. Removed by PlantStore.delete_plant() (hard delete)
    """

    __tablename__ = "plants"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # ── Identity ──────────────────────────────────────────────────────────
    common_name: Mapped[str] = mapped_column("commonName", Text, nullable=False)
    variety: Mapped[str | None] = mapped_column("variety", Text, nullable=True)
    cultivar: Mapped[str | None] = mapped_column("cultivar", Text, nullable=True)
    notes: Mapped[str | None] = mapped_column("notes", Text, nullable=True)

    # ── Care dates ────────────────────────────────────────────────────────
    last_watered_on: Mapped[str | None] = mapped_column("lastWateredOn", Text, nullable=True)
    seeded_date: Mapped[str | None] = mapped_column("seededDate", Text, nullable=True)
    sprouted_date: Mapped[str | None] = mapped_column("sproutedDate", Text, nullable=True)
    transplanted_date: Mapped[str | None] = mapped_column("transplantedDate", Text, nullable=True)
    first_flower_date: Mapped[str | None] = mapped_column("firstFlowerDate", Text, nullable=True)
    first_fruit_date: Mapped[str | None] = mapped_column("firstFruitDate", Text, nullable=True)
    last_pruned_date: Mapped[str | None] = mapped_column("lastPrunedDate", Text, nullable=True)
    last_fertilized_date: Mapped[str | None] = mapped_column(
        "lastFertilizedDate", Text, nullable=True
    )
    last_harvested_date: Mapped[str | None] = mapped_column(
        "lastHarvestedDate", Text, nullable=True
    )

    def __repr__(self) -> str:
        return f"<Plant(id={self.id}, common_name='{self.common_name}')>"
