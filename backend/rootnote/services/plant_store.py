"""
RootNote Backend — Plant Store
==============================

What:  Durable persistence and retrieval of plant records.
How:   An explicitly constructed PlantStore owns its async engine. It is
       opened in the application lifespan, reached by route handlers through
       `app.state.store`, and closed on shutdown.
Who:   Called by the plant and health route handlers, and directly by tests.

Operations:
    list_plants()                 → list[Plant]
    create_plant(fields)          → Plant             (ValidationError)
    get_plant(plant_id)           → Plant             (NotFoundError)
    update_plant(plant_id, changes) → MutationOutcome (ValidationError)
    delete_plant(plant_id)        → MutationOutcome

    Every operation runs exactly one statement in its own transaction.
    Driver failures surface as StorageError.

Mutation outcomes:
    update/delete never raise for an unknown id. They return a tagged
    MutationOutcome (UPDATED / DELETED / NOT_FOUND) with the number of rows
    affected, and the caller decides whether NOT_FOUND is an error.
"""

import enum
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rootnote.database import Base, build_engine, build_session_factory, session_scope
from rootnote.exceptions import NotFoundError, StorageError, ValidationError
from rootnote.models.plant import EDITABLE_FIELDS, MAX_PLANT_ID, Plant

logger = logging.getLogger(__name__)


class MutationStatus(str, enum.Enum):
    """Tag of a mutation outcome."""

    UPDATED = "updated"
    DELETED = "deleted"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class MutationOutcome:
    """Result of update_plant() / delete_plant()."""

    status: MutationStatus
    changes: int

    @property
    def found(self) -> bool:
        return self.status is not MutationStatus.NOT_FOUND


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _is_storable_id(plant_id: int) -> bool:
    # Out-of-range ids overflow the driver instead of matching nothing
    return 1 <= plant_id <= MAX_PLANT_ID


class PlantStore:
    """
    CRUD over the single `plants` table.

    Lifecycle:
        store = PlantStore("sqlite+aiosqlite:///./rootnote.db")
        await store.open()     # engine created, table created if missing
        ...                    # operations
        await store.close()    # engine disposed

    Field mappings passed to create_plant() and update_plant() are keyed by
    Python attribute names (see rootnote.models.plant.EDITABLE_FIELDS).
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self) -> None:
        """
        Create the engine and the `plants` table if it does not exist.

        Idempotent. Raises StorageError if the database cannot be reached.
        """
        if self._engine is not None:
            return

        engine = build_engine(self.database_url, echo=self.echo)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            await engine.dispose()
            logger.error("Could not open plant store at %s: %s", self.database_url, str(e))
            raise StorageError(
                message="Could not open the plant database.",
                context={"original_error": type(e).__name__},
            ) from e

        self._engine = engine
        self._session_factory = build_session_factory(engine)
        logger.info("Plant store opened: %s", self.database_url)

    async def close(self) -> None:
        """Dispose the engine. Idempotent."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Plant store closed")

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        """Session scope for one operation; driver errors become StorageError."""
        if self._session_factory is None:
            raise StorageError(
                message="The plant store is not open.",
                context={"action": action},
            )
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("Database error during %s: %s", action, str(e), exc_info=True)
            raise StorageError(
                context={"action": action, "original_error": type(e).__name__},
            ) from e

    async def ping(self) -> None:
        """Run `SELECT 1`; raises StorageError if the database is unreachable."""
        async with self._session("ping") as session:
            await session.execute(text("SELECT 1"))

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def _check_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
        unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(
                message=f"Unknown plant field(s): {', '.join(unknown)}",
                context={"unknown_fields": unknown},
            )
        return dict(fields)

    # ── Operations ────────────────────────────────────────────────────────

    async def list_plants(self) -> List[Plant]:
        """Every plant, in storage (id) order. An empty table yields []."""
        async with self._session("list") as session:
            result = await session.execute(select(Plant).order_by(Plant.id))
            return list(result.scalars().all())

    async def create_plant(self, fields: Mapping[str, Any]) -> Plant:
        """
        Insert a new plant and return the stored record with its new id.

        Raises:
            ValidationError: common_name missing/blank, or an unknown field
                             (including `id`) was supplied. No row is written.
            StorageError:    the insert failed.
        """
        values = self._check_fields(fields)
        if _is_blank(values.get("common_name")):
            raise ValidationError(
                message="commonName is required and cannot be empty",
                field="commonName",
            )

        plant = Plant(**{name: values.get(name) for name in EDITABLE_FIELDS})
        async with self._session("create") as session:
            session.add(plant)
            await session.flush()  # assigns plant.id

        logger.info("Plant %d created: %s", plant.id, plant.common_name)
        return plant

    async def get_plant(self, plant_id: int) -> Plant:
        """Fetch one plant; raises NotFoundError if the id has no row."""
        plant = None
        if _is_storable_id(plant_id):
            async with self._session("get") as session:
                plant = await session.get(Plant, plant_id)

        if plant is None:
            raise NotFoundError(resource="plant", resource_id=str(plant_id))
        return plant

    async def update_plant(self, plant_id: int, changes: Mapping[str, Any]) -> MutationOutcome:
        """
        Overwrite only the columns named in `changes`.

        Validation happens before any SQL is issued:
            - empty mapping            → ValidationError("No fields to update")
            - unknown field / `id`     → ValidationError
            - common_name null/blank   → ValidationError

        Returns:
            UPDATED with the affected row count, or NOT_FOUND with 0 when
            `plant_id` has no row.
        """
        if not changes:
            raise ValidationError(message="No fields to update")
        values = self._check_fields(changes)
        if "common_name" in values and _is_blank(values["common_name"]):
            raise ValidationError(
                message="commonName cannot be empty",
                field="commonName",
            )
        if not _is_storable_id(plant_id):
            return MutationOutcome(MutationStatus.NOT_FOUND, 0)

        statement = (
            update(Plant)
            .where(Plant.id == plant_id)
            .values({getattr(Plant, name): value for name, value in values.items()})
            .execution_options(synchronize_session=False)
        )
        async with self._session("update") as session:
            result = await session.execute(statement)

        if result.rowcount == 0:
            logger.info("Update of plant %d matched no row", plant_id)
            return MutationOutcome(MutationStatus.NOT_FOUND, 0)

        logger.info("Plant %d updated: %s", plant_id, ", ".join(sorted(values)))
        return MutationOutcome(MutationStatus.UPDATED, result.rowcount)

    async def delete_plant(self, plant_id: int) -> MutationOutcome:
        """Remove the plant if present; a missing id is NOT_FOUND, not an error."""
        if not _is_storable_id(plant_id):
            return MutationOutcome(MutationStatus.NOT_FOUND, 0)

        statement = delete(Plant).where(Plant.id == plant_id)
        async with self._session("delete") as session:
            result = await session.execute(statement)

        if result.rowcount == 0:
            logger.info("Delete of plant %d matched no row", plant_id)
            return MutationOutcome(MutationStatus.NOT_FOUND, 0)

        logger.info("Plant %d deleted", plant_id)
        return MutationOutcome(MutationStatus.DELETED, result.rowcount)
