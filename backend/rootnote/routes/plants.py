"""
RootNote Backend — Plant Route Handlers
=======================================

What:  The five REST operations on plant records.
How:   Request bodies are validated by Pydantic before the handler runs;
       handlers call the PlantStore and translate its results. Errors are
       raised as RootNote exceptions and rendered by the handlers in main.py.
Who:   Called by the web client's dashboard, add-plant form and detail page.

Endpoints:
    GET    /api/plants          list every plant
    POST   /api/plants          create a plant
    GET    /api/plants/{id}     fetch one plant
    PATCH  /api/plants/{id}     partial update
    DELETE /api/plants/{id}     delete

Status mapping:
    validation failure → 400, unknown id → 404, storage failure → 500.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path

from rootnote.dependencies import get_store
from rootnote.exceptions import NotFoundError, ValidationError
from rootnote.models.plant import MAX_PLANT_ID
from rootnote.schemas.plant import (
    ErrorResponse,
    MutationResponse,
    PlantCreate,
    PlantResponse,
    PlantUpdate,
)
from rootnote.services.plant_store import MutationOutcome, PlantStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Plants"])

_ERRORS = {
    400: {"description": "Invalid request", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
_ERRORS_WITH_404 = {
    **_ERRORS,
    404: {"description": "Plant not found", "model": ErrorResponse},
}

# Ids are positive SQLite INTEGERs; anything else is rejected as a bad request
PlantId = Annotated[int, Path(ge=1, le=MAX_PLANT_ID, description="Plant ID")]


def _mutation_response(plant_id: int, outcome: MutationOutcome) -> MutationResponse:
    if not outcome.found:
        raise NotFoundError(resource="plant", resource_id=str(plant_id))
    return MutationResponse(status=outcome.status.value, changes=outcome.changes)


@router.get(
    "/plants",
    response_model=List[PlantResponse],
    responses={500: _ERRORS[500]},
    summary="List all plants",
)
async def list_plants(store: PlantStore = Depends(get_store)) -> List[PlantResponse]:
    """Every plant in storage order; an empty list when none exist."""
    plants = await store.list_plants()
    return [PlantResponse.model_validate(plant) for plant in plants]


@router.post(
    "/plants",
    response_model=PlantResponse,
    status_code=200,
    responses=_ERRORS,
    summary="Create a plant",
    description="Creates a plant record. `commonName` is required; all other fields are optional.",
)
async def create_plant(
    body: PlantCreate,
    store: PlantStore = Depends(get_store),
) -> PlantResponse:
    plant = await store.create_plant(body.to_fields())
    return PlantResponse.model_validate(plant)


@router.get(
    "/plants/{plant_id}",
    response_model=PlantResponse,
    responses=_ERRORS_WITH_404,
    summary="Get a single plant by ID",
)
async def get_plant(
    plant_id: PlantId,
    store: PlantStore = Depends(get_store),
) -> PlantResponse:
    plant = await store.get_plant(plant_id)
    return PlantResponse.model_validate(plant)


@router.patch(
    "/plants/{plant_id}",
    response_model=MutationResponse,
    responses=_ERRORS_WITH_404,
    summary="Partially update a plant",
    description=(
        "Overwrites only the fields present in the body; omitted fields keep "
        "their current value. Send null to clear an optional field."
    ),
)
async def update_plant(
    plant_id: PlantId,
    body: PlantUpdate,
    store: PlantStore = Depends(get_store),
) -> MutationResponse:
    """
    Partial update.

    The web client sends the full record it fetched, `id` included. An `id`
    equal to the path id is ignored; any other value is rejected since ids
    are immutable.
    """
    if body.id is not None and body.id != plant_id:
        raise ValidationError(
            message="Plant id cannot be changed",
            field="id",
            context={"path_id": plant_id, "body_id": body.id},
        )

    outcome = await store.update_plant(plant_id, body.to_changes())
    return _mutation_response(plant_id, outcome)


@router.delete(
    "/plants/{plant_id}",
    response_model=MutationResponse,
    responses=_ERRORS_WITH_404,
    summary="Delete a plant",
)
async def delete_plant(
    plant_id: PlantId,
    store: PlantStore = Depends(get_store),
) -> MutationResponse:
    outcome = await store.delete_plant(plant_id)
    return _mutation_response(plant_id, outcome)
