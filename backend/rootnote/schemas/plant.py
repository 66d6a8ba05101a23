"""
RootNote Backend — Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract between the web client
       and the backend.
How:   FastAPI validates request bodies against these models before a route
       handler runs, and serializes responses through them.

Field names:
    The wire format is camelCase (`commonName`, `lastWateredOn`, ...), the
    names the web client already uses. Python code uses snake_case; the
    alias generator maps between the two. Requests may use either spelling.

Unknown fields are rejected on every request model, so a typo such as
`comonName` fails with 400 instead of being silently dropped.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


def _require_text(v: Optional[str]) -> str:
    if v is None:
        raise ValueError("commonName cannot be null")
    if not v.strip():
        raise ValueError("commonName cannot be blank")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class PlantFields(BaseModel):
    """Optional plant attributes shared by create and update bodies."""

    variety: Optional[str] = Field(default=None, description="Plant variety")
    cultivar: Optional[str] = Field(default=None, description="Named cultivar")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    last_watered_on: Optional[str] = Field(default=None, description="Last watering date")
    seeded_date: Optional[str] = Field(default=None, description="Date seeded")
    sprouted_date: Optional[str] = Field(default=None, description="Date sprouted")
    transplanted_date: Optional[str] = Field(default=None, description="Date transplanted")
    first_flower_date: Optional[str] = Field(default=None, description="Date of first flower")
    first_fruit_date: Optional[str] = Field(default=None, description="Date of first fruit")
    last_pruned_date: Optional[str] = Field(default=None, description="Last pruning date")
    last_fertilized_date: Optional[str] = Field(default=None, description="Last fertilizing date")
    last_harvested_date: Optional[str] = Field(default=None, description="Last harvest date")

    model_config = ConfigDict(**_WIRE_CONFIG, extra="forbid")


class PlantCreate(PlantFields):
    """
    What:  Body of POST /api/plants.
    Rule:  commonName is required and must contain a non-blank character;
           everything else is optional.
    """

    common_name: str = Field(min_length=1, description="Common name, e.g. 'Basil'")

    @field_validator("common_name")
    @classmethod
    def validate_common_name(cls, v: str) -> str:
        return _require_text(v)

    def to_fields(self) -> Dict[str, Any]:
        """Field mapping for PlantStore.create_plant()."""
        return self.model_dump()


class PlantUpdate(PlantFields):
    """
    What:  Body of PATCH /api/plants/{id}; only supplied fields change.

    Rules:
        - commonName, when supplied, must be non-blank text (not null)
        - other fields may be set to null to clear them
        - `id` is accepted because the web client echoes the whole record
          back, but the route rejects it unless it equals the path id
    """

    id: Optional[int] = Field(default=None, description="Must match the path id if sent")
    common_name: Optional[str] = Field(default=None, min_length=1, description="Common name")

    @field_validator("common_name")
    @classmethod
    def validate_common_name(cls, v: Optional[str]) -> str:
        return _require_text(v)

    def to_changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, minus `id`."""
        changes = self.model_dump(exclude_unset=True)
        changes.pop("id", None)
        return changes


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class PlantResponse(BaseModel):
    """
    What:  Full representation of a stored plant.
    Who:   Returned by GET /api/plants (as array items), GET /api/plants/{id}
           and POST /api/plants.

    Every column is always present; unset values serialize as null.
    """

    id: int = Field(description="Unique plant identifier")
    common_name: str = Field(description="Common name")
    variety: Optional[str] = None
    cultivar: Optional[str] = None
    notes: Optional[str] = None
    last_watered_on: Optional[str] = None
    seeded_date: Optional[str] = None
    sprouted_date: Optional[str] = None
    transplanted_date: Optional[str] = None
    first_flower_date: Optional[str] = None
    first_fruit_date: Optional[str] = None
    last_pruned_date: Optional[str] = None
    last_fertilized_date: Optional[str] = None
    last_harvested_date: Optional[str] = None

    model_config = ConfigDict(**_WIRE_CONFIG, from_attributes=True)


class MutationResponse(BaseModel):
    """
    What:  Outcome of PATCH and DELETE on /api/plants/{id}.

    Example:
        {"status": "updated", "changes": 1}
    """

    status: str = Field(description="'updated' or 'deleted'")
    changes: int = Field(description="Number of rows affected")


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "plant with ID '42' was not found",
            "details": null,
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response: service status and database connectivity."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
