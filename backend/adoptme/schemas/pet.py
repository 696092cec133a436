"""
AdoptMe Backend — Pydantic Request/Response Schemas
=====================================================

What:  The API contract for pets, validated at the HTTP boundary.
Why:   The store accepts whatever it is given; these models decide what a
       well-formed pet looks like before anything is written.

Wire format:
    Fields are exchanged as {id, name, type, age, breed, isAdopted}.
    Input accepts both `isAdopted` and `is_adopted`; output always uses
    `isAdopted`.

Validation rules:
    - Types are strict: "3" is not an age, 1 is not a boolean.
    - Ages must be finite; NaN and Infinity are rejected.
    - Whole-number ages come back as integers.
    - Unknown fields are rejected.
    - PetCreate requires name, type, age and breed.
    - PetUpdate requires nothing but rejects explicit nulls.
"""

import uuid
from typing import Any, Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


_IS_ADOPTED_ALIASES = AliasChoices("isAdopted", "is_adopted")


class PetCreate(BaseModel):
    """Body of POST /api/pets."""

    model_config = ConfigDict(strict=True, extra="forbid", allow_inf_nan=False)

    name: str = Field(description="Pet name")
    type: str = Field(description="Kind of animal, e.g. Dog or Cat")
    age: Union[int, float] = Field(description="Age in years, finite")
    breed: str = Field(description="Breed, free text")
    is_adopted: bool = Field(
        default=False,
        validation_alias=_IS_ADOPTED_ALIASES,
        serialization_alias="isAdopted",
        description="Whether the pet has already been adopted",
    )


class PetUpdate(BaseModel):
    """
    Body of PATCH /api/pets/{id}.

    Only the fields present in the body are applied; `changes()` returns
    exactly those.
    """

    model_config = ConfigDict(strict=True, extra="forbid", allow_inf_nan=False)

    name: Optional[str] = None
    type: Optional[str] = None
    age: Optional[Union[int, float]] = None
    breed: Optional[str] = None
    is_adopted: Optional[bool] = Field(
        default=None,
        validation_alias=_IS_ADOPTED_ALIASES,
        serialization_alias="isAdopted",
    )

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = sorted(key for key, value in data.items() if value is None)
            if nulls:
                raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return data

    def changes(self) -> Dict[str, Any]:
        """Supplied fields keyed by model attribute name."""
        return self.model_dump(exclude_unset=True)


class PetResponse(BaseModel):
    """A stored pet as returned by every pet endpoint."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(description="Identifier assigned on creation")
    name: str
    type: str
    age: Union[int, float]
    breed: str
    is_adopted: bool = Field(
        validation_alias=_IS_ADOPTED_ALIASES,
        serialization_alias="isAdopted",
    )

    @field_validator("age", mode="before")
    @classmethod
    def whole_age_as_int(cls, value: Any) -> Any:
        # The column is a float; 3 goes back out as 3, 2.5 as 2.5
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after DELETE."""

    message: str


class ErrorResponse(BaseModel):
    """
    Error body shared by all endpoints.

    `error` is present only where the endpoint exposes the underlying
    reason (PATCH and DELETE failures, malformed ids).
    """

    message: str = Field(description="Human-readable error description")
    error: Optional[str] = Field(default=None, description="Underlying reason")


class HealthResponse(BaseModel):
    """Returned by GET /health."""

    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
