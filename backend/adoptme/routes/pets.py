"""
AdoptMe Backend — Pet Route Handlers
======================================

What:  The REST endpoints under /api/pets.
How:   Bodies are read as raw JSON and validated here, so each endpoint can
       answer malformed input with its own status and message instead of
       FastAPI's generic 422.

Endpoint → failure mapping:
    POST   /api/pets        any error           → 500 {"message": "Failed to create pet"}
    GET    /api/pets/{id}   malformed id        → 500 (InvalidPetIdError)
    PATCH  /api/pets/{id}   malformed body      → 400 {"message": "Failed to update pet", "error"}
                            malformed id        → 500 (InvalidPetIdError)
    DELETE /api/pets/{id}   any error but 404   → 500 {"message": "Failed to delete pet", "error"}
    Missing pets on any id route                → 404 {"message": "Pet not found"}
"""

import logging
from typing import Any, List, Type, TypeVar

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ValidationError

from adoptme.database import Database, get_database
from adoptme.exceptions import PetNotFoundError, PetRequestError
from adoptme.schemas.pet import (
    ErrorResponse,
    MessageResponse,
    PetCreate,
    PetResponse,
    PetUpdate,
)
from adoptme.services.pet_service import PetService, parse_pet_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Pets"])

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_pet_service(database: Database = Depends(get_database)) -> PetService:
    return PetService(database)


def _json_body(model: Type[BaseModel]) -> dict:
    """OpenAPI requestBody for endpoints that parse their own JSON."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


async def _parse_body(request: Request, model: Type[ModelT]) -> ModelT:
    # Invalid JSON and schema violations both surface as ValueError
    data: Any = await request.json()
    return model.model_validate(data)


def describe_error(exc: Exception) -> str:
    """One-line reason suitable for the `error` field of a response."""
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
    return getattr(exc, "error", None) or getattr(exc, "message", None) or str(exc)


@router.get(
    "/pets",
    response_model=List[PetResponse],
    summary="List pets",
    description="Returns every pet, or only the ones not yet adopted when `available=true`.",
)
async def list_pets(
    available: bool = Query(default=False, description="Only pets that are not adopted"),
    service: PetService = Depends(get_pet_service),
) -> List[PetResponse]:
    if available:
        return await service.list_available()
    return await service.list_all()


@router.post(
    "/pets",
    status_code=201,
    response_model=PetResponse,
    responses={500: {"description": "Pet could not be created", "model": ErrorResponse}},
    summary="Create a pet",
    openapi_extra=_json_body(PetCreate),
)
async def create_pet(
    request: Request,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """
    Create a pet from {name, type, age, breed, isAdopted?}.

    isAdopted defaults to false. Every failure, including a malformed
    body, answers 500 with a fixed message.
    """
    try:
        payload = await _parse_body(request, PetCreate)
        return await service.create(payload)
    except Exception as e:
        logger.warning("Failed to create pet: %s", describe_error(e))
        raise PetRequestError(
            "Failed to create pet",
            status_code=500,
            context={"error_type": type(e).__name__},
        ) from e


@router.get(
    "/pets/{pet_id}",
    response_model=PetResponse,
    responses={
        404: {"description": "Pet not found", "model": ErrorResponse},
        500: {"description": "Malformed id", "model": ErrorResponse},
    },
    summary="Get a pet by id",
)
async def get_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    return await service.get_by_id(pet_id)


@router.patch(
    "/pets/{pet_id}",
    response_model=PetResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        404: {"description": "Pet not found", "model": ErrorResponse},
        500: {"description": "Malformed id", "model": ErrorResponse},
    },
    summary="Update some fields of a pet",
    openapi_extra=_json_body(PetUpdate),
)
async def update_pet(
    pet_id: str,
    request: Request,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    """Merge the supplied fields; omitted fields keep their values."""
    parse_pet_id(pet_id)
    try:
        payload = await _parse_body(request, PetUpdate)
    except ValueError as e:
        raise PetRequestError(
            "Failed to update pet",
            status_code=400,
            error=describe_error(e),
        ) from e
    return await service.update(pet_id, payload)


@router.delete(
    "/pets/{pet_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Pet not found", "model": ErrorResponse},
        500: {"description": "Pet could not be deleted", "model": ErrorResponse},
    },
    summary="Delete a pet",
)
async def delete_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> MessageResponse:
    try:
        await service.delete(pet_id)
    except PetNotFoundError:
        raise
    except Exception as e:
        raise PetRequestError(
            "Failed to delete pet",
            status_code=500,
            error=describe_error(e),
        ) from e
    return MessageResponse(message="Pet deleted successfully")


@router.post(
    "/pets/{pet_id}/adopt",
    response_model=PetResponse,
    responses={
        404: {"description": "Pet not found", "model": ErrorResponse},
        500: {"description": "Malformed id", "model": ErrorResponse},
    },
    summary="Mark a pet as adopted",
)
async def adopt_pet(
    pet_id: str,
    service: PetService = Depends(get_pet_service),
) -> PetResponse:
    return await service.adopt(pet_id)
