"""
AdoptMe Backend — Pet Service
===============================

What:  Create/read/update/delete/list operations over the Pet model.
How:   Each operation opens its own unit of work through
       `Database.session()`, which first makes sure the store is connected.
Who:   Called by the pet routes and by the seed command.

Error Handling Strategy:
    - Missing rows become PetNotFoundError (→ 404).
    - Ids that are not UUIDs become InvalidPetIdError (→ 500).
    - SQLAlchemy failures are logged and wrapped in DatabaseError (→ 500).
    Anything else propagates unchanged.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from adoptme.database import Database
from adoptme.exceptions import DatabaseError, InvalidPetIdError, PetNotFoundError
from adoptme.models.pet import Pet
from adoptme.schemas.pet import PetCreate, PetResponse, PetUpdate

logger = logging.getLogger(__name__)


def parse_pet_id(pet_id: str) -> uuid.UUID:
    """Convert a path parameter to a UUID or raise InvalidPetIdError."""
    try:
        return uuid.UUID(str(pet_id))
    except ValueError:
        raise InvalidPetIdError(str(pet_id))


class PetService:
    """
    Pass-through operations on pets.

    The service holds no state besides the Database it was built with, so
    creating one per request is cheap.
    """

    def __init__(self, database: Database):
        self.database = database

    @asynccontextmanager
    async def _store_errors(self, action: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("Database error while trying to %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not {action}. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_all(self) -> List[PetResponse]:
        """All pets, oldest first. Empty list when there are none."""
        async with self._store_errors("list pets"):
            async with self.database.session() as session:
                result = await session.execute(
                    select(Pet).order_by(Pet.created_at, Pet.id)
                )
                return [PetResponse.model_validate(pet) for pet in result.scalars().all()]

    async def list_available(self) -> List[PetResponse]:
        """Pets that have not been adopted yet."""
        async with self._store_errors("list available pets"):
            async with self.database.session() as session:
                result = await session.execute(
                    select(Pet)
                    .where(Pet.is_adopted.is_(False))
                    .order_by(Pet.created_at, Pet.id)
                )
                return [PetResponse.model_validate(pet) for pet in result.scalars().all()]

    async def get_by_id(self, pet_id: str) -> PetResponse:
        """
        Fetch one pet.

        Raises:
            InvalidPetIdError: pet_id is not a UUID.
            PetNotFoundError:  no pet has this id.
        """
        key = parse_pet_id(pet_id)
        async with self._store_errors("retrieve the pet"):
            async with self.database.session() as session:
                pet = await session.get(Pet, key)
                if pet is None:
                    raise PetNotFoundError(str(pet_id))
                return PetResponse.model_validate(pet)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, payload: PetCreate) -> PetResponse:
        """Insert a pet; `is_adopted` defaults to False when omitted."""
        async with self._store_errors("create the pet"):
            async with self.database.session() as session:
                pet = Pet(**payload.model_dump())
                session.add(pet)
                await session.flush()
                logger.info("Pet created: %s (%s)", pet.id, pet.name)
                return PetResponse.model_validate(pet)

    async def update(self, pet_id: str, payload: PetUpdate) -> PetResponse:
        """
        Merge the supplied fields into an existing pet.

        Fields absent from `payload` keep their stored values. Concurrent
        updates to the same pet are last-write-wins.
        """
        key = parse_pet_id(pet_id)
        changes = payload.changes()
        async with self._store_errors("update the pet"):
            async with self.database.session() as session:
                pet = await session.get(Pet, key)
                if pet is None:
                    raise PetNotFoundError(str(pet_id))
                for field, value in changes.items():
                    setattr(pet, field, value)
                await session.flush()
                logger.info("Pet %s updated: %s", pet.id, ", ".join(changes) or "no changes")
                return PetResponse.model_validate(pet)

    async def delete(self, pet_id: str) -> PetResponse:
        """Remove a pet and return it as it was before deletion."""
        key = parse_pet_id(pet_id)
        async with self._store_errors("delete the pet"):
            async with self.database.session() as session:
                pet = await session.get(Pet, key)
                if pet is None:
                    raise PetNotFoundError(str(pet_id))
                removed = PetResponse.model_validate(pet)
                await session.delete(pet)
                await session.flush()
                logger.info("Pet deleted: %s", removed.id)
                return removed

    async def adopt(self, pet_id: str) -> PetResponse:
        """Mark a pet as adopted."""
        return await self.update(pet_id, PetUpdate(is_adopted=True))

    async def replace_all(self, payloads: Iterable[PetCreate]) -> List[PetResponse]:
        """
        Delete every pet and insert `payloads` in a single transaction.

        Used by the seed command.
        """
        async with self._store_errors("replace pets"):
            async with self.database.session() as session:
                await session.execute(delete(Pet))
                pets = [Pet(**payload.model_dump()) for payload in payloads]
                session.add_all(pets)
                await session.flush()
                logger.info("Replaced pet collection with %d records", len(pets))
                return [PetResponse.model_validate(pet) for pet in pets]
