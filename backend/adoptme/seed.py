"""Seed the pets table with a few sample records.

Usage:
    adoptme-seed                       # uses DATABASE_URL
    adoptme-seed --database-url sqlite+aiosqlite:///./adoptme.db

Existing pets are deleted first.
"""

import asyncio
import logging
from typing import List, Optional

import typer

from adoptme.config import settings
from adoptme.database import Database
from adoptme.schemas.pet import PetCreate, PetResponse
from adoptme.services.pet_service import PetService

logger = logging.getLogger(__name__)

SEED_PETS: List[PetCreate] = [
    PetCreate(name="Bella", type="Dog", age=3, breed="Labrador"),
    PetCreate(name="Milo", type="Cat", age=2, breed="Siamese"),
    PetCreate(name="Charlie", type="Rabbit", age=1, breed="Dwarf"),
]

app = typer.Typer(add_completion=False, help="Reset the pet collection to the sample data.")


async def seed_database(database: Database) -> List[PetResponse]:
    try:
        return await PetService(database).replace_all(SEED_PETS)
    finally:
        await database.dispose()


@app.command()
def run(
    database_url: Optional[str] = typer.Option(
        None,
        "--database-url",
        help="Async SQLAlchemy URL; defaults to DATABASE_URL.",
    ),
) -> None:
    """Delete every pet and insert the sample pets."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    database = Database.from_settings(settings)
    if database_url:
        database.url = database_url
    database.create_schema = True

    try:
        seeded = asyncio.run(seed_database(database))
    except Exception as e:
        logger.error("Seeding failed: %s", e)
        raise typer.Exit(code=1)

    for pet in seeded:
        typer.echo(f"{pet.id}  {pet.name} ({pet.type}, {pet.breed})")
    typer.echo(f"Seeded {len(seeded)} pets.")


if __name__ == "__main__":
    app()
