"""
AdoptMe Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, routers, static
       files and the Database connection manager, then returns the app.
Who:   uvicorn (`uvicorn adoptme.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │  Routes:      /api/pets…  /browse  /interests       │
    │               /health     /static                   │
    │  Handlers:    NotFound→404 │ PetRequest→400/500     │
    │               InvalidId→500 │ Database→500 │ *→500  │
    │  State:       app.state.database (lazy connection)  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging. The database is NOT contacted here; the
              first request that needs it connects.
    Shutdown: dispose the engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from adoptme import __version__
from adoptme.config import Settings, settings as default_settings
from adoptme.database import Database
from adoptme.exceptions import (
    AdoptMeError,
    DatabaseError,
    InvalidPetIdError,
    PetNotFoundError,
    PetRequestError,
)
from adoptme.middleware.logging import RequestLoggingMiddleware
from adoptme.middleware.request_id import RequestIDFilter, RequestIDMiddleware, request_id_var
from adoptme.routes import health, pages, pets
from adoptme.routes.pages import STATIC_DIR

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] adoptme.access [a1b2c3d4]: GET /api/pets 200 3.1ms
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Per-statement and per-connection chatter
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(message: str, error: Optional[str] = None) -> dict:
    body = {"message": message}
    if error:
        body["error"] = error
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and JSON bodies.

    Handler hierarchy:
        PetNotFoundError   → 404 {"message": "Pet not found"}
        PetRequestError    → its own status, fixed message (+ error)
        InvalidPetIdError  → 500 {"message": "Malformed pet id", "error"}
        DatabaseError      → 500 generic message, context logged
        AdoptMeError       → its status_code
        Exception          → 500 generic message, traceback logged
    """

    @app.exception_handler(PetNotFoundError)
    async def handle_not_found(request: Request, exc: PetNotFoundError):
        return JSONResponse(status_code=404, content=_error_body(exc.message))

    @app.exception_handler(PetRequestError)
    async def handle_pet_request_error(request: Request, exc: PetRequestError):
        log = logger.warning if exc.status_code < 500 else logger.error
        log("[%s] %s: %s | Context: %s", request_id_var.get(""), exc.message, exc.error, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.error),
        )

    @app.exception_handler(InvalidPetIdError)
    async def handle_invalid_id(request: Request, exc: InvalidPetIdError):
        logger.error("[%s] %s", request_id_var.get(""), exc.error)
        return JSONResponse(status_code=500, content=_error_body(exc.message, exc.error))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Details stay in the log
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("An internal error occurred. Please try again later."),
        )

    @app.exception_handler(AdoptMeError)
    async def handle_app_error(request: Request, exc: AdoptMeError):
        logger.error("[%s] %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("An unexpected error occurred"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded singleton.
        database: Connection manager to use; built from `settings` when
                  omitted. Tests pass one pointing at a temporary database.
    """
    settings = settings or default_settings
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.log_level)
        logger.info("AdoptMe backend %s starting", __version__)
        logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

        yield

        logger.info("AdoptMe backend shutting down...")
        await app.state.database.dispose()
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="AdoptMe API",
        description="Browse pets available for adoption and manage their records.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pets.router)
    app.include_router(pages.router)
    app.include_router(health.router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    return app


app = create_app()
