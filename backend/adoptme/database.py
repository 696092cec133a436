"""
AdoptMe Backend — Database Connection Manager
===============================================

What:  Owns the async SQLAlchemy engine and hands out sessions.
Why:   One place decides when the store is connected, which address it
       points at, and how a unit of work is committed or rolled back.
How:   `Database.ensure_connected()` lazily creates the engine on first use
       and memoizes it. Callers that arrive while the first attempt is still
       running await that same attempt. Asking for a different URL disposes
       the cached engine and connects to the new address.
Who:   Built once by `create_app()` (stored on `app.state.database`) and by
       the seed command; passed explicitly to `PetService`.

Connection lifecycle:
    not connected ──ensure_connected()──▶ connecting ──ok──▶ connected
          ▲                                   │                  │
          └────────────── failure ◀───────────┘     url changed / dispose()
          ▲                                                      │
          └──────────────────────────────────────────────────────┘
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

if TYPE_CHECKING:
    from adoptme.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by `create_all` and by Alembic.
    """
    pass


class Database:
    """
    Lazily connected, memoized handle to the store.

    Attributes:
        url:            Address the next connection attempt targets.
        create_schema:  Run `Base.metadata.create_all` on connect.

    Concurrency:
        The first connection attempt runs as a single task. Every caller
        awaits it through `asyncio.shield`, so a cancelled request does not
        abort the attempt for the others. A failed attempt is forgotten and
        its error re-raised to each waiter; there is no retry policy.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_pre_ping: bool = True,
        create_schema: bool = False,
    ):
        self.url = url
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_pre_ping = pool_pre_ping
        self.create_schema = create_schema

        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._pending: Optional["asyncio.Future[AsyncEngine]"] = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        """Build a Database from the application Settings object."""
        return cls(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            create_schema=settings.db_create_schema,
        )

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Optional[AsyncEngine]:
        return self._engine

    # ── Connection ────────────────────────────────────────────────────────

    async def ensure_connected(
        self, url: Optional[str] = None
    ) -> async_sessionmaker[AsyncSession]:
        """
        Return a session factory bound to a live engine.

        Args:
            url: Target address. When it differs from the current one, the
                 cached engine is disposed and replaced.

        Raises:
            Whatever the driver raises when the store is unreachable.
        """
        target = url or self.url
        if target != self.url:
            logger.info("Database address changed; replacing cached engine")
            await self.dispose()
            self.url = target

        if self._session_factory is not None:
            return self._session_factory

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect(target))
        pending = self._pending

        try:
            engine = await asyncio.shield(pending)
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise

        if self._pending is pending:
            self._engine = engine
            self._session_factory = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            self._pending = None
        elif engine is not self._engine:
            # The attempt finished after a dispose(); drop it and start over.
            await engine.dispose()
            return await self.ensure_connected()
        return self._session_factory

    def _engine_options(self, url: str) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self.echo}
        # SQLite pools do not take sizing arguments
        if make_url(url).get_backend_name() != "sqlite":
            options.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_pre_ping=self.pool_pre_ping,
                pool_recycle=3600,
            )
        return options

    async def _connect(self, url: str) -> AsyncEngine:
        engine = create_async_engine(url, **self._engine_options(url))
        try:
            async with engine.begin() as conn:
                if self.create_schema:
                    # Registers the model tables on Base.metadata
                    import adoptme.models  # noqa: F401

                    await conn.run_sync(Base.metadata.create_all)
                else:
                    await conn.execute(text("SELECT 1"))
        except BaseException:
            await engine.dispose()
            raise

        logger.info("Connected to %s", make_url(url).render_as_string(hide_password=True))
        return engine

    async def ping(self) -> None:
        """Round-trip a trivial query; raises if the store is unreachable."""
        await self.ensure_connected()
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    # ── Units of work ─────────────────────────────────────────────────────

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide one session for a unit of work.

        Commits when the block exits cleanly, rolls back and re-raises when
        it doesn't. The connection goes back to the pool either way.

        Example:
            async with database.session() as session:
                session.add(Pet(name="Bella", ...))
        """
        factory = await self.ensure_connected()
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close every pooled connection and forget the cached engine."""
        pending, self._pending = self._pending, None
        engine, self._engine = self._engine, None
        self._session_factory = None

        if pending is not None and not pending.done():
            pending.cancel()
        if engine is not None:
            await engine.dispose()
            logger.info("Database engine disposed")


# ── FastAPI Dependency ────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the application's Database.

    The instance is created once by `create_app()` and kept on `app.state`.
    """
    return request.app.state.database
