from __future__ import annotations

from typing import Any, Iterable, Optional

from sqlalchemy import Executable
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

# Connectivity and I/O failures only; IntegrityError, ProgrammingError and
# friends are query bugs or rejected writes and propagate unchanged.
_STORE_ERRORS = (OperationalError, InterfaceError, OSError)


class CatalogUnavailableError(RuntimeError):
    """
    Raised when the catalog store cannot answer a query (connectivity/IO failure).

    Missing records are never reported this way; lookups for unknown ids
    simply return None or an empty list.
    """


class CatalogConflictError(ValueError):
    """Raised when a catalog write violates a uniqueness or integrity constraint."""


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Driver-level connectivity failures are re-raised as CatalogUnavailableError
    so callers can tell them apart from absent data.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        try:
            return await self.session.execute(statement, params or {})
        except _STORE_ERRORS as exc:
            raise CatalogUnavailableError(f"Catalog store query failed: {exc}") from exc

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def all(self, statement: Executable, params: Optional[dict[str, Any]] = None) -> list:
        """Execute and return all scalars as a list."""
        return list(await self.scalars(statement, params))

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)

    async def add_all(self, entities: Iterable[Any]) -> None:
        """Add multiple entities to session."""
        self.session.add_all(list(entities))

    async def commit(self) -> None:
        """
        Commit current transaction.

        Rolls back and raises CatalogConflictError on constraint violations
        (duplicate code, non-positive quantity, negative price).
        """
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise CatalogConflictError(f"Catalog write rejected: {exc.orig}") from exc
        except _STORE_ERRORS as exc:
            await self.session.rollback()
            raise CatalogUnavailableError(f"Catalog store write failed: {exc}") from exc

    async def refresh(self, entity: Any) -> Any:
        await self.session.refresh(entity)
        return entity
