from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from configurator_api.core.settings import get_app_settings
from configurator_api.db.session import session_scope
from configurator_api.services.bom import BomService
from configurator_api.services.catalog import CatalogService


# PUBLIC_INTERFACE
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield the request-scoped catalog session."""
    async with session_scope() as session:
        yield session


# PUBLIC_INTERFACE
def get_bom_service(session: AsyncSession = Depends(get_db_session)) -> BomService:
    """Build a BomService honoring the configured selection deduplication policy."""
    settings = get_app_settings()
    return BomService(session, deduplicate_selections=settings.DEDUPLICATE_SELECTIONS)


# PUBLIC_INTERFACE
def get_catalog_service(session: AsyncSession = Depends(get_db_session)) -> CatalogService:
    """Build a CatalogService for the request session."""
    return CatalogService(session)
