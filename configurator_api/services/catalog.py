from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from configurator_api.repositories.catalog import CategoryRepository, OptionRepository
from configurator_api.schemas.catalog import CategoryWithOptions, OptionRead
from configurator_api.services.base import BaseService


class CatalogService(BaseService):
    """Read-side catalog views used to drive option selection."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.category_repo = CategoryRepository(session)
        self.option_repo = OptionRepository(session)

    # PUBLIC_INTERFACE
    async def get_categories_with_options(self) -> List[CategoryWithOptions]:
        """
        Return active categories ordered by display order, each carrying its
        active options in display order.
        """
        result: List[CategoryWithOptions] = []
        for category in await self.category_repo.list_active():
            options = await self.option_repo.list_active_by_category(category.id)
            item = CategoryWithOptions.model_validate(category)
            item.options = [OptionRead.model_validate(o) for o in options]
            result.append(item)
        return result

    # PUBLIC_INTERFACE
    async def default_selection(self) -> List[int]:
        """Ids of the default option of each active category, in category order."""
        selection: List[int] = []
        for category in await self.get_categories_with_options():
            default = next((o for o in category.options if o.is_default), None)
            if default is not None:
                selection.append(default.id)
        return selection
