from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from configurator_api.db.models.catalog import (
    Category,
    Module,
    ModulePart,
    Option,
    OptionModule,
    Part,
)
from configurator_api.schemas.catalog import (
    ModuleCreate,
    ModulePartCreate,
    ModuleUpdate,
    OptionModuleCreate,
    PartCreate,
    PartUpdate,
)
from .base import BaseRepository

logger = logging.getLogger(__name__)

# Columns a partial update may explicitly clear.
_NULLABLE_FIELDS = {"description", "part_number", "supplier", "master_assembly_path"}


def _valid_ids(ids: Iterable[int]) -> List[int]:
    # Non-positive ids never resolve; keep them out of the IN clause.
    return sorted({i for i in ids if isinstance(i, int) and not isinstance(i, bool) and i > 0})


def _changes(payload: Any) -> Dict[str, Any]:
    return {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }


class CategoryRepository(BaseRepository):
    """Repository for option categories."""

    async def get_by_id(self, category_id: int) -> Optional[Category]:
        return await self.scalar_one_or_none(select(Category).where(Category.id == category_id))

    async def get_by_code(self, code: str) -> Optional[Category]:
        return await self.scalar_one_or_none(select(Category).where(Category.code == code))

    async def list_all(self) -> List[Category]:
        return await self.all(select(Category).order_by(Category.display_order, Category.id))

    async def list_active(self) -> List[Category]:
        stmt = select(Category).where(Category.is_active.is_(True)).order_by(Category.display_order, Category.id)
        return await self.all(stmt)


class OptionRepository(BaseRepository):
    """Repository for selectable options."""

    async def get_by_id(self, option_id: int) -> Optional[Option]:
        return await self.scalar_one_or_none(select(Option).where(Option.id == option_id))

    async def get_by_code(self, code: str) -> Optional[Option]:
        return await self.scalar_one_or_none(select(Option).where(Option.code == code))

    async def get_many(self, option_ids: Iterable[int]) -> List[Option]:
        """Bulk lookup; unknown ids are absent from the result."""
        ids = _valid_ids(option_ids)
        if not ids:
            return []
        return await self.all(select(Option).where(Option.id.in_(ids)).order_by(Option.id))

    async def list_all(self) -> List[Option]:
        return await self.all(select(Option).order_by(Option.category_id, Option.display_order, Option.id))

    async def list_by_category(self, category_id: int) -> List[Option]:
        stmt = select(Option).where(Option.category_id == category_id).order_by(Option.display_order, Option.id)
        return await self.all(stmt)

    async def list_active_by_category(self, category_id: int) -> List[Option]:
        stmt = (
            select(Option)
            .where(Option.category_id == category_id, Option.is_active.is_(True))
            .order_by(Option.display_order, Option.id)
        )
        return await self.all(stmt)


class ModuleRepository(BaseRepository):
    """Repository for modules (assembly units)."""

    async def get_by_id(self, module_id: int) -> Optional[Module]:
        return await self.scalar_one_or_none(select(Module).where(Module.id == module_id))

    async def get_by_code(self, code: str) -> Optional[Module]:
        return await self.scalar_one_or_none(select(Module).where(Module.code == code))

    async def get_many(self, module_ids: Iterable[int]) -> List[Module]:
        ids = _valid_ids(module_ids)
        if not ids:
            return []
        return await self.all(select(Module).where(Module.id.in_(ids)).order_by(Module.id))

    async def list_all(self) -> List[Module]:
        return await self.all(select(Module).order_by(Module.code))

    async def list_active(self) -> List[Module]:
        return await self.all(select(Module).where(Module.is_active.is_(True)).order_by(Module.code))

    async def create_module(self, payload: ModuleCreate) -> Module:
        row = Module(**payload.model_dump())
        await self.add(row)
        await self.commit()
        logger.info("Module added: %s", row.code)
        return await self.refresh(row)

    async def update_module(self, module_id: int, payload: ModuleUpdate) -> Optional[Module]:
        module = await self.get_by_id(module_id)
        if not module:
            return None
        for field, value in _changes(payload).items():
            setattr(module, field, value)
        await self.commit()
        logger.info("Module updated: %s", module.code)
        return await self.refresh(module)

    async def delete_module(self, module_id: int) -> bool:
        """Delete a module together with its option and part links."""
        if not await self.get_by_id(module_id):
            return False
        await self.execute(delete(OptionModule).where(OptionModule.module_id == module_id))
        await self.execute(delete(ModulePart).where(ModulePart.module_id == module_id))
        await self.execute(delete(Module).where(Module.id == module_id))
        await self.commit()
        logger.info("Module deleted: %s", module_id)
        return True

    async def list_by_options(self, option_ids: Sequence[int]) -> List[Module]:
        """Distinct modules linked to any of the given options."""
        ids = _valid_ids(option_ids)
        if not ids:
            return []
        stmt = (
            select(Module)
            .join(OptionModule, OptionModule.module_id == Module.id)
            .where(OptionModule.option_id.in_(ids))
            .distinct()
            .order_by(Module.id)
        )
        return await self.all(stmt)


class PartRepository(BaseRepository):
    """Repository for procurable parts."""

    async def get_by_id(self, part_id: int) -> Optional[Part]:
        return await self.scalar_one_or_none(select(Part).where(Part.id == part_id))

    async def get_by_code(self, code: str) -> Optional[Part]:
        return await self.scalar_one_or_none(select(Part).where(Part.code == code))

    async def get_many(self, part_ids: Iterable[int]) -> List[Part]:
        ids = _valid_ids(part_ids)
        if not ids:
            return []
        return await self.all(select(Part).where(Part.id.in_(ids)).order_by(Part.id))

    async def list_all(self) -> List[Part]:
        return await self.all(select(Part).order_by(Part.code))

    async def list_active(self) -> List[Part]:
        return await self.all(select(Part).where(Part.is_active.is_(True)).order_by(Part.code))

    async def list_by_module(self, module_id: int) -> List[Part]:
        stmt = (
            select(Part)
            .join(ModulePart, ModulePart.part_id == Part.id)
            .where(ModulePart.module_id == module_id)
            .distinct()
            .order_by(Part.code)
        )
        return await self.all(stmt)

    async def create_part(self, payload: PartCreate) -> Part:
        row = Part(**payload.model_dump())
        await self.add(row)
        await self.commit()
        logger.info("Part added: %s", row.code)
        return await self.refresh(row)

    async def update_part(self, part_id: int, payload: PartUpdate) -> Optional[Part]:
        part = await self.get_by_id(part_id)
        if not part:
            return None
        for field, value in _changes(payload).items():
            setattr(part, field, value)
        await self.commit()
        logger.info("Part updated: %s", part.code)
        return await self.refresh(part)

    async def delete_part(self, part_id: int) -> bool:
        """Delete a part and drop it from every module that used it."""
        if not await self.get_by_id(part_id):
            return False
        await self.execute(delete(ModulePart).where(ModulePart.part_id == part_id))
        await self.execute(delete(Part).where(Part.id == part_id))
        await self.commit()
        logger.info("Part deleted: %s", part_id)
        return True


class OptionModuleRepository(BaseRepository):
    """Repository for option -> module activation links."""

    async def get_by_id(self, link_id: int) -> Optional[OptionModule]:
        return await self.scalar_one_or_none(select(OptionModule).where(OptionModule.id == link_id))

    async def list_by_option(self, option_id: int) -> List[OptionModule]:
        stmt = select(OptionModule).where(OptionModule.option_id == option_id).order_by(OptionModule.id)
        return await self.all(stmt)

    async def list_by_module(self, module_id: int) -> List[OptionModule]:
        stmt = select(OptionModule).where(OptionModule.module_id == module_id).order_by(OptionModule.id)
        return await self.all(stmt)

    async def create_link(self, payload: OptionModuleCreate) -> OptionModule:
        row = OptionModule(**payload.model_dump())
        await self.add(row)
        await self.commit()
        logger.info("OptionModule added: option %s -> module %s", row.option_id, row.module_id)
        return await self.refresh(row)

    async def delete_link(self, link_id: int) -> bool:
        if not await self.get_by_id(link_id):
            return False
        await self.execute(delete(OptionModule).where(OptionModule.id == link_id))
        await self.commit()
        logger.info("OptionModule deleted: %s", link_id)
        return True


class ModulePartRepository(BaseRepository):
    """Repository for module -> part bill-of-materials links."""

    async def get_by_id(self, link_id: int) -> Optional[ModulePart]:
        return await self.scalar_one_or_none(select(ModulePart).where(ModulePart.id == link_id))

    async def list_by_module(self, module_id: int) -> List[ModulePart]:
        stmt = select(ModulePart).where(ModulePart.module_id == module_id).order_by(ModulePart.id)
        return await self.all(stmt)

    async def list_by_part(self, part_id: int) -> List[ModulePart]:
        stmt = select(ModulePart).where(ModulePart.part_id == part_id).order_by(ModulePart.id)
        return await self.all(stmt)

    async def create_link(self, payload: ModulePartCreate) -> ModulePart:
        row = ModulePart(**payload.model_dump())
        await self.add(row)
        await self.commit()
        logger.info("ModulePart added: module %s -> part %s", row.module_id, row.part_id)
        return await self.refresh(row)

    async def delete_link(self, link_id: int) -> bool:
        if not await self.get_by_id(link_id):
            return False
        await self.execute(delete(ModulePart).where(ModulePart.id == link_id))
        await self.commit()
        logger.info("ModulePart deleted: %s", link_id)
        return True


class SqlCatalogReader:
    """
    Read-only catalog view consumed by the BOM engine, backed by the
    repositories above on a single session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.options = OptionRepository(session)
        self.modules = ModuleRepository(session)
        self.parts = PartRepository(session)
        self.option_modules = OptionModuleRepository(session)
        self.module_parts = ModulePartRepository(session)

    async def get_options(self, option_ids: Sequence[int]) -> List[Option]:
        return await self.options.get_many(option_ids)

    async def get_option_modules(self, option_id: int) -> List[OptionModule]:
        return await self.option_modules.list_by_option(option_id)

    async def get_module(self, module_id: int) -> Optional[Module]:
        return await self.modules.get_by_id(module_id)

    async def get_module_parts(self, module_id: int) -> List[ModulePart]:
        return await self.module_parts.list_by_module(module_id)

    async def get_parts(self, part_ids: Sequence[int]) -> List[Part]:
        return await self.parts.get_many(part_ids)
