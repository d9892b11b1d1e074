from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from configurator_api.core.deps import get_catalog_service, get_db_session
from configurator_api.repositories.catalog import (
    ModulePartRepository,
    ModuleRepository,
    OptionModuleRepository,
    OptionRepository,
    PartRepository,
)
from configurator_api.schemas.catalog import (
    CategoryWithOptions,
    ModuleCreate,
    ModulePartCreate,
    ModulePartRead,
    ModuleRead,
    ModuleUpdate,
    OptionModuleCreate,
    OptionModuleRead,
    PartCreate,
    PartRead,
    PartUpdate,
)
from configurator_api.services.catalog import CatalogService

router = APIRouter(prefix="/catalog", tags=["Catalog"])


# PUBLIC_INTERFACE
@router.get(
    "/categories",
    response_model=List[CategoryWithOptions],
    summary="List categories with options",
    description="Active categories in display order, each with its active options.",
)
async def list_categories(
    service: CatalogService = Depends(get_catalog_service),
) -> List[CategoryWithOptions]:
    return await service.get_categories_with_options()


# PUBLIC_INTERFACE
@router.get(
    "/options/defaults",
    response_model=List[int],
    summary="Default option selection",
    description="Ids of the default option of every active category.",
)
async def default_options(
    service: CatalogService = Depends(get_catalog_service),
) -> List[int]:
    return await service.default_selection()


# PUBLIC_INTERFACE
@router.get(
    "/modules",
    response_model=List[ModuleRead],
    summary="List modules",
    description="List modules ordered by code.",
)
async def list_modules(
    session: AsyncSession = Depends(get_db_session),
    active_only: bool = Query(False, description="Only return active modules"),
) -> List[ModuleRead]:
    repo = ModuleRepository(session)
    modules = await (repo.list_active() if active_only else repo.list_all())
    return [ModuleRead.model_validate(m) for m in modules]


# PUBLIC_INTERFACE
@router.get(
    "/modules/{module_id}/parts",
    response_model=List[PartRead],
    summary="List module parts",
    description="Distinct parts used by a module, ordered by code.",
)
async def list_module_parts(
    module_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> List[PartRead]:
    module = await ModuleRepository(session).get_by_id(module_id)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found")
    parts = await PartRepository(session).list_by_module(module_id)
    return [PartRead.model_validate(p) for p in parts]


# PUBLIC_INTERFACE
@router.get(
    "/parts",
    response_model=List[PartRead],
    summary="List parts",
    description="List parts ordered by code.",
)
async def list_parts(
    session: AsyncSession = Depends(get_db_session),
    active_only: bool = Query(False, description="Only return active parts"),
) -> List[PartRead]:
    repo = PartRepository(session)
    parts = await (repo.list_active() if active_only else repo.list_all())
    return [PartRead.model_validate(p) for p in parts]


# PUBLIC_INTERFACE
@router.get(
    "/parts/{part_id}",
    response_model=PartRead,
    summary="Get part",
    description="Get a part by id.",
)
async def get_part(
    part_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> PartRead:
    part = await PartRepository(session).get_by_id(part_id)
    if not part:
        raise HTTPException(status_code=404, detail="Part not found")
    return PartRead.model_validate(part)


# Catalog maintenance


# PUBLIC_INTERFACE
@router.post(
    "/parts",
    response_model=PartRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create part",
    description="Add a part to the catalog. Codes are unique.",
)
async def create_part(
    payload: PartCreate,
    session: AsyncSession = Depends(get_db_session),
) -> PartRead:
    created = await PartRepository(session).create_part(payload)
    return PartRead.model_validate(created)


# PUBLIC_INTERFACE
@router.patch(
    "/parts/{part_id}",
    response_model=PartRead,
    summary="Update part",
    description="Change price, supplier or other fields of a part; omitted fields are left as they are.",
)
async def update_part(
    payload: PartUpdate,
    part_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> PartRead:
    updated = await PartRepository(session).update_part(part_id, payload)
    if not updated:
        raise HTTPException(status_code=404, detail="Part not found")
    return PartRead.model_validate(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/parts/{part_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete part",
    description="Delete a part and remove it from every module bill of materials.",
)
async def delete_part(
    part_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> None:
    if not await PartRepository(session).delete_part(part_id):
        raise HTTPException(status_code=404, detail="Part not found")


# PUBLIC_INTERFACE
@router.get(
    "/modules/{module_id}",
    response_model=ModuleRead,
    summary="Get module",
)
async def get_module(
    module_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> ModuleRead:
    module = await ModuleRepository(session).get_by_id(module_id)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found")
    return ModuleRead.model_validate(module)


# PUBLIC_INTERFACE
@router.post(
    "/modules",
    response_model=ModuleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create module",
)
async def create_module(
    payload: ModuleCreate,
    session: AsyncSession = Depends(get_db_session),
) -> ModuleRead:
    created = await ModuleRepository(session).create_module(payload)
    return ModuleRead.model_validate(created)


# PUBLIC_INTERFACE
@router.patch(
    "/modules/{module_id}",
    response_model=ModuleRead,
    summary="Update module",
)
async def update_module(
    payload: ModuleUpdate,
    module_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> ModuleRead:
    updated = await ModuleRepository(session).update_module(module_id, payload)
    if not updated:
        raise HTTPException(status_code=404, detail="Module not found")
    return ModuleRead.model_validate(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/modules/{module_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete module",
    description="Delete a module together with its option and part links.",
)
async def delete_module(
    module_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> None:
    if not await ModuleRepository(session).delete_module(module_id):
        raise HTTPException(status_code=404, detail="Module not found")


# PUBLIC_INTERFACE
@router.get(
    "/option-modules",
    response_model=List[OptionModuleRead],
    summary="List option-module links",
    description="Links activated by an option, or the options activating a module.",
)
async def list_option_modules(
    option_id: int | None = Query(None, ge=1),
    module_id: int | None = Query(None, ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> List[OptionModuleRead]:
    repo = OptionModuleRepository(session)
    if option_id is not None:
        links = await repo.list_by_option(option_id)
    elif module_id is not None:
        links = await repo.list_by_module(module_id)
    else:
        raise HTTPException(status_code=400, detail="option_id or module_id is required")
    return [OptionModuleRead.model_validate(x) for x in links]


# PUBLIC_INTERFACE
@router.post(
    "/option-modules",
    response_model=OptionModuleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Link option to module",
)
async def create_option_module(
    payload: OptionModuleCreate,
    session: AsyncSession = Depends(get_db_session),
) -> OptionModuleRead:
    option = await OptionRepository(session).get_by_id(payload.option_id)
    module = await ModuleRepository(session).get_by_id(payload.module_id)
    if not option or not module:
        raise HTTPException(status_code=404, detail="Option or module not found")
    created = await OptionModuleRepository(session).create_link(payload)
    return OptionModuleRead.model_validate(created)


# PUBLIC_INTERFACE
@router.delete(
    "/option-modules/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unlink option from module",
)
async def delete_option_module(
    link_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> None:
    if not await OptionModuleRepository(session).delete_link(link_id):
        raise HTTPException(status_code=404, detail="Link not found")


# PUBLIC_INTERFACE
@router.get(
    "/module-parts",
    response_model=List[ModulePartRead],
    summary="List module-part links",
    description="Bill-of-materials lines of a module, or the modules using a part.",
)
async def list_module_parts_links(
    module_id: int | None = Query(None, ge=1),
    part_id: int | None = Query(None, ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> List[ModulePartRead]:
    repo = ModulePartRepository(session)
    if module_id is not None:
        links = await repo.list_by_module(module_id)
    elif part_id is not None:
        links = await repo.list_by_part(part_id)
    else:
        raise HTTPException(status_code=400, detail="module_id or part_id is required")
    return [ModulePartRead.model_validate(x) for x in links]


# PUBLIC_INTERFACE
@router.post(
    "/module-parts",
    response_model=ModulePartRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add part to module",
)
async def create_module_part(
    payload: ModulePartCreate,
    session: AsyncSession = Depends(get_db_session),
) -> ModulePartRead:
    module = await ModuleRepository(session).get_by_id(payload.module_id)
    part = await PartRepository(session).get_by_id(payload.part_id)
    if not module or not part:
        raise HTTPException(status_code=404, detail="Module or part not found")
    created = await ModulePartRepository(session).create_link(payload)
    return ModulePartRead.model_validate(created)


# PUBLIC_INTERFACE
@router.delete(
    "/module-parts/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove part from module",
)
async def delete_module_part(
    link_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_db_session),
) -> None:
    if not await ModulePartRepository(session).delete_link(link_id):
        raise HTTPException(status_code=404, detail="Link not found")
