"""
BOM consolidation engine.

Flow: selected option ids -> options -> activated modules -> consolidated parts
-> priced, sorted BOM. The engine functions only read from a CatalogReader and
report through a BomObserver, so they can be driven by the SQL-backed reader
or by any in-memory catalog.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from configurator_api.core.logging import configuration_name_var
from configurator_api.repositories.catalog import SqlCatalogReader
from configurator_api.schemas.bom import (
    ActivatedModule,
    BomLineItem,
    BomResult,
    ConsolidatedPart,
    ModuleActivation,
)
from configurator_api.services.base import BaseService
from configurator_api.services.events import BomObserver, LoggingBomObserver, NullBomObserver


class CatalogReader(Protocol):
    """Read-only lookups the engine needs from the catalog store."""

    async def get_options(self, option_ids: Sequence[int]) -> List[Any]: ...

    async def get_option_modules(self, option_id: int) -> List[Any]: ...

    async def get_module(self, module_id: int) -> Optional[Any]: ...

    async def get_module_parts(self, module_id: int) -> List[Any]: ...

    async def get_parts(self, part_ids: Sequence[int]) -> List[Any]: ...


# PUBLIC_INTERFACE
async def resolve_options(
    catalog: CatalogReader,
    selected_ids: Iterable[int],
    *,
    deduplicate: bool = False,
    observer: BomObserver | None = None,
) -> List[Any]:
    """
    Map selected option ids to option records.

    Unknown (or non-positive) ids are dropped without error. A repeated id
    yields its option once per occurrence unless `deduplicate` is set.
    """
    observer = observer or NullBomObserver()
    ids = list(selected_ids)
    # Exact int check: True == 1 and 1.0 == 1 must not alias a real id.
    valid = [i for i in ids if type(i) is int and i > 0]
    if deduplicate:
        valid = list(dict.fromkeys(valid))

    found = {option.id: option for option in await catalog.get_options(sorted(set(valid)))}
    resolved = [found[i] for i in valid if i in found]
    dropped = [i for i in ids if not (type(i) is int and i in found)]
    observer.options_resolved(resolved, dropped)
    return resolved


# PUBLIC_INTERFACE
async def aggregate_module_activations(
    catalog: CatalogReader,
    options: Sequence[Any],
    *,
    observer: BomObserver | None = None,
) -> List[ModuleActivation]:
    """
    Sum option -> module link quantities per module.

    Returns one ModuleActivation per touched module, ascending by module id.
    """
    observer = observer or NullBomObserver()
    totals: Dict[int, int] = defaultdict(int)
    for option in options:
        for link in await catalog.get_option_modules(option.id):
            totals[link.module_id] += link.quantity

    activations = [ModuleActivation(module_id=mid, quantity=qty) for mid, qty in sorted(totals.items())]
    observer.modules_activated(activations)
    return activations


# PUBLIC_INTERFACE
async def consolidate_parts(
    catalog: CatalogReader,
    activations: Sequence[ModuleActivation],
    *,
    observer: BomObserver | None = None,
) -> Tuple[List[ActivatedModule], List[ConsolidatedPart]]:
    """
    Expand every activated module into its parts and accumulate per-part totals.

    Modules are processed in ascending id; a module missing from the catalog is
    skipped. Each part keeps the names of its contributing modules in first-seen
    order without duplicates.

    Returns:
        (activated modules that were found, consolidated parts ascending by part id)
    """
    observer = observer or NullBomObserver()
    modules: List[ActivatedModule] = []
    quantities: Dict[int, int] = defaultdict(int)
    sources: Dict[int, List[str]] = defaultdict(list)

    for activation in sorted(activations, key=lambda a: a.module_id):
        module = await catalog.get_module(activation.module_id)
        if module is None:
            observer.module_missing(activation.module_id)
            continue
        modules.append(
            ActivatedModule(module_id=module.id, quantity=activation.quantity, name=module.name)
        )

        for link in await catalog.get_module_parts(module.id):
            quantities[link.part_id] += link.quantity * activation.quantity
            if module.name not in sources[link.part_id]:
                sources[link.part_id].append(module.name)

    consolidated = [
        ConsolidatedPart(part_id=pid, quantity=qty, source_modules=list(sources[pid]))
        for pid, qty in sorted(quantities.items())
    ]
    return modules, consolidated


# PUBLIC_INTERFACE
async def assemble_bom(
    catalog: CatalogReader,
    configuration_name: str,
    options: Sequence[Any],
    modules: Sequence[ActivatedModule],
    consolidated: Sequence[ConsolidatedPart],
    *,
    observer: BomObserver | None = None,
) -> BomResult:
    """
    Price the consolidated parts and shape the BOM result.

    Parts that no longer exist are left out. Line items are ordered by part
    code (ordinal comparison), ties broken by part id.
    """
    observer = observer or NullBomObserver()
    parts = {part.id: part for part in await catalog.get_parts([c.part_id for c in consolidated])}

    line_items: List[BomLineItem] = []
    for entry in consolidated:
        part = parts.get(entry.part_id)
        if part is None:
            observer.part_missing(entry.part_id)
            continue
        line_items.append(
            BomLineItem(
                part_id=part.id,
                part_code=part.code,
                part_name=part.name,
                part_number=part.part_number,
                description=part.description,
                total_quantity=entry.quantity,
                unit=part.unit,
                unit_price=part.unit_price,
                supplier=part.supplier,
                source_modules=list(entry.source_modules),
            )
        )
    line_items.sort(key=lambda li: (li.part_code, li.part_id))

    return BomResult(
        configuration_name=configuration_name,
        selected_options=[f"{o.name} ({o.code})" for o in options],
        activated_modules=[m.label for m in modules],
        line_items=line_items,
    )


# PUBLIC_INTERFACE
async def generate_bom(
    catalog: CatalogReader,
    selected_ids: Iterable[int],
    configuration_name: str,
    *,
    deduplicate: bool = False,
    observer: BomObserver | None = None,
) -> BomResult:
    """
    Run the full pipeline: resolve options, activate modules, consolidate
    parts and assemble the BOM. No selections yields an empty BOM.
    """
    observer = observer or NullBomObserver()
    ids = list(selected_ids)
    observer.generation_started(configuration_name, ids)

    options = await resolve_options(catalog, ids, deduplicate=deduplicate, observer=observer)
    activations = await aggregate_module_activations(catalog, options, observer=observer)
    modules, consolidated = await consolidate_parts(catalog, activations, observer=observer)
    result = await assemble_bom(
        catalog, configuration_name, options, modules, consolidated, observer=observer
    )

    observer.bom_generated(result)
    return result


class BomService(BaseService):
    """
    Domain service generating BOMs from the SQL catalog.

    Wires the engine to the repositories of the given session and reports
    progress through the logging observer.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        deduplicate_selections: bool = False,
        observer: BomObserver | None = None,
    ) -> None:
        super().__init__(session)
        self.catalog = SqlCatalogReader(session)
        self.deduplicate_selections = deduplicate_selections
        self.observer = observer or LoggingBomObserver()

    # PUBLIC_INTERFACE
    async def generate_bom(self, selected_option_ids: Sequence[int], configuration_name: str) -> BomResult:
        """
        Generate the BOM for a configuration.

        Parameters:
            selected_option_ids: option ids picked by the user (unknown ids are ignored)
            configuration_name: free-text label carried into the result
        Returns:
            BomResult with sorted line items and summary totals
        Raises:
            CatalogUnavailableError: the catalog store could not be queried
        """
        token = configuration_name_var.set(configuration_name)
        try:
            return await generate_bom(
                self.catalog,
                selected_option_ids,
                configuration_name,
                deduplicate=self.deduplicate_selections,
                observer=self.observer,
            )
        finally:
            configuration_name_var.reset(token)
