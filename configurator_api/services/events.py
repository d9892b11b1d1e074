from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

logger = logging.getLogger("configurator_api.bom")


class BomObserver(Protocol):
    """
    Receives progress and diagnostics from the BOM engine.

    The engine itself performs no I/O; anything observable (logging, metrics,
    UI progress) is layered on through an implementation of this protocol.
    """

    def generation_started(self, configuration_name: str, selected_ids: Sequence[int]) -> None: ...

    def options_resolved(self, options: Sequence[Any], dropped_ids: Sequence[int]) -> None: ...

    def modules_activated(self, activations: Sequence[Any]) -> None: ...

    def module_missing(self, module_id: int) -> None: ...

    def part_missing(self, part_id: int) -> None: ...

    def bom_generated(self, result: Any) -> None: ...


class NullBomObserver:
    """Observer that ignores every notification."""

    def generation_started(self, configuration_name, selected_ids) -> None:
        pass

    def options_resolved(self, options, dropped_ids) -> None:
        pass

    def modules_activated(self, activations) -> None:
        pass

    def module_missing(self, module_id) -> None:
        pass

    def part_missing(self, part_id) -> None:
        pass

    def bom_generated(self, result) -> None:
        pass


class LoggingBomObserver(NullBomObserver):
    """Observer that reports engine progress through the standard logging module."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def generation_started(self, configuration_name, selected_ids) -> None:
        self.log.info("Generating BOM for configuration: %s", configuration_name)
        self.log.debug("Selected option IDs: %s", ", ".join(str(i) for i in selected_ids))

    def options_resolved(self, options, dropped_ids) -> None:
        self.log.info("Resolved %d selected options", len(options))
        if dropped_ids:
            self.log.debug("Ignoring unknown option IDs: %s", ", ".join(str(i) for i in dropped_ids))

    def modules_activated(self, activations) -> None:
        self.log.info("Activated modules: %d", len(activations))

    def module_missing(self, module_id) -> None:
        self.log.warning("Module %s referenced by an option link was not found; skipping", module_id)

    def part_missing(self, part_id) -> None:
        self.log.warning("Part %s referenced by a module link was not found; skipping", part_id)

    def bom_generated(self, result) -> None:
        self.log.info(
            "BOM generated: %d unique parts, %d total items, $%.2f",
            result.unique_part_count,
            result.total_items,
            result.total_cost,
        )
