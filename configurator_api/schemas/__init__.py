"""
Public Pydantic schemas used by routes, services, report rendering and tests.

Catalog read models mirror the ORM entities; BOM models are the transient
value types produced by the consolidation engine.
"""

from .bom import (  # noqa: F401
    ActivatedModule,
    BomGenerateRequest,
    BomLineItem,
    BomResult,
    ConsolidatedPart,
    ModuleActivation,
)
from .common import MessageResponse  # noqa: F401
