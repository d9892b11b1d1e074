"""
Repository layer for catalog data access.

Repositories encapsulate SQLAlchemy queries and catalog maintenance writes for
each entity. The BOM engine only ever reads through SqlCatalogReader.
"""

from .base import BaseRepository, CatalogConflictError, CatalogUnavailableError  # noqa: F401
from .catalog import (  # noqa: F401
    CategoryRepository,
    ModulePartRepository,
    ModuleRepository,
    OptionModuleRepository,
    OptionRepository,
    PartRepository,
    SqlCatalogReader,
)
