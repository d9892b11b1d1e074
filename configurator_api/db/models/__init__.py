"""
ORM models for the configuration catalog: categories, options, modules,
parts and the two weighted link tables between them.

Importing this package ensures model classes are registered with the Base
metadata for schema creation and runtime usage.
"""

from .catalog import (  # noqa: F401
    Category,
    Option,
    Module,
    Part,
    OptionModule,
    ModulePart,
)
