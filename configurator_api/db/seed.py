"""
Database seeding utilities for the sample switchgear catalog.

Seeds:
- Categories: Columns Size, IP Rating, Ventilated Roof, Horizontal Busbar
- Two options per category (first one is the default)
- Column, roof and busbar modules with their master assembly paths
- Nine parts (profiles, brackets, roof panels, busbars, insulators, bolts)
- Option -> module and module -> part links with quantities

Usage:
  configurator seed
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from configurator_api.db.models.catalog import (
    Category,
    Module,
    ModulePart,
    Option,
    OptionModule,
    Part,
)

logger = logging.getLogger(__name__)


_CATEGORIES = [
    # code, name, description, display_order
    ("COLUMNS", "Columns Size", "Column dimensions", 1),
    ("IP", "IP Rating", "Ingress Protection rating", 2),
    ("ROOF", "Ventilated Roof", "Roof ventilation options", 3),
    ("HBB", "Horizontal Busbar", "Horizontal busbar configuration", 4),
]

_OPTIONS = [
    # code, name, description, category code, display_order, is_default
    ("COL_700x1000", "700x1000", "Column size 700x1000mm", "COLUMNS", 1, True),
    ("COL_800x1200", "800x1200", "Column size 800x1200mm", "COLUMNS", 2, False),
    ("IP54", "IP54", "IP54 protection", "IP", 1, True),
    ("IP42", "IP42", "IP42 protection", "IP", 2, False),
    ("ROOF_YES", "Yes", "With ventilated roof", "ROOF", 1, True),
    ("ROOF_NO", "No", "Without ventilated roof", "ROOF", 2, False),
    ("HBB_1600", "1600A", "1600A horizontal busbar", "HBB", 1, True),
    ("HBB_2500", "2500A", "2500A horizontal busbar", "HBB", 2, False),
]

_MODULES = [
    # code, name, description, master assembly path
    ("MOD_COL_700", "Column 700x1000 Module", "Standard column module", r"C:\Assemblies\Column_700x1000.asm"),
    ("MOD_COL_800", "Column 800x1200 Module", "Large column module", r"C:\Assemblies\Column_800x1200.asm"),
    ("MOD_ROOF", "Ventilated Roof Module", "Roof with ventilation", r"C:\Assemblies\Roof_Ventilated.asm"),
    ("MOD_HBB_1600", "Busbar 1600A Module", "1600A busbar assembly", r"C:\Assemblies\Busbar_1600A.asm"),
    ("MOD_HBB_2500", "Busbar 2500A Module", "2500A busbar assembly", r"C:\Assemblies\Busbar_2500A.asm"),
]

_PARTS = [
    # code, name, part number, description, unit price, supplier
    ("PART_001", "Steel Column Profile", "SC-700-001", "Steel profile for 700x1000 column", "150.00", "SteelCorp"),
    ("PART_002", "Steel Column Profile Large", "SC-800-001", "Steel profile for 800x1200 column", "200.00", "SteelCorp"),
    ("PART_003", "Mounting Bracket", "MB-001", "Universal mounting bracket", "25.00", "FastenerInc"),
    ("PART_004", "Roof Panel", "RP-001", "Ventilated roof panel", "80.00", "RoofMaster"),
    ("PART_005", "Ventilation Grill", "VG-001", "Air ventilation grill", "30.00", "VentCo"),
    ("PART_006", "Copper Busbar 1600A", "BB-1600-CU", "Copper busbar 1600A", "450.00", "ElectricSupply"),
    ("PART_007", "Copper Busbar 2500A", "BB-2500-CU", "Copper busbar 2500A", "650.00", "ElectricSupply"),
    ("PART_008", "Busbar Insulator", "BI-001", "Busbar insulator", "15.00", "ElectricSupply"),
    ("PART_009", "Bolt M8x40", "BOLT-M8-40", "M8x40 bolt", "0.50", "FastenerInc"),
]

_OPTION_MODULES = [
    # option code, module code, quantity
    ("COL_700x1000", "MOD_COL_700", 4),
    ("COL_800x1200", "MOD_COL_800", 4),
    ("ROOF_YES", "MOD_ROOF", 1),
    ("HBB_1600", "MOD_HBB_1600", 1),
    ("HBB_2500", "MOD_HBB_2500", 1),
]

_MODULE_PARTS = [
    # module code, part code, quantity per module instance
    ("MOD_COL_700", "PART_001", 1),
    ("MOD_COL_700", "PART_003", 4),
    ("MOD_COL_700", "PART_009", 16),
    ("MOD_COL_800", "PART_002", 1),
    ("MOD_COL_800", "PART_003", 4),
    ("MOD_COL_800", "PART_009", 16),
    ("MOD_ROOF", "PART_004", 2),
    ("MOD_ROOF", "PART_005", 4),
    ("MOD_ROOF", "PART_009", 8),
    ("MOD_HBB_1600", "PART_006", 3),
    ("MOD_HBB_1600", "PART_008", 6),
    ("MOD_HBB_1600", "PART_009", 12),
    ("MOD_HBB_2500", "PART_007", 3),
    ("MOD_HBB_2500", "PART_008", 6),
    ("MOD_HBB_2500", "PART_009", 12),
]


# PUBLIC_INTERFACE
async def seed_catalog(session: AsyncSession) -> bool:
    """
    Seed the sample catalog into an empty database.

    Returns:
        True when data was inserted, False when categories already existed.
    """
    existing = (await session.execute(select(func.count(Category.id)))).scalar_one()
    if existing:
        logger.info("Catalog already contains %s categories, skipping seeding", existing)
        return False

    categories: Dict[str, Category] = {}
    for code, name, description, order in _CATEGORIES:
        categories[code] = Category(code=code, name=name, description=description, display_order=order)
    session.add_all(categories.values())
    await session.flush()

    options: Dict[str, Option] = {}
    for code, name, description, category_code, order, is_default in _OPTIONS:
        options[code] = Option(
            code=code,
            name=name,
            description=description,
            category_id=categories[category_code].id,
            display_order=order,
            is_default=is_default,
        )
    modules: Dict[str, Module] = {
        code: Module(code=code, name=name, description=description, master_assembly_path=path)
        for code, name, description, path in _MODULES
    }
    parts: Dict[str, Part] = {
        code: Part(
            code=code,
            name=name,
            part_number=part_number,
            description=description,
            unit_price=Decimal(price),
            supplier=supplier,
            unit="pcs",
        )
        for code, name, part_number, description, price, supplier in _PARTS
    }
    session.add_all([*options.values(), *modules.values(), *parts.values()])
    await session.flush()

    session.add_all(
        OptionModule(option_id=options[opt].id, module_id=modules[mod].id, quantity=qty)
        for opt, mod, qty in _OPTION_MODULES
    )
    session.add_all(
        ModulePart(module_id=modules[mod].id, part_id=parts[part].id, quantity=qty)
        for mod, part, qty in _MODULE_PARTS
    )
    await session.commit()

    logger.info(
        "Sample catalog seeded: %d categories, %d options, %d modules, %d parts",
        len(categories), len(options), len(modules), len(parts),
    )
    return True
