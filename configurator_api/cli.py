"""
Configurator CLI
================

Command-line interface for the catalog and BOM engine.

Commands:
    init-db     - Create the catalog tables
    seed        - Load the sample switchgear catalog
    categories  - List categories with their options
    generate    - Generate a BOM for selected options and print/export it

Usage:
    configurator init-db
    configurator seed
    configurator categories
    configurator generate --option 1 --option 5 --option 7 --name "Panel A"
    configurator generate --defaults --format html --output panel.html
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from configurator_api.core.logging import configure_logging
from configurator_api.core.settings import get_app_settings
from configurator_api.db.seed import seed_catalog
from configurator_api.db.session import create_schema, dispose_engine, session_scope
from configurator_api.repositories.base import CatalogUnavailableError
from configurator_api.services.bom import BomService
from configurator_api.services.catalog import CatalogService
from configurator_api.services.reports import export_bom, render_csv

logger = logging.getLogger(__name__)


async def _init_db() -> None:
    try:
        await create_schema()
    finally:
        await dispose_engine()


async def _seed() -> bool:
    try:
        await create_schema()
        async with session_scope() as session:
            return await seed_catalog(session)
    finally:
        await dispose_engine()


async def _categories():
    try:
        async with session_scope() as session:
            return await CatalogService(session).get_categories_with_options()
    finally:
        await dispose_engine()


async def _generate(option_ids, name, use_defaults, deduplicate):
    try:
        async with session_scope() as session:
            ids = list(option_ids or [])
            if use_defaults:
                ids = await CatalogService(session).default_selection() + ids
            service = BomService(session, deduplicate_selections=deduplicate)
            return await service.generate_bom(ids, name)
    finally:
        await dispose_engine()


def cmd_init_db(args) -> int:
    """Create catalog tables."""
    asyncio.run(_init_db())
    print("Catalog schema ready.")
    return 0


def cmd_seed(args) -> int:
    """Load the sample catalog."""
    inserted = asyncio.run(_seed())
    print("Sample catalog loaded." if inserted else "Catalog already populated; nothing to do.")
    return 0


def cmd_categories(args) -> int:
    """Print categories and options."""
    categories = asyncio.run(_categories())
    if not categories:
        print("No categories found. Run 'configurator seed' to load the sample catalog.")
        return 0
    for category in categories:
        print(f"{category.name} [{category.code}]")
        for option in category.options:
            marker = "*" if option.is_default else " "
            print(f"  {marker} {option.id:>4}  {option.name} ({option.code})")
    return 0


def cmd_generate(args) -> int:
    """Generate a BOM and print or write the report."""
    settings = get_app_settings()
    deduplicate = args.deduplicate or settings.DEDUPLICATE_SELECTIONS
    bom = asyncio.run(_generate(args.option, args.name, args.defaults, deduplicate))

    if args.output:
        report = export_bom(bom, args.format)
        Path(args.output).write_bytes(report.content)
        print(f"BOM exported to {args.output}")
    else:
        sys.stdout.write(render_csv(bom))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="configurator",
        description="Product configurator: catalog management and BOM generation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create the catalog tables")
    subparsers.add_parser("seed", help="Load the sample catalog into an empty database")
    subparsers.add_parser("categories", help="List categories with their options")

    gen_parser = subparsers.add_parser("generate", help="Generate a BOM for selected options")
    gen_parser.add_argument("--option", "-o", type=int, action="append", help="Selected option id (repeatable)")
    gen_parser.add_argument("--defaults", action="store_true", help="Start from the default option of each category")
    gen_parser.add_argument("--name", "-n", default="Configuration", help="Configuration name")
    gen_parser.add_argument(
        "--format", "-f", default="csv", choices=["csv", "html", "xlsx", "pdf"], help="Report format for --output"
    )
    gen_parser.add_argument("--output", help="Write the report to this file instead of stdout")
    gen_parser.add_argument("--deduplicate", action="store_true", help="Count repeated option ids once")

    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING, stream=sys.stderr)

    commands = {
        "init-db": cmd_init_db,
        "seed": cmd_seed,
        "categories": cmd_categories,
        "generate": cmd_generate,
    }
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        return commands[args.command](args)
    except CatalogUnavailableError as exc:
        logger.error("Catalog store unavailable: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
