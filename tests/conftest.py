"""
Shared fixtures: an in-memory catalog for engine tests and a temporary
SQLite database (seeded with the sample catalog) for repository, service
and API tests.
"""

import asyncio
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from configurator_api.db.seed import _MODULE_PARTS, _MODULES, _OPTION_MODULES, _OPTIONS, _PARTS, seed_catalog
from configurator_api.db.session import create_schema


class InMemoryCatalog:
    """Dict-backed catalog satisfying the engine's CatalogReader protocol."""

    def __init__(self):
        self.options = {}
        self.modules = {}
        self.parts = {}
        self.option_modules = []
        self.module_parts = []

    def add_option(self, id, code, name):
        self.options[id] = SimpleNamespace(id=id, code=code, name=name)

    def add_module(self, id, code, name):
        self.modules[id] = SimpleNamespace(id=id, code=code, name=name)

    def add_part(self, id, code, name, unit_price, part_number=None, supplier=None, unit="pcs", description=None):
        self.parts[id] = SimpleNamespace(
            id=id,
            code=code,
            name=name,
            description=description,
            part_number=part_number,
            unit_price=Decimal(unit_price),
            supplier=supplier,
            unit=unit,
        )

    def link_option(self, option_id, module_id, quantity):
        self.option_modules.append(SimpleNamespace(option_id=option_id, module_id=module_id, quantity=quantity))

    def link_part(self, module_id, part_id, quantity):
        self.module_parts.append(SimpleNamespace(module_id=module_id, part_id=part_id, quantity=quantity))

    async def get_options(self, option_ids):
        return [self.options[i] for i in set(option_ids) if i in self.options]

    async def get_option_modules(self, option_id):
        return [link for link in self.option_modules if link.option_id == option_id]

    async def get_module(self, module_id):
        return self.modules.get(module_id)

    async def get_module_parts(self, module_id):
        return [link for link in self.module_parts if link.module_id == module_id]

    async def get_parts(self, part_ids):
        return [self.parts[i] for i in set(part_ids) if i in self.parts]


def build_sample_catalog():
    """The sample switchgear catalog with ids assigned in declaration order."""
    catalog = InMemoryCatalog()
    option_ids = {}
    for idx, (code, name, *_rest) in enumerate(_OPTIONS, start=1):
        catalog.add_option(idx, code, name)
        option_ids[code] = idx
    module_ids = {}
    for idx, (code, name, *_rest) in enumerate(_MODULES, start=1):
        catalog.add_module(idx, code, name)
        module_ids[code] = idx
    part_ids = {}
    for idx, (code, name, part_number, description, price, supplier) in enumerate(_PARTS, start=1):
        catalog.add_part(idx, code, name, price, part_number=part_number, supplier=supplier, description=description)
        part_ids[code] = idx
    for option_code, module_code, qty in _OPTION_MODULES:
        catalog.link_option(option_ids[option_code], module_ids[module_code], qty)
    for module_code, part_code, qty in _MODULE_PARTS:
        catalog.link_part(module_ids[module_code], part_ids[part_code], qty)
    catalog.ids = SimpleNamespace(options=option_ids, modules=module_ids, parts=part_ids)
    return catalog


@pytest.fixture
def sample_catalog():
    return build_sample_catalog()


@pytest.fixture
def scenario_ids(sample_catalog):
    """700x1000 columns, ventilated roof, 1600A busbar."""
    ids = sample_catalog.ids.options
    return [ids["COL_700x1000"], ids["ROOF_YES"], ids["HBB_1600"]]


class RecordingObserver:
    """Observer capturing engine notifications for assertions."""

    def __init__(self):
        self.events = []

    def generation_started(self, configuration_name, selected_ids):
        self.events.append(("generation_started", configuration_name))

    def options_resolved(self, options, dropped_ids):
        self.events.append(("options_resolved", list(dropped_ids)))

    def modules_activated(self, activations):
        self.events.append(("modules_activated", len(activations)))

    def module_missing(self, module_id):
        self.events.append(("module_missing", module_id))

    def part_missing(self, part_id):
        self.events.append(("part_missing", part_id))

    def bom_generated(self, result):
        self.events.append(("bom_generated", result.unique_part_count))


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"


@pytest.fixture
def run_db(db_url):
    """
    Run `fn(session)` against a fresh SQLite catalog.

    Usage:
        result = run_db(lambda session: SomeRepository(session).list_all())
    """

    def _run(fn, *, seed=True):
        async def _main():
            engine = create_async_engine(db_url)
            try:
                await create_schema(engine)
                maker = async_sessionmaker(engine, expire_on_commit=False)
                if seed:
                    async with maker() as session:
                        await seed_catalog(session)
                async with maker() as session:
                    return await fn(session)
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return _run
