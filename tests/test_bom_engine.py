"""
Tests for the BOM consolidation engine, driven by an in-memory catalog.
"""

import asyncio
from collections import defaultdict
from decimal import Decimal
from itertools import combinations

import pytest

from configurator_api.schemas.bom import ModuleActivation
from configurator_api.services.bom import (
    aggregate_module_activations,
    assemble_bom,
    consolidate_parts,
    generate_bom,
    resolve_options,
)

from conftest import InMemoryCatalog


def run(coro):
    return asyncio.run(coro)


class TestScenario:
    """700x1000 columns (x4), ventilated roof, 1600A busbar."""

    def test_summary_totals(self, sample_catalog, scenario_ids):
        bom = run(generate_bom(sample_catalog, scenario_ids, "Panel A"))

        assert bom.unique_part_count == 7
        assert bom.total_items == 119
        assert bom.total_cost == Decimal("2762.00")

    def test_bolt_consolidated_across_modules(self, sample_catalog, scenario_ids):
        bom = run(generate_bom(sample_catalog, scenario_ids, "Panel A"))

        bolt = next(li for li in bom.line_items if li.part_code == "PART_009")
        assert bolt.total_quantity == 4 * 16 + 1 * 8 + 1 * 12
        assert bolt.total_price == Decimal("42.00")
        assert bolt.source_modules == [
            "Column 700x1000 Module",
            "Ventilated Roof Module",
            "Busbar 1600A Module",
        ]

    def test_line_items_sorted_by_code(self, sample_catalog, scenario_ids):
        bom = run(generate_bom(sample_catalog, scenario_ids, "Panel A"))

        assert [(li.part_code, li.total_quantity) for li in bom.line_items] == [
            ("PART_001", 4),
            ("PART_003", 16),
            ("PART_004", 2),
            ("PART_005", 4),
            ("PART_006", 3),
            ("PART_008", 6),
            ("PART_009", 84),
        ]

    def test_labels(self, sample_catalog, scenario_ids):
        bom = run(generate_bom(sample_catalog, scenario_ids, "Panel A"))

        assert bom.configuration_name == "Panel A"
        assert bom.selected_options == ["700x1000 (COL_700x1000)", "Yes (ROOF_YES)", "1600A (HBB_1600)"]
        assert bom.activated_modules == [
            "Column 700x1000 Module (x4)",
            "Ventilated Roof Module (x1)",
            "Busbar 1600A Module (x1)",
        ]

    def test_line_item_carries_part_details(self, sample_catalog, scenario_ids):
        bom = run(generate_bom(sample_catalog, scenario_ids, "Panel A"))

        busbar = next(li for li in bom.line_items if li.part_code == "PART_006")
        assert busbar.part_name == "Copper Busbar 1600A"
        assert busbar.part_number == "BB-1600-CU"
        assert busbar.supplier == "ElectricSupply"
        assert busbar.unit == "pcs"
        assert busbar.unit_price == Decimal("450.00")
        assert busbar.total_price == Decimal("1350.00")
        assert busbar.source_modules == ["Busbar 1600A Module"]

    def test_stable_across_runs(self, sample_catalog, scenario_ids):
        first = run(generate_bom(sample_catalog, scenario_ids, "Panel A"))
        second = run(generate_bom(sample_catalog, list(reversed(scenario_ids)), "Panel A"))

        assert first.line_items == second.line_items
        assert first.activated_modules == second.activated_modules
        assert first.total_cost == second.total_cost


class TestOptionResolution:

    def test_unknown_and_invalid_ids_are_dropped(self, sample_catalog, observer):
        col = sample_catalog.ids.options["COL_700x1000"]
        options = run(resolve_options(sample_catalog, [col, 999, -1, 0], observer=observer))

        assert [o.code for o in options] == ["COL_700x1000"]
        assert ("options_resolved", [999, -1, 0]) in observer.events

    def test_bool_and_float_never_alias_an_int_id(self, sample_catalog, observer):
        first = min(sample_catalog.options)
        options = run(resolve_options(sample_catalog, [first, True, 1.0], observer=observer))

        assert [o.id for o in options] == [first]
        assert ("options_resolved", [True, 1.0]) in observer.events

    def test_bool_does_not_swallow_int_when_deduplicating(self, sample_catalog):
        first = min(sample_catalog.options)
        options = run(resolve_options(sample_catalog, [True, first], deduplicate=True))
        assert [o.id for o in options] == [first]

    def test_duplicates_kept_by_default(self, sample_catalog):
        col = sample_catalog.ids.options["COL_700x1000"]
        options = run(resolve_options(sample_catalog, [col, col]))
        assert len(options) == 2

    def test_deduplicate_policy(self, sample_catalog):
        col = sample_catalog.ids.options["COL_700x1000"]
        options = run(resolve_options(sample_catalog, [col, col], deduplicate=True))
        assert len(options) == 1


class TestModuleActivation:

    def test_duplicate_selection_double_counts(self, sample_catalog):
        col = sample_catalog.ids.options["COL_700x1000"]
        bom = run(generate_bom(sample_catalog, [col, col], "Twice"))

        assert bom.activated_modules == ["Column 700x1000 Module (x8)"]
        bolt = next(li for li in bom.line_items if li.part_code == "PART_009")
        assert bolt.total_quantity == 128

    def test_duplicate_selection_with_deduplication(self, sample_catalog):
        col = sample_catalog.ids.options["COL_700x1000"]
        bom = run(generate_bom(sample_catalog, [col, col], "Once", deduplicate=True))

        assert bom.activated_modules == ["Column 700x1000 Module (x4)"]

    def test_activation_additive_across_options(self):
        catalog = InMemoryCatalog()
        catalog.add_option(1, "A", "Option A")
        catalog.add_option(2, "B", "Option B")
        catalog.link_option(1, 10, 2)
        catalog.link_option(2, 10, 3)
        catalog.link_option(2, 5, 1)

        options = run(resolve_options(catalog, [1, 2]))
        activations = run(aggregate_module_activations(catalog, options))

        assert activations == [
            ModuleActivation(module_id=5, quantity=1),
            ModuleActivation(module_id=10, quantity=5),
        ]

    def test_option_without_links_contributes_nothing(self, sample_catalog):
        ip54 = sample_catalog.ids.options["IP54"]
        bom = run(generate_bom(sample_catalog, [ip54], "IP only"))

        assert bom.selected_options == ["IP54 (IP54)"]
        assert bom.activated_modules == []
        assert bom.line_items == []


class TestPartConsolidation:

    def test_missing_module_is_skipped(self, sample_catalog, scenario_ids, observer):
        sample_catalog.link_option(scenario_ids[0], 99, 1)

        bom = run(generate_bom(sample_catalog, scenario_ids, "Panel A", observer=observer))

        assert ("module_missing", 99) in observer.events
        assert bom.unique_part_count == 7
        assert bom.total_cost == Decimal("2762.00")

    def test_source_modules_not_duplicated(self):
        catalog = InMemoryCatalog()
        catalog.add_module(1, "M1", "Frame")
        catalog.link_part(1, 7, 2)
        catalog.link_part(1, 7, 3)

        modules, consolidated = run(consolidate_parts(catalog, [ModuleActivation(module_id=1, quantity=2)]))

        assert [m.label for m in modules] == ["Frame (x2)"]
        assert len(consolidated) == 1
        assert consolidated[0].quantity == 10
        assert consolidated[0].source_modules == ["Frame"]

    def test_source_module_names_case_sensitive(self):
        catalog = InMemoryCatalog()
        catalog.add_module(1, "M1", "frame")
        catalog.add_module(2, "M2", "Frame")
        catalog.link_part(2, 7, 1)
        catalog.link_part(1, 7, 1)

        _, consolidated = run(consolidate_parts(
            catalog,
            [ModuleActivation(module_id=2, quantity=1), ModuleActivation(module_id=1, quantity=1)],
        ))

        # Processed in ascending module id regardless of input order.
        assert consolidated[0].source_modules == ["frame", "Frame"]


class TestAssembly:

    def test_empty_selection_yields_empty_bom(self, sample_catalog):
        bom = run(generate_bom(sample_catalog, [], "Nothing"))

        assert bom.line_items == []
        assert bom.selected_options == []
        assert bom.total_cost == 0
        assert bom.total_items == 0
        assert bom.unique_part_count == 0

    def test_only_unknown_ids_yields_empty_bom(self, sample_catalog):
        bom = run(generate_bom(sample_catalog, [404, 405], "Stale"))
        assert bom.unique_part_count == 0

    def test_missing_part_is_left_out(self, sample_catalog, scenario_ids, observer):
        bolt_id = sample_catalog.ids.parts["PART_009"]
        del sample_catalog.parts[bolt_id]

        bom = run(generate_bom(sample_catalog, scenario_ids, "Panel A", observer=observer))

        assert ("part_missing", bolt_id) in observer.events
        assert "PART_009" not in [li.part_code for li in bom.line_items]
        assert bom.unique_part_count == 6
        assert bom.total_items == 35
        assert bom.total_cost == Decimal("2720.00")

    def test_ordinal_sort_with_id_tiebreak(self):
        catalog = InMemoryCatalog()
        catalog.add_module(1, "M", "Module")
        catalog.add_part(5, "b-part", "lower", "1.00")
        catalog.add_part(4, "B-PART", "upper", "1.00")
        catalog.add_part(3, "DUP", "second", "1.00")
        catalog.add_part(2, "DUP", "first", "1.00")
        catalog.add_part(1, "PART_9", "nine", "1.00")
        catalog.add_part(6, "PART_10", "ten", "1.00")
        for part_id in catalog.parts:
            catalog.link_part(1, part_id, 1)

        _, consolidated = run(consolidate_parts(catalog, [ModuleActivation(module_id=1, quantity=1)]))
        bom = run(assemble_bom(catalog, "Sort", [], [], consolidated))

        assert [(li.part_code, li.part_id) for li in bom.line_items] == [
            ("B-PART", 4),
            ("DUP", 2),
            ("DUP", 3),
            ("PART_10", 6),
            ("PART_9", 1),
            ("b-part", 5),
        ]

    def test_observer_sees_full_pipeline(self, sample_catalog, scenario_ids, observer):
        run(generate_bom(sample_catalog, scenario_ids, "Panel A", observer=observer))

        names = [name for name, _ in observer.events]
        assert names == ["generation_started", "options_resolved", "modules_activated", "bom_generated"]
        assert observer.events[-1] == ("bom_generated", 7)


class TestProperties:

    @staticmethod
    def expected_part_totals(catalog, option_ids):
        activation = defaultdict(int)
        for oid in option_ids:
            for link in catalog.option_modules:
                if link.option_id == oid:
                    activation[link.module_id] += link.quantity
        totals = defaultdict(int)
        for link in catalog.module_parts:
            totals[link.part_id] += link.quantity * activation.get(link.module_id, 0)
        return {pid: qty for pid, qty in totals.items() if qty}

    def test_additivity_over_all_selections(self, sample_catalog):
        option_ids = sorted(sample_catalog.options)
        for size in range(len(option_ids) + 1):
            for selection in combinations(option_ids, size):
                bom = run(generate_bom(sample_catalog, selection, "combo"))
                actual = {li.part_id: li.total_quantity for li in bom.line_items}
                assert actual == self.expected_part_totals(sample_catalog, selection)

    @pytest.mark.parametrize("codes", [
        ["COL_800x1200", "IP42", "ROOF_NO", "HBB_2500"],
        ["COL_700x1000", "COL_800x1200", "HBB_1600", "HBB_2500"],
    ])
    def test_derived_totals_and_sort_invariant(self, sample_catalog, codes):
        ids = [sample_catalog.ids.options[c] for c in codes]
        bom = run(generate_bom(sample_catalog, ids, "mixed"))

        assert bom.total_cost == sum((li.unit_price * li.total_quantity for li in bom.line_items), Decimal("0"))
        assert bom.total_items == sum(li.total_quantity for li in bom.line_items)
        assert bom.unique_part_count == len(bom.line_items)
        part_codes = [li.part_code for li in bom.line_items]
        assert part_codes == sorted(part_codes)
