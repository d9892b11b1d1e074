"""
Tests for BOM report rendering.
"""

import asyncio
import csv
import io
from datetime import datetime, timezone

import pandas as pd
import pytest

from configurator_api.services.bom import generate_bom
from configurator_api.services.reports import COLUMNS, export_bom, render_csv, render_html


@pytest.fixture
def bom(sample_catalog, scenario_ids):
    result = asyncio.run(generate_bom(sample_catalog, scenario_ids, "Panel <A>"))
    return result.model_copy(update={"generated_at": datetime(2024, 5, 17, 9, 30, 0, tzinfo=timezone.utc)})


class TestCsv:

    def test_header_block(self, bom):
        lines = render_csv(bom).splitlines()

        assert lines[0] == "Bill of Materials - Panel <A>"
        assert lines[1] == "Generated: 2024-05-17 09:30:00"
        assert lines[2] == ""
        assert lines[3] == "Selected Options: 700x1000 (COL_700x1000), Yes (ROOF_YES), 1600A (HBB_1600)"
        assert lines[4].startswith("Activated Modules: Column 700x1000 Module (x4)")
        assert lines[5] == ""

    def test_table_rows(self, bom):
        lines = render_csv(bom).splitlines()
        rows = list(csv.reader(lines[6:14]))

        assert rows[0] == COLUMNS
        assert len(rows) == 8
        bolt = rows[-1]
        assert bolt[0] == "PART_009"
        assert bolt[4] == "84"
        assert bolt[6] == "0.50"
        assert bolt[7] == "42.00"
        assert bolt[9] == "Column 700x1000 Module; Ventilated Roof Module; Busbar 1600A Module"

    def test_text_fields_are_quoted(self, bom):
        lines = render_csv(bom).splitlines()
        assert lines[7].startswith('"PART_001","Steel Column Profile","SC-700-001",')

    def test_column_header_quantity_unit_and_money_unquoted(self, bom):
        lines = render_csv(bom).splitlines()

        assert lines[6] == (
            "Part Code,Part Name,Part Number,Description,Quantity,Unit,"
            "Unit Price,Total Price,Supplier,Source Modules"
        )
        assert lines[7] == (
            '"PART_001","Steel Column Profile","SC-700-001","Steel profile for 700x1000 column",'
            '4,pcs,150.00,600.00,"SteelCorp","Column 700x1000 Module"'
        )
        assert ',84,pcs,0.50,42.00,"FastenerInc",' in lines[13]

    def test_embedded_quotes_are_escaped(self, bom):
        item = bom.line_items[0].model_copy(update={"part_name": 'Profile 2" wide'})
        quirky = bom.model_copy(update={"line_items": [item]})

        row = next(csv.reader([render_csv(quirky).splitlines()[7]]))
        assert row[1] == 'Profile 2" wide'

    def test_summary_block(self, bom):
        lines = render_csv(bom).splitlines()

        assert lines[-4:] == [
            "Summary:",
            "Unique Parts: 7",
            "Total Items: 119",
            "Total Cost: $2762.00",
        ]

    def test_empty_bom(self, sample_catalog):
        empty = asyncio.run(generate_bom(sample_catalog, [], "Empty"))
        lines = render_csv(empty).splitlines()

        assert next(csv.reader([lines[6]])) == COLUMNS
        assert lines[-1] == "Total Cost: $0.00"


class TestHtml:

    def test_contains_table_and_summary(self, bom):
        page = render_html(bom)

        assert "<h1>Bill of Materials - Panel &lt;A&gt;</h1>" in page
        for column in COLUMNS:
            assert f"<th>{column}</th>" in page
        assert "$2762.00" in page
        assert "<td>$450.00</td>" in page
        assert "class='summary'" in page

    def test_column_order(self, bom):
        page = render_html(bom)
        positions = [page.index(f"<th>{column}</th>") for column in COLUMNS]
        assert positions == sorted(positions)
        assert page.count("<tr>") == 7


class TestExport:

    def test_csv_is_default(self, bom):
        report = export_bom(bom, "unknown")
        assert report.media_type == "text/csv"
        assert report.filename == "bom_Panel_A.csv"
        assert report.content.decode("utf-8") == render_csv(bom)

    def test_xlsx(self, bom):
        report = export_bom(bom, "xlsx")
        sheets = pd.read_excel(io.BytesIO(report.content), sheet_name=None)

        assert report.filename.endswith(".xlsx")
        assert list(sheets["BOM"].columns) == COLUMNS
        assert sheets["BOM"]["Quantity"].sum() == 119
        assert "Total Cost" in sheets["Summary"]["Field"].tolist()

    def test_pdf(self, bom):
        report = export_bom(bom, "pdf")
        assert report.media_type == "application/pdf"
        assert report.content.startswith(b"%PDF")

    def test_html(self, bom):
        report = export_bom(bom, "HTML")
        assert report.media_type == "text/html"
        assert report.content.decode("utf-8").startswith("<!DOCTYPE html>")
