"""
Report rendering for generated BOMs.

Pure formatting of a BomResult; no business logic lives here. Supported
formats: csv, html, xlsx, pdf.
"""
from __future__ import annotations

import html
import io
import re
from typing import NamedTuple

import pandas as pd

from configurator_api.schemas.bom import BomResult

COLUMNS = [
    "Part Code",
    "Part Name",
    "Part Number",
    "Description",
    "Quantity",
    "Unit",
    "Unit Price",
    "Total Price",
    "Supplier",
    "Source Modules",
]

MEDIA_TYPES = {
    "csv": "text/csv",
    "html": "text/html",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}

_QUOTED_CSV_COLUMNS = {"Part Code", "Part Name", "Part Number", "Description", "Supplier", "Source Modules"}

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_HTML_STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; }
h1 { color: #333; }
table { border-collapse: collapse; width: 100%; margin-top: 20px; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
th { background-color: #4CAF50; color: white; }
tr:nth-child(even) { background-color: #f2f2f2; }
.summary { margin-top: 20px; padding: 15px; background-color: #f9f9f9; border-left: 4px solid #4CAF50; }
"""


class ReportFile(NamedTuple):
    """Rendered report payload."""
    content: bytes
    media_type: str
    filename: str


def _money(value) -> str:
    return f"{value:.2f}"


def _csv_field(column: str, value) -> str:
    # Text columns are always quoted; quantity, unit and money are written bare.
    text = str(value)
    if column in _QUOTED_CSV_COLUMNS or any(ch in text for ch in ',"\r\n'):
        return '"' + text.replace('"', '""') + '"'
    return text


def bom_dataframe(bom: BomResult, *, source_separator: str = "; ") -> pd.DataFrame:
    """Tabulate line items using the report column set and order."""
    rows = [
        [
            item.part_code,
            item.part_name,
            item.part_number or "",
            item.description or "",
            item.total_quantity,
            item.unit,
            _money(item.unit_price),
            _money(item.total_price),
            item.supplier or "",
            source_separator.join(item.source_modules),
        ]
        for item in bom.line_items
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def summary_lines(bom: BomResult) -> list[tuple[str, str]]:
    return [
        ("Unique Parts", str(bom.unique_part_count)),
        ("Total Items", str(bom.total_items)),
        ("Total Cost", f"${_money(bom.total_cost)}"),
    ]


# PUBLIC_INTERFACE
def render_csv(bom: BomResult) -> str:
    """
    Render the BOM as CSV: header block, line-item table (text fields quoted,
    quantity, unit and money bare) and a trailing summary block.
    """
    buffer = io.StringIO()
    buffer.write(f"Bill of Materials - {bom.configuration_name}\n")
    buffer.write(f"Generated: {bom.generated_at.strftime(_TIMESTAMP_FORMAT)}\n")
    buffer.write("\n")
    buffer.write(f"Selected Options: {', '.join(bom.selected_options)}\n")
    buffer.write(f"Activated Modules: {', '.join(bom.activated_modules)}\n")
    buffer.write("\n")

    buffer.write(",".join(COLUMNS) + "\n")
    df = bom_dataframe(bom)
    for row in df.itertuples(index=False, name=None):
        buffer.write(",".join(_csv_field(col, value) for col, value in zip(COLUMNS, row)) + "\n")

    buffer.write("\n")
    buffer.write("Summary:\n")
    for label, value in summary_lines(bom):
        buffer.write(f"{label}: {value}\n")
    return buffer.getvalue()


# PUBLIC_INTERFACE
def render_html(bom: BomResult) -> str:
    """Render the BOM as a standalone styled HTML page."""
    df = bom_dataframe(bom, source_separator=", ")
    for col in ("Unit Price", "Total Price"):
        df[col] = "$" + df[col]
    table = df.to_html(index=False, escape=True, border=0, classes="bom")

    name = html.escape(bom.configuration_name)
    summary = "\n".join(
        f"<p><strong>{label}:</strong> {html.escape(value)}</p>" for label, value in summary_lines(bom)
    )
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        f"<title>BOM - {name}</title>\n"
        f"<style>{_HTML_STYLE}</style>\n"
        "</head>\n<body>\n"
        f"<h1>Bill of Materials - {name}</h1>\n"
        f"<p><strong>Generated:</strong> {bom.generated_at.strftime(_TIMESTAMP_FORMAT)}</p>\n"
        f"<p><strong>Selected Options:</strong> {html.escape(', '.join(bom.selected_options))}</p>\n"
        f"<p><strong>Activated Modules:</strong> {html.escape(', '.join(bom.activated_modules))}</p>\n"
        f"{table}\n"
        "<div class='summary'>\n<h3>Summary</h3>\n"
        f"{summary}\n"
        "</div>\n</body>\n</html>\n"
    )


# PUBLIC_INTERFACE
def render_xlsx(bom: BomResult) -> bytes:
    """Render the BOM as an Excel workbook with line items and summary sheets."""
    df = bom_dataframe(bom)
    for col in ("Unit Price", "Total Price"):
        df[col] = df[col].astype(float)
    header = pd.DataFrame(
        [
            ("Configuration", bom.configuration_name),
            ("Generated", bom.generated_at.strftime(_TIMESTAMP_FORMAT)),
            ("Selected Options", ", ".join(bom.selected_options)),
            ("Activated Modules", ", ".join(bom.activated_modules)),
            *summary_lines(bom),
        ],
        columns=["Field", "Value"],
    )

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="BOM")
        header.to_excel(writer, index=False, sheet_name="Summary")
    return buffer.getvalue()


# PUBLIC_INTERFACE
def render_pdf(bom: BomResult) -> bytes:
    """Render the BOM as a landscape PDF table using reportlab."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import landscape, letter
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=landscape(letter), leftMargin=18, rightMargin=18, topMargin=18, bottomMargin=18
    )
    styles = getSampleStyleSheet()
    elements: list = [
        Paragraph(html.escape(f"Bill of Materials - {bom.configuration_name}"), styles["Title"]),
        Paragraph(f"Generated: {bom.generated_at.strftime(_TIMESTAMP_FORMAT)}", styles["Normal"]),
        Paragraph(html.escape(f"Selected Options: {', '.join(bom.selected_options)}"), styles["Normal"]),
        Paragraph(html.escape(f"Activated Modules: {', '.join(bom.activated_modules)}"), styles["Normal"]),
        Spacer(1, 8),
    ]

    df = bom_dataframe(bom, source_separator=", ")
    data = [list(df.columns)] + df.astype(str).values.tolist()
    table = Table(data, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 7),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ]
        )
    )
    elements.append(table)
    elements.append(Spacer(1, 8))
    for label, value in summary_lines(bom):
        elements.append(Paragraph(html.escape(f"{label}: {value}"), styles["Normal"]))

    doc.build(elements)
    return buffer.getvalue()


def report_filename(bom: BomResult, extension: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9_-]+", "_", bom.configuration_name).strip("_") or "configuration"
    return f"bom_{slug}.{extension}"


# PUBLIC_INTERFACE
def export_bom(bom: BomResult, export_format: str = "csv") -> ReportFile:
    """
    Render a BOM in the requested format.

    Unknown formats fall back to CSV.
    """
    export_format = (export_format or "csv").lower()
    if export_format in ("xlsx", "excel", "xls"):
        return ReportFile(render_xlsx(bom), MEDIA_TYPES["xlsx"], report_filename(bom, "xlsx"))
    if export_format in ("html", "htm"):
        return ReportFile(render_html(bom).encode("utf-8"), MEDIA_TYPES["html"], report_filename(bom, "html"))
    if export_format == "pdf":
        return ReportFile(render_pdf(bom), MEDIA_TYPES["pdf"], report_filename(bom, "pdf"))
    return ReportFile(render_csv(bom).encode("utf-8"), MEDIA_TYPES["csv"], report_filename(bom, "csv"))
