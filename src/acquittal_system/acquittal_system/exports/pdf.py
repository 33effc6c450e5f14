from __future__ import annotations

import io
from typing import Mapping, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..database.mysql_base import to_number
from ..records.forms import FormSchema


def _money(value) -> str:
    return f"${to_number(value):,.2f}"


def _detail_line(index: int, schema: FormSchema, row: Mapping) -> str:
    facility = row.get("facility_name") or ""
    detail = row.get(schema.detail_field) or ""
    return f"{index}. {facility} - {detail} - {_money(row.get(schema.amount_field))}"


def build_report(title: str, tables: Sequence[tuple[FormSchema, Sequence[Mapping]]]) -> bytes:
    """Title and summary page, then one page per form listing every record."""

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=36, leftMargin=36, topMargin=36, bottomMargin=36, title=title)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("title", parent=styles["Title"], alignment=1, fontSize=20)
    hdr = ParagraphStyle("hdr", parent=styles["Heading2"], alignment=0, fontSize=14)
    line = ParagraphStyle("line", parent=styles["Normal"], fontSize=10, leading=13)
    normal = styles["Normal"]

    story = [Paragraph(escape(title), title_style), Spacer(1, 12), Paragraph("Summary", hdr)]

    summary_rows = [["Form", "Records", "Total"]]
    grand_total = 0.0
    for schema, rows in tables:
        total = sum(to_number(r.get(schema.amount_field)) for r in rows)
        grand_total += total
        summary_rows.append([schema.label, str(len(rows)), _money(total)])
    summary_rows.append(["Grand Total", "", _money(grand_total)])

    table = Table(summary_rows, colWidths=[260, 80, 140], hAlign="LEFT")
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.35, colors.grey),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f0f0f0")),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
            ]
        )
    )
    story.append(table)

    for schema, rows in tables:
        story.append(PageBreak())
        story.append(Paragraph(f"{escape(schema.label)} Details", hdr))
        story.append(Spacer(1, 8))
        if not rows:
            story.append(Paragraph("No records", normal))
            continue
        for i, row in enumerate(rows, start=1):
            story.append(Paragraph(escape(_detail_line(i, schema, row)), line))

    doc.build(story)
    return buffer.getvalue()
