# pdf_report.py
from datetime import datetime
from io import BytesIO
from typing import Iterable
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain.entities.sale_entity import Sale

REPORT_TITLE = "BizFlow - Sales Report"
HEADERS = ["Date", "Client", "Description", "Amount", "Status"]
COLUMN_WIDTHS = [70, 130, 170, 80, 70]


def _format_money(value: float) -> str:
    return f"${value:,.2f}"


def _format_period(date_from: datetime | None, date_to: datetime | None) -> str | None:
    if date_from is None and date_to is None:
        return None
    start = date_from.strftime("%Y-%m-%d") if date_from else "Start"
    end = date_to.strftime("%Y-%m-%d") if date_to else "Now"
    return f"Period: {start} - {end}"


def build_sales_report(
    sales: Iterable[Sale],
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> bytes:
    """Render the sales listing as an A4 PDF and return its bytes."""
    sales = list(sales)
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=A4, leftMargin=36, rightMargin=36, topMargin=50, bottomMargin=36,
        title=REPORT_TITLE,
    )
    styles = getSampleStyleSheet()
    cell_style = styles["BodyText"]
    cell_style.fontSize = 8
    cell_style.leading = 10

    story = [Paragraph(f"<b>{REPORT_TITLE}</b>", styles["Title"])]
    period = _format_period(date_from, date_to)
    if period:
        story.append(Paragraph(period, styles["Italic"]))
    story.append(Spacer(1, 12))

    if not sales:
        story.append(Paragraph("No sales found for the selected period.", styles["Normal"]))
        doc.build(story)
        return buffer.getvalue()

    total_amount = sum(float(sale.amount) for sale in sales)
    story.append(Paragraph(f"Total sales: {len(sales)}", styles["Normal"]))
    story.append(Paragraph(f"Total amount: {_format_money(total_amount)}", styles["Normal"]))
    story.append(Spacer(1, 12))

    rows = [HEADERS]
    for sale in sales:
        status = sale.status.value if hasattr(sale.status, "value") else sale.status
        rows.append([
            sale.date.strftime("%Y-%m-%d") if sale.date else "-",
            # Paragraph quebra linhas longas dentro da célula
            Paragraph(escape(sale.client.name) if sale.client else "N/A", cell_style),
            Paragraph(escape(sale.description or "-"), cell_style),
            _format_money(float(sale.amount)),
            status,
        ])

    table = Table(rows, colWidths=COLUMN_WIDTHS, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2563EB")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ALIGN", (3, 1), (3, -1), "RIGHT"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    story.append(table)

    doc.build(story)
    return buffer.getvalue()
