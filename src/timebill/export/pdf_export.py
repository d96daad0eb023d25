"""Single-page PDF export of invoices."""

import logging
from pathlib import Path

from timebill.domain.entities import InvoiceDocument
from timebill.domain.line_items import totals_from_line_items
from timebill.domain.payment import parse_payment_instructions, split_location_lines
from timebill.export.files import write_export
from timebill.export.pdf_document import ContentStream, PdfDocument
from timebill.utils.date_parser import format_period_label, resolve_zone
from timebill.utils.formatting import format_currency_from_cents, format_hours, truncate

logger = logging.getLogger(__name__)

# A4 in points
PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN = 24

HEADER_HEIGHT = 82
MAX_TABLE_ROWS = 8
ROW_HEIGHT = 24
PAYMENT_ROW_HEIGHT = 14

# Table column offsets from the left content edge
RATE_COLUMN = 270
HOURS_COLUMN = 360
AMOUNT_COLUMN = 445
FOOTER_RIGHT_COLUMN = 330

BLACK = (0, 0, 0)
DARK_GRAY = (0.25, 0.25, 0.25)
MID_GRAY = (0.60, 0.60, 0.60)
RULE_GRAY = (0.90, 0.90, 0.90)
FRAME = (0.72, 0.70, 0.68)
HEADER_BAND = (0.95, 0.94, 0.93)
HEADER_STRIPE = (0.90, 0.89, 0.88)


def _draw_header(content: ContentStream, doc: InvoiceDocument, left: int) -> int:
    """Draw frame and header band; return the y of the header's bottom edge."""
    inner_width = PAGE_WIDTH - MARGIN * 2
    inner_height = PAGE_HEIGHT - MARGIN * 2
    header_top = PAGE_HEIGHT - MARGIN
    header_bottom = header_top - HEADER_HEIGHT

    content.stroke_style(FRAME, 1)
    content.stroke_rect(MARGIN, MARGIN, inner_width, inner_height)

    content.fill_color(HEADER_BAND)
    content.fill_rect(MARGIN, header_bottom, inner_width, HEADER_HEIGHT)
    content.fill_color(HEADER_STRIPE)
    for offset, width in ((120, 20), (88, 12), (62, 8)):
        content.fill_rect(PAGE_WIDTH - MARGIN - offset, header_bottom, width, HEADER_HEIGHT)

    period_label = format_period_label(
        doc.period_start, doc.period_end, resolve_zone(doc.timezone)
    )
    content.fill_color(BLACK)
    content.text("INVOICE", left, header_top - 40, 26)
    content.text("#", left, header_top - 64, 10)
    content.text(doc.invoice_number, left + 12, header_top - 64, 10)
    content.text("TERM:", left + 80, header_top - 64, 10)
    content.text(truncate(period_label, 34), left + 118, header_top - 64, 10)
    return header_bottom


def _draw_billed_to(content: ContentStream, doc: InvoiceDocument, left: int, top: int) -> None:
    content.text("BILLED TO:", left, top, 11)
    content.fill_color(DARK_GRAY)
    content.text("Name:", left, top - 18, 9)
    content.text("Address:", left, top - 32, 9)
    content.text("Email:", left, top - 60, 9)

    client_name = (doc.client_name or "").strip() or doc.project_name
    location_lines = split_location_lines(doc.client_location, 6)
    address_lines = location_lines[:2] + [""] * (2 - len(location_lines[:2]))
    email_line = " ".join(location_lines[2:])

    content.fill_color(BLACK)
    value_x = left + 54
    content.text(truncate(client_name, 42), value_x, top - 18, 9)
    content.text(truncate(address_lines[0], 42), value_x, top - 32, 9)
    content.text(truncate(address_lines[1], 42), value_x, top - 44, 9)
    content.text(truncate(email_line, 42), value_x, top - 60, 9)


def _draw_line_items(
    content: ContentStream, doc: InvoiceDocument, left: int, right: int, top: int
) -> int:
    """Draw the item table; return the y of the first row rule."""
    content.stroke_style(FRAME, 1)
    content.line(left, top + 12, right, top + 12)
    content.line(left, top - 6, right, top - 6)

    content.fill_color(DARK_GRAY)
    content.text("TASK", left, top, 9)
    content.text("RATE", left + RATE_COLUMN, top, 9)
    content.text("HOURS", left + HOURS_COLUMN, top, 9)
    content.text("TOTAL", left + AMOUNT_COLUMN, top, 9)

    row_start_y = top - 30
    content.stroke_style(RULE_GRAY, 0.6)
    for i in range(MAX_TABLE_ROWS + 1):
        y = row_start_y - i * ROW_HEIGHT
        content.line(left, y, right, y)

    visible = doc.line_items[:MAX_TABLE_ROWS]
    if len(doc.line_items) > MAX_TABLE_ROWS:
        logger.warning(
            "Invoice %s has %d line items; only the first %d fit on the PDF page",
            doc.invoice_number,
            len(doc.line_items),
            MAX_TABLE_ROWS,
        )

    rate = format_currency_from_cents(doc.hourly_rate_cents, doc.currency)
    content.fill_color(BLACK)
    for i, item in enumerate(visible):
        y = row_start_y - i * ROW_HEIGHT + 7
        content.text(truncate(item.label, 40), left, y, 9)
        content.text(rate, left + RATE_COLUMN, y, 9)
        content.text(format_hours(item.hours), left + HOURS_COLUMN, y, 9)
        content.text(
            format_currency_from_cents(item.amount_cents, doc.currency),
            left + AMOUNT_COLUMN,
            y,
            9,
        )
    return row_start_y


def _draw_total(
    content: ContentStream, doc: InvoiceDocument, left: int, right: int, y: int
) -> None:
    totals = totals_from_line_items(doc.line_items)
    content.stroke_style(FRAME, 1)
    content.line(left, y + 18, right, y + 18)
    content.fill_color(DARK_GRAY)
    content.text("TOTAL DUE:", left, y, 9)
    content.fill_color(BLACK)
    content.text(
        format_currency_from_cents(totals.total_amount_cents, doc.currency),
        left + AMOUNT_COLUMN,
        y,
        10,
    )


def _draw_payment(content: ContentStream, doc: InvoiceDocument, left: int, y: int) -> None:
    payment = parse_payment_instructions(doc.payment_instructions)
    content.fill_color(DARK_GRAY)
    content.text("PAYMENT INFORMATION:", left, y, 9)

    rows = (
        ("Bank:", payment.bank),
        ("Account Name:", payment.account_name),
        ("Routing Number:", payment.routing_number),
        ("Account Number:", payment.account_number),
    )
    start_y = y - 18
    for i, (label, _) in enumerate(rows):
        content.text(label, left, start_y - PAYMENT_ROW_HEIGHT * i, 8)

    content.fill_color(BLACK)
    for i, (_, value) in enumerate(rows):
        content.text(truncate(value, 44), left + 92, start_y - PAYMENT_ROW_HEIGHT * i, 8)

    extra_y = start_y - PAYMENT_ROW_HEIGHT * len(rows) - 4
    for i, line in enumerate(payment.extra_lines[:2]):
        content.text(truncate(line, 80), left, extra_y - i * 12, 8)


def _draw_footer(content: ContentStream, doc: InvoiceDocument, left: int) -> None:
    footer_y = MARGIN + 26
    content.fill_color(MID_GRAY)
    content.line(MARGIN + 14, footer_y + 32, PAGE_WIDTH - MARGIN - 14, footer_y + 32)

    content.fill_color(DARK_GRAY)
    from_lines = split_location_lines(doc.from_location, 4)
    for column_x, lines in ((left, from_lines[:2]), (left + FOOTER_RIGHT_COLUMN, from_lines[2:4])):
        for i, line in enumerate(lines):
            content.text(truncate(line, 42), column_x, footer_y + 10 - i * 12, 8)


def render_invoice_pdf(doc: InvoiceDocument) -> bytes:
    """Render an invoice as a one-page A4 PDF.

    At most eight line items are listed; the total due always covers all of
    them.
    """
    left = MARGIN + 22
    right = PAGE_WIDTH - MARGIN - 22

    content = ContentStream(font_name="F1")
    header_bottom = _draw_header(content, doc, left)

    billed_top = header_bottom - 34
    _draw_billed_to(content, doc, left, billed_top)

    row_start_y = _draw_line_items(content, doc, left, right, billed_top - 92)

    totals_y = row_start_y - MAX_TABLE_ROWS * ROW_HEIGHT - 34
    _draw_total(content, doc, left, right, totals_y)
    _draw_payment(content, doc, left, totals_y - 36)
    _draw_footer(content, doc, left)

    pdf = PdfDocument()
    catalog = pdf.reserve()
    pages = pdf.reserve()
    page = pdf.reserve()
    font = pdf.add_object("<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")
    contents = pdf.add_stream(content.to_bytes())

    pdf.set_object(catalog, f"<< /Type /Catalog /Pages {pages} 0 R >>")
    pdf.set_object(pages, f"<< /Type /Pages /Kids [{page} 0 R] /Count 1 >>")
    pdf.set_object(
        page,
        f"<< /Type /Page /Parent {pages} 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
        f"/Resources << /Font << /{content.font_name} {font} 0 R >> >> /Contents {contents} 0 R >>",
    )
    return pdf.to_bytes(root=catalog)


def export_invoice_pdf(doc: InvoiceDocument, output_dir: str | Path) -> Path:
    """Write ``<invoice_number>.pdf`` into ``output_dir``.

    Raises:
        ExportError: If the file cannot be written
    """
    data = render_invoice_pdf(doc)
    return write_export(output_dir, f"{doc.invoice_number}.pdf", data, kind="PDF")
