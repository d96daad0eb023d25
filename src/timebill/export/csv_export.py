"""CSV export of invoices."""

import csv
import io
from pathlib import Path

from timebill.domain.entities import InvoiceDocument
from timebill.export.files import write_export
from timebill.utils.date_parser import (
    format_iso_date,
    from_millis,
    inclusive_period_end,
    resolve_zone,
)
from timebill.utils.formatting import format_currency_from_cents, format_hours

CSV_HEADER = [
    "invoiceNumber",
    "projectName",
    "periodStart",
    "periodEnd",
    "label",
    "hours",
    "hourlyRate",
    "amount",
]


def _csv_line(cells: list[str]) -> str:
    """Encode one row without its terminator.

    The writer's default ``\\r\\n`` terminator makes it quote cells that
    contain either ``\\r`` or ``\\n``.
    """
    buffer = io.StringIO()
    csv.writer(buffer).writerow(cells)
    return buffer.getvalue()[: -len("\r\n")]


def render_invoice_csv(doc: InvoiceDocument) -> str:
    """Render an invoice as CSV text, one row per line item.

    Dates are calendar dates in the document's time zone, with the period
    end shown as the last day covered. Hours and money are display strings.
    Rows are joined with ``\\n`` and the text has no trailing newline.
    """
    zone = resolve_zone(doc.timezone)
    period_start = format_iso_date(from_millis(doc.period_start, zone).date())
    period_end = format_iso_date(inclusive_period_end(doc.period_end, zone))
    hourly_rate = format_currency_from_cents(doc.hourly_rate_cents, doc.currency)

    lines = [_csv_line(CSV_HEADER)]
    for item in doc.line_items:
        lines.append(
            _csv_line(
                [
                    doc.invoice_number,
                    doc.project_name,
                    period_start,
                    period_end,
                    item.label,
                    format_hours(item.hours),
                    hourly_rate,
                    format_currency_from_cents(item.amount_cents, doc.currency),
                ]
            )
        )
    return "\n".join(lines)


def export_invoice_csv(doc: InvoiceDocument, output_dir: str | Path) -> Path:
    """Write ``<invoice_number>.csv`` (UTF-8) into ``output_dir``.

    Raises:
        ExportError: If the file cannot be written
    """
    data = render_invoice_csv(doc).encode("utf-8")
    return write_export(output_dir, f"{doc.invoice_number}.csv", data, kind="CSV")
