"""Invoice export to CSV and PDF files."""

from timebill.export.csv_export import export_invoice_csv, render_invoice_csv
from timebill.export.files import sanitize_filename
from timebill.export.pdf_export import export_invoice_pdf, render_invoice_pdf

EXPORTERS = {
    "csv": export_invoice_csv,
    "pdf": export_invoice_pdf,
}

__all__ = [
    "EXPORTERS",
    "export_invoice_csv",
    "export_invoice_pdf",
    "render_invoice_csv",
    "render_invoice_pdf",
    "sanitize_filename",
]
