"""CLI helpers shared by draft and invoice commands."""

import click

from timebill.domain.entities import InvoiceDocument
from timebill.domain.errors import DomainError
from timebill.domain.line_items import totals_from_line_items
from timebill.export import EXPORTERS
from timebill.cli.error_handling import handle_domain_error
from timebill.utils.date_parser import format_period_label, resolve_zone
from timebill.utils.formatting import format_currency_from_cents, format_hours

export_format_option = click.option(
    "--format",
    "export_format",
    type=click.Choice(sorted(EXPORTERS), case_sensitive=False),
    required=True,
    help="Export file format",
)

output_dir_option = click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory to write the file into",
)


def echo_line_items(doc: InvoiceDocument) -> None:
    """Print the line-item table and total of a document."""
    currency = doc.currency
    click.echo("-" * 80)
    click.echo(f"{'Task':<40} {'Rate':>12} {'Hours':>8} {'Total':>16}")
    click.echo("-" * 80)
    rate = format_currency_from_cents(doc.hourly_rate_cents, currency)
    for item in doc.line_items:
        click.echo(
            f"{item.label[:40]:<40} {rate:>12} {format_hours(item.hours):>8} "
            f"{format_currency_from_cents(item.amount_cents, currency):>16}"
        )
    totals = totals_from_line_items(doc.line_items)
    click.echo("-" * 80)
    click.echo(
        f"{'Total':<40} {'':>12} {format_hours(totals.total_hours):>8} "
        f"{format_currency_from_cents(totals.total_amount_cents, currency):>16}"
    )


def period_label(ctx: click.Context, period_start: int, period_end: int) -> str:
    try:
        zone = resolve_zone(ctx.obj.get("timezone"))
    except DomainError as e:
        handle_domain_error(ctx, e)
    return format_period_label(period_start, period_end, zone)


def export_document(
    ctx: click.Context, doc: InvoiceDocument, export_format: str, output_dir: str
) -> None:
    """Write a document with the chosen exporter and report the path."""
    exporter = EXPORTERS[export_format.lower()]
    try:
        path = exporter(doc, output_dir)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Exported {doc.invoice_number} to {path}")
