"""Invoice commands."""

import click

from timebill.cli.document_display import (
    echo_line_items,
    export_document,
    export_format_option,
    output_dir_option,
    period_label,
)
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.project_resolution import resolve_project_or_exit
from timebill.domain.entities import Invoice, InvoiceStatus
from timebill.domain.errors import DomainError
from timebill.domain.invoice import InvoiceService
from timebill.utils.date_parser import from_millis, resolve_zone

STATUS_CHOICES = [status.value for status in InvoiceStatus]


def _resolve_invoice_or_exit(ctx, invoice_ref: str) -> Invoice:
    try:
        return InvoiceService(ctx.obj["db"]).resolve_invoice(invoice_ref)
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.group("invoice")
def invoice_group():
    """Manage saved invoices."""
    pass


@invoice_group.command("list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Only invoices with this status")
@click.option("--project", "project_ref", help="Project name or ID")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum invoices to show")
@click.pass_context
def list_invoices(ctx, status: str | None, project_ref: str | None, limit: int):
    """List invoices, newest first."""
    project_id = None
    if project_ref:
        project_id = resolve_project_or_exit(ctx, project_ref).id

    service = InvoiceService(ctx.obj["db"])
    invoices = service.list_invoices(
        status=InvoiceStatus(status) if status else None,
        project_id=project_id,
        limit=limit,
    )
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo("\nInvoices:")
    click.echo("-" * 80)
    for invoice in invoices:
        period = period_label(ctx, invoice.period_start, invoice.period_end)
        click.echo(
            f"ID: {invoice.id:3d} | {invoice.invoice_number} | "
            f"{invoice.status.value:<5} | {period}"
        )


@invoice_group.command("show")
@click.argument("invoice_ref", metavar="NUMBER_OR_ID")
@click.pass_context
def show_invoice(ctx, invoice_ref: str):
    """Show an invoice's details and line items."""
    invoice = _resolve_invoice_or_exit(ctx, invoice_ref)
    service = InvoiceService(ctx.obj["db"])
    try:
        zone = resolve_zone(ctx.obj.get("timezone"))
        doc = service.invoice_document(invoice, ctx.obj.get("timezone"))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nInvoice {invoice.invoice_number} (ID: {invoice.id})")
    click.echo(f"Project: {doc.project_name}")
    click.echo(f"Period:  {period_label(ctx, invoice.period_start, invoice.period_end)}")
    click.echo(f"Status:  {invoice.status.value}")
    for label, timestamp in (
        ("Sent", invoice.sent_at),
        ("Paid", invoice.paid_at),
        ("Voided", invoice.voided_at),
    ):
        if timestamp is not None:
            click.echo(f"{label + ':':<8} {from_millis(timestamp, zone).strftime('%Y-%m-%d %H:%M')}")
    if invoice.client_name:
        click.echo(f"Client:  {invoice.client_name}")
    if invoice.notes:
        click.echo(f"Notes:   {invoice.notes}")
    echo_line_items(doc)


@invoice_group.command("status")
@click.argument("invoice_ref", metavar="NUMBER_OR_ID")
@click.argument("status", type=click.Choice(STATUS_CHOICES))
@click.pass_context
def set_status(ctx, invoice_ref: str, status: str):
    """Change an invoice's status (saved, sent, paid, void)."""
    invoice = _resolve_invoice_or_exit(ctx, invoice_ref)
    try:
        updated = InvoiceService(ctx.obj["db"]).update_invoice(
            invoice.id, status=InvoiceStatus(status)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Invoice {updated.invoice_number} is now {updated.status.value}")


@invoice_group.command("export")
@click.argument("invoice_ref", metavar="NUMBER_OR_ID")
@export_format_option
@output_dir_option
@click.pass_context
def export_invoice(ctx, invoice_ref: str, export_format: str, output_dir: str):
    """Export an invoice as CSV or PDF."""
    invoice = _resolve_invoice_or_exit(ctx, invoice_ref)
    try:
        doc = InvoiceService(ctx.obj["db"]).invoice_document(invoice, ctx.obj.get("timezone"))
    except DomainError as e:
        handle_domain_error(ctx, e)
    export_document(ctx, doc, export_format, output_dir)


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group)
