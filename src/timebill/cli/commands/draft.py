"""Invoice draft commands."""

import click

from timebill.cli.date_filters import period_options, resolve_cli_period
from timebill.cli.document_display import (
    echo_line_items,
    export_document,
    export_format_option,
    output_dir_option,
    period_label,
)
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.project_resolution import resolve_project_or_exit
from timebill.domain.errors import DomainError
from timebill.domain.invoice import InvoiceService
from timebill.utils.amount_parser import parse_hourly_rate_to_cents


def _rate_or_exit(ctx, rate: str) -> int:
    cents = parse_hourly_rate_to_cents(rate)
    if cents is None:
        click.echo("Error: Enter a valid hourly rate.", err=True)
        ctx.exit(1)
    return cents


@click.group("draft")
def draft_group():
    """Build and review invoice drafts."""
    pass


@draft_group.command("create")
@click.option("--project", "project_ref", required=True, help="Project name or ID")
@click.option("--rate", required=True, help="Hourly rate, e.g. 150 or $150.00")
@click.option("--client-name", help="Client name (defaults to the project name)")
@period_options
@click.pass_context
def create_draft(
    ctx,
    project_ref: str,
    rate: str,
    client_name: str | None,
    this_week: bool,
    last_week: bool,
    this_month: bool,
    last_month: bool,
    start_date: str | None,
    end_date: str | None,
):
    """Create a draft from unbilled time in a period (default: this week).

    Examples:
        timebill draft create --project Acme --rate 150 --last-month
        timebill draft create --project Acme --rate 120.50 --start-date 2024-01-01 --end-date 2024-01-31
    """
    project = resolve_project_or_exit(ctx, project_ref)
    hourly_rate_cents = _rate_or_exit(ctx, rate)
    period_start, period_end = resolve_cli_period(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-week": this_week,
            "last-week": last_week,
            "this-month": this_month,
            "last-month": last_month,
        },
        default_preset="this-week",
    )

    service = InvoiceService(ctx.obj["db"])
    try:
        draft = service.create_draft(
            project_id=project.id,
            hourly_rate_cents=hourly_rate_cents,
            period_start=period_start,
            period_end=period_end,
            client_name=client_name,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    doc = service.draft_document(draft, ctx.obj.get("timezone"))
    click.echo(
        f"Created {draft.display_number} for '{project.name}' "
        f"with {len(draft.time_entries)} time entries (ID: {draft.draft_id})"
    )
    echo_line_items(doc)


@draft_group.command("list")
@click.option("--project", "project_ref", help="Project name or ID")
@click.pass_context
def list_drafts(ctx, project_ref: str | None):
    """List invoice drafts."""
    project_id = None
    if project_ref:
        project_id = resolve_project_or_exit(ctx, project_ref).id

    drafts = InvoiceService(ctx.obj["db"]).list_drafts(project_id=project_id)
    if not drafts:
        click.echo("No drafts found.")
        return

    click.echo("\nDrafts:")
    click.echo("-" * 80)
    for draft in drafts:
        period = period_label(ctx, draft.period_start, draft.period_end)
        click.echo(
            f"{draft.display_number} | {draft.project_name[:24]:<24} | {period} "
            f"| {len(draft.time_entries)} entries"
        )


@draft_group.command("show")
@click.argument("draft_ref")
@click.pass_context
def show_draft(ctx, draft_ref: str):
    """Show a draft's details and line items.

    DRAFT_REF may be the draft ID, a unique prefix of it, or the DRAFT- number.
    """
    service = InvoiceService(ctx.obj["db"])
    try:
        draft = service.get_draft(draft_ref)
    except DomainError as e:
        handle_domain_error(ctx, e)

    doc = service.draft_document(draft, ctx.obj.get("timezone"))
    click.echo(f"\n{draft.display_number} ({draft.draft_id})")
    click.echo(f"Project:  {draft.project_name}")
    click.echo(f"Period:   {period_label(ctx, draft.period_start, draft.period_end)}")
    click.echo(f"Client:   {draft.client_name or draft.project_name}")
    if draft.client_location:
        click.echo(f"Location: {' / '.join(draft.client_location.splitlines())}")
    echo_line_items(doc)


@draft_group.command("update")
@click.argument("draft_ref")
@click.option("--client-name", help="Client name")
@click.option("--client-location", help="Client address block (newline separated)")
@click.option("--from-location", help="Your address block (newline separated)")
@click.option("--payment", "payment_instructions", help="Payment instructions text")
@click.option("--rate", help="New hourly rate")
@click.pass_context
def update_draft(
    ctx,
    draft_ref: str,
    client_name: str | None,
    client_location: str | None,
    from_location: str | None,
    payment_instructions: str | None,
    rate: str | None,
):
    """Edit client details, payment instructions or the rate of a draft.

    Pass an empty string to clear a field. Use "\\n" for line breaks.
    """
    hourly_rate_cents = _rate_or_exit(ctx, rate) if rate is not None else None

    def unescape(value: str | None) -> str | None:
        return value.replace("\\n", "\n") if value is not None else None

    service = InvoiceService(ctx.obj["db"])
    try:
        draft = service.update_draft(
            draft_ref,
            client_name=client_name,
            client_location=unescape(client_location),
            from_location=unescape(from_location),
            payment_instructions=unescape(payment_instructions),
            hourly_rate_cents=hourly_rate_cents,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated {draft.display_number}")


@draft_group.command("delete")
@click.argument("draft_ref")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_draft(ctx, draft_ref: str, yes: bool):
    """Delete a draft and release its time entries."""
    service = InvoiceService(ctx.obj["db"])
    try:
        draft = service.get_draft(draft_ref)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Delete {draft.display_number}?"):
        click.echo("Cancelled.")
        return

    service.delete_draft(draft.draft_id)
    click.echo(f"Deleted {draft.display_number}")


@draft_group.command("finalize")
@click.argument("draft_ref")
@click.option("--notes", help="Notes stored with the invoice")
@click.pass_context
def finalize_draft(ctx, draft_ref: str, notes: str | None):
    """Save a draft as a numbered invoice and mark its time as billed."""
    service = InvoiceService(ctx.obj["db"])
    try:
        invoice_id = service.finalize_draft(draft_ref, notes=notes)
    except DomainError as e:
        handle_domain_error(ctx, e)

    invoice = service.get_invoice(invoice_id)
    click.echo(f"Saved invoice {invoice.invoice_number} (ID: {invoice.id})")


@draft_group.command("export")
@click.argument("draft_ref")
@export_format_option
@output_dir_option
@click.pass_context
def export_draft(ctx, draft_ref: str, export_format: str, output_dir: str):
    """Export a draft as CSV or PDF for review."""
    service = InvoiceService(ctx.obj["db"])
    try:
        draft = service.get_draft(draft_ref)
    except DomainError as e:
        handle_domain_error(ctx, e)
    export_document(ctx, service.draft_document(draft, ctx.obj.get("timezone")), export_format, output_dir)


def register_commands(cli):
    """Register draft commands with main CLI."""
    cli.add_command(draft_group)
