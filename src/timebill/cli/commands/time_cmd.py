"""Time tracking commands."""

import click

from timebill.cli.date_filters import period_options, resolve_cli_period
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.project_resolution import resolve_project_or_exit
from timebill.domain.entities import TimeEntry
from timebill.domain.errors import DomainError
from timebill.domain.line_items import duration_ms
from timebill.domain.time_entry import TimeEntryService
from timebill.utils.date_parser import from_millis, now_millis, parse_datetime, resolve_zone, to_millis
from timebill.utils.formatting import format_duration


def _zone_or_exit(ctx):
    try:
        return resolve_zone(ctx.obj.get("timezone"))
    except DomainError as e:
        handle_domain_error(ctx, e)


def _format_entry(entry: TimeEntry, zone, now: int) -> str:
    started = from_millis(entry.started_at, zone).strftime("%Y-%m-%d %H:%M")
    if entry.ended_at is None:
        elapsed = format_duration(max(0, now - entry.started_at))
        duration = f"{elapsed} (running)"
    else:
        duration = format_duration(duration_ms(entry.to_snapshot()))
    label = entry.issue_title or entry.issue_id or "General"
    billed = " [billed]" if entry.invoice_id is not None else ""
    return f"{entry.id:<6} {started:<17} {duration:<18} {label[:40]:<40}{billed}"


@click.group("time")
def time_group():
    """Track time."""
    pass


@time_group.command("start")
@click.option("--project", "project_ref", required=True, help="Project name or ID")
@click.option("--issue", "issue_id", help="Issue ID the time is for")
@click.option("--title", "issue_title", help="Issue title shown on invoices")
@click.option("--description", help="Note for this entry")
@click.pass_context
def start_timer(ctx, project_ref: str, issue_id: str | None, issue_title: str | None, description: str | None):
    """Start a timer. Any running timer is stopped first."""
    project = resolve_project_or_exit(ctx, project_ref)
    service = TimeEntryService(ctx.obj["db"])
    try:
        entry_id = service.start_timer(
            project_id=project.id,
            issue_id=issue_id,
            issue_title=issue_title,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Started timer for '{project.name}' (entry ID: {entry_id})")


@time_group.command("stop")
@click.pass_context
def stop_timer(ctx):
    """Stop the running timer."""
    service = TimeEntryService(ctx.obj["db"])
    try:
        entry = service.stop_timer()
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Stopped entry {entry.id} after {format_duration(duration_ms(entry.to_snapshot()))}"
    )


@time_group.command("status")
@click.pass_context
def timer_status(ctx):
    """Show the running timer, if any."""
    service = TimeEntryService(ctx.obj["db"])
    entry = service.get_active()
    if entry is None:
        click.echo("No timer is running.")
        return
    elapsed = format_duration(max(0, now_millis() - entry.started_at))
    label = entry.issue_title or entry.issue_id or "General"
    click.echo(f"Running: entry {entry.id} ({label}) for {elapsed}")


@time_group.command("add")
@click.option("--project", "project_ref", required=True, help="Project name or ID")
@click.option("--start", "start_str", required=True, help="Start time, e.g. '2024-01-15 09:00'")
@click.option("--end", "end_str", required=True, help="End time, e.g. '2024-01-15 11:30'")
@click.option("--issue", "issue_id", help="Issue ID the time is for")
@click.option("--title", "issue_title", help="Issue title shown on invoices")
@click.option("--description", help="Note for this entry")
@click.pass_context
def add_entry(
    ctx,
    project_ref: str,
    start_str: str,
    end_str: str,
    issue_id: str | None,
    issue_title: str | None,
    description: str | None,
):
    """Record a finished time entry.

    Times without an explicit offset are taken in the configured time zone.

    Examples:
        timebill time add --project Acme --start "2024-01-15 09:00" --end "2024-01-15 11:30"
        timebill time add --project Acme --start 2024-01-16T13:00 --end 2024-01-16T14:00 --issue ISS-7 --title "Fix login"
    """
    project = resolve_project_or_exit(ctx, project_ref)
    zone = _zone_or_exit(ctx)
    try:
        started_at = to_millis(parse_datetime(start_str, zone))
        ended_at = to_millis(parse_datetime(end_str, zone))
        entry_id = TimeEntryService(ctx.obj["db"]).add_entry(
            project_id=project.id,
            started_at=started_at,
            ended_at=ended_at,
            issue_id=issue_id,
            issue_title=issue_title,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added time entry {entry_id} to '{project.name}'")


@time_group.command("list")
@click.option("--project", "project_ref", help="Project name or ID")
@period_options
@click.pass_context
def list_entries(
    ctx,
    project_ref: str | None,
    this_week: bool,
    last_week: bool,
    this_month: bool,
    last_month: bool,
    start_date: str | None,
    end_date: str | None,
):
    """List time entries."""
    project_id = None
    if project_ref:
        project_id = resolve_project_or_exit(ctx, project_ref).id

    start, end = resolve_cli_period(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-week": this_week,
            "last-week": last_week,
            "this-month": this_month,
            "last-month": last_month,
        },
    )
    zone = _zone_or_exit(ctx)

    entries = TimeEntryService(ctx.obj["db"]).list_entries(
        project_id=project_id, start=start, end=end
    )
    if not entries:
        click.echo("No time entries found.")
        return

    now = now_millis()
    click.echo(f"\nFound {len(entries)} time entr{'y' if len(entries) == 1 else 'ies'}:")
    click.echo("-" * 90)
    click.echo(f"{'ID':<6} {'Started':<17} {'Duration':<18} {'Issue':<40}")
    click.echo("-" * 90)
    for entry in entries:
        click.echo(_format_entry(entry, zone, now))


@time_group.command("delete")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_entry(ctx, entry_id: int):
    """Delete an unbilled time entry."""
    try:
        TimeEntryService(ctx.obj["db"]).delete_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted time entry {entry_id}")


def register_commands(cli):
    """Register time commands with main CLI."""
    cli.add_command(time_group)
