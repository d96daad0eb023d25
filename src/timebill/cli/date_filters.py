"""CLI helpers for period resolution."""

import click

from timebill.utils.date_parser import (
    custom_period_range,
    get_period_range,
    parse_date,
    resolve_zone,
)


def period_options(func):
    """Add the shared period flags and explicit date options to a command."""
    options = [
        click.option("--this-week", is_flag=True, help="Current week (Monday start)"),
        click.option("--last-week", is_flag=True, help="Previous week"),
        click.option("--this-month", is_flag=True, help="Current month"),
        click.option("--last-month", is_flag=True, help="Previous month"),
        click.option("--start-date", help="First day (YYYY-MM-DD or relative like 'last monday')"),
        click.option("--end-date", help="Last day, inclusive (YYYY-MM-DD or relative like 'today')"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_cli_period(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_preset: str | None = None,
) -> tuple[int | None, int | None]:
    """Resolve a half-open millisecond range from period flags or explicit dates.

    Calendar boundaries are taken in the time zone configured on the root
    command. Returns (None, None) when nothing was selected and there is no
    default.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-week, --last-week, --this-month, --last-month) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-week, --this-month, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    try:
        zone = resolve_zone(ctx.obj.get("timezone"))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if period_count == 1:
        preset = next(name for name, is_set in period_flags.items() if is_set)
        return get_period_range(preset, zone)

    if start_date or end_date:
        if not (start_date and end_date):
            click.echo("Error: Select a start and end date.", err=True)
            ctx.exit(1)
        try:
            start = parse_date(start_date)
            end = parse_date(end_date)
            return custom_period_range(start, end, zone)
        except ValueError as e:
            click.echo(f"Error: Invalid date range: {e}", err=True)
            ctx.exit(1)

    if default_preset is not None:
        return get_period_range(default_preset, zone)
    return None, None
