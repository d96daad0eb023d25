"""Main CLI entry point."""

import logging

import click

from timebill.database.factories import create_sqlite_database

# Import and register all commands at module level
from timebill.cli.commands import draft, invoice, project, time_cmd

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TIMEBILL_DB_PATH environment variable)",
    envvar="TIMEBILL_DB_PATH",
)
@click.option(
    "--timezone",
    help="Time zone for dates and periods, e.g. 'Europe/Berlin' (default: local zone)",
    envvar="TIMEBILL_TIMEZONE",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, timezone: str | None, verbose: bool):
    """Timebill - Time tracking and client invoicing.

    Track time against projects, build invoice drafts from unbilled time,
    and export invoices as CSV or PDF.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        format=LOG_FORMAT,
        level=logging.DEBUG if verbose else logging.WARNING,
    )
    ctx.obj["timezone"] = timezone or None

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
project.register_commands(cli)
time_cmd.register_commands(cli)
draft.register_commands(cli)
invoice.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
