"""CLI helpers for project resolution and error handling."""

from __future__ import annotations

import click

from timebill.domain.entities import Project
from timebill.domain.errors import DomainError
from timebill.domain.project import ProjectService
from timebill.cli.error_handling import handle_domain_error


def resolve_project_or_exit(ctx: click.Context, project: str | int) -> Project:
    """Resolve project name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return ProjectService(ctx.obj["db"]).resolve_project(project)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
