"""Project management commands."""

import click

from timebill.domain.errors import DomainError
from timebill.domain.project import ProjectService
from timebill.cli.error_handling import handle_domain_error


@click.group("project")
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.pass_context
def create_project(ctx, name: str):
    """Create a new project.

    Examples:
        timebill project create "Acme Website"
    """
    service = ProjectService(ctx.obj["db"])
    try:
        project_id = service.create_project(name=name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created project '{name.strip()}' (ID: {project_id})")


@project_group.command("list")
@click.pass_context
def list_projects(ctx):
    """List all projects."""
    service = ProjectService(ctx.obj["db"])

    projects = service.list_projects()
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 60)
    for p in projects:
        click.echo(f"ID: {p.id:3d} | {p.name}")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group)
