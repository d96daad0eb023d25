"""Tests for project service and commands."""

import pytest

from timebill.cli.main import cli
from timebill.domain.errors import ConflictError, NotFoundError, ValidationError


class TestProjectService:
    def test_create_and_get(self, project_service):
        project_id = project_service.create_project("  Acme  ")
        project = project_service.get_project(project_id)
        assert project.name == "Acme"
        assert project.created_at > 0

    def test_blank_name(self, project_service):
        with pytest.raises(ValidationError, match="cannot be empty"):
            project_service.create_project("   ")

    def test_duplicate_name(self, project_service, sample_project):
        with pytest.raises(ConflictError, match="already exists"):
            project_service.create_project(sample_project.name)

    def test_list_sorted_by_name(self, project_service):
        project_service.create_project("Zeta")
        project_service.create_project("Alpha")
        assert [p.name for p in project_service.list_projects()] == ["Alpha", "Zeta"]

    def test_resolve_by_id_name_and_digit_string(self, project_service, sample_project):
        assert project_service.resolve_project(sample_project.id) == sample_project
        assert project_service.resolve_project(str(sample_project.id)) == sample_project
        assert project_service.resolve_project("Acme Website") == sample_project

    def test_resolve_missing(self, project_service):
        with pytest.raises(NotFoundError, match="Project 'Nope' not found"):
            project_service.resolve_project("Nope")
        with pytest.raises(NotFoundError, match="Project 42 not found"):
            project_service.resolve_project(42)


def test_project_create(cli_runner, temp_db):
    """Test creating a project from the CLI."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "project", "create", "Acme"]
    )

    assert result.exit_code == 0
    assert "Created project 'Acme'" in result.output
    assert "ID:" in result.output


def test_project_create_duplicate(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "project", "create", sample_project.name]
    )

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_project_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "project", "list"])

    assert result.exit_code == 0
    assert "No projects found" in result.output


def test_project_list_with_data(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "project", "list"])

    assert result.exit_code == 0
    assert "Acme Website" in result.output
