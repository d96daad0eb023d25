"""Project domain service."""

from typing import Optional

from timebill.database.base import Database
from timebill.domain.entities import Project as ProjectEntity
from timebill.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    project_name_taken,
    project_not_found,
)


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_project(self, name: str) -> int:
        """Create a new project.

        Args:
            name: Project name

        Returns:
            Project ID

        Raises:
            ValidationError: If name is blank
            ConflictError: If a project with that name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Project name cannot be empty")
        if self.db.get_project_by_name(name) is not None:
            raise ConflictError(project_name_taken(name))
        return self.db.create_project(name=name)

    def get_project(self, project_id: int) -> Optional[ProjectEntity]:
        """Get project by ID."""
        return self.db.get_project(project_id)

    def get_project_by_name(self, name: str) -> Optional[ProjectEntity]:
        """Get project by name."""
        return self.db.get_project_by_name(name)

    def list_projects(self) -> list[ProjectEntity]:
        """List all projects."""
        return self.db.list_projects()

    def require_project(self, project_id: int) -> ProjectEntity:
        """Get a project or raise NotFoundError."""
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        return project

    def resolve_project(self, project: str | int) -> ProjectEntity:
        """Resolve a project name or ID.

        Args:
            project: Project name (str) or ID (int or string representation of int)

        Returns:
            Project entity

        Raises:
            NotFoundError: If no project matches
        """
        if isinstance(project, int):
            return self.require_project(project)

        if project.isdigit():
            found = self.db.get_project(int(project))
            if found is not None:
                return found

        found = self.db.get_project_by_name(project)
        if found is None:
            raise NotFoundError(project_not_found(project))
        return found
