"""Time entry domain service."""

import logging
from typing import Optional

from timebill.database.base import Database
from timebill.domain.entities import TimeEntry as TimeEntryEntity
from timebill.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    project_not_found,
    time_entry_not_found,
)
from timebill.utils.date_parser import now_millis

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Service for tracking time against projects."""

    def __init__(self, db: Database):
        """Initialize time entry service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_project(self, project_id: int) -> None:
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))

    def start_timer(
        self,
        project_id: int,
        issue_id: Optional[str] = None,
        issue_title: Optional[str] = None,
        description: Optional[str] = None,
        now: Optional[int] = None,
    ) -> int:
        """Start a timer, stopping any timer that is already running.

        Args:
            project_id: Project to track time against
            issue_id: Optional issue the time is for
            issue_title: Optional display title of the issue
            description: Optional note
            now: Start time in epoch ms (defaults to the current time)

        Returns:
            ID of the new running entry

        Raises:
            NotFoundError: If the project doesn't exist
        """
        self._require_project(project_id)
        now = now_millis() if now is None else now

        for active in self.db.list_running_time_entries():
            logger.info("Stopping running time entry %s", active.id)
            self.db.update_time_entry_end(active.id, max(now, active.started_at))

        entry_id = self.db.create_time_entry(
            project_id=project_id,
            started_at=now,
            issue_id=issue_id or None,
            issue_title=issue_title or None,
            description=description or None,
        )
        logger.debug("Started time entry %s for project %s", entry_id, project_id)
        return entry_id

    def stop_timer(self, now: Optional[int] = None) -> TimeEntryEntity:
        """Stop the running timer.

        Returns:
            The stopped entry

        Raises:
            NotFoundError: If no timer is running
        """
        running = self.db.list_running_time_entries()
        if not running:
            raise NotFoundError("No timer is running")

        now = now_millis() if now is None else now
        for active in running:
            self.db.update_time_entry_end(active.id, max(now, active.started_at))
        return self.db.get_time_entry(running[-1].id)

    def get_active(self) -> Optional[TimeEntryEntity]:
        """Get the running time entry, if any."""
        running = self.db.list_running_time_entries()
        return running[-1] if running else None

    def add_entry(
        self,
        project_id: int,
        started_at: int,
        ended_at: int,
        issue_id: Optional[str] = None,
        issue_title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Record a finished interval manually.

        Raises:
            NotFoundError: If the project doesn't exist
            ValidationError: If the interval ends before it starts
        """
        self._require_project(project_id)
        if ended_at <= started_at:
            raise ValidationError("Time entry must end after it starts")
        return self.db.create_time_entry(
            project_id=project_id,
            started_at=started_at,
            ended_at=ended_at,
            issue_id=issue_id or None,
            issue_title=issue_title or None,
            description=description or None,
        )

    def get_entry(self, entry_id: int) -> Optional[TimeEntryEntity]:
        """Get time entry by ID."""
        return self.db.get_time_entry(entry_id)

    def list_entries(
        self,
        project_id: Optional[int] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> list[TimeEntryEntity]:
        """List entries started in ``[start, end)``, oldest first."""
        return self.db.list_time_entries(project_id=project_id, start=start, end=end)

    def list_unbilled_in_range(
        self, project_id: int, start: int, end: int
    ) -> list[TimeEntryEntity]:
        """List finished, not yet invoiced entries started in ``[start, end)``."""
        return self.db.list_time_entries(
            project_id=project_id,
            start=start,
            end=end,
            ended_only=True,
            unbilled_only=True,
        )

    def delete_entry(self, entry_id: int) -> None:
        """Delete a time entry.

        Raises:
            NotFoundError: If the entry doesn't exist
            ConflictError: If the entry is already on an invoice
        """
        entry = self.db.get_time_entry(entry_id)
        if entry is None:
            raise NotFoundError(time_entry_not_found(entry_id))
        if entry.invoice_id is not None:
            raise ConflictError(f"Time entry {entry_id} is already billed")
        self.db.delete_time_entry(entry_id)
