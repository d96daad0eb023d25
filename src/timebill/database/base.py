"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from timebill.domain.entities import (
    Invoice,
    InvoiceDraft,
    InvoiceStatus,
    Project,
    TimeEntry,
)


class Database(ABC):
    """Abstract database interface for timebill."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Project operations
    @abstractmethod
    def create_project(self, name: str) -> int:
        """Create a new project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def get_project_by_name(self, name: str) -> Optional[Project]:
        """Get project by name."""
        pass

    @abstractmethod
    def list_projects(self) -> list[Project]:
        """List all projects."""
        pass

    # Time entry operations
    @abstractmethod
    def create_time_entry(
        self,
        project_id: int,
        started_at: int,
        ended_at: Optional[int] = None,
        issue_id: Optional[str] = None,
        issue_title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a time entry. Returns time entry ID."""
        pass

    @abstractmethod
    def get_time_entry(self, entry_id: int) -> Optional[TimeEntry]:
        """Get time entry by ID."""
        pass

    @abstractmethod
    def update_time_entry_end(self, entry_id: int, ended_at: int) -> None:
        """Close a running time entry."""
        pass

    @abstractmethod
    def delete_time_entry(self, entry_id: int) -> None:
        """Delete a time entry."""
        pass

    @abstractmethod
    def list_running_time_entries(self) -> list[TimeEntry]:
        """List time entries that have not been stopped."""
        pass

    @abstractmethod
    def list_time_entries(
        self,
        project_id: Optional[int] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        invoice_id: Optional[int] = None,
        ended_only: bool = False,
        unbilled_only: bool = False,
    ) -> list[TimeEntry]:
        """List time entries ordered by start time.

        Args:
            project_id: Optional project filter
            start: Optional inclusive lower bound on started_at
            end: Optional exclusive upper bound on started_at
            invoice_id: Optional filter to entries billed on this invoice
            ended_only: If True, skip running entries
            unbilled_only: If True, skip entries already on an invoice
        """
        pass

    # Invoice draft operations
    @abstractmethod
    def create_invoice_draft(self, draft: InvoiceDraft) -> None:
        """Store a new invoice draft."""
        pass

    @abstractmethod
    def get_invoice_draft(self, draft_id: str) -> Optional[InvoiceDraft]:
        """Get invoice draft by ID."""
        pass

    @abstractmethod
    def find_invoice_drafts_by_prefix(self, prefix: str) -> list[InvoiceDraft]:
        """Find drafts whose ID starts with ``prefix``."""
        pass

    @abstractmethod
    def list_invoice_drafts(self, project_id: Optional[int] = None) -> list[InvoiceDraft]:
        """List invoice drafts, newest first."""
        pass

    @abstractmethod
    def update_invoice_draft(self, draft_id: str, **fields: Any) -> None:
        """Update editable draft fields."""
        pass

    @abstractmethod
    def delete_invoice_draft(self, draft_id: str) -> None:
        """Delete an invoice draft."""
        pass

    # Invoice operations
    @abstractmethod
    def finalize_invoice_draft(
        self, draft_id: str, time_entry_ids: Sequence[int], **invoice_fields: Any
    ) -> int:
        """Atomically create an invoice, bill its entries and drop the draft.

        Returns the new invoice ID.
        """
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """Get invoice by invoice number."""
        pass

    @abstractmethod
    def update_invoice(self, invoice_id: int, **fields: Any) -> None:
        """Update invoice fields."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        project_id: Optional[int] = None,
        limit: int = 50,
    ) -> list[Invoice]:
        """List invoices, newest first."""
        pass
