"""Domain model entities for timebill.

These are pure data classes representing business concepts, independent of
database schema. Timestamps are integer epoch milliseconds, the unit time
entries are tracked in, so that aggregation and export stay exact.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

MS_PER_HOUR = 3_600_000

GENERAL_GROUP_KEY = "general"


class InvoiceStatus(str, Enum):
    """Lifecycle states of a persisted invoice."""

    SAVED = "saved"
    SENT = "sent"
    PAID = "paid"
    VOID = "void"


@dataclass(frozen=True)
class Project:
    """Project domain entity."""

    id: int
    name: str
    created_at: int


@dataclass(frozen=True)
class TimeEntrySnapshot:
    """Immutable view of one tracked interval, as used for billing.

    ``ended_at`` is None while the timer is still running.
    """

    id: int
    issue_id: Optional[str]
    issue_title: Optional[str]
    description: Optional[str]
    started_at: int
    ended_at: Optional[int]


@dataclass(frozen=True)
class TimeEntry:
    """Time entry domain entity."""

    id: int
    project_id: int
    issue_id: Optional[str]
    issue_title: Optional[str]
    description: Optional[str]
    started_at: int
    ended_at: Optional[int]
    invoice_id: Optional[int]
    created_at: int

    @property
    def is_running(self) -> bool:
        return self.ended_at is None

    def to_snapshot(self) -> TimeEntrySnapshot:
        """Return the billing snapshot of this entry."""
        return TimeEntrySnapshot(
            id=self.id,
            issue_id=self.issue_id,
            issue_title=self.issue_title,
            description=self.description,
            started_at=self.started_at,
            ended_at=self.ended_at,
        )


@dataclass(frozen=True)
class InvoiceLineItem:
    """One aggregated billing row for an issue or for general time."""

    group_key: str
    label: str
    target_issue_id: Optional[str]
    total_duration_ms: int
    hours: float
    hourly_rate_cents: int
    amount_cents: int


@dataclass(frozen=True)
class InvoiceTotals:
    """Sums over a set of line items."""

    total_duration_ms: int
    total_hours: float
    total_amount_cents: int


@dataclass(frozen=True)
class PaymentInstructionFields:
    """Structured payment details parsed from free text."""

    bank: str = ""
    account_name: str = ""
    routing_number: str = ""
    account_number: str = ""
    extra_lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class InvoiceDocument:
    """Everything the CSV and PDF encoders need to render an invoice.

    ``period_end`` is exclusive; the displayed last day is one day earlier.
    """

    invoice_number: str
    project_name: str
    period_start: int
    period_end: int
    hourly_rate_cents: int
    line_items: tuple[InvoiceLineItem, ...]
    currency: str = "USD"
    client_name: Optional[str] = None
    client_location: Optional[str] = None
    from_location: Optional[str] = None
    payment_instructions: Optional[str] = None
    timezone: Optional[str] = None


@dataclass(frozen=True)
class InvoiceDraft:
    """Unsaved invoice candidate built from unbilled time entries."""

    draft_id: str
    created_at: int
    project_id: int
    project_name: str
    hourly_rate_cents: int
    period_start: int
    period_end: int
    time_entries: tuple[TimeEntrySnapshot, ...] = field(default_factory=tuple)
    currency: str = "USD"
    client_name: Optional[str] = None
    client_location: Optional[str] = None
    from_location: Optional[str] = None
    payment_instructions: Optional[str] = None

    @property
    def display_number(self) -> str:
        return f"DRAFT-{self.draft_id[:8]}"


@dataclass(frozen=True)
class Invoice:
    """Persisted invoice domain entity."""

    id: int
    invoice_number: str
    project_id: int
    status: InvoiceStatus
    currency: str
    hourly_rate_cents: int
    period_start: int
    period_end: int
    created_at: int
    updated_at: int
    notes: Optional[str] = None
    client_name: Optional[str] = None
    client_location: Optional[str] = None
    from_location: Optional[str] = None
    payment_instructions: Optional[str] = None
    sent_at: Optional[int] = None
    paid_at: Optional[int] = None
    voided_at: Optional[int] = None
