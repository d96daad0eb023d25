"""Invoice domain service.

Covers the whole invoice lifecycle: drafts built from unbilled time,
finalization into numbered invoices, status changes, and assembling the
document that the CSV and PDF exporters render.
"""

import logging
import secrets
import uuid
from typing import Optional

from dateutil import tz

from timebill.database.base import Database
from timebill.domain.entities import (
    Invoice,
    InvoiceDocument,
    InvoiceDraft,
    InvoiceStatus,
    TimeEntry,
)
from timebill.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    draft_not_found,
    invoice_not_found,
    project_not_found,
)
from timebill.domain.line_items import build_line_items
from timebill.domain.time_entry import TimeEntryService
from timebill.utils.date_parser import from_millis, now_millis

logger = logging.getLogger(__name__)

DRAFT_PREFIX = "DRAFT-"

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Timestamp field stamped when an invoice enters each status.
_STATUS_TIMESTAMPS = {
    InvoiceStatus.SENT: "sent_at",
    InvoiceStatus.PAID: "paid_at",
    InvoiceStatus.VOID: "voided_at",
}


def random_invoice_suffix() -> str:
    """Four random uppercase base-36 characters."""
    value = secrets.randbelow(36**4)
    chars = []
    for _ in range(4):
        value, digit = divmod(value, 36)
        chars.append(_BASE36[digit])
    return "".join(reversed(chars))


def generate_invoice_number(now: int) -> str:
    """Build an invoice number such as ``INV-20240131-7KQ2`` (UTC date)."""
    day = from_millis(now, tz.UTC).strftime("%Y%m%d")
    return f"INV-{day}-{random_invoice_suffix()}"


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class InvoiceService:
    """Service for invoice drafts and finalized invoices."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db
        self.time_entries = TimeEntryService(db)

    # Drafts
    def create_draft(
        self,
        project_id: int,
        hourly_rate_cents: int,
        period_start: int,
        period_end: int,
        client_name: Optional[str] = None,
        now: Optional[int] = None,
    ) -> InvoiceDraft:
        """Create a draft from the project's unbilled time in a period.

        Entries already held by another draft are left out.

        Args:
            project_id: Project to invoice
            hourly_rate_cents: Hourly rate in cents
            period_start: Inclusive period start in epoch ms
            period_end: Exclusive period end in epoch ms
            client_name: Client name (defaults to the project name)
            now: Creation time in epoch ms

        Returns:
            The stored draft

        Raises:
            ValidationError: If the rate or period is invalid, or no billable
                time is left in the period
            NotFoundError: If the project doesn't exist
        """
        if hourly_rate_cents is None or hourly_rate_cents < 0:
            raise ValidationError("Enter a valid hourly rate.")
        if period_end <= period_start:
            raise ValidationError("Select a valid date range.")

        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))

        used_entry_ids = {
            snapshot.id
            for draft in self.db.list_invoice_drafts()
            for snapshot in draft.time_entries
        }
        candidates = self.time_entries.list_unbilled_in_range(
            project_id, period_start, period_end
        )
        entries = [e for e in candidates if e.id not in used_entry_ids]
        if not entries:
            raise ValidationError("No unbilled time entries found for that range.")

        draft = InvoiceDraft(
            draft_id=str(uuid.uuid4()),
            created_at=now_millis() if now is None else now,
            project_id=project.id,
            project_name=project.name,
            hourly_rate_cents=hourly_rate_cents,
            period_start=period_start,
            period_end=period_end,
            time_entries=tuple(e.to_snapshot() for e in entries),
            client_name=_clean_text(client_name) or project.name,
        )
        self.db.create_invoice_draft(draft)
        logger.info(
            "Created draft %s with %d time entries", draft.display_number, len(entries)
        )
        return draft

    def get_draft(self, draft_ref: str) -> InvoiceDraft:
        """Get a draft by full ID, ID prefix, or ``DRAFT-`` display number.

        Raises:
            NotFoundError: If no draft matches
            ValidationError: If a prefix matches more than one draft
        """
        ref = draft_ref.strip()
        if ref.upper().startswith(DRAFT_PREFIX):
            ref = ref[len(DRAFT_PREFIX):]

        draft = self.db.get_invoice_draft(ref)
        if draft is not None:
            return draft

        matches = self.db.find_invoice_drafts_by_prefix(ref) if ref else []
        if not matches:
            raise NotFoundError(draft_not_found(draft_ref))
        if len(matches) > 1:
            raise ValidationError(f"Draft reference '{draft_ref}' is ambiguous")
        return matches[0]

    def list_drafts(self, project_id: Optional[int] = None) -> list[InvoiceDraft]:
        """List drafts, newest first."""
        return self.db.list_invoice_drafts(project_id=project_id)

    def update_draft(
        self,
        draft_id: str,
        client_name: Optional[str] = None,
        client_location: Optional[str] = None,
        from_location: Optional[str] = None,
        payment_instructions: Optional[str] = None,
        hourly_rate_cents: Optional[int] = None,
    ) -> InvoiceDraft:
        """Update the editable fields of a draft.

        Fields left as None are unchanged; blank strings clear a field.

        Raises:
            NotFoundError: If the draft doesn't exist
            ValidationError: If the hourly rate is negative
        """
        draft = self.get_draft(draft_id)
        fields = {}
        for name, value in (
            ("client_name", client_name),
            ("client_location", client_location),
            ("from_location", from_location),
            ("payment_instructions", payment_instructions),
        ):
            if value is not None:
                fields[name] = _clean_text(value)
        if hourly_rate_cents is not None:
            if hourly_rate_cents < 0:
                raise ValidationError("Enter a valid hourly rate.")
            fields["hourly_rate_cents"] = hourly_rate_cents

        if fields:
            self.db.update_invoice_draft(draft.draft_id, **fields)
        return self.db.get_invoice_draft(draft.draft_id)

    def delete_draft(self, draft_id: str) -> None:
        """Delete a draft, releasing its time entries for other drafts."""
        draft = self.get_draft(draft_id)
        self.db.delete_invoice_draft(draft.draft_id)

    def finalize_draft(
        self, draft_id: str, notes: Optional[str] = None, now: Optional[int] = None
    ) -> int:
        """Turn a draft into a saved invoice and mark its time as billed.

        Every entry is checked again against the store, since time may have
        changed after the draft was built.

        Returns:
            ID of the new invoice

        Raises:
            NotFoundError: If the draft doesn't exist
            ConflictError: If any entry is gone, moved, running, billed, or
                outside the period
        """
        draft = self.get_draft(draft_id)
        now = now_millis() if now is None else now

        if draft.period_end <= draft.period_start:
            raise ValidationError("Invalid invoice period")
        if self.db.get_project(draft.project_id) is None:
            raise NotFoundError(project_not_found(draft.project_id))

        entry_ids = []
        for snapshot in draft.time_entries:
            entry = self.db.get_time_entry(snapshot.id)
            self._check_billable(entry, draft)
            entry_ids.append(entry.id)

        invoice_number = generate_invoice_number(now)
        while self.db.get_invoice_by_number(invoice_number) is not None:
            invoice_number = generate_invoice_number(now)

        invoice_id = self.db.finalize_invoice_draft(
            draft.draft_id,
            entry_ids,
            invoice_number=invoice_number,
            project_id=draft.project_id,
            status=InvoiceStatus.SAVED.value,
            currency=draft.currency,
            hourly_rate_cents=draft.hourly_rate_cents,
            notes=_clean_text(notes),
            period_start=draft.period_start,
            period_end=draft.period_end,
            client_name=draft.client_name,
            client_location=draft.client_location,
            from_location=draft.from_location,
            payment_instructions=draft.payment_instructions,
            created_at=now,
            updated_at=now,
        )
        logger.info(
            "Finalized %s as invoice %s (%d entries)",
            draft.display_number,
            invoice_number,
            len(entry_ids),
        )
        return invoice_id

    @staticmethod
    def _check_billable(entry: Optional[TimeEntry], draft: InvoiceDraft) -> None:
        if entry is None:
            raise ConflictError("Some entries are no longer available; refresh the draft.")
        if entry.project_id != draft.project_id:
            raise ConflictError(
                "Some entries no longer match the selected project; refresh the draft."
            )
        if entry.ended_at is None:
            raise ConflictError(
                "Some entries are still running; stop timers and refresh the draft."
            )
        if entry.invoice_id is not None:
            raise ConflictError("Some entries are already billed; refresh the draft.")
        if not draft.period_start <= entry.started_at < draft.period_end:
            raise ConflictError(
                "Some entries are outside the invoice period; refresh the draft."
            )

    # Invoices
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        return self.db.get_invoice(invoice_id)

    def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """Get invoice by invoice number."""
        return self.db.get_invoice_by_number(invoice_number)

    def resolve_invoice(self, invoice_ref: str | int) -> Invoice:
        """Resolve an invoice number or ID.

        Raises:
            NotFoundError: If no invoice matches
        """
        if isinstance(invoice_ref, int):
            invoice = self.db.get_invoice(invoice_ref)
        else:
            invoice = self.db.get_invoice_by_number(invoice_ref.strip())
            if invoice is None and invoice_ref.strip().isdigit():
                invoice = self.db.get_invoice(int(invoice_ref))
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_ref))
        return invoice

    def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        project_id: Optional[int] = None,
        limit: int = 50,
    ) -> list[Invoice]:
        """List invoices, newest first."""
        return self.db.list_invoices(status=status, project_id=project_id, limit=limit)

    def update_invoice(
        self,
        invoice_id: int,
        status: Optional[InvoiceStatus] = None,
        hourly_rate_cents: Optional[int] = None,
        notes: Optional[str] = None,
        now: Optional[int] = None,
    ) -> Invoice:
        """Update invoice status, rate or notes.

        Moving to sent, paid or void stamps the matching timestamp. Blank
        notes clear the notes.

        Raises:
            NotFoundError: If the invoice doesn't exist
            ValidationError: If the hourly rate is negative
        """
        existing = self.db.get_invoice(invoice_id)
        if existing is None:
            raise NotFoundError(invoice_not_found(invoice_id))

        now = now_millis() if now is None else now
        fields: dict = {"updated_at": now}

        if status is not None:
            status = InvoiceStatus(status)
            if status != existing.status:
                fields["status"] = status
                timestamp_field = _STATUS_TIMESTAMPS.get(status)
                if timestamp_field is not None:
                    fields[timestamp_field] = now
                logger.info(
                    "Invoice %s: %s -> %s",
                    existing.invoice_number,
                    existing.status.value,
                    status.value,
                )
        if hourly_rate_cents is not None:
            if hourly_rate_cents < 0:
                raise ValidationError("Enter a valid hourly rate.")
            fields["hourly_rate_cents"] = hourly_rate_cents
        if notes is not None:
            fields["notes"] = _clean_text(notes)

        self.db.update_invoice(invoice_id, **fields)
        return self.db.get_invoice(invoice_id)

    def list_time_entries_for_invoice(self, invoice_id: int) -> list[TimeEntry]:
        """List the time entries billed on an invoice, oldest first.

        Raises:
            NotFoundError: If the invoice doesn't exist
        """
        if self.db.get_invoice(invoice_id) is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return self.db.list_time_entries(invoice_id=invoice_id)

    # Documents
    def draft_document(
        self, draft: InvoiceDraft, timezone: Optional[str] = None
    ) -> InvoiceDocument:
        """Build the exportable document for a draft."""
        return InvoiceDocument(
            invoice_number=draft.display_number,
            project_name=draft.project_name,
            period_start=draft.period_start,
            period_end=draft.period_end,
            hourly_rate_cents=draft.hourly_rate_cents,
            line_items=tuple(
                build_line_items(draft.time_entries, draft.hourly_rate_cents)
            ),
            currency=draft.currency,
            client_name=draft.client_name,
            client_location=draft.client_location,
            from_location=draft.from_location,
            payment_instructions=draft.payment_instructions,
            timezone=timezone,
        )

    def invoice_document(
        self, invoice: Invoice, timezone: Optional[str] = None
    ) -> InvoiceDocument:
        """Build the exportable document for a saved invoice."""
        project = self.db.get_project(invoice.project_id)
        entries = self.list_time_entries_for_invoice(invoice.id)
        snapshots = [entry.to_snapshot() for entry in entries]
        return InvoiceDocument(
            invoice_number=invoice.invoice_number,
            project_name=project.name if project is not None else "",
            period_start=invoice.period_start,
            period_end=invoice.period_end,
            hourly_rate_cents=invoice.hourly_rate_cents,
            line_items=tuple(build_line_items(snapshots, invoice.hourly_rate_cents)),
            currency=invoice.currency,
            client_name=invoice.client_name,
            client_location=invoice.client_location,
            from_location=invoice.from_location,
            payment_instructions=invoice.payment_instructions,
            timezone=timezone,
        )
