"""Tests for invoice drafts, finalization and invoice updates."""

import re

import pytest

from timebill.domain.entities import InvoiceStatus
from timebill.domain.errors import ConflictError, NotFoundError, ValidationError
from timebill.domain.invoice import generate_invoice_number, random_invoice_suffix

from conftest import utc_ms

JAN_START = utc_ms(2024, 1, 1)
FEB_START = utc_ms(2024, 2, 1)
FINALIZED_AT = utc_ms(2024, 2, 3, 12)


@pytest.fixture
def draft(invoice_service, sample_project, january_entries):
    return invoice_service.create_draft(
        sample_project.id, 15000, JAN_START, FEB_START, now=utc_ms(2024, 2, 2)
    )


class TestInvoiceNumbers:
    def test_suffix(self):
        assert re.fullmatch(r"[0-9A-Z]{4}", random_invoice_suffix())

    def test_number_uses_utc_date(self):
        number = generate_invoice_number(utc_ms(2024, 1, 31, 23, 59))
        assert re.fullmatch(r"INV-20240131-[0-9A-Z]{4}", number)


class TestCreateDraft:
    def test_snapshots_unbilled_entries(self, draft, sample_project, january_entries):
        assert draft.project_id == sample_project.id
        assert draft.project_name == "Acme Website"
        assert draft.client_name == "Acme Website"
        assert draft.hourly_rate_cents == 15000
        assert [s.id for s in draft.time_entries] == january_entries
        assert draft.display_number == f"DRAFT-{draft.draft_id[:8]}"

    def test_line_items(self, invoice_service, draft):
        doc = invoice_service.draft_document(draft, "UTC")
        assert doc.invoice_number == draft.display_number
        assert [(i.label, i.hours, i.amount_cents) for i in doc.line_items] == [
            ("Fix login", 3.0, 45000),
            ("General", 0.5, 7500),
        ]

    def test_invalid_rate(self, invoice_service, sample_project):
        with pytest.raises(ValidationError, match="Enter a valid hourly rate."):
            invoice_service.create_draft(sample_project.id, -1, JAN_START, FEB_START)

    def test_invalid_range(self, invoice_service, sample_project):
        with pytest.raises(ValidationError, match="Select a valid date range."):
            invoice_service.create_draft(sample_project.id, 100, FEB_START, JAN_START)

    def test_no_unbilled_time(self, invoice_service, sample_project):
        with pytest.raises(ValidationError, match="No unbilled time entries"):
            invoice_service.create_draft(sample_project.id, 100, JAN_START, FEB_START)

    def test_missing_project(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.create_draft(99, 100, JAN_START, FEB_START)

    def test_entries_held_by_other_draft_excluded(self, invoice_service, draft, sample_project):
        with pytest.raises(ValidationError, match="No unbilled time entries"):
            invoice_service.create_draft(sample_project.id, 100, JAN_START, FEB_START)


class TestDraftLookupAndEdit:
    def test_get_by_id_prefix_and_display_number(self, invoice_service, draft):
        assert invoice_service.get_draft(draft.draft_id) == draft
        assert invoice_service.get_draft(draft.draft_id[:6]) == draft
        assert invoice_service.get_draft(draft.display_number) == draft
        assert invoice_service.get_draft(draft.display_number.lower()) == draft

    def test_get_missing(self, invoice_service):
        with pytest.raises(NotFoundError, match="not found"):
            invoice_service.get_draft("nope")

    def test_update_fields(self, invoice_service, draft):
        updated = invoice_service.update_draft(
            draft.draft_id,
            client_name="  Acme Corp ",
            client_location="1 Main St\nSpringfield",
            payment_instructions="Bank: First Bank",
            hourly_rate_cents=20000,
        )
        assert updated.client_name == "Acme Corp"
        assert updated.client_location == "1 Main St\nSpringfield"
        assert updated.payment_instructions == "Bank: First Bank"
        assert updated.hourly_rate_cents == 20000
        assert updated.from_location is None

    def test_blank_string_clears_field(self, invoice_service, draft):
        updated = invoice_service.update_draft(draft.draft_id, client_name="")
        assert updated.client_name is None

    def test_update_negative_rate(self, invoice_service, draft):
        with pytest.raises(ValidationError):
            invoice_service.update_draft(draft.draft_id, hourly_rate_cents=-5)

    def test_delete_releases_entries(self, invoice_service, draft, sample_project):
        invoice_service.delete_draft(draft.draft_id)
        assert invoice_service.list_drafts() == []

        again = invoice_service.create_draft(sample_project.id, 100, JAN_START, FEB_START)
        assert len(again.time_entries) == 3


class TestFinalize:
    def test_finalize_creates_invoice_and_bills_entries(
        self, invoice_service, time_entry_service, draft, january_entries
    ):
        invoice_id = invoice_service.finalize_draft(draft.draft_id, notes=" Net 30 ", now=FINALIZED_AT)
        invoice = invoice_service.get_invoice(invoice_id)

        assert re.fullmatch(r"INV-20240203-[0-9A-Z]{4}", invoice.invoice_number)
        assert invoice.status is InvoiceStatus.SAVED
        assert invoice.hourly_rate_cents == 15000
        assert invoice.period_start == JAN_START
        assert invoice.period_end == FEB_START
        assert invoice.notes == "Net 30"
        assert invoice.client_name == "Acme Website"
        assert invoice.created_at == invoice.updated_at == FINALIZED_AT

        for entry_id in january_entries:
            assert time_entry_service.get_entry(entry_id).invoice_id == invoice_id
        assert invoice_service.list_drafts() == []
        assert [e.id for e in invoice_service.list_time_entries_for_invoice(invoice_id)] == january_entries

    def test_invoice_document_matches_draft(self, invoice_service, draft):
        draft_items = invoice_service.draft_document(draft).line_items
        invoice_id = invoice_service.finalize_draft(draft.draft_id)
        doc = invoice_service.invoice_document(invoice_service.get_invoice(invoice_id), "UTC")

        assert doc.line_items == draft_items
        assert doc.project_name == "Acme Website"
        assert doc.timezone == "UTC"

    def test_deleted_entry_conflicts(self, invoice_service, time_entry_service, draft, january_entries):
        time_entry_service.delete_entry(january_entries[0])
        with pytest.raises(ConflictError, match="no longer available; refresh the draft"):
            invoice_service.finalize_draft(draft.draft_id)
        assert invoice_service.list_drafts() == [draft]

    def test_already_billed_conflicts(self, invoice_service, temp_db, draft, january_entries):
        temp_db.finalize_invoice_draft(
            "missing-draft",
            [january_entries[0]],
            invoice_number="INV-OTHER",
            project_id=draft.project_id,
            status="saved",
            currency="USD",
            hourly_rate_cents=1,
            period_start=JAN_START,
            period_end=FEB_START,
            created_at=0,
            updated_at=0,
        )
        with pytest.raises(ConflictError, match="already billed"):
            invoice_service.finalize_draft(draft.draft_id)

    def test_failed_finalize_bills_nothing(
        self, invoice_service, time_entry_service, draft, january_entries
    ):
        time_entry_service.delete_entry(january_entries[2])
        with pytest.raises(ConflictError):
            invoice_service.finalize_draft(draft.draft_id)

        for entry_id in january_entries[:2]:
            assert time_entry_service.get_entry(entry_id).invoice_id is None
        assert invoice_service.list_invoices() == []


class TestInvoiceUpdates:
    @pytest.fixture
    def invoice(self, invoice_service, draft):
        invoice_id = invoice_service.finalize_draft(draft.draft_id, now=FINALIZED_AT)
        return invoice_service.get_invoice(invoice_id)

    def test_status_stamps_timestamps(self, invoice_service, invoice):
        sent = invoice_service.update_invoice(invoice.id, status=InvoiceStatus.SENT, now=FINALIZED_AT + 1)
        assert sent.status is InvoiceStatus.SENT
        assert sent.sent_at == FINALIZED_AT + 1
        assert sent.updated_at == FINALIZED_AT + 1

        paid = invoice_service.update_invoice(invoice.id, status="paid", now=FINALIZED_AT + 2)
        assert paid.status is InvoiceStatus.PAID
        assert paid.paid_at == FINALIZED_AT + 2
        assert paid.sent_at == FINALIZED_AT + 1
        assert paid.voided_at is None

    def test_same_status_does_not_restamp(self, invoice_service, invoice):
        invoice_service.update_invoice(invoice.id, status=InvoiceStatus.SENT, now=10)
        again = invoice_service.update_invoice(invoice.id, status=InvoiceStatus.SENT, now=20)
        assert again.sent_at == 10

    def test_unknown_status(self, invoice_service, invoice):
        with pytest.raises(ValueError):
            invoice_service.update_invoice(invoice.id, status="archived")

    def test_notes_and_rate(self, invoice_service, invoice):
        updated = invoice_service.update_invoice(invoice.id, notes="Thanks", hourly_rate_cents=100)
        assert updated.notes == "Thanks"
        assert updated.hourly_rate_cents == 100
        cleared = invoice_service.update_invoice(invoice.id, notes="  ")
        assert cleared.notes is None

    def test_missing_invoice(self, invoice_service):
        with pytest.raises(NotFoundError, match="Invoice 404 not found"):
            invoice_service.update_invoice(404, status=InvoiceStatus.PAID)

    def test_resolve_by_number_or_id(self, invoice_service, invoice):
        assert invoice_service.resolve_invoice(invoice.invoice_number) == invoice
        assert invoice_service.resolve_invoice(str(invoice.id)) == invoice
        assert invoice_service.resolve_invoice(invoice.id) == invoice
        with pytest.raises(NotFoundError):
            invoice_service.resolve_invoice("INV-MISSING")

    def test_list_filters(self, invoice_service, invoice, sample_project):
        assert invoice_service.list_invoices() == [invoice]
        assert invoice_service.list_invoices(status=InvoiceStatus.SAVED) == [invoice]
        assert invoice_service.list_invoices(status=InvoiceStatus.PAID) == []
        assert invoice_service.list_invoices(project_id=sample_project.id + 1) == []
