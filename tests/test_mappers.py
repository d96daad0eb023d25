"""Tests for database mappers."""

from timebill.database.models import (
    Invoice as ORMInvoice,
    InvoiceDraft as ORMInvoiceDraft,
    Project as ORMProject,
    TimeEntry as ORMTimeEntry,
)
from timebill.database.mappers import (
    invoice_draft_to_domain,
    invoice_to_domain,
    project_to_domain,
    snapshot_from_json,
    snapshot_to_json,
    time_entry_to_domain,
)
from timebill.domain.entities import (
    Invoice,
    InvoiceDraft,
    InvoiceStatus,
    Project,
    TimeEntry,
    TimeEntrySnapshot,
)


class TestProjectMapper:
    """Tests for Project mapper."""

    def test_project_to_domain(self):
        orm_project = ORMProject(id=1, name="Acme", created_at=1700000000000)
        project = project_to_domain(orm_project)

        assert isinstance(project, Project)
        assert project.id == 1
        assert project.name == "Acme"
        assert project.created_at == 1700000000000


class TestTimeEntryMapper:
    """Tests for TimeEntry mapper."""

    def test_time_entry_to_domain(self):
        orm_entry = ORMTimeEntry(
            id=7,
            project_id=1,
            issue_id="ISS-1",
            issue_title="Fix login",
            description="pairing",
            started_at=1000,
            ended_at=None,
            invoice_id=None,
            created_at=900,
        )
        entry = time_entry_to_domain(orm_entry)

        assert isinstance(entry, TimeEntry)
        assert entry.id == 7
        assert entry.issue_title == "Fix login"
        assert entry.is_running
        assert entry.to_snapshot() == TimeEntrySnapshot(
            id=7,
            issue_id="ISS-1",
            issue_title="Fix login",
            description="pairing",
            started_at=1000,
            ended_at=None,
        )


class TestInvoiceMapper:
    """Tests for Invoice mapper."""

    def test_invoice_to_domain(self):
        orm_invoice = ORMInvoice(
            id=3,
            invoice_number="INV-20240131-AB12",
            project_id=1,
            status="sent",
            currency="USD",
            hourly_rate_cents=15000,
            period_start=0,
            period_end=86_400_000,
            created_at=5,
            updated_at=6,
            sent_at=6,
        )
        invoice = invoice_to_domain(orm_invoice)

        assert isinstance(invoice, Invoice)
        assert invoice.status is InvoiceStatus.SENT
        assert invoice.sent_at == 6
        assert invoice.paid_at is None


class TestDraftMapper:
    """Tests for InvoiceDraft mapper and snapshot JSON."""

    def test_snapshot_json(self):
        snapshot = TimeEntrySnapshot(
            id=1, issue_id=None, issue_title=None, description=None,
            started_at=10, ended_at=20,
        )
        data = snapshot_to_json(snapshot)

        assert data == {
            "id": 1,
            "issue_id": None,
            "issue_title": None,
            "description": None,
            "started_at": 10,
            "ended_at": 20,
        }
        assert snapshot_from_json(data) == snapshot

    def test_snapshot_from_json_tolerates_missing_optional_keys(self):
        snapshot = snapshot_from_json({"id": 2, "started_at": 5})
        assert snapshot.issue_id is None
        assert snapshot.ended_at is None

    def test_invoice_draft_to_domain(self):
        orm_draft = ORMInvoiceDraft(
            draft_id="0f1e2d3c-aaaa-bbbb-cccc-000000000000",
            project_id=1,
            project_name="Acme",
            currency="USD",
            hourly_rate_cents=10000,
            period_start=0,
            period_end=1,
            time_entries=[{"id": 4, "started_at": 0, "ended_at": 1}],
            created_at=0,
        )
        draft = invoice_draft_to_domain(orm_draft)

        assert isinstance(draft, InvoiceDraft)
        assert draft.display_number == "DRAFT-0f1e2d3c"
        assert [s.id for s in draft.time_entries] == [4]
