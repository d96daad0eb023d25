"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the JSON snapshot format
used for the time entries held by invoice drafts.
"""

from typing import Any

from timebill.domain import entities as domain
from timebill.database.models import (
    Invoice as ORMInvoice,
    InvoiceDraft as ORMInvoiceDraft,
    Project as ORMProject,
    TimeEntry as ORMTimeEntry,
)


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        created_at=orm_project.created_at,
    )


def time_entry_to_domain(orm_entry: ORMTimeEntry) -> domain.TimeEntry:
    """Convert SQLAlchemy TimeEntry model to domain TimeEntry entity."""
    return domain.TimeEntry(
        id=orm_entry.id,
        project_id=orm_entry.project_id,
        issue_id=orm_entry.issue_id,
        issue_title=orm_entry.issue_title,
        description=orm_entry.description,
        started_at=orm_entry.started_at,
        ended_at=orm_entry.ended_at,
        invoice_id=orm_entry.invoice_id,
        created_at=orm_entry.created_at,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        project_id=orm_invoice.project_id,
        status=domain.InvoiceStatus(orm_invoice.status),
        currency=orm_invoice.currency,
        hourly_rate_cents=orm_invoice.hourly_rate_cents,
        period_start=orm_invoice.period_start,
        period_end=orm_invoice.period_end,
        created_at=orm_invoice.created_at,
        updated_at=orm_invoice.updated_at,
        notes=orm_invoice.notes,
        client_name=orm_invoice.client_name,
        client_location=orm_invoice.client_location,
        from_location=orm_invoice.from_location,
        payment_instructions=orm_invoice.payment_instructions,
        sent_at=orm_invoice.sent_at,
        paid_at=orm_invoice.paid_at,
        voided_at=orm_invoice.voided_at,
    )


def snapshot_to_json(snapshot: domain.TimeEntrySnapshot) -> dict[str, Any]:
    """Convert a time entry snapshot to its JSON form."""
    return {
        "id": snapshot.id,
        "issue_id": snapshot.issue_id,
        "issue_title": snapshot.issue_title,
        "description": snapshot.description,
        "started_at": snapshot.started_at,
        "ended_at": snapshot.ended_at,
    }


def snapshot_from_json(data: dict[str, Any]) -> domain.TimeEntrySnapshot:
    """Convert the JSON form of a snapshot back to the domain entity."""
    return domain.TimeEntrySnapshot(
        id=data["id"],
        issue_id=data.get("issue_id"),
        issue_title=data.get("issue_title"),
        description=data.get("description"),
        started_at=data["started_at"],
        ended_at=data.get("ended_at"),
    )


def invoice_draft_to_domain(orm_draft: ORMInvoiceDraft) -> domain.InvoiceDraft:
    """Convert SQLAlchemy InvoiceDraft model to domain InvoiceDraft entity."""
    return domain.InvoiceDraft(
        draft_id=orm_draft.draft_id,
        created_at=orm_draft.created_at,
        project_id=orm_draft.project_id,
        project_name=orm_draft.project_name,
        hourly_rate_cents=orm_draft.hourly_rate_cents,
        period_start=orm_draft.period_start,
        period_end=orm_draft.period_end,
        time_entries=tuple(snapshot_from_json(item) for item in orm_draft.time_entries or []),
        currency=orm_draft.currency,
        client_name=orm_draft.client_name,
        client_location=orm_draft.client_location,
        from_location=orm_draft.from_location,
        payment_instructions=orm_draft.payment_instructions,
    )
