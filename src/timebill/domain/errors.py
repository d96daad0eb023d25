"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or stale drafts."""


class ExportError(DomainError):
    """Writing an exported invoice file failed."""


def project_not_found(project: int | str) -> str:
    """Return message for missing project."""
    if isinstance(project, int):
        return f"Project {project} not found"
    return f"Project '{project}' not found"


def project_name_taken(name: str) -> str:
    """Return message for duplicate project name."""
    return f"Project with name '{name}' already exists"


def time_entry_not_found(entry_id: int) -> str:
    """Return message for missing time entry."""
    return f"Time entry {entry_id} not found"


def draft_not_found(draft_id: str) -> str:
    """Return message for missing invoice draft."""
    return f"Invoice draft '{draft_id}' not found"


def invoice_not_found(invoice: int | str) -> str:
    """Return message for missing invoice by ID or number."""
    if isinstance(invoice, int):
        return f"Invoice {invoice} not found"
    return f"Invoice '{invoice}' not found"


def export_failed(kind: str) -> str:
    """Return the generic message shown when an export cannot be written."""
    return f"Could not export {kind}."
