"""Domain layer for timebill application."""

# Services import the database layer, which imports domain entities, so the
# services are resolved lazily.
_SERVICES = {
    "ProjectService": "timebill.domain.project",
    "TimeEntryService": "timebill.domain.time_entry",
    "InvoiceService": "timebill.domain.invoice",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
