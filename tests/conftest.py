"""Shared pytest fixtures for timebill tests."""

import os
import tempfile
from datetime import datetime

import pytest
from dateutil import tz

from timebill.database.factories import create_sqlite_database
from timebill.domain.invoice import InvoiceService
from timebill.domain.project import ProjectService
from timebill.domain.time_entry import TimeEntryService
from timebill.utils.date_parser import to_millis

HOUR_MS = 3_600_000


def utc_ms(*args) -> int:
    """Epoch milliseconds for a UTC wall-clock time, e.g. utc_ms(2024, 1, 15, 9)."""
    return to_millis(datetime(*args, tzinfo=tz.UTC))


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def time_entry_service(temp_db):
    """Create a TimeEntryService with a temporary database."""
    return TimeEntryService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db)


@pytest.fixture
def sample_project(project_service):
    """Create a sample project for testing."""
    project_id = project_service.create_project(name="Acme Website")
    return project_service.get_project(project_id)


@pytest.fixture
def january_entries(time_entry_service, sample_project):
    """Finished entries in January 2024 (UTC): 2h + 1h on ISS-1, 30m general."""
    ids = [
        time_entry_service.add_entry(
            project_id=sample_project.id,
            started_at=utc_ms(2024, 1, 15, 9),
            ended_at=utc_ms(2024, 1, 15, 11),
            issue_id="ISS-1",
            issue_title="Fix login",
        ),
        time_entry_service.add_entry(
            project_id=sample_project.id,
            started_at=utc_ms(2024, 1, 16, 9),
            ended_at=utc_ms(2024, 1, 16, 10),
            issue_id="ISS-1",
            issue_title="Fix login (renamed)",
        ),
        time_entry_service.add_entry(
            project_id=sample_project.id,
            started_at=utc_ms(2024, 1, 17, 14),
            ended_at=utc_ms(2024, 1, 17, 14, 30),
        ),
    ]
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
