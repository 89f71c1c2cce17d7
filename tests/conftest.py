"""Shared pytest fixtures for tillbook tests."""

import tempfile
import os
from datetime import datetime, UTC
import pytest

from tillbook.database.factories import create_sqlite_database
from tillbook.domain.actions import EntryActions
from tillbook.domain.counter import CounterService
from tillbook.domain.day_entry import DayEntryService
from tillbook.domain.entities import Identity, Role
from tillbook.domain.summary import SummaryService
from tillbook.logging_config import reset_logging
from tillbook.utils.clock import FixedClock


@pytest.fixture(autouse=True)
def clean_logging():
    """Give every test an unconfigured tillbook logger."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Business clock frozen at noon IST on 2024-03-10."""
    return FixedClock(datetime(2024, 3, 10, 6, 30, tzinfo=UTC))


@pytest.fixture
def counter_service(temp_db):
    """Create a CounterService with a temporary database."""
    return CounterService(temp_db)


@pytest.fixture
def entry_service(temp_db, clock):
    """Create a DayEntryService with a temporary database and fixed clock."""
    return DayEntryService(temp_db, clock)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def sample_counters(counter_service):
    """Register the default counters and return their IDs by name."""
    from tillbook.cli.commands.init_counters import INITIAL_COUNTERS

    return {
        name: counter_service.create_counter(name=name, kind=kind)
        for name, kind in INITIAL_COUNTERS
    }


@pytest.fixture
def operator():
    """Counter operator of Smart Mart Counter 1."""
    return Identity(username="raj", role=Role.COUNTER, counter_name="Smart Mart Counter 1")


@pytest.fixture
def fashion_operator():
    """Counter operator of the combined fashion counter."""
    return Identity(username="meena", role=Role.COUNTER, counter_name="Smart Fashion (Both)")


@pytest.fixture
def admin():
    return Identity(username="owner", role=Role.ADMIN)


@pytest.fixture
def supervisor():
    return Identity(username="auditor", role=Role.SUPERVISOR)


@pytest.fixture
def actions_for(entry_service):
    """Return a factory building EntryActions for a fixed caller."""

    def factory(identity):
        return EntryActions(entry_service, lambda: identity)

    return factory


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
