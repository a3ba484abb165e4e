"""Shared pytest fixtures for splitbill tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
import pytest

from splitbill.database.factories import create_sqlite_database
from splitbill.domain.bill import BillService
from splitbill.domain.entities import BillHeader, ManualParticipantAmount
from splitbill.domain.participant import ParticipantService


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
def participant_service(temp_db):
    """Create a ParticipantService with a temporary database."""
    return ParticipantService(temp_db)


@pytest.fixture
def bill_service(temp_db, participant_service):
    """Create a BillService that remembers participants."""
    return BillService(temp_db, contacts=participant_service, default_currency="USD")


@pytest.fixture
def dinner_participants():
    """Three participants splitting 85.50 evenly."""
    return [
        ManualParticipantAmount(name="John", amount_owed="28.50"),
        ManualParticipantAmount(name="Jane", amount_owed="28.50", email="jane@example.com"),
        ManualParticipantAmount(name="Mike", amount_owed="28.50"),
    ]


@pytest.fixture
def sample_bill(bill_service, dinner_participants):
    """Create a stored manual bill for testing."""
    header = BillHeader(
        title="Dinner at Joe's Pizza",
        location="Joe's Pizza Downtown",
        description="Team dinner after project completion",
        date=datetime(2025, 8, 8),
    )
    return bill_service.create_manual_bill(header, Decimal("85.50"), dinner_participants)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
