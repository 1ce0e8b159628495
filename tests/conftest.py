"""Pytest configuration and shared fixtures.

This module provides fixtures for testing lendingdesk, including a frozen
clock, an in-memory library service and a temporary SQLite database.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest

from lendingdesk.clock import FixedClock
from lendingdesk.config import reset_config
from lendingdesk.db.sqlite import Database, reset_db
from lendingdesk.lending.manager import LendingManager
from lendingdesk.lending.memory import InMemoryLibraryService
from lendingdesk.lending.schemas import Book, Customer, Loan

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
BOOK_ID = "12345"
CUSTOMER_ID = 123456


# ============================================================================
# Clock / Service Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FixedClock:
    """A clock frozen at NOW."""
    return FixedClock(NOW)


@pytest.fixture
def service() -> InMemoryLibraryService:
    """An empty in-memory library service."""
    return InMemoryLibraryService()


@pytest.fixture
def manager(service: InMemoryLibraryService, clock: FixedClock) -> LendingManager:
    """A LendingManager over the in-memory service."""
    return LendingManager(service, clock)


# ============================================================================
# Sample Data Helpers
# ============================================================================


def _loan_book(
    book_id: str,
    customer_id: int = CUSTOMER_ID,
    due_in: timedelta = timedelta(days=1),
    day_penalty: int = 10,
) -> Book:
    return Book(
        id=book_id,
        day_penalty=day_penalty,
        current_loan=Loan(book_id=book_id, customer_id=customer_id, due_at=NOW + due_in),
    )


@pytest.fixture
def now() -> datetime:
    """The instant the test clock is frozen at."""
    return NOW


@pytest.fixture
def loan_book():
    """Factory for a book on loan, due ``due_in`` after NOW.

    Defaults to CUSTOMER_ID, due tomorrow, 10 per day late.
    """
    return _loan_book


@pytest.fixture
def adult(service: InMemoryLibraryService) -> Customer:
    """An unlocked 20 year old customer."""
    return service.add_customer(Customer(id=CUSTOMER_ID, age=20))


@pytest.fixture
def available_book(service: InMemoryLibraryService) -> Book:
    """An available book in the primary store."""
    return service.add_book(Book(id=BOOK_ID, day_penalty=10))


@pytest.fixture
def held_book(service: InMemoryLibraryService) -> Book:
    """A book already on loan to CUSTOMER_ID, due tomorrow."""
    return service.add_book(_loan_book(BOOK_ID))


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def memory_db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def env_db(temp_db_path: Path) -> Generator[Path, None, None]:
    """Point LENDINGDESK_DB_PATH at a temporary file and reset globals."""
    reset_db()
    reset_config()
    os.environ["LENDINGDESK_DB_PATH"] = str(temp_db_path)

    yield temp_db_path

    reset_db()
    reset_config()
    if "LENDINGDESK_DB_PATH" in os.environ:
        del os.environ["LENDINGDESK_DB_PATH"]
