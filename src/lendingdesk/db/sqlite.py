"""SQLite database operations.

Handles database connection, session management, and the record
operations used to seed and inspect the library store.
"""

import os
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional, Union

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import DEFAULT_DB_PATH
from ..lending.schemas import Book as BookSchema
from ..lending.schemas import Customer as CustomerSchema
from ..lending.schemas import Loan as LoanSchema
from .models import Base, Book, Customer, LegacyBook, Payment

BookRecord = Union[Book, LegacyBook]


def record_to_book(record: BookRecord) -> BookSchema:
    """Convert a book row to a ``Book`` schema, loan included."""
    loan = None
    if record.loan_customer_id is not None and record.loan_due_at:
        loan = LoanSchema(
            book_id=record.id,
            customer_id=record.loan_customer_id,
            due_at=datetime.fromisoformat(record.loan_due_at),
        )
    return BookSchema(id=record.id, current_loan=loan, day_penalty=record.day_penalty)


def apply_book(record: BookRecord, book: BookSchema) -> None:
    """Copy a ``Book`` schema's state onto a book row."""
    record.day_penalty = book.day_penalty
    if book.current_loan is None:
        record.loan_customer_id = None
        record.loan_due_at = None
    else:
        record.loan_customer_id = book.current_loan.customer_id
        record.loan_due_at = book.current_loan.due_at.isoformat()


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     LENDINGDESK_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get("LENDINGDESK_DB_PATH", str(DEFAULT_DB_PATH))

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Book Operations
    # ========================================================================

    def add_book(self, book: BookSchema, legacy: bool = False) -> BookSchema:
        """Insert a book into the primary store, or the legacy archive.

        Raises:
            ValueError: A book with this id already exists in either table
        """
        with self.get_session() as session:
            if session.get(Book, book.id) or session.get(LegacyBook, book.id):
                raise ValueError(f"Book {book.id} already exists")
            record = LegacyBook(id=book.id) if legacy else Book(id=book.id)
            apply_book(record, book)
            session.add(record)
            session.flush()
            return record_to_book(record)

    def find_book(self, book_id: str) -> Optional[BookSchema]:
        """Find a book in either table."""
        with self.get_session() as session:
            record = session.get(Book, book_id) or session.get(LegacyBook, book_id)
            return record_to_book(record) if record else None

    def list_loans(self, customer_id: int) -> list[BookSchema]:
        """Books from both tables currently lent to a customer."""
        with self.get_session() as session:
            books = []
            for model in (Book, LegacyBook):
                stmt = (
                    select(model)
                    .where(model.loan_customer_id == customer_id)
                    .order_by(model.id)
                )
                books.extend(record_to_book(r) for r in session.execute(stmt).scalars())
            return books

    # ========================================================================
    # Customer Operations
    # ========================================================================

    def add_customer(self, customer: CustomerSchema, name: Optional[str] = None) -> CustomerSchema:
        """Insert a customer.

        Raises:
            ValueError: A customer with this id already exists
        """
        with self.get_session() as session:
            if session.get(Customer, customer.id):
                raise ValueError(f"Customer {customer.id} already exists")
            session.add(
                Customer(
                    id=customer.id,
                    name=name,
                    age=customer.age,
                    is_locked=customer.is_locked,
                )
            )
        return customer

    def get_customer(self, customer_id: int) -> Optional[CustomerSchema]:
        """Get a customer by ID."""
        with self.get_session() as session:
            record = session.get(Customer, customer_id)
            if record is None:
                return None
            return CustomerSchema(id=record.id, age=record.age, is_locked=record.is_locked)

    # ========================================================================
    # Payment Operations
    # ========================================================================

    def list_payments(self, customer_id: Optional[int] = None) -> list[Payment]:
        """List collected payments, oldest first."""
        with self.get_session() as session:
            stmt = select(Payment).order_by(Payment.collected_at)
            if customer_id is not None:
                stmt = stmt.where(Payment.customer_id == customer_id)
            payments = session.execute(stmt).scalars().all()
            for p in payments:
                session.expunge(p)
            return list(payments)


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
