"""SQLite-backed ``LibraryService``.

Reads and writes the tables in ``lendingdesk.db.models``. Each call runs in
its own session. Database errors come out as ``LibraryServiceError``.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..db.models import Book, LegacyBook, Payment
from ..db.sqlite import Database, apply_book, get_db, record_to_book
from .schemas import Book as BookSchema
from .schemas import Customer as CustomerSchema
from .service import LibraryServiceError

logger = logging.getLogger(__name__)


class SqliteLibraryService:
    """Library service over the local SQLite store."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize the service.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def get_book(self, book_id: str) -> Optional[BookSchema]:
        try:
            with self.db.get_session() as session:
                record = session.get(Book, book_id)
                return record_to_book(record) if record else None
        except SQLAlchemyError as e:
            raise LibraryServiceError(f"Book lookup failed: {e}") from e

    def get_legacy_books(self) -> list[BookSchema]:
        try:
            with self.db.get_session() as session:
                records = session.execute(select(LegacyBook).order_by(LegacyBook.id)).scalars()
                return [record_to_book(r) for r in records]
        except SQLAlchemyError as e:
            raise LibraryServiceError(f"Legacy book query failed: {e}") from e

    def get_customer(self, customer_id: int) -> CustomerSchema:
        try:
            customer = self.db.get_customer(customer_id)
        except SQLAlchemyError as e:
            raise LibraryServiceError(f"Customer lookup failed: {e}") from e
        if customer is None:
            raise LibraryServiceError(f"No customer with id {customer_id}")
        return customer

    def get_customer_loans(self, customer_id: int) -> list[BookSchema]:
        try:
            return self.db.list_loans(customer_id)
        except SQLAlchemyError as e:
            raise LibraryServiceError(f"Loan query failed: {e}") from e

    def collect_payment(self, customer_id: int, amount: int) -> None:
        if amount <= 0:
            raise LibraryServiceError(f"Invalid payment amount: {amount}")
        try:
            with self.db.get_session() as session:
                session.add(Payment(customer_id=customer_id, amount=amount))
        except SQLAlchemyError as e:
            raise LibraryServiceError(f"Payment could not be recorded: {e}") from e
        logger.debug("Recorded payment of %d for customer %s", amount, customer_id)

    def save_book(self, book: BookSchema) -> None:
        try:
            with self.db.get_session() as session:
                record = session.get(Book, book.id) or session.get(LegacyBook, book.id)
                if record is None:
                    record = Book(id=book.id)
                    session.add(record)
                apply_book(record, book)
        except SQLAlchemyError as e:
            raise LibraryServiceError(f"Could not save book {book.id}: {e}") from e
