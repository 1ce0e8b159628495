"""In-memory ``LibraryService`` for tests and demos.

Books and customers are kept in plain containers and handed out by
reference, so a test can inspect the very objects a transaction mutated.
Every call is recorded in ``calls``; failures are injected by setting the
``*_error`` attributes or ``save_errors``.
"""

from typing import Any, Optional

from .schemas import Book, Customer
from .service import LibraryServiceError


class InMemoryLibraryService:
    """Dictionary-backed library service."""

    def __init__(self) -> None:
        self.books: dict[str, Book] = {}
        self.legacy_books: list[Book] = []
        self.customers: dict[int, Customer] = {}

        # Recorded interactions
        self.calls: list[tuple[Any, ...]] = []
        self.payments: list[tuple[int, int]] = []
        self.saved: list[Book] = []

        # Failure injection
        self.book_error: Optional[Exception] = None
        self.legacy_error: Optional[Exception] = None
        self.customer_error: Optional[Exception] = None
        self.loans_error: Optional[Exception] = None
        self.payment_error: Optional[Exception] = None
        self.save_errors: dict[str, Exception] = {}

    # -------------------------------------------------------------------------
    # Setup helpers
    # -------------------------------------------------------------------------

    def add_book(self, book: Book) -> Book:
        self.books[book.id] = book
        return book

    def add_legacy_book(self, book: Book) -> Book:
        self.legacy_books.append(book)
        return book

    def add_customer(self, customer: Customer) -> Customer:
        self.customers[customer.id] = customer
        return customer

    def call_names(self) -> list[str]:
        """Names of the service methods called so far, in order."""
        return [call[0] for call in self.calls]

    # -------------------------------------------------------------------------
    # LibraryService
    # -------------------------------------------------------------------------

    def get_book(self, book_id: str) -> Optional[Book]:
        self.calls.append(("get_book", book_id))
        if self.book_error is not None:
            raise self.book_error
        return self.books.get(book_id)

    def get_legacy_books(self) -> list[Book]:
        self.calls.append(("get_legacy_books",))
        if self.legacy_error is not None:
            raise self.legacy_error
        return list(self.legacy_books)

    def get_customer(self, customer_id: int) -> Customer:
        self.calls.append(("get_customer", customer_id))
        if self.customer_error is not None:
            raise self.customer_error
        customer = self.customers.get(customer_id)
        if customer is None:
            raise LibraryServiceError(f"No customer with id {customer_id}")
        return customer

    def get_customer_loans(self, customer_id: int) -> list[Book]:
        self.calls.append(("get_customer_loans", customer_id))
        if self.loans_error is not None:
            raise self.loans_error
        return [
            b
            for b in [*self.books.values(), *self.legacy_books]
            if b.current_loan is not None and b.current_loan.customer_id == customer_id
        ]

    def collect_payment(self, customer_id: int, amount: int) -> None:
        self.calls.append(("collect_payment", customer_id, amount))
        if self.payment_error is not None:
            raise self.payment_error
        self.payments.append((customer_id, amount))

    def save_book(self, book: Book) -> None:
        self.calls.append(("save_book", book.id))
        error = self.save_errors.get(book.id)
        if error is not None:
            raise error
        self.saved.append(book)
