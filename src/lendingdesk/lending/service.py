"""The capability interface a lend transaction runs against.

A ``LibraryService`` fronts the primary book store, the legacy book
archive, the customer directory and the payment processor. Implementations
do not subclass ``LibraryService``; any object with these methods will do.
They report failures by raising ``LibraryServiceError``.
"""

from typing import Optional, Protocol

from .schemas import Book, Customer


class LibraryServiceError(Exception):
    """A collaborator call failed."""


class LibraryService(Protocol):
    """Book, customer and payment operations used by ``LendingManager``."""

    def get_book(self, book_id: str) -> Optional[Book]:
        """Look a book up in the primary store. None if absent."""
        ...

    def get_legacy_books(self) -> list[Book]:
        """Return every book in the legacy archive."""
        ...

    def get_customer(self, customer_id: int) -> Customer:
        """Look a customer up. Raises LibraryServiceError on failure."""
        ...

    def get_customer_loans(self, customer_id: int) -> list[Book]:
        """Return the books currently on loan to a customer."""
        ...

    def collect_payment(self, customer_id: int, amount: int) -> None:
        """Charge a customer ``amount`` minor currency units."""
        ...

    def save_book(self, book: Book) -> None:
        """Persist a book together with its loan state."""
        ...
