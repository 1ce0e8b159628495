"""Pydantic schemas for books, loans and customers.

These are the objects exchanged with a ``LibraryService``. They are mutable:
a lend transaction assigns to ``Book.current_loan`` and ``Loan.due_at`` in
memory and then hands the book back for persistence.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Loan(BaseModel):
    """An active loan of one book to one customer."""

    book_id: str
    customer_id: int
    due_at: datetime

    @field_validator("due_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive deadlines as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def is_overdue(self, now: datetime) -> bool:
        """Check if the deadline is strictly before ``now``."""
        return self.due_at < now


class Book(BaseModel):
    """A lendable book. ``current_loan`` is None while the book is available."""

    id: str
    current_loan: Optional[Loan] = None
    day_penalty: int = Field(0, ge=0)

    @property
    def is_available(self) -> bool:
        return self.current_loan is None

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, on_loan={self.current_loan is not None})>"


class Customer(BaseModel):
    """A library customer."""

    id: int
    is_locked: bool = False
    age: int = Field(..., ge=0)
