"""SQLAlchemy ORM models for the local SQLite library store.

Tables:
- books: Primary book store
- legacy_books: Books not yet migrated from the old archive
- customers: Customer directory
- payments: Collected late-return payments

A book's current loan is stored inline on its row (``loan_customer_id``,
``loan_due_at``); both columns are NULL while the book is available.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BookColumnsMixin:
    """Columns shared by the primary and legacy book tables."""

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    day_penalty: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Current loan
    loan_customer_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    loan_due_at: Mapped[Optional[str]] = mapped_column(String(32))  # ISO datetime

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, onupdate=utc_now_iso)


class Book(BookColumnsMixin, Base):
    """Book model - the primary book store."""

    __tablename__ = "books"

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, loan_customer_id={self.loan_customer_id})>"


class LegacyBook(BookColumnsMixin, Base):
    """Book model - the legacy archive."""

    __tablename__ = "legacy_books"

    def __repr__(self) -> str:
        return f"<LegacyBook(id={self.id}, loan_customer_id={self.loan_customer_id})>"


class Customer(Base):
    """Customer model."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[Optional[str]] = mapped_column(String(200))
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, onupdate=utc_now_iso)

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, age={self.age}, locked={self.is_locked})>"


class Payment(Base):
    """Payment model - one collected late-return payment."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # minor currency units
    collected_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, customer_id={self.customer_id}, amount={self.amount})>"
