"""Database module for local SQLite storage."""

from .models import Book, Customer, LegacyBook, Payment
from .sqlite import Database, get_db

__all__ = [
    "Book",
    "LegacyBook",
    "Customer",
    "Payment",
    "Database",
    "get_db",
]
