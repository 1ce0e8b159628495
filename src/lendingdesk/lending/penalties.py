"""Late-return fee arithmetic.

Fees are whole minor currency units. A loan is charged for every started
day past its deadline, at the book's ``day_penalty`` rate.
"""

import math
from datetime import datetime
from typing import Iterable

from .schemas import Book

ADULT_AGE = 18


def days_late(hours_late: float) -> int:
    """Number of started days in ``hours_late`` hours.

    Example:
        >>> days_late(24.0)
        1
        >>> days_late(24.00001)
        2
        >>> days_late(0)
        0
    """
    if hours_late <= 0:
        return 0
    return math.ceil(hours_late / 24)


def late_fee(book: Book, now: datetime) -> int:
    """Fee owed for ``book`` as of ``now``. Zero when not on loan or not late."""
    if book.current_loan is None:
        return 0
    hours = (now - book.current_loan.due_at).total_seconds() / 3600
    return days_late(hours) * book.day_penalty


def total_late_fees(books: Iterable[Book], now: datetime) -> int:
    """Sum of ``late_fee`` over ``books``."""
    return sum(late_fee(book, now) for book in books)


def apply_youth_discount(total: int, age: int) -> int:
    """Halve ``total`` for customers under 18, rounding up."""
    if age < ADULT_AGE:
        return (total + 1) // 2
    return total
