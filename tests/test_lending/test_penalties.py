"""Tests for late-fee arithmetic."""

import pytest
from datetime import timedelta

from lendingdesk.lending.penalties import (
    apply_youth_discount,
    days_late,
    late_fee,
    total_late_fees,
)
from lendingdesk.lending.schemas import Book


class TestDaysLate:
    """Tests for days_late."""

    @pytest.mark.parametrize(
        "hours,expected",
        [
            (1, 1),
            (24, 1),
            (0.1, 1),
            (24.00001, 2),
            (48, 2),
            (0, 0),
            (176, 8),
        ],
    )
    def test_started_days(self, hours, expected):
        """Test every started day counts."""
        assert days_late(hours) == expected

    def test_negative_hours(self):
        """Test a deadline in the future is not late."""
        assert days_late(-5) == 0


class TestLateFee:
    """Tests for late_fee and total_late_fees."""

    def test_fee_per_started_day(self, loan_book, now):
        """Test the fee is days late times the day penalty."""
        book = loan_book("late1", due_in=-timedelta(days=2, hours=1), day_penalty=5)
        assert late_fee(book, now) == 15

    def test_not_late(self, loan_book, now):
        """Test a loan due in the future costs nothing."""
        book = loan_book("ok001", due_in=timedelta(hours=3))
        assert late_fee(book, now) == 0

    def test_exactly_at_deadline(self, loan_book, now):
        """Test a loan due right now costs nothing."""
        assert late_fee(loan_book("edge1", due_in=timedelta(0)), now) == 0

    def test_book_without_loan(self, now):
        """Test an available book costs nothing."""
        assert late_fee(Book(id="free1", day_penalty=10), now) == 0

    def test_total(self, loan_book, now):
        """Test fees are summed across books."""
        books = [
            loan_book("late1", due_in=-timedelta(days=1), day_penalty=10),
            loan_book("late2", due_in=-timedelta(minutes=30), day_penalty=3),
            loan_book("ok001", due_in=timedelta(days=1), day_penalty=100),
        ]
        assert total_late_fees(books, now) == 13


class TestYouthDiscount:
    """Tests for apply_youth_discount."""

    @pytest.mark.parametrize(
        "total,age,expected",
        [
            (15, 17, 8),
            (15, 18, 15),
            (20, 13, 10),
            (1, 16, 1),
            (0, 15, 0),
            (41, 93, 41),
        ],
    )
    def test_discount(self, total, age, expected):
        """Test minors pay half, rounded up."""
        assert apply_youth_discount(total, age) == expected
