"""Lending manager: the lend/renew transaction."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..clock import Clock, SystemClock
from .errors import (
    BookLookupFailed,
    BookNotFound,
    BookUnavailable,
    CustomerLocked,
    CustomerLookupFailed,
    ExtensionPersistFailed,
    LendFailed,
    LendingLimitExceeded,
    LoanQueryFailed,
    PaymentAgeRestricted,
    PaymentFailed,
    RenewalFailed,
    RenewalLimitExceeded,
)
from .penalties import apply_youth_discount, total_late_fees
from .schemas import Book, Customer, Loan
from .service import LibraryService, LibraryServiceError

logger = logging.getLogger(__name__)

MIN_BOOK_ID_LENGTH = 5
LOAN_PERIOD = timedelta(days=7)
LENDING_LIMIT = 3
RENEWAL_LIMIT = 4
PAYMENT_MIN_AGE = 13


class LendingManager:
    """Lends and renews books through a ``LibraryService``."""

    def __init__(self, service: LibraryService, clock: Optional[Clock] = None):
        """Initialize lending manager.

        Args:
            service: Book, customer and payment collaborators
            clock: Source of the current instant, wall clock by default
        """
        self.service = service
        self.clock = clock or SystemClock()

    def lend_book(self, book_id: str, customer_id: int) -> Book:
        """Lend a book to a customer, or renew it if they already hold it.

        Overdue loans held by the customer are charged and extended first.

        Args:
            book_id: Book identifier
            customer_id: Customer identifier

        Returns:
            The book with its new loan state, already saved

        Raises:
            LendingError: The transaction was refused or a collaborator failed
        """
        now = self.clock.now()

        book = self._find_book(book_id)
        is_renewal = self._is_renewal(book, customer_id)
        customer = self._find_active_customer(customer_id)

        loans = self._current_loans(customer, is_renewal)
        self._settle_overdue(customer, loans, now)

        if is_renewal:
            self._renew(book, now)
        else:
            self._lend(book, customer, now)
        return book

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def _find_book(self, book_id: str) -> Book:
        logger.debug("Resolving book %s", book_id)
        if len(book_id) < MIN_BOOK_ID_LENGTH:
            logger.warning("Book id %r is too short", book_id)
            raise BookNotFound(book_id)

        try:
            book = self.service.get_book(book_id)
            if book is not None:
                return book

            # Not migrated yet, look in the legacy archive
            legacy_books = self.service.get_legacy_books()
        except LibraryServiceError as e:
            logger.warning("Lookup of book %s failed: %s", book_id, e)
            raise BookLookupFailed(book_id, e) from e

        for legacy in legacy_books:
            if legacy.id == book_id:
                logger.debug("Book %s found in legacy archive", book_id)
                return legacy

        logger.warning("Book %s not found", book_id)
        raise BookNotFound(book_id)

    @staticmethod
    def _is_renewal(book: Book, customer_id: int) -> bool:
        loan = book.current_loan
        if loan is None:
            logger.debug("Book %s is available, lending to %s", book.id, customer_id)
            return False
        if loan.customer_id != customer_id:
            logger.warning(
                "Book %s requested by %s is lent to %s", book.id, customer_id, loan.customer_id
            )
            raise BookUnavailable(book.id, loan.customer_id)
        logger.debug("Book %s is held by %s, renewing", book.id, customer_id)
        return True

    def _find_active_customer(self, customer_id: int) -> Customer:
        try:
            customer = self.service.get_customer(customer_id)
        except LibraryServiceError as e:
            logger.warning("Lookup of customer %s failed: %s", customer_id, e)
            raise CustomerLookupFailed(customer_id, e) from e

        if customer.is_locked:
            logger.warning("Customer %s is locked", customer_id)
            raise CustomerLocked(customer_id)
        return customer

    def _current_loans(self, customer: Customer, is_renewal: bool) -> list[Book]:
        try:
            loans = self.service.get_customer_loans(customer.id)
        except LibraryServiceError as e:
            logger.warning("Loan query for customer %s failed: %s", customer.id, e)
            raise LoanQueryFailed(customer.id, e) from e

        count = len(loans)
        logger.debug("Customer %s has %d books on loan", customer.id, count)
        if is_renewal:
            # The renewed book is part of the count
            if count >= RENEWAL_LIMIT:
                logger.warning("Customer %s is over the renewal limit (%d)", customer.id, count)
                raise RenewalLimitExceeded(count, RENEWAL_LIMIT)
        elif count >= LENDING_LIMIT:
            logger.warning("Customer %s is over the lending limit (%d)", customer.id, count)
            raise LendingLimitExceeded(count, LENDING_LIMIT)
        return loans

    # -------------------------------------------------------------------------
    # Overdue loans
    # -------------------------------------------------------------------------

    def _settle_overdue(self, customer: Customer, loans: list[Book], now: datetime) -> None:
        overdue = [
            b for b in loans if b.current_loan is not None and b.current_loan.is_overdue(now)
        ]
        if not overdue:
            return

        # Payment may not be collected from children
        if customer.age < PAYMENT_MIN_AGE:
            logger.warning(
                "Customer %s has %d overdue loans but is too young to pay",
                customer.id,
                len(overdue),
            )
            raise PaymentAgeRestricted(len(overdue), PAYMENT_MIN_AGE)

        total = total_late_fees(overdue, now)
        if total <= 0:
            logger.debug(
                "Customer %s has %d overdue loans, nothing to pay", customer.id, len(overdue)
            )
            return

        amount = apply_youth_discount(total, customer.age)
        logger.debug(
            "Customer %s owes %d (%d before discount) for %d overdue loans",
            customer.id,
            amount,
            total,
            len(overdue),
        )
        try:
            self.service.collect_payment(customer.id, amount)
        except LibraryServiceError as e:
            logger.warning("Payment of %d from customer %s failed: %s", amount, customer.id, e)
            raise PaymentFailed(customer.id, amount, e) from e
        logger.info(
            "Collected %d from customer %s for %d overdue loans", amount, customer.id, len(overdue)
        )

        self._extend_paid_loans(customer, overdue, now)

    def _extend_paid_loans(self, customer: Customer, books: list[Book], now: datetime) -> None:
        failed = []
        for book in books:
            book.current_loan.due_at = now + LOAN_PERIOD
            try:
                self.service.save_book(book)
            except LibraryServiceError as e:
                logger.warning("Could not save extended loan for book %s: %s", book.id, e)
                failed.append(book.id)

        if failed:
            raise ExtensionPersistFailed(customer.id, failed)

    # -------------------------------------------------------------------------
    # Lend / renew
    # -------------------------------------------------------------------------

    def _renew(self, book: Book, now: datetime) -> None:
        book.current_loan.due_at = now + LOAN_PERIOD
        try:
            self.service.save_book(book)
        except LibraryServiceError as e:
            # Any payment collected above stays collected
            logger.warning("Could not save renewal of book %s: %s", book.id, e)
            raise RenewalFailed(book.id, e) from e
        logger.info("Renewed book %s for customer %s", book.id, book.current_loan.customer_id)

    def _lend(self, book: Book, customer: Customer, now: datetime) -> None:
        book.current_loan = Loan(book_id=book.id, customer_id=customer.id, due_at=now + LOAN_PERIOD)
        try:
            self.service.save_book(book)
        except LibraryServiceError as e:
            logger.warning("Could not save loan of book %s: %s", book.id, e)
            raise LendFailed(book.id, e) from e
        logger.info("Lent book %s to customer %s", book.id, customer.id)


def lend_book(
    book_id: str,
    customer_id: int,
    service: LibraryService,
    clock: Optional[Clock] = None,
) -> Book:
    """Run one lend transaction. See ``LendingManager.lend_book``."""
    return LendingManager(service, clock).lend_book(book_id, customer_id)
