"""Exceptions raised by a lend transaction.

Every refusal or failure of ``LendingManager.lend_book`` is a
``LendingError``. Errors that wrap a collaborator failure keep it as
``cause`` and are raised with ``from`` so the chain is preserved.
"""

from typing import Iterable


class LendingError(Exception):
    """Base class for lend transaction failures."""


class WrappedLendingError(LendingError):
    """A collaborator failure reported with a stage-specific message."""

    stage_message = "Lending failed"

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"{self.stage_message}: {cause}")


class BookNotFound(LendingError):
    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__("Book not found")


class BookLookupFailed(WrappedLendingError):
    stage_message = "Cannot retrieve book"

    def __init__(self, book_id: str, cause: BaseException):
        self.book_id = book_id
        super().__init__(cause)


class BookUnavailable(LendingError):
    """The book is on loan to someone else."""

    def __init__(self, book_id: str, customer_id: int):
        self.book_id = book_id
        self.customer_id = customer_id
        super().__init__(f"Book is currently lent to customer {customer_id}")


class CustomerLookupFailed(WrappedLendingError):
    stage_message = "Customer not found"

    def __init__(self, customer_id: int, cause: BaseException):
        self.customer_id = customer_id
        super().__init__(cause)


class CustomerLocked(LendingError):
    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__("Customer account is locked")


class LoanQueryFailed(WrappedLendingError):
    stage_message = "Cannot retrieve current loans"

    def __init__(self, customer_id: int, cause: BaseException):
        self.customer_id = customer_id
        super().__init__(cause)


class LendingLimitExceeded(LendingError):
    def __init__(self, count: int, limit: int = 3):
        self.count = count
        self.limit = limit
        super().__init__(f"Customer already has {count} books on loan, {limit} is the limit")


class RenewalLimitExceeded(LendingError):
    def __init__(self, count: int, limit: int = 4):
        self.count = count
        self.limit = limit
        super().__init__(
            f"Cannot renew when more than {limit - 1} other books are on loan, "
            f"customer already has {count} books on loan"
        )


class PaymentAgeRestricted(LendingError):
    """Overdue fees exist but the customer is too young to be charged."""

    def __init__(self, count: int, min_age: int = 13):
        self.count = count
        self.min_age = min_age
        super().__init__(
            f"Cannot collect payment for {count} books, customer is younger than {min_age}"
        )


class PaymentFailed(WrappedLendingError):
    stage_message = "Payment failed"

    def __init__(self, customer_id: int, amount: int, cause: BaseException):
        self.customer_id = customer_id
        self.amount = amount
        super().__init__(cause)


class ExtensionPersistFailed(LendingError):
    """Payment went through but some extended deadlines were not saved.

    Nothing is rolled back. The listed books need their extension
    registered by hand.
    """

    def __init__(self, customer_id: int, book_ids: Iterable[str]):
        self.customer_id = customer_id
        self.book_ids = list(book_ids)
        super().__init__(
            "Saving extended date failed, manually register extension for "
            f"customer {customer_id} on books {', '.join(self.book_ids)}"
        )


class RenewalFailed(WrappedLendingError):
    stage_message = "Renewal failed"

    def __init__(self, book_id: str, cause: BaseException):
        self.book_id = book_id
        super().__init__(cause)


class LendFailed(WrappedLendingError):
    stage_message = "Lend failed"

    def __init__(self, book_id: str, cause: BaseException):
        self.book_id = book_id
        super().__init__(cause)
