"""Book lending transaction module.

Provides functionality for:
- Lending a book to a customer, or renewing their loan
- Lending and renewal limits
- Late-return fees, collected before a new lend or renewal
- An in-memory library service (the SQLite one lives in .library)
"""

from .schemas import Book, Customer, Loan
from .errors import (
    BookLookupFailed,
    BookNotFound,
    BookUnavailable,
    CustomerLocked,
    CustomerLookupFailed,
    ExtensionPersistFailed,
    LendFailed,
    LendingError,
    LendingLimitExceeded,
    LoanQueryFailed,
    PaymentAgeRestricted,
    PaymentFailed,
    RenewalFailed,
    RenewalLimitExceeded,
)
from .service import LibraryService, LibraryServiceError
from .manager import LendingManager, lend_book
from .memory import InMemoryLibraryService

__all__ = [
    # schemas
    "Book",
    "Customer",
    "Loan",
    # errors
    "LendingError",
    "BookNotFound",
    "BookLookupFailed",
    "BookUnavailable",
    "CustomerLookupFailed",
    "CustomerLocked",
    "LoanQueryFailed",
    "LendingLimitExceeded",
    "RenewalLimitExceeded",
    "PaymentAgeRestricted",
    "PaymentFailed",
    "ExtensionPersistFailed",
    "RenewalFailed",
    "LendFailed",
    # services
    "LibraryService",
    "LibraryServiceError",
    "InMemoryLibraryService",
    # transaction
    "LendingManager",
    "lend_book",
]
