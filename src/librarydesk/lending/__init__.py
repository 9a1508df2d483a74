"""Book lending module.

Provides functionality for:
- Checking books out to borrowers (fixed 14-day loan period)
- Returning books by record ID or by book and borrower
- Listing current loans, overdue loans and the full ledger
"""

from .models import BorrowingRecord
from .schemas import (
    BorrowingRecordResponse,
    ByBookAndBorrower,
    ByRecordId,
    CheckoutRequest,
    ReturnRequest,
    ReturnSelector,
)
from .manager import LOAN_PERIOD_DAYS, LendingManager

__all__ = [
    "LendingManager",
    "LOAN_PERIOD_DAYS",
    "BorrowingRecord",
    "BorrowingRecordResponse",
    "ByBookAndBorrower",
    "ByRecordId",
    "CheckoutRequest",
    "ReturnRequest",
    "ReturnSelector",
]
