"""Library patron module.

Provides functionality for:
- Registering borrowers with unique email addresses
- Editing and removing borrower profiles
- Searching by name or email
"""

from .models import Borrower
from .schemas import BorrowerCreate, BorrowerResponse, BorrowerUpdate
from .manager import PatronManager

__all__ = [
    "PatronManager",
    "Borrower",
    "BorrowerCreate",
    "BorrowerUpdate",
    "BorrowerResponse",
]
