"""Book catalog module.

Provides functionality for:
- Registering books with unique ISBNs
- Editing and removing catalog entries
- Searching by title, author or ISBN
"""

from .models import Book
from .schemas import BookCreate, BookResponse, BookUpdate
from .manager import CatalogManager

__all__ = [
    "CatalogManager",
    "Book",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
]
