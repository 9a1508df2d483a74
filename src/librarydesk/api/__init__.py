"""HTTP API module.

Flask application with one blueprint per resource:
- /auth: registration and token login
- /books, /borrowers: catalog and patron maintenance
- /borrowing: checkouts, returns and the lending ledger
- /reports: last-month reports and CSV/XLSX exports
"""

from .app import Services, create_app

__all__ = ["create_app", "Services"]
