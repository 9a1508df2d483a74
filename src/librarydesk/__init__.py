"""librarydesk - library circulation service.

Catalog, borrower and lending management behind a JWT-protected REST API,
with overdue and monthly activity reports exportable as CSV or XLSX.
"""

__version__ = "0.1.0"
