# invoice_manager/__init__.py
"""
Invoice Manager API: clients, invoices and the purchase orders that link them.

Run the server with the console script:
    invoice-manager

or through uvicorn, which picks up the app re-exported here:
    uvicorn invoice_manager:app --reload
"""

__version__ = "0.1.0"

from .main import app  # noqa: E402

__all__ = ["app", "__version__"]
