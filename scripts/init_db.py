# scripts/init_db.py
"""
Drop and recreate the clients/invoices tables in DATABASE_URL.

Usage:
    python -m scripts.init_db
"""

from invoice_manager.config import get_database_url
from invoice_manager.db.engine import create_schema, get_engine


def main():
    create_schema(get_engine(), drop=True)
    print(f"DB schema created at {get_database_url()}.")


if __name__ == "__main__":
    main()
