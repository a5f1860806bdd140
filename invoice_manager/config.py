# invoice_manager/config.py

import os
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

DEFAULT_DB_URL = "sqlite:///db.sqlite"  # file in project root

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))

# Vite dev server by default; comma-separated list
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DB_URL)


def cors_origins_list() -> List[str]:
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]
