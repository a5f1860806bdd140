# invoice_manager/db/engine.py

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from invoice_manager.config import get_database_url
from invoice_manager.db.schema import metadata


@lru_cache(maxsize=None)
def _engine_for(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # route functions run in FastAPI's threadpool
        connect_args["check_same_thread"] = False
    # echo=True if you want to see SQL printed in the terminal
    return create_engine(url, future=True, connect_args=connect_args)


def get_engine() -> Engine:
    return _engine_for(get_database_url())


def create_schema(engine: Engine, drop: bool = False) -> None:
    if drop:
        metadata.drop_all(engine)
    metadata.create_all(engine)
