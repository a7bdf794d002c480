"""SQLAlchemy tables backing the seeded collections.

Each collection is one table holding the document as JSON, with the few
columns the seeder queries on lifted out.
"""
from functools import lru_cache
from typing import Dict

from sqlalchemy import JSON, Column, DateTime, Engine, MetaData, String, Table, create_engine, func

from ..core_settings import get_settings
from .constants import COLLECTIONS

metadata = MetaData()


def _collection_table(name: str) -> Table:
    return Table(
        name,
        metadata,
        Column("id", String(24), primary_key=True),
        Column("email", String(255), index=True, nullable=True),
        Column("role", String(32), nullable=True),
        Column("document", JSON, nullable=False),
        Column("created_at", DateTime(timezone=True), server_default=func.now()),
    )


TABLES: Dict[str, Table] = {name: _collection_table(name) for name in COLLECTIONS}


def init_models(engine: Engine) -> None:
    metadata.create_all(engine)


@lru_cache
def get_engine() -> Engine:
    return create_engine(get_settings().seed_database_url, pool_pre_ping=True)
