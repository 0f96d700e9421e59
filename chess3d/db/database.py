"""Generate database session"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chess3d.core.config import Settings, get_settings
from chess3d.db.schema import Base


@lru_cache
def build_engine(settings: Settings) -> Engine:
    """One engine (and connection pool) per configuration. Ensures all tables are created."""
    engine = create_engine(settings.database_url, echo=settings.db_echo)
    Base.metadata.create_all(bind=engine)
    return engine


@lru_cache
def session_factory(settings: Settings) -> sessionmaker[Session]:
    return sessionmaker(bind=build_engine(settings))


def get_db(settings: Settings | None = None) -> Generator[Session, None, None]:
    session_local = session_factory(settings or get_settings())
    db = session_local()
    try:
        yield db
    finally:
        db.close()
