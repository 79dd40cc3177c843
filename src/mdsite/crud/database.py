"""Engine construction and schema creation"""

from sqlalchemy import event
from sqlmodel import SQLModel, create_engine

# Register tables on SQLModel.metadata
from mdsite.crud import models  # noqa: F401


def make_engine(db_url: str):
    """Create an engine; SQLite connections get foreign key enforcement."""
    engine = create_engine(db_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_fk_pragma)
    return engine


def _sqlite_fk_pragma(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_db(engine) -> None:
    """Create all tables that do not exist yet."""
    SQLModel.metadata.create_all(engine)
