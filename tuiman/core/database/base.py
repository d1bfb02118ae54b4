"""Base database infrastructure with a SQLAlchemy engine."""

from pathlib import Path

from sqlalchemy import MetaData, event
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import Engine

from tuiman.utils.logging import get_logger

logger = get_logger(__name__)

# Shared metadata for all tables
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)


def create_engine(db_path: Path, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the SQLite history file.

    Args:
        db_path: Path to SQLite database file
        echo: Enable SQL query logging (for debugging)

    Returns:
        Configured engine
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = sa_create_engine(f"sqlite:///{db_path}", echo=echo)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        """Set SQLite pragmas for performance and safety."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA temp_store=MEMORY")
        cursor.close()

    logger.info(f"Database engine created: {db_path}")
    return engine
