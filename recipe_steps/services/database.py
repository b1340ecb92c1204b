"""
Engine, session and schema management for the step store.

Every service function either receives a session from its caller or opens
one through session_scope(). Tests swap the session factory by patching
get_session_factory() on this module.

SQLite connections get ``PRAGMA foreign_keys=ON`` so that deleting a recipe
cascades to its steps and step output uses.
"""

from contextlib import contextmanager
import logging
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..models.base import Base
from ..utils.config import get_config

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("recipes", "recipe_steps", "step_output_uses")

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for each new SQLite connection."""
    if type(dbapi_connection).__module__.split(".")[0] not in ("sqlite3", "pysqlite2"):
        return

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Build an engine for the given URL, or for the configured one.

    In-memory SQLite shares a single connection across threads; file-based
    SQLite waits up to 30 seconds for the write lock held by another writer.

    Args:
        database_url: SQLAlchemy URL; defaults to get_config().database_url
        echo: Log every SQL statement

    Returns:
        Engine
    """
    if database_url is None:
        config = get_config()
        config.ensure_directories()
        database_url = config.database_url

    logger.info(f"Creating database engine: {database_url}")

    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo)

    if ":memory:" in database_url or "mode=memory" in database_url:
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": 30},
    )


def init_database(engine: Optional[Engine] = None) -> None:
    """Create any missing tables; existing tables are left alone."""
    engine = engine or get_engine()

    # Registers every model on Base.metadata
    from ..models import recipe, step_output_use  # noqa: F401

    logger.info("Creating step store tables")
    Base.metadata.create_all(engine)


def get_engine(force_recreate: bool = False) -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    """Return the process-wide sessionmaker (objects stay loaded after commit)."""
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Run a unit of work in one transaction.

    Commits when the block exits normally, rolls back and re-raises on any
    exception, and closes the session either way. Validation and the write
    it guards belong in the same block.

    Example:
        with session_scope() as session:
            result = validate_step_deletion(recipe_id, 2, session=session)
            if result.valid:
                delete_step(recipe_id, 2, session=session)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database() -> bool:
    """
    Check that the configured database is reachable and has the step tables.

    Returns:
        False if the database cannot be inspected or a table is missing
    """
    try:
        tables = set(inspect(get_engine()).get_table_names())
    except Exception as e:
        logger.error(f"Database verification failed: {e}")
        return False

    missing = [table for table in REQUIRED_TABLES if table not in tables]
    if missing:
        logger.warning(f"Missing tables: {', '.join(missing)}")
    return not missing


def close_connections() -> None:
    """Dispose of the engine; the next get_engine() call builds a new one."""
    global _engine, _session_factory

    _session_factory = None
    if _engine is not None:
        _engine.dispose()
        _engine = None

    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Create the database (file and tables) for the configured environment."""
    config = get_config()

    if config.database_exists():
        logger.info(f"Using database: {config.database_url}")
    else:
        logger.info(f"Creating new database at: {config.database_path}")

    init_database(get_engine())

    if verify_database():
        logger.info("Database initialized and verified")
    else:
        logger.warning("Database verification failed after table creation")
