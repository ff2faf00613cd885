# utils/db.py
"""
Database Access for the Strategic Document Store

Version: 1.0.0
Features:
- One shared SQLAlchemy engine per process (double-checked locking)
- SQLite by default (file is created on first use), pooled engines for
  server databases given through DATABASE_URL
- kpi_system table bootstrap
- Health check, transaction scope and read helper
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from .config import DatabaseConfig, config

logger = logging.getLogger(__name__)

DOCUMENT_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS kpi_system (
    doc_id VARCHAR(100) PRIMARY KEY,
    payload TEXT NOT NULL,
    updated_at VARCHAR(32)
)
"""

# ==================== SHARED ENGINE ====================

_engine: Optional[Engine] = None
_engine_lock = threading.Lock()


def get_db_engine() -> Engine:
    """
    Shared engine built from the configured DATABASE_URL.

    Streamlit reruns the page script on every interaction, so the engine
    is created once and reused by every rerun and thread.
    """
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = build_engine(config.get_db_config())

    return _engine


def build_engine(db_config: DatabaseConfig) -> Engine:
    """
    Create an engine for a DatabaseConfig.

    Args:
        db_config: URL plus pool settings

    Returns:
        SQLAlchemy Engine
    """
    logger.info(f"🔌 Creating database engine: {db_config.masked_url()}")

    if db_config.is_sqlite:
        database = make_url(db_config.url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        # Streamlit serves sessions from several threads
        engine = create_engine(
            db_config.url,
            connect_args={"check_same_thread": False},
            echo=False
        )
    else:
        engine = create_engine(
            db_config.url,
            pool_size=db_config.pool_size,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=db_config.pool_recycle,
            pool_pre_ping=True,
            echo=False
        )

    logger.info("✅ Database engine ready")
    return engine


def reset_db_engine():
    """Dispose the shared engine; the next call to get_db_engine() rebuilds it."""
    global _engine

    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
            logger.info("🔄 Database engine disposed")
        _engine = None


# ==================== SCHEMA & HEALTH ====================

def ensure_document_table(engine: Optional[Engine] = None):
    """Create the kpi_system document table when it does not exist."""
    with get_transaction(engine) as conn:
        conn.execute(text(DOCUMENT_TABLE_DDL))


def check_db_connection(engine: Optional[Engine] = None) -> Tuple[bool, Optional[str]]:
    """
    Check if the document store is reachable

    Returns:
        Tuple of (is_connected: bool, error_message: str or None)
    """
    try:
        engine = engine or get_db_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except OperationalError as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False, "Cannot open the database. Please check DATABASE_URL."
    except SQLAlchemyError as e:
        logger.error(f"❌ Database error: {e}")
        return False, f"Database error: {e}"


# ==================== TRANSACTIONS & QUERIES ====================

@contextmanager
def get_transaction(engine: Optional[Engine] = None):
    """
    Connection inside a transaction: committed when the block exits
    normally, rolled back when it raises.

    Usage:
        with get_transaction() as conn:
            conn.execute(text("UPDATE kpi_system SET ..."), params)
    """
    engine = engine or get_db_engine()
    with engine.begin() as conn:
        yield conn


def execute_query(query: str, params: Dict = None, engine: Optional[Engine] = None) -> List[Dict[str, Any]]:
    """
    Run a SELECT and return rows as dicts

    Args:
        query: SQL with :named parameters
        params: Parameter values
        engine: Engine to use (defaults to the shared engine)
    """
    engine = engine or get_db_engine()

    with engine.connect() as conn:
        result = conn.execute(text(query), params or {})
        return [dict(row._mapping) for row in result]


# ==================== EXPORTS ====================

__all__ = [
    'DOCUMENT_TABLE_DDL',
    'get_db_engine',
    'build_engine',
    'reset_db_engine',
    'ensure_document_table',
    'check_db_connection',
    'get_transaction',
    'execute_query',
]
