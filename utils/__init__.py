# utils/__init__.py
"""
Shared Utilities Package for the Strategic Performance App

This package contains common utilities shared across all pages:
- config: Configuration management (local .env + Streamlit Cloud secrets)
- db: Database connection management
- strategic_performance: indicator engine, reports and dashboard components

Usage:
    from utils.db import get_db_engine, execute_query
    from utils.config import config

    # Or import commonly used items directly
    from utils import get_db_engine, config
"""

# Configuration
from .config import (
    config,
    Config,
    DatabaseConfig,
    IS_RUNNING_ON_CLOUD,
    DB_CONFIG,
    APP_CONFIG,
)

# Database
from .db import (
    get_db_engine,
    build_engine,
    reset_db_engine,
    ensure_document_table,
    check_db_connection,
    get_transaction,
    execute_query,
)

__all__ = [
    # Config
    'config',
    'Config',
    'DatabaseConfig',
    'IS_RUNNING_ON_CLOUD',
    'DB_CONFIG',
    'APP_CONFIG',

    # Database
    'get_db_engine',
    'build_engine',
    'reset_db_engine',
    'ensure_document_table',
    'check_db_connection',
    'get_transaction',
    'execute_query',
]

__version__ = '1.0.0'
