"""
Database connection utilities for the API.

Reuses the existing project configuration for database access.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from config.settings import config
from scripts.database.query_templates import TableNamespace

# Global engine instance (created once, reused)
_engine = None


def get_db_engine() -> Engine:
    """
    Get or create a SQLAlchemy engine for database connections.

    Uses the existing config instance from the project for database credentials.
    The engine is created once and reused across requests.

    Returns:
        SQLAlchemy Engine instance

    Raises:
        ConfigurationError: If database credentials are missing
    """
    global _engine

    if _engine is None:
        config.validate_for_database_operations()

        # pool_pre_ping=True checks if connections are alive before using them
        _engine = create_engine(config.get_database_url(), pool_pre_ping=True)

    return _engine


def get_namespace() -> TableNamespace:
    """
    Namespace the park activity tables live in.

    Raises:
        ConfigurationError: If NPS_SCHEMA is unset or invalid
    """
    return config.get_namespace()
