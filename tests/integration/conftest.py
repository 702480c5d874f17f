"""
Integration test fixtures and configuration.

This module provides pytest fixtures for integration testing with a real
PostgreSQL 16+ database (the adventure categories query uses IS JSON).
The fixtures handle database lifecycle management, schema creation, and cleanup.

Key fixtures:
- test_db_engine: SQLAlchemy engine connected to test database
- test_namespace: Namespace for an isolated test schema
- test_db_writer: DatabaseWriter with empty source tables, dropped after each test

Usage:
    @pytest.mark.integration
    def test_my_integration(test_db_writer):
        # Use test_db_writer to interact with test database
        pass

Running integration tests:
    pytest tests/integration -v -m integration
"""

import os
import time

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from scripts.database.db_writer import DatabaseWriter
from scripts.database.query_templates import TableNamespace
from utils.logging import setup_logging


def wait_for_db(
    engine: Engine, max_retries: int = 30, retry_delay: float = 1.0
) -> None:
    """
    Wait for database to be ready by attempting connections.

    Args:
        engine: SQLAlchemy engine to test
        max_retries: Maximum number of connection attempts
        retry_delay: Delay between retries in seconds

    Raises:
        RuntimeError: If database doesn't become ready within max_retries
    """
    for attempt in range(max_retries):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            print(f"✅ Database ready after {attempt + 1} attempt(s)")
            return
        except Exception as e:
            if attempt < max_retries - 1:
                print(
                    f"⏳ Waiting for database (attempt {attempt + 1}/{max_retries})..."
                )
                time.sleep(retry_delay)
            else:
                raise RuntimeError(
                    f"Database not ready after {max_retries} attempts: {e}"
                ) from e


@pytest.fixture(scope="session")
def test_db_engine() -> Engine:
    """
    Create a SQLAlchemy engine for the test database.

    Environment Variables:
        POSTGRES_TEST_HOST: Test database host (default: localhost)
        POSTGRES_TEST_PORT: Test database port (default: 5434)
        POSTGRES_TEST_DB: Test database name (default: nps_park_activities_test)
        POSTGRES_TEST_USER: Test database user (default: postgres)
        POSTGRES_TEST_PASSWORD: Test database password (default: test_password)
    """
    host = os.getenv("POSTGRES_TEST_HOST", "localhost")
    port = os.getenv("POSTGRES_TEST_PORT", "5434")
    db = os.getenv("POSTGRES_TEST_DB", "nps_park_activities_test")
    user = os.getenv("POSTGRES_TEST_USER", "postgres")
    password = os.getenv("POSTGRES_TEST_PASSWORD", "test_password")

    conn_str = f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"
    engine = create_engine(conn_str)

    wait_for_db(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="session")
def test_namespace() -> TableNamespace:
    """Namespace for the schema integration tests run in."""
    return TableNamespace(schema_name=os.getenv("POSTGRES_TEST_SCHEMA", "nps_test"))


@pytest.fixture(scope="function")
def test_db_writer(test_db_engine: Engine, test_namespace: TableNamespace):
    """
    Provide a DatabaseWriter over a clean schema for each test.

    This fixture:
    1. Creates empty parks and thingstodo tables from sql/schema/
    2. Yields the writer to the test
    3. Drops all tables after the test completes
    """
    logger = setup_logging(logger_name="test_db", log_level="INFO")
    writer = DatabaseWriter(test_db_engine, test_namespace, logger)

    logger.info("📦 Creating test database schema...")
    writer.reset_database()

    yield writer

    logger.info("🧹 Cleaning up test database...")
    writer.drop_all_tables()
