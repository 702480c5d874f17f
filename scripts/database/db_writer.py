"""
Database Writer for the NPS Park Activities Project

This module owns every write the project makes to PostgreSQL. The source
tables (parks, thingstodo) normally belong to the external NPS connector, so
writes to them exist only to seed local and test databases from CSV exports.
The one production write is the full, atomic replacement of the joined
park_activities table.

Key Features:
- Namespace-aware table names (catalog.schema.table)
- Source table creation from SQL files in sql/schema/
- Atomic drop + create-as-select of park_activities in a single transaction
- Replace or append loading of source frames
- Table inspection and teardown helpers

Example Usage:
    # Initialize writer
    engine = get_postgres_engine()
    writer = DatabaseWriter(engine, config.get_namespace(), logger)

    # Seed source tables from CSV exports (local development only)
    writer.write_parks(parks_df, mode="replace")
    writer.write_things_to_do(things_df, mode="replace")

    # Rebuild the joined table
    row_count = writer.replace_park_activities()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy import Engine, create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError

from config.settings import config
from scripts.database.query_templates import (
    BUILD_PARK_ACTIVITIES,
    SCHEMA_DIRECTORY,
    TableNamespace,
    render_query,
)


def get_postgres_engine() -> Engine:
    """
    Create a SQLAlchemy engine for PostgreSQL using configuration.

    Returns:
        Engine: SQLAlchemy engine instance configured for PostgreSQL

    Raises:
        ConfigurationError: If any required configuration is missing
    """
    config.validate_for_database_operations()

    conn_str = config.get_database_url()
    return create_engine(conn_str, pool_pre_ping=True)


class DatabaseWriter:
    """
    Database writer for the park activities tables.

    All table names are resolved through a TableNamespace, so the writer
    never builds SQL from unvalidated text. The writer keeps no state beyond
    the engine and namespace; every operation opens its own transaction.
    """

    def __init__(
        self,
        engine: Engine,
        namespace: TableNamespace,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the database writer.

        Args:
            engine (Engine): SQLAlchemy engine for database connections
            namespace (TableNamespace): Namespace the tables live in
            logger (Optional[logging.Logger]): Logger instance for operation tracking.
                                             If None, creates a default logger.
        """
        self.engine = engine
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)

        # Source tables, created from sql/schema/<key>.sql in this order
        self.source_tables = ["parks", "thingstodo"]

    def _table_name(self, table_key: str) -> str:
        """
        Map a logical table key to its unqualified table name.

        Raises:
            ValueError: If table_key is unknown
        """
        names = {
            "parks": self.namespace.parks_table,
            "thingstodo": self.namespace.things_to_do_table,
            "park_activities": self.namespace.park_activities_table,
        }
        if table_key not in names:
            raise ValueError(f"Unknown table name: {table_key}")
        return names[table_key]

    def _qualified_name(self, table_key: str) -> str:
        return self.namespace.qualify(self._table_name(table_key))

    def _create_table_from_sql(self, table_key: str) -> None:
        """
        Create a source table from its SQL schema file.

        Args:
            table_key (str): 'parks' or 'thingstodo'

        Raises:
            Exception: If table creation fails
        """
        try:
            sql_content = render_query(
                f"{table_key}.sql", self.namespace, SCHEMA_DIRECTORY
            )

            with self.engine.begin() as conn:
                conn.execute(text(sql_content))

            self.logger.info(
                f"Successfully created table: {self._qualified_name(table_key)}"
            )

        except Exception as e:
            self.logger.error(f"Failed to create table {table_key}: {e}")
            raise

    def ensure_source_tables(self) -> None:
        """Create the parks and thingstodo tables if they do not exist."""
        with self.engine.begin() as conn:
            conn.execute(
                text(f"CREATE SCHEMA IF NOT EXISTS {self.namespace.schema_name}")
            )
        for table_key in self.source_tables:
            self._create_table_from_sql(table_key)

    def drop_all_tables(self) -> None:
        """
        Drop park_activities and the source tables.

        Raises:
            Exception: If any error occurs during table dropping
        """
        tables_to_drop = ["park_activities", "thingstodo", "parks"]

        try:
            with self.engine.begin() as conn:
                for table_key in tables_to_drop:
                    table = self._qualified_name(table_key)
                    conn.execute(text(f"DROP TABLE IF EXISTS {table} CASCADE"))
                    self.logger.info(f"Dropped table: {table}")

            self.logger.info("Successfully dropped all park activity tables")

        except Exception as e:
            self.logger.error(f"Error dropping tables: {e}")
            raise

    def reset_database(self) -> None:
        """
        Drop all tables and recreate empty source tables.

        Raises:
            Exception: If any error occurs during the reset process
        """
        self.logger.info("Starting database reset...")

        try:
            self.logger.info("Step 1: Dropping existing tables...")
            self.drop_all_tables()

            self.logger.info("Step 2: Creating source tables...")
            self.ensure_source_tables()

            self.logger.info("✅ Database reset completed successfully!")

        except Exception as e:
            self.logger.error(f"❌ Database reset failed: {e}")
            raise

    def replace_park_activities(self) -> int:
        """
        Rebuild park_activities from parks and thingstodo.

        The drop and the create-as-select run in one transaction, so readers
        see either the previous table or the complete new one. On failure the
        transaction rolls back and the previous table is left intact.

        Returns:
            int: Number of rows in the rebuilt table

        Raises:
            SQLAlchemyError: If the rebuild fails
        """
        table = self.namespace.park_activities
        build_sql = render_query(BUILD_PARK_ACTIVITIES, self.namespace)

        try:
            with self.engine.begin() as conn:
                conn.execute(text(f"DROP TABLE IF EXISTS {table}"))
                conn.execute(text(build_sql))
                row_count = conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar()

            row_count = int(row_count or 0)
            self.logger.info(f"Replaced {table} with {row_count} rows")
            return row_count

        except SQLAlchemyError as e:
            self.logger.error(f"Failed to rebuild {table}, previous table kept: {e}")
            raise

    def _write_dataframe(self, df: pd.DataFrame, table_key: str, mode: str) -> None:
        """
        Write a frame to a source table.

        In replace mode the delete and insert share one transaction.

        Args:
            df (pd.DataFrame): Rows to write
            table_key (str): 'parks' or 'thingstodo'
            mode (str): 'replace' or 'append'
        """
        table = self._qualified_name(table_key)
        try:
            with self.engine.begin() as conn:
                if mode == "replace":
                    conn.execute(text(f"DELETE FROM {table}"))
                df.to_sql(
                    self._table_name(table_key),
                    conn,
                    schema=self.namespace.schema_name,
                    if_exists="append",
                    index=False,
                )
            verb = "Replaced" if mode == "replace" else "Appended"
            self.logger.info(f"{verb} {len(df)} records in {table}")
        except Exception as e:
            self.logger.error(f"Failed to write data to {table}: {e}")
            raise

    def write_parks(self, df: pd.DataFrame, mode: str = "replace") -> None:
        """
        Write park records to the parks table.

        Args:
            df (pd.DataFrame): Park records to write
            mode (str): Write mode - 'replace' (default) or 'append'

        Raises:
            ValueError: If mode is not supported
            SQLAlchemyError: If database operations fail
        """
        if df.empty:
            self.logger.warning("No park data to save")
            return

        if mode not in ["replace", "append"]:
            raise ValueError(f"Unsupported mode '{mode}'. Use 'replace' or 'append'")

        self._write_dataframe(df, "parks", mode)

    def write_things_to_do(self, df: pd.DataFrame, mode: str = "replace") -> None:
        """
        Write things-to-do records to the thingstodo table.

        Args:
            df (pd.DataFrame): Things-to-do records to write
            mode (str): Write mode - 'replace' (default) or 'append'

        Raises:
            ValueError: If mode is not supported
            SQLAlchemyError: If database operations fail
        """
        if df.empty:
            self.logger.warning("No things-to-do data to save")
            return

        if mode not in ["replace", "append"]:
            raise ValueError(f"Unsupported mode '{mode}'. Use 'replace' or 'append'")

        self._write_dataframe(df, "thingstodo", mode)

    def truncate_tables(self, table_keys: List[str]) -> None:
        """
        Delete all rows from the specified tables.

        Args:
            table_keys (List[str]): Logical table keys to truncate

        Note:
            This operation is irreversible and will delete all data in the
            specified tables. Use with caution.
        """
        with self.engine.begin() as conn:
            for table_key in table_keys:
                table = self._qualified_name(table_key)
                self.logger.info(f"Truncating table '{table}'...")
                conn.execute(text(f"TRUNCATE TABLE {table}"))
                self.logger.info(f"Table '{table}' truncated")

    def get_table_info(self, table_key: str) -> Dict[str, Any]:
        """
        Get information about a table including row count and columns.

        Args:
            table_key (str): Logical table key

        Returns:
            Dict[str, Any]: Dictionary containing exists, row_count and columns
        """
        table_name = self._table_name(table_key)
        inspector = inspect(self.engine)

        info: Dict[str, Any] = {
            "exists": table_name
            in inspector.get_table_names(schema=self.namespace.schema_name),
            "row_count": 0,
            "columns": [],
        }

        if info["exists"]:
            try:
                with self.engine.connect() as conn:
                    result = conn.execute(
                        text(f"SELECT COUNT(*) FROM {self._qualified_name(table_key)}")
                    )
                    info["row_count"] = result.scalar()

                info["columns"] = [
                    col["name"]
                    for col in inspector.get_columns(
                        table_name, schema=self.namespace.schema_name
                    )
                ]

            except Exception as e:
                self.logger.warning(
                    f"Could not get complete info for table {table_name}: {e}"
                )

        return info
