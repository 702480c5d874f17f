"""
Configuration settings for the NPS Park Activities project.

This module centralizes all configuration values and provides a single source of truth for all
configurable parameters.
"""

import os
from typing import Optional


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""


class Config:
    """
    Central configuration class for the NPS Park Activities project.

    This class consolidates all configuration values including database
    connections, the catalog/schema namespace the source tables live in,
    table names, output paths and logging parameters.
    """

    # Database Configuration
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "nps_data"
    DB_USER: str = "postgres"
    DB_PASSWORD: Optional[str] = None
    DB_SSLMODE: Optional[str] = None

    # Namespace the connector writes into
    CATALOG: Optional[str] = None
    SCHEMA: Optional[str] = None

    # Table names
    PARKS_TABLE: str = "parks"
    THINGS_TO_DO_TABLE: str = "thingstodo"
    PARK_ACTIVITIES_TABLE: str = "park_activities"

    # Leaderboard sizes (fixed)
    POWER_RANKINGS_LIMIT: int = 15
    ADVENTURE_CATEGORIES_LIMIT: int = 15

    # Number of malformed tag ids to include in warnings
    MALFORMED_TAGS_SAMPLE_SIZE: int = 5

    # File Paths
    OUTPUT_DIRECTORY: str = "park_activities_results"
    PARK_ACTIVITIES_LOG_FILE: str = "logs/park_activities.log"
    DASHBOARD_LOG_FILE: str = "logs/dashboard.log"
    DATABASE_LOG_FILE: str = "logs/database.log"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3

    def __init__(self):
        """Initialize configuration by loading from environment variables."""
        self._load_from_env()
        self._validate()

    def _load_from_env(self):
        """Load configuration values from environment variables."""
        # Database settings
        db_host = os.getenv("POSTGRES_HOST")
        if db_host:
            self.DB_HOST = db_host

        db_port = os.getenv("POSTGRES_PORT")
        if db_port:
            self.DB_PORT = int(db_port)

        db_name = os.getenv("POSTGRES_DB")
        if db_name:
            self.DB_NAME = db_name

        db_user = os.getenv("POSTGRES_USER")
        if db_user:
            self.DB_USER = db_user

        db_password = os.getenv("POSTGRES_PASSWORD")
        if db_password:
            self.DB_PASSWORD = db_password

        db_sslmode = os.getenv("POSTGRES_SSLMODE")
        if db_sslmode:
            self.DB_SSLMODE = db_sslmode

        # Namespace settings
        catalog = os.getenv("NPS_CATALOG")
        if catalog:
            self.CATALOG = catalog

        schema = os.getenv("NPS_SCHEMA")
        if schema:
            self.SCHEMA = schema

        # Optional table name overrides
        parks_table = os.getenv("PARKS_TABLE")
        if parks_table:
            self.PARKS_TABLE = parks_table

        things_to_do_table = os.getenv("THINGS_TO_DO_TABLE")
        if things_to_do_table:
            self.THINGS_TO_DO_TABLE = things_to_do_table

        park_activities_table = os.getenv("PARK_ACTIVITIES_TABLE")
        if park_activities_table:
            self.PARK_ACTIVITIES_TABLE = park_activities_table

        output_directory = os.getenv("OUTPUT_DIRECTORY")
        if output_directory:
            self.OUTPUT_DIRECTORY = output_directory

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            self.LOG_LEVEL = log_level

    def _validate(self):
        """
        Validate configuration values that never depend on the run mode.

        Raises:
            ConfigurationError: If a value is malformed.
        """
        if self.LOG_LEVEL.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ConfigurationError(
                f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR (got '{self.LOG_LEVEL}')"
            )

    def validate_for_database_operations(self):
        """
        Validate the settings needed to open a database connection.

        Raises:
            ConfigurationError: If required database configuration is missing.
        """
        if not self.DB_PASSWORD:
            raise ConfigurationError(
                "POSTGRES_PASSWORD environment variable is required. "
                "Please set it in your .env file or environment."
            )

    def get_namespace(self):
        """
        Build the typed catalog/schema namespace the source tables live in.

        Returns:
            TableNamespace: Validated namespace with this config's table names

        Raises:
            ConfigurationError: If NPS_SCHEMA is unset, NPS_CATALOG names a database other than
                POSTGRES_DB, or any identifier is invalid
        """
        from scripts.database.query_templates import TableNamespace

        if not self.SCHEMA:
            raise ConfigurationError(
                "NPS_SCHEMA environment variable is required. "
                "Set it to the schema the NPS connector writes parks and thingstodo into."
            )

        # Catalog-qualified names only resolve inside the connected database
        if self.CATALOG and self.CATALOG != self.DB_NAME:
            raise ConfigurationError(
                f"NPS_CATALOG '{self.CATALOG}' does not match POSTGRES_DB '{self.DB_NAME}'. "
                "Leave NPS_CATALOG unset or set it to the database being connected to."
            )

        return TableNamespace.from_settings(
            catalog=self.CATALOG,
            schema=self.SCHEMA,
            parks_table=self.PARKS_TABLE,
            things_to_do_table=self.THINGS_TO_DO_TABLE,
            park_activities_table=self.PARK_ACTIVITIES_TABLE,
        )

    def get_database_url(self) -> str:
        """
        Generate database connection URL.

        Returns:
            str: PostgreSQL connection URL
        """
        db_url = f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        if self.DB_SSLMODE:
            db_url += f"?sslmode={self.DB_SSLMODE}"
        return db_url


# Global configuration instance
config = Config()
