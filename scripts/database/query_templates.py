"""
SQL query templates for the park activities pipeline.

Queries live as .sql files under sql/park_activities/ and reference tables
through placeholders ({parks}, {thingstodo}, {park_activities}). They are
rendered against a TableNamespace whose catalog, schema and table names are
validated SQL identifiers, so no raw user text is ever spliced into a query.
Values such as leaderboard limits are passed as bound parameters instead.
"""

from __future__ import annotations

import os
import re

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from config.settings import ConfigurationError

SQL_DIRECTORY = os.path.join(
    os.path.dirname(__file__), "..", "..", "sql", "park_activities"
)
SCHEMA_DIRECTORY = os.path.join(os.path.dirname(__file__), "..", "..", "sql", "schema")

# Query file names
BUILD_PARK_ACTIVITIES = "build_park_activities.sql"
VERIFY_PARK_ACTIVITIES = "verify_park_activities.sql"
UNMATCHED_THINGS_TO_DO = "unmatched_things_to_do.sql"
ACTIVITY_HUB = "activity_hub.sql"
POWER_RANKINGS = "power_rankings.sql"
ADVENTURE_CATEGORIES = "adventure_categories.sql"
MALFORMED_TAGS = "malformed_tags.sql"

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
MAX_IDENTIFIER_LENGTH = 63  # PostgreSQL NAMEDATALEN - 1


def _check_identifier(value: str, field_name: str) -> str:
    if not IDENTIFIER_PATTERN.match(value):
        raise ValueError(
            f"{field_name} '{value}' is not a valid SQL identifier "
            "(letters, digits and underscores only, not starting with a digit)"
        )
    if len(value) > MAX_IDENTIFIER_LENGTH:
        raise ValueError(
            f"{field_name} '{value}' exceeds {MAX_IDENTIFIER_LENGTH} characters"
        )
    return value


class TableNamespace(BaseModel):
    """Catalog/schema namespace plus the table names used by the queries.

    The catalog is optional: on PostgreSQL the connection already selects the
    database, so most deployments only set the schema. When a catalog is given
    names render as catalog.schema.table.
    """

    model_config = ConfigDict(frozen=True)

    catalog: str | None = Field(default=None, description="Catalog identifier")
    schema_name: str = Field(..., description="Schema identifier")
    parks_table: str = Field(default="parks", description="Parks source table")
    things_to_do_table: str = Field(
        default="thingstodo", description="Things-to-do source table"
    )
    park_activities_table: str = Field(
        default="park_activities", description="Joined output table"
    )

    @field_validator("catalog")
    @classmethod
    def validate_catalog(cls, v: str | None) -> str | None:
        """Ensure the catalog, when set, is a plain identifier."""
        if v is None or v == "":
            return None
        return _check_identifier(v, "catalog")

    @field_validator(
        "schema_name", "parks_table", "things_to_do_table", "park_activities_table"
    )
    @classmethod
    def validate_identifier(cls, v: str, info: ValidationInfo) -> str:
        """Ensure schema and table names are plain identifiers."""
        return _check_identifier(v, info.field_name)

    @classmethod
    def from_settings(cls, **kwargs) -> TableNamespace:
        """
        Build a namespace, reporting invalid values as configuration errors.

        Raises:
            ConfigurationError: If any identifier fails validation
        """
        schema = kwargs.pop("schema", None)
        if schema is not None:
            kwargs["schema_name"] = schema
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid table namespace: {e}") from e

    def qualify(self, table: str) -> str:
        """Return the fully qualified name of a table in this namespace."""
        parts = [self.catalog, self.schema_name, table]
        return ".".join(part for part in parts if part)

    @property
    def parks(self) -> str:
        return self.qualify(self.parks_table)

    @property
    def thingstodo(self) -> str:
        return self.qualify(self.things_to_do_table)

    @property
    def park_activities(self) -> str:
        return self.qualify(self.park_activities_table)

    def placeholders(self) -> dict[str, str]:
        """Mapping of template placeholders to qualified table names."""
        return {
            "parks": self.parks,
            "thingstodo": self.thingstodo,
            "park_activities": self.park_activities,
        }


def load_sql_query(query_file: str, sql_directory: str = SQL_DIRECTORY) -> str:
    """
    Load a SQL query template from disk.

    Args:
        query_file (str): File name under the SQL directory
        sql_directory (str): Directory holding the templates

    Returns:
        str: The raw template text

    Raises:
        FileNotFoundError: If the template file is missing
        ValueError: If the template file is empty
    """
    sql_path = os.path.join(sql_directory, query_file)

    if not os.path.exists(sql_path):
        raise FileNotFoundError(f"SQL query file not found: {sql_path}")

    with open(sql_path, "r") as f:
        sql_content = f.read().strip()

    if not sql_content:
        raise ValueError(f"SQL query file is empty: {sql_path}")

    return sql_content


def render_query(
    query_file: str,
    namespace: TableNamespace | None,
    sql_directory: str = SQL_DIRECTORY,
) -> str:
    """
    Load a template and substitute the namespace's qualified table names.

    Args:
        query_file (str): File name under the SQL directory
        namespace (TableNamespace | None): Namespace to render against
        sql_directory (str): Directory holding the templates

    Returns:
        str: Executable SQL text

    Raises:
        ConfigurationError: If no namespace is provided
    """
    if namespace is None:
        raise ConfigurationError(
            f"Cannot render {query_file}: no catalog/schema namespace configured"
        )
    template = load_sql_query(query_file, sql_directory)
    return template.format(**namespace.placeholders())
