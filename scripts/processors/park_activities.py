#!/usr/bin/env python3
"""
Park Activities Processor

This script builds the park_activities join table and computes the three
dashboard aggregates from the NPS connector's parks and thingstodo tables.

Processing Steps:
1. Join Builder - Replace park_activities with the inner join of thingstodo
   and parks on park name (atomic full overwrite)
2. Verification - Total rows, distinct parks and distinct activities
3. Activity Hub - Activities per park location, for the map widget
4. Power Rankings - Top 15 parks by activity count
5. Adventure Categories - Top 15 activity tags by number of parks

The same steps can run against CSV exports of the two source tables, in which
case everything is computed in pandas and no database is needed.

Usage:
    # Rebuild park_activities and compute aggregates from the database
    python -m scripts.processors.park_activities

    # Compute aggregates from the existing park_activities table
    python -m scripts.processors.park_activities --skip-build

    # Offline mode from CSV exports
    python -m scripts.processors.park_activities --parks-csv parks.csv --thingstodo-csv thingstodo.csv
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from typing import Any

import pandas as pd
from dotenv import load_dotenv
from sqlalchemy import Engine, text

# Load environment variables before importing config-dependent modules
load_dotenv()

from config.settings import ConfigurationError, config
from scripts.database.db_writer import DatabaseWriter, get_postgres_engine
from scripts.database.query_templates import (
    ACTIVITY_HUB,
    ADVENTURE_CATEGORIES,
    MALFORMED_TAGS,
    POWER_RANKINGS,
    UNMATCHED_THINGS_TO_DO,
    VERIFY_PARK_ACTIVITIES,
    TableNamespace,
    render_query,
)
from scripts.processors import transforms
from scripts.processors.park_activity_schemas import (
    VERIFICATION_COLUMNS,
    ActivityHubSchema,
    AdventureCategoriesSchema,
    ParkActivitiesSchema,
    ParksSchema,
    PowerRankingsSchema,
    ThingsToDoSchema,
)
from utils.logging import setup_park_activities_logging

AGGREGATE_SCHEMAS = {
    "activity_hub": ActivityHubSchema,
    "power_rankings": PowerRankingsSchema,
    "adventure_categories": AdventureCategoriesSchema,
}


def load_parks_csv(path: str) -> pd.DataFrame:
    """
    Load and validate a CSV export of the parks table.

    Raises:
        pandera.errors.SchemaError: If the export fails validation
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])
    return ParksSchema.validate(df)


def load_things_to_do_csv(path: str) -> pd.DataFrame:
    """
    Load and validate a CSV export of the thingstodo table.

    Raises:
        pandera.errors.SchemaError: If the export fails validation
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])
    return ThingsToDoSchema.validate(df)


class ParkActivitiesProcessor:
    """Build park_activities and compute its dashboard aggregates."""

    def __init__(
        self,
        engine: Engine | None = None,
        namespace: TableNamespace | None = None,
        output_dir: str | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the processor.

        Args:
            engine: SQLAlchemy engine, required for the database steps
            namespace: Catalog/schema namespace, required for the database steps
            output_dir: Directory for CSV exports (default: config.OUTPUT_DIRECTORY)
            logger: Logger instance; if None, a module logger is used
        """
        self.engine = engine
        self.namespace = namespace
        self.output_dir = output_dir or config.OUTPUT_DIRECTORY
        self.logger = logger or logging.getLogger(__name__)
        self.results: dict[str, pd.DataFrame] = {}
        self.stats: dict[str, Any] = {
            "built_rows": None,
            "unmatched_things_to_do": 0,
            "malformed_tags": 0,
            "processing_time": 0.0,
        }

    def _require_database(self) -> None:
        if self.engine is None:
            raise ConfigurationError("No database engine configured")
        if self.namespace is None:
            raise ConfigurationError(
                "No catalog/schema namespace configured (set NPS_SCHEMA)"
            )

    def _run_query(
        self, query_file: str, params: dict[str, Any] | None = None
    ) -> pd.DataFrame:
        """Render a query template and return its results as a DataFrame."""
        self._require_database()
        sql = render_query(query_file, self.namespace)
        with self.engine.connect() as conn:
            result = conn.execute(text(sql), params or {})
            return pd.DataFrame(result.fetchall(), columns=list(result.keys()))

    # ------------------------------------------------------------------ #
    #  Database steps
    # ------------------------------------------------------------------ #

    def build_park_activities(self) -> int:
        """Replace park_activities with the current join of the source tables."""
        self._require_database()
        self.logger.info("Building park_activities from parks and thingstodo...")

        self.count_unmatched_things_to_do()
        writer = DatabaseWriter(self.engine, self.namespace, self.logger)
        row_count = writer.replace_park_activities()
        self.stats["built_rows"] = row_count
        return row_count

    def count_unmatched_things_to_do(self) -> int:
        """Count thingstodo rows the join will drop, and log it."""
        df = self._run_query(UNMATCHED_THINGS_TO_DO)
        unmatched = int(df["unmatched_rows"].iloc[0]) if not df.empty else 0
        self._log_unmatched(unmatched)
        return unmatched

    def verify_park_activities(self) -> dict[str, int]:
        """Run the verification counts over park_activities."""
        df = self._run_query(VERIFY_PARK_ACTIVITIES)
        counts = {column: int(df[column].iloc[0]) for column in VERIFICATION_COLUMNS}
        self._record_verification(counts)
        return counts

    def fetch_malformed_tags(self) -> pd.DataFrame:
        """Rows of park_activities whose tags are not a JSON array."""
        return self._run_query(MALFORMED_TAGS)

    def fetch_activity_hub(self) -> pd.DataFrame:
        """Activity Hub aggregate for the map widget."""
        return self._store("activity_hub", self._run_query(ACTIVITY_HUB))

    def fetch_power_rankings(self) -> pd.DataFrame:
        """Power Rankings aggregate (top parks by activity count)."""
        df = self._run_query(POWER_RANKINGS, {"limit": config.POWER_RANKINGS_LIMIT})
        return self._store("power_rankings", df)

    def fetch_adventure_categories(self) -> pd.DataFrame:
        """Adventure Categories aggregate; malformed tags are logged and skipped."""
        malformed = self.fetch_malformed_tags()
        self._record_malformed_tags(malformed)
        df = self._run_query(
            ADVENTURE_CATEGORIES, {"limit": config.ADVENTURE_CATEGORIES_LIMIT}
        )
        return self._store("adventure_categories", df)

    def run_from_database(self, build: bool = True) -> dict[str, pd.DataFrame]:
        """
        Run the full pipeline against the database.

        Args:
            build: Rebuild park_activities first (default True)

        Returns:
            dict[str, pd.DataFrame]: summary plus the three aggregates
        """
        self._require_database()
        start_time = time.time()
        self.logger.info(f"Source namespace: {self.namespace.qualify('*')}")

        if build:
            self.build_park_activities()
        else:
            self.logger.info("Skipping build, using existing park_activities")

        self.verify_park_activities()
        self.fetch_activity_hub()
        self.fetch_power_rankings()
        self.fetch_adventure_categories()

        self.stats["processing_time"] = time.time() - start_time
        self._print_summary()
        return self.results

    # ------------------------------------------------------------------ #
    #  Frame steps
    # ------------------------------------------------------------------ #

    def run_from_frames(
        self, parks_df: pd.DataFrame, things_df: pd.DataFrame
    ) -> dict[str, pd.DataFrame]:
        """
        Run the full pipeline in pandas over source frames.

        Returns:
            dict[str, pd.DataFrame]: park_activities, summary and the three aggregates
        """
        start_time = time.time()
        self.logger.info(
            f"Processing {len(parks_df)} parks and {len(things_df)} things to do in memory"
        )

        self._log_unmatched(transforms.count_unmatched_things_to_do(parks_df, things_df))

        park_activities = ParkActivitiesSchema.validate(
            transforms.build_park_activities(parks_df, things_df)
        )
        self.results["park_activities"] = park_activities
        self.stats["built_rows"] = len(park_activities)

        self._record_verification(transforms.verify_park_activities(park_activities))

        # adventure_categories logs the malformed-tag warning itself
        self.stats["malformed_tags"] = len(
            transforms.find_malformed_tags(park_activities)
        )
        self._store("activity_hub", transforms.activity_hub(park_activities))
        self._store("power_rankings", transforms.power_rankings(park_activities))
        self._store(
            "adventure_categories",
            transforms.adventure_categories(park_activities, log=self.logger),
        )

        self.stats["processing_time"] = time.time() - start_time
        self._print_summary()
        return self.results

    # ------------------------------------------------------------------ #
    #  Shared helpers
    # ------------------------------------------------------------------ #

    def _store(self, name: str, df: pd.DataFrame) -> pd.DataFrame:
        validated = AGGREGATE_SCHEMAS[name].validate(df)
        self.results[name] = validated
        self.logger.info(f"Computed {name}: {len(validated)} rows")
        return validated

    def _log_unmatched(self, unmatched: int) -> None:
        self.stats["unmatched_things_to_do"] = unmatched
        if unmatched:
            self.logger.warning(
                f"{unmatched} things to do have a park_name matching no park name "
                "and are excluded from park_activities"
            )
        else:
            self.logger.info("All things to do matched a park")

    def _record_verification(self, counts: dict[str, int]) -> None:
        self.results["summary"] = pd.DataFrame([counts], columns=VERIFICATION_COLUMNS)
        self.logger.info(
            f"park_activities: {counts['total_rows']} rows, "
            f"{counts['distinct_parks']} parks, "
            f"{counts['distinct_activities']} activities"
        )

    def _record_malformed_tags(self, malformed: pd.DataFrame) -> None:
        self.stats["malformed_tags"] = len(malformed)
        if not malformed.empty:
            sample = (
                malformed["activity_id"]
                .head(config.MALFORMED_TAGS_SAMPLE_SIZE)
                .tolist()
            )
            self.logger.warning(
                f"{len(malformed)} rows have malformed tags and are excluded "
                f"from adventure categories, e.g. activity ids: {sample}"
            )

    def export_results(self) -> list[str]:
        """
        Write every computed result to CSV in the output directory.

        Returns:
            list[str]: Paths of the files written
        """
        os.makedirs(self.output_dir, exist_ok=True)
        written = []
        for name, df in self.results.items():
            filepath = os.path.join(self.output_dir, f"{name}.csv")
            df.to_csv(filepath, index=False)
            written.append(filepath)
            self.logger.info(f"Results saved to: {filepath}")
        return written

    def _print_summary(self) -> None:
        """Log processing summary."""
        self.logger.info("=" * 60)
        self.logger.info("PARK ACTIVITIES SUMMARY")
        self.logger.info("=" * 60)
        self.logger.info(f"Rows built: {self.stats['built_rows']}")
        self.logger.info(
            f"Unmatched things to do: {self.stats['unmatched_things_to_do']}"
        )
        self.logger.info(f"Malformed tags: {self.stats['malformed_tags']}")
        for name in AGGREGATE_SCHEMAS:
            if name in self.results:
                self.logger.info(f"{name}: {len(self.results[name])} rows")
        self.logger.info(
            f"Processing time: {self.stats['processing_time']:.2f} seconds"
        )
        self.logger.info("=" * 60)


def main() -> None:
    """Main function."""
    parser = argparse.ArgumentParser(
        description="Build park_activities and compute dashboard aggregates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                              # Rebuild and aggregate from the database
  %(prog)s --skip-build                                 # Aggregate the existing park_activities table
  %(prog)s --parks-csv parks.csv --thingstodo-csv t.csv # Offline mode from CSV exports
  %(prog)s --no-export                                  # Log results without writing CSVs
  %(prog)s --log-level DEBUG                            # Enable debug logging
        """,
    )
    parser.add_argument(
        "--skip-build",
        action="store_true",
        help="Use the existing park_activities table instead of rebuilding it",
    )
    parser.add_argument("--parks-csv", help="CSV export of the parks table")
    parser.add_argument("--thingstodo-csv", help="CSV export of the thingstodo table")
    parser.add_argument(
        "--output-dir",
        default=config.OUTPUT_DIRECTORY,
        help=f"Directory for CSV results (default: {config.OUTPUT_DIRECTORY})",
    )
    parser.add_argument(
        "--no-export", action="store_true", help="Do not write result CSVs"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.LOG_LEVEL,
        help="Set logging level",
    )

    args = parser.parse_args()

    if bool(args.parks_csv) != bool(args.thingstodo_csv):
        parser.error("--parks-csv and --thingstodo-csv must be given together")

    logger = setup_park_activities_logging(args.log_level)

    try:
        if args.parks_csv:
            processor = ParkActivitiesProcessor(output_dir=args.output_dir, logger=logger)
            processor.run_from_frames(
                load_parks_csv(args.parks_csv),
                load_things_to_do_csv(args.thingstodo_csv),
            )
        else:
            processor = ParkActivitiesProcessor(
                engine=get_postgres_engine(),
                namespace=config.get_namespace(),
                output_dir=args.output_dir,
                logger=logger,
            )
            processor.run_from_database(build=not args.skip_build)

        if not args.no_export:
            processor.export_results()

        logger.info("Park activities processing completed successfully")

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)
    except Exception as e:
        logger.error(f"Park activities processing failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
