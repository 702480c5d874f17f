#!/usr/bin/env python3
"""
Database Reset Script

Drops the park activity tables and recreates empty parks and thingstodo
tables from the SQL files in sql/schema/. Use this to start fresh on a local
or test database; production source tables belong to the NPS connector.

Usage:
    python -m scripts.database.reset_database
    python -m scripts.database.reset_database --parks-csv parks.csv --thingstodo-csv thingstodo.csv

This will:
1. Drop park_activities, thingstodo and parks
2. Create the source tables using the SQL schema files
3. Optionally seed them from CSV exports
4. Log the resulting tables for verification
"""

import argparse
import os
import sys

from dotenv import load_dotenv

sys.path.append(os.path.join(os.path.dirname(__file__), "..", ".."))

# Load environment variables before importing config-dependent modules
load_dotenv()

from config.settings import ConfigurationError, config
from scripts.database.db_writer import DatabaseWriter, get_postgres_engine
from scripts.processors.park_activities import load_parks_csv, load_things_to_do_csv
from utils.logging import setup_database_logging


def create_argument_parser():
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Drop and recreate the NPS park activity tables"
    )
    parser.add_argument("--parks-csv", help="CSV export to seed the parks table with")
    parser.add_argument(
        "--thingstodo-csv", help="CSV export to seed the thingstodo table with"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from config)",
    )
    return parser


def main():
    """Main function to reset the database."""
    parser = create_argument_parser()
    args = parser.parse_args()

    if bool(args.parks_csv) != bool(args.thingstodo_csv):
        parser.error("--parks-csv and --thingstodo-csv must be given together")

    logger = setup_database_logging(args.log_level)

    try:
        logger.info("Starting database reset process...")

        engine = get_postgres_engine()
        writer = DatabaseWriter(engine, config.get_namespace(), logger)

        writer.reset_database()

        if args.parks_csv:
            logger.info("Seeding source tables from CSV exports...")
            writer.write_parks(load_parks_csv(args.parks_csv))
            writer.write_things_to_do(load_things_to_do_csv(args.thingstodo_csv))

        for table_key in writer.source_tables:
            info = writer.get_table_info(table_key)
            if info["exists"]:
                logger.info(
                    f"Table {table_key}: {info['row_count']} rows, "
                    f"columns: {', '.join(info['columns'])}"
                )
            else:
                logger.warning(f"⚠️  Expected table {table_key} was not created")

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)
    except Exception as e:
        logger.error(f"❌ Database reset failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
