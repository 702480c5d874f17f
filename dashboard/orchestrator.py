"""
Main orchestrator for dashboard rendering.

This orchestrator obtains the park activity aggregates, either from the
database or from CSV exports of the source tables, and renders each enabled
widget.

Key Features:
- Dynamic widget module loading and execution
- Configurable widget enable/disable
- Error handling with optional continuation

Available Widgets:
- activity_hub: Map of activity counts per park location
- power_rankings: Bar chart of the parks with the most activities
- adventure_categories: Bar chart of activity tags by number of parks

Examples:
  # Render all enabled widgets from the database
  python -m dashboard.orchestrator

  # Render specific widgets
  python -m dashboard.orchestrator power_rankings adventure_categories

  # Render from CSV exports without a database
  python -m dashboard.orchestrator --parks-csv parks.csv --thingstodo-csv thingstodo.csv

  # List available widgets
  python -m dashboard.orchestrator --list-widgets
"""

import argparse
import importlib
import sys
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
from dotenv import load_dotenv

# Load environment variables before importing config-dependent modules
load_dotenv()

from config.settings import ConfigurationError, config
from dashboard.config import DASHBOARD_SETTINGS, DASHBOARD_WIDGETS
from dashboard.utils import DashboardLogger
from scripts.database.db_writer import get_postgres_engine
from scripts.processors.park_activities import (
    ParkActivitiesProcessor,
    load_parks_csv,
    load_things_to_do_csv,
)
from utils.logging import setup_dashboard_logging


class DashboardOrchestrator:
    """Main orchestrator for dashboard widgets."""

    def __init__(
        self,
        aggregates: Dict[str, pd.DataFrame],
        output_dir: Optional[str] = None,
    ):
        """
        Args:
            aggregates: Aggregate frames keyed by aggregate name
            output_dir: Override for DASHBOARD_SETTINGS['output_directory']
        """
        self.logger = DashboardLogger("orchestrator")
        self.aggregates = aggregates
        self.output_dir = output_dir or DASHBOARD_SETTINGS["output_directory"]
        self.results: Dict[str, List[str]] = {}
        self.failed_widgets: List[str] = []

    def _load_widget(self, widget_name: str) -> Optional[Callable[..., List[str]]]:
        """Dynamically load a widget's run function."""
        try:
            module = importlib.import_module(f"dashboard.modules.{widget_name}")
        except ImportError as e:
            self.logger.error(f"Failed to import widget {widget_name}: {e}")
            return None

        run_function = getattr(module, f"run_{widget_name}", None)
        if run_function is None:
            self.logger.error(f"No run function found in widget {widget_name}")
        return run_function

    def run_widget(self, widget_name: str) -> bool:
        """Render a single widget."""
        if widget_name not in DASHBOARD_WIDGETS:
            self.logger.error(f"Unknown widget: {widget_name}")
            return False

        widget_config = DASHBOARD_WIDGETS[widget_name]

        if not widget_config["enabled"]:
            self.logger.info(f"Widget {widget_name} is disabled, skipping")
            return True

        aggregate_name = widget_config["aggregate"]
        if aggregate_name not in self.aggregates:
            self.logger.error(
                f"Widget {widget_name} needs the {aggregate_name} aggregate, which was not computed"
            )
            self.failed_widgets.append(widget_name)
            return False

        self.logger.info(
            f"Rendering widget: {widget_name} - {widget_config['description']}"
        )

        run_function = self._load_widget(widget_name)
        if run_function is None:
            self.failed_widgets.append(widget_name)
            return False

        try:
            self.results[widget_name] = run_function(
                self.aggregates[aggregate_name], self.output_dir
            )
            self.logger.success(f"Widget {widget_name} completed successfully")
            return True

        except Exception as e:
            self.logger.error(f"Widget {widget_name} failed: {e}")
            self.failed_widgets.append(widget_name)

            if not DASHBOARD_SETTINGS["continue_on_error"]:
                raise

            return False

    def run_widgets(self, widget_names: Optional[List[str]] = None) -> Dict[str, Any]:
        """Render the given widgets, or every enabled widget when none are given."""
        if not widget_names:
            widget_names = [
                name for name, settings in DASHBOARD_WIDGETS.items() if settings["enabled"]
            ]

        self.logger.info(f"Output directory: {self.output_dir}")
        self.logger.info(f"Widgets: {', '.join(widget_names)}")

        for widget_name in widget_names:
            self.run_widget(widget_name)

        self.logger.info(
            f"Dashboard completed: {len(self.results)}/{len(widget_names)} widgets rendered"
        )
        if self.failed_widgets:
            self.logger.error(f"Failed widgets: {', '.join(self.failed_widgets)}")

        return self.results


def list_available_widgets():
    """List all available widgets with their status and description."""
    print("Available Dashboard Widgets:")
    print("=" * 50)

    for widget_name, settings in DASHBOARD_WIDGETS.items():
        status = "✓ Enabled" if settings["enabled"] else "✗ Disabled"
        print(f"{widget_name:22} {status}")
        print(f"{'':22} {settings['description']}")
        print(f"{'':22} Outputs: {', '.join(settings['outputs'])}")
        print()


def create_argument_parser():
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Render the NPS park activities dashboard widgets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                      # Render all enabled widgets
  %(prog)s power_rankings                       # Render one widget
  %(prog)s --parks-csv p.csv --thingstodo-csv t.csv  # Render from CSV exports
  %(prog)s --list-widgets                       # List all available widgets
        """,
    )

    parser.add_argument(
        "widgets",
        nargs="*",
        help="Specific widgets to render (default: all enabled widgets)",
    )
    parser.add_argument(
        "--list-widgets",
        action="store_true",
        help="List all available widgets with their status and description",
    )
    parser.add_argument("--parks-csv", help="CSV export of the parks table")
    parser.add_argument("--thingstodo-csv", help="CSV export of the thingstodo table")
    parser.add_argument(
        "--output-dir",
        default=DASHBOARD_SETTINGS["output_directory"],
        help="Directory for rendered widgets",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")

    return parser


def main() -> None:
    """CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    if args.list_widgets:
        list_available_widgets()
        sys.exit(0)

    if bool(args.parks_csv) != bool(args.thingstodo_csv):
        parser.error("--parks-csv and --thingstodo-csv must be given together")

    logger = setup_dashboard_logging("DEBUG" if args.verbose else None)

    try:
        if args.parks_csv:
            processor = ParkActivitiesProcessor(logger=logger)
            aggregates = processor.run_from_frames(
                load_parks_csv(args.parks_csv),
                load_things_to_do_csv(args.thingstodo_csv),
            )
        else:
            processor = ParkActivitiesProcessor(
                engine=get_postgres_engine(),
                namespace=config.get_namespace(),
                logger=logger,
            )
            aggregates = processor.run_from_database(build=False)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)
    except Exception as e:
        logger.error(f"Could not compute aggregates: {e}")
        sys.exit(1)

    orchestrator = DashboardOrchestrator(aggregates, output_dir=args.output_dir)
    orchestrator.run_widgets(args.widgets)

    if orchestrator.failed_widgets:
        sys.exit(1)


if __name__ == "__main__":
    main()
