"""
Adventure Categories chart widget.

Bar chart of activity tags ranked by how many parks offer them.
"""

import os

import pandas as pd

from ..utils import DashboardLogger, save_bar_chart, widget_output_dir


def run_adventure_categories(
    categories_df: pd.DataFrame, output_dir: str | None = None
) -> list[str]:
    """
    Render the adventure categories bar chart.

    Args:
        categories_df: Output of the adventure categories aggregate
        output_dir: Override for the dashboard output directory

    Returns:
        list[str]: Paths of files written
    """
    logger = DashboardLogger("adventure_categories")

    if categories_df.empty:
        logger.warning("Adventure categories are empty, skipping chart")
        return []

    filepath = os.path.join(widget_output_dir(output_dir), "adventure_categories.png")
    save_bar_chart(
        categories_df,
        label_column="activity_type",
        value_column="num_parks",
        title="Adventure Categories: parks offering each activity type",
        xlabel="Parks",
        filepath=filepath,
    )
    logger.success(f"Adventure categories chart saved to {filepath}")
    return [filepath]
