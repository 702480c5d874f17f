"""
Power Rankings chart widget.

Bar chart of the parks with the most distinct things to do.
"""

import os

import pandas as pd

from ..utils import DashboardLogger, save_bar_chart, widget_output_dir


def run_power_rankings(
    rankings_df: pd.DataFrame, output_dir: str | None = None
) -> list[str]:
    """
    Render the power rankings bar chart.

    Args:
        rankings_df: Output of the power rankings aggregate
        output_dir: Override for the dashboard output directory

    Returns:
        list[str]: Paths of files written
    """
    logger = DashboardLogger("power_rankings")

    if rankings_df.empty:
        logger.warning("Power rankings are empty, skipping chart")
        return []

    filepath = os.path.join(widget_output_dir(output_dir), "power_rankings.png")
    save_bar_chart(
        rankings_df,
        label_column="park_name",
        value_column="num_activities",
        title=f"Power Rankings: top {len(rankings_df)} parks by things to do",
        xlabel="Distinct activities",
        filepath=filepath,
    )
    logger.success(f"Power rankings chart saved to {filepath}")
    return [filepath]
