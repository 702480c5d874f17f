"""
Shared utilities for dashboard widgets.

This module provides the widget logger and common file handling used by all
widget modules.
"""

import logging
import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd

from .config import DASHBOARD_SETTINGS


class DashboardLogger:
    """Thin wrapper adding success/failure markers to widget log lines."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(f"dashboard.{name}")

    def info(self, message: str) -> None:
        self.logger.info(message)

    def success(self, message: str) -> None:
        self.logger.info(f"✅ {message}")

    def warning(self, message: str) -> None:
        self.logger.warning(f"⚠️ {message}")

    def error(self, message: str) -> None:
        self.logger.error(f"❌ {message}")


def widget_output_dir(output_dir: str | None = None) -> str:
    """
    Resolve and create the directory widgets write into.

    Args:
        output_dir (str, optional): Override for DASHBOARD_SETTINGS['output_directory']

    Returns:
        str: Existing directory path
    """
    directory = output_dir or DASHBOARD_SETTINGS["output_directory"]
    os.makedirs(directory, exist_ok=True)
    return directory


def truncate_label(label: str, width: int = 28) -> str:
    """Truncate long axis labels so bar charts stay readable."""
    if len(label) <= width:
        return label
    return label[: width - 1] + "…"


def save_bar_chart(
    df: pd.DataFrame,
    label_column: str,
    value_column: str,
    title: str,
    xlabel: str,
    filepath: str,
) -> str:
    """
    Save a horizontal bar chart with the first row at the top.

    Args:
        df (pd.DataFrame): Rows to plot, already ordered
        label_column (str): Column used for bar labels
        value_column (str): Column used for bar lengths
        title (str): Chart title
        xlabel (str): X axis label
        filepath (str): Destination PNG path

    Returns:
        str: The path written
    """
    height = max(3.0, 0.4 * len(df) + 1.5)
    fig, ax = plt.subplots(figsize=(10, height))
    try:
        labels = [truncate_label(str(label)) for label in df[label_column]]
        ax.barh(labels, df[value_column], color=DASHBOARD_SETTINGS["bar_color"])
        ax.invert_yaxis()
        ax.set_title(title)
        ax.set_xlabel(xlabel)
        ax.xaxis.get_major_locator().set_params(integer=True)
        for spine in ("top", "right"):
            ax.spines[spine].set_visible(False)
        fig.tight_layout()
        fig.savefig(filepath, dpi=DASHBOARD_SETTINGS["figure_dpi"])
    finally:
        plt.close(fig)
    return filepath
