"""
Activity Hub map widget.

Renders the activity_hub aggregate as:
1. Interactive HTML - park markers sized by activity count, with hover
   tooltips listing activity titles (Plotly)
2. GeoPackage - one point per park location for use in GIS tools (geopandas)

Usage:
    # Via orchestrator
    python -m dashboard.orchestrator activity_hub
"""

import os

import geopandas as gpd
import pandas as pd
import plotly.graph_objects as go
from shapely.geometry import Point

from ..config import DASHBOARD_SETTINGS
from ..utils import DashboardLogger, widget_output_dir

MAX_MARKER_SIZE = 40
MIN_MARKER_SIZE = 4
MAX_HOVER_TITLES = 10


def activity_hub_to_geodataframe(hub_df: pd.DataFrame) -> gpd.GeoDataFrame:
    """Convert the activity hub frame to a point GeoDataFrame in WGS84."""
    geometry = [
        Point(row["longitude"], row["latitude"]) for _, row in hub_df.iterrows()
    ]
    return gpd.GeoDataFrame(hub_df.copy(), geometry=geometry, crs="EPSG:4326")


def _hover_text(row: pd.Series) -> str:
    titles = (
        row["activity_titles"].split(", ") if pd.notna(row["activity_titles"]) else []
    )
    shown = titles[:MAX_HOVER_TITLES]
    if len(titles) > MAX_HOVER_TITLES:
        shown.append(f"… and {len(titles) - MAX_HOVER_TITLES} more")
    lines = [
        f"<b>{row['park_name']}</b>"
        + (f" ({row['park_state']})" if pd.notna(row["park_state"]) else ""),
        f"{row['num_activities']} activities",
    ]
    return "<br>".join(lines + shown)


def build_activity_hub_figure(hub_df: pd.DataFrame) -> go.Figure:
    """
    Build the map figure.

    Marker area is proportional to num_activities.
    """
    max_count = hub_df["num_activities"].max() if not hub_df.empty else 1
    hover = hub_df.apply(_hover_text, axis=1) if not hub_df.empty else []

    fig = go.Figure(
        go.Scattergeo(
            lat=hub_df["latitude"],
            lon=hub_df["longitude"],
            text=hover,
            hoverinfo="text",
            mode="markers",
            marker=dict(
                size=hub_df["num_activities"].astype(float),
                sizemode="area",
                sizeref=2.0 * max_count / (MAX_MARKER_SIZE**2),
                sizemin=MIN_MARKER_SIZE,
                color=DASHBOARD_SETTINGS["marker_color"],
                opacity=0.7,
                line=dict(width=0.5, color="white"),
            ),
        )
    )
    fig.update_layout(
        title="Activity Hub: things to do per park",
        geo=dict(scope="usa", projection_type="albers usa", showland=True),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def run_activity_hub(hub_df: pd.DataFrame, output_dir: str | None = None) -> list[str]:
    """
    Render the activity hub map and GeoPackage.

    Args:
        hub_df: Output of the activity hub aggregate
        output_dir: Override for the dashboard output directory

    Returns:
        list[str]: Paths of files written
    """
    logger = DashboardLogger("activity_hub")
    directory = widget_output_dir(output_dir)
    written = []

    html_path = os.path.join(directory, "activity_hub_map.html")
    build_activity_hub_figure(hub_df).write_html(html_path)
    written.append(html_path)
    logger.success(f"Activity hub map saved to {html_path}")

    if hub_df.empty:
        logger.warning("Activity hub is empty, skipping GeoPackage export")
        return written

    gpkg_path = os.path.join(directory, "activity_hub.gpkg")
    activity_hub_to_geodataframe(hub_df).to_file(gpkg_path, driver="GPKG")
    written.append(gpkg_path)
    logger.success(f"Activity hub points saved to {gpkg_path}")

    return written
