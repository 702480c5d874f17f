"""
Unit tests for the dashboard widgets and orchestrator.

Widgets render into tmp_path; the orchestrator is given precomputed
aggregates so no database is involved.
"""

import os
from unittest.mock import patch

import pandas as pd
import pytest

from dashboard.modules.activity_hub import (
    activity_hub_to_geodataframe,
    build_activity_hub_figure,
    run_activity_hub,
)
from dashboard.modules.adventure_categories import run_adventure_categories
from dashboard.modules.power_rankings import run_power_rankings
from dashboard.orchestrator import DashboardOrchestrator
from dashboard.utils import truncate_label
from scripts.processors.park_activity_schemas import (
    ACTIVITY_HUB_COLUMNS,
    PARK_ACTIVITY_COLUMNS,
)
from scripts.processors.transforms import (
    activity_hub,
    adventure_categories,
    power_rankings,
)


@pytest.fixture
def aggregates(sample_park_activities_df):
    """Provide the three aggregates computed from the sample data."""
    return {
        "activity_hub": activity_hub(sample_park_activities_df),
        "power_rankings": power_rankings(sample_park_activities_df),
        "adventure_categories": adventure_categories(sample_park_activities_df),
    }


class TestActivityHubWidget:
    """Test cases for the map widget."""

    def test_geodataframe_points(self, aggregates):
        gdf = activity_hub_to_geodataframe(aggregates["activity_hub"])

        assert gdf.crs.to_epsg() == 4326
        assert gdf.geometry.iloc[0].x == pytest.approx(-112.18)
        assert gdf.geometry.iloc[0].y == pytest.approx(37.58)

    def test_figure_marker_sizes(self, aggregates):
        fig = build_activity_hub_figure(aggregates["activity_hub"])

        trace = fig.data[0]
        assert list(trace.marker.size) == [2, 2]
        assert "Angels Landing" in trace.text[1]

    @pytest.mark.parametrize(
        "empty",
        [
            activity_hub(pd.DataFrame(columns=PARK_ACTIVITY_COLUMNS)),
            pd.DataFrame(columns=ACTIVITY_HUB_COLUMNS),
        ],
    )
    def test_figure_from_empty_hub(self, empty):
        fig = build_activity_hub_figure(empty)

        assert list(fig.data[0].marker.size) == []

    def test_writes_map_and_geopackage(self, aggregates, tmp_path):
        written = run_activity_hub(aggregates["activity_hub"], str(tmp_path))

        assert [os.path.basename(path) for path in written] == [
            "activity_hub_map.html",
            "activity_hub.gpkg",
        ]
        assert all(os.path.exists(path) for path in written)

    def test_empty_hub_skips_geopackage(self, tmp_path):
        empty = activity_hub(pd.DataFrame(columns=["latitude", "longitude"]))

        written = run_activity_hub(empty, str(tmp_path))

        assert [os.path.basename(path) for path in written] == ["activity_hub_map.html"]


class TestBarChartWidgets:
    """Test cases for the two bar chart widgets."""

    def test_power_rankings_chart(self, aggregates, tmp_path):
        written = run_power_rankings(aggregates["power_rankings"], str(tmp_path))

        assert written == [os.path.join(str(tmp_path), "power_rankings.png")]
        assert os.path.getsize(written[0]) > 0

    def test_adventure_categories_chart(self, aggregates, tmp_path):
        written = run_adventure_categories(
            aggregates["adventure_categories"], str(tmp_path)
        )

        assert written == [os.path.join(str(tmp_path), "adventure_categories.png")]

    def test_empty_frames_render_nothing(self, tmp_path):
        assert run_power_rankings(pd.DataFrame(), str(tmp_path)) == []
        assert run_adventure_categories(pd.DataFrame(), str(tmp_path)) == []

    @pytest.mark.parametrize(
        "label,expected",
        [("Zion", "Zion"), ("A" * 40, "A" * 27 + "…")],
    )
    def test_truncate_label(self, label, expected):
        assert truncate_label(label) == expected


class TestDashboardOrchestrator:
    """Test cases for the orchestrator."""

    def test_runs_all_enabled_widgets(self, aggregates, tmp_path):
        orchestrator = DashboardOrchestrator(aggregates, output_dir=str(tmp_path))

        results = orchestrator.run_widgets()

        assert set(results) == {"activity_hub", "power_rankings", "adventure_categories"}
        assert orchestrator.failed_widgets == []

    def test_unknown_widget(self, aggregates, tmp_path):
        orchestrator = DashboardOrchestrator(aggregates, output_dir=str(tmp_path))

        assert orchestrator.run_widget("visitor_heatmap") is False

    def test_missing_aggregate_fails_widget(self, aggregates, tmp_path):
        del aggregates["power_rankings"]
        orchestrator = DashboardOrchestrator(aggregates, output_dir=str(tmp_path))

        orchestrator.run_widgets(["power_rankings", "adventure_categories"])

        assert orchestrator.failed_widgets == ["power_rankings"]
        assert "adventure_categories" in orchestrator.results

    def test_widget_error_continues(self, aggregates, tmp_path):
        orchestrator = DashboardOrchestrator(aggregates, output_dir=str(tmp_path))

        with patch(
            "dashboard.modules.power_rankings.run_power_rankings",
            side_effect=RuntimeError("boom"),
        ):
            orchestrator.run_widgets()

        assert orchestrator.failed_widgets == ["power_rankings"]
        assert len(orchestrator.results) == 2
