"""Validation schemas for park activity data.

This module provides Pandera schemas for:
1. Source frames - parks and thingstodo records as delivered by the connector
2. The joined park_activities frame
3. Aggregate outputs consumed by the dashboard widgets

Source schemas catch structural problems in CSV exports before the join runs.
Aggregate schemas check the invariants the widgets rely on (valid coordinates
for the map, leaderboard size and ordering for the bar charts).
"""

from __future__ import annotations

import os
import sys

import pandas as pd
import pandera.pandas as pa
from pandera.pandas import Check, Column, DataFrameSchema

sys.path.append(os.path.join(os.path.dirname(__file__), "..", ".."))
from config.settings import config

# =============================================================================
# COLUMN LAYOUTS
# =============================================================================

THINGS_TO_DO_COLUMNS = [
    "activity_id",
    "park_id",
    "park_name",
    "park_state",
    "title",
    "short_description",
    "accessibility_information",
    "location",
    "url",
    "duration",
    "tags",
]

# Park fields carried onto each joined row
PARK_ENRICHMENT_COLUMNS = [
    "description",
    "latitude",
    "longitude",
    "activities",
    "designation",
]

PARK_ACTIVITY_COLUMNS = THINGS_TO_DO_COLUMNS + PARK_ENRICHMENT_COLUMNS

VERIFICATION_COLUMNS = ["total_rows", "distinct_parks", "distinct_activities"]

ACTIVITY_HUB_COLUMNS = [
    "park_name",
    "park_state",
    "latitude",
    "longitude",
    "num_activities",
    "activity_titles",
]

POWER_RANKINGS_COLUMNS = ["park_name", "num_activities", "durations"]

ADVENTURE_CATEGORIES_COLUMNS = [
    "activity_type",
    "num_parks",
    "total_activities",
    "park_names",
]


def is_sorted_descending(series: pd.Series) -> bool:
    """Check that a series is non-increasing."""
    return bool(series.is_monotonic_decreasing)


# =============================================================================
# SOURCE SCHEMAS
# =============================================================================

ParksSchema = DataFrameSchema(
    columns={
        "name": Column(
            pa.String,
            checks=[Check(lambda s: s.str.len() > 0, error="name cannot be empty")],
            nullable=False,
            description="Park name, the join key for thingstodo.park_name",
        ),
        "state": Column(nullable=True, required=False, description="State code(s)"),
        "latitude": Column(
            pa.Float,
            checks=[Check.in_range(-90, 90, error="latitude must be in [-90, 90]")],
            nullable=True,
            coerce=True,
            description="Park latitude",
        ),
        "longitude": Column(
            pa.Float,
            checks=[
                Check.in_range(-180, 180, error="longitude must be in [-180, 180]")
            ],
            nullable=True,
            coerce=True,
            description="Park longitude",
        ),
        "description": Column(nullable=True, required=False),
        "designation": Column(nullable=True, required=False),
        "activities": Column(
            nullable=True,
            required=False,
            description="Comma-separated activity categories offered",
        ),
    },
    strict=False,
)

ThingsToDoSchema = DataFrameSchema(
    columns={
        "activity_id": Column(
            pa.String,
            checks=[
                Check(lambda s: s.str.len() > 0, error="activity_id cannot be empty")
            ],
            nullable=False,
            description="Things-to-do identifier",
        ),
        "park_name": Column(
            nullable=True,
            description="Name of the park the activity belongs to",
        ),
        "title": Column(nullable=True, description="Activity title"),
        "duration": Column(nullable=True, description="Free-text duration"),
        "tags": Column(
            nullable=True,
            description="JSON array of tag strings serialized as text",
        ),
        "park_id": Column(nullable=True, required=False),
        "park_state": Column(nullable=True, required=False),
        "short_description": Column(nullable=True, required=False),
        "accessibility_information": Column(nullable=True, required=False),
        "location": Column(nullable=True, required=False),
        "url": Column(nullable=True, required=False),
    },
    strict=False,
)

# =============================================================================
# OUTPUT SCHEMAS
# =============================================================================

ParkActivitiesSchema = DataFrameSchema(
    columns={column: Column(nullable=True) for column in PARK_ACTIVITY_COLUMNS}
    | {"park_name": Column(nullable=False), "activity_id": Column(nullable=False)},
    strict=True,
    ordered=True,
)

ActivityHubSchema = DataFrameSchema(
    columns={
        "park_name": Column(nullable=False),
        "park_state": Column(nullable=True),
        "latitude": Column(pa.Float, nullable=False, coerce=True),
        "longitude": Column(pa.Float, nullable=False, coerce=True),
        "num_activities": Column(
            pa.Int,
            checks=[
                Check.greater_than_or_equal_to(1),
                Check(is_sorted_descending, error="must be sorted descending"),
            ],
            nullable=False,
            coerce=True,
            description="Distinct activities at the location, drives marker size",
        ),
        "activity_titles": Column(nullable=True),
    },
    strict=True,
    ordered=True,
)

PowerRankingsSchema = DataFrameSchema(
    columns={
        "park_name": Column(nullable=False),
        "num_activities": Column(
            pa.Int,
            checks=[
                Check.greater_than_or_equal_to(1),
                Check(is_sorted_descending, error="must be sorted descending"),
            ],
            nullable=False,
            coerce=True,
        ),
        "durations": Column(nullable=True),
    },
    checks=[
        Check(
            lambda df: len(df) <= config.POWER_RANKINGS_LIMIT,
            error=f"at most {config.POWER_RANKINGS_LIMIT} rows",
        )
    ],
    strict=True,
    ordered=True,
)

AdventureCategoriesSchema = DataFrameSchema(
    columns={
        "activity_type": Column(nullable=False),
        "num_parks": Column(
            pa.Int,
            checks=[
                Check.greater_than_or_equal_to(1),
                Check(is_sorted_descending, error="must be sorted descending"),
            ],
            nullable=False,
            coerce=True,
        ),
        "total_activities": Column(
            pa.Int,
            checks=[Check.greater_than_or_equal_to(1)],
            nullable=False,
            coerce=True,
        ),
        "park_names": Column(nullable=True),
    },
    checks=[
        Check(
            lambda df: len(df) <= config.ADVENTURE_CATEGORIES_LIMIT,
            error=f"at most {config.ADVENTURE_CATEGORIES_LIMIT} rows",
        ),
        Check(
            lambda df: (df["total_activities"] >= df["num_parks"]).all(),
            error="total_activities must be >= num_parks",
        ),
    ],
    strict=True,
    ordered=True,
)
