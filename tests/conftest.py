"""
Shared test fixtures and configuration for the NPS Park Activities test suite.

This file contains pytest fixtures that can be used across all test modules.
Fixtures defined here are automatically available to all test files.
"""

import os
from collections import namedtuple
from unittest.mock import MagicMock

import pandas as pd
import pytest
from dotenv import load_dotenv

# Load test environment variables (if any)
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


@pytest.fixture(autouse=True)
def setup_test_environment():
    """
    Set up test environment variables.

    This fixture automatically runs before each test to ensure the test
    environment is properly configured.
    """
    if not os.getenv("POSTGRES_PASSWORD"):
        os.environ["POSTGRES_PASSWORD"] = "test_password"

    yield

    if os.getenv("POSTGRES_PASSWORD") == "test_password":
        del os.environ["POSTGRES_PASSWORD"]


@pytest.fixture
def namespace():
    """Provide a namespace with the default table names in schema 'nps'."""
    from scripts.database.query_templates import TableNamespace

    return TableNamespace(schema_name="nps")


@pytest.fixture
def sample_parks_df():
    """
    Provide a small parks frame.

    Zion and Bryce have coordinates; Great Basin has none, so it is dropped
    from the Activity Hub.
    """
    return pd.DataFrame(
        {
            "name": ["Zion", "Bryce Canyon", "Great Basin"],
            "state": ["UT", "UT", "NV"],
            "latitude": [37.3, 37.58, None],
            "longitude": [-113.0, -112.18, None],
            "description": [
                "Massive sandstone cliffs.",
                "Hoodoos in a natural amphitheater.",
                "Ancient bristlecone pines.",
            ],
            "designation": ["National Park", "National Park", "National Park"],
            "activities": [
                "Hiking, Camping",
                "Hiking, Stargazing",
                "Caving, Stargazing",
            ],
        }
    )


@pytest.fixture
def sample_things_df():
    """
    Provide a things-to-do frame covering the interesting tag shapes.

    a5 references a park that does not exist and is dropped by the join.
    """
    return pd.DataFrame(
        {
            "activity_id": ["a1", "a2", "a3", "a4", "a5", "a6"],
            "park_id": ["p1", "p1", "p2", "p2", "p9", "p3"],
            "park_name": [
                "Zion",
                "Zion",
                "Bryce Canyon",
                "Bryce Canyon",
                "Zion National Park",
                "Great Basin",
            ],
            "park_state": ["UT", "UT", "UT", "UT", "UT", "NV"],
            "title": [
                "Angels Landing",
                " The Narrows ",
                "Navajo Loop",
                "Night Sky Program",
                "Riverside Walk",
                "Lehman Caves Tour",
            ],
            "short_description": ["Hike", "Wade", "Hike", "Watch", "Walk", "Tour"],
            "accessibility_information": [None] * 6,
            "location": [None] * 6,
            "url": [f"https://www.nps.gov/things/a{i}.htm" for i in range(1, 7)],
            "duration": ["4-5 Hours", "2-8 Hours", "1-2 Hours", None, "1 Hour", "1-2 Hours"],
            "tags": [
                '["Hiking"]',
                '["Hiking","Wading"]',
                '["Hiking"]',
                "[]",
                '["Hiking"]',
                '["Caving","Hiking"]',
            ],
        }
    )


@pytest.fixture
def sample_park_activities_df(sample_parks_df, sample_things_df):
    """Provide the joined frame built from the sample parks and things to do."""
    from scripts.processors.transforms import build_park_activities

    return build_park_activities(sample_parks_df, sample_things_df)


@pytest.fixture
def mock_db_engine():
    """
    Provide a mock SQLAlchemy engine.

    Returns a MagicMock engine with connect() and begin() context managers
    configured. Use this to avoid real database connections.
    """
    mock_engine = MagicMock()
    mock_connection = MagicMock()
    mock_result = MagicMock()

    mock_engine.connect.return_value.__enter__.return_value = mock_connection
    mock_engine.connect.return_value.__exit__.return_value = None
    mock_engine.begin.return_value.__enter__.return_value = mock_connection
    mock_engine.begin.return_value.__exit__.return_value = None

    mock_connection.execute.return_value = mock_result
    mock_result.fetchall.return_value = []

    return mock_engine


@pytest.fixture
def sample_api_rows():
    """
    Provide database rows for API query tests.

    Rows are namedtuples so attribute access matches SQLAlchemy Row objects.
    """
    SummaryRow = namedtuple(
        "SummaryRow", ["total_rows", "distinct_parks", "distinct_activities"]
    )
    HubRow = namedtuple(
        "HubRow",
        [
            "park_name",
            "park_state",
            "latitude",
            "longitude",
            "num_activities",
            "activity_titles",
        ],
    )
    RankingRow = namedtuple("RankingRow", ["park_name", "num_activities", "durations"])
    CategoryRow = namedtuple(
        "CategoryRow",
        ["activity_type", "num_parks", "total_activities", "park_names"],
    )

    return {
        "summary": [SummaryRow(5, 3, 5)],
        "activity_hub": [
            HubRow("Zion", "UT", 37.3, -113.0, 2, "Angels Landing, The Narrows"),
            HubRow("Bryce Canyon", "UT", 37.58, -112.18, 2, "Navajo Loop, Night Sky Program"),
        ],
        "power_rankings": [
            RankingRow("Bryce Canyon", 2, "1-2 Hours"),
            RankingRow("Zion", 2, "2-8 Hours, 4-5 Hours"),
            RankingRow("Great Basin", 1, "1-2 Hours"),
        ],
        "adventure_categories": [
            CategoryRow("Hiking", 3, 4, "Bryce Canyon, Great Basin, Zion"),
            CategoryRow("Caving", 1, 1, "Great Basin"),
            CategoryRow("Wading", 1, 1, "Zion"),
        ],
    }
