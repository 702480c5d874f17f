"""
Database query functions for the API.

These functions execute the park activities SQL templates and return
formatted results ready for API responses.
"""

from typing import Any

from sqlalchemy import text

from api.database import get_db_engine, get_namespace
from config.settings import config
from scripts.database.query_templates import (
    ACTIVITY_HUB,
    ADVENTURE_CATEGORIES,
    POWER_RANKINGS,
    VERIFY_PARK_ACTIVITIES,
    render_query,
)


def _execute(query_file: str, params: dict[str, Any] | None = None) -> list[Any]:
    """Render a template against the configured namespace and fetch all rows."""
    query = render_query(query_file, get_namespace())
    engine = get_db_engine()

    with engine.connect() as conn:
        result = conn.execute(text(query), params or {})
        return result.fetchall()


def fetch_park_activities_summary() -> dict[str, int]:
    """
    Fetch the verification counts for park_activities.

    Returns:
        Dictionary containing total_rows, distinct_parks and distinct_activities

    Example:
        >>> fetch_park_activities_summary()
        {'total_rows': 3125, 'distinct_parks': 398, 'distinct_activities': 3125}
    """
    rows = _execute(VERIFY_PARK_ACTIVITIES)
    row = rows[0]
    return {
        "total_rows": int(row.total_rows),
        "distinct_parks": int(row.distinct_parks),
        "distinct_activities": int(row.distinct_activities),
    }


def fetch_activity_hub() -> dict[str, Any]:
    """
    Fetch activity counts per park location.

    Returns:
        Dictionary containing:
            - location_count: int
            - locations: list of location dictionaries, busiest first
    """
    rows = _execute(ACTIVITY_HUB)

    locations = [
        {
            "park_name": row.park_name,
            "park_state": row.park_state,
            "latitude": float(row.latitude),
            "longitude": float(row.longitude),
            "num_activities": int(row.num_activities),
            "activity_titles": row.activity_titles,
        }
        for row in rows
    ]

    return {
        "location_count": len(locations),
        "locations": locations,
    }


def fetch_power_rankings() -> dict[str, Any]:
    """
    Fetch the parks with the most distinct activities.

    Returns:
        Dictionary containing:
            - park_count: int
            - rankings: list of ranking dictionaries with 1-based rank
    """
    rows = _execute(POWER_RANKINGS, {"limit": config.POWER_RANKINGS_LIMIT})

    rankings = [
        {
            "rank": position,
            "park_name": row.park_name,
            "num_activities": int(row.num_activities),
            "durations": row.durations,
        }
        for position, row in enumerate(rows, start=1)
    ]

    return {
        "park_count": len(rankings),
        "rankings": rankings,
    }


def fetch_adventure_categories() -> dict[str, Any]:
    """
    Fetch the activity tags offered by the most parks.

    Rows whose tags are not a JSON array of strings are skipped by the query.

    Returns:
        Dictionary containing:
            - category_count: int
            - categories: list of category dictionaries
    """
    rows = _execute(ADVENTURE_CATEGORIES, {"limit": config.ADVENTURE_CATEGORIES_LIMIT})

    categories = [
        {
            "activity_type": row.activity_type,
            "num_parks": int(row.num_parks),
            "total_activities": int(row.total_activities),
            "park_names": row.park_names,
        }
        for row in rows
    ]

    return {
        "category_count": len(categories),
        "categories": categories,
    }
