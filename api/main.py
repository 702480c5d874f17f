"""
NPS Park Activities API

A FastAPI application that serves the park activity aggregates computed from
the joined park_activities table.

Usage:
    Start the development server:
        $ uvicorn api.main:app --reload

    The API will be available at:
        - Interactive docs (Swagger UI): http://localhost:8000/docs
        - Alternative docs (ReDoc): http://localhost:8000/redoc
        - OpenAPI schema: http://localhost:8000/openapi.json
"""

import os
import sys

from fastapi import FastAPI, HTTPException
from sqlalchemy import text

# Add parent directory to path to import project modules
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from api.database import get_db_engine
from api.models import (
    ActivityHubResponse,
    AdventureCategoriesResponse,
    ParkActivitiesSummary,
    PowerRankingsResponse,
)
from api.queries import (
    fetch_activity_hub,
    fetch_adventure_categories,
    fetch_park_activities_summary,
    fetch_power_rankings,
)
from config.settings import ConfigurationError

app = FastAPI(
    title="NPS Park Activities API",
    description="""
    API for exploring National Park Service things to do joined with park metadata.
    """,
    version="0.1.0",
    contact={
        "name": "NPS Park Activities Project",
    },
)


def _error_response(e: Exception, action: str) -> HTTPException:
    """Map configuration problems to 503 and everything else to 500."""
    if isinstance(e, ConfigurationError):
        return HTTPException(
            status_code=503,
            detail=f"Database is not configured: {str(e)}",
        )
    return HTTPException(
        status_code=500,
        detail=f"Error retrieving {action}: {str(e)}",
    )


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint returning API information and available endpoints.
    """
    return {
        "name": "NPS Park Activities API",
        "version": "0.1.0",
        "description": "Query National Park things to do aggregated by park and activity type",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json",
        },
        "endpoints": {
            "summary": "/park-activities/summary",
            "activity_hub": "/park-activities/activity-hub",
            "power_rankings": "/park-activities/power-rankings",
            "adventure_categories": "/park-activities/adventure-categories",
            "health_check": "/health",
        },
    }


@app.get(
    "/park-activities/summary",
    response_model=ParkActivitiesSummary,
    tags=["Park Activities"],
    summary="Verify the joined table",
    description="""
    Returns the row count and the distinct park and activity counts of park_activities.
    """,
)
async def get_park_activities_summary():
    """
    Get verification counts for the joined table.

    An activity whose park_name matches more than one parks row appears once
    per match, so total_rows can exceed distinct_activities.
    """
    try:
        return fetch_park_activities_summary()
    except Exception as e:
        raise _error_response(e, "park activities summary")


@app.get(
    "/park-activities/activity-hub",
    response_model=ActivityHubResponse,
    tags=["Park Activities"],
    summary="Activity counts per park location",
    description="""
    Returns every park location that has coordinates, with its number of distinct
    activities and the list of activity titles. Busiest parks come first.
    """,
)
async def get_activity_hub():
    """
    Get the activity hub aggregate.

    **Use cases:**
    - Plot activity density on a map
    - Show what a park offers on hover
    """
    try:
        return fetch_activity_hub()
    except Exception as e:
        raise _error_response(e, "activity hub")


@app.get(
    "/park-activities/power-rankings",
    response_model=PowerRankingsResponse,
    tags=["Park Activities"],
    summary="Parks with the most activities",
    description="""
    Returns the top parks by number of distinct activities, with the
    durations offered at each.
    """,
)
async def get_power_rankings():
    """
    Get the power rankings aggregate.

    Ties on activity count are ordered by park name.
    """
    try:
        return fetch_power_rankings()
    except Exception as e:
        raise _error_response(e, "power rankings")


@app.get(
    "/park-activities/adventure-categories",
    response_model=AdventureCategoriesResponse,
    tags=["Park Activities"],
    summary="Activity tags offered by the most parks",
    description="""
    Returns the top activity tags by number of parks offering them. Activities
    with malformed tags are skipped.
    """,
)
async def get_adventure_categories():
    try:
        return fetch_adventure_categories()
    except Exception as e:
        raise _error_response(e, "adventure categories")


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint to verify API and database connectivity.

    Returns the status of the API server and database connection.
    """
    try:
        engine = get_db_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "connected",
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
        }
