"""
Pydantic models for API request/response validation.

These models define the structure of API responses and automatically
generate OpenAPI schema definitions.
"""

from pydantic import BaseModel, Field

from config.settings import config


class ParkActivitiesSummary(BaseModel):
    """
    Verification counts over the park_activities table.

    There are no thresholds; the counts are for a human to eyeball after a
    rebuild.
    """

    total_rows: int = Field(
        ..., description="Rows in park_activities", ge=0, examples=[3125]
    )
    distinct_parks: int = Field(
        ..., description="Distinct park names", ge=0, examples=[398]
    )
    distinct_activities: int = Field(
        ..., description="Distinct activity ids", ge=0, examples=[3125]
    )


class ActivityHubLocation(BaseModel):
    """Activity count for one park location. Feeds the map widget."""

    park_name: str = Field(
        ..., description="Park name", examples=["Zion National Park"]
    )
    park_state: str | None = Field(
        None, description="State code(s) of the park", examples=["UT"]
    )
    latitude: float = Field(..., ge=-90, le=90, examples=[37.2982022])
    longitude: float = Field(..., ge=-180, le=180, examples=[-113.026505])
    num_activities: int = Field(
        ...,
        description="Distinct things to do at this location (drives marker size)",
        ge=1,
        examples=[42],
    )
    activity_titles: str | None = Field(
        None,
        description="Comma-separated distinct activity titles",
        examples=["Hike Angels Landing, Ride the Zion Canyon Shuttle"],
    )


class ActivityHubResponse(BaseModel):
    """Response model for the activity hub endpoint."""

    location_count: int = Field(..., description="Number of locations", ge=0)
    locations: list[ActivityHubLocation] = Field(
        ..., description="Locations ordered by num_activities descending"
    )


class PowerRanking(BaseModel):
    """One park on the power rankings leaderboard."""

    rank: int = Field(..., description="1-based leaderboard position", ge=1)
    park_name: str = Field(..., examples=["Yellowstone National Park"])
    num_activities: int = Field(..., ge=1, examples=[87])
    durations: str | None = Field(
        None,
        description="Comma-separated distinct activity durations",
        examples=["1-2 Hours, 2-3 Hours"],
    )


class PowerRankingsResponse(BaseModel):
    """Response model for the power rankings endpoint (top parks only)."""

    park_count: int = Field(..., ge=0, le=config.POWER_RANKINGS_LIMIT)
    rankings: list[PowerRanking]


class AdventureCategory(BaseModel):
    """One activity tag with the parks that offer it."""

    activity_type: str = Field(..., description="Tag value", examples=["Hiking"])
    num_parks: int = Field(..., description="Distinct parks", ge=1, examples=[210])
    total_activities: int = Field(
        ..., description="Tagged activity rows", ge=1, examples=[640]
    )
    park_names: str | None = Field(
        None, description="Comma-separated distinct park names"
    )


class AdventureCategoriesResponse(BaseModel):
    """Response model for the adventure categories endpoint (top tags only)."""

    category_count: int = Field(..., ge=0, le=config.ADVENTURE_CATEGORIES_LIMIT)
    categories: list[AdventureCategory]
