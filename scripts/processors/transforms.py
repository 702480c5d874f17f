"""
Pandas implementations of the park activities join and aggregates.

These functions mirror the SQL templates in sql/park_activities/ so the same
outputs can be produced from CSV exports without a database. All functions
are pure: they never mutate their inputs and recompute everything from the
frames they are given.

Example Usage:
    park_activities = build_park_activities(parks_df, things_df)
    counts = verify_park_activities(park_activities)
    hub = activity_hub(park_activities)
    rankings = power_rankings(park_activities)
    categories = adventure_categories(park_activities)
"""

from __future__ import annotations

import logging

import pandas as pd

from config.settings import config
from scripts.processors.park_activity_schemas import (
    ACTIVITY_HUB_COLUMNS,
    ADVENTURE_CATEGORIES_COLUMNS,
    PARK_ACTIVITY_COLUMNS,
    PARK_ENRICHMENT_COLUMNS,
    POWER_RANKINGS_COLUMNS,
    THINGS_TO_DO_COLUMNS,
)
from scripts.processors.tags import EMPTY_TAGS, parse_tags

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ", "
HUB_GROUP_COLUMNS = ["park_name", "park_state", "latitude", "longitude"]

ACTIVITY_HUB_DTYPES = {
    "latitude": "float64",
    "longitude": "float64",
    "num_activities": "int64",
}
POWER_RANKINGS_DTYPES = {"num_activities": "int64"}
ADVENTURE_CATEGORIES_DTYPES = {"num_parks": "int64", "total_activities": "int64"}


def _join_distinct(values: pd.Series, trim: bool = False) -> str | None:
    """Join the distinct non-null values of a series, sorted, with ', '."""
    present = values.dropna()
    if trim:
        # SQL TRIM() only strips spaces
        present = present.map(lambda value: value.strip(" "))
    distinct = sorted(set(present))
    if not distinct:
        return None
    return LIST_SEPARATOR.join(distinct)


def _join_distinct_trimmed(values: pd.Series) -> str | None:
    return _join_distinct(values, trim=True)


def _empty_frame(columns: list[str], dtypes: dict[str, str]) -> pd.DataFrame:
    """Empty result frame with numeric columns typed as they are when populated."""
    return pd.DataFrame(columns=columns).astype(dtypes)


def build_park_activities(
    parks_df: pd.DataFrame, things_df: pd.DataFrame
) -> pd.DataFrame:
    """
    Inner-join things to do with parks on exact park name equality.

    Activities whose park_name matches no park name exactly, and parks with no
    activities, are excluded. Null names never match.

    Args:
        parks_df (pd.DataFrame): Parks with at least the name column
        things_df (pd.DataFrame): Things to do with at least activity_id and park_name

    Returns:
        pd.DataFrame: One row per (activity, park) pair in PARK_ACTIVITY_COLUMNS order
    """
    things = things_df.reindex(columns=THINGS_TO_DO_COLUMNS)
    things = things[things["park_name"].notna()]

    parks = parks_df.reindex(columns=["name"] + PARK_ENRICHMENT_COLUMNS)
    parks = parks[parks["name"].notna()]

    joined = things.merge(
        parks, how="inner", left_on="park_name", right_on="name", sort=False
    )
    return joined[PARK_ACTIVITY_COLUMNS].reset_index(drop=True)


def count_unmatched_things_to_do(
    parks_df: pd.DataFrame, things_df: pd.DataFrame
) -> int:
    """Count things to do whose park_name matches no park name exactly."""
    known_names = parks_df["name"].dropna()
    return int((~things_df["park_name"].isin(known_names)).sum())


def verify_park_activities(park_activities: pd.DataFrame) -> dict[str, int]:
    """
    Compute the observability counts for a park_activities frame.

    Returns:
        dict[str, int]: total_rows, distinct_parks and distinct_activities
    """
    return {
        "total_rows": int(len(park_activities)),
        "distinct_parks": int(park_activities["park_name"].nunique()),
        "distinct_activities": int(park_activities["activity_id"].nunique()),
    }


def activity_hub(park_activities: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate activities per park location for the map widget.

    Rows without latitude or longitude are excluded. Output is ordered by
    num_activities descending, then park_name.
    """
    located = park_activities[
        park_activities["latitude"].notna() & park_activities["longitude"].notna()
    ]
    if located.empty:
        return _empty_frame(ACTIVITY_HUB_COLUMNS, ACTIVITY_HUB_DTYPES)

    hub = (
        located.groupby(HUB_GROUP_COLUMNS, dropna=False, sort=False)
        .agg(
            num_activities=("activity_id", "nunique"),
            activity_titles=("title", _join_distinct_trimmed),
        )
        .reset_index()
    )
    hub = hub.sort_values(
        ["num_activities", "park_name"], ascending=[False, True], kind="mergesort"
    )
    return hub[ACTIVITY_HUB_COLUMNS].reset_index(drop=True)


def power_rankings(
    park_activities: pd.DataFrame, limit: int = config.POWER_RANKINGS_LIMIT
) -> pd.DataFrame:
    """
    Rank parks by number of distinct activities.

    Returns at most `limit` rows ordered by num_activities descending; ties
    are broken by park_name ascending.
    """
    if park_activities.empty:
        return _empty_frame(POWER_RANKINGS_COLUMNS, POWER_RANKINGS_DTYPES)

    rankings = (
        park_activities.groupby("park_name", dropna=False, sort=False)
        .agg(
            num_activities=("activity_id", "nunique"),
            durations=("duration", _join_distinct_trimmed),
        )
        .reset_index()
    )
    rankings = rankings.sort_values(
        ["num_activities", "park_name"], ascending=[False, True], kind="mergesort"
    )
    return rankings[POWER_RANKINGS_COLUMNS].head(limit).reset_index(drop=True)


def find_malformed_tags(park_activities: pd.DataFrame) -> pd.DataFrame:
    """Return activity_id, park_name and tags for rows whose tags are malformed."""
    malformed = park_activities["tags"].map(lambda raw: parse_tags(raw).malformed)
    rows = park_activities.loc[
        malformed.astype(bool), ["activity_id", "park_name", "tags"]
    ]
    return rows.sort_values("activity_id", kind="mergesort").reset_index(drop=True)


def _log_malformed_tags(malformed: pd.DataFrame, log: logging.Logger) -> None:
    sample = malformed["activity_id"].head(config.MALFORMED_TAGS_SAMPLE_SIZE).tolist()
    log.warning(
        f"Skipped {len(malformed)} rows with malformed tags "
        f"(treated as no tags), e.g. activity ids: {sample}"
    )


def explode_tags(
    park_activities: pd.DataFrame, log: logging.Logger | None = None
) -> pd.DataFrame:
    """
    Expand each row into one row per tag.

    Rows whose raw tags value is '[]' are discarded. Malformed tags contribute
    no rows and are reported with a warning.

    Returns:
        pd.DataFrame: Columns park_name, activity_id, activity_type
    """
    log = log or logger

    malformed = find_malformed_tags(park_activities)
    if not malformed.empty:
        _log_malformed_tags(malformed, log)

    candidates = park_activities.loc[
        park_activities["tags"] != EMPTY_TAGS, ["park_name", "activity_id", "tags"]
    ]
    if candidates.empty:
        return pd.DataFrame(columns=["park_name", "activity_id", "activity_type"])

    expanded = candidates.assign(
        activity_type=candidates["tags"].map(lambda raw: parse_tags(raw).tags)
    ).drop(columns="tags")
    expanded = expanded.explode("activity_type")
    expanded = expanded[expanded["activity_type"].notna()]
    return expanded.reset_index(drop=True)


def adventure_categories(
    park_activities: pd.DataFrame,
    limit: int = config.ADVENTURE_CATEGORIES_LIMIT,
    log: logging.Logger | None = None,
) -> pd.DataFrame:
    """
    Break activities down by tag.

    For each tag: distinct parks offering it, total tagged activity rows, and
    the list of park names. Returns at most `limit` rows ordered by num_parks
    descending; ties are broken by activity_type ascending.
    """
    exploded = explode_tags(park_activities, log)
    if exploded.empty:
        return _empty_frame(
            ADVENTURE_CATEGORIES_COLUMNS, ADVENTURE_CATEGORIES_DTYPES
        )

    categories = (
        exploded.groupby("activity_type", sort=False)
        .agg(
            num_parks=("park_name", "nunique"),
            total_activities=("activity_id", "size"),
            park_names=("park_name", _join_distinct),
        )
        .reset_index()
    )
    categories = categories.sort_values(
        ["num_parks", "activity_type"], ascending=[False, True], kind="mergesort"
    )
    return categories[ADVENTURE_CATEGORIES_COLUMNS].head(limit).reset_index(drop=True)
