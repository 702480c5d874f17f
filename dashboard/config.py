"""
Configuration for dashboard widgets.

This centralizes all dashboard configuration, making it easy to:
- Enable/disable widgets
- See which aggregate each widget consumes
- Control output locations and figure settings
"""

DASHBOARD_WIDGETS = {
    "activity_hub": {
        "enabled": True,
        "description": "Map of activity counts per park location",
        "aggregate": "activity_hub",
        "outputs": ["activity_hub_map.html", "activity_hub.gpkg"],
    },
    "power_rankings": {
        "enabled": True,
        "description": "Bar chart of the parks with the most activities",
        "aggregate": "power_rankings",
        "outputs": ["power_rankings.png"],
    },
    "adventure_categories": {
        "enabled": True,
        "description": "Bar chart of activity tags by number of parks",
        "aggregate": "adventure_categories",
        "outputs": ["adventure_categories.png"],
    },
}

# Global dashboard settings
DASHBOARD_SETTINGS = {
    "output_directory": "dashboard_results",
    "continue_on_error": True,  # Continue if one widget fails
    "figure_dpi": 150,
    "bar_color": "#2d6a4f",
    "marker_color": "#2d6a4f",
}
