"""
Dashboard rendering for the NPS park activities aggregates.

This package renders the three dashboard widgets (activity hub map, power
rankings chart, adventure categories chart) from the aggregate frames
produced by scripts.processors.park_activities.
"""
