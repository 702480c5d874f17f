"""
NPS Park Activities Scripts Package

This package contains the processing and database management scripts,
organized into logical subdirectories:

- processors/: Tag parsing, the park activity join and its aggregates
- database/: SQL templates, database writing and reset utilities
"""
