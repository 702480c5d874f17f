"""
Database Management Scripts

This module contains utilities for database operations:
- Namespaced SQL query templates
- Rebuilding the joined park_activities table
- Seeding and resetting local databases
"""
