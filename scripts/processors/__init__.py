"""
Data Processing Scripts

This module contains the park activities pipeline:
- Tag parsing with malformed-value reporting
- The parks/thingstodo join and its aggregates
- Validation schemas for inputs and outputs
"""
