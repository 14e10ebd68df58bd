"""
Core utilities: configuration, logging, per-call context, the error
taxonomy and SQLite helpers.
"""
