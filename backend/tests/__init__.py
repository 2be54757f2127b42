"""
Pytest suite for the Article backend.

Test categories:
- Unit tests: rules, errors, settings and schemas, no database
- Integration tests: models and services against in-memory SQLite
"""
