"""Test suite for the membership auth core.

Test structure:
- unit/: In-memory adapters and mocks, no external services
- integration/: SQLAlchemy repositories against PostgreSQL (TEST_DATABASE_URL)
"""
