"""
DoseTrack Test Suite
====================

This package contains all tests for the DoseTrack dose scheduling service.

Test Structure:
- test_tools/: Duration parser, schedule expander and window classifier
- test_services/: Backfill and dose status services against SQLite
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_tools/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"

__all__ = [
    "TEST_DATABASE_URL",
]
