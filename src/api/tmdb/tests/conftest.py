"""
Shared fixtures and utilities for TMDB service tests.

Fixtures in fixtures/ are trimmed copies of real TMDB v3 responses.
"""

# Set environment to test mode FIRST, before any imports
import os

os.environ["ENVIRONMENT"] = "test"

import json
from pathlib import Path

import pytest

from api.tmdb.core import TMDBService


def pytest_configure(config):
    """Pytest hook to configure test environment before any tests run."""
    os.environ["ENVIRONMENT"] = "test"


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(filename: str) -> dict:
    """Load a fixture from JSON file.

    Args:
        filename: Name of the fixture file

    Returns:
        Parsed JSON data

    Raises:
        FileNotFoundError: If fixture file doesn't exist
    """
    fixture_path = FIXTURES_DIR / filename
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path) as f:
        return json.load(f)


@pytest.fixture
def mock_tmdb_token():
    """Mock TMDB API token."""
    return "test_tmdb_token_12345"


@pytest.fixture
def tmdb_service(mock_tmdb_token):
    return TMDBService(read_token=mock_tmdb_token)
