"""
Pytest configuration and shared fixtures for parsistence tests.

Test Organization:
- tests/unit/     - In-process tests, no external record backends
"""

import pytest


@pytest.fixture
def sample_note() -> dict:
    """Sample note attributes for testing."""
    return {
        "title": "Test Note",
        "body": "A test note for unit tests",
    }


@pytest.fixture
def nested_note() -> dict:
    """Note attributes with a nested mapping applied to the same model."""
    return {"title": "A", "nested": {"body": "B"}}
