"""
Pytest configuration and fixtures for parsistence unit tests.

Unit tests MUST be isolated from shared state:
- No records leak between tests through the store singleton
- Stub records are used where persistence outcomes matter
"""

import pytest
from unittest.mock import MagicMock, patch

from parsistence.services.memory import MemoryStore
from parsistence.services.record import RemoteRecord


@pytest.fixture(autouse=True)
def memory_store():
    """
    Fresh MemoryStore for every unit test.

    Patched where MemoryRecord looks the singleton up, so records saved in
    one test are never visible in another.
    """
    store = MemoryStore()
    with patch("parsistence.services.memory.get_store", return_value=store):
        yield store


@pytest.fixture
def stub_record():
    """RemoteRecord stub whose save/delete always succeed."""
    record = MagicMock(spec=RemoteRecord)
    record.class_name = "Note"
    record.get_object_id.return_value = "stub123"
    record.get.return_value = "value"
    record.save.return_value = True
    record.delete.return_value = True
    record.responds_to.return_value = False
    return record


def pytest_collection_modifyitems(items):
    """Automatically add 'unit' marker to all tests in /unit/."""
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
