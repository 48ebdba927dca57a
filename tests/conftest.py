"""Shared test fixtures."""

import pytest

from tests.helpers import make_record


@pytest.fixture
def record_factory():
    """Build FilesystemRecord objects with sensible defaults."""
    return make_record
