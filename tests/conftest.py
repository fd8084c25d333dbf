"""Shared test configuration."""

import pytest

from travelhub.utils.logger import setup_logging


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep structured logs off stdout and below warning level."""
    setup_logging(level="WARNING", format_type="json")
