"""Shared fixtures for cratescout tests."""

import pytest

from constants import Constants

_TUNABLES = (
    "REGISTRY_URL",
    "USER_AGENT",
    "CONNECT_TIMEOUT",
    "REQUEST_TIMEOUT",
    "RESULT_CHANNEL_SIZE",
)


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo runtime overrides applied to Constants by CLI/config tests."""
    saved = {name: getattr(Constants, name) for name in _TUNABLES}
    yield
    for name, value in saved.items():
        setattr(Constants, name, value)
