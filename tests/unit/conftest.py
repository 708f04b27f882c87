"""Pytest configuration for unit tests.

Unit tests must not make network calls. Any HTTP request through requests or
a socket connection attempt fails the test; integration tests are free to do
filesystem work in temporary directories.
"""

from unittest.mock import patch

import pytest


class NetworkCallDetectedError(Exception):
    """Raised when a unit test attempts to make a network call."""

    def __init__(self, library_name: str, call_type: str):
        self.library_name = library_name
        self.call_type = call_type
        super().__init__(
            f"Network call detected in unit test: {library_name}.{call_type}()\n"
            f"Unit tests must not make network calls. Use mocks instead."
        )


def _blocked(library_name: str, call_type: str):
    def _raise(*args, **kwargs):
        raise NetworkCallDetectedError(library_name, call_type)

    return _raise


@pytest.fixture(autouse=True)
def block_network_calls():
    """Fail fast on real HTTP requests or socket connections."""
    with patch("requests.Session.request", _blocked("requests.Session", "request")), patch(
        "socket.socket.connect", _blocked("socket.socket", "connect")
    ), patch("socket.create_connection", _blocked("socket", "create_connection")):
        yield

