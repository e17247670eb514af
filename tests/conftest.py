# Shared fixtures for the octopat test suite

import socket

import pytest
from aiohttp.test_utils import unused_port

from github_oauth import AppCredentials


@pytest.fixture
def credentials():
    return AppCredentials(client_id="abc", client_secret="shh-very-secret", alias="default")


@pytest.fixture
def port():
    return unused_port()


def _port_is_free(port: int) -> bool:
    """True if a fresh listening socket can bind the port on loopback"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(("127.0.0.1", port))
        sock.listen(1)
        return True
    except OSError:
        return False
    finally:
        sock.close()


@pytest.fixture
def port_is_free():
    return _port_is_free
