import pytest

from helpers import MockServer


@pytest.fixture
def mock_server():
    servers = []

    def factory(response: bytes = None, close_after: bool = False) -> MockServer:
        server = MockServer(response, close_after).start()
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.stop()
