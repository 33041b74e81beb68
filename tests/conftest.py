"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import errno
import socket
from contextlib import closing
from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio

from rediska.connection import Connection, close_persistent_transports
from tests.stub_server import StubRedisServer


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Fake Transport
# ============================================================================

class FakeTransport:
    """
    Scripted in-memory transport.

    Attributes:
        lines: Results for readline(), popped in order (bytes or exception)
        chunks: Results for read(size), popped in order; a chunk longer
            than size is split and the rest kept for the next call
        send_results: Byte counts (or exceptions) for send(), popped in
            order; once empty every send accepts all data
        written: Everything accepted by send()
        send_calls / read_sizes / readline_calls: Call bookkeeping
    """

    def __init__(self, lines=None, chunks=None, send_results=None, close_error=None):
        self.lines: List = list(lines or [])
        self.chunks: List = list(chunks or [])
        self.send_results: List = list(send_results or [])
        self.close_error = close_error
        self.written = bytearray()
        self.send_calls = 0
        self.read_sizes: List[int] = []
        self.readline_calls = 0
        self.close_calls = 0
        self.closed = False

    def send(self, data: bytes) -> int:
        self.send_calls += 1
        self._check_open()
        if self.send_results:
            result = self.send_results.pop(0)
            if isinstance(result, Exception):
                raise result
            count = min(result, len(data))
        else:
            count = len(data)
        self.written += data[:count]
        return count

    def readline(self) -> bytes:
        self.readline_calls += 1
        self._check_open()
        if not self.lines:
            return b""
        line = self.lines.pop(0)
        if isinstance(line, Exception):
            raise line
        return line

    def read(self, size: int) -> bytes:
        self.read_sizes.append(size)
        self._check_open()
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        if len(chunk) > size:
            self.chunks.insert(0, chunk[size:])
            chunk = chunk[:size]
        return chunk

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True
        if self.close_error is not None:
            raise self.close_error

    def _check_open(self) -> None:
        if self.closed:
            raise OSError(errno.EBADF, "Transport is closed")


class FakeTransportFactory:
    """
    Transport factory handing out FakeTransports.

    Queue transports with prepare() and open failures with fail();
    otherwise a blank FakeTransport is returned.
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self.transports: List[FakeTransport] = []
        self._queued: List[FakeTransport] = []
        self._errors: List[Exception] = []

    def prepare(self, transport: FakeTransport) -> FakeTransport:
        self._queued.append(transport)
        return transport

    def fail(self, error: Exception) -> None:
        self._errors.append(error)

    @property
    def last(self) -> Optional[FakeTransport]:
        return self.transports[-1] if self.transports else None

    def __call__(self, host, port, persistent=False, password=None):
        self.calls.append((host, port, persistent, password))
        if self._errors:
            raise self._errors.pop(0)
        transport = self._queued.pop(0) if self._queued else FakeTransport()
        self.transports.append(transport)
        return transport


@pytest.fixture
def transport_factory() -> FakeTransportFactory:
    """Create a factory producing scripted transports."""
    return FakeTransportFactory()


@pytest.fixture
def make_connection(transport_factory: FakeTransportFactory):
    """
    Factory fixture to create connections on fake transports.

    Usage:
        def test_something(make_connection):
            conn = make_connection({"password": "secret"})
    """
    def factory(options=None) -> Connection:
        return Connection(options, transport_factory=transport_factory)
    return factory


@pytest.fixture(autouse=True)
def reset_persistent_transports():
    """Keep persistent sockets from leaking between tests."""
    yield
    close_persistent_transports()


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[StubRedisServer, None]:
    """Create and start a stub server without a password."""
    srv = StubRedisServer(host='127.0.0.1', port=server_port)
    await srv.start()

    yield srv

    await srv.stop()


@pytest_asyncio.fixture
async def auth_server(server_port: int) -> AsyncGenerator[StubRedisServer, None]:
    """Create and start a stub server requiring the password 'secret'."""
    srv = StubRedisServer(host='127.0.0.1', port=server_port, password='secret')
    await srv.start()

    yield srv

    await srv.stop()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

