"""
Socket Transport Module

Thin byte-stream wrapper around a blocking TCP socket, plus the registry
backing persistent connections.

The connection only relies on this surface of a transport:
    send(data)      -> number of bytes accepted (may be partial)
    readline()      -> bytes up to and including b"\\n", b"" at EOF
    read(size)      -> at most size bytes, b"" at EOF
    close()
    closed          -> True once closed

I/O on a closed transport raises OSError, like I/O on a closed socket.
"""

import errno
import logging
import socket
import threading
from typing import Dict, Optional, Tuple

from ..config.settings import settings

logger = logging.getLogger(__name__)


class SocketTransport:
    """
    Blocking TCP transport.

    Reads go through a buffered reader so readline() and read() can be
    mixed freely on the same stream. Sockets keep Python's default of no
    timeout, so a stalled peer blocks the caller indefinitely.

    Attributes:
        persistent: True when the transport is shared through the
            persistent registry
    """

    def __init__(self, sock: socket.socket, persistent: bool = False):
        self._sock = sock
        self._reader = sock.makefile("rb")
        self._closed = False
        self.persistent = persistent

    @classmethod
    def connect(cls, host: str, port: int, persistent: bool = False) -> "SocketTransport":
        """
        Open a TCP connection to host:port.

        Raises:
            OSError: if the connection can't be established
        """
        sock = socket.create_connection((host, port))
        if settings.TCP_NODELAY:
            try:
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            except OSError:
                sock.close()
                raise
        return cls(sock, persistent=persistent)

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, data: bytes) -> int:
        self._check_open()
        return self._sock.send(data)

    def readline(self) -> bytes:
        self._check_open()
        return self._reader.readline()

    def read(self, size: int) -> bytes:
        self._check_open()
        # read1 performs at most one raw read, so short reads surface to the caller
        return self._reader.read1(size)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._reader.close()
        finally:
            self._sock.close()

    def _check_open(self) -> None:
        # Another persistent sharer may have closed this transport
        if self._closed:
            raise OSError(errno.EBADF, "Transport is closed")


# Persistent transports: (host, port, password) -> open transport
_persistent_transports: Dict[Tuple[str, int, Optional[str]], SocketTransport] = {}
_persistent_lock = threading.Lock()


def open_transport(
        host: str,
        port: int,
        persistent: bool = False,
        password: Optional[str] = None,
) -> SocketTransport:
    """
    Default transport factory used by Connection.

    Args:
        host: Server host
        port: Server port
        persistent: Reuse an open transport to the same endpoint, if any
        password: Part of the persistent registry key so sockets opened
            with different credentials are never shared

    Returns:
        An open transport

    Raises:
        OSError: if a new socket can't be opened
    """
    if not persistent:
        return SocketTransport.connect(host, port)

    key = (host, port, password)
    with _persistent_lock:
        transport = _persistent_transports.get(key)
        if transport is not None and not transport.closed:
            logger.debug(f"Reusing persistent transport to {host}:{port}")
            return transport

        transport = SocketTransport.connect(host, port, persistent=True)
        _persistent_transports[key] = transport
        logger.debug(f"Opened persistent transport to {host}:{port}")
        return transport


def close_persistent_transports() -> int:
    """
    Close and forget every registered persistent transport.

    Returns:
        Number of transports that were still open
    """
    with _persistent_lock:
        transports = list(_persistent_transports.values())
        _persistent_transports.clear()

    closed = 0
    for transport in transports:
        if transport.closed:
            continue
        try:
            transport.close()
        except OSError as e:
            logger.warning(f"Error closing persistent transport: {e}")
        closed += 1
    return closed
