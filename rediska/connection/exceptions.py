"""
Connection Exceptions

Every error raised by a Connection derives from RediskaError so callers
can catch the whole family with one clause.
"""

from typing import Optional


class RediskaError(Exception):
    """Base class for all Rediska errors."""


class ConfigurationError(RediskaError):
    """Raised when an unknown connection option is read or written."""


class RediskaConnectionError(RediskaError):
    """
    Raised when the connection can't be opened, written or read.

    Attributes:
        host: Server host, when the failure is tied to an endpoint
        port: Server port, when the failure is tied to an endpoint
        errno: Low-level error code reported by the transport, if any
    """

    def __init__(
            self,
            message: str,
            host: Optional[str] = None,
            port: Optional[int] = None,
            errno: Optional[int] = None,
    ):
        super().__init__(message)
        self.host = host
        self.port = port
        self.errno = errno
