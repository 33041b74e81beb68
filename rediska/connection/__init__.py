"""Connection module for Rediska."""

from .exceptions import ConfigurationError, RediskaConnectionError, RediskaError
from .options import OPTION_NAMES, ConnectionOptions
from .connection import Connection
from .transport import SocketTransport, close_persistent_transports, open_transport

__all__ = [
    "Connection",
    "ConnectionOptions",
    "OPTION_NAMES",
    "SocketTransport",
    "open_transport",
    "close_persistent_transports",
    "RediskaError",
    "ConfigurationError",
    "RediskaConnectionError",
]
