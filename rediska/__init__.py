"""
Rediska: Redis Connection Core

A blocking, single-socket connection to a Redis-style key-value server
speaking the line-oriented request/response protocol over raw TCP.
"""

from .connection import (
    ConfigurationError,
    Connection,
    ConnectionOptions,
    RediskaConnectionError,
    RediskaError,
)

__version__ = "0.2.2"

__all__ = [
    "Connection",
    "ConnectionOptions",
    "RediskaError",
    "ConfigurationError",
    "RediskaConnectionError",
]
