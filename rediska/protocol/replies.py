"""
Protocol Reply Reading

Reads one complete server reply off a connection using the two read
primitives it exposes: read_line() for the header line and read(length)
for bulk payloads.

Reply Format:
    +<status>\r\n                  -> STATUS      (e.g. "+OK")
    -<message>\r\n                 -> ERROR       (e.g. "-ERR unknown command")
    :<number>\r\n                  -> INTEGER
    $<length>\r\n<payload>\r\n     -> BULK        ($-1 means no value)
    *<count>\r\n<bulk>...          -> MULTI_BULK  (*-1 means no value)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..connection.exceptions import RediskaConnectionError


class ReplyStatus(Enum):
    """Enumeration of reply kinds, keyed by their leading byte."""
    STATUS = "+"
    ERROR = "-"
    INTEGER = ":"
    BULK = "$"
    MULTI_BULK = "*"


@dataclass
class Reply:
    """
    Represents a decoded server reply.

    Attributes:
        status: Kind of reply
        value: str for STATUS/ERROR, int for INTEGER, bytes or None for
            BULK, list of bytes/None (or None) for MULTI_BULK
    """
    status: ReplyStatus
    value: Any = None

    @property
    def is_error(self) -> bool:
        return self.status == ReplyStatus.ERROR


def read_reply(connection) -> Reply:
    """
    Read a single reply from an open connection.

    Raises:
        RediskaConnectionError: on I/O failure or an unrecognized reply line
    """
    line = connection.read_line()
    if not line:
        raise RediskaConnectionError("Empty reply from server.")

    prefix, body = line[0], line[1:]
    try:
        status = ReplyStatus(prefix)
    except ValueError:
        raise RediskaConnectionError(f"Unknown reply: {line!r}") from None

    if status in (ReplyStatus.STATUS, ReplyStatus.ERROR):
        return Reply(status=status, value=body)

    try:
        number = int(body)
    except ValueError:
        raise RediskaConnectionError(f"Malformed reply: {line!r}") from None

    if status == ReplyStatus.INTEGER:
        return Reply(status=status, value=number)

    if status == ReplyStatus.BULK:
        return Reply(status=status, value=_read_bulk(connection, number))

    if number < 0:
        return Reply(status=status, value=None)

    items = []
    for _ in range(number):
        item = read_reply(connection)
        items.append(item.value)
    return Reply(status=status, value=items)


def _read_bulk(connection, length: int):
    if length < 0:
        return None
    return connection.read(length)
