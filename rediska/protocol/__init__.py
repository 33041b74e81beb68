"""Protocol module for Rediska."""

from .commands import (
    BULK_TERMINATOR_LENGTH,
    EOL,
    CommandType,
    auth_command,
    format_command,
)
from .replies import Reply, ReplyStatus, read_reply

__all__ = [
    "EOL",
    "BULK_TERMINATOR_LENGTH",
    "CommandType",
    "auth_command",
    "format_command",
    "Reply",
    "ReplyStatus",
    "read_reply",
]
