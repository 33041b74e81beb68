"""
Protocol Command Definitions

Framing constants and the few command lines the connection itself
sends. Everything else is composed by callers and passed to
Connection.write() as a plain line.
"""

from enum import Enum


# Line terminator appended to every outgoing command
EOL = "\r\n"

# Bulk replies carry their own trailing EOL after the payload
BULK_TERMINATOR_LENGTH = len(EOL)


class CommandType(Enum):
    """Commands issued by the connection without caller involvement."""
    AUTH = "AUTH"
    QUIT = "QUIT"


def format_command(*parts) -> str:
    """
    Join command parts into a single protocol line (without EOL).

    Examples:
        >>> format_command("SET", "key", "value")
        'SET key value'
        >>> format_command(CommandType.QUIT)
        'QUIT'
    """
    return " ".join(
        part.value if isinstance(part, CommandType) else str(part)
        for part in parts
    )


def auth_command(password: str) -> str:
    """Build the authentication line sent right after connecting."""
    return format_command(CommandType.AUTH, password)
