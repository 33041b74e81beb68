"""
Connection Options

Defines the fixed set of options a connection accepts and the
normalization applied to caller-supplied option mappings.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from ..config.settings import settings
from .exceptions import ConfigurationError


@dataclass
class ConnectionOptions:
    """
    Configuration of a single Redis endpoint.

    Attributes:
        host: Server host name or address
        port: Server TCP port
        weight: Relative weight for key distribution across servers
            (not used by the connection itself)
        persistent: Reuse an open socket to the same endpoint across
            connection instances instead of always opening a fresh one
        password: Sent as AUTH right after connecting, when non-empty
        alias: Human-readable name used as the connection's identity
    """
    host: str = field(default_factory=lambda: settings.HOST)
    port: int = field(default_factory=lambda: settings.PORT)
    weight: int = field(default_factory=lambda: settings.WEIGHT)
    persistent: bool = False
    password: Optional[str] = None
    alias: Optional[str] = None


OPTION_NAMES = tuple(f.name for f in fields(ConnectionOptions))


def validate_option_name(name: str) -> str:
    """
    Ensure name is a known option.

    Raises:
        ConfigurationError: if name is not one of OPTION_NAMES
    """
    if name not in OPTION_NAMES:
        raise ConfigurationError(f"Unknown option '{name}'")
    return name


def normalize_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Lowercase option names and overlay them on the defaults.

    Unknown names are rejected here so construction fails before any
    option is applied.

    Examples:
        >>> normalize_options({"Host": "10.0.0.5"})["host"]
        '10.0.0.5'
    """
    defaults = ConnectionOptions()
    merged = {name: getattr(defaults, name) for name in OPTION_NAMES}

    for name, value in (options or {}).items():
        merged[validate_option_name(str(name).lower())] = value

    return merged
