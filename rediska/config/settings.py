"""
Rediska Configuration Settings

This module contains the process-wide defaults used by connections
and by the interactive client. Values can be overridden from the
environment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Client configuration settings."""

    # Network settings
    HOST: str = os.environ.get("REDISKA_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("REDISKA_PORT", "6379"))
    TCP_NODELAY: bool = True

    # Distribution settings (consumed outside the connection)
    WEIGHT: int = 1

    # Wire settings
    ENCODING: str = "utf-8"

    # Logging settings
    DEBUG: bool = os.environ.get("REDISKA_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("REDISKA_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
