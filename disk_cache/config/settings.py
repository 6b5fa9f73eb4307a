"""
Disk-Cache Configuration Settings

This module contains all configuration constants for the disk cache.
Values can be overridden through environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Cache configuration settings."""

    # Storage settings
    DIRECTORY: str = os.environ.get(
        "DISK_CACHE_DIR", os.path.join("~", ".cache", "disk-cache")
    )
    CODEC: str = os.environ.get("DISK_CACHE_CODEC", "pickle")

    # Key settings
    MAX_KEY_LENGTH: int = 255  # Bytes; common filename limit

    # Logging settings
    DEBUG: bool = os.environ.get("DISK_CACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("DISK_CACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
