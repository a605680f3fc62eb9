"""
File-Cache Configuration Settings

This module contains all configuration defaults for the file cache.
Every value can be overridden from the environment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Cache configuration settings."""

    # Storage settings
    CACHE_DIR: str = os.environ.get("FILE_CACHE_DIR", ".cache")
    EXTENSION: str = "cache"

    # TTL settings
    DEFAULT_TTL: int = int(os.environ.get("FILE_CACHE_DEFAULT_TTL", "250"))

    # On-disk format settings (changing either makes old entries unreadable)
    DIGEST_ALGORITHM: str = os.environ.get("FILE_CACHE_DIGEST", "sha256")
    CODEC: str = os.environ.get("FILE_CACHE_CODEC", "pickle")

    # Logging settings
    DEBUG: bool = os.environ.get("FILE_CACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("FILE_CACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
