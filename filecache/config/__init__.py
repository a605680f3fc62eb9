"""Configuration module for File-Cache."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
