"""
File-Cache: File-Persisted Key-Value Cache

A small key-value cache that keeps one file per entry in a directory,
each tagged with an absolute expiration timestamp.
"""

from .cache import FileCache

__version__ = "1.0.0"

__all__ = ["FileCache"]
