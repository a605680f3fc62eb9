"""
Cache Exceptions

All errors raised by the cache derive from CacheError. Argument and
configuration errors also derive from ValueError so callers that only
know about built-in exceptions can still catch them.
"""


class CacheError(Exception):
    """Base class for all cache errors."""


class ConfigurationError(CacheError, ValueError):
    """Cache directory, digest algorithm or codec is unusable."""


class InvalidArgumentError(CacheError, ValueError):
    """An argument has an unsupported type or value."""


class InvalidKeyError(InvalidArgumentError):
    """A cache key is not a string."""


class DecodeError(CacheError):
    """A stored payload could not be decoded."""


class CorruptRecordError(CacheError):
    """A cache file does not start with a valid expiry line."""
