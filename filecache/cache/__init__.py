"""Cache module for File-Cache."""

from .codec import Codec, JsonCodec, PickleCodec, get_codec
from .exceptions import (
    CacheError,
    ConfigurationError,
    CorruptRecordError,
    DecodeError,
    InvalidArgumentError,
    InvalidKeyError,
)
from .record import CacheRecord, key_digest
from .store import FileCache, system_clock

__all__ = [
    "FileCache",
    "system_clock",
    "CacheRecord",
    "key_digest",
    "Codec",
    "PickleCodec",
    "JsonCodec",
    "get_codec",
    "CacheError",
    "ConfigurationError",
    "CorruptRecordError",
    "DecodeError",
    "InvalidArgumentError",
    "InvalidKeyError",
]
