"""
On-Disk Record Format

Every cache entry is a single file:

    <expires_at>\n<payload>

Line 1 is the absolute expiry time as a decimal integer (seconds since
the epoch). Everything after the first newline is the serialized value,
which may be arbitrary binary data.

File names are hex digests of the key, so arbitrary strings map to
fixed-length names that cannot traverse directories.
"""

import hashlib
import re
from dataclasses import dataclass
from typing import BinaryIO

from .exceptions import ConfigurationError, CorruptRecordError

# Longest expiry line accepted; anything longer is not a timestamp
MAX_HEADER_LENGTH = 32

_EXPIRY_PATTERN = re.compile(rb"-?[0-9]+")


@dataclass
class CacheRecord:
    """
    A decoded cache file.

    Attributes:
        expires_at: Absolute expiry timestamp in whole seconds
        payload: Serialized value bytes
    """
    expires_at: int
    payload: bytes = b""

    def encode(self) -> bytes:
        """Render the record in its on-disk form."""
        return str(self.expires_at).encode("ascii") + b"\n" + self.payload

    @classmethod
    def read(cls, stream: BinaryIO) -> "CacheRecord":
        """Read a whole record from an open binary stream."""
        expires_at = read_expiry(stream)
        return cls(expires_at=expires_at, payload=stream.read())


def read_expiry(stream: BinaryIO) -> int:
    """
    Read and parse the expiry line, leaving the stream at the payload.

    Raises:
        CorruptRecordError: If the first line is missing or not an integer
    """
    line = stream.readline(MAX_HEADER_LENGTH + 1)
    if not line.endswith(b"\n"):
        raise CorruptRecordError("Missing expiry line")

    text = line.rstrip(b"\r\n")
    if not _EXPIRY_PATTERN.fullmatch(text):
        raise CorruptRecordError(f"Invalid expiry line: {text!r}")
    return int(text)


def key_digest(key: str, algorithm: str = "sha256") -> str:
    """
    Map a key to a filesystem-safe hex digest.

    Args:
        key: The cache key
        algorithm: Any hashlib algorithm name ("md5" gives the 32 char
            names used by older cache directories)

    Raises:
        ConfigurationError: If the algorithm is not available
    """
    try:
        hasher = hashlib.new(algorithm)
    except (ValueError, TypeError):
        raise ConfigurationError(f"Unsupported digest algorithm '{algorithm}'") from None
    hasher.update(key.encode("utf-8"))
    return hasher.hexdigest()
