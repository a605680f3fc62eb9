"""
File Cache Store Module

This module implements the storage engine: one file per key inside a
single directory, each file holding an expiry line followed by the
serialized value.

Expiration is lazy. An expired file stays on disk until it is
overwritten by set(), removed by delete()/clear(), or swept by an
explicit cleanup_expired() call.
"""

import logging
import os
import time
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..config.settings import settings
from .codec import Codec, get_codec
from .exceptions import (
    ConfigurationError,
    CorruptRecordError,
    DecodeError,
    InvalidArgumentError,
    InvalidKeyError,
)
from .record import CacheRecord, key_digest, read_expiry

logger = logging.getLogger(__name__)

TTL = Union[None, int, timedelta]


def system_clock() -> int:
    """Current time in whole seconds since the epoch."""
    return int(time.time())


class FileCache:
    """
    File-persisted key-value cache with per-entry expiration.

    Every operation goes straight to the filesystem; nothing is held in
    memory between calls. There is no locking, so concurrent processes
    sharing a directory may race.

    Values are pickled by default, and reading a pickle can execute code
    planted by anyone who can write to the directory. Pass codec="json"
    for shared or untrusted directories.

    Usage:
        cache = FileCache("/tmp/my-cache", default_ttl=60)
        cache.set("user:1", {"name": "ada"})
        cache.get("user:1")              # {"name": "ada"}
        cache.get("missing", "fallback") # "fallback"

    Attributes:
        directory: Canonical absolute path of the cache directory
        default_ttl: Seconds an entry lives when set() gets no ttl
        extension: File extension used for cache files (without the dot)
        digest: hashlib algorithm used to name files after keys
        codec: Codec used to (de)serialize values
    """

    def __init__(
        self,
        directory: Union[str, "os.PathLike[str]"],
        default_ttl: Optional[int] = None,
        codec: Union[Codec, str, None] = None,
        clock: Optional[Callable[[], int]] = None,
        extension: Optional[str] = None,
        digest: Optional[str] = None,
    ):
        """
        Initialize the cache over an existing directory.

        Args:
            directory: Directory where cache files are written
            default_ttl: Default time-to-live in seconds
                (default from settings.DEFAULT_TTL)
            codec: Codec instance or registered codec name
                (default from settings.CODEC)
            clock: Callable returning the current time in seconds
            extension: Cache file extension (default from settings.EXTENSION)
            digest: Digest algorithm for file names
                (default from settings.DIGEST_ALGORITHM)

        Raises:
            ConfigurationError: If the directory is missing or not writable,
                or the codec, digest or default ttl is invalid
        """
        path = os.fspath(directory)
        if not os.path.isdir(path):
            raise ConfigurationError(f"Cache directory is not a valid directory: {path}")
        if not os.access(path, os.W_OK):
            raise ConfigurationError(f"Cache directory must be writable: {path}")

        self.directory = os.path.realpath(path)

        self.default_ttl = default_ttl if default_ttl is not None else settings.DEFAULT_TTL
        if not _is_int(self.default_ttl):
            raise ConfigurationError(
                f"Default ttl must be an integer, got {type(self.default_ttl).__name__}"
            )

        if codec is None:
            codec = settings.CODEC
        self.codec = get_codec(codec) if isinstance(codec, str) else codec

        self.extension = (extension if extension is not None else settings.EXTENSION).lstrip(".")
        self.digest = digest if digest is not None else settings.DIGEST_ALGORITHM
        # Fail at construction rather than on the first key
        key_digest("", self.digest)

        self._clock = clock if clock is not None else system_clock
        self._suffix = "." + self.extension

    def __repr__(self) -> str:
        return (
            f"FileCache(directory={self.directory!r}, default_ttl={self.default_ttl}, "
            f"codec={self.codec!r})"
        )

    # ------------------------------------------------------------------
    # Keys and paths
    # ------------------------------------------------------------------

    def normalize(self, key: Any) -> str:
        """
        Map a key to the digest used as its file name.

        Raises:
            InvalidKeyError: If the key is not a string
        """
        if not isinstance(key, str):
            raise InvalidKeyError(f"Key of type {type(key).__name__} given. Must be a string")
        return key_digest(key, self.digest)

    def path_for(self, digest: str) -> str:
        """Full path of the cache file for a digest."""
        return os.path.join(self.directory, digest + self._suffix)

    # ------------------------------------------------------------------
    # Single-key operations
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """
        Fetch a value from the cache.

        Args:
            key: The key to look up
            default: Returned when the entry is missing, expired or corrupt

        Returns:
            The stored value, or `default`

        Raises:
            InvalidKeyError: If the key is not a string
        """
        return self._read(self.path_for(self.normalize(key)), default)

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        """
        Store a value, replacing any existing entry.

        Args:
            key: The key to store
            value: Any value the codec can encode
            ttl: None for the default ttl, seconds as an int, or a
                timedelta. A ttl of zero deletes the key instead.

        Returns:
            True if the record was written (or the zero-ttl delete succeeded)

        Raises:
            InvalidKeyError: If the key is not a string
            InvalidArgumentError: If ttl has an unsupported type
        """
        path = self.path_for(self.normalize(key))
        self._check_ttl(ttl)
        return self._write(path, value, ttl)

    def delete(self, key: str) -> bool:
        """
        Delete an entry.

        Returns:
            True if the entry is gone (including when it never existed),
            False if the file could not be removed

        Raises:
            InvalidKeyError: If the key is not a string
        """
        return self._remove(self.path_for(self.normalize(key)))

    def has(self, key: str) -> bool:
        """
        Check if a cache file exists for the key.

        Expiry is not checked, so an expired entry still counts. Use this
        for cache warming, not to decide whether get() will hit.

        Raises:
            InvalidKeyError: If the key is not a string
        """
        return os.path.isfile(self.path_for(self.normalize(key)))

    def clear(self) -> bool:
        """
        Delete every cache file in the directory.

        Files without the cache extension are left alone. Every file is
        attempted even after a failure.

        Returns:
            True only if all deletions succeeded
        """
        ok = True
        for path in self._cache_files():
            ok = self._remove(path) and ok
        return ok

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def get_multiple(self, keys: Iterable, default: Any = None) -> Dict[str, Any]:
        """
        Fetch several values at once.

        Returns:
            Mapping of every requested key to its value or `default`

        Raises:
            InvalidArgumentError: If keys is not a non-string iterable
            InvalidKeyError: If any key is not a string
        """
        paths = self._paths_for(keys)

        values = {}
        for key, path in paths:
            values[key] = self._read(path, default)
        return values

    def set_multiple(self, values: Mapping, ttl: TTL = None) -> bool:
        """
        Store several key-value pairs with the same ttl.

        Nothing is written unless every key is valid.

        Returns:
            True only if every set() succeeded

        Raises:
            InvalidArgumentError: If values is not a mapping or ttl is invalid
            InvalidKeyError: If any key is not a string
        """
        if not isinstance(values, Mapping):
            raise InvalidArgumentError(
                f"Values must be a mapping of keys to values, got {type(values).__name__}"
            )
        self._check_ttl(ttl)
        paths = self._paths_for(values)

        ok = True
        for key, path in paths:
            ok = self._write(path, values[key], ttl) and ok
        return ok

    def delete_multiple(self, keys: Iterable) -> bool:
        """
        Delete several entries.

        Nothing is deleted unless every key is valid.

        Returns:
            True only if every delete() succeeded

        Raises:
            InvalidArgumentError: If keys is not a non-string iterable
            InvalidKeyError: If any key is not a string
        """
        paths = self._paths_for(keys)

        ok = True
        for _, path in paths:
            ok = self._remove(path) and ok
        return ok

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def cleanup_expired(self) -> int:
        """
        Remove expired and unreadable cache files (active expiration).

        Never runs on its own; callers decide when disk space matters.

        Returns:
            Number of files removed
        """
        now = self._clock()
        removed = 0
        for path in self._cache_files():
            expires_at = self._peek_expiry(path)
            if expires_at is not None and expires_at >= now:
                continue
            if os.path.exists(path) and self._remove(path):
                removed += 1

        if removed:
            logger.info(f"Removed {removed} expired cache files from {self.directory}")
        return removed

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cache directory.

        Returns:
            Dictionary containing:
            - total_keys: Cache files on disk
            - expired_keys: Files that are expired or unreadable
            - active_keys: Files that get() would return a value for
            - total_bytes: Combined size of all cache files
            - directory: Cache directory
            - default_ttl: Default ttl in seconds
        """
        now = self._clock()
        total = 0
        expired = 0
        total_bytes = 0

        for path in self._cache_files():
            try:
                total_bytes += os.path.getsize(path)
            except OSError:
                continue
            total += 1
            expires_at = self._peek_expiry(path)
            if expires_at is None or expires_at < now:
                expired += 1

        return {
            "total_keys": total,
            "expired_keys": expired,
            "active_keys": total - expired,
            "total_bytes": total_bytes,
            "directory": self.directory,
            "default_ttl": self.default_ttl,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_ttl(self, ttl: Any) -> None:
        if ttl is None or isinstance(ttl, timedelta) or _is_int(ttl):
            return
        raise InvalidArgumentError(
            f"TTL must be None, an int or a timedelta, got {type(ttl).__name__}"
        )

    def _expires_at(self, ttl: TTL) -> Optional[int]:
        """Absolute expiry for a validated ttl, or None for a zero ttl."""
        now = self._clock()
        if ttl is None:
            return now + self.default_ttl
        if isinstance(ttl, timedelta):
            if not ttl:
                return None
            return int(now + ttl.total_seconds())
        if ttl == 0:
            return None
        return now + ttl

    def _paths_for(self, keys: Iterable) -> List[Tuple[Any, str]]:
        """Validate every key before any file is touched."""
        _check_iterable(keys, "Keys")
        return [(key, self.path_for(self.normalize(key))) for key in list(keys)]

    def _read(self, path: str, default: Any) -> Any:
        if not os.path.isfile(path):
            return default

        try:
            with open(path, "rb") as fh:
                expires_at = read_expiry(fh)
                if expires_at < self._clock():
                    logger.debug(f"Expired entry in {path}")
                    return default
                payload = fh.read()
        except FileNotFoundError:
            # Removed between the existence check and the open
            return default
        except CorruptRecordError as exc:
            logger.warning(f"Corrupt cache file {path}: {exc}")
            return default

        try:
            return self.codec.decode(payload)
        except DecodeError as exc:
            logger.warning(f"Undecodable payload in {path}: {exc}")
            return default

    def _write(self, path: str, value: Any, ttl: TTL) -> bool:
        expires_at = self._expires_at(ttl)
        if expires_at is None:
            return self._remove(path)

        data = CacheRecord(expires_at, self.codec.encode(value)).encode()
        try:
            with open(path, "wb") as fh:
                written = fh.write(data)
        except OSError as exc:
            logger.warning(f"Failed to write {path}: {exc}")
            return False

        return written > 0

    def _remove(self, path: str) -> bool:
        if not os.path.exists(path):
            return True
        try:
            os.remove(path)
        except FileNotFoundError:
            return True
        except OSError as exc:
            logger.warning(f"Failed to delete {path}: {exc}")
            return False
        return True

    def _cache_files(self) -> List[str]:
        with os.scandir(self.directory) as entries:
            return [
                entry.path
                for entry in entries
                if entry.name.endswith(self._suffix) and entry.is_file()
            ]

    def _peek_expiry(self, path: str) -> Optional[int]:
        """Expiry of a cache file, or None if it cannot be read."""
        try:
            with open(path, "rb") as fh:
                return read_expiry(fh)
        except (OSError, CorruptRecordError):
            return None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_iterable(value: Any, what: str) -> None:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise InvalidArgumentError(
            f"{what} must be an iterable collection, got {type(value).__name__}"
        )
