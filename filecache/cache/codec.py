"""
Serialization Codecs

A codec turns values into bytes for storage and back. Decoding must
raise DecodeError on malformed input so that a payload that decodes to
a falsy value (False, 0, "", None) is never mistaken for a failure.
"""

import json
import pickle
from typing import Any, Dict, Type

from .exceptions import ConfigurationError, DecodeError, InvalidArgumentError


class Codec:
    """
    Base class for value codecs.

    Subclasses set `name` and implement encode() and decode().
    """

    name = ""

    def encode(self, value: Any) -> bytes:
        raise NotImplementedError

    def decode(self, data: bytes) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PickleCodec(Codec):
    """
    Stores any picklable Python object.

    Unpickling runs code chosen by whoever wrote the payload, so anyone
    with write access to the cache directory can execute code in the
    reading process. Use JsonCodec for shared or untrusted directories.
    """

    name = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    def encode(self, value: Any) -> bytes:
        try:
            return pickle.dumps(value, protocol=self.protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise InvalidArgumentError(f"Value cannot be pickled: {exc}") from exc

    def decode(self, data: bytes) -> Any:
        if not data:
            raise DecodeError("Empty payload")
        try:
            return pickle.loads(data)
        except Exception as exc:
            # Damaged pickles can fail with almost any exception type
            raise DecodeError(f"Malformed pickle payload: {exc}") from exc


class JsonCodec(Codec):
    """Stores JSON-compatible values as UTF-8 text."""

    name = "json"

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Value is not JSON serializable: {exc}") from exc

    def decode(self, data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise DecodeError(f"Malformed JSON payload: {exc}") from exc


_CODECS: Dict[str, Type[Codec]] = {
    PickleCodec.name: PickleCodec,
    JsonCodec.name: JsonCodec,
}


def get_codec(name: str) -> Codec:
    """
    Create a codec by name.

    Raises:
        ConfigurationError: If no codec is registered under `name`
    """
    try:
        codec_cls = _CODECS[name]
    except KeyError:
        known = ", ".join(sorted(_CODECS))
        raise ConfigurationError(f"Unknown codec '{name}' (expected one of: {known})") from None
    return codec_cls()
