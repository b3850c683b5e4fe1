"""
Key Codecs

A key codec converts between the canonical key form callers use everywhere
and the storage form embedded into statements:

- SequentialKeyCodec: auto-increment integers, passed through unchanged
- UuidKeyCodec: 36-character hyphenated hex <-> 16 raw bytes, with
  timestamp-first (COMB) generation so new keys sort roughly by creation time

Invariant for both schemes: decode(encode(k)) == k for every canonical k.
"""

import logging
import os
import re
import time
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Union

from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

_NON_PRINTABLE = re.compile(r'[^\x20-\x7E\t\r\n]')
_HEX_UUID = re.compile(r'^[0-9a-fA-F]{32}$')


class KeyCodec(ABC):
    """Bidirectional transcoding between canonical and storage key forms."""

    #: Column holding the identifying key when a gateway does not name one
    default_column: str = "id"

    #: Whether generate() can produce keys (otherwise the database assigns them)
    generates_keys: bool = False

    @abstractmethod
    def encode(self, canonical_key: Any) -> Any:
        """Convert a canonical key to its storage form."""
        pass

    @abstractmethod
    def decode(self, storage_value: Any) -> Any:
        """Convert a storage value back to its canonical key."""
        pass

    def generate(self) -> Any:
        """Generate a new canonical key."""
        raise InvalidArgumentError(
            f"{self.__class__.__name__} does not generate keys; the database assigns them on insert"
        )

    def looks_encoded(self, value: Any) -> bool:
        """
        Guess whether a value is already in storage form.

        This is a heuristic, not a guarantee: a binary key whose bytes all
        happen to be printable is reported as not encoded.
        """
        if isinstance(value, (bytes, bytearray, memoryview)):
            return True
        if isinstance(value, str):
            return _NON_PRINTABLE.search(value) is not None
        return False

    def normalize(self, value: Any) -> Any:
        """Return the canonical form of a key given in either representation."""
        if self.looks_encoded(value):
            return self.decode(value)
        return self.decode(self.encode(value))

    def coerce(self, value: Any) -> Any:
        """Coerce loosely typed input (e.g. request parameters) to a canonical key."""
        return self.normalize(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(column={self.default_column!r})"


class SequentialKeyCodec(KeyCodec):
    """Auto-increment integer keys. Both directions are the identity."""

    default_column = "id"
    generates_keys = False

    def encode(self, canonical_key: Any) -> Any:
        return canonical_key

    def decode(self, storage_value: Any) -> Any:
        return storage_value

    def normalize(self, value: Any) -> int:
        """Return the integer key; int-like strings such as "1" are converted."""
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return self.coerce(value)

    def coerce(self, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Invalid sequential key: {value!r}", argument="id", original_error=e) from e


class UuidKeyCodec(KeyCodec):
    """
    UUID keys stored as BINARY(16).

    Canonical form: lowercase hex, hyphenated 8-4-4-4-12.
    Storage form: the 16 bytes obtained by packing the hyphen-stripped hex
    nibbles big-endian.
    """

    default_column = "uuid"
    generates_keys = True

    def encode(self, canonical_key: Union[str, uuid.UUID]) -> bytes:
        """
        Convert a hex UUID string to 16 raw bytes.

        Raises:
            InvalidArgumentError: If the value is not a 32-digit hex UUID
        """
        if isinstance(canonical_key, uuid.UUID):
            return canonical_key.bytes

        if not isinstance(canonical_key, str):
            raise InvalidArgumentError(f"UUID key must be a string, got {type(canonical_key).__name__}", argument="uuid")

        hex_digits = canonical_key.replace('-', '')
        if not _HEX_UUID.match(hex_digits):
            raise InvalidArgumentError(f"Malformed UUID: {canonical_key!r}", argument="uuid")

        return bytes.fromhex(hex_digits)

    def decode(self, storage_value: Union[bytes, bytearray, memoryview, str]) -> str:
        """
        Convert 16 raw bytes to the hyphenated hex form.

        A value that is already a hex string is returned normalised.
        """
        if isinstance(storage_value, (bytearray, memoryview)):
            storage_value = bytes(storage_value)

        if isinstance(storage_value, str):
            if self.looks_encoded(storage_value):
                # Binary data that arrived through a text channel
                storage_value = storage_value.encode('latin-1')
            else:
                return str(uuid.UUID(bytes=self.encode(storage_value)))

        if len(storage_value) != 16:
            raise InvalidArgumentError(f"Binary UUID must be 16 bytes, got {len(storage_value)}", argument="uuid")

        return str(uuid.UUID(bytes=storage_value))

    def generate(self) -> str:
        """
        Generate a version-4 UUID with the timestamp in its first 48 bits.

        The timestamp counts 10 microsecond ticks, so byte order of generated
        keys trends with creation order. This is a locality optimisation,
        not a strict monotonic guarantee.
        """
        ticks = int(time.time() * 100000) & 0xFFFFFFFFFFFF
        raw = bytearray(ticks.to_bytes(6, 'big') + os.urandom(10))
        raw[6] = (raw[6] & 0x0F) | 0x40  # version 4
        raw[8] = (raw[8] & 0x3F) | 0x80  # RFC 4122 variant
        generated = str(uuid.UUID(bytes=bytes(raw)))
        logger.debug(f"Generated COMB UUID {generated}")
        return generated


class KeyScheme(str, Enum):
    """Identifier schemes a gateway can be built for."""
    SEQUENTIAL = "sequential"
    UUID_COMB = "uuid_comb"


def codec_for_scheme(scheme: Union[KeyScheme, str]) -> KeyCodec:
    """
    Return a fresh codec for a key scheme.

    Raises:
        InvalidArgumentError: If the scheme is unknown
    """
    try:
        scheme = KeyScheme(scheme)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown key scheme: {scheme!r}", argument="key_scheme", original_error=e) from e

    if scheme is KeyScheme.UUID_COMB:
        return UuidKeyCodec()
    return SequentialKeyCodec()
