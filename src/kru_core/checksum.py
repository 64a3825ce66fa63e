"""CRC32 over the canonical message scope.

The broker computes the CRC over everything after the CRC field:
magic, attributes, [timestamp], key length, key, value length, value.
zlib's CRC32 is the same polynomial as java.util.zip.CRC32.
"""
from __future__ import annotations

import struct
import zlib

from .errors import IntegrityError
from .protocol import LENGTH_FMT, NULL_LENGTH, TIMESTAMP_FMT


def _length(data: bytes | None) -> bytes:
    return struct.pack(LENGTH_FMT, NULL_LENGTH if data is None else len(data))


def canonical_bytes(
    magic: int,
    attributes: int,
    timestamp: int | None,
    key: bytes | None,
    value: bytes | None,
) -> bytes:
    """Bytes covered by the CRC. ``None`` key/value stand for the -1 sentinel."""
    parts = [struct.pack(">bB", magic, attributes)]
    if magic > 0:
        parts.append(struct.pack(TIMESTAMP_FMT, timestamp or 0))
    parts.append(_length(key))
    parts.append(key or b"")
    parts.append(_length(value))
    parts.append(value or b"")
    return b"".join(parts)


def compute_checksum(
    magic: int,
    attributes: int,
    timestamp: int | None,
    key: bytes | None,
    value: bytes | None,
) -> int:
    return zlib.crc32(canonical_bytes(magic, attributes, timestamp, key, value)) & 0xFFFFFFFF


def record_checksum(record, key: bytes | None = None, value: bytes | None = None) -> int:
    """Checksum of a decoded record, optionally with replacement key/value.

    Sentinel lengths stored in the file are kept: a null key stays null.
    """
    key = record.key if key is None else key
    value = record.value if value is None else value
    return compute_checksum(
        record.magic,
        record.attributes,
        record.timestamp,
        None if record.key_length == NULL_LENGTH else key,
        None if record.value_length == NULL_LENGTH else value,
    )


def verify(record) -> bool:
    return record_checksum(record) == record.checksum


def ensure_valid(record, path=None) -> None:
    calculated = record_checksum(record)
    if calculated != record.checksum:
        raise IntegrityError(record.position, calculated, record.checksum, path)
