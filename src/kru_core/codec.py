"""Sequential decoder (and encoder) for Kafka v0/v1 segment records."""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from .checksum import compute_checksum
from .errors import MalformedRecordError, TruncatedRecordError
from .protocol import (
    CRC_POS,
    HEAD_FMT,
    HEAD_LEN,
    LENGTH_FMT,
    LENGTH_LEN,
    MAGIC_V1,
    NULL_LENGTH,
    TIMESTAMP_FMT,
    TIMESTAMP_LEN,
)


@dataclass(frozen=True)
class DecodedRecord:
    """One record as found on disk, with the absolute file positions needed to patch it."""

    offset: int
    framing_length: int
    checksum: int
    magic: int
    attributes: int
    timestamp: int | None
    key_length: int
    key: bytes
    value_length: int
    value: bytes

    position: int
    key_offset: int
    value_offset: int
    end: int

    @property
    def checksum_offset(self) -> int:
        return self.position + CRC_POS

    @property
    def size(self) -> int:
        return self.end - self.position

    def to_bytes(self) -> bytes:
        """Re-encode the record exactly as it was stored."""
        return encode_record(
            self.offset,
            None if self.key_length == NULL_LENGTH else self.key,
            None if self.value_length == NULL_LENGTH else self.value,
            magic=self.magic,
            attributes=self.attributes,
            timestamp=self.timestamp,
            checksum=self.checksum,
            framing_length=self.framing_length,
        )


def _read_exact(f: BinaryIO, n: int, start: int) -> bytes:
    data = f.read(n)
    if len(data) != n:
        raise TruncatedRecordError(start, n, len(data))
    return data


def _read_length(f: BinaryIO, start: int, field: str) -> int:
    (length,) = struct.unpack(LENGTH_FMT, _read_exact(f, LENGTH_LEN, start))
    if length < NULL_LENGTH:
        raise MalformedRecordError(f"Negative {field} length {length} in record at byte {start}")
    return length


def decode_next(f: BinaryIO) -> DecodedRecord | None:
    """Decode the record at the cursor.

    Returns None on clean EOF (no byte of a new record present) and raises
    TruncatedRecordError when EOF hits partway through one. The framing
    length is read but never used to bound the decode: every field is read
    by its own explicit length.
    """
    start = f.tell()
    head = f.read(HEAD_LEN)

    # Clean EOF
    if len(head) == 0:
        return None

    if len(head) < HEAD_LEN:
        raise TruncatedRecordError(start, HEAD_LEN, len(head))

    offset, framing_length, crc, magic, attributes = struct.unpack(HEAD_FMT, head)

    timestamp = None
    if magic > 0:
        (timestamp,) = struct.unpack(TIMESTAMP_FMT, _read_exact(f, TIMESTAMP_LEN, start))

    key_length = _read_length(f, start, "key")
    key_offset = f.tell()
    key = _read_exact(f, key_length, start) if key_length != NULL_LENGTH else b""

    value_length = _read_length(f, start, "value")
    value_offset = f.tell()
    value = _read_exact(f, value_length, start) if value_length != NULL_LENGTH else b""

    return DecodedRecord(
        offset=offset,
        framing_length=framing_length,
        checksum=crc,
        magic=magic,
        attributes=attributes,
        timestamp=timestamp,
        key_length=key_length,
        key=key,
        value_length=value_length,
        value=value,
        position=start,
        key_offset=key_offset,
        value_offset=value_offset,
        end=f.tell(),
    )


def iter_records(f: BinaryIO) -> Iterator[DecodedRecord]:
    """Yield records until clean EOF. Truncation propagates to the caller."""
    while True:
        record = decode_next(f)
        if record is None:
            return
        yield record


def framing_length_for(magic: int, key: bytes | None, value: bytes | None) -> int:
    n = 4 + 1 + 1 + LENGTH_LEN + LENGTH_LEN
    if magic > 0:
        n += TIMESTAMP_LEN
    return n + len(key or b"") + len(value or b"")


def encode_record(
    offset: int,
    key: bytes | None,
    value: bytes | None,
    *,
    magic: int = MAGIC_V1,
    attributes: int = 0,
    timestamp: int | None = 0,
    checksum: int | None = None,
    framing_length: int | None = None,
) -> bytes:
    """Serialize one record. ``None`` key/value are written as the -1 sentinel.

    Checksum and framing length are computed unless given explicitly.
    """
    if checksum is None:
        checksum = compute_checksum(magic, attributes, timestamp, key, value)
    if framing_length is None:
        framing_length = framing_length_for(magic, key, value)

    parts = [struct.pack(HEAD_FMT, offset, framing_length, checksum, magic, attributes)]
    if magic > 0:
        parts.append(struct.pack(TIMESTAMP_FMT, timestamp or 0))
    for data in (key, value):
        parts.append(struct.pack(LENGTH_FMT, NULL_LENGTH if data is None else len(data)))
        parts.append(data or b"")
    return b"".join(parts)
