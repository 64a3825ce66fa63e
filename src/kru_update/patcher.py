"""In-place overwrite of a record's key, value and CRC."""
from __future__ import annotations

import struct
from typing import BinaryIO

from kru_core.checksum import record_checksum
from kru_core.codec import DecodedRecord
from kru_core.errors import LengthMismatchError
from kru_core.protocol import CRC_FMT

APPLIED = "APPLIED"
UNCHANGED = "UNCHANGED"


def apply_patch(f: BinaryIO, record: DecodedRecord, new_key: bytes, new_value: bytes) -> str:
    """Write ``new_key``/``new_value`` over the record's bytes.

    Both replacements must have exactly the stored lengths; the file is never
    resized. The CRC field is rewritten only when its value changes. The
    cursor is left at the end of the record.
    """
    if len(new_key) != len(record.key):
        raise LengthMismatchError(
            f"Key of record offset={record.offset} would change length {len(record.key)} -> {len(new_key)}"
        )
    if len(new_value) != len(record.value):
        raise LengthMismatchError(
            f"Value of record offset={record.offset} would change length {len(record.value)} -> {len(new_value)}"
        )

    new_key = bytes(new_key)
    new_value = bytes(new_value)
    if new_key == record.key and new_value == record.value:
        f.seek(record.end)
        return UNCHANGED

    f.seek(record.key_offset)
    f.write(new_key)
    f.seek(record.value_offset)
    f.write(new_value)

    new_crc = record_checksum(record, new_key, new_value)
    if new_crc != record.checksum:
        f.seek(record.checksum_offset)
        f.write(struct.pack(CRC_FMT, new_crc))

    f.seek(record.end)
    return APPLIED
