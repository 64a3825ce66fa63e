"""Kafka record updater core - segment codec and checksum."""
from .checksum import compute_checksum, record_checksum, verify
from .codec import DecodedRecord, decode_next, encode_record, iter_records
from .errors import (
    DataDirectoryError,
    IntegrityError,
    LengthMismatchError,
    MalformedRecordError,
    RecordError,
    TruncatedRecordError,
    UnknownStrategyError,
)

__all__ = [
    "DecodedRecord",
    "decode_next",
    "encode_record",
    "iter_records",
    "compute_checksum",
    "record_checksum",
    "verify",
    "RecordError",
    "TruncatedRecordError",
    "MalformedRecordError",
    "IntegrityError",
    "LengthMismatchError",
    "UnknownStrategyError",
    "DataDirectoryError",
]
