"""Failure taxonomy for segment decoding and patching."""
from __future__ import annotations


class RecordError(ValueError):
    """A fault confined to one segment file."""


class TruncatedRecordError(RecordError):
    """EOF was reached partway through a record.

    Recoverable: segments may legitimately end mid-record after an unclean
    broker shutdown. The scanner stops and reports what it read so far.
    """

    def __init__(self, position: int, needed: int, got: int):
        self.position = position
        self.needed = needed
        self.got = got
        super().__init__(f"Truncated record at byte {position}: needed {needed} bytes, got {got}")


class MalformedRecordError(RecordError):
    """A length field holds a value no broker writes."""


class IntegrityError(RecordError):
    """Stored CRC does not match the bytes the codec read."""

    def __init__(self, position: int, expected: int, found: int, path=None):
        self.position = position
        self.expected = expected
        self.found = found
        self.path = path
        where = f" in {path}" if path is not None else ""
        super().__init__(
            f"Invalid CRC at byte {position}{where}. Expected {expected} (calculated) but found {found} (in file)"
        )


class LengthMismatchError(RecordError):
    """An update strategy tried to resize a key or value."""


class UnknownStrategyError(ValueError):
    """No update strategy registered under the requested name."""


class DataDirectoryError(ValueError):
    """The given path is not a usable Kafka data directory."""
