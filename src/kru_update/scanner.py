from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from warnings import warn

from kru_core.checksum import ensure_valid
from kru_core.codec import decode_next
from kru_core.errors import TruncatedRecordError

from .patcher import apply_patch
from .strategies import UpdateStrategy

EOF = "EOF"
TRUNCATED = "TRUNCATED"


@dataclass(frozen=True)
class ScanResult:
    path: Path
    visited: int
    updated: int
    outcome: str
    truncated_at: int | None = None

    @property
    def modified(self) -> bool:
        return self.updated > 0


class SegmentScanner:
    """Single forward pass over one segment file.

    - Every fully decoded record is offered to the update strategy.
    - Accepted replacements are written back in place by the patcher.
    - A torn tail record ends the scan without error.
    - A CRC mismatch (when verification is on) aborts the scan.
    """

    def __init__(self, path: Path, verify_checksums: bool = False):
        self.path = Path(path)
        self.verify_checksums = verify_checksums
        self.visited = 0
        self.updated = 0

    def run(self, strategy: UpdateStrategy | None) -> ScanResult:
        mode = "rb" if strategy is None else "r+b"
        outcome = EOF
        truncated_at = None

        with open(self.path, mode) as f:
            while True:
                try:
                    record = decode_next(f)
                except TruncatedRecordError as e:
                    warn(f"Unexpected EOF at record no. {self.visited + 1} (byte {e.position}) in {self.path}")
                    outcome = TRUNCATED
                    truncated_at = e.position
                    break

                if record is None:
                    break

                if self.verify_checksums:
                    ensure_valid(record, self.path)

                if strategy is not None:
                    replacement = strategy(record.offset, record.key, record.value)
                    if replacement is not None:
                        new_key, new_value = replacement
                        # Identical bytes skip the write but still count as accepted.
                        apply_patch(f, record, new_key, new_value)
                        self.updated += 1

                self.visited += 1

        return ScanResult(self.path, self.visited, self.updated, outcome, truncated_at)


def scan_segment(
    path: Path,
    strategy: UpdateStrategy | None,
    verify_checksums: bool = False,
) -> ScanResult:
    return SegmentScanner(path, verify_checksums).run(strategy)
