"""Kafka data directory traversal.

A data directory holds ``meta.properties`` and one directory per partition,
named ``<topic>-<partition>``, each containing ``*.log`` segment files.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from kru_core.errors import DataDirectoryError, RecordError
from kru_core.protocol import META_PROPERTIES, SEGMENT_SUFFIX

from .scanner import TRUNCATED, ScanResult, SegmentScanner
from .strategies import UpdateStrategy

PartitionSelector = Callable[[str, int], bool]

OK = "OK"
FAILED = "FAILED"


@dataclass(frozen=True)
class SegmentRef:
    topic: str
    partition: int
    path: Path
    should_process: bool


@dataclass
class SegmentOutcome:
    topic: str
    partition: int
    path: Path
    status: str
    visited: int
    updated: int
    truncated: bool = False
    error: str | None = None

    @property
    def modified(self) -> bool:
        return self.updated > 0


@dataclass
class Summary:
    visited_partitions: int = 0
    updated_partitions: int = 0
    visited_segments: int = 0
    updated_segments: int = 0
    visited_records: int = 0
    updated_records: int = 0
    segments: list[SegmentOutcome] = field(default_factory=list)

    @property
    def failed(self) -> list[SegmentOutcome]:
        return [s for s in self.segments if s.status == FAILED]


def parse_partition_dir(name: str) -> tuple[str, int] | None:
    """Split ``<topic>-<partition>``; None when the name does not follow it."""
    topic, dash, suffix = name.rpartition("-")
    if not dash or not topic or not (suffix.isascii() and suffix.isdigit()):
        return None
    return topic, int(suffix)


def select_partitions(topic: str | None = None, partition: int | None = None) -> PartitionSelector:
    def select(topic_name: str, partition_number: int) -> bool:
        if partition is not None and partition != partition_number:
            return False
        if topic is not None and topic != topic_name:
            return False
        return True

    return select


def select_all(topic_name: str, partition_number: int) -> bool:
    return True


class DirectoryWalker:
    def __init__(self, data_dir: Path):
        data_dir = Path(data_dir)
        if not data_dir.exists():
            raise DataDirectoryError(f"Directory does not exist: {data_dir.resolve()}")
        if not data_dir.is_dir():
            raise DataDirectoryError(f"Not a directory: {data_dir.resolve()}")
        if not (data_dir / META_PROPERTIES).exists():
            raise DataDirectoryError(
                f"Directory is not a Kafka data directory (no '{META_PROPERTIES}' file): {data_dir.resolve()}"
            )
        self.data_dir = data_dir

    def partitions(self) -> Iterator[tuple[str, int, Path]]:
        for p in sorted(self.data_dir.iterdir()):
            if not p.is_dir():
                continue
            parsed = parse_partition_dir(p.name)
            if parsed is None:
                continue
            yield parsed[0], parsed[1], p

    @staticmethod
    def segment_files(partition_dir: Path) -> list[Path]:
        return [
            seg for seg in sorted(partition_dir.iterdir()) if seg.is_file() and seg.name.endswith(SEGMENT_SUFFIX)
        ]

    def iter_segments(self, select: PartitionSelector = select_all) -> Iterator[SegmentRef]:
        for topic, partition, p in self.partitions():
            should_process = select(topic, partition)
            for seg in self.segment_files(p):
                yield SegmentRef(topic, partition, seg, should_process)

    def run(
        self,
        strategy: UpdateStrategy | None,
        select: PartitionSelector = select_all,
        verify_checksums: bool = False,
        fail_fast: bool = False,
        on_segment: Callable[[SegmentOutcome], None] | None = None,
    ) -> Summary:
        """Scan every selected segment.

        Failures are isolated per file: a segment raising RecordError or
        OSError is reported as FAILED and the walk moves on, unless
        ``fail_fast`` is set. Patches already written are kept.
        """
        s = Summary()
        visited: set[tuple[str, int]] = set()
        updated: set[tuple[str, int]] = set()

        for ref in self.iter_segments(select):
            if not ref.should_process:
                continue
            visited.add((ref.topic, ref.partition))

            outcome = self._scan(ref, strategy, verify_checksums, fail_fast)
            s.segments.append(outcome)
            s.visited_segments += 1
            s.visited_records += outcome.visited
            s.updated_records += outcome.updated
            if outcome.modified:
                s.updated_segments += 1
                updated.add((ref.topic, ref.partition))

            if on_segment is not None:
                on_segment(outcome)

        s.visited_partitions = len(visited)
        s.updated_partitions = len(updated)
        return s

    def _scan(
        self,
        ref: SegmentRef,
        strategy: UpdateStrategy | None,
        verify_checksums: bool,
        fail_fast: bool,
    ) -> SegmentOutcome:
        scanner = SegmentScanner(ref.path, verify_checksums)
        try:
            result: ScanResult = scanner.run(strategy)
        except (RecordError, OSError) as e:
            if fail_fast:
                raise
            return SegmentOutcome(
                ref.topic, ref.partition, ref.path, FAILED, scanner.visited, scanner.updated, error=str(e)
            )
        return SegmentOutcome(
            ref.topic,
            ref.partition,
            ref.path,
            OK,
            result.visited,
            result.updated,
            truncated=result.outcome == TRUNCATED,
        )
