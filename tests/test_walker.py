import pytest

from kru_core.codec import decode_next
from kru_core.errors import DataDirectoryError, IntegrityError, LengthMismatchError
from kru_update.strategies import create_strategy
from kru_update.walker import (
    FAILED,
    OK,
    DirectoryWalker,
    parse_partition_dir,
    select_partitions,
)

from conftest import SEGMENT_NAME, corrupt_crc, sample_records


@pytest.fixture
def data_dir(make_data_dir):
    data = make_data_dir(
        {
            "orders-0": sample_records(2),
            "orders-1": sample_records(3),
            "users-0": sample_records(2),
            "not_a_partition": sample_records(1),
            "orders-x": sample_records(1),
        }
    )
    (data / "orders-0" / "00000000000000000000.index").write_bytes(b"\x00" * 8)
    (data / "orders-2").write_text("a file, not a directory", encoding="utf-8")
    return data


def test_parse_partition_dir():
    assert parse_partition_dir("orders-3") == ("orders", 3)
    assert parse_partition_dir("my-topic-12") == ("my-topic", 12)
    assert parse_partition_dir("orders") is None
    assert parse_partition_dir("orders-") is None
    assert parse_partition_dir("orders-x") is None
    assert parse_partition_dir("-1") is None


def test_rejects_non_kafka_directories(tmp_path, make_data_dir):
    with pytest.raises(DataDirectoryError, match="does not exist"):
        DirectoryWalker(tmp_path / "missing")

    f = tmp_path / "file"
    f.write_text("x", encoding="utf-8")
    with pytest.raises(DataDirectoryError, match="Not a directory"):
        DirectoryWalker(f)

    data = make_data_dir({"orders-0": sample_records(1)}, meta=False)
    with pytest.raises(DataDirectoryError, match="meta.properties"):
        DirectoryWalker(data)


def test_iter_segments_flags_selection(data_dir):
    refs = list(DirectoryWalker(data_dir).iter_segments(select_partitions(topic="orders", partition=1)))
    assert [(r.topic, r.partition, r.path.name, r.should_process) for r in refs] == [
        ("orders", 0, SEGMENT_NAME, False),
        ("orders", 1, SEGMENT_NAME, True),
        ("users", 0, SEGMENT_NAME, False),
    ]


def test_run_updates_selected_topic_only(data_dir):
    users_before = (data_dir / "users-0" / SEGMENT_NAME).read_bytes()

    summary = DirectoryWalker(data_dir).run(
        create_strategy("destroy-value"), select=select_partitions(topic="orders")
    )

    assert (summary.visited_partitions, summary.updated_partitions) == (2, 2)
    assert (summary.visited_segments, summary.updated_segments) == (2, 2)
    assert (summary.visited_records, summary.updated_records) == (5, 5)
    assert [s.status for s in summary.segments] == [OK, OK]
    assert (data_dir / "users-0" / SEGMENT_NAME).read_bytes() == users_before


def test_no_op_run_counts_without_updates(data_dir):
    summary = DirectoryWalker(data_dir).run(None)
    assert summary.visited_partitions == 3
    assert summary.updated_partitions == 0
    assert summary.visited_records == 7
    assert summary.updated_records == 0


def test_integrity_failure_is_isolated_per_file(data_dir):
    corrupt_crc(data_dir / "orders-0" / SEGMENT_NAME)
    seen = []

    summary = DirectoryWalker(data_dir).run(
        create_strategy("destroy"), verify_checksums=True, on_segment=seen.append
    )

    assert [(s.topic, s.partition, s.status) for s in summary.segments] == [
        ("orders", 0, FAILED),
        ("orders", 1, OK),
        ("users", 0, OK),
    ]
    assert seen == summary.segments
    assert len(summary.failed) == 1
    assert "Invalid CRC" in summary.failed[0].error
    assert summary.updated_records == 5
    assert summary.updated_partitions == 2


def test_fail_fast_reraises(data_dir):
    corrupt_crc(data_dir / "orders-1" / SEGMENT_NAME)
    with pytest.raises(IntegrityError):
        DirectoryWalker(data_dir).run(create_strategy("destroy"), verify_checksums=True, fail_fast=True)


def test_length_changing_strategy_fails_each_file(data_dir):
    def grow(offset, key, value):
        return (key, value + b"!")

    summary = DirectoryWalker(data_dir).run(grow)
    assert [s.status for s in summary.segments] == [FAILED, FAILED, FAILED]
    assert summary.updated_records == 0

    with pytest.raises(LengthMismatchError):
        DirectoryWalker(data_dir).run(grow, fail_fast=True)


def test_truncated_segment_is_ok_and_flagged(data_dir):
    seg = data_dir / "users-0" / SEGMENT_NAME
    seg.write_bytes(seg.read_bytes()[:-3])

    with pytest.warns(UserWarning):
        summary = DirectoryWalker(data_dir).run(
            create_strategy("destroy-key"), select=select_partitions(topic="users")
        )

    (outcome,) = summary.segments
    assert outcome.status == OK
    assert outcome.truncated
    assert outcome.visited == 1
    with open(seg, "rb") as f:
        assert decode_next(f).key == b"*****"


def test_failed_segment_reports_patches_already_written(data_dir):
    seg = data_dir / "orders-1" / SEGMENT_NAME
    records = sample_records(3)
    corrupt_crc(seg, len(records[0]))

    summary = DirectoryWalker(data_dir).run(
        create_strategy("destroy-value"), select=select_partitions(topic="orders", partition=1), verify_checksums=True
    )

    (outcome,) = summary.segments
    assert outcome.status == FAILED
    assert (outcome.visited, outcome.updated) == (1, 1)
    assert outcome.modified
    assert summary.updated_partitions == 1
    with open(seg, "rb") as f:
        assert decode_next(f).value == b"*******"


def test_run_scans_exactly_the_selected_refs(data_dir):
    walker = DirectoryWalker(data_dir)
    select = select_partitions(partition=0)

    expected = [r.path for r in walker.iter_segments(select) if r.should_process]
    summary = walker.run(None, select=select)

    assert [s.path for s in summary.segments] == expected
    assert summary.visited_partitions == 2
