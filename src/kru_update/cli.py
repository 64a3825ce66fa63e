"""Kafka Record Updater - in-place redaction of segment files."""
from __future__ import annotations

from pathlib import Path

import click

from kru_core.protocol import DEFAULT_BLANK_CHAR

from .report import write_report
from .strategies import available_strategies, create_strategy, within_offsets
from .walker import FAILED, DirectoryWalker, SegmentOutcome, Summary, select_partitions


def _echo_segment(outcome: SegmentOutcome) -> None:
    line = f"  {outcome.topic}-{outcome.partition}/{outcome.path.name}: {outcome.updated} / {outcome.visited} records updated"
    if outcome.truncated:
        line += " (truncated tail)"
    if outcome.status == FAILED:
        line += f" FAILED: {outcome.error}"
    click.echo(line)


def update_data_dir(
    data_dir: Path,
    updater: str,
    topic: str | None = None,
    partition: int | None = None,
    offset_min: int | None = None,
    offset_max: int | None = None,
    blank_char: str = DEFAULT_BLANK_CHAR,
    verify_crc: bool = False,
    fail_fast: bool = False,
    report: Path | None = None,
) -> Summary:
    """Apply ``updater`` to every selected record below ``data_dir``."""
    # Strategy and data dir are resolved before any segment is opened.
    strategy = within_offsets(create_strategy(updater, fill=blank_char), offset_min, offset_max)
    walker = DirectoryWalker(data_dir)

    click.echo("=== Kafka-record-updater ===")
    click.echo(f"Scanning directory: {walker.data_dir.resolve()}")

    summary = walker.run(
        strategy,
        select=select_partitions(topic, partition),
        verify_checksums=verify_crc,
        fail_fast=fail_fast,
        on_segment=_echo_segment,
    )

    click.echo("Done! Summary:")
    click.echo(f" - {summary.updated_partitions} / {summary.visited_partitions} partitions updated")
    click.echo(f" - {summary.updated_segments} / {summary.visited_segments} segment files updated")
    click.echo(f" - {summary.updated_records} / {summary.visited_records} records updated")
    if summary.failed:
        click.echo(f" - {len(summary.failed)} segment files FAILED")

    if report is not None:
        write_report(summary, report)
        click.echo(f"Report written to {report}")

    return summary


@click.command()
@click.option(
    "--data-dir",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="The Apache Kafka log/data directory",
)
@click.option(
    "--updater",
    required=True,
    help=f"Name of the updater to apply to records ({', '.join(available_strategies())})",
)
@click.option("--topic", default=None, help="The topic in which to update records")
@click.option("--partition", type=int, default=None, help="A specific partition number in which to update records")
@click.option("--offset-min", type=int, default=None, help="A minimum (inclusive) offset for records to update")
@click.option("--offset-max", type=int, default=None, help="A maximum (inclusive) offset for records to update")
@click.option(
    "--blank-char",
    default=DEFAULT_BLANK_CHAR,
    envvar="KRU_BLANK_CHAR",
    show_default=True,
    help="Fill character used by the destroy updaters",
)
@click.option("--verify-crc", is_flag=True, help="Verify each record's CRC before updating it")
@click.option("--fail-fast", is_flag=True, help="Stop at the first segment that fails instead of continuing")
@click.option(
    "--report",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a parquet audit report of the visited segments",
)
def main(
    data_dir: Path,
    updater: str,
    topic: str | None,
    partition: int | None,
    offset_min: int | None,
    offset_max: int | None,
    blank_char: str,
    verify_crc: bool,
    fail_fast: bool,
    report: Path | None,
) -> None:
    """Overwrite record keys/values in place across a Kafka data directory."""
    try:
        summary = update_data_dir(
            data_dir,
            updater,
            topic=topic,
            partition=partition,
            offset_min=offset_min,
            offset_max=offset_max,
            blank_char=blank_char,
            verify_crc=verify_crc,
            fail_fast=fail_fast,
            report=report,
        )
    except Exception as e:
        # Fail closed, with a single-line reason.
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)

    if summary.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
