"""Query a redaction audit report - per-topic totals and failed segments."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query_report.py <report.parquet>")
        print("Example: python query_report.py redaction.parquet")
        sys.exit(1)

    report = Path(sys.argv[1])

    con = duckdb.connect(":memory:")
    con.execute(f"CREATE VIEW segments AS SELECT * FROM '{report}'")

    sql = """
    SELECT
        topic,
        COUNT(DISTINCT partition) AS partitions,
        COUNT(*) AS segments,
        SUM(visited) AS visited,
        SUM(updated) AS updated,
        SUM(CASE WHEN truncated THEN 1 ELSE 0 END) AS truncated
    FROM segments
    GROUP BY topic
    ORDER BY topic
    """

    print(f"--- Redaction report: {report} ---\n")
    df = con.execute(sql).fetchdf()
    if df.empty:
        print("No segments in report.")
        return

    for _, row in df.iterrows():
        print(f"TOPIC: {row['topic']}")
        print(f"  Partitions: {row['partitions']}  Segments: {row['segments']}")
        print(f"  Records updated: {row['updated']} / {row['visited']}")
        if row["truncated"]:
            print(f"  Truncated segments: {row['truncated']}")
        print()

    failed = con.execute(
        "SELECT topic, partition, segment, error FROM segments WHERE status = 'FAILED' ORDER BY topic, partition"
    ).fetchdf()
    for _, row in failed.iterrows():
        print(f"FAILED: {row['topic']}-{row['partition']}/{row['segment']}: {row['error']}")


if __name__ == "__main__":
    main()
