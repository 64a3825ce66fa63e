"""Parquet audit report: one row per segment the updater touched."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from .walker import Summary

REPORT_SCHEMA = pa.schema(
    [
        ("topic", pa.string()),
        ("partition", pa.int32()),
        ("segment", pa.string()),
        ("status", pa.string()),
        ("visited", pa.int64()),
        ("updated", pa.int64()),
        ("truncated", pa.bool_()),
        ("error", pa.string()),
    ]
)


def report_rows(summary: Summary) -> list[dict]:
    return [
        {
            "topic": s.topic,
            "partition": int(s.partition),
            "segment": s.path.name,
            "status": s.status,
            "visited": int(s.visited),
            "updated": int(s.updated),
            "truncated": bool(s.truncated),
            "error": s.error,
        }
        for s in summary.segments
    ]


def write_report(summary: Summary, out_path: Path) -> Path:
    """Write the report to ``out_path``; an empty run yields an empty table with the schema."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    rows = report_rows(summary)
    if rows:
        df = pd.DataFrame(rows).sort_values(["topic", "partition", "segment"])
        table = pa.Table.from_pandas(df, schema=REPORT_SCHEMA, preserve_index=False)
    else:
        table = REPORT_SCHEMA.empty_table()

    pq.write_table(table, out_path)
    return out_path
