"""CSV run logs written with Polars."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import polars as pl

LOG_DIR = Path("logs")


def _target_dtype(prev: pl.DataFrame, new: pl.DataFrame, column: str) -> pl.DataType:
    dt_prev = prev.schema.get(column)
    dt_new = new.schema.get(column)
    if dt_prev is None or dt_new is None:
        return dt_new or dt_prev or pl.Utf8
    if dt_prev == dt_new:
        return dt_prev
    # mixed types: text wins, numeric mixes widen to Float64
    if pl.Utf8 in (dt_prev, dt_new):
        return pl.Utf8
    return pl.Float64


def _align(frame: pl.DataFrame, dtypes: Dict[str, pl.DataType]) -> pl.DataFrame:
    out = frame
    for column, dtype in dtypes.items():
        if column not in out.columns:
            out = out.with_columns(pl.lit(None, dtype=dtype).alias(column))
        elif out.schema[column] != dtype:
            out = out.with_columns(pl.col(column).cast(dtype))
    return out.select(list(dtypes))


def log_records(name: str, records: List[Dict[str, Any]]) -> Path:
    """Append rows to logs/<name>.csv, widening the schema when it changes.

    Returns:
        Path to the CSV file.
    """
    assert isinstance(name, str) and len(name) > 0, "Invalid log name"
    assert isinstance(records, list), "records must be a list"
    out = LOG_DIR / f"{name}.csv"
    if not records:
        return out
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    df = pl.DataFrame(records)
    if out.exists():
        prev = pl.read_csv(out)
        try:
            df = pl.concat([prev, df], how="vertical_relaxed")
        except pl.exceptions.PolarsError:
            columns = sorted(set(prev.columns) | set(df.columns))
            dtypes = {c: _target_dtype(prev, df, c) for c in columns}
            df = pl.concat([_align(prev, dtypes), _align(df, dtypes)], how="vertical")
    df.write_csv(out)
    return out


def log_record(name: str, record: Dict[str, Any]) -> Path:
    """Append a single row."""
    return log_records(name, [record])
