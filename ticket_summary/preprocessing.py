"""Data ingestion and parsing helpers for raw ticket batches."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

from .constants import COLUMN_ALIASES, TICKET_FIELDS
from .models import Ticket

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def normalize_column_name(column: str) -> str:
    cleaned = re.sub(r"[^0-9a-zA-Z]+", "_", str(column).strip().lower())
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")
    return cleaned


def _canonical_alias_map() -> dict[str, str]:
    mapping: dict[str, str] = {}
    for canonical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            mapping[normalize_column_name(alias)] = canonical
    return mapping


def normalize_and_alias_columns(df: pd.DataFrame) -> pd.DataFrame:
    result = df.copy()
    result.columns = [normalize_column_name(col) for col in result.columns]

    alias_to_canonical = _canonical_alias_map()
    renamed: dict[str, str] = {}
    existing = set(result.columns)
    for col in result.columns:
        canonical = alias_to_canonical.get(col)
        if canonical is None or canonical == col:
            continue
        # Never shadow a column that already carries the canonical name.
        if canonical in existing or canonical in renamed.values():
            continue
        renamed[col] = canonical

    if renamed:
        result = result.rename(columns=renamed)
    return result


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, (float, np.floating)) and np.isnan(value):
        return True
    return value is pd.NaT


def as_text(value: object) -> str:
    if _is_missing(value):
        return ""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        # Numeric columns read by pandas come back as floats once a NaN is present.
        return str(int(value))
    if isinstance(value, (pd.Timestamp, datetime)):
        return value.isoformat()
    return str(value)


def parse_int_text(value: object) -> int | None:
    """Parse the leading integer of ``value``; ``None`` when there is none.

    ``"120"`` and ``"120.7"`` both give ``120``; ``"abc"`` and ``""`` give ``None``.
    """
    if _is_missing(value):
        return None
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return int(value)

    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def parse_timestamp(value: object) -> pd.Timestamp | None:
    """Parse a date-time into a UTC timestamp; naive values are read as UTC."""
    if _is_missing(value) or not str(value).strip():
        return None
    parsed = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(parsed):
        return None
    return parsed


def _record_value(record: Mapping[str, Any], field: str, alias_map: dict[str, str]) -> object:
    if field in record:
        return record[field]
    for key, value in record.items():
        if alias_map.get(normalize_column_name(key)) == field:
            return value
    return None


def ticket_from_record(record: Mapping[str, Any]) -> Ticket:
    alias_map = _canonical_alias_map()
    values = {field: as_text(_record_value(record, field, alias_map)) for field in TICKET_FIELDS}
    return Ticket(**values)


def tickets_from_records(records: Iterable[Mapping[str, Any]]) -> list[Ticket]:
    return [ticket_from_record(record) for record in records]


def _ensure_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    result = df.copy()
    for column in columns:
        if column not in result:
            result[column] = np.nan
    return result


def tickets_from_frame(raw_df: pd.DataFrame) -> list[Ticket]:
    df = normalize_and_alias_columns(raw_df)
    df = _ensure_columns(df, TICKET_FIELDS)
    return [
        Ticket(**{field: as_text(row[field]) for field in TICKET_FIELDS})
        for row in df[TICKET_FIELDS].to_dict("records")
    ]


def read_ticket_frame(source: Any, file_name: str) -> pd.DataFrame:
    """Read a JSON, CSV or Excel payload with every column kept as text."""
    name = file_name.lower()
    if name.endswith(".json"):
        return pd.read_json(source, orient="records", dtype=False, convert_dates=False)
    if name.endswith((".csv", ".txt")):
        return pd.read_csv(source, dtype=str, keep_default_na=False)
    if name.endswith((".xlsx", ".xlsm")):
        return pd.read_excel(source, dtype=str, engine="openpyxl")
    raise ValueError(f"Unsupported ticket file type: '{file_name}'")


def load_ticket_frame(path: str | Path) -> pd.DataFrame:
    path = Path(path)
    return read_ticket_frame(path, path.name)
