from __future__ import annotations

import csv
from typing import Sequence

from venues.parsers import format_value
from venues.records import FIELD_NAMES, CanonicalRecord, records_frame


EXPORT_COLUMNS = FIELD_NAMES


def export_filename(view: str) -> str:
    view = (view or "").strip() or "export"
    return f"{view}.csv"


def to_csv(records: Sequence[CanonicalRecord], columns: Sequence[str] = EXPORT_COLUMNS) -> str:
    """Header of field names, then one fully double-quoted line per record."""
    df = records_frame(records, columns)
    df = df.apply(lambda col: col.map(format_value)) if not df.empty else df
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n")
