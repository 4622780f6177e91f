from __future__ import annotations

import math
import re
from numbers import Real
from typing import List, Optional

import pandas as pd


NAN = float("nan")

_NUMBER_RUN = re.compile(r"[\d.,]+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_THOUSANDS_DOT = re.compile(r"\.(?=\d{3}(?:\D|$))")
_WHITESPACE = re.compile(r"\s+")


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return True
    return False


def is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def finite_or_nan(value: object) -> float:
    """Return ``value`` as a float when it is a finite number, else NaN."""
    if not is_number(value):
        return NAN
    out = float(value)  # type: ignore[arg-type]
    return out if math.isfinite(out) else NAN


def _number_text(value: float) -> str:
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return str(value)


def clean_text(value: object) -> str:
    if is_blank(value):
        return ""
    if is_number(value):
        return _number_text(float(value))  # type: ignore[arg-type]
    return str(value).strip()


def format_value(value: object) -> str:
    """String form of a record value, as shown in search and CSV export."""
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value)
    if is_number(value):
        out = float(value)  # type: ignore[arg-type]
        return _number_text(out) if math.isfinite(out) else ""
    return clean_text(value)


def parse_locale_number(raw: object) -> float:
    """Parse ``"1.234,5"`` style numbers; ``"4,5/5"`` reads as 4.5.

    Dots are thousands separators and commas decimal separators. Only the
    part before the first slash is considered. Never raises.
    """
    if is_number(raw):
        return finite_or_nan(raw)
    if is_blank(raw):
        return NAN
    s = str(raw).strip()
    first = s.split("/", 1)[0]
    normalized = first.replace(".", "").replace(",", ".").strip()
    if not normalized:
        return NAN
    try:
        out = float(normalized)
    except ValueError:
        return NAN
    return out if math.isfinite(out) else NAN


def parse_review_count(raw: object) -> float:
    if is_number(raw):
        return finite_or_nan(raw)
    if is_blank(raw):
        return NAN
    match = _NUMBER_RUN.search(str(raw))
    if not match:
        return NAN
    return parse_locale_number(match.group(0))


def parse_cell_number(raw: object) -> float:
    """Like :func:`parse_locale_number`, but a dot is only dropped when it
    groups thousands, so ``"4.5/5"`` reads as 4.5 and ``"1.234"`` as 1234.
    """
    if is_number(raw):
        return finite_or_nan(raw)
    if is_blank(raw):
        return NAN
    s = _WHITESPACE.sub("", str(raw)).split("/", 1)[0]
    normalized = _THOUSANDS_DOT.sub("", s).replace(",", ".")
    if not normalized:
        return NAN
    try:
        out = float(normalized)
    except ValueError:
        return NAN
    return out if math.isfinite(out) else NAN


def parse_cell_review_count(raw: object) -> float:
    if is_number(raw):
        return finite_or_nan(raw)
    if is_blank(raw):
        return NAN
    match = _NUMBER_RUN.search(str(raw))
    if not match:
        return NAN
    return parse_cell_number(match.group(0))


def parse_coordinate(raw: object) -> float:
    if is_number(raw):
        return finite_or_nan(raw)
    if is_blank(raw):
        return NAN
    s = re.sub(r"\s+", "", str(raw).replace(",", "."))
    match = _FLOAT_PREFIX.match(s)
    if not match:
        return NAN
    out = float(match.group(0))
    return out if math.isfinite(out) else NAN


def split_delimited(raw: Optional[object], delimiter: str) -> List[str]:
    if is_blank(raw):
        return []
    return [part.strip() for part in str(raw).split(delimiter) if part.strip()]
