from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from numbers import Integral
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from venues.parsers import (
    NAN,
    clean_text,
    finite_or_nan,
    is_blank,
    is_number,
    parse_cell_number,
    parse_cell_review_count,
    parse_coordinate,
    split_delimited,
)


RawValue = Union[str, int, float]

# Spreadsheet column -> canonical text attribute.
TEXT_COLUMNS = {
    "nombre_normalizado": "name",
    "descripcion": "description",
    "tipo": "type",
    "categoria": "category",
    "direccion": "address",
    "ciudad": "city",
    "link": "link",
    "telefono": "phone",
    "email": "email",
    "web": "website",
    "facebook_urls": "facebook_url",
    "instagram_urls": "instagram_url",
}

RATING_COLUMN = "calificacion"
REVIEW_COUNT_COLUMN = "num_opiniones"
ROUTES_COLUMN = "situacion_caminos_de_santiago"
FEATURES_COLUMN = "caracteristicas"
IMAGES_COLUMN = "srcset"

# Known header spellings, first match wins.
LATITUDE_COLUMNS = ("Latitud", "Latitu")
LONGITUDE_COLUMNS = ("Longitud", "Longitu")

# Columns an enriched upstream source may already provide.
RATING_NUM_COLUMN = "calificacion_num"
REVIEW_COUNT_NUM_COLUMN = "opiniones_num"
ROUTES_LIST_COLUMN = "caminos_list"
FEATURES_LIST_COLUMN = "caracteristicas_list"
IMAGES_LIST_COLUMN = "srcset_list"

ROUTE_DELIMITER = "|"
LIST_DELIMITER = ","


@dataclass(frozen=True)
class CanonicalRecord:
    name: str = ""
    description: str = ""
    type: str = ""
    category: str = ""
    address: str = ""
    city: str = ""
    link: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    rating_raw: RawValue = ""
    review_count_raw: RawValue = ""
    rating: float = NAN
    review_count: float = NAN
    route_tags: Tuple[str, ...] = ()
    feature_tags: Tuple[str, ...] = ()
    image_urls: Tuple[str, ...] = ()
    latitude: float = NAN
    longitude: float = NAN
    facebook_url: str = ""
    instagram_url: str = ""

    @property
    def has_location(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


FIELD_NAMES = tuple(f.name for f in fields(CanonicalRecord))


def lookup(row: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    """First non-missing value among ``keys``; column renames only touch this."""
    for key in keys:
        value = row.get(key)
        if not is_blank(value):
            return value
    return default


def _raw_value(value: Any) -> RawValue:
    if isinstance(value, Integral) and not isinstance(value, bool):
        return int(value)
    if is_number(value):
        return float(value)
    return clean_text(value)


def _resolve_number(row: Mapping[str, Any], num_key: str, raw_key: str, parse) -> float:
    explicit = finite_or_nan(lookup(row, num_key, default=None))
    if math.isfinite(explicit):
        return explicit
    return parse(lookup(row, raw_key))


def _resolve_list(row: Mapping[str, Any], list_key: str, raw_key: str, delimiter: str) -> Tuple[str, ...]:
    explicit = row.get(list_key)
    if isinstance(explicit, (list, tuple)):
        return tuple(clean_text(v) for v in explicit if not is_blank(v))
    return tuple(split_delimited(lookup(row, raw_key), delimiter))


def normalize_row(row: Mapping[str, Any]) -> CanonicalRecord:
    text = {attr: clean_text(lookup(row, col)) for col, attr in TEXT_COLUMNS.items()}
    text["email"] = text["email"].lower()
    return CanonicalRecord(
        **text,
        rating_raw=_raw_value(lookup(row, RATING_COLUMN)),
        review_count_raw=_raw_value(lookup(row, REVIEW_COUNT_COLUMN)),
        rating=_resolve_number(row, RATING_NUM_COLUMN, RATING_COLUMN, parse_cell_number),
        review_count=_resolve_number(row, REVIEW_COUNT_NUM_COLUMN, REVIEW_COUNT_COLUMN, parse_cell_review_count),
        route_tags=_resolve_list(row, ROUTES_LIST_COLUMN, ROUTES_COLUMN, ROUTE_DELIMITER),
        feature_tags=_resolve_list(row, FEATURES_LIST_COLUMN, FEATURES_COLUMN, LIST_DELIMITER),
        image_urls=_resolve_list(row, IMAGES_LIST_COLUMN, IMAGES_COLUMN, LIST_DELIMITER),
        latitude=parse_coordinate(lookup(row, *LATITUDE_COLUMNS)),
        longitude=parse_coordinate(lookup(row, *LONGITUDE_COLUMNS)),
    )


def has_identity_or_location(record: CanonicalRecord) -> bool:
    return bool(record.name) or record.has_location


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> Tuple[Tuple[CanonicalRecord, ...], int]:
    """Normalize rows in order; returns the kept records and the dropped count."""
    kept = []
    dropped = 0
    for row in rows:
        record = normalize_row(row)
        if has_identity_or_location(record):
            kept.append(record)
        else:
            dropped += 1
    return tuple(kept), dropped


def records_frame(records: Sequence[CanonicalRecord], columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    cols = list(columns or FIELD_NAMES)
    if not records:
        return pd.DataFrame(columns=cols)
    return pd.DataFrame([r.to_dict() for r in records], columns=cols)
