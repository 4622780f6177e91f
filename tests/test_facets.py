import math

from venues.facets import available_route_tags, available_types, build_facets
from venues.records import CanonicalRecord


RECORDS = [
    CanonicalRecord(name="a", type="Restaurante", route_tags=("Portugués",), review_count=40.0),
    CanonicalRecord(name="b", type="", route_tags=("Espiritual", "Portugués"), review_count=math.nan),
    CanonicalRecord(name="c", type="Hotel", review_count=1234.0),
    CanonicalRecord(name="d", type="Restaurante"),
]


def test_available_types_are_distinct_sorted_and_non_empty():
    types = available_types(RECORDS)
    assert types == ["Hotel", "Restaurante"]
    assert "" not in types
    assert types == sorted(set(types))


def test_available_route_tags():
    assert available_route_tags(RECORDS) == ["Espiritual", "Portugués"]


def test_build_facets():
    facets = build_facets(RECORDS)
    assert facets.review_count_max == 1234.0
    assert build_facets([]).review_count_max == 0.0
    assert build_facets([]).available_types == []
