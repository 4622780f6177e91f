import math

import pytest

from venues.filters import FilterCriteria, filter_records, normalize_filters, record_matches
from venues.records import CanonicalRecord, normalize_row


def _record(**kwargs):
    return CanonicalRecord(**kwargs)


def test_empty_criteria_keeps_everything_in_order():
    recs = [_record(name="B"), _record(name="A"), _record(name="C")]
    assert filter_records(recs, FilterCriteria()) == recs


def test_search_is_case_insensitive_across_fields():
    rec = normalize_row(
        {"nombre_normalizado": "Casa Rural", "descripcion": "Vistas al RÍO", "num_opiniones": "120 opiniones"}
    )
    assert record_matches(rec, FilterCriteria(search_term="  río "))
    assert record_matches(rec, FilterCriteria(search_term="casa"))
    assert record_matches(rec, FilterCriteria(search_term="120"))
    assert not record_matches(rec, FilterCriteria(search_term="playa"))
    assert record_matches(rec, FilterCriteria(search_term="   "))


def test_search_matches_list_fields():
    rec = _record(route_tags=("Portugués", "Espiritual"))
    assert record_matches(rec, FilterCriteria(search_term="espiritual"))


def test_type_filter_is_exact_membership():
    rec = _record(type="Hotel rural")
    assert not record_matches(rec, FilterCriteria(selected_types=["Hotel"]))
    assert record_matches(rec, FilterCriteria(selected_types=["Hotel", "Hotel rural"]))


def test_route_tags_require_every_selected_tag():
    rec = _record(route_tags=("Portuguese",))
    assert not record_matches(rec, FilterCriteria(selected_route_tags=["Portuguese", "Coastal"]))
    assert record_matches(rec, FilterCriteria(selected_route_tags=["Portuguese"]))


@pytest.mark.parametrize("bounds", [(1.0, 5.0), (4.9, 5.0), (1.0, 1.0)])
def test_unknown_rating_is_never_excluded(bounds):
    rec = _record(rating=math.nan, review_count=math.nan)
    assert record_matches(rec, FilterCriteria(rating_range=bounds, review_count_range=(10.0, 20.0)))


def test_ranges_are_inclusive():
    rec = _record(rating=4.0, review_count=100.0)
    assert record_matches(rec, FilterCriteria(rating_range=(4.0, 4.0), review_count_range=(100.0, 100.0)))
    assert not record_matches(rec, FilterCriteria(rating_range=(4.1, 5.0)))
    assert not record_matches(rec, FilterCriteria(review_count_range=(0.0, 99.0)))


def test_widening_a_range_never_removes_records():
    recs = [_record(name=str(r), rating=r) for r in (1.0, 2.5, 3.0, 3.5, 4.0, 4.5, math.nan)]
    narrow = filter_records(recs, FilterCriteria(rating_range=(3.0, 4.0)))
    wide = filter_records(recs, FilterCriteria(rating_range=(1.0, 5.0)))
    assert set(r.name for r in narrow) <= set(r.name for r in wide)
    assert [r.name for r in narrow] == ["3.0", "3.5", "4.0", "nan"]


def test_widening_review_count_range_never_removes_records():
    recs = [_record(name=str(c), review_count=c) for c in (0.0, 5.0, 40.0, 120.0, 900.0, math.nan)]
    narrow = filter_records(recs, FilterCriteria(review_count_range=(5.0, 120.0)))
    wide = filter_records(recs, FilterCriteria(review_count_range=(0.0, math.inf)))
    assert set(r.name for r in narrow) <= set(r.name for r in wide)
    assert [r.name for r in narrow] == ["5.0", "40.0", "120.0", "nan"]
    assert len(wide) == len(recs)


def test_normalize_filters_coerces_loose_input():
    criteria = normalize_filters(
        {
            "search_term": "  café ",
            "selected_types": ["Hotel", None, "", "Hotel"],
            "selected_route_tags": "Portugués",
            "rating_range": [6, 0],
            "review_count_range": None,
        },
        review_count_max=350.0,
    )

    assert criteria.search_term == "café"
    assert criteria.selected_types == ["Hotel"]
    assert criteria.selected_route_tags == ["Portugués"]
    assert criteria.rating_range == (1.0, 5.0)
    assert criteria.review_count_range == (0.0, 350.0)


def test_normalize_filters_defaults():
    criteria = normalize_filters({"rating_range": ["x", 4]})
    assert criteria.rating_range == (1.0, 5.0)
    assert criteria.review_count_range == (0.0, math.inf)


def test_normalize_filters_rejects_malformed_ranges():
    criteria = normalize_filters({"rating_range": [None, 4], "review_count_range": [1, 2, 3]})
    assert criteria.rating_range == (1.0, 5.0)
    assert criteria.review_count_range == (0.0, math.inf)
