import pytest

from app.core.exceptions import ValidationError
from app.models.rating.rating_model import Rating
from app.utils.cursor import decode_cursor, encode_cursor
from app.utils.region_ref import ResolvedRegion, UnresolvedRegion, region_ref, region_ref_dict, region_ref_id
from app.utils.search import MAX_SEARCH_LENGTH, build_search_pattern
from app.utils.sorting import parse_sort

SORT_FIELDS = {"submittedAt": Rating.submitted_at, "rating": Rating.rating}


def test_cursor_encodes_decimal_id():
    assert encode_cursor(12) == "MTI="
    assert decode_cursor("MTI=") == 12


@pytest.mark.parametrize("cursor", [None, "", "not base64!", "YWJj", "LTE=", "//79"])
def test_bad_cursor_means_no_cursor(cursor):
    assert decode_cursor(cursor) is None


def test_search_pattern_escapes_wildcards():
    assert build_search_pattern("50%_off\\") == "%50\\%\\_off\\\\%"


def test_search_pattern_is_clamped():
    pattern = build_search_pattern("x" * 500)
    assert pattern == "%" + "x" * MAX_SEARCH_LENGTH + "%"


def test_parse_sort_defaults():
    (clause,) = parse_sort(None, SORT_FIELDS, ("submittedAt", "desc"))
    assert str(clause) == "ratings.submitted_at DESC"


def test_parse_sort_direction_defaults_to_desc():
    (clause,) = parse_sort("rating", SORT_FIELDS, ("submittedAt", "desc"))
    assert str(clause) == "ratings.rating DESC"


def test_parse_sort_ascending():
    (clause,) = parse_sort("rating:asc", SORT_FIELDS, ("submittedAt", "desc"))
    assert str(clause) == "ratings.rating ASC"


@pytest.mark.parametrize("sort", ["password:asc", "rating:sideways", "comment"])
def test_parse_sort_rejects_unknown(sort):
    with pytest.raises(ValidationError) as exc:
        parse_sort(sort, SORT_FIELDS, ("submittedAt", "desc"))
    assert exc.value.status_code == 400
    assert exc.value.detail == "Invalid sort field"


def test_region_ref_variants():
    resolved = region_ref(3, "Tashkent")
    dangling = region_ref(4)
    assert isinstance(resolved, ResolvedRegion)
    assert isinstance(dangling, UnresolvedRegion)
    assert region_ref_id(resolved) == 3
    assert region_ref_id(dangling) == 4
    assert region_ref_dict(resolved) == {"id": 3, "name": "Tashkent"}
    assert region_ref_dict(dangling) is None
