import pytest

from core.db import (
    PlaceQuery,
    PlaceStoreError,
    _keyword_or_filter,
    db_init,
    fetch_places,
    filter_places,
    query_places,
)


def _ids(places):
    return [p.id for p in places]


def test_empty_keyword_returns_everything(fake_supabase):
    assert _ids(fetch_places("")) == [1, 2, 3, 4, 5]


def test_keyword_matches_name_or_address(fake_supabase):
    assert _ids(fetch_places("병원")) == [2, 5]
    # 이름에는 없고 주소에만 있는 경우도 포함
    assert _ids(fetch_places("세류로")) == [1]


def test_keyword_is_case_insensitive(fake_supabase):
    assert _ids(fetch_places("HOSPITAL")) == [3]
    assert _ids(fetch_places("hospital")) == [3]


def test_region_and_keyword_is_intersection(fake_supabase):
    region_only = set(_ids(fetch_places(region="경기")))
    keyword_only = set(_ids(fetch_places("병원")))
    assert set(_ids(fetch_places("병원", region="경기"))) == region_only & keyword_only == {2}


def test_no_match_is_empty_not_error(fake_supabase):
    assert fetch_places("존재하지않는시설") == []
    assert fetch_places(region="제주") == []


def test_district_filter(fake_supabase):
    assert _ids(fetch_places(region="경기", city="수원시", district="권선구")) == [1]


@pytest.mark.parametrize("query", [
    PlaceQuery(),
    PlaceQuery(keyword="병원"),
    PlaceQuery(keyword="  수원 "),
    PlaceQuery(keyword="care"),
    PlaceQuery(region="경기"),
    PlaceQuery(region="경기", city="수원시"),
    PlaceQuery(region="서울", district="강남구"),
    PlaceQuery(region="인천", keyword="요양"),
    PlaceQuery(keyword="%"),
    PlaceQuery(keyword="_"),
    PlaceQuery(keyword="50%"),
    PlaceQuery(keyword="*"),
    PlaceQuery(keyword="\""),
    PlaceQuery(keyword="병원,"),
    PlaceQuery(keyword="\\"),
    PlaceQuery(region="경기", keyword="수원_"),
])
def test_remote_and_in_memory_filters_agree(fake_supabase, sample_places, query):
    assert _ids(query_places(query)) == _ids(filter_places(sample_places, query))


def test_pagination_collects_all_pages(fake_supabase):
    places = query_places(PlaceQuery(), page_size=2)
    assert _ids(places) == [1, 2, 3, 4, 5]
    # 2 + 2 + 1 (마지막 페이지가 page_size 보다 작으면 종료)
    assert fake_supabase.calls == 3


def test_query_failure_raises_place_store_error(fake_supabase):
    fake_supabase.error = ConnectionError("network down")
    with pytest.raises(PlaceStoreError) as exc_info:
        fetch_places("병원")
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_bad_rows_are_skipped(fake_supabase):
    fake_supabase.tables["places"].append({"id": "not-a-number", "name": "x", "address": "y"})
    assert _ids(fetch_places("")) == [1, 2, 3, 4, 5]


def test_keyword_with_filter_syntax_characters(fake_supabase):
    assert _ids(fetch_places("병원,")) == []
    assert _ids(fetch_places("수원중앙병원")) == [2]


def test_like_wildcards_in_keyword_match_literally(fake_supabase):
    fake_supabase.tables["places"].extend([
        {"id": 6, "name": "할인율 50% 요양원", "address": "경기도 수원시 권선구 6", "region": "경기"},
        {"id": 7, "name": "요양_센터", "address": "경기도 수원시 권선구 7", "region": "경기"},
    ])
    assert _ids(fetch_places("%")) == [6]
    assert _ids(fetch_places("50%")) == [6]
    assert _ids(fetch_places("_")) == [7]
    # 서버 조건만으로도 와일드카드가 글자 그대로 비교됨
    rows = fake_supabase.table("places").select("*").or_(_keyword_or_filter("%")).execute().data
    assert [r["id"] for r in rows] == [6]


def test_keyword_filter_quotes_value():
    assert _keyword_or_filter("") is None
    assert _keyword_or_filter('a,b"%') == 'name.ilike."%a,b\\"\\\\%%",address.ilike."%a,b\\"\\\\%%"'


def test_db_init_checks_table(fake_supabase):
    db_init()
    fake_supabase.error = RuntimeError("permission denied")
    with pytest.raises(PlaceStoreError):
        db_init()
