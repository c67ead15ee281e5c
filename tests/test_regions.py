from core.constants import REGION_IMAGE_OFFSETS, REGIONS
from core.models import Place
from core.regions import (
    count_by_region,
    infer_region,
    match_district,
    normalize_region,
    place_region,
    region_aliases,
    split_district_id,
)


def _place(address="", **kw):
    return Place(id=kw.pop("id", 1), name="시설", address=address, **kw)


def test_infer_region_first_match_in_list_order():
    assert infer_region("경기도 수원시 팔달구 중부대로 2") == "경기"
    # 앞선 항목이 우선: 인천 주소에 '경기'가 들어 있어도 인천
    assert infer_region("인천광역시 남동구 경기빌딩 5층") == "인천"
    # 도 이름 안에 먼저 나오는 광역시 이름이 있으면 그 광역시가 선택됨
    assert infer_region("경기도 광주시 오포읍") == "광주"


def test_infer_region_no_match():
    assert infer_region("주소 미상") is None
    assert infer_region("") is None
    assert infer_region(None) is None


def test_place_region_prefers_column_and_normalizes():
    assert place_region(_place("서울특별시 강남구", region="경기도")) == "경기"
    assert place_region(_place("서울특별시 강남구")) == "서울"


def test_count_by_region_includes_every_region(sample_places):
    counts = count_by_region(sample_places)
    assert counts["경기"] == 2
    assert counts["서울"] == 1
    assert counts["제주"] == 0
    assert sum(counts.values()) == 5


def test_match_district_prefers_structured_fields():
    ids = ["수원시 권선구", "수원시 팔달구", "권선구"]
    place = _place("주소와 무관", city="수원시", district="권선구")
    assert match_district(place, ids) == "수원시 권선구"
    assert match_district(_place("", district="권선구"), ["권선구"]) == "권선구"
    assert match_district(_place("", city="부천시"), ["부천시", "광명시"]) == "부천시"


def test_match_district_longest_address_match_wins():
    ids = ["동구", "남동구", "중구"]
    assert match_district(_place("인천광역시 남동구 인주대로 5"), ids) == "남동구"
    assert match_district(_place("인천광역시 동구 송림로 1"), ids) == "동구"
    assert match_district(_place("인천광역시 연수구"), ids) is None


def test_normalize_region_aliases():
    assert normalize_region("경기도") == "경기"
    assert normalize_region(" 전라남도 ") == "전남"
    assert normalize_region("서울특별시") == "서울"
    assert normalize_region("경기") == "경기"
    assert normalize_region("아틀란티스") == "아틀란티스"
    assert normalize_region(None) == ""


def test_region_aliases_start_with_canonical_name():
    assert region_aliases("경기") == ["경기", "경기도"]
    assert region_aliases("아틀란티스") == ["아틀란티스"]


def test_split_district_id():
    assert split_district_id("수원시 권선구", True) == ("수원시", "권선구")
    assert split_district_id("부천시", True) == ("부천시", None)
    assert split_district_id("남동구", True) == (None, "남동구")
    assert split_district_id("강남구", False) == (None, "강남구")


def test_image_offsets_use_region_names():
    assert set(REGION_IMAGE_OFFSETS) - {"default"} <= set(REGIONS)
