from types import SimpleNamespace

from core.district_map import DistrictMapView, get_region_map_config
from core.models import DistrictShape, Place
from core.ui_components import distinct_values, extract_selection_value
from pages.district_map import district_count_frame
from pages.region_map import region_from_selection


def test_customdata_first():
    state = {"selection": {"points": [{"customdata": ["수원시 권선구"], "location": "31", "point_index": 3}]}}
    assert extract_selection_value(state) == "수원시 권선구"


def test_camel_case_and_scalar_customdata():
    assert extract_selection_value({"selection": {"points": [{"customData": "경기"}]}}) == "경기"


def test_location_fallback():
    assert extract_selection_value({"selection": {"points": [{"location": 31}]}}) == "31"
    assert extract_selection_value({"selection": {"locations": ["23"]}}) == "23"


def test_point_index_fallback():
    ids = ["서울", "부산", "대구"]
    assert extract_selection_value({"selection": {"points": [{"point_index": 2}]}}, ids) == "대구"
    assert extract_selection_value({"selection": {"points": [{"pointIndex": 9}]}}, ids) is None


def test_attribute_style_state():
    state = SimpleNamespace(selection=SimpleNamespace(points=[{"customdata": ["강원"]}]))
    assert extract_selection_value(state) == "강원"


def test_empty_selection():
    assert extract_selection_value(None) is None
    assert extract_selection_value({}) is None
    assert extract_selection_value({"selection": {"points": []}}) is None


def test_region_from_selection_accepts_name_or_code():
    assert region_from_selection("경기") == "경기"
    assert region_from_selection("23") == "인천"
    assert region_from_selection("99") is None
    assert region_from_selection(None) is None


def test_distinct_values_keeps_first_order():
    assert distinct_values(["수원시", None, "부천시", "", "수원시"]) == ["수원시", "부천시"]


def test_count_table_for_unparseable_shapes_is_empty():
    view = DistrictMapView(get_region_map_config("인천"), [DistrictShape("중구", "M0 0 L")])
    labels = view.labels([Place(id=1, name="시설", address="인천광역시 중구 1", region="인천")])
    assert labels == []
    df = district_count_frame(labels)
    assert df.empty
    assert list(df.columns) == ["시군구", "시설 수"]


def test_count_table_sorted_by_count():
    view = DistrictMapView(
        get_region_map_config("인천"),
        [DistrictShape("중구", "M0 0 L10 0 L10 10 Z"), DistrictShape("남동구", "M20 0 L30 0 L30 10 Z")],
    )
    places = [Place(id=i, name="시설", address="", region="인천", district="남동구") for i in (1, 2)]
    df = district_count_frame(view.labels(places))
    assert df["시군구"].tolist() == ["남동구", "중구"]
    assert df["시설 수"].tolist() == [2, 0]
