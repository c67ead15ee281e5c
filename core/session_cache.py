"""
세션 캐시: 탐색 상태, 조회 로더, 전체 시설 목록, 지역별 시군구 지도를 st.session_state 에 저장해
재실행(rerun)마다 다시 만들거나 다시 조회하지 않도록 함. core/ 모듈만 의존.
"""
import logging
from typing import List, Optional

import streamlit as st

from core.models import Place

logger = logging.getLogger(__name__)

_NAVIGATOR_KEY = "_place_navigator"
_LOADER_KEY = "_place_loader"
_ALL_PLACES_KEY = "_cache_all_places"
_DISTRICT_VIEW_PREFIX = "_cache_district_view_"


def _get_cached(key: str):
    """캐시 값 반환. 키가 없으면 None (미로드)."""
    return st.session_state.get(key)


def get_navigator():
    """세션별 PlaceNavigator. 최초 생성 시 전체 목록 조회 요청을 함께 보냄."""
    navigator = _get_cached(_NAVIGATOR_KEY)
    if navigator is not None:
        return navigator
    from core.navigation import PlaceNavigator
    navigator = PlaceNavigator()
    st.session_state[_NAVIGATOR_KEY] = navigator
    get_loader().submit(navigator.begin())
    return navigator


def get_loader():
    loader = _get_cached(_LOADER_KEY)
    if loader is not None:
        return loader
    from core.db import query_places
    from core.navigation import PlaceLoader
    navigator = _get_cached(_NAVIGATOR_KEY)
    if navigator is None:
        from core.navigation import PlaceNavigator
        navigator = PlaceNavigator()
        st.session_state[_NAVIGATOR_KEY] = navigator
    loader = PlaceLoader(navigator, query_places)
    st.session_state[_LOADER_KEY] = loader
    return loader


def get_cached_all_places() -> List[Place]:
    """시군구/지역 카운트용 전체 시설 목록 (검색 조건 미적용). 조회 실패 시 빈 목록, 캐시하지 않음."""
    cached = _get_cached(_ALL_PLACES_KEY)
    if cached is not None:
        return cached
    from core.db import PlaceStoreError, query_places
    try:
        places = query_places()
    except PlaceStoreError as e:
        logger.warning("전체 시설 목록 조회 실패: %s", e)
        return []
    st.session_state[_ALL_PLACES_KEY] = places
    return places


def get_cached_district_view(region: str):
    """지역별 DistrictMapView (도형 로드 + 중심점 계산은 세션당 1회). 설정 없는 지역은 None."""
    from core.district_map import DistrictMapView, get_region_map_config
    config = get_region_map_config(region)
    if config is None:
        return None
    key = f"{_DISTRICT_VIEW_PREFIX}{region}"
    view: Optional[DistrictMapView] = _get_cached(key)
    if view is not None:
        return view
    from utils.district_shapes import load_district_shapes
    view = DistrictMapView(config, load_district_shapes(config.dataset))
    view.compute_centroids()
    st.session_state[key] = view
    return view


def invalidate_places_cache():
    """전체 시설 목록 캐시 무효화 (데이터 갱신 직후 최신값 반영)."""
    st.session_state.pop(_ALL_PLACES_KEY, None)


def invalidate_district_view_cache(region: Optional[str] = None):
    """시군구 지도 캐시 무효화. region 이 있으면 해당 지역만, 없으면 전체."""
    to_del = [k for k in list(st.session_state.keys()) if str(k).startswith(_DISTRICT_VIEW_PREFIX)]
    if region is not None:
        to_del = [k for k in to_del if k == f"{_DISTRICT_VIEW_PREFIX}{region}"]
    for k in to_del:
        st.session_state.pop(k, None)
