"""
돌봄 시설 지도 검색 페이지
- 왼쪽: 전국 지도(지역 미선택) 또는 선택 지역의 시군구 지도
- 오른쪽: 검색/되돌아가기 + 시설 목록
지도 클릭·버튼 입력은 모두 PlaceNavigator 전이 → PlaceLoader 조회 요청으로 처리하고,
조회 결과는 가장 마지막 요청의 것만 화면에 반영됨.
"""
import logging
from typing import List, Optional

import streamlit as st

from core.constants import PLACE_FETCH_TIMEOUT
from core.models import Place
from core.navigation import FetchTicket
from core.regions import count_by_region, place_in_region
from core.session_cache import (
    get_cached_all_places,
    get_cached_district_view,
    get_loader,
    get_navigator,
    invalidate_district_view_cache,
    invalidate_places_cache,
)
from core.ui_components import distinct_values, render_place_list
from pages.common import render_page_header, render_region_image
from pages.district_map import render_district_map
from pages.region_map import render_region_map

logger = logging.getLogger(__name__)

_TOASTS_KEY = "_pending_toasts"
_ERROR_SEQ_KEY = "_last_error_toast_seq"
_ALL_CITIES_LABEL = "전체"


def _queue_toast(message: str, icon: Optional[str] = None):
    st.session_state.setdefault(_TOASTS_KEY, []).append((message, icon))


def _flush_toasts():
    """재실행 직전에 쌓인 알림을 이번 실행에서 표시."""
    for message, icon in st.session_state.pop(_TOASTS_KEY, []):
        st.toast(message, icon=icon)


def _dispatch(ticket: Optional[FetchTicket], message: Optional[str] = None) -> bool:
    """전이 결과(ticket)가 있으면 조회 요청 후 재실행. 전이가 거부되면 False."""
    if ticket is None:
        return False
    get_loader().submit(ticket)
    logger.debug("조회 요청 seq=%d %s", ticket.seq, ticket.query)
    if message:
        _queue_toast(message, icon="📍")
    st.rerun()
    return True


def _wait_for_places():
    """최신 조회가 진행 중이면 끝날 때까지 대기 (시간 초과 시 스켈레톤 유지)."""
    navigator = get_navigator()
    if not navigator.state.is_loading:
        return
    with st.spinner("시설 정보를 불러오는 중…"):
        get_loader().wait(timeout=PLACE_FETCH_TIMEOUT)


def _notify_fetch_error():
    """조회 실패는 요청(seq)당 한 번만 알림."""
    navigator = get_navigator()
    if not navigator.last_error:
        return
    seq = navigator.latest_seq
    if st.session_state.get(_ERROR_SEQ_KEY) == seq:
        return
    st.session_state[_ERROR_SEQ_KEY] = seq
    st.toast(f"시설 정보를 불러오지 못했습니다: {navigator.last_error}", icon="⚠️")


def _on_place_selected(place: Place):
    navigator = get_navigator()
    ticket = navigator.select_from_place(place)
    if ticket is None:
        st.toast("주소에서 지역을 찾을 수 없습니다.", icon="⚠️")
        return
    _dispatch(ticket, f"{place.name} 위치로 이동합니다.")


def _render_city_selector(all_places: List[Place]):
    """시 단계가 있는 지역: 지역 내 시설의 city 값으로 셀렉트박스 구성."""
    navigator = get_navigator()
    state = navigator.state
    if not navigator.has_city_level(state.selected_region):
        return
    cities = distinct_values(
        p.city for p in all_places if place_in_region(p, state.selected_region)
    )
    if not cities:
        return
    options = [_ALL_CITIES_LABEL] + sorted(cities)
    current = state.selected_city if state.selected_city in cities else _ALL_CITIES_LABEL
    chosen = st.selectbox(
        "시 선택",
        options=options,
        index=options.index(current),
        key=f"city_select_{state.selected_region}_{current}",
    )
    if chosen != current and chosen != _ALL_CITIES_LABEL:
        _dispatch(navigator.select_city(chosen), f"{state.selected_region} {chosen}을(를) 선택했습니다.")


def _render_map_column(all_places: List[Place]):
    navigator = get_navigator()
    state = navigator.state
    if state.selected_region is None:
        chosen = render_region_map(None, count_by_region(all_places))
        if chosen:
            _dispatch(navigator.select_region(chosen), f"{chosen} 지역을 선택했습니다.")
        return

    render_region_image(state.selected_region)
    _render_city_selector(all_places)
    view = get_cached_district_view(state.selected_region)
    selected_id = None
    if view is not None:
        selected_id = view.resolve_selected(state.selected_city, state.selected_district)
    clicked = render_district_map(view, all_places, selected_id)
    if clicked and clicked != selected_id:
        _dispatch(navigator.select_district(clicked), f"{state.selected_region} {clicked}을(를) 선택했습니다.")

    # 지도 클릭이 어려운 경우를 위한 구 선택 (지도와 같은 상태를 가리킴)
    if view is not None and not view.is_empty:
        options = ["선택 안 함"] + view.district_ids
        current = selected_id or options[0]
        chosen = st.selectbox(
            "시군구 선택",
            options=options,
            index=options.index(current),
            key=f"district_select_{state.selected_region}_{current}",
        )
        if chosen != current and chosen != options[0]:
            _dispatch(navigator.select_district(chosen), f"{state.selected_region} {chosen}을(를) 선택했습니다.")


def _render_controls():
    """전국: 검색창 + 검색/리셋. 지역 이하: 한 단계 위로 돌아가기 버튼."""
    navigator = get_navigator()
    state = navigator.state
    if state.selected_region is None:
        with st.form("place_search_form", clear_on_submit=False, border=False):
            keyword = st.text_input(
                "검색",
                value=state.search_keyword,
                placeholder="시설 이름 또는 주소로 검색",
                label_visibility="collapsed",
            )
            col_search, col_reset = st.columns(2)
            with col_search:
                searched = st.form_submit_button("검색", use_container_width=True, type="primary")
            with col_reset:
                reset = st.form_submit_button("리셋", use_container_width=True)
        if searched:
            _dispatch(navigator.search(keyword))
        if reset:
            _dispatch(navigator.reset())
        return
    if st.button(state.back_label(), key=f"back_{state.depth}", use_container_width=True):
        _dispatch(navigator.reset())


def _render_sidebar():
    with st.sidebar:
        if st.button("데이터 새로고침", key="refresh_places", use_container_width=True):
            invalidate_places_cache()
            invalidate_district_view_cache()
            _dispatch(get_navigator().begin(), "시설 정보를 다시 불러옵니다.")


def page_facility_search():
    navigator = get_navigator()
    _render_sidebar()
    _flush_toasts()
    _wait_for_places()
    _notify_fetch_error()
    all_places = get_cached_all_places()

    state = navigator.state
    subtitle = f"검색어: {state.search_keyword}" if state.search_keyword else ""
    render_page_header(state.title(), subtitle)

    col_map, col_list = st.columns([3, 2])
    with col_map:
        _render_map_column(all_places)
    with col_list:
        _render_controls()
        state = navigator.state
        render_place_list(
            navigator.places,
            loading=state.is_loading,
            on_select=_on_place_selected,
            key_prefix=f"place_{navigator.latest_seq}",
        )
