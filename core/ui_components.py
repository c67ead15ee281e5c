"""
지도/목록 공통 UI: plotly 지도 클릭 선택값 해석, 시설 카드, 시설 목록
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Sequence

import streamlit as st

from core.models import Place

SKELETON_ROWS = 5


def _as_dict(obj: Any) -> dict:
    if isinstance(obj, dict):
        return obj
    return getattr(obj, "__dict__", None) or {}


def extract_selection_value(map_state: Any, ordered_ids: Optional[Sequence[str]] = None) -> Optional[str]:
    """
    st.plotly_chart(on_select="rerun") 선택 상태에서 첫 번째 점의 식별값 반환.
    배포 환경에 따라 selection 이 dict/속성, camelCase, locations 목록으로 올 수 있어 모두 처리.
    우선순위: customdata[0] → location → point_index(ordered_ids 기준)
    """
    if map_state is None:
        return None
    sel = map_state.get("selection") if isinstance(map_state, dict) else getattr(map_state, "selection", None)
    if sel is None:
        return None
    pts = sel.get("points", []) if isinstance(sel, dict) else (getattr(sel, "points", None) or [])
    # 일부 환경에서는 selection 이 locations 리스트로만 옴
    if not pts and isinstance(sel, dict) and sel.get("locations"):
        pts = [{"location": loc} if isinstance(loc, (str, int, float)) else loc for loc in sel["locations"]]
    if not pts and isinstance(sel, (list, tuple)) and sel and isinstance(sel[0], (str, int, float)):
        pts = [{"location": sel[0]}]
    if not pts:
        return None
    p0 = _as_dict(pts[0])
    cd = p0.get("customdata")
    if cd is None:
        cd = p0.get("customData")
    if isinstance(cd, (list, tuple)) and len(cd) > 0 and cd[0] is not None:
        return str(cd[0])
    if isinstance(cd, (str, int, float)):
        return str(cd)
    if p0.get("location") is not None:
        return str(p0["location"])
    idx = p0.get("point_index")
    if idx is None:
        idx = p0.get("pointIndex")
    if idx is not None and ordered_ids and 0 <= int(idx) < len(ordered_ids):
        return str(ordered_ids[int(idx)])
    return None


def map_widget_key(base_key: str) -> str:
    """선택 처리 후 새 위젯으로 교체하기 위한 버전 포함 key."""
    return f"{base_key}_{st.session_state.get(f'{base_key}_nonce', 0)}"


def consume_map_selection(base_key: str, ordered_ids: Optional[Sequence[str]] = None) -> Optional[str]:
    """이전 실행에서 지도 클릭이 있었으면 값을 반환하고 위젯을 초기화 (같은 선택을 다시 처리하지 않음)."""
    value = extract_selection_value(st.session_state.get(map_widget_key(base_key)), ordered_ids)
    if value is not None:
        nonce_key = f"{base_key}_nonce"
        st.session_state[nonce_key] = st.session_state.get(nonce_key, 0) + 1
    return value


def render_place_card(place: Place, key_prefix: str = "place") -> bool:
    """시설 카드. '지도에서 보기' 버튼이 눌리면 True."""
    with st.container(border=True):
        col_text, col_img = st.columns([4, 1])
        with col_text:
            st.markdown(f"#### {place.name}")
            # st.code 는 복사 버튼을 제공 (주소 복사)
            st.code(place.address or "-", language=None)
            st.markdown(f"**문의하기** {place.phone or '-'}")
            st.markdown(f"**영업시간** {place.open_hours or '-'}")
        with col_img:
            if place.image_url:
                st.image(place.image_url, use_container_width=True)
        return st.button("지도에서 보기", key=f"{key_prefix}_select_{place.id}")


def render_place_list(
    places: List[Place],
    loading: bool,
    on_select: Callable[[Place], Any],
    key_prefix: str = "place",
):
    """시설 목록: 로딩 중이면 스켈레톤, 비어 있으면 안내, 아니면 카드 목록."""
    if loading:
        for _ in range(SKELETON_ROWS):
            st.markdown(
                '<div style="height: 80px; border-radius: 8px; background: #f1f5f9; margin-bottom: 12px;"></div>',
                unsafe_allow_html=True,
            )
        return
    if not places:
        st.info("장소 데이터가 없습니다.")
        return
    st.caption(f"{len(places)}개의 장소")
    for place in places:
        if render_place_card(place, key_prefix):
            on_select(place)


def distinct_values(values: Iterable[Optional[str]]) -> List[str]:
    """None/빈 값 제외, 처음 등장 순서 유지."""
    seen = []
    for v in values:
        if v and v not in seen:
            seen.append(v)
    return seen
