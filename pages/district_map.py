"""
시군구 지도 렌더링 (plotly). DistrictMapView 의 도형/라벨/리더 라인을 그리고
라벨 위치의 점을 클릭하면 해당 구역이 선택됨.
"""
from typing import Iterable, List, Optional

import streamlit as st

from core.district_map import DistrictLabel, DistrictMapView
from core.models import Place
from core.ui_components import consume_map_selection, map_widget_key

FILL_DEFAULT = "#d1d5db"
FILL_SELECTED = "#60a5fa"
LEADER_COLOR = "#222222"
COUNT_COLOR = "#2563eb"


def district_map_key(region: str) -> str:
    return f"district_map_{region}"


def build_district_map_figure(view: DistrictMapView, labels: List[DistrictLabel]):
    """도형(fill) → 리더 라인 → 라벨 순서로 그림. y 축은 SVG 좌표계에 맞춰 뒤집음."""
    import plotly.graph_objects as go
    fig = go.Figure()
    outlines = view.outlines()
    selected = {lb.district_id for lb in labels if lb.selected}

    # 1. 모든 구역
    for shape in view.shapes:
        rings = outlines.get(shape.id) or []
        if not rings:
            continue
        xs: List[Optional[float]] = []
        ys: List[Optional[float]] = []
        for ring in rings:
            xs.extend(ring[:, 0].tolist() + [None])
            ys.extend(ring[:, 1].tolist() + [None])
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            fill="toself",
            fillcolor=FILL_SELECTED if shape.id in selected else FILL_DEFAULT,
            line=dict(color="white", width=1),
            hoverinfo="skip",
            showlegend=False,
        ))

    # 2. 리더 라인
    for lb in labels:
        if lb.leader is None:
            continue
        start, end = lb.leader
        fig.add_trace(go.Scatter(
            x=[start.x, end.x],
            y=[start.y, end.y],
            mode="lines",
            line=dict(color=LEADER_COLOR, width=1.2, dash="dot"),
            hoverinfo="skip",
            showlegend=False,
        ))

    # 3. 이름 라벨 + 클릭용 점 (customdata = 구역 id)
    fig.add_trace(go.Scatter(
        x=[lb.text.x for lb in labels],
        y=[lb.text.y for lb in labels],
        mode="markers+text",
        text=[lb.district_id for lb in labels],
        textposition="top center",
        textfont=dict(size=13, color="#222222"),
        marker=dict(size=10, color=[FILL_SELECTED if lb.selected else "#6b7280" for lb in labels], opacity=0.8),
        customdata=[[lb.district_id] for lb in labels],
        hovertext=[f"{lb.district_id}: {lb.count}개" for lb in labels],
        hoverinfo="text",
        showlegend=False,
    ))

    # 4. 시설 수 (0 이면 표시하지 않음)
    counted = [lb for lb in labels if lb.show_count]
    if counted:
        fig.add_trace(go.Scatter(
            x=[lb.count_position.x for lb in counted],
            y=[lb.count_position.y for lb in counted],
            mode="text",
            text=[lb.count_text for lb in counted],
            textfont=dict(size=13, color=COUNT_COLOR),
            hoverinfo="skip",
            showlegend=False,
        ))

    min_x, min_y, width, height = view.config.view_box
    fig.update_xaxes(visible=False, range=[min_x, min_x + width])
    fig.update_yaxes(visible=False, range=[min_y + height, min_y], scaleanchor="x", scaleratio=1)
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        height=720,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        dragmode=False,
    )
    return fig


def district_count_frame(labels: List[DistrictLabel]):
    """시군구별 시설 수 표 (많은 순). 라벨이 없어도 같은 컬럼의 빈 표."""
    import pandas as pd
    df = pd.DataFrame(
        [{"시군구": lb.district_id, "시설 수": lb.count} for lb in labels],
        columns=["시군구", "시설 수"],
    )
    return df.sort_values("시설 수", ascending=False)


def render_district_map(
    view: Optional[DistrictMapView],
    all_places: Iterable[Place],
    selected_district: Optional[str],
) -> Optional[str]:
    """시군구 지도 렌더. 이번 실행에서 새로 클릭된 구역 id 반환 (없으면 None)."""
    if view is None or view.is_empty:
        st.info("이 지역의 시군구 지도를 준비 중입니다. 목록에서 시설을 확인하세요.")
        return None

    key = district_map_key(view.config.region)
    clicked: List[str] = []
    value = consume_map_selection(key)
    if value is not None:
        view.click(value, clicked.append)

    labels = view.labels(all_places, selected_district=clicked[0] if clicked else selected_district)
    if not labels:
        # 도형은 있으나 모두 해석 실패
        st.info("이 지역의 시군구 지도를 그릴 수 없습니다. 목록에서 시설을 확인하세요.")
        return clicked[0] if clicked else None
    fig = build_district_map_figure(view, labels)
    st.plotly_chart(
        fig,
        key=map_widget_key(key),
        use_container_width=True,
        on_select="rerun",
        selection_mode="points",
    )
    with st.expander("시군구별 시설 수"):
        st.dataframe(district_count_frame(labels), use_container_width=True, hide_index=True)
    return clicked[0] if clicked else None
