"""
전국 시도 지도 (Choropleth). 지도 클릭 시 지역 선택, 셀렉트박스와 양방향 연동.
"""
import json
import logging
from typing import Dict, Optional

import streamlit as st

from core.constants import (
    KOREA_SIDO_GEOJSON_URL,
    REGIONS,
    REGION_SIDO_CODE,
    SIDO_CODE_TO_REGION,
)
from core.ui_components import consume_map_selection, map_widget_key

logger = logging.getLogger(__name__)

REGION_MAP_KEY = "region_map"
_NO_REGION_LABEL = "전국"


@st.cache_data(ttl=3600)
def _load_korea_sido_geojson():
    """한국 시도 GeoJSON 로드. properties.code 를 모두 문자열(str)로 통일해 locations 와 매칭 보장."""
    import urllib.request
    try:
        with urllib.request.urlopen(KOREA_SIDO_GEOJSON_URL, timeout=15) as resp:
            geojson = json.loads(resp.read().decode())
    except Exception as e:
        logger.warning("시도 GeoJSON 로드 실패: %s", e)
        return None
    if not geojson or geojson.get("type") != "FeatureCollection":
        return None
    for f in geojson.get("features") or []:
        prop = f.get("properties") or {}
        code = prop.get("code")
        if code is not None:
            prop["code"] = str(code).strip()
    return geojson


def build_region_choropleth_figure(geojson: dict, selected_region: Optional[str], region_counts: Dict[str, int]):
    """시도별 Choropleth. 선택 지역은 강조색, hover 에 시설 수 표시. customdata = 지역명."""
    import plotly.graph_objects as go
    locations = []
    z_vals = []
    hover_texts = []
    customdata_list = []
    for region in REGIONS:
        code = REGION_SIDO_CODE[region]
        count = region_counts.get(region, 0)
        locations.append(code)
        z_vals.append(2 if region == selected_region else 1)
        hover_texts.append(f"{region}<br>시설: {count:,}개")
        customdata_list.append([region])
    fig = go.Figure(
        go.Choroplethmapbox(
            geojson=geojson,
            featureidkey="properties.code",
            locations=locations,
            z=z_vals,
            text=hover_texts,
            hoverinfo="text",
            customdata=customdata_list,
            colorscale=[[0, "#e5e7eb"], [0.5, "#93c5fd"], [1, "#2563eb"]],
            zmin=1,
            zmax=2,
            showscale=False,
            marker_line_width=1.2,
            marker_line_color="white",
        )
    )
    fig.update_layout(
        mapbox=dict(
            style="carto-positron",
            center=dict(lat=36.0, lon=127.8),
            zoom=5.8,
            bounds={"west": 124, "east": 132, "south": 33, "north": 39},
        ),
        margin=dict(l=0, r=0, t=0, b=0),
        height=620,
        showlegend=False,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def region_from_selection(value: Optional[str]) -> Optional[str]:
    """지도 선택값(지역명 또는 시도 코드) → 지역명."""
    if value is None:
        return None
    if value in REGION_SIDO_CODE:
        return value
    return SIDO_CODE_TO_REGION.get(value)


def render_region_map(selected_region: Optional[str], region_counts: Dict[str, int]) -> Optional[str]:
    """
    지도 + 지역 셀렉트박스 렌더. 이번 실행에서 사용자가 새로 고른 지역이 있으면 반환.
    지도 클릭은 on_select='rerun' → 다음 실행 시작 시 세션에서 읽어 처리.
    """
    clicked = region_from_selection(consume_map_selection(REGION_MAP_KEY, REGIONS))

    options = [_NO_REGION_LABEL] + REGIONS
    current = selected_region if selected_region in REGIONS else _NO_REGION_LABEL
    chosen = st.selectbox(
        "지역 선택",
        options=options,
        index=options.index(current),
        key=f"region_select_{current}",
    )

    geojson = _load_korea_sido_geojson()
    if geojson:
        fig = build_region_choropleth_figure(geojson, clicked or selected_region, region_counts)
        st.plotly_chart(
            fig,
            key=map_widget_key(REGION_MAP_KEY),
            use_container_width=True,
            on_select="rerun",
            selection_mode="points",
        )
    else:
        st.caption("지도 데이터(GeoJSON)를 불러올 수 없습니다. 위 지역 선택을 이용하세요.")

    if clicked and clicked != selected_region:
        return clicked
    if chosen != current and chosen in REGIONS:
        return chosen
    return None
