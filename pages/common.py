"""
공통 UI 컴포넌트 및 스타일
지도 검색 페이지와 이용 안내 페이지에서 공통으로 사용하는 UI 요소들
"""
import os

import streamlit as st

from core.constants import ASSETS_DIR, REGION_IMAGE_OFFSETS, REGION_NAME_MAPPING


def apply_common_styles():
    """배너/카드/버튼 공통 CSS"""
    st.markdown("""
    <style>
    /* 전체 배경 */
    .stApp {
        background-color: #FDFDFF;
    }

    /* 입력 필드 스타일 */
    .stTextInput > div > div > input {
        border-radius: 12px;
        border: 1px solid #e2e8f0;
        padding: 12px;
        font-size: 14px;
    }

    .stTextInput > div > div > input:focus {
        border-color: #2B7FFF;
        outline: none;
    }

    /* 버튼 스타일 */
    .stButton > button {
        border-radius: 12px;
        font-weight: 700;
    }

    /* 시설 카드 제목 */
    .stMarkdown h4 {
        margin-bottom: 0;
    }

    /* 지역 장식 이미지 */
    .region-image {
        width: 93px;
        height: 69px;
        position: relative;
    }
    </style>
    """, unsafe_allow_html=True)


def render_page_header(title: str, subtitle: str = ""):
    """페이지 헤더: 배너(있으면) + 로고 + 제목 + 현재 검색 범위"""
    banner_path = os.path.join(ASSETS_DIR, "images", "mainBanner.png")
    if os.path.isfile(banner_path):
        st.image(banner_path, use_container_width=True)
    st.markdown(f"""
    <h1 style="font-size: 28px; font-weight: 800; color: #0f172a; margin: 0; padding-top: 8px;">
        {title}
    </h1>
    """, unsafe_allow_html=True)
    if subtitle:
        st.caption(subtitle)


def render_region_image(region: str):
    """선택 지역의 장식 이미지 (assets/images/{영문명}.png). 파일이 없으면 표시하지 않음."""
    name = REGION_NAME_MAPPING.get(region)
    if not name:
        return
    image_path = os.path.join(ASSETS_DIR, "images", f"{name}.png")
    if not os.path.isfile(image_path):
        return
    offset = REGION_IMAGE_OFFSETS.get(region) or REGION_IMAGE_OFFSETS["default"]
    import base64
    with open(image_path, "rb") as f:
        b64 = base64.b64encode(f.read()).decode("ascii")
    st.markdown(
        f'<img class="region-image" alt="{region}" src="data:image/png;base64,{b64}" '
        f'style="left: {offset["x"]}px; top: {offset["y"]}px;"/>',
        unsafe_allow_html=True,
    )
