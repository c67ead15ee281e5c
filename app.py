"""
한평생 돌봄지도 - 전국 → 지역 → 시 → 구 순서로 지도를 좁혀 가며 돌봄 시설을 찾는 앱
실행: streamlit run run.py
"""
import logging

import streamlit as st

from core.constants import APP_TITLE
from core.db import db_init
from pages.common import apply_common_styles

logger = logging.getLogger(__name__)


def page_guide():
    st.header("이용 안내")
    st.markdown("""
    ### 사용 순서
    1. **전국 지도**: 지도에서 지역을 누르거나 지역 선택 상자에서 고릅니다.
    2. **지역 지도**: 시군구를 누르면 해당 구의 시설만 목록에 표시됩니다.
    3. **되돌아가기**: 버튼을 누를 때마다 한 단계씩(구 → 지역 → 전국) 넓어집니다.
    4. **검색**: 전국 화면에서 시설 이름이나 주소로 검색할 수 있습니다.
    5. **지도에서 보기**: 목록의 시설 카드에서 누르면 그 시설의 지역으로 이동합니다.

    ### 참고
    - 시군구 지도의 숫자는 검색어와 관계없이 구별 전체 시설 수입니다. 시설이 없는 구는 숫자를 표시하지 않습니다.
    - 시군구 지도 데이터가 준비되지 않은 지역은 목록만 표시됩니다.
    """)


def _run_page_facility_search():
    from pages.facility_search import page_facility_search
    page_facility_search()


def main():
    # set_page_config는 run.py에서 이미 1회 호출됨

    # 페이지 전환 시 이전 콘텐츠 잔상(ghosting) 방지
    st.markdown("""
    <style>
    [data-testid="stAppViewContainer"] main .block-container { opacity: 1 !important; }
    </style>
    """, unsafe_allow_html=True)
    apply_common_styles()

    # DB 초기화: Supabase 연결 검증 (세션당 1회 성공 시만 플래그 설정)
    if not st.session_state.get("_db_initialized", False):
        with st.spinner("준비 중…"):
            try:
                db_init()
                st.session_state.pop("db_init_error", None)
                st.session_state["_db_initialized"] = True
            except Exception as e:
                logger.warning("DB 초기화 실패: %s", e)
                st.session_state["db_init_error"] = str(e)
    if st.session_state.get("db_init_error"):
        st.error("Supabase 설정을 확인해주세요. " + st.session_state["db_init_error"])

    # st.navigation: pages/ 폴더 자동 페이지 등록 대신 명시한 페이지만 메뉴에 표시
    page_search = st.Page(_run_page_facility_search, title="돌봄지도", default=True)
    page_help = st.Page(page_guide, title="이용 안내")
    nav = st.navigation({APP_TITLE: [page_search, page_help]})
    nav.run()


if __name__ == "__main__":
    st.set_page_config(page_title=APP_TITLE, layout="wide")
    try:
        main()
    except Exception as e:
        st.error("앱 로드 중 오류가 발생했습니다.")
        st.code(str(e))
        import traceback
        st.code(traceback.format_exc())
