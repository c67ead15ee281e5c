"""
Streamlit Cloud / 배포용 진입 스크립트.
실행: streamlit run run.py
- .env 로드 → 로깅 설정 → 페이지 설정 후 app.main 실행.
"""
import logging

from dotenv import load_dotenv

load_dotenv()

import streamlit as st

from core.constants import APP_TITLE, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title=APP_TITLE, layout="wide")

# 첫 화면에서 로딩 안내를 잠깐 보여준 뒤 제거하고 앱을 로드 (Cloud 타임아웃 완화)
if not st.session_state.get("run_loading_started", False):
    load_ph = st.empty()
    with load_ph.container():
        st.info("앱을 불러오는 중입니다… 잠시만 기다려 주세요.")
    st.session_state.run_loading_started = True
    load_ph.empty()

try:
    from app import main
    main()
except Exception as e:
    logging.getLogger("run").exception("앱 로드 실패")
    st.error("앱 로드 중 오류가 발생했습니다.")
    st.code(str(e))
    import traceback
    with st.expander("상세 traceback", expanded=True):
        st.code(traceback.format_exc())
    st.caption("Streamlit Cloud에서는 Manage app > Logs 에서 서버 로그를 확인할 수 있습니다.")
