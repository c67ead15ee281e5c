"""
Supabase 클라이언트 (st.secrets 또는 환경변수)
로컬: .streamlit/secrets.toml 또는 .env 에 SUPABASE_URL, SUPABASE_KEY 설정.
배포: Streamlit Cloud > Manage app > Secrets 에 동일 키 설정.
"""
import logging
import os
from typing import Optional, Tuple

import streamlit as st

logger = logging.getLogger(__name__)


def _read_secrets() -> Tuple[Optional[str], Optional[str]]:
    """st.secrets 에서 (url, key). secrets.toml 이 없거나 키가 없으면 (None, None)."""
    try:
        url = st.secrets.get("SUPABASE_URL")
        key = st.secrets.get("SUPABASE_KEY")
        if not url or not key:
            # 중첩 형식 ([supabase] url = "..." key = "...")
            section = st.secrets.get("supabase") or {}
            url = url or section.get("SUPABASE_URL") or section.get("url")
            key = key or section.get("SUPABASE_KEY") or section.get("key")
        return url, key
    except (FileNotFoundError, KeyError, AttributeError):
        return None, None
    except Exception as e:  # secrets.toml 파싱 오류 등
        logger.warning("st.secrets 읽기 실패: %s", e)
        return None, None


def get_supabase_credentials() -> Tuple[Optional[str], Optional[str]]:
    """st.secrets 우선, 없으면 환경변수에서 SUPABASE_URL, SUPABASE_KEY 반환."""
    url, key = _read_secrets()
    url = url or os.environ.get("SUPABASE_URL")
    key = key or os.environ.get("SUPABASE_KEY")
    return url, key


def _is_placeholder(url: Optional[str], key: Optional[str]) -> bool:
    return not url or not key or "your-" in str(key).lower() or "xxxxx" in str(url).lower()


def create_supabase(url: Optional[str], key: Optional[str]):
    """자격 증명 검증 후 클라이언트 생성. 설정이 없으면 RuntimeError."""
    if _is_placeholder(url, key):
        raise RuntimeError(
            "Supabase 설정이 없습니다. "
            "st.secrets 또는 환경변수에 SUPABASE_URL, SUPABASE_KEY를 설정하세요."
        )
    from supabase import create_client
    logger.info("Supabase 클라이언트 생성: %s", url.strip())
    return create_client(url.strip(), key.strip())


@st.cache_resource
def get_supabase():
    """
    앱 전체에서 공유하는 Supabase 클라이언트. 연결 설정이 없으면 RuntimeError 발생.
    """
    url, key = get_supabase_credentials()
    return create_supabase(url, key)
