# utils/svg_extract.py
"""
시군구 경계 SVG 문서에서 <path> 의 id / d 를 뽑아 [{id, d}, ...] 목록으로 변환
- id, d 속성 순서는 어느 쪽이든 허용
- d 가 M/m 으로 시작하는 것만 유지
- id 중복 시 문서상 처음 나온 것만 유지 (같은 입력 → 항상 같은 결과)
"""
import html
import re
from typing import List

from core.models import DistrictShape

_PATH_TAG_RE = re.compile(r"<path\b([^>]*)>", re.IGNORECASE | re.DOTALL)
# data-id 같은 접두 속성과 구분하기 위해 앞 글자가 공백일 때만 인정
_ATTR_RE = re.compile(r"""(?<![\w:-])(id|d)\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.DOTALL)


def _path_attrs(attr_text: str) -> dict:
    attrs = {}
    for m in _ATTR_RE.finditer(attr_text):
        name = m.group(1)
        if name in attrs:
            continue
        value = m.group(2) if m.group(2) is not None else m.group(3)
        attrs[name] = html.unescape(value)
    return attrs


def extract_district_paths(svg_content: str) -> List[DistrictShape]:
    """SVG 문자열 → DistrictShape 목록 (문서 순서)."""
    shapes: List[DistrictShape] = []
    seen = set()
    for tag in _PATH_TAG_RE.finditer(svg_content or ""):
        attrs = _path_attrs(tag.group(1))
        shape_id = (attrs.get("id") or "").strip()
        d = (attrs.get("d") or "").strip()
        if not shape_id or shape_id in seen:
            continue
        if not d.startswith(("M", "m")):
            continue
        shapes.append(DistrictShape(id=shape_id, d=d))
        seen.add(shape_id)
    return shapes
