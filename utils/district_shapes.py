# utils/district_shapes.py
"""
지역별 시군구 도형 데이터셋 (data/district_paths/<dataset>.json) 저장/로드
파일 형식: [{"id": "수원시 권선구", "d": "M..."}, ...]
"""
import json
import logging
import os
from typing import List, Optional

from core.constants import DISTRICT_PATHS_DIR
from core.models import DistrictShape

logger = logging.getLogger(__name__)


def dataset_path(dataset: str, base_dir: Optional[str] = None) -> str:
    return os.path.join(base_dir or DISTRICT_PATHS_DIR, f"{dataset}.json")


def load_district_shapes(dataset: str, base_dir: Optional[str] = None) -> List[DistrictShape]:
    """데이터셋 로드. 파일이 없거나 형식이 잘못되면 빈 목록 (지도는 빈 화면으로 대체)."""
    path = dataset_path(dataset, base_dir)
    if not os.path.isfile(path):
        logger.warning("시군구 도형 데이터셋 없음: %s", path)
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("시군구 도형 데이터셋 읽기 실패 (%s): %s", path, e)
        return []
    if not isinstance(raw, list):
        logger.warning("시군구 도형 데이터셋 형식 오류 (list 아님): %s", path)
        return []
    shapes: List[DistrictShape] = []
    seen = set()
    for item in raw:
        if not isinstance(item, dict):
            continue
        shape_id = str(item.get("id") or "").strip()
        d = str(item.get("d") or "").strip()
        if not shape_id or shape_id in seen or not d.startswith(("M", "m")):
            logger.warning("잘못된 도형 항목 건너뜀 (%s): id=%r", dataset, shape_id)
            continue
        shapes.append(DistrictShape(id=shape_id, d=d))
        seen.add(shape_id)
    return shapes


def save_district_shapes(shapes: List[DistrictShape], out_path: str) -> str:
    """목록을 JSON 으로 저장하고 경로 반환."""
    os.makedirs(os.path.dirname(os.path.abspath(out_path)), exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(dump_district_shapes(shapes))
    return out_path


def dump_district_shapes(shapes: List[DistrictShape]) -> str:
    payload = [{"id": s.id, "d": s.d} for s in shapes]
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
