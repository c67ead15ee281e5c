"""
시군구 지도 뷰 모델 (지역 하나에 대한 도형, 라벨 위치, 시설 수)

지역별로 컴포넌트를 따로 두지 않고 RegionMapConfig(지역명, 데이터셋, 라벨 보정표)만 바꿔
같은 뷰를 재사용한다. 렌더링(plotly)은 pages/district_map.py 에서 담당.

- 시설 수는 현재 검색 결과가 아닌 전체 시설 목록 기준 (구를 눌러도 다른 구 숫자가 변하지 않음)
- 시설 수가 0 인 구는 숫자 라벨을 표시하지 않음 (카운트 값 자체는 0 으로 유지)
- 라벨 보정표에 x/y 가 있는 구는 실제 중심점 → 라벨 위치까지 리더 라인을 그림
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from core.constants import CAPITAL_REGION, DEFAULT_DISTRICT_VIEW_BOX, REGION_NAME_MAPPING
from core.db import PlaceQuery
from core.models import Centroid, DistrictShape, Place
from core.regions import match_district, place_in_region, split_district_id
from utils.svg_path import SvgPathError, path_centroid, path_rings

logger = logging.getLogger(__name__)

# 이름 라벨 아래 숫자 라벨 간격 (px)
COUNT_LINE_HEIGHT = 22


@dataclass(frozen=True)
class LabelOffset:
    """x/y: 중심점 기준 라벨 이동, text_dx/text_dy: 라벨 기준 글자 추가 이동."""

    x: float = 0.0
    y: float = 0.0
    text_dx: float = 0.0
    text_dy: float = 0.0

    @property
    def has_leader(self) -> bool:
        return bool(self.x or self.y)


@dataclass(frozen=True)
class RegionMapConfig:
    region: str
    dataset: str
    label_offsets: Mapping[str, LabelOffset] = field(default_factory=dict)
    view_box: Tuple[float, float, float, float] = DEFAULT_DISTRICT_VIEW_BOX

    @property
    def has_city_level(self) -> bool:
        return self.region != CAPITAL_REGION


@dataclass(frozen=True)
class DistrictLabel:
    district_id: str
    centroid: Centroid
    label: Centroid
    text: Centroid
    count: int
    show_count: bool
    leader: Optional[Tuple[Centroid, Centroid]]
    selected: bool

    @property
    def count_text(self) -> str:
        return f"{self.count}개"

    @property
    def count_position(self) -> Centroid:
        return Centroid(self.text.x, self.text.y + COUNT_LINE_HEIGHT)


# 겹치는 구역만 라벨 위치 보정
GYEONGGI_LABEL_OFFSETS = {
    "광명시": LabelOffset(0, -30, text_dy=-10),
    "부천시": LabelOffset(-40, 0, text_dx=-18),
    "용인시 기흥구": LabelOffset(30, 0, text_dx=40),
    "수원시 권선구": LabelOffset(-60, 25, text_dx=-10, text_dy=10),
    "성남시 수정구": LabelOffset(0, -60, text_dx=-15),
    "수원시 팔달구": LabelOffset(-30, 100, text_dy=10),
    "수원시 영통구": LabelOffset(20, 50, text_dx=10),
    "수원시 장안구": LabelOffset(-210, -55, text_dx=-40),
    "고양시 일산동구": LabelOffset(-35, 80),
    "고양시 일산서구": LabelOffset(0, -40, text_dy=-10),
    "성남시 중원구": LabelOffset(30, 0, text_dx=40),
    "성남시 분당구": LabelOffset(0, -10),
    "안산시 상록구": LabelOffset(-160, 0, text_dx=-40),
    "안양시 만안구": LabelOffset(0, -105),
    "안양시 동안구": LabelOffset(0, -55, text_dx=10),
    "과천시": LabelOffset(0, -105),
}

INCHEON_LABEL_OFFSETS = {
    "중구": LabelOffset(-20, -20, text_dx=-10),
    "서구": LabelOffset(30, -60, text_dy=-10),
    "계양구": LabelOffset(30, -10, text_dx=25),
    "연수구": LabelOffset(-30, 10, text_dy=10),
    "남동구": LabelOffset(30, -10, text_dx=25),
    "미추홀구": LabelOffset(-90, 30, text_dx=-30),
}

_LABEL_OFFSETS_BY_REGION = {
    "경기": GYEONGGI_LABEL_OFFSETS,
    "인천": INCHEON_LABEL_OFFSETS,
}

# 지역명 → 지도 설정. 데이터셋 파일명은 지역 영문명 (scripts/svg_paths_to_array.py 출력)
REGION_MAP_CONFIGS: Dict[str, RegionMapConfig] = {
    region: RegionMapConfig(
        region=region,
        dataset=dataset,
        label_offsets=_LABEL_OFFSETS_BY_REGION.get(region, {}),
    )
    for region, dataset in REGION_NAME_MAPPING.items()
}


def get_region_map_config(region: Optional[str]) -> Optional[RegionMapConfig]:
    if not region:
        return None
    return REGION_MAP_CONFIGS.get(region)


class DistrictMapView:
    """지역 하나의 시군구 지도. 도형 목록은 불변, 중심점은 최초 1회 계산 후 재사용."""

    def __init__(self, config: RegionMapConfig, shapes: Sequence[DistrictShape]):
        self.config = config
        self.shapes: List[DistrictShape] = list(shapes)
        self._lock = threading.Lock()
        self._centroids: Optional[Dict[str, Centroid]] = None
        self._rings: Optional[Dict[str, List[np.ndarray]]] = None

    @property
    def is_empty(self) -> bool:
        return not self.shapes

    @property
    def district_ids(self) -> List[str]:
        return [s.id for s in self.shapes]

    def compute_centroids(self, force: bool = False) -> Dict[str, Centroid]:
        """모든 도형의 bounding box 중심 계산. 여러 번 호출해도 결과 동일."""
        with self._lock:
            if self._centroids is not None and not force:
                return dict(self._centroids)
            centroids: Dict[str, Centroid] = {}
            rings: Dict[str, List[np.ndarray]] = {}
            for shape in self.shapes:
                try:
                    rings[shape.id] = path_rings(shape.d)
                    centroids[shape.id] = path_centroid(shape.d)
                except SvgPathError as e:
                    logger.warning("%s %s 도형 해석 실패: %s", self.config.region, shape.id, e)
            self._centroids = centroids
            self._rings = rings
            return dict(centroids)

    @property
    def centroids(self) -> Dict[str, Centroid]:
        return self.compute_centroids()

    def outlines(self) -> Dict[str, List[np.ndarray]]:
        self.compute_centroids()
        with self._lock:
            return dict(self._rings or {})

    def district_query(self, district_id: str) -> PlaceQuery:
        """구역 클릭 시 목록 조회에 쓰이는 것과 같은 조건 (지역 + 시/구 동등 비교)."""
        city, district = split_district_id(district_id, self.config.has_city_level)
        return PlaceQuery(region=self.config.region, city=city, district=district)

    def resolve_selected(self, city: Optional[str], district: Optional[str]) -> Optional[str]:
        """탐색 상태의 시/구 → 강조할 도형 id. 없으면 None."""
        ids = self.district_ids
        candidates = [f"{city} {district}" if city and district else None, district]
        if not district:
            candidates.append(city)
        for candidate in candidates:
            if candidate and candidate in ids:
                return candidate
        return None

    def place_counts(self, all_places: Iterable[Place]) -> Dict[str, int]:
        """시군구별 시설 수. 키는 정확히 이 지역의 도형 id.

        시/구 컬럼이 있는 시설은 구역을 눌렀을 때의 조회 조건(district_query)으로 세어
        숫자와 목록 건수가 같다. 시/구 컬럼이 모두 비어 있는 시설만 주소 부분문자열로 추정.
        """
        ids = self.district_ids
        counts = {district_id: 0 for district_id in ids}
        queries = [(district_id, self.district_query(district_id)) for district_id in ids]
        for place in all_places:
            if place.city or place.district:
                district_id = next((i for i, q in queries if q.matches(place)), None)
            elif place_in_region(place, self.config.region):
                district_id = match_district(place, ids)
            else:
                district_id = None
            if district_id is not None:
                counts[district_id] += 1
        return counts

    def labels(self, all_places: Iterable[Place], selected_district: Optional[str] = None) -> List[DistrictLabel]:
        counts = self.place_counts(all_places)
        centroids = self.centroids
        result = []
        for shape in self.shapes:
            centroid = centroids.get(shape.id)
            if centroid is None:
                continue
            offset = self.config.label_offsets.get(shape.id, LabelOffset())
            label = Centroid(centroid.x + offset.x, centroid.y + offset.y)
            text = Centroid(label.x + offset.text_dx, label.y + offset.text_dy)
            count = counts.get(shape.id, 0)
            result.append(DistrictLabel(
                district_id=shape.id,
                centroid=centroid,
                label=label,
                text=text,
                count=count,
                show_count=count > 0,
                leader=(centroid, label) if offset.has_leader else None,
                selected=shape.id == selected_district,
            ))
        return result

    def click(self, district_id: str, on_district_click: Callable[[str], object]) -> bool:
        """알려진 구역이면 콜백 호출 후 True. 없는 id(데이터셋 변경 등)는 무시."""
        if district_id not in self.district_ids:
            logger.debug("%s 지도에 없는 구역 클릭 무시: %r", self.config.region, district_id)
            return False
        on_district_click(district_id)
        return True
