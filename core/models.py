"""
도메인 모델: 시설(Place), 시군구 도형(DistrictShape), 라벨 중심점(Centroid)
Supabase 행(dict) ↔ 모델 변환 포함.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from core.regions import normalize_region


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Place:
    """places 테이블의 읽기 전용 투영. 식별자는 id."""

    id: int
    name: str
    address: str
    phone: str = ""
    open_hours: str = ""
    region: str = ""
    city: Optional[str] = None
    district: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    def __post_init__(self):
        # 조회 필터(region 동등 비교)와 지역별 집계가 같은 표기를 쓰도록 통일
        object.__setattr__(self, "region", normalize_region(self.region))

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Place":
        """Supabase 행 → Place. 누락/NULL 컬럼은 기본값으로 채움."""
        return cls(
            id=int(row["id"]),
            name=_clean_str(row.get("name")) or "",
            address=_clean_str(row.get("address")) or "",
            phone=_clean_str(row.get("phone")) or "",
            open_hours=_clean_str(row.get("open_hours")) or "",
            region=_clean_str(row.get("region")) or "",
            city=_clean_str(row.get("city")),
            district=_clean_str(row.get("district")),
            image_url=_clean_str(row.get("image_url")),
            category=_clean_str(row.get("category")),
            lat=_to_float(row.get("lat")),
            lng=_to_float(row.get("lng")),
        )

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DistrictShape:
    """시군구 하나의 SVG path. id = 표시용 시군구명, d = path 데이터."""

    id: str
    d: str


@dataclass(frozen=True)
class Centroid:
    x: float
    y: float
