"""
주소 문자열 기반 지역/시군구 분류 (휴리스틱)

구조화된 region/city/district 컬럼이 비어 있을 때 주소 부분문자열로 소속을 추정한다.
정확한 조인이 아니므로 우선순위를 고정해 결과가 항상 같도록 한다.
- 지역: REGIONS 순서대로 검사, 처음 포함되는 이름이 선택됨
- 시군구: 구조화 컬럼 일치 우선, 없으면 주소에 포함된 가장 긴 이름 (길이가 같으면 데이터셋 순서)
"""
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Tuple

from core.constants import CITY_SUFFIX, REGION_ALIASES, REGIONS

if TYPE_CHECKING:
    from core.models import Place


def normalize_region(value: Optional[str], regions: Sequence[str] = REGIONS) -> str:
    """region 컬럼 값 → REGIONS 표기 ("경기도" → "경기", "전라남도" → "전남"). 모르는 값은 그대로."""
    v = (value or "").strip()
    if not v or v in regions:
        return v
    for region in regions:
        if v in REGION_ALIASES.get(region, ()):
            return region
    return v


def region_aliases(region: str) -> List[str]:
    """원격 조회용: 같은 지역을 가리키는 모든 region 컬럼 값."""
    return [region] + list(REGION_ALIASES.get(region, ()))


def split_district_id(district_id: str, has_city_level: bool) -> Tuple[Optional[str], Optional[str]]:
    """지도 구역 id → (city, district). 조회 조건(city/district 동등 비교)으로 바로 쓸 수 있는 형태.

    시 단계가 있는 지역에서
    - "수원시 권선구" → ("수원시", "권선구")
    - 구가 없는 시 "부천시" → ("부천시", None)
    - 그 밖의 "남동구", "가평군" → (None, id)
    시 단계가 없는 지역(수도)은 항상 (None, id).
    """
    district_id = (district_id or "").strip()
    if not has_city_level:
        return None, district_id
    if " " in district_id:
        city, district = district_id.split(" ", 1)
        return city, district.strip()
    if district_id.endswith(CITY_SUFFIX):
        return district_id, None
    return None, district_id


def infer_region(address: Optional[str], regions: Sequence[str] = REGIONS) -> Optional[str]:
    """주소에 포함된 첫 번째 지역명 반환. 없으면 None."""
    if not address:
        return None
    for region in regions:
        if region in address:
            return region
    return None


def place_region(place: "Place", regions: Sequence[str] = REGIONS) -> Optional[str]:
    """시설의 지역: region 컬럼(정규화된 값) 우선, 비어 있으면 주소에서 추론."""
    if place.region:
        return place.region
    return infer_region(place.address, regions)


def place_in_region(place: "Place", region: str, regions: Sequence[str] = REGIONS) -> bool:
    return place_region(place, regions) == region


def count_by_region(places: Iterable["Place"], regions: Sequence[str] = REGIONS) -> Dict[str, int]:
    """지역별 시설 수 (모든 지역 키 포함, 없으면 0). 지역을 알 수 없는 시설은 제외."""
    counts = {region: 0 for region in regions}
    for place in places:
        region = place_region(place, regions)
        if region in counts:
            counts[region] += 1
    return counts


def match_district(place: "Place", district_ids: Iterable[str]) -> Optional[str]:
    """시설이 속한 시군구 id 반환. 해당 없으면 None.

    "남동구"처럼 다른 이름("동구")을 포함하는 경우가 있어 가장 긴 일치를 고른다.
    """
    ids = list(district_ids)
    combined = f"{place.city} {place.district}" if place.city and place.district else None
    for field in (combined, place.district, place.city):
        if field and field in ids:
            return field
    address = place.address or ""
    best = None
    for district_id in ids:
        if district_id and district_id in address:
            if best is None or len(district_id) > len(best):
                best = district_id
    return best
