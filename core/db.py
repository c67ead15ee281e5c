"""
한평생 돌봄지도 - DB 레이어 (Supabase PostgreSQL, places 테이블)
지역/시/구 동등 조건 + 이름·주소 키워드(대소문자 무시) 조건으로 시설을 조회.
같은 조건을 메모리 목록에 적용하는 filter_places 와 결과가 동일해야 함.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from core.constants import PLACES_TABLE, PLACE_FETCH_PAGE_SIZE
from core.models import Place
from core.regions import region_aliases
from core.supabase_client import get_supabase

logger = logging.getLogger(__name__)

# LIKE 패턴에서 글자 그대로 쓰려면 역슬래시로 감싸야 하는 문자
_LIKE_WILDCARDS = re.compile(r"([\\%_])")


class PlaceStoreError(RuntimeError):
    """places 조회 실패 (네트워크, 권한, 쿼리 오류 등)."""


@dataclass(frozen=True)
class PlaceQuery:
    keyword: str = ""
    region: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "keyword", (self.keyword or "").strip())

    def matches(self, place: Place) -> bool:
        if self.region and place.region != self.region:
            return False
        if self.city and place.city != self.city:
            return False
        if self.district and place.district != self.district:
            return False
        if self.keyword:
            kw = self.keyword.casefold()
            return kw in (place.name or "").casefold() or kw in (place.address or "").casefold()
        return True


def filter_places(places: Iterable[Place], query: PlaceQuery) -> List[Place]:
    """메모리 내 시설 목록에 조회 조건 적용 (순서 유지)."""
    return [p for p in places if query.matches(p)]


def _keyword_or_filter(keyword: str) -> Optional[str]:
    """name/address ilike OR 필터. 값은 큰따옴표로 감싸 , . ( ) 를 구문과 분리하고
    %, _, \\ 는 LIKE 이스케이프로 글자 그대로 비교."""
    if not keyword:
        return None
    pattern = "%" + _LIKE_WILDCARDS.sub(r"\\\1", keyword) + "%"
    value = '"' + pattern.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return f"name.ilike.{value},address.ilike.{value}"


def _apply_query(q, query: PlaceQuery):
    if query.region:
        # "경기"/"경기도" 처럼 표기가 섞여 있어도 같은 지역으로 조회
        q = q.in_("region", region_aliases(query.region))
    if query.city:
        q = q.eq("city", query.city)
    if query.district:
        q = q.eq("district", query.district)
    if query.keyword:
        or_filter = _keyword_or_filter(query.keyword)
        if or_filter:
            q = q.or_(or_filter)
    return q


def _rows_to_places(rows: List[Dict[str, Any]]) -> List[Place]:
    places = []
    for row in rows:
        try:
            places.append(Place.from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("잘못된 places 행 건너뜀 (%s): %r", e, row.get("id") if isinstance(row, dict) else row)
    return places


def query_places(query: Optional[PlaceQuery] = None, page_size: int = PLACE_FETCH_PAGE_SIZE) -> List[Place]:
    """places 테이블을 페이지 단위로 조회해 전체 결과 반환. 실패 시 PlaceStoreError."""
    query = query or PlaceQuery()
    all_rows: List[Dict[str, Any]] = []
    offset = 0
    try:
        sb = get_supabase()
        while True:
            q = _apply_query(sb.table(PLACES_TABLE).select("*"), query)
            q = q.order("id").range(offset, offset + page_size - 1)
            r = q.execute()
            data = r.data or []
            if not data:
                break
            all_rows.extend(data)
            if len(data) < page_size:
                break
            offset += page_size
    except Exception as e:
        logger.warning("places 조회 실패 (%s): %s", query, e)
        raise PlaceStoreError(f"시설 정보를 불러오지 못했습니다: {e}") from e
    # PostgREST 는 like 패턴의 * 를 % 로 바꾸므로 같은 조건으로 한 번 더 거름 (메모리 필터와 결과 동일)
    places = filter_places(_rows_to_places(all_rows), query)
    logger.debug("places 조회 %d건 (%s)", len(places), query)
    return places


def fetch_places(
    keyword: str = "",
    region: Optional[str] = None,
    city: Optional[str] = None,
    district: Optional[str] = None,
) -> List[Place]:
    """fetch(keyword, region?, city?, district?) -> Place 목록. 일치 없음은 빈 목록."""
    return query_places(PlaceQuery(keyword=keyword, region=region, city=city, district=district))


def db_init():
    """Supabase 연결 및 places 테이블 접근 검증. 실패 시 예외 발생."""
    sb = get_supabase()
    try:
        sb.table(PLACES_TABLE).select("id").limit(1).execute()
    except Exception as e:
        raise PlaceStoreError(f"{PLACES_TABLE} 테이블에 접근할 수 없습니다: {e}") from e
