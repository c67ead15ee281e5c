"""
지역 탐색 상태 머신 (전국 → 지역 → 시 → 구)

- 전이는 한 단계씩 좁히거나(select_*) 한 단계씩 넓힌다(reset).
- 모든 전이는 새 상태에 맞는 조회 요청(FetchTicket)을 만든다.
- 조회는 비동기로 끝나는 순서가 보장되지 않으므로 요청마다 증가하는 번호를 붙이고,
  가장 마지막 요청의 결과만 반영한다 (이전 요청 결과는 버림).
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence

from core.constants import CAPITAL_REGION, REGIONS
from core.db import PlaceQuery, PlaceStoreError
from core.models import Place
from core.regions import infer_region, split_district_id

logger = logging.getLogger(__name__)

COUNTRY = "country"
REGION = "region"
CITY = "city"
DISTRICT = "district"

Fetcher = Callable[[PlaceQuery], List[Place]]


@dataclass(frozen=True)
class NavigationState:
    selected_region: Optional[str] = None
    selected_city: Optional[str] = None
    selected_district: Optional[str] = None
    search_keyword: str = ""
    is_loading: bool = False

    def __post_init__(self):
        if (self.selected_city or self.selected_district) and not self.selected_region:
            raise ValueError("시/구를 선택하려면 지역이 먼저 선택되어야 합니다.")

    @property
    def level(self) -> str:
        if self.selected_district:
            return DISTRICT
        if self.selected_city:
            return CITY
        if self.selected_region:
            return REGION
        return COUNTRY

    @property
    def depth(self) -> int:
        return sum(1 for v in (self.selected_region, self.selected_city, self.selected_district) if v)

    def to_query(self) -> PlaceQuery:
        return PlaceQuery(
            keyword=self.search_keyword,
            region=self.selected_region,
            city=self.selected_city,
            district=self.selected_district,
        )

    def title(self) -> str:
        if self.selected_district:
            names = [self.selected_region, self.selected_city, self.selected_district]
            return " ".join(n for n in names if n) + " 요양보호사 시설 검색"
        if self.selected_city:
            return f"{self.selected_region} {self.selected_city} 요양보호사 시설 검색"
        if self.selected_region:
            return f"{self.selected_region} 요양보호사 시설 검색"
        return "전국 요양원 시설 검색"

    def back_label(self) -> str:
        if self.selected_district or self.selected_city:
            return f"{self.selected_region} 전체 맵으로"
        return "전체 맵으로 돌아가기"


@dataclass(frozen=True)
class FetchTicket:
    """조회 요청 1건. seq 는 navigator 안에서 단조 증가."""

    seq: int
    state: NavigationState

    @property
    def query(self) -> PlaceQuery:
        return self.state.to_query()


class PlaceNavigator:
    """탐색 상태 + 현재 표시 중인 시설 목록. 결과 반영은 최신 요청일 때만."""

    def __init__(self, capital_region: str = CAPITAL_REGION, regions: Sequence[str] = REGIONS):
        self._capital_region = capital_region
        self._regions = list(regions)
        self._lock = threading.RLock()
        self._state = NavigationState()
        self._seq = 0
        self._places: List[Place] = []
        self.last_error: Optional[str] = None

    @property
    def state(self) -> NavigationState:
        with self._lock:
            return self._state

    @property
    def places(self) -> List[Place]:
        with self._lock:
            return list(self._places)

    @property
    def latest_seq(self) -> int:
        with self._lock:
            return self._seq

    def has_city_level(self, region: Optional[str]) -> bool:
        return bool(region) and region != self._capital_region

    # ---------- 전이 ----------

    def _transition(self, new_state: NavigationState, action: str) -> FetchTicket:
        with self._lock:
            self._seq += 1
            self._state = replace(new_state, is_loading=True)
            self.last_error = None
            ticket = FetchTicket(self._seq, self._state)
        logger.debug("%s → %s (seq=%d)", action, ticket.state, ticket.seq)
        return ticket

    def begin(self) -> FetchTicket:
        """현재 상태 그대로 조회 (첫 화면 로드)."""
        return self._transition(self.state, "begin")

    def search(self, keyword: str) -> FetchTicket:
        return self._transition(replace(self.state, search_keyword=(keyword or "").strip()), "search")

    def select_region(self, region: str) -> Optional[FetchTicket]:
        if region not in self._regions:
            logger.warning("알 수 없는 지역 선택 무시: %r", region)
            return None
        # 다른 지역의 시/구 선택이 남지 않도록 하위 단계는 항상 초기화
        new_state = NavigationState(selected_region=region, search_keyword=self.state.search_keyword)
        return self._transition(new_state, f"select_region({region})")

    def select_city(self, city: str) -> Optional[FetchTicket]:
        state = self.state
        if not city or not state.selected_region:
            return None
        if not self.has_city_level(state.selected_region):
            logger.debug("%s 은(는) 시 단계가 없어 select_city 무시", state.selected_region)
            return None
        return self._transition(replace(state, selected_city=city, selected_district=None), f"select_city({city})")

    def select_district(self, district_id: str) -> Optional[FetchTicket]:
        """지도 구역 id 로 이동. "수원시 권선구" 같은 id 는 시/구 조건으로 나눠 조회."""
        state = self.state
        if not district_id or not state.selected_region:
            logger.debug("지역 미선택 상태의 select_district 무시: %r", district_id)
            return None
        city, district = split_district_id(district_id, self.has_city_level(state.selected_region))
        if city is None:
            city = state.selected_city
        new_state = replace(state, selected_city=city, selected_district=district)
        return self._transition(new_state, f"select_district({district_id})")

    def reset(self) -> FetchTicket:
        """한 번에 한 단계만 해제. 지역 → 전국 단계에서는 검색어도 지움."""
        state = self.state
        if state.selected_district:
            new_state = replace(state, selected_district=None)
        elif state.selected_city:
            new_state = replace(state, selected_city=None)
        else:
            new_state = NavigationState()
        return self._transition(new_state, "reset")

    def select_from_place(self, place: Place) -> Optional[FetchTicket]:
        """시설 주소로 지역을 추론해 바로 이동. 추론 실패 시 상태 유지(None 반환)."""
        region = infer_region(place.address, self._regions)
        if region is None:
            logger.info("주소에서 지역을 찾지 못함: %r", place.address)
            return None
        city = place.city if self.has_city_level(region) else None
        new_state = NavigationState(
            selected_region=region,
            selected_city=city,
            selected_district=place.district,
            search_keyword=self.state.search_keyword,
        )
        return self._transition(new_state, f"select_from_place({place.id})")

    # ---------- 조회 결과 반영 ----------

    def resolve(self, ticket: FetchTicket, places: List[Place]) -> bool:
        with self._lock:
            if ticket.seq != self._seq:
                logger.debug("오래된 조회 결과 무시 (seq=%d, 최신=%d)", ticket.seq, self._seq)
                return False
            self._places = list(places)
            self._state = replace(self._state, is_loading=False)
            self.last_error = None
            return True

    def fail(self, ticket: FetchTicket, error: BaseException) -> bool:
        with self._lock:
            if ticket.seq != self._seq:
                logger.debug("오래된 조회 실패 무시 (seq=%d, 최신=%d)", ticket.seq, self._seq)
                return False
            self._places = []
            self._state = replace(self._state, is_loading=False)
            self.last_error = str(error)
            return True

    def run(self, ticket: FetchTicket, fetcher: Fetcher) -> bool:
        """동기 실행: 조회 후 결과/실패 반영. 반영 여부 반환."""
        try:
            places = fetcher(ticket.query)
        except PlaceStoreError as e:
            logger.warning("시설 조회 실패: %s", e)
            return self.fail(ticket, e)
        except Exception as e:
            logger.exception("시설 조회 중 예기치 않은 오류")
            return self.fail(ticket, e)
        return self.resolve(ticket, places)


class PlaceLoader:
    """
    조회를 백그라운드 스레드에서 실행. 완료 순서와 무관하게 navigator 가
    최신 요청의 결과만 반영하므로 취소는 필요 없음.
    """

    def __init__(self, navigator: PlaceNavigator, fetcher: Fetcher, max_workers: int = 4):
        self._navigator = navigator
        self._fetcher = fetcher
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="place-fetch")
        self._latest: Optional[Future] = None

    def submit(self, ticket: Optional[FetchTicket]) -> Optional[Future]:
        if ticket is None:
            return None
        future = self._executor.submit(self._navigator.run, ticket, self._fetcher)
        self._latest = future
        return future

    @property
    def latest(self) -> Optional[Future]:
        return self._latest

    def wait(self, future: Optional[Future] = None, timeout: Optional[float] = None) -> bool:
        """future(기본: 마지막 요청) 완료까지 대기. 시간 초과 시 False."""
        future = future or self._latest
        if future is None:
            return True
        try:
            future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning("시설 조회 대기 시간 초과 (%ss)", timeout)
            return False
        return True

    def shutdown(self):
        self._executor.shutdown(wait=False)
