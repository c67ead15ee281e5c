"""
공용 테스트 픽스처: 샘플 시설 목록 + Supabase 쿼리 빌더를 흉내 내는 메모리 가짜 클라이언트
"""
import re
from types import SimpleNamespace

import pytest

from core.models import Place

SAMPLE_ROWS = [
    {"id": 1, "name": "행복요양원", "address": "경기도 수원시 권선구 세류로 1", "phone": "031-000-0001",
     "open_hours": "09:00-18:00", "region": "경기", "city": "수원시", "district": "권선구"},
    {"id": 2, "name": "수원중앙병원", "address": "경기도 수원시 팔달구 중부대로 2", "phone": "031-000-0002",
     "open_hours": "24시간", "region": "경기", "city": "수원시", "district": "팔달구"},
    {"id": 3, "name": "Seoul Care Hospital", "address": "서울특별시 강남구 테헤란로 3", "phone": "02-000-0003",
     "open_hours": "09:00-18:00", "region": "서울", "city": None, "district": "강남구"},
    {"id": 4, "name": "강릉실버센터", "address": "강원특별자치도 강릉시 경강로 4", "phone": "033-000-0004",
     "open_hours": "", "region": "강원", "city": "강릉시", "district": None},
    {"id": 5, "name": "남동요양병원", "address": "인천광역시 남동구 인주대로 5", "phone": "032-000-0005",
     "open_hours": "08:00-20:00", "region": "인천", "city": None, "district": "남동구"},
]


class FakeResponse(SimpleNamespace):
    pass


def _split_or_filter(filters):
    """PostgREST or 필터를 쉼표로 나눔 (큰따옴표 안의 쉼표는 값의 일부)."""
    parts, buf, quoted, escaped = [], "", False, False
    for ch in filters:
        if escaped:
            buf += ch
            escaped = False
        elif ch == "\\" and quoted:
            buf += ch
            escaped = True
        elif ch == '"':
            buf += ch
            quoted = not quoted
        elif ch == "," and not quoted:
            parts.append(buf)
            buf = ""
        else:
            buf += ch
    parts.append(buf)
    return parts


def _unquote(value):
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r"\\(.)", r"\1", value[1:-1])
    return value


def _like_to_regex(pattern):
    """LIKE 패턴 → 정규식. \\ 다음 글자는 그대로, % 와 * (PostgREST 별칭) 는 임의 문자열, _ 는 한 글자."""
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        out.append(".*" if ch in "%*" else "." if ch == "_" else re.escape(ch))
        i += 1
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    """table().select().eq().in_().or_().order().range().execute() 체인만 지원."""

    def __init__(self, db, table):
        self._db = db
        self._table = table
        self._filters = []
        self._order = None
        self._range = None
        self._limit = None

    def select(self, *_columns):
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def or_(self, filters):
        clauses = []
        for part in _split_or_filter(filters):
            column, op, value = part.split(".", 2)
            assert op == "ilike"
            clauses.append((column, _like_to_regex(_unquote(value))))
        self._filters.append(
            lambda row: any(rx.fullmatch(str(row.get(col) or "")) for col, rx in clauses)
        )
        return self

    def order(self, column):
        self._order = column
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def execute(self):
        self._db.calls += 1
        if self._db.error is not None:
            raise self._db.error
        rows = [dict(r) for r in self._db.tables.get(self._table, []) if all(f(r) for f in self._filters)]
        if self._order:
            col = self._order
            # 잘못된 행(문자열 id 등)은 뒤로
            rows.sort(key=lambda r: (isinstance(r.get(col), str), 0 if isinstance(r.get(col), str) else r.get(col)))
        if self._range:
            rows = rows[self._range[0]:self._range[1] + 1]
        if self._limit is not None:
            rows = rows[:self._limit]
        return FakeResponse(data=rows)


class FakeSupabase:
    def __init__(self, tables=None):
        self.tables = tables or {}
        self.error = None
        self.calls = 0

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def sample_places():
    return [Place.from_row(r) for r in SAMPLE_ROWS]


@pytest.fixture
def fake_supabase(monkeypatch):
    sb = FakeSupabase({"places": [dict(r) for r in SAMPLE_ROWS]})
    monkeypatch.setattr("core.db.get_supabase", lambda: sb)
    return sb
