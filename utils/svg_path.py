# utils/svg_path.py
"""
SVG path 데이터(d 속성) 해석 유틸리티
- 명령/좌표 토큰화 (상대·절대 좌표, 암시적 반복, 붙여 쓴 arc 플래그 지원)
- 곡선(C/S/Q/T)과 원호(A)는 일정 간격으로 샘플링해 점 목록으로 변환
- bounding box 와 그 중심점(라벨 위치) 계산
"""
import math
import re
from typing import List, Tuple

import numpy as np

from core.models import Centroid

CURVE_SAMPLES = 16

_ARG_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}
_COMMAND_CHARS = frozenset("MmLlHhVvCcSsQqTtAaZz")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_SEPARATORS = " \t\r\n,"

Segment = Tuple[str, Tuple[float, ...]]


class SvgPathError(ValueError):
    """path 데이터를 해석할 수 없음."""


def _skip_separators(d: str, pos: int) -> int:
    while pos < len(d) and d[pos] in _SEPARATORS:
        pos += 1
    return pos


def _read_args(d: str, pos: int, cmd: str, count: int) -> Tuple[Tuple[float, ...], int]:
    args = []
    for i in range(count):
        pos = _skip_separators(d, pos)
        if pos >= len(d):
            raise SvgPathError(f"'{cmd}' 명령의 인자가 부족합니다 (위치 {pos})")
        if cmd == "A" and i in (3, 4):
            # large-arc / sweep 플래그는 구분자 없이 붙어 올 수 있음 ("0110 0")
            if d[pos] not in "01":
                raise SvgPathError(f"arc 플래그는 0 또는 1 이어야 합니다 (위치 {pos})")
            args.append(float(d[pos]))
            pos += 1
            continue
        m = _NUMBER_RE.match(d, pos)
        if not m:
            raise SvgPathError(f"숫자가 필요합니다: {d[pos:pos + 10]!r} (위치 {pos})")
        args.append(float(m.group()))
        pos = m.end()
    return tuple(args), pos


def parse_path(d: str) -> List[Segment]:
    """d 문자열 → [(명령, 인자들), ...]. 인자 묶음마다 한 항목 (M 뒤 반복은 L 로 변환)."""
    if not d or not d.lstrip(_SEPARATORS).startswith(("M", "m")):
        raise SvgPathError("path 는 M/m 명령으로 시작해야 합니다.")
    segments: List[Segment] = []
    pos = 0
    while True:
        pos = _skip_separators(d, pos)
        if pos >= len(d):
            break
        cmd = d[pos]
        if cmd not in _COMMAND_CHARS:
            raise SvgPathError(f"알 수 없는 명령 {cmd!r} (위치 {pos})")
        pos += 1
        count = _ARG_COUNTS[cmd.upper()]
        if count == 0:
            segments.append((cmd, ()))
            continue
        first = True
        while True:
            pos = _skip_separators(d, pos)
            if pos >= len(d) or d[pos] in _COMMAND_CHARS:
                if first:
                    raise SvgPathError(f"'{cmd}' 명령의 인자가 없습니다 (위치 {pos})")
                break
            args, pos = _read_args(d, pos, cmd.upper(), count)
            segments.append((cmd, args))
            if first and cmd in "Mm":
                cmd = "l" if cmd == "m" else "L"
            first = False
    return segments


def _cubic(p0, p1, p2, p3, samples: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, samples + 1)[1:, None]
    mt = 1.0 - t
    return (mt ** 3) * p0 + 3 * (mt ** 2) * t * p1 + 3 * mt * (t ** 2) * p2 + (t ** 3) * p3


def _quadratic(p0, p1, p2, samples: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, samples + 1)[1:, None]
    mt = 1.0 - t
    return (mt ** 2) * p0 + 2 * mt * t * p1 + (t ** 2) * p2


def _arc(p0, rx, ry, rotation, large_arc, sweep, p1, samples: int) -> np.ndarray:
    """끝점 표기 원호 → 중심 표기로 변환 후 샘플링 (SVG 1.1 부록 F.6.5)."""
    x1, y1 = p0
    x2, y2 = p1
    if x1 == x2 and y1 == y2:
        return np.empty((0, 2))
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0:
        return np.array([[x2, y2]])
    phi = math.radians(rotation % 360.0)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    dx2, dy2 = (x1 - x2) / 2.0, (y1 - y2) / 2.0
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2
    lam = (x1p ** 2) / (rx ** 2) + (y1p ** 2) / (ry ** 2)
    if lam > 1:
        rx *= math.sqrt(lam)
        ry *= math.sqrt(lam)
    num = rx ** 2 * ry ** 2 - rx ** 2 * y1p ** 2 - ry ** 2 * x1p ** 2
    den = rx ** 2 * y1p ** 2 + ry ** 2 * x1p ** 2
    coef = math.sqrt(max(0.0, num / den)) if den else 0.0
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx
    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2.0
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2.0
    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    theta2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
    dtheta = (theta2 - theta1) % (2 * math.pi)
    if not sweep and dtheta > 0:
        dtheta -= 2 * math.pi
    t = theta1 + dtheta * np.linspace(0.0, 1.0, samples + 1)[1:]
    xs = cx + rx * cos_phi * np.cos(t) - ry * sin_phi * np.sin(t)
    ys = cy + rx * sin_phi * np.cos(t) + ry * cos_phi * np.sin(t)
    pts = np.column_stack([xs, ys])
    pts[-1] = (x2, y2)
    return pts


def path_rings(d: str, samples: int = CURVE_SAMPLES) -> List[np.ndarray]:
    """d → 하위 경로(ring)별 절대 좌표 배열 목록. 각 배열은 (N, 2)."""
    rings: List[List[np.ndarray]] = []
    current: List[np.ndarray] = []
    cur = np.zeros(2)
    start = np.zeros(2)
    last_cubic = None
    last_quad = None

    def close_ring():
        if current:
            rings.append(current[:])
            current.clear()

    for cmd, args in parse_path(d):
        upper = cmd.upper()
        rel = cmd.islower()
        base = cur if rel else np.zeros(2)
        next_cubic = None
        next_quad = None
        if upper == "M":
            close_ring()
            cur = base + np.array(args)
            start = cur.copy()
            current.append(cur[None, :])
        elif upper == "Z":
            if current:
                current.append(start[None, :])
            close_ring()
            cur = start.copy()
        else:
            if not current:
                # Z 뒤 M 없이 이어지는 명령은 하위 경로 시작점에서 출발
                current.append(cur[None, :])
            if upper == "L":
                cur = base + np.array(args)
                current.append(cur[None, :])
            elif upper == "H":
                cur = np.array([(cur[0] if rel else 0.0) + args[0], cur[1]])
                current.append(cur[None, :])
            elif upper == "V":
                cur = np.array([cur[0], (cur[1] if rel else 0.0) + args[0]])
                current.append(cur[None, :])
            elif upper in ("C", "S"):
                if upper == "C":
                    c1 = base + np.array(args[0:2])
                    c2 = base + np.array(args[2:4])
                    end = base + np.array(args[4:6])
                else:
                    c1 = 2 * cur - last_cubic if last_cubic is not None else cur.copy()
                    c2 = base + np.array(args[0:2])
                    end = base + np.array(args[2:4])
                current.append(_cubic(cur, c1, c2, end, samples))
                next_cubic = c2
                cur = end
            elif upper in ("Q", "T"):
                if upper == "Q":
                    c = base + np.array(args[0:2])
                    end = base + np.array(args[2:4])
                else:
                    c = 2 * cur - last_quad if last_quad is not None else cur.copy()
                    end = base + np.array(args[0:2])
                current.append(_quadratic(cur, c, end, samples))
                next_quad = c
                cur = end
            elif upper == "A":
                rx, ry, rotation, large_arc, sweep = args[:5]
                end = base + np.array(args[5:7])
                arc_pts = _arc(cur, rx, ry, rotation, bool(large_arc), bool(sweep), end, samples)
                if len(arc_pts):
                    current.append(arc_pts)
                cur = end
        last_cubic = next_cubic
        last_quad = next_quad
    close_ring()
    return [np.vstack(parts) for parts in rings if parts]


def path_bbox(d: str, samples: int = CURVE_SAMPLES) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y)."""
    rings = path_rings(d, samples)
    if not rings:
        raise SvgPathError("좌표가 없는 path 입니다.")
    pts = np.vstack(rings)
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


def path_centroid(d: str, samples: int = CURVE_SAMPLES) -> Centroid:
    """bounding box 중심 (브라우저 getBBox 기준 라벨 위치와 동일한 정의)."""
    min_x, min_y, max_x, max_y = path_bbox(d, samples)
    return Centroid(x=(min_x + max_x) / 2.0, y=(min_y + max_y) / 2.0)
