import pytest

from utils.svg_path import SvgPathError, parse_path, path_bbox, path_centroid, path_rings


def test_square_centroid():
    c = path_centroid("M0 0 L10 0 L10 10 L0 10 Z")
    assert (c.x, c.y) == (5.0, 5.0)


def test_relative_and_hv_commands():
    assert path_bbox("m10 10 h20 v10 h-20 z") == (10.0, 10.0, 30.0, 20.0)
    assert path_bbox("M10,10 H30 V20 H10 Z") == (10.0, 10.0, 30.0, 20.0)


def test_implicit_lineto_after_moveto():
    segments = parse_path("M0 0 10 0 10 10")
    assert [cmd for cmd, _ in segments] == ["M", "L", "L"]
    assert path_bbox("m0 0 10 0 0 10") == (0.0, 0.0, 10.0, 10.0)


def test_cubic_curve_extent_is_sampled():
    min_x, min_y, max_x, max_y = path_bbox("M0 0 C0 10 10 10 10 0")
    assert max_y == pytest.approx(7.5)
    assert (min_x, min_y, max_x) == (0.0, 0.0, 10.0)


def test_smooth_cubic_reflects_control_point():
    # S 의 첫 제어점은 직전 C 의 두 번째 제어점 (10,10) 을 (10,0) 기준으로 뒤집은 (10,-10)
    _, min_y, max_x, max_y = path_bbox("M0 0 C0 10 10 10 10 0 S20 -10 20 0")
    assert max_y == pytest.approx(7.5)
    assert min_y == pytest.approx(-7.5)
    assert max_x == 20.0


def test_quadratic_curve():
    _, _, _, max_y = path_bbox("M0 0 Q5 10 10 0")
    assert max_y == pytest.approx(5.0)


def test_arc_semicircle():
    min_x, min_y, max_x, max_y = path_bbox("M0 0 A5 5 0 0 1 10 0")
    assert min_y == pytest.approx(-5.0)
    assert max_y == pytest.approx(0.0)
    assert (min_x, max_x) == (pytest.approx(0.0), pytest.approx(10.0))


def test_arc_with_compact_flags():
    assert path_bbox("M0 0 a5 5 0 0110 0") == pytest.approx(path_bbox("M0 0 A5 5 0 0 1 10 0"))


def test_exponent_numbers():
    assert path_bbox("M0 0 L1e1 0 L1e1 5E-1") == (0.0, 0.0, 10.0, 0.5)


def test_multiple_subpaths():
    rings = path_rings("M0 0 L1 0 L1 1 Z M5 5 L6 5 L6 6 Z")
    assert len(rings) == 2
    assert rings[0][-1].tolist() == [0.0, 0.0]
    assert path_bbox("M0 0 L1 0 L1 1 Z M5 5 L6 5 L6 6 Z") == (0.0, 0.0, 6.0, 6.0)


@pytest.mark.parametrize("d", ["", "L0 0", "M0", "M0 0 L", "M0 0 X1 1", "M0 0 A5 5 0 2 1 10 0"])
def test_invalid_paths_raise(d):
    with pytest.raises(SvgPathError):
        path_centroid(d)
