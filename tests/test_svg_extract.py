import json

from core.models import DistrictShape
from utils.district_shapes import dump_district_shapes, load_district_shapes, save_district_shapes
from utils.svg_extract import extract_district_paths

SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 800 945">
  <g id="경계">
    <path id="수원시 권선구" class="st0" d="M10 10 L20 10 L20 20 Z"/>
    <path class="st0" d="m30 30 l10 0 l0 10 z" id="부천시"/>
    <path id='광명시' d='M1,1 L2,2'/>
    <path id="수원시 권선구" d="M99 99 L100 100 Z"/>
    <path id="범례" d="L0 0 L1 1"/>
    <path d="M5 5 L6 6"/>
    <path data-id="가짜" d="M7 7 L8 8"/>
    <path
        id="안산시 &amp; 상록구"
        d="M0 0
           L5 5 Z"/>
  </g>
</svg>
"""


def test_extracts_id_and_d_in_either_order():
    shapes = extract_district_paths(SVG)
    ids = [s.id for s in shapes]
    assert ids == ["수원시 권선구", "부천시", "광명시", "안산시 & 상록구"]
    assert shapes[1] == DistrictShape("부천시", "m30 30 l10 0 l0 10 z")


def test_first_occurrence_wins_for_duplicate_ids():
    shapes = extract_district_paths(SVG)
    assert shapes[0].d == "M10 10 L20 10 L20 20 Z"


def test_paths_not_starting_with_moveto_are_dropped():
    ids = [s.id for s in extract_district_paths(SVG)]
    assert "범례" not in ids
    assert "가짜" not in ids


def test_empty_document():
    assert extract_district_paths("") == []
    assert extract_district_paths("<svg></svg>") == []


def test_extraction_is_idempotent(tmp_path):
    first = dump_district_shapes(extract_district_paths(SVG))
    second = dump_district_shapes(extract_district_paths(SVG))
    assert first == second

    out = tmp_path / "Gyeonggi-do.json"
    save_district_shapes(extract_district_paths(SVG), str(out))
    assert out.read_text(encoding="utf-8") == first
    assert json.loads(first)[0] == {"id": "수원시 권선구", "d": "M10 10 L20 10 L20 20 Z"}
    # 한글이 이스케이프되지 않음
    assert "수원시 권선구" in first


def test_load_round_trip(tmp_path):
    shapes = extract_district_paths(SVG)
    save_district_shapes(shapes, str(tmp_path / "Incheon.json"))
    assert load_district_shapes("Incheon", base_dir=str(tmp_path)) == shapes


def test_load_missing_or_invalid_dataset(tmp_path):
    assert load_district_shapes("Nowhere", base_dir=str(tmp_path)) == []
    (tmp_path / "Broken.json").write_text("{not json", encoding="utf-8")
    assert load_district_shapes("Broken", base_dir=str(tmp_path)) == []
    (tmp_path / "Object.json").write_text('{"id": "a"}', encoding="utf-8")
    assert load_district_shapes("Object", base_dir=str(tmp_path)) == []


def test_load_skips_bad_items(tmp_path):
    items = [
        {"id": "A", "d": "M0 0 L1 1"},
        {"id": "A", "d": "M5 5 L6 6"},
        {"id": "", "d": "M0 0"},
        {"id": "B", "d": "L0 0"},
        "not an object",
        {"id": "C", "d": "m0 0 l1 1"},
    ]
    (tmp_path / "Mixed.json").write_text(json.dumps(items), encoding="utf-8")
    shapes = load_district_shapes("Mixed", base_dir=str(tmp_path))
    assert shapes == [DistrictShape("A", "M0 0 L1 1"), DistrictShape("C", "m0 0 l1 1")]


def test_cli_writes_dataset(tmp_path):
    from scripts.svg_paths_to_array import main

    svg = tmp_path / "인천_시군구_경계.svg"
    svg.write_text(SVG, encoding="utf-8")
    out = tmp_path / "out" / "Incheon.json"
    assert main(["인천", "--svg", str(svg), "--out", str(out)]) == 0
    assert load_district_shapes("Incheon", base_dir=str(out.parent)) == extract_district_paths(SVG)
    assert main(["인천", "--svg", str(tmp_path / "missing.svg")]) == 1
