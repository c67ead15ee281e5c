"""
시군구 경계 SVG → 시군구 도형 데이터셋(JSON) 변환 스크립트

입력: public/<지역>_시군구_경계.svg (각 <path> 의 id = 시군구명, d = 경계)
출력: data/district_paths/<영문 지역명>.json  ([{"id": ..., "d": ...}, ...])

실행 (프로젝트 루트에서):
  python scripts/svg_paths_to_array.py 경기
  python scripts/svg_paths_to_array.py 경상남도 --svg path/to/경상남도_시군구_경계.svg
  python scripts/svg_paths_to_array.py 인천 --stdout
"""
import argparse
import logging
import os
import sys

# 프로젝트 루트를 path에 추가
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_APP_ROOT = os.path.dirname(_SCRIPT_DIR)
if _APP_ROOT not in sys.path:
    sys.path.insert(0, _APP_ROOT)

from core.constants import REGION_NAME_MAPPING  # noqa: E402
from utils.district_shapes import dataset_path, dump_district_shapes, save_district_shapes  # noqa: E402
from utils.svg_extract import extract_district_paths  # noqa: E402

logger = logging.getLogger("svg_paths_to_array")


def default_svg_path(region: str) -> str:
    return os.path.join(_APP_ROOT, "public", f"{region}_시군구_경계.svg")


def default_out_path(region: str) -> str:
    return dataset_path(REGION_NAME_MAPPING.get(region, region))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="시군구 경계 SVG → 시군구 도형 데이터셋(JSON)")
    parser.add_argument("region", help="지역명 (예: 경기, 인천, 경상남도)")
    parser.add_argument("--svg", default=None, help="입력 SVG 경로 (기본: public/<지역>_시군구_경계.svg)")
    parser.add_argument("--out", default=None, help="출력 JSON 경로 (기본: data/district_paths/<영문 지역명>.json)")
    parser.add_argument("--stdout", action="store_true", help="파일 대신 표준출력으로 출력")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    svg_path = args.svg or default_svg_path(args.region)
    if not os.path.isfile(svg_path):
        logger.error("SVG 파일이 없습니다: %s", svg_path)
        return 1
    with open(svg_path, "r", encoding="utf-8") as f:
        shapes = extract_district_paths(f.read())
    if not shapes:
        logger.warning("%s 에서 id/d 를 가진 path 를 찾지 못했습니다.", svg_path)

    if args.stdout:
        sys.stdout.write(dump_district_shapes(shapes))
        return 0
    out_path = save_district_shapes(shapes, args.out or default_out_path(args.region))
    logger.info("%s 파일이 생성되었습니다. (%d개 시군구)", out_path, len(shapes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
