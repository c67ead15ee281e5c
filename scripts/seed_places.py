"""
시설 목록 파일(CSV/XLSX/JSON) → Supabase places 테이블 업로드 스크립트

사용 조건:
- .env 또는 환경변수 또는 .streamlit/secrets.toml 에 SUPABASE_URL, SUPABASE_KEY 설정
- 파일에 최소 id, name, address 컬럼 (한글 헤더 시설명/주소/전화번호/영업시간/시도/시군/구 도 인식)

실행 (프로젝트 루트에서):
  python scripts/seed_places.py data/places.xlsx
  python scripts/seed_places.py data/places.csv --table places --chunk-size 200
  python scripts/seed_places.py data/places.json --dry-run
"""
import argparse
import logging
import os
import sys
from typing import Any, Dict, List

# 프로젝트 루트를 path에 추가
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_APP_ROOT = os.path.dirname(_SCRIPT_DIR)
if _APP_ROOT not in sys.path:
    sys.path.insert(0, _APP_ROOT)

import pandas as pd  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from core.constants import PLACES_TABLE  # noqa: E402
from core.models import Place  # noqa: E402
from core.regions import infer_region  # noqa: E402

logger = logging.getLogger("seed_places")

# 한글 헤더 → places 컬럼
COLUMN_ALIASES = {
    "번호": "id",
    "시설명": "name",
    "이름": "name",
    "주소": "address",
    "전화번호": "phone",
    "연락처": "phone",
    "영업시간": "open_hours",
    "운영시간": "open_hours",
    "시도": "region",
    "지역": "region",
    "시군": "city",
    "시": "city",
    "구": "district",
    "시군구": "district",
    "이미지": "image_url",
    "분류": "category",
    "위도": "lat",
    "경도": "lng",
}


def get_supabase_client():
    """환경변수로 Supabase 클라이언트 생성 (Streamlit 없이)."""
    url = os.environ.get("SUPABASE_URL", "").strip()
    key = os.environ.get("SUPABASE_KEY", "").strip()
    if not url or not key:
        # .streamlit/secrets.toml 은 TOML이라 수동 로드
        secrets_path = os.path.join(_APP_ROOT, ".streamlit", "secrets.toml")
        if os.path.isfile(secrets_path):
            import toml
            try:
                secrets = toml.load(secrets_path)
            except toml.TomlDecodeError as e:
                logger.warning("secrets.toml 파싱 실패: %s", e)
                secrets = {}
            section = secrets.get("supabase") or {}
            url = (secrets.get("SUPABASE_URL") or section.get("url") or "").strip()
            key = (secrets.get("SUPABASE_KEY") or section.get("key") or "").strip()
    if not url or not key:
        logger.error("SUPABASE_URL, SUPABASE_KEY가 없습니다. .env 또는 .streamlit/secrets.toml 또는 환경변수에 설정하세요.")
        sys.exit(1)
    from supabase import create_client
    return create_client(url, key)


def read_places_file(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".xlsx", ".xls"):
        return pd.read_excel(path, engine="openpyxl")
    if ext == ".json":
        return pd.read_json(path, orient="records")
    return pd.read_csv(path, encoding="utf-8-sig")


def normalize_places(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """컬럼명 정리 → Place 로 검증 → places 행(dict) 목록. 지역이 비면 주소로 추론."""
    df = df.rename(columns={c: COLUMN_ALIASES.get(str(c).strip(), str(c).strip()) for c in df.columns})
    if "id" not in df.columns:
        df["id"] = range(1, len(df) + 1)
    df = df.astype(object).where(pd.notna(df), None)
    rows = []
    for record in df.to_dict(orient="records"):
        try:
            place = Place.from_row(record)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("잘못된 행 건너뜀 (%s): %r", e, record.get("id"))
            continue
        row = place.to_row()
        region = infer_region(place.region) or infer_region(place.address)
        if region:
            row["region"] = region
        rows.append(row)
    return rows


def upsert_in_chunks(sb, table: str, rows: List[Dict[str, Any]], chunk_size: int) -> int:
    total = 0
    for start in range(0, len(rows), chunk_size):
        chunk = rows[start:start + chunk_size]
        sb.table(table).upsert(chunk, on_conflict="id").execute()
        total += len(chunk)
        logger.info("  %d / %d 건 반영", total, len(rows))
    return total


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="시설 목록 파일 → Supabase places 업로드")
    parser.add_argument("file", help="CSV / XLSX / JSON 파일 경로")
    parser.add_argument("--table", default=PLACES_TABLE, help=f"대상 테이블 (기본: {PLACES_TABLE})")
    parser.add_argument("--chunk-size", type=int, default=500, help="한 번에 보낼 행 수")
    parser.add_argument("--dry-run", action="store_true", help="실제 업로드 없이 확인만")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if not os.path.isfile(args.file):
        logger.error("파일이 없습니다: %s", args.file)
        return 1
    rows = normalize_places(read_places_file(args.file))
    logger.info("=== %s → %s (%d건) ===", args.file, args.table, len(rows))
    if args.dry_run:
        logger.info("[DRY RUN] 실제 전송 없이 종료합니다.")
        return 0
    if not rows:
        logger.info("반영할 데이터가 없었습니다.")
        return 0
    n = upsert_in_chunks(get_supabase_client(), args.table, rows, max(1, args.chunk_size))
    logger.info("완료. 총 %d건 반영.", n)
    return 0


if __name__ == "__main__":
    sys.exit(main())
