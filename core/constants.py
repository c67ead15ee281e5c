"""
한평생 돌봄지도 - 공통 상수 및 마스터 데이터
지역 목록, 지도 설정, 환경변수 기반 설정값
"""
import os

# 프로젝트 루트 기준 경로 (core/constants.py 기준 상위 2단계 = 프로젝트 루트)
_APP_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_DATA_DIR = os.path.join(_APP_ROOT, "data")
ASSETS_DIR = os.path.join(_APP_ROOT, "assets")

APP_TITLE = "한평생 돌봄지도"

# 환경변수 설정 (.env 는 run.py 에서 load_dotenv 로 로드)
PLACES_TABLE = os.getenv("PLACES_TABLE", "places")
PLACE_FETCH_TIMEOUT = float(os.getenv("PLACE_FETCH_TIMEOUT", "15"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DISTRICT_PATHS_DIR = os.getenv("DISTRICT_PATHS_DIR") or os.path.join(_DATA_DIR, "district_paths")

# Supabase SELECT 페이지 크기 (PostgREST 기본 max-rows 1000 이하)
PLACE_FETCH_PAGE_SIZE = 500

# 주소 문자열에서 지역을 추론할 때 검사하는 순서 (앞에 있을수록 우선)
# DB places.region 컬럼 값과 동일한 표기
REGIONS = [
    "서울",
    "부산",
    "대구",
    "인천",
    "광주",
    "대전",
    "울산",
    "경기",
    "강원",
    "충청북도",
    "충청남도",
    "전라북도",
    "전남",
    "경북",
    "경상남도",
    "제주",
    "세종",
]

# 시 단계 없이 바로 구 단위로 내려가는 수도
CAPITAL_REGION = "서울"

# 구 없이 시 하나가 지도 구역인 경우 ("부천시") 의 접미사
CITY_SUFFIX = "시"

# 지역명 → KOSTAT 시도 코드 (GeoJSON properties.code 매칭용)
REGION_SIDO_CODE = {
    "서울": "11",
    "부산": "21",
    "대구": "22",
    "인천": "23",
    "광주": "24",
    "대전": "25",
    "울산": "26",
    "세종": "29",
    "경기": "31",
    "강원": "32",
    "충청북도": "33",
    "충청남도": "34",
    "전라북도": "35",
    "전남": "36",
    "경북": "37",
    "경상남도": "38",
    "제주": "39",
}
SIDO_CODE_TO_REGION = {v: k for k, v in REGION_SIDO_CODE.items()}

# places.region 에 올 수 있는 다른 표기 → REGIONS 표기로 통일
REGION_ALIASES = {
    "서울": ["서울특별시", "서울시"],
    "부산": ["부산광역시", "부산시"],
    "대구": ["대구광역시", "대구시"],
    "인천": ["인천광역시", "인천시"],
    "광주": ["광주광역시"],
    "대전": ["대전광역시", "대전시"],
    "울산": ["울산광역시", "울산시"],
    "경기": ["경기도"],
    "강원": ["강원도", "강원특별자치도"],
    "충청북도": ["충북"],
    "충청남도": ["충남"],
    "전라북도": ["전북", "전북특별자치도"],
    "전남": ["전라남도"],
    "경북": ["경상북도"],
    "경상남도": ["경남"],
    "제주": ["제주도", "제주특별자치도"],
    "세종": ["세종특별자치시", "세종시"],
}

# 지역명 → 영문명 (assets/images/{영문명}.png, 지역 데이터셋 파일명)
REGION_NAME_MAPPING = {
    "서울": "Seoul",
    "부산": "Busan",
    "대구": "Daegu",
    "인천": "Incheon",
    "광주": "Gwangju",
    "대전": "Daejeon",
    "울산": "Ulsan",
    "세종": "Sejong",
    "경기": "Gyeonggi-do",
    "강원": "Gangwon-do",
    "충청북도": "Chungcheongbuk-do",
    "충청남도": "Chungcheongnam-do",
    "전라북도": "Jeollabuk-do",
    "전남": "Jeollanam-do",
    "경북": "Gyeongsangbuk-do",
    "경상남도": "Gyeongsangnam-do",
    "제주": "Jeju",
}

# 지역 장식 이미지 위치 보정 (px). 정확성과 무관한 표시용 값
REGION_IMAGE_OFFSETS = {
    "전라북도": {"x": 180, "y": -40},
    "대전": {"x": 140, "y": -40},
    "충청남도": {"x": 190, "y": -50},
    "세종": {"x": 160, "y": -20},
    "울산": {"x": 175, "y": -45},
    "전남": {"x": 185, "y": -35},
    "제주": {"x": 195, "y": -55},
    "경상남도": {"x": 165, "y": -25},
    "부산": {"x": 170, "y": -40},
    "경기": {"x": 100, "y": -30},
    "인천": {"x": 190, "y": -20},
    "강원": {"x": 170, "y": -50},
    "default": {"x": 180, "y": -40},
}

# 한국 시도 GeoJSON URL (WGS84, properties.code = 시도코드 문자열)
KOREA_SIDO_GEOJSON_URL = "https://raw.githubusercontent.com/southkorea/southkorea-maps/master/kostat/2013/json/skorea_provinces_geo_simple.json"

# 시군구 SVG 지도의 기본 viewBox (x, y, width, height)
DEFAULT_DISTRICT_VIEW_BOX = (0.0, 0.0, 800.0, 945.0)
