"""Application constants that never change across environments.

These are fixed facts of the upstream Tour API contract and fixed business
logic that should never vary between dev/staging/prod.
"""

# ===== Tour API Contract =====
RESULT_CODE_SUCCESS = "0000"
RESPONSE_TYPE_JSON = "json"

# Upstream map coordinates are integers scaled by this factor
COORDINATE_SCALE = 10_000_000

# ===== Content Types =====
CONTENT_TYPE_NAMES = {
    "12": "관광지",
    "14": "문화시설",
    "15": "축제/행사",
    "25": "여행코스",
    "28": "레포츠",
    "32": "숙박",
    "38": "쇼핑",
    "39": "음식점",
}

DEFAULT_CONTENT_TYPE_NAME = "관광지"

# ===== Sorting =====
SORT_BY_MODIFIED_TIME = "modifiedtime"
SORT_BY_TITLE = "title"

# arrange parameter: A=title, B=views, C=modified, D=created
SORT_ARRANGE_MAP = {
    SORT_BY_MODIFIED_TIME: "C",
    SORT_BY_TITLE: "A",
}

# ===== Pet Sizes =====
PET_SIZE_SMALL = "small"
PET_SIZE_MEDIUM = "medium"
PET_SIZE_LARGE = "large"
PET_SIZES = (PET_SIZE_SMALL, PET_SIZE_MEDIUM, PET_SIZE_LARGE)

# ===== Statistics =====
TOP_N_STATS = 3
CACHE_KEY_REGION_STATS = "region-stats"
CACHE_KEY_TYPE_STATS = "type-stats"
CACHE_KEY_STATS_SUMMARY = "stats-summary"

# ===== HTTP Status Codes (commonly used) =====
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_NOT_FOUND = 404
HTTP_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502
