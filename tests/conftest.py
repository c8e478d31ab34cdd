"""
Pytest configuration and shared fixtures for backend tests.

This module provides test fixtures for:
- Database sessions (in-memory SQLite for fast tests)
- FastAPI test client with the Tour API replaced by an in-memory fake
- Mock Redis
- Test data factories
"""

import os
from typing import Dict, Generator, List, Optional, Set, Tuple
from unittest.mock import MagicMock, AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.application.ports.tour_api import TourListResult
from app.application.use_cases.list_tours import ListToursUseCase
from app.application.services.stats_service import StatsService
from app.config import Settings
from app.core import dependencies
from app.domain.entities.tour import (
    AreaCode,
    PetTourInfo,
    TourDetail,
    TourImage,
    TourIntro,
    TourItem,
)
from app.domain.value_objects.pagination import PaginationInfo
from app.exceptions import ErrorCategory, TourApiError
from app.infrastructure.external_apis.cache_client import InMemoryAggregateCache
from app.infrastructure.persistence.db import Base
from app.infrastructure.persistence import models  # noqa: F401  registers tables
from app.infrastructure.persistence.repositories.sqlalchemy_bookmark_repository import (
    SQLAlchemyBookmarkRepository,
)
from app.main import app
from app.services.health_service import HealthCheckService


# ==============================================================================
# FAKE TOUR API
# ==============================================================================

class FakeTourApi:
    """In-memory stand-in for TourApiClient.

    Listings are keyed by (area_code, content_type_id); ``totals`` overrides
    the reported totalCount for a key. Every call is appended to ``calls``.
    """

    def __init__(self):
        self.regions: List[AreaCode] = []
        self.regions_error: Optional[TourApiError] = None
        self.listings: Dict[Tuple[str, str], List[TourItem]] = {}
        self.totals: Dict[Tuple[str, str], int] = {}
        self.failing_regions: Set[str] = set()
        self.failing_cells: Set[Tuple[str, str]] = set()
        self.search_results: Dict[str, List[TourItem]] = {}
        self.details: Dict[str, TourDetail] = {}
        self.intros: Dict[str, TourIntro] = {}
        self.images: Dict[str, List[TourImage]] = {}
        self.pet_infos: Dict[str, PetTourInfo] = {}
        self.pet_failures: Set[str] = set()
        self.calls: List[tuple] = []

    def _page(self, items: List[TourItem], total: int, num_of_rows: int, page_no: int) -> TourListResult:
        start = (page_no - 1) * num_of_rows
        return TourListResult(
            items=list(items[start:start + num_of_rows]),
            pagination=PaginationInfo.calculate(num_of_rows=num_of_rows, page_no=page_no, total_count=total),
        )

    def calls_to(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    async def list_regions(self, parent_region=None):
        self.calls.append(("list_regions", parent_region))
        if self.regions_error is not None:
            raise self.regions_error
        return list(self.regions)

    async def list_by_region(self, area_code, content_type_id, num_of_rows=10, page_no=1, arrange="A", sigungu_code=None):
        self.calls.append(("list_by_region", area_code, content_type_id, num_of_rows, page_no, arrange))
        if area_code in self.failing_regions or (area_code, content_type_id) in self.failing_cells:
            raise TourApiError("upstream down", category=ErrorCategory.NETWORK)
        items = self.listings.get((area_code, content_type_id), [])
        total = self.totals.get((area_code, content_type_id), len(items))
        return self._page(items, total, num_of_rows, page_no)

    async def search_by_keyword(self, keyword, area_code=None, content_type_id=None, num_of_rows=10, page_no=1, arrange="A"):
        self.calls.append(("search_by_keyword", keyword, area_code, content_type_id, num_of_rows, page_no, arrange))
        items = self.search_results.get(keyword, [])
        result = self._page(items, len(items), num_of_rows, page_no)
        result.keyword = keyword
        return result

    async def get_detail(self, content_id):
        self.calls.append(("get_detail", content_id))
        if content_id not in self.details:
            raise TourApiError("관광지 정보를 찾을 수 없습니다.", category=ErrorCategory.API, status_code=404)
        return self.details[content_id]

    async def get_operating_info(self, content_id, content_type_id):
        self.calls.append(("get_operating_info", content_id, content_type_id))
        return self.intros.get(content_id, TourIntro(content_id=content_id, content_type_id=content_type_id))

    async def get_images(self, content_id, num_of_rows=10, page_no=1):
        self.calls.append(("get_images", content_id, num_of_rows))
        return list(self.images.get(content_id, []))

    async def get_pet_info(self, content_id):
        self.calls.append(("get_pet_info", content_id))
        if content_id in self.pet_failures:
            raise TourApiError("pet endpoint down", category=ErrorCategory.NETWORK)
        return self.pet_infos.get(content_id)


@pytest.fixture
def fake_tour_api() -> FakeTourApi:
    return FakeTourApi()


# ==============================================================================
# SETTINGS & CACHE FIXTURES
# ==============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings with throttling delays disabled."""
    return Settings(
        TOUR_API_KEY="test-service-key",
        ALL_REGIONS_BATCH_DELAY_SECONDS=0.0,
        STATS_BATCH_DELAY_SECONDS=0.0,
        REDIS_CACHE_ENABLED=False,
    )


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def aggregate_cache(clock) -> InMemoryAggregateCache:
    return InMemoryAggregateCache(clock=clock)


# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(test_db_session, test_db_engine, fake_tour_api, test_settings, aggregate_cache, clock) -> Generator[TestClient, None, None]:
    """FastAPI test client with fake Tour API, in-memory cache and SQLite bookmarks."""

    def override_bookmark_repository():
        yield SQLAlchemyBookmarkRepository(test_db_session)

    app.dependency_overrides[dependencies.get_tour_api_client] = lambda: fake_tour_api
    app.dependency_overrides[dependencies.get_list_tours_use_case] = lambda: ListToursUseCase(
        fake_tour_api, settings=test_settings
    )
    app.dependency_overrides[dependencies.get_stats_service] = lambda: StatsService(
        fake_tour_api, aggregate_cache, settings=test_settings, clock=clock
    )
    app.dependency_overrides[dependencies.get_bookmark_repository] = override_bookmark_repository
    app.dependency_overrides[dependencies.get_health_service] = lambda: HealthCheckService(
        engine=test_db_engine, settings=test_settings
    )

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==============================================================================
# MOCK EXTERNAL API FIXTURES
# ==============================================================================

@pytest.fixture
def mock_redis():
    """Mock Redis client for cache tests."""
    redis_mock = MagicMock()
    redis_mock.get = AsyncMock(return_value=None)
    redis_mock.setex = AsyncMock(return_value=True)
    redis_mock.delete = AsyncMock(return_value=1)
    redis_mock.ping = AsyncMock(return_value=True)
    redis_mock.aclose = AsyncMock(return_value=None)
    return redis_mock


def api_envelope(items=None, total_count=None, num_of_rows=10, page_no=1, result_code="0000", result_msg="OK"):
    """Build a KorService2 JSON payload."""
    body = {"numOfRows": num_of_rows, "pageNo": page_no}
    if total_count is not None:
        body["totalCount"] = total_count
    if items is None:
        body["items"] = ""
    else:
        body["items"] = {"item": items}
    return {
        "response": {
            "header": {"resultCode": result_code, "resultMsg": result_msg},
            "body": body,
        }
    }


@pytest.fixture
def envelope():
    """Factory for upstream response payloads."""
    return api_envelope


# ==============================================================================
# TEST DATA FACTORIES
# ==============================================================================

@pytest.fixture
def make_item():
    """Factory for listing rows. Coordinates default to central Seoul."""
    def _make(
        content_id: str,
        title: str = "",
        modified_time: Optional[str] = None,
        content_type_id: str = "12",
        area_code: str = "1",
        mapx: Optional[str] = "1269780000",
        mapy: Optional[str] = "375665000",
        **extra,
    ) -> TourItem:
        return TourItem(
            content_id=content_id,
            content_type_id=content_type_id,
            title=title or f"관광지 {content_id}",
            area_code=area_code,
            mapx=mapx,
            mapy=mapy,
            modified_time=modified_time,
            **extra,
        )
    return _make


@pytest.fixture
def sample_regions() -> List[AreaCode]:
    """The first seven 시/도 codes."""
    return [
        AreaCode(code="1", name="서울"),
        AreaCode(code="2", name="인천"),
        AreaCode(code="3", name="대전"),
        AreaCode(code="4", name="대구"),
        AreaCode(code="5", name="광주"),
        AreaCode(code="6", name="부산"),
        AreaCode(code="7", name="울산"),
    ]


@pytest.fixture
def sample_listing_raw() -> dict:
    """Raw areaBasedList2 item as returned upstream."""
    return {
        "contentid": "126508",
        "contenttypeid": "12",
        "title": "경복궁",
        "addr1": "서울특별시 종로구 사직로 161",
        "addr2": "",
        "areacode": "1",
        "sigungucode": "23",
        "mapx": "1269770162",
        "mapy": "375788407",
        "firstimage": "http://tong.visitkorea.or.kr/cms/resource/33/2678633_image2_1.jpg",
        "tel": "",
        "modifiedtime": "20250101120000",
    }


# ==============================================================================
# AUTHENTICATION FIXTURES
# ==============================================================================

@pytest.fixture
def user_headers():
    """Headers carrying the opaque user id from the identity provider."""
    return {"X-User-Id": "user_2abc"}


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# ==============================================================================
# MARKERS
# ==============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: Mark test as an integration test"
    )
