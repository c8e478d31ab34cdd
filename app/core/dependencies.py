"""Dependency injection for FastAPI routes.
Routes depend on use cases and ports; concrete adapters are chosen here."""
from functools import lru_cache
from typing import Iterator

from fastapi import Depends

from app.application.ports.tour_api import AggregateCache, TourApiPort
from app.application.services.stats_service import StatsService
from app.application.use_cases.get_tour_detail import GetTourDetailUseCase, GetTourPetInfoUseCase
from app.application.use_cases.list_tours import ListToursUseCase
from app.application.use_cases.manage_bookmarks import BookmarkUseCase
from app.config import settings
from app.domain.repositories.bookmark_repository import BookmarkRepository
from app.infrastructure.external_apis.cache_client import get_cache
from app.infrastructure.external_apis.tour_api_client import TourApiClient
from app.infrastructure.persistence.db import SessionLocal
from app.infrastructure.persistence.repositories.in_memory_bookmark_repository import (
    InMemoryBookmarkRepository,
)
from app.infrastructure.persistence.repositories.sqlalchemy_bookmark_repository import (
    SQLAlchemyBookmarkRepository,
)
from app.services.health_service import HealthCheckService, health_service


@lru_cache()
def get_tour_api_client() -> TourApiPort:
    """Tour API client on the shared connection pool."""
    return TourApiClient()


def get_aggregate_cache() -> AggregateCache:
    """Redis when REDIS_CACHE_ENABLED=true, otherwise in-process."""
    return get_cache()


@lru_cache()
def _in_memory_bookmark_repository() -> InMemoryBookmarkRepository:
    return InMemoryBookmarkRepository()


def get_bookmark_repository() -> Iterator[BookmarkRepository]:
    """Get bookmark repository instance.

    - Default: in-memory (fast tests/dev)
    - If USE_DB_REPOS=true: SQLAlchemy repository on a per-request session
    """
    if not settings.USE_DB_REPOS:
        yield _in_memory_bookmark_repository()
        return

    session = SessionLocal()
    try:
        yield SQLAlchemyBookmarkRepository(session)
    finally:
        session.close()


# Use case instances
def get_list_tours_use_case(
    tour_api: TourApiPort = Depends(get_tour_api_client),
) -> ListToursUseCase:
    return ListToursUseCase(tour_api=tour_api)


def get_tour_detail_use_case(
    tour_api: TourApiPort = Depends(get_tour_api_client),
) -> GetTourDetailUseCase:
    return GetTourDetailUseCase(tour_api=tour_api)


def get_tour_pet_info_use_case(
    tour_api: TourApiPort = Depends(get_tour_api_client),
) -> GetTourPetInfoUseCase:
    return GetTourPetInfoUseCase(tour_api=tour_api)


def get_stats_service(
    tour_api: TourApiPort = Depends(get_tour_api_client),
    cache: AggregateCache = Depends(get_aggregate_cache),
) -> StatsService:
    return StatsService(tour_api=tour_api, cache=cache)


def get_bookmark_use_case(
    repository: BookmarkRepository = Depends(get_bookmark_repository),
) -> BookmarkUseCase:
    return BookmarkUseCase(bookmark_repository=repository)


def get_health_service() -> HealthCheckService:
    return health_service
