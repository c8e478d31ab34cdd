"""Ports for the upstream Tour API and the aggregate cache.

Application services depend on these protocols only; the httpx client and
the Redis/in-memory caches can be swapped without changing them.
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

from app.domain.entities.tour import (
    AreaCode,
    PetTourInfo,
    TourDetail,
    TourImage,
    TourIntro,
    TourItem,
)
from app.domain.value_objects.pagination import PaginationInfo


@dataclass
class TourListResult:
    """One page of listings plus locally computed pagination."""
    items: List[TourItem]
    pagination: PaginationInfo
    keyword: Optional[str] = None


class TourApiPort(Protocol):
    async def list_regions(self, parent_region: Optional[str] = None) -> List[AreaCode]:
        """Return 시/도 codes, or 시/군/구 codes under ``parent_region``."""

    async def list_by_region(
        self,
        area_code: str,
        content_type_id: str,
        num_of_rows: int = 10,
        page_no: int = 1,
        arrange: str = "A",
        sigungu_code: Optional[str] = None,
    ) -> TourListResult:
        """Return one page of listings for a region and content type."""

    async def search_by_keyword(
        self,
        keyword: str,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        num_of_rows: int = 10,
        page_no: int = 1,
        arrange: str = "A",
    ) -> TourListResult:
        """Return one page of keyword search results."""

    async def get_detail(self, content_id: str) -> TourDetail:
        """Return the common detail record."""

    async def get_operating_info(self, content_id: str, content_type_id: str) -> TourIntro:
        """Return type-specific operating info."""

    async def get_images(self, content_id: str, num_of_rows: int = 10, page_no: int = 1) -> List[TourImage]:
        """Return gallery images."""

    async def get_pet_info(self, content_id: str) -> Optional[PetTourInfo]:
        """Return the pet record, or None when upstream has none."""


@dataclass
class CachedAggregate:
    """Cache entry: payload plus the UTC epoch seconds it was computed at."""
    payload: Any
    computed_at: float


class AggregateCache(Protocol):
    async def get(self, key: str) -> Optional[CachedAggregate]:
        """Return the entry for ``key`` if present (freshness is the caller's call)."""

    async def set(self, key: str, payload: Any, ttl_seconds: int) -> None:
        """Store ``payload`` under ``key``, stamped with the current time."""

    async def delete(self, key: str) -> None:
        """Drop ``key``."""
