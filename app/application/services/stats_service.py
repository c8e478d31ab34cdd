"""Statistics aggregation over the Tour API.

The upstream API has no aggregate endpoint and requires both a region and a
content type per listing call, so every count is the ``totalCount`` of a
one-row query and both axes fan out over the full region x type grid.
"""
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from app.application.ports.tour_api import AggregateCache, TourApiPort
from app.config import Settings, settings as default_settings
from app.constants import (
    CACHE_KEY_REGION_STATS,
    CACHE_KEY_STATS_SUMMARY,
    CACHE_KEY_TYPE_STATS,
    CONTENT_TYPE_NAMES,
    TOP_N_STATS,
)
from app.core.batching import run_in_batches
from app.domain.entities.stats import RegionStats, StatsSummary, TopRegion, TopType, TypeStats
from app.domain.entities.tour import AreaCode
from app.exceptions import TourApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def percentage_of(count: int, total: int) -> float:
    return count / total * 100 if total > 0 else 0.0


def top_n(stats: Sequence[T], n: int = TOP_N_STATS) -> List[T]:
    """Highest counts first; ties keep their original order."""
    return sorted(stats, key=lambda stat: -stat.count)[:n]


class StatsService:
    """Region and content-type statistics with a TTL cache in front."""

    def __init__(
        self,
        tour_api: TourApiPort,
        cache: AggregateCache,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.tour_api = tour_api
        self.cache = cache
        self.settings = settings or default_settings
        self._clock = clock
        self._sleep = sleep

    @property
    def ttl_seconds(self) -> int:
        return self.settings.STATS_CACHE_TTL_SECONDS

    async def _cached(self, key: str, refresh: bool) -> Optional[Any]:
        if refresh:
            return None
        entry = await self.cache.get(key)
        if entry is None:
            return None
        if self._clock() - entry.computed_at >= self.ttl_seconds:
            logger.debug(f"Stats cache expired: {key}")
            return None
        logger.debug(f"Stats cache hit: {key}")
        return entry.payload

    async def _count(self, area: AreaCode, content_type_id: str) -> int:
        """``totalCount`` for one (region, type) cell; failures count as 0."""
        try:
            result = await self.tour_api.list_by_region(
                area_code=area.code,
                content_type_id=content_type_id,
                num_of_rows=1,
                page_no=1,
            )
            return result.pagination.total_count
        except TourApiError as e:
            logger.warning(
                f"Stats count failed for region {area.name}({area.code}) "
                f"type {content_type_id}: {e.message}"
            )
            return 0

    async def _list_areas(self, axis: str) -> List[AreaCode]:
        try:
            return await self.tour_api.list_regions()
        except TourApiError as e:
            raise TourApiError(
                f"{axis} 통계 수집 중 오류가 발생했습니다: {e.message}",
                category=e.category,
                status_code=e.status_code,
                cause=e,
            ) from e

    async def _count_grid(self, areas: List[AreaCode]) -> Dict[str, Dict[str, int]]:
        """Counts keyed by area code then content type id.

        Regions are processed in throttled batches; the type calls of one
        region run concurrently.
        """
        type_ids = list(CONTENT_TYPE_NAMES)

        async def count_region(area: AreaCode) -> Dict[str, int]:
            counts = await asyncio.gather(*(self._count(area, type_id) for type_id in type_ids))
            return dict(zip(type_ids, counts))

        results = await run_in_batches(
            areas,
            count_region,
            batch_size=self.settings.STATS_BATCH_SIZE,
            delay_seconds=self.settings.STATS_BATCH_DELAY_SECONDS,
            sleep=self._sleep,
        )

        grid: Dict[str, Dict[str, int]] = {}
        for area, result in zip(areas, results):
            if isinstance(result, BaseException):
                logger.warning(f"Stats collection failed for region {area.name}({area.code}): {result}")
                grid[area.code] = {type_id: 0 for type_id in type_ids}
            else:
                grid[area.code] = result
        return grid

    async def get_region_stats(self, refresh: bool = False) -> List[RegionStats]:
        """Listing count per region, summed over all content types."""
        cached = await self._cached(CACHE_KEY_REGION_STATS, refresh)
        if cached is not None:
            return [RegionStats(**row) for row in cached]

        areas = await self._list_areas("지역별")
        grid = await self._count_grid(areas)

        stats = [
            RegionStats(area_code=area.code, name=area.name, count=sum(grid[area.code].values()))
            for area in areas
        ]
        total = sum(stat.count for stat in stats)
        for stat in stats:
            stat.percentage = percentage_of(stat.count, total)

        logger.info(f"Region stats computed: {len(stats)} regions, total={total}")
        await self.cache.set(CACHE_KEY_REGION_STATS, [stat.to_dict() for stat in stats], self.ttl_seconds)
        return stats

    async def get_type_stats(self, refresh: bool = False) -> List[TypeStats]:
        """Listing count per content type, summed over all regions."""
        cached = await self._cached(CACHE_KEY_TYPE_STATS, refresh)
        if cached is not None:
            return [TypeStats(**row) for row in cached]

        areas = await self._list_areas("타입별")
        grid = await self._count_grid(areas)

        stats = [
            TypeStats(
                content_type_id=type_id,
                type_name=type_name,
                count=sum(grid[area.code][type_id] for area in areas),
            )
            for type_id, type_name in CONTENT_TYPE_NAMES.items()
        ]
        total = sum(stat.count for stat in stats)
        for stat in stats:
            stat.percentage = percentage_of(stat.count, total)

        logger.info(f"Type stats computed: total={total}")
        await self.cache.set(CACHE_KEY_TYPE_STATS, [stat.to_dict() for stat in stats], self.ttl_seconds)
        return stats

    async def get_stats_summary(self, refresh: bool = False) -> StatsSummary:
        """Grand total and top regions/types; a failed axis contributes nothing."""
        cached = await self._cached(CACHE_KEY_STATS_SUMMARY, refresh)
        if cached is not None:
            return StatsSummary.from_dict(cached)

        region_result, type_result = await asyncio.gather(
            self.get_region_stats(refresh=refresh),
            self.get_type_stats(refresh=refresh),
            return_exceptions=True,
        )

        if isinstance(region_result, BaseException):
            logger.warning(f"Region stats unavailable for summary: {region_result}")
            region_stats: List[RegionStats] = []
        else:
            region_stats = region_result

        if isinstance(type_result, BaseException):
            logger.warning(f"Type stats unavailable for summary: {type_result}")
            type_stats: List[TypeStats] = []
        else:
            type_stats = type_result

        summary = StatsSummary(
            total_count=sum(stat.count for stat in type_stats),
            top_regions=[
                TopRegion(area_code=stat.area_code, name=stat.name, count=stat.count, rank=index + 1)
                for index, stat in enumerate(top_n(region_stats))
            ],
            top_types=[
                TopType(
                    content_type_id=stat.content_type_id,
                    type_name=stat.type_name,
                    count=stat.count,
                    rank=index + 1,
                )
                for index, stat in enumerate(top_n(type_stats))
            ],
            last_updated=datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat(),
        )

        # Nothing worth keeping for an hour when both axes failed
        if region_stats or type_stats:
            await self.cache.set(CACHE_KEY_STATS_SUMMARY, summary.to_dict(), self.ttl_seconds)
        return summary
