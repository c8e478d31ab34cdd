"""Use case: list tours for the current filter state."""
import asyncio
import logging
import math
import unicodedata
from typing import Awaitable, Callable, List, Optional

from app.application.dto.tour_dto import MapPointDTO, TourListPageDTO, TourWithPetInfo
from app.application.ports.tour_api import TourApiPort, TourListResult
from app.application.services.pet_info_resolver import PetInfoResolver
from app.config import Settings, settings as default_settings
from app.constants import SORT_BY_MODIFIED_TIME, SORT_BY_TITLE
from app.core.batching import run_in_batches
from app.domain.entities.tour import AreaCode, TourItem
from app.domain.services.pet_policy import filter_tours_by_pet
from app.domain.value_objects.pagination import PaginationInfo
from app.domain.value_objects.tour_filters import TourFilters
from app.exceptions import TourApiError

logger = logging.getLogger(__name__)


def title_sort_key(item: TourItem) -> str:
    """Collation key for titles; Hangul syllables order as 가나다."""
    return unicodedata.normalize("NFC", item.title or "").casefold()


def sort_tours(items: List[TourItem], sort_by: str) -> List[TourItem]:
    if sort_by == SORT_BY_TITLE:
        return sorted(items, key=title_sort_key)
    if sort_by == SORT_BY_MODIFIED_TIME:
        return sorted(items, key=lambda item: item.modified_timestamp, reverse=True)
    return list(items)


class ListToursUseCase:
    """Fetch, merge and pet-filter one page of tours.

    Keyword present -> keyword search; specific region -> region listing;
    no region -> every region merged locally. An active pet filter without a
    keyword searches for the implicit pet keyword with a larger page.
    """

    def __init__(
        self,
        tour_api: TourApiPort,
        pet_info_resolver: Optional[PetInfoResolver] = None,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.tour_api = tour_api
        self.pet_info_resolver = pet_info_resolver or PetInfoResolver.default(tour_api)
        self.settings = settings or default_settings
        self._sleep = sleep

    async def execute(self, filters: TourFilters) -> TourListPageDTO:
        content_type_id = filters.primary_content_type_id(self.settings.DEFAULT_CONTENT_TYPE_ID)
        keyword = filters.keyword
        page_size = self.settings.DEFAULT_PAGE_SIZE

        if filters.is_pet_filter_active and not keyword:
            keyword = self.settings.PET_IMPLICIT_KEYWORD
            page_size = self.settings.PET_FILTER_PAGE_SIZE

        if keyword:
            result = await self.tour_api.search_by_keyword(
                keyword=keyword,
                area_code=filters.area_code,
                content_type_id=content_type_id,
                num_of_rows=page_size,
                page_no=filters.page_no,
                arrange=filters.arrange,
            )
        elif filters.is_all_regions:
            result = await self._list_all_regions(filters, content_type_id, page_size)
        else:
            result = await self.tour_api.list_by_region(
                area_code=filters.area_code,
                content_type_id=content_type_id,
                num_of_rows=page_size,
                page_no=filters.page_no,
                arrange=filters.arrange,
            )

        items = [TourWithPetInfo(item=item) for item in result.items]
        pagination = result.pagination

        if filters.is_pet_filter_active:
            items, pagination = await self._apply_pet_filter(items, filters, page_size)

        return TourListPageDTO(
            items=items,
            pagination=pagination,
            filters=filters,
            keyword=keyword,
            map_points=self._map_points(items),
        )

    async def _list_all_regions(
        self,
        filters: TourFilters,
        content_type_id: str,
        page_size: int,
    ) -> TourListResult:
        """Merge page 1 of every region, re-sort, and cut out the requested page."""
        try:
            regions = await self.tour_api.list_regions()
        except TourApiError as e:
            logger.warning(f"Region list unavailable, using default region: {e.message}")
            regions = []

        if not regions:
            return await self.tour_api.list_by_region(
                area_code=self.settings.DEFAULT_AREA_CODE,
                content_type_id=content_type_id,
                num_of_rows=page_size,
                page_no=filters.page_no,
                arrange=filters.arrange,
            )

        async def fetch_region(area: AreaCode) -> TourListResult:
            return await self.tour_api.list_by_region(
                area_code=area.code,
                content_type_id=content_type_id,
                num_of_rows=page_size,
                page_no=1,
                arrange=filters.arrange,
            )

        results = await run_in_batches(
            regions,
            fetch_region,
            batch_size=self.settings.ALL_REGIONS_BATCH_SIZE,
            delay_seconds=self.settings.ALL_REGIONS_BATCH_DELAY_SECONDS,
            sleep=self._sleep,
        )

        merged: List[TourItem] = []
        for area, result in zip(regions, results):
            if isinstance(result, BaseException):
                logger.error(f"Listing failed for region {area.name} ({area.code}): {result}")
                continue
            merged.extend(result.items)

        ordered = sort_tours(merged, filters.sort_by)
        start = (filters.page_no - 1) * page_size
        logger.info(f"All-regions listing merged {len(merged)} items from {len(regions)} regions")

        return TourListResult(
            items=ordered[start:start + page_size],
            pagination=PaginationInfo.calculate(
                num_of_rows=page_size,
                page_no=filters.page_no,
                total_count=len(merged),
            ),
        )

    async def _apply_pet_filter(self, items: List[TourWithPetInfo], filters: TourFilters, page_size: int):
        pet_infos = await self.pet_info_resolver.resolve_all([entry.item for entry in items])
        for entry, pet_info in zip(items, pet_infos):
            entry.pet_info = pet_info

        filtered = filter_tours_by_pet(items, filters.pet_allowed, filters.pet_sizes)
        logger.info(
            f"Pet filter (allowed={filters.pet_allowed}, sizes={filters.pet_sizes}): "
            f"{len(items)} -> {len(filtered)}"
        )

        pagination = PaginationInfo(
            page_no=1,
            num_of_rows=page_size,
            total_count=len(filtered),
            total_pages=max(1, math.ceil(len(filtered) / page_size)),
        )
        return filtered, pagination

    @staticmethod
    def _map_points(items: List[TourWithPetInfo]) -> List[MapPointDTO]:
        points = []
        for entry in items:
            point = MapPointDTO.from_item(entry.item)
            if point is not None:
                points.append(point)
        return points
