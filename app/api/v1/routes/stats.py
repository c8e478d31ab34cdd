"""Statistics API routes."""
from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.v1.schemas.stats_schemas import (
    RegionStatsSchema,
    StatsSummarySchema,
    TopRegionSchema,
    TopTypeSchema,
    TypeStatsSchema,
)
from app.application.services.stats_service import StatsService
from app.core.dependencies import get_stats_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/regions", response_model=List[RegionStatsSchema])
async def get_region_stats(
    refresh: bool = Query(False, description="Bypass the 1 hour cache"),
    service: StatsService = Depends(get_stats_service),
):
    stats = await service.get_region_stats(refresh=refresh)
    return [RegionStatsSchema(**stat.to_dict()) for stat in stats]


@router.get("/types", response_model=List[TypeStatsSchema])
async def get_type_stats(
    refresh: bool = Query(False, description="Bypass the 1 hour cache"),
    service: StatsService = Depends(get_stats_service),
):
    stats = await service.get_type_stats(refresh=refresh)
    return [TypeStatsSchema(**stat.to_dict()) for stat in stats]


@router.get("/summary", response_model=StatsSummarySchema)
async def get_stats_summary(
    refresh: bool = Query(False, description="Bypass the 1 hour cache"),
    service: StatsService = Depends(get_stats_service),
):
    """Total count, top 3 regions and top 3 content types."""
    summary = await service.get_stats_summary(refresh=refresh)
    return StatsSummarySchema(
        total_count=summary.total_count,
        top_regions=[TopRegionSchema(**vars(region)) for region in summary.top_regions],
        top_types=[TopTypeSchema(**vars(top_type)) for top_type in summary.top_types],
        last_updated=summary.last_updated,
    )
