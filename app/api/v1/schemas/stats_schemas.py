"""Pydantic schemas for statistics responses."""
from pydantic import BaseModel
from typing import List


class RegionStatsSchema(BaseModel):
    area_code: str
    name: str
    count: int
    percentage: float


class TypeStatsSchema(BaseModel):
    content_type_id: str
    type_name: str
    count: int
    percentage: float


class TopRegionSchema(BaseModel):
    area_code: str
    name: str
    count: int
    rank: int


class TopTypeSchema(BaseModel):
    content_type_id: str
    type_name: str
    count: int
    rank: int


class StatsSummarySchema(BaseModel):
    """Statistics summary schema. ``last_updated`` is ISO-8601 UTC."""
    total_count: int
    top_regions: List[TopRegionSchema]
    top_types: List[TopTypeSchema]
    last_updated: str
