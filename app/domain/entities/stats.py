"""Statistics domain entities - derived aggregates, never persisted."""
from dataclasses import dataclass, field, asdict
from typing import List


@dataclass
class RegionStats:
    """Listing count for one region across all content types."""
    area_code: str
    name: str
    count: int
    percentage: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TypeStats:
    """Listing count for one content type across all regions."""
    content_type_id: str
    type_name: str
    count: int
    percentage: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TopRegion:
    area_code: str
    name: str
    count: int
    rank: int


@dataclass
class TopType:
    content_type_id: str
    type_name: str
    count: int
    rank: int


@dataclass
class StatsSummary:
    """Grand total plus the top regions and content types."""
    total_count: int
    top_regions: List[TopRegion] = field(default_factory=list)
    top_types: List[TopType] = field(default_factory=list)
    last_updated: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "StatsSummary":
        return cls(
            total_count=data["total_count"],
            top_regions=[TopRegion(**r) for r in data.get("top_regions", [])],
            top_types=[TopType(**t) for t in data.get("top_types", [])],
            last_updated=data.get("last_updated", ""),
        )
