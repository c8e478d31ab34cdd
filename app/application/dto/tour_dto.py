"""Data Transfer Objects for tour list and detail responses."""
from dataclasses import dataclass, field
from typing import List, Optional

from app.constants import CONTENT_TYPE_NAMES, DEFAULT_CONTENT_TYPE_NAME
from app.domain.entities.tour import PetTourInfo, TourDetail, TourImage, TourIntro, TourItem
from app.domain.value_objects.coordinates import Coordinates
from app.domain.value_objects.pagination import PaginationInfo
from app.domain.value_objects.tour_filters import TourFilters


def content_type_name(content_type_id: Optional[str]) -> str:
    return CONTENT_TYPE_NAMES.get(content_type_id or "", DEFAULT_CONTENT_TYPE_NAME)


@dataclass
class TourWithPetInfo:
    """Listing row plus whatever pet info was resolved for it."""
    item: TourItem
    pet_info: Optional[PetTourInfo] = None


@dataclass
class MapPointDTO:
    """Marker for the map view."""
    content_id: str
    content_type_id: str
    title: str
    latitude: float
    longitude: float

    @classmethod
    def from_item(cls, item: TourItem) -> Optional["MapPointDTO"]:
        coords = item.coordinates
        if coords is None:
            return None
        return cls(
            content_id=item.content_id,
            content_type_id=item.content_type_id,
            title=item.title,
            latitude=coords.latitude,
            longitude=coords.longitude,
        )


@dataclass
class TourListPageDTO:
    """Tour list page."""
    items: List[TourWithPetInfo]
    pagination: PaginationInfo
    filters: TourFilters
    keyword: Optional[str] = None
    map_points: List[MapPointDTO] = field(default_factory=list)


@dataclass
class TourDetailPageDTO:
    """Tour detail page. Only ``detail`` is guaranteed; other sections degrade."""
    detail: TourDetail
    content_type_name: str
    homepage_url: Optional[str] = None
    tel: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    intro: Optional[TourIntro] = None
    images: List[TourImage] = field(default_factory=list)
    pet_info: Optional[PetTourInfo] = None
    pet_allowed: bool = False
