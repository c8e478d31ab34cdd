"""List filter state parsed from URL query parameters."""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from app.constants import (
    PET_SIZES,
    SORT_ARRANGE_MAP,
    SORT_BY_MODIFIED_TIME,
)

QueryValue = Union[str, Sequence[str], None]


def _first(value: QueryValue) -> Optional[str]:
    """Query params may arrive repeated; only the first occurrence counts."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return value[0] if len(value) > 0 else None


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class TourFilters:
    """Filter state for the tour list.

    ``area_code`` of None means "all regions". An empty ``content_type_ids``
    means "all types"; the upstream list endpoint only accepts one type, so
    only the first entry is sent.
    """
    area_code: Optional[str] = None
    content_type_ids: List[str] = field(default_factory=lambda: ["12"])
    sort_by: str = SORT_BY_MODIFIED_TIME
    page_no: int = 1
    keyword: Optional[str] = None
    pet_allowed: bool = False
    pet_sizes: List[str] = field(default_factory=list)

    @classmethod
    def from_query(
        cls,
        area_code: QueryValue = None,
        content_type_ids: QueryValue = None,
        sort_by: QueryValue = None,
        page_no: QueryValue = None,
        keyword: QueryValue = None,
        pet_allowed: QueryValue = None,
        pet_sizes: QueryValue = None,
    ) -> "TourFilters":
        """Build filters from raw query values, falling back to defaults on bad input."""
        raw_area = _first(area_code)
        raw_types = _first(content_type_ids)
        raw_sort = _first(sort_by)
        raw_page = _first(page_no)
        raw_keyword = _first(keyword)
        raw_pet_allowed = _first(pet_allowed)
        raw_sizes = _first(pet_sizes)

        types = _split_csv(raw_types) if raw_types is not None else ["12"]

        sort = raw_sort if raw_sort in SORT_ARRANGE_MAP else SORT_BY_MODIFIED_TIME

        try:
            page = int(raw_page) if raw_page is not None else 1
        except ValueError:
            page = 1
        page = max(page, 1)

        clean_keyword = raw_keyword.strip() if raw_keyword else None

        sizes = [size for size in _split_csv(raw_sizes) if size in PET_SIZES]

        return cls(
            area_code=raw_area.strip() if raw_area and raw_area.strip() else None,
            content_type_ids=types,
            sort_by=sort,
            page_no=page,
            keyword=clean_keyword or None,
            pet_allowed=(raw_pet_allowed or "").lower() == "true",
            pet_sizes=sizes,
        )

    @property
    def arrange(self) -> str:
        return SORT_ARRANGE_MAP[self.sort_by]

    def primary_content_type_id(self, default: str = "12") -> str:
        return self.content_type_ids[0] if self.content_type_ids else default

    @property
    def is_pet_filter_active(self) -> bool:
        return self.pet_allowed or len(self.pet_sizes) > 0

    @property
    def is_all_regions(self) -> bool:
        return self.area_code is None
