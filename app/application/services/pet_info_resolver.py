"""Per-item pet info resolution.

Strategies are tried in order of confidence and the first non-None result
wins:

1. inline pet fields already present on the listing row
2. the dedicated pet endpoint (detailPetTour2)
3. a scan of title/overview for pet words; weakest evidence, last resort
"""
import asyncio
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from app.application.ports.tour_api import TourApiPort
from app.domain.entities.tour import PetTourInfo, TourItem
from app.exceptions import TourApiError

logger = logging.getLogger(__name__)

PET_MENTION_KEYWORDS: Tuple[str, ...] = ("반려", "애견", "펫", "pet", "강아지", "dog")


class PetInfoStrategy(Protocol):
    name: str

    async def resolve(self, item: TourItem) -> Optional[PetTourInfo]:
        """Return pet info for ``item`` or None to defer to the next strategy."""


class InlinePetInfoStrategy:
    name = "inline"

    async def resolve(self, item: TourItem) -> Optional[PetTourInfo]:
        return item.inline_pet_info()


class PetEndpointStrategy:
    name = "endpoint"

    def __init__(self, tour_api: TourApiPort):
        self.tour_api = tour_api

    async def resolve(self, item: TourItem) -> Optional[PetTourInfo]:
        try:
            pet_info = await self.tour_api.get_pet_info(item.content_id)
        except TourApiError as e:
            logger.error(f"Pet info lookup failed (contentId: {item.content_id}): {e.message}")
            return None
        if pet_info is None or not pet_info.has_data():
            return None
        return pet_info


class TextScanStrategy:
    """Synthesize a record from listing text that mentions pets.

    The matched text goes into ``petinfo`` so the allow/disallow rules can
    judge it like any other pet text.
    """
    name = "text-scan"

    def __init__(self, keywords: Sequence[str] = PET_MENTION_KEYWORDS):
        self.keywords = tuple(keyword.lower() for keyword in keywords)

    async def resolve(self, item: TourItem) -> Optional[PetTourInfo]:
        text = " ".join(part for part in (item.title, item.overview) if part)
        if not text:
            return None
        lowered = text.lower()
        if not any(keyword in lowered for keyword in self.keywords):
            return None
        return PetTourInfo(
            content_id=item.content_id,
            content_type_id=item.content_type_id,
            petinfo=text,
        )


class PetInfoResolver:
    """Runs the strategy chain for each item."""

    def __init__(self, strategies: Sequence[PetInfoStrategy]):
        self.strategies = list(strategies)

    @classmethod
    def default(cls, tour_api: TourApiPort) -> "PetInfoResolver":
        return cls([
            InlinePetInfoStrategy(),
            PetEndpointStrategy(tour_api),
            TextScanStrategy(),
        ])

    async def resolve(self, item: TourItem) -> Optional[PetTourInfo]:
        for strategy in self.strategies:
            pet_info = await strategy.resolve(item)
            if pet_info is not None:
                logger.debug(f"Pet info for {item.content_id} resolved by {strategy.name}")
                return pet_info
        return None

    async def resolve_all(self, items: Sequence[TourItem]) -> List[Optional[PetTourInfo]]:
        """Resolve every item concurrently; results follow input order."""
        return list(await asyncio.gather(*(self.resolve(item) for item in items)))
