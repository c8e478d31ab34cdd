"""Use case: Get tour detail page data."""
import asyncio
import logging
from typing import Optional, Tuple

from app.application.dto.tour_dto import TourDetailPageDTO, content_type_name
from app.application.ports.tour_api import TourApiPort
from app.config import Settings, settings as default_settings
from app.domain.entities.tour import PetTourInfo
from app.domain.services.pet_policy import is_pet_allowed

logger = logging.getLogger(__name__)


class GetTourDetailUseCase:
    """Assemble the detail page.

    The common detail record is required and its failure propagates. Operating
    info, images and pet info are secondary sections fetched concurrently;
    each degrades to empty on failure.
    """

    def __init__(self, tour_api: TourApiPort, settings: Optional[Settings] = None):
        self.tour_api = tour_api
        self.settings = settings or default_settings

    async def execute(self, content_id: str) -> TourDetailPageDTO:
        detail = await self.tour_api.get_detail(content_id)
        content_type_id = detail.content_type_id or self.settings.DEFAULT_CONTENT_TYPE_ID

        intro, images, pet_info = await asyncio.gather(
            self.tour_api.get_operating_info(content_id, content_type_id),
            self.tour_api.get_images(content_id, num_of_rows=self.settings.DETAIL_IMAGE_LIMIT),
            self.tour_api.get_pet_info(content_id),
            return_exceptions=True,
        )

        if isinstance(intro, BaseException):
            logger.warning(f"Operating info unavailable for {content_id}: {intro}")
            intro = None
        if isinstance(images, BaseException):
            logger.warning(f"Images unavailable for {content_id}: {images}")
            images = []
        if isinstance(pet_info, BaseException):
            logger.warning(f"Pet info unavailable for {content_id}: {pet_info}")
            pet_info = None

        return TourDetailPageDTO(
            detail=detail,
            content_type_name=content_type_name(content_type_id),
            homepage_url=detail.homepage_url,
            tel=detail.tel_number,
            coordinates=detail.coordinates,
            intro=intro,
            images=images,
            pet_info=pet_info,
            pet_allowed=is_pet_allowed(pet_info),
        )


class GetTourPetInfoUseCase:
    """Pet record for one tour plus the inferred verdict."""

    def __init__(self, tour_api: TourApiPort):
        self.tour_api = tour_api

    async def execute(self, content_id: str) -> Tuple[Optional[PetTourInfo], bool]:
        pet_info = await self.tour_api.get_pet_info(content_id)
        return pet_info, is_pet_allowed(pet_info)
