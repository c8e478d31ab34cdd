"""Tour API routes - thin layer delegating to use cases."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.v1.schemas.tour_schemas import (
    AreaCodeSchema,
    AreaListResponseSchema,
    MapPointSchema,
    PaginationSchema,
    PetInfoResponseSchema,
    PetInfoSchema,
    TourDetailResponseSchema,
    TourFiltersSchema,
    TourImageSchema,
    TourIntroSchema,
    TourItemSchema,
    TourListResponseSchema,
)
from app.application.dto.tour_dto import TourWithPetInfo, content_type_name
from app.application.ports.tour_api import TourApiPort
from app.application.use_cases.get_tour_detail import GetTourDetailUseCase, GetTourPetInfoUseCase
from app.application.use_cases.list_tours import ListToursUseCase
from app.core.dependencies import (
    get_list_tours_use_case,
    get_tour_api_client,
    get_tour_detail_use_case,
    get_tour_pet_info_use_case,
)
from app.domain.entities.tour import PetTourInfo
from app.domain.services.pet_policy import is_pet_allowed
from app.domain.value_objects.tour_filters import TourFilters

router = APIRouter(tags=["tours"])


def _pet_schema(pet_info: Optional[PetTourInfo]) -> Optional[PetInfoSchema]:
    return PetInfoSchema(**pet_info.to_dict()) if pet_info else None


def _item_schema(entry: TourWithPetInfo, include_pet: bool) -> TourItemSchema:
    item = entry.item
    coords = item.coordinates
    return TourItemSchema(
        content_id=item.content_id,
        content_type_id=item.content_type_id,
        content_type_name=content_type_name(item.content_type_id),
        title=item.title,
        addr1=item.addr1,
        addr2=item.addr2,
        area_code=item.area_code,
        first_image=item.first_image,
        first_image2=item.first_image2,
        tel=item.tel,
        modified_time=item.modified_time,
        latitude=coords.latitude if coords else None,
        longitude=coords.longitude if coords else None,
        pet_info=_pet_schema(entry.pet_info),
        pet_allowed=is_pet_allowed(entry.pet_info) if include_pet else None,
    )


@router.get("/areas", response_model=AreaListResponseSchema)
async def list_areas(
    parent_code: Optional[str] = Query(None, alias="parentCode"),
    tour_api: TourApiPort = Depends(get_tour_api_client),
):
    """시/도 list, or 시/군/구 list under ``parentCode``."""
    areas = await tour_api.list_regions(parent_code)
    return AreaListResponseSchema(
        parent_code=parent_code,
        areas=[AreaCodeSchema(code=area.code, name=area.name) for area in areas],
    )


@router.get("/tours", response_model=TourListResponseSchema)
async def list_tours(
    area_code: Optional[str] = Query(None, alias="areaCode"),
    content_type_ids: Optional[str] = Query(None, alias="contentTypeIds"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page_no: Optional[str] = Query(None, alias="pageNo"),
    keyword: Optional[str] = Query(None),
    pet_allowed: Optional[str] = Query(None, alias="petAllowed"),
    pet_sizes: Optional[str] = Query(None, alias="petSizes"),
    use_case: ListToursUseCase = Depends(get_list_tours_use_case),
):
    """
    List tours for the filter state in the query string.

    Invalid values fall back to defaults instead of failing the request.
    """
    filters = TourFilters.from_query(
        area_code=area_code,
        content_type_ids=content_type_ids,
        sort_by=sort_by,
        page_no=page_no,
        keyword=keyword,
        pet_allowed=pet_allowed,
        pet_sizes=pet_sizes,
    )
    page = await use_case.execute(filters)

    return TourListResponseSchema(
        items=[_item_schema(entry, filters.is_pet_filter_active) for entry in page.items],
        pagination=PaginationSchema(**page.pagination.to_dict()),
        filters=TourFiltersSchema(
            area_code=filters.area_code,
            content_type_ids=list(filters.content_type_ids),
            sort_by=filters.sort_by,
            page_no=filters.page_no,
            keyword=filters.keyword,
            pet_allowed=filters.pet_allowed,
            pet_sizes=list(filters.pet_sizes),
        ),
        keyword=page.keyword,
        map_points=[
            MapPointSchema(
                content_id=point.content_id,
                content_type_id=point.content_type_id,
                title=point.title,
                latitude=point.latitude,
                longitude=point.longitude,
            )
            for point in page.map_points
        ],
    )


@router.get("/tours/{content_id}", response_model=TourDetailResponseSchema)
async def get_tour_detail(
    content_id: str,
    use_case: GetTourDetailUseCase = Depends(get_tour_detail_use_case),
):
    """
    Get the detail page: common info, operating info, images and pet info.
    """
    page = await use_case.execute(content_id)
    detail = page.detail
    intro = page.intro

    return TourDetailResponseSchema(
        content_id=detail.content_id,
        content_type_id=detail.content_type_id,
        content_type_name=page.content_type_name,
        title=detail.title,
        addr1=detail.addr1,
        addr2=detail.addr2,
        zipcode=detail.zipcode,
        tel=page.tel,
        homepage_url=page.homepage_url,
        overview=detail.overview,
        first_image=detail.first_image,
        latitude=page.coordinates.latitude if page.coordinates else None,
        longitude=page.coordinates.longitude if page.coordinates else None,
        intro=TourIntroSchema(
            usetime=intro.usetime,
            restdate=intro.restdate,
            infocenter=intro.infocenter,
            parking=intro.parking,
            chkpet=intro.chkpet,
            chkbabycarriage=intro.chkbabycarriage,
            chkcreditcard=intro.chkcreditcard,
            expguide=intro.expguide,
            accomcount=intro.accomcount,
            usefee=intro.usefee,
            extra=intro.extra,
        ) if intro else None,
        images=[
            TourImageSchema(
                serial_num=image.serial_num,
                origin_img_url=image.origin_img_url,
                small_image_url=image.small_image_url,
                img_name=image.img_name,
            )
            for image in page.images
        ],
        pet_info=_pet_schema(page.pet_info),
        pet_allowed=page.pet_allowed,
    )


@router.get("/tours/{content_id}/pet", response_model=PetInfoResponseSchema)
async def get_tour_pet_info(
    content_id: str,
    use_case: GetTourPetInfoUseCase = Depends(get_tour_pet_info_use_case),
):
    """Pet record plus the inferred allowed flag; no record means not allowed."""
    pet_info, allowed = await use_case.execute(content_id)
    return PetInfoResponseSchema(
        content_id=content_id,
        pet_info=_pet_schema(pet_info),
        allowed=allowed,
    )
