"""Pydantic schemas for tour API responses."""
from pydantic import BaseModel
from typing import Optional, List, Dict


class AreaCodeSchema(BaseModel):
    """Region code schema."""
    code: str
    name: str


class AreaListResponseSchema(BaseModel):
    parent_code: Optional[str] = None
    areas: List[AreaCodeSchema]


class PaginationSchema(BaseModel):
    """Pagination schema; total_pages is computed locally."""
    page_no: int
    num_of_rows: int
    total_count: int
    total_pages: int


class PetInfoSchema(BaseModel):
    """Pet accompaniment schema (current and legacy upstream fields)."""
    content_id: str
    content_type_id: Optional[str] = None
    acmpy_type_cd: Optional[str] = None
    acmpy_psbl_cpam: Optional[str] = None
    acmpy_need_mtr: Optional[str] = None
    etc_acmpy_info: Optional[str] = None
    rela_poses_fclty: Optional[str] = None
    rela_frnsh_prdlst: Optional[str] = None
    rela_rntl_prdlst: Optional[str] = None
    rela_purc_prdlst: Optional[str] = None
    chkpetleash: Optional[str] = None
    chkpetsize: Optional[str] = None
    chkpetplace: Optional[str] = None
    chkpetfee: Optional[str] = None
    petinfo: Optional[str] = None
    parking: Optional[str] = None


class TourItemSchema(BaseModel):
    """Tour card schema."""
    content_id: str
    content_type_id: str
    content_type_name: str
    title: str
    addr1: str = ""
    addr2: Optional[str] = None
    area_code: Optional[str] = None
    first_image: Optional[str] = None
    first_image2: Optional[str] = None
    tel: Optional[str] = None
    modified_time: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    pet_info: Optional[PetInfoSchema] = None
    pet_allowed: Optional[bool] = None


class MapPointSchema(BaseModel):
    """Map marker schema."""
    content_id: str
    content_type_id: str
    title: str
    latitude: float
    longitude: float


class TourFiltersSchema(BaseModel):
    """Filter state echoed back to the client."""
    area_code: Optional[str] = None
    content_type_ids: List[str]
    sort_by: str
    page_no: int
    keyword: Optional[str] = None
    pet_allowed: bool = False
    pet_sizes: List[str] = []


class TourListResponseSchema(BaseModel):
    """Tour list response schema."""
    items: List[TourItemSchema]
    pagination: PaginationSchema
    filters: TourFiltersSchema
    keyword: Optional[str] = None
    map_points: List[MapPointSchema] = []


class TourImageSchema(BaseModel):
    """Gallery image schema."""
    serial_num: Optional[str] = None
    origin_img_url: Optional[str] = None
    small_image_url: Optional[str] = None
    img_name: Optional[str] = None


class TourIntroSchema(BaseModel):
    """Operating info schema; type-specific fields go to ``extra``."""
    usetime: Optional[str] = None
    restdate: Optional[str] = None
    infocenter: Optional[str] = None
    parking: Optional[str] = None
    chkpet: Optional[str] = None
    chkbabycarriage: Optional[str] = None
    chkcreditcard: Optional[str] = None
    expguide: Optional[str] = None
    accomcount: Optional[str] = None
    usefee: Optional[str] = None
    extra: Dict[str, str] = {}


class TourDetailResponseSchema(BaseModel):
    """Tour detail page schema."""
    content_id: str
    content_type_id: str
    content_type_name: str
    title: str
    addr1: str = ""
    addr2: Optional[str] = None
    zipcode: Optional[str] = None
    tel: Optional[str] = None
    homepage_url: Optional[str] = None
    overview: Optional[str] = None
    first_image: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    intro: Optional[TourIntroSchema] = None
    images: List[TourImageSchema] = []
    pet_info: Optional[PetInfoSchema] = None
    pet_allowed: bool = False


class PetInfoResponseSchema(BaseModel):
    """Pet info with the inferred verdict."""
    content_id: str
    pet_info: Optional[PetInfoSchema] = None
    allowed: bool
