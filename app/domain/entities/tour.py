"""Tour domain entities - shapes of the upstream Tour API records.

None of these are persisted; every instance is rebuilt from an upstream
payload, which may omit keys, send empty strings, or send numbers where
strings are documented. ``from_api`` constructors absorb all of that.
"""
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from app.domain.value_objects.coordinates import Coordinates


def _text(raw: Mapping[str, Any], key: str) -> Optional[str]:
    """Read a field as a stripped string; empty or missing becomes None."""
    value = raw.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class AreaCode:
    """Region code (시/도, or 시/군/구 under a parent)."""
    code: str
    name: str
    rnum: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "AreaCode":
        return cls(
            code=_text(raw, "code") or _text(raw, "areacode") or "",
            name=_text(raw, "name") or _text(raw, "areaname") or "",
            rnum=_text(raw, "rnum"),
        )


@dataclass
class PetTourInfo:
    """Pet accompaniment record (detailPetTour2).

    There is no boolean "allowed" field upstream; see
    ``app.domain.services.pet_policy`` for how it is inferred.
    """
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
    # legacy fields
    chkpetleash: Optional[str] = None
    chkpetsize: Optional[str] = None
    chkpetplace: Optional[str] = None
    chkpetfee: Optional[str] = None
    petinfo: Optional[str] = None
    parking: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "PetTourInfo":
        return cls(
            content_id=_text(raw, "contentid") or "",
            content_type_id=_text(raw, "contenttypeid"),
            acmpy_type_cd=_text(raw, "acmpyTypeCd"),
            acmpy_psbl_cpam=_text(raw, "acmpyPsblCpam"),
            acmpy_need_mtr=_text(raw, "acmpyNeedMtr"),
            etc_acmpy_info=_text(raw, "etcAcmpyInfo"),
            rela_poses_fclty=_text(raw, "relaPosesFclty"),
            rela_frnsh_prdlst=_text(raw, "relaFrnshPrdlst"),
            rela_rntl_prdlst=_text(raw, "relaRntlPrdlst"),
            rela_purc_prdlst=_text(raw, "relaPurcPrdlst"),
            chkpetleash=_text(raw, "chkpetleash"),
            chkpetsize=_text(raw, "chkpetsize"),
            chkpetplace=_text(raw, "chkpetplace"),
            chkpetfee=_text(raw, "chkpetfee"),
            petinfo=_text(raw, "petinfo"),
            parking=_text(raw, "parking"),
        )

    @property
    def size_text(self) -> Optional[str]:
        """Permitted size text; the current field wins over the legacy one."""
        return self.acmpy_psbl_cpam or self.chkpetsize

    def has_data(self) -> bool:
        ignored = {"content_id", "content_type_id", "parking"}
        return any(
            getattr(self, f.name)
            for f in fields(self)
            if f.name not in ignored
        )

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class TourItem:
    """Attraction listing row (areaBasedList2 / searchKeyword2)."""
    content_id: str
    content_type_id: str
    title: str
    addr1: str = ""
    addr2: Optional[str] = None
    area_code: Optional[str] = None
    sigungu_code: Optional[str] = None
    mapx: Optional[str] = None
    mapy: Optional[str] = None
    first_image: Optional[str] = None
    first_image2: Optional[str] = None
    tel: Optional[str] = None
    cat1: Optional[str] = None
    cat2: Optional[str] = None
    cat3: Optional[str] = None
    modified_time: Optional[str] = None
    overview: Optional[str] = None
    # Some listing responses carry pet fields inline
    chkpet: Optional[str] = None
    chkpetsize: Optional[str] = None
    chkpetplace: Optional[str] = None
    chkpetfee: Optional[str] = None
    petinfo: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "TourItem":
        return cls(
            content_id=_text(raw, "contentid") or "",
            content_type_id=_text(raw, "contenttypeid") or "",
            title=_text(raw, "title") or "",
            addr1=_text(raw, "addr1") or "",
            addr2=_text(raw, "addr2"),
            area_code=_text(raw, "areacode"),
            sigungu_code=_text(raw, "sigungucode"),
            mapx=_text(raw, "mapx"),
            mapy=_text(raw, "mapy"),
            first_image=_text(raw, "firstimage"),
            first_image2=_text(raw, "firstimage2"),
            tel=_text(raw, "tel"),
            cat1=_text(raw, "cat1"),
            cat2=_text(raw, "cat2"),
            cat3=_text(raw, "cat3"),
            modified_time=_text(raw, "modifiedtime"),
            overview=_text(raw, "overview"),
            chkpet=_text(raw, "chkpet"),
            chkpetsize=_text(raw, "chkpetsize"),
            chkpetplace=_text(raw, "chkpetplace"),
            chkpetfee=_text(raw, "chkpetfee"),
            petinfo=_text(raw, "petinfo"),
        )

    @property
    def coordinates(self) -> Optional[Coordinates]:
        """Decimal-degree position, or None when not displayable on the map."""
        coords = Coordinates.from_fixed_point(self.mapx, self.mapy)
        if coords is None or not coords.is_within_korea():
            return None
        return coords

    @property
    def modified_timestamp(self) -> int:
        """``modifiedtime`` as an integer for ordering; unparseable sorts last."""
        try:
            return int(self.modified_time or "0")
        except ValueError:
            return 0

    def inline_pet_info(self) -> Optional[PetTourInfo]:
        """Pet record assembled from inline listing fields, if any are present."""
        if not (self.chkpet or self.chkpetsize or self.chkpetplace or self.chkpetfee or self.petinfo):
            return None
        return PetTourInfo(
            content_id=self.content_id,
            content_type_id=self.content_type_id,
            chkpetleash=self.chkpet,
            chkpetsize=self.chkpetsize,
            chkpetplace=self.chkpetplace,
            chkpetfee=self.chkpetfee,
            petinfo=self.petinfo,
        )


@dataclass
class TourDetail:
    """Common detail record (detailCommon2)."""
    content_id: str
    content_type_id: str
    title: str
    addr1: str = ""
    addr2: Optional[str] = None
    zipcode: Optional[str] = None
    tel: Optional[str] = None
    homepage: Optional[str] = None
    overview: Optional[str] = None
    first_image: Optional[str] = None
    first_image2: Optional[str] = None
    mapx: Optional[str] = None
    mapy: Optional[str] = None
    area_code: Optional[str] = None
    sigungu_code: Optional[str] = None
    modified_time: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "TourDetail":
        return cls(
            content_id=_text(raw, "contentid") or "",
            content_type_id=_text(raw, "contenttypeid") or "",
            title=_text(raw, "title") or "",
            addr1=_text(raw, "addr1") or "",
            addr2=_text(raw, "addr2"),
            zipcode=_text(raw, "zipcode"),
            tel=_text(raw, "tel"),
            homepage=_text(raw, "homepage"),
            overview=_text(raw, "overview"),
            first_image=_text(raw, "firstimage"),
            first_image2=_text(raw, "firstimage2"),
            mapx=_text(raw, "mapx"),
            mapy=_text(raw, "mapy"),
            area_code=_text(raw, "areacode"),
            sigungu_code=_text(raw, "sigungucode"),
            modified_time=_text(raw, "modifiedtime"),
        )

    @property
    def coordinates(self) -> Optional[Coordinates]:
        coords = Coordinates.from_fixed_point(self.mapx, self.mapy)
        if coords is None or not coords.is_within_korea():
            return None
        return coords

    @property
    def homepage_url(self) -> Optional[str]:
        return normalize_homepage_url(self.homepage)

    @property
    def tel_number(self) -> Optional[str]:
        return normalize_tel(self.tel)


# Fields of detailIntro2 that are common enough to type; the rest vary by
# content type and land in ``extra``.
_INTRO_KNOWN_FIELDS = {
    "contentid", "contenttypeid", "usetime", "restdate", "infocenter",
    "parking", "chkpet", "chkbabycarriage", "chkcreditcard", "expguide",
    "accomcount", "usefee",
}


@dataclass
class TourIntro:
    """Operating info (detailIntro2). Fields differ per content type."""
    content_id: str
    content_type_id: str
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
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "TourIntro":
        extra = {}
        for key in raw:
            if key in _INTRO_KNOWN_FIELDS:
                continue
            value = _text(raw, key)
            if value is not None:
                extra[key] = value
        return cls(
            content_id=_text(raw, "contentid") or "",
            content_type_id=_text(raw, "contenttypeid") or "",
            usetime=_text(raw, "usetime"),
            restdate=_text(raw, "restdate"),
            infocenter=_text(raw, "infocenter"),
            parking=_text(raw, "parking"),
            chkpet=_text(raw, "chkpet"),
            chkbabycarriage=_text(raw, "chkbabycarriage"),
            chkcreditcard=_text(raw, "chkcreditcard"),
            expguide=_text(raw, "expguide"),
            accomcount=_text(raw, "accomcount"),
            usefee=_text(raw, "usefee"),
            extra=extra,
        )


@dataclass
class TourImage:
    """Gallery image (detailImage2)."""
    content_id: str
    serial_num: Optional[str] = None
    origin_img_url: Optional[str] = None
    small_image_url: Optional[str] = None
    img_name: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "TourImage":
        return cls(
            content_id=_text(raw, "contentid") or "",
            serial_num=_text(raw, "serialnum"),
            origin_img_url=_text(raw, "originimgurl"),
            small_image_url=_text(raw, "smallimageurl"),
            img_name=_text(raw, "imgname"),
        )


_HREF_PATTERN = re.compile(r"""href\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_HOST_PATTERN = re.compile(r"^[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+(:\d+)?$")


def _is_valid_http_url(url: str) -> bool:
    if any(ch.isspace() for ch in url):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    if parts.scheme not in ("http", "https"):
        return False
    return bool(parts.netloc) and bool(_HOST_PATTERN.match(parts.netloc))


def normalize_homepage_url(url: Optional[str]) -> Optional[str]:
    """Turn the upstream homepage field into a usable absolute URL.

    Handles anchors (``<a href="...">``), missing schemes and relative
    paths. Anything that cannot be made into a valid http(s) URL is None.

    >>> normalize_homepage_url("www.example.com")
    'https://www.example.com'
    >>> normalize_homepage_url("/path/to/page") is None
    True
    """
    if not url or not url.strip():
        return None

    candidate = url.strip()
    match = _HREF_PATTERN.search(candidate)
    if match:
        candidate = match.group(1).strip()

    if candidate.startswith("http://") or candidate.startswith("https://"):
        return candidate if _is_valid_http_url(candidate) else None

    if candidate.startswith("/"):
        return None

    normalized = f"https://{candidate}"
    return normalized if _is_valid_http_url(normalized) else None


def normalize_tel(tel: Optional[str]) -> Optional[str]:
    if not tel or not tel.strip():
        return None
    return tel.strip()
