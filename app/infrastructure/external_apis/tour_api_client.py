"""Korea Tourism Organization API client (KorService2)."""
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.application.ports.tour_api import TourListResult
from app.config import Settings, settings as default_settings
from app.constants import RESPONSE_TYPE_JSON, RESULT_CODE_SUCCESS
from app.core.retry_policy import RetryPolicy
from app.domain.entities.tour import (
    AreaCode,
    PetTourInfo,
    TourDetail,
    TourImage,
    TourIntro,
    TourItem,
)
from app.domain.value_objects.pagination import PaginationInfo
from app.exceptions import ErrorCategory, TourApiConfigurationError, TourApiError
from app.infrastructure.external_apis.http_client import get_shared_client

logger = logging.getLogger(__name__)


def extract_items(body: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Normalize ``body.items`` to a list of records.

    Upstream sends ``items`` as a missing key, an empty string, a dict with
    ``item`` holding a single object or a list, or (rarely) the list itself.
    """
    if not body:
        return []
    items = body.get("items")
    if not items:
        return []
    if isinstance(items, list):
        return [item for item in items if isinstance(item, dict)]
    if isinstance(items, dict):
        item = items.get("item")
        if item is None or item == "":
            return []
        if isinstance(item, list):
            return [entry for entry in item if isinstance(entry, dict)]
        if isinstance(item, dict):
            return [item]
    return []


def _as_int(value: Any) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def parse_api_response(payload: Any) -> Dict[str, Any]:
    """Validate the ``response.header`` / ``response.body`` envelope.

    Returns the body. Raises ``TourApiError`` (API) for a non-success
    resultCode and (PARSE) for a malformed envelope.
    """
    if not isinstance(payload, dict):
        raise TourApiError(
            "Unexpected response shape",
            category=ErrorCategory.PARSE,
            response=payload,
        )

    response = payload.get("response")
    if not isinstance(response, dict):
        raise TourApiError(
            "Response envelope missing",
            category=ErrorCategory.PARSE,
            response=payload,
        )

    header = response.get("header")
    if not isinstance(header, dict):
        raise TourApiError(
            "Response header missing",
            category=ErrorCategory.PARSE,
            response=payload,
        )

    result_code = str(header.get("resultCode", "")).strip()
    if result_code != RESULT_CODE_SUCCESS:
        result_msg = header.get("resultMsg") or "Unknown error"
        try:
            status_code: Optional[int] = int(result_code)
        except ValueError:
            status_code = None
        raise TourApiError(
            f"API Error: {result_msg}",
            category=ErrorCategory.API,
            status_code=status_code,
            response=payload,
        )

    body = response.get("body")
    if not isinstance(body, dict):
        raise TourApiError(
            "Response body missing",
            category=ErrorCategory.PARSE,
            response=payload,
        )
    return body


def build_pagination(body: Dict[str, Any], item_count: int, num_of_rows: int, page_no: int) -> PaginationInfo:
    """Pagination from the body, falling back to the request and item count."""
    rows = _as_int(body.get("numOfRows")) or num_of_rows
    page = _as_int(body.get("pageNo")) or page_no
    total = _as_int(body.get("totalCount"))
    if total is None:
        total = item_count
    return PaginationInfo.calculate(num_of_rows=rows, page_no=page, total_count=total)


class TourApiClient:
    """Async client for the public Tour API.

    Every call goes through ``RetryPolicy``; transport, HTTP, envelope and
    JSON failures all surface as ``TourApiError``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self.api_key = api_key or self.settings.get_tour_api_key()
        self.base_url = self.settings.TOUR_API_BASE_URL.rstrip("/")
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self._client = client
        if not self.api_key:
            logger.warning("TOUR_API_KEY not set")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = get_shared_client()
        return self._client

    def _build_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        query = {
            "serviceKey": self.api_key,
            "MobileOS": self.settings.TOUR_API_MOBILE_OS,
            "MobileApp": self.settings.TOUR_API_MOBILE_APP,
            "_type": RESPONSE_TYPE_JSON,
        }
        for key, value in params.items():
            if value is None or value == "":
                continue
            query[key] = value
        return query

    async def _request_once(self, endpoint: str, query: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = await self.client.get(url, params=query)
        except httpx.RequestError as e:
            raise TourApiError(
                f"Network error calling {endpoint}: {e}",
                category=ErrorCategory.NETWORK,
                cause=e,
            ) from e

        if not response.is_success:
            preview = response.text[:self.settings.RESPONSE_TEXT_PREVIEW_LENGTH]
            raise TourApiError(
                f"HTTP Error: {response.status_code} {response.reason_phrase}",
                category=ErrorCategory.API,
                status_code=response.status_code,
                response=preview,
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            preview = response.text[:self.settings.RESPONSE_TEXT_PREVIEW_LENGTH]
            raise TourApiError(
                f"Failed to parse response from {endpoint}",
                category=ErrorCategory.PARSE,
                response=preview,
                cause=e,
            ) from e

        return parse_api_response(payload)

    async def _request(self, endpoint: str, **params: Any) -> Dict[str, Any]:
        """Call ``endpoint`` with retries and return the validated body."""
        if not self.api_key:
            raise TourApiConfigurationError(
                "TOUR_API_KEY is not configured. Set it in the environment or .env file."
            )

        query = self._build_params(params)
        logger.debug(f"Tour API request: {endpoint} {params}")
        try:
            return await self.retry_policy.run(lambda: self._request_once(endpoint, query))
        except TourApiError as e:
            logger.error(f"Tour API {endpoint} failed: {e.category.value} {e.message}")
            raise

    async def list_regions(self, parent_region: Optional[str] = None) -> List[AreaCode]:
        """시/도 codes, or 시/군/구 codes when ``parent_region`` is given."""
        body = await self._request(
            "areaCode2",
            areaCode=parent_region,
            numOfRows=100,
            pageNo=1,
        )
        return [AreaCode.from_api(raw) for raw in extract_items(body)]

    async def list_by_region(
        self,
        area_code: str,
        content_type_id: str,
        num_of_rows: int = 10,
        page_no: int = 1,
        arrange: str = "A",
        sigungu_code: Optional[str] = None,
    ) -> TourListResult:
        body = await self._request(
            "areaBasedList2",
            areaCode=area_code,
            sigunguCode=sigungu_code,
            contentTypeId=content_type_id,
            numOfRows=num_of_rows,
            pageNo=page_no,
            arrange=arrange,
        )
        raw_items = extract_items(body)
        return TourListResult(
            items=[TourItem.from_api(raw) for raw in raw_items],
            pagination=build_pagination(body, len(raw_items), num_of_rows, page_no),
        )

    async def search_by_keyword(
        self,
        keyword: str,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        num_of_rows: int = 10,
        page_no: int = 1,
        arrange: str = "A",
    ) -> TourListResult:
        body = await self._request(
            "searchKeyword2",
            keyword=keyword,
            areaCode=area_code,
            contentTypeId=content_type_id,
            numOfRows=num_of_rows,
            pageNo=page_no,
            arrange=arrange,
        )
        raw_items = extract_items(body)
        return TourListResult(
            items=[TourItem.from_api(raw) for raw in raw_items],
            pagination=build_pagination(body, len(raw_items), num_of_rows, page_no),
            keyword=keyword,
        )

    async def get_detail(self, content_id: str) -> TourDetail:
        body = await self._request("detailCommon2", contentId=content_id)
        items = extract_items(body)
        if not items:
            raise TourApiError(
                f"관광지 정보를 찾을 수 없습니다. (contentId: {content_id})",
                category=ErrorCategory.API,
                status_code=404,
            )
        return TourDetail.from_api(items[0])

    async def get_operating_info(self, content_id: str, content_type_id: str) -> TourIntro:
        body = await self._request(
            "detailIntro2",
            contentId=content_id,
            contentTypeId=content_type_id,
        )
        items = extract_items(body)
        if not items:
            return TourIntro(content_id=content_id, content_type_id=content_type_id)
        return TourIntro.from_api(items[0])

    async def get_images(self, content_id: str, num_of_rows: int = 10, page_no: int = 1) -> List[TourImage]:
        body = await self._request(
            "detailImage2",
            contentId=content_id,
            imageYN="Y",
            numOfRows=num_of_rows,
            pageNo=page_no,
        )
        return [TourImage.from_api(raw) for raw in extract_items(body)]

    async def get_pet_info(self, content_id: str) -> Optional[PetTourInfo]:
        body = await self._request("detailPetTour2", contentId=content_id)
        items = extract_items(body)
        if not items:
            return None
        return PetTourInfo.from_api(items[0])
