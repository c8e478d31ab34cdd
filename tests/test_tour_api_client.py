"""Tests for the Tour API client against a mocked transport."""
import httpx
import pytest

from app.core.retry_policy import RetryPolicy
from app.exceptions import ErrorCategory, TourApiConfigurationError, TourApiError
from app.infrastructure.external_apis import http_client
from app.infrastructure.external_apis.tour_api_client import (
    TourApiClient,
    extract_items,
    parse_api_response,
)

NO_WAIT = RetryPolicy(max_attempts=3, initial_delay=0.0, max_delay=0.0)


def make_client(handler, test_settings, api_key="test-service-key", policy=NO_WAIT):
    client = http_client.build_client(test_settings, transport=httpx.MockTransport(handler))
    return TourApiClient(api_key=api_key, client=client, retry_policy=policy, settings=test_settings)


class TestExtractItems:

    def test_missing_or_empty(self):
        assert extract_items(None) == []
        assert extract_items({}) == []
        assert extract_items({"items": ""}) == []
        assert extract_items({"items": {"item": ""}}) == []

    def test_single_object_becomes_list(self):
        assert extract_items({"items": {"item": {"contentid": "1"}}}) == [{"contentid": "1"}]

    def test_list_is_kept(self):
        body = {"items": {"item": [{"contentid": "1"}, {"contentid": "2"}]}}
        assert [item["contentid"] for item in extract_items(body)] == ["1", "2"]

    def test_bare_list(self):
        assert extract_items({"items": [{"contentid": "1"}, "junk"]}) == [{"contentid": "1"}]


class TestParseApiResponse:

    def test_success_returns_body(self, envelope):
        body = parse_api_response(envelope(items=[{"contentid": "1"}], total_count=1))
        assert body["totalCount"] == 1

    def test_result_code_error(self, envelope):
        with pytest.raises(TourApiError) as exc_info:
            parse_api_response(envelope(result_code="30", result_msg="SERVICE_KEY_IS_NOT_REGISTERED_ERROR"))
        error = exc_info.value
        assert error.category == ErrorCategory.API
        assert error.status_code == 30
        assert "SERVICE_KEY_IS_NOT_REGISTERED_ERROR" in error.user_message

    @pytest.mark.parametrize("payload", [
        [],
        {},
        {"response": {}},
        {"response": {"header": {"resultCode": "0000"}}},
    ])
    def test_malformed_envelope_is_parse_error(self, payload):
        with pytest.raises(TourApiError) as exc_info:
            parse_api_response(payload)
        assert exc_info.value.category == ErrorCategory.PARSE


class TestTourApiClient:

    async def test_common_params_and_listing(self, test_settings, envelope, sample_listing_raw):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=envelope(items=[sample_listing_raw], total_count=45, num_of_rows=20))

        client = make_client(handler, test_settings)
        result = await client.list_by_region("1", "12", num_of_rows=20, page_no=1, arrange="C")

        request = seen[0]
        assert request.url.path.endswith("/areaBasedList2")
        params = request.url.params
        assert params["serviceKey"] == "test-service-key"
        assert params["MobileOS"] == "ETC"
        assert params["MobileApp"] == "MyTrip"
        assert params["_type"] == "json"
        assert params["areaCode"] == "1"
        assert params["contentTypeId"] == "12"
        assert params["arrange"] == "C"
        assert "sigunguCode" not in params

        assert [item.title for item in result.items] == ["경복궁"]
        assert result.pagination.total_count == 45
        assert result.pagination.num_of_rows == 20
        assert result.pagination.total_pages == 3

    async def test_pagination_falls_back_to_item_count(self, test_settings):
        payload = {
            "response": {
                "header": {"resultCode": "0000", "resultMsg": "OK"},
                "body": {"items": {"item": {"contentid": "1", "title": "a"}}},
            }
        }
        client = make_client(lambda request: httpx.Response(200, json=payload), test_settings)
        result = await client.search_by_keyword("해변", num_of_rows=10, page_no=2)
        assert len(result.items) == 1
        assert result.keyword == "해변"
        assert result.pagination.total_count == 1
        assert result.pagination.page_no == 2
        assert result.pagination.total_pages == 1

    async def test_missing_key_fails_before_network(self, test_settings):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        test_settings.TOUR_API_KEY = None
        test_settings.NEXT_PUBLIC_TOUR_API_KEY = None
        client = make_client(handler, test_settings, api_key=None)

        with pytest.raises(TourApiConfigurationError) as exc_info:
            await client.list_regions()
        assert calls == []
        assert not exc_info.value.is_retryable

    async def test_legacy_key_is_used(self, test_settings, envelope):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=envelope(items=[]))

        test_settings.TOUR_API_KEY = None
        test_settings.NEXT_PUBLIC_TOUR_API_KEY = "public-key"
        client = make_client(handler, test_settings, api_key=None)
        assert await client.list_regions() == []
        assert seen[0].url.params["serviceKey"] == "public-key"

    async def test_server_errors_are_retried(self, test_settings, envelope):
        responses = [httpx.Response(503, text="busy"), httpx.Response(502), httpx.Response(200, json=envelope(items=[{"code": "1", "name": "서울"}]))]
        calls = []

        def handler(request):
            calls.append(request)
            return responses[len(calls) - 1]

        client = make_client(handler, test_settings)
        areas = await client.list_regions()
        assert len(calls) == 3
        assert areas[0].name == "서울"

    async def test_gives_up_after_max_attempts(self, test_settings):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler, test_settings)
        with pytest.raises(TourApiError) as exc_info:
            await client.get_pet_info("126508")
        assert len(calls) == 3
        assert exc_info.value.category == ErrorCategory.NETWORK
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_client_errors_are_not_retried(self, test_settings):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(400, text="bad request")

        client = make_client(handler, test_settings)
        with pytest.raises(TourApiError) as exc_info:
            await client.get_detail("126508")
        assert len(calls) == 1
        assert exc_info.value.status_code == 400
        assert exc_info.value.category == ErrorCategory.API

    async def test_non_json_is_parse_error_without_retry(self, test_settings):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, text="<OpenAPI_ServiceResponse>SERVICE ERROR</OpenAPI_ServiceResponse>")

        client = make_client(handler, test_settings)
        with pytest.raises(TourApiError) as exc_info:
            await client.list_regions()
        assert len(calls) == 1
        assert exc_info.value.category == ErrorCategory.PARSE

    async def test_empty_pet_record_is_none(self, test_settings, envelope):
        client = make_client(lambda request: httpx.Response(200, json=envelope(items=None)), test_settings)
        assert await client.get_pet_info("126508") is None

    async def test_pet_record_is_parsed(self, test_settings, envelope):
        raw = {"contentid": "126508", "acmpyTypeCd": "동반가능", "acmpyPsblCpam": "소형견"}
        client = make_client(lambda request: httpx.Response(200, json=envelope(items=raw)), test_settings)
        info = await client.get_pet_info("126508")
        assert info.acmpy_type_cd == "동반가능"
        assert info.size_text == "소형견"

    async def test_empty_detail_is_not_found(self, test_settings, envelope):
        client = make_client(lambda request: httpx.Response(200, json=envelope(items=None)), test_settings)
        with pytest.raises(TourApiError) as exc_info:
            await client.get_detail("0")
        assert exc_info.value.status_code == 404

    async def test_detail_intro_and_images(self, test_settings, envelope):
        def handler(request):
            endpoint = request.url.path.rsplit("/", 1)[-1]
            if endpoint == "detailCommon2":
                return httpx.Response(200, json=envelope(items={"contentid": "1", "contenttypeid": "12", "title": "t", "homepage": "www.t.kr"}))
            if endpoint == "detailIntro2":
                assert request.url.params["contentTypeId"] == "12"
                return httpx.Response(200, json=envelope(items={"contentid": "1", "contenttypeid": "12", "usetime": "09:00~18:00"}))
            assert request.url.params["imageYN"] == "Y"
            return httpx.Response(200, json=envelope(items=[{"contentid": "1", "originimgurl": "http://img/1.jpg", "serialnum": "1_1"}]))

        client = make_client(handler, test_settings)
        detail = await client.get_detail("1")
        intro = await client.get_operating_info("1", detail.content_type_id)
        images = await client.get_images("1", num_of_rows=5)

        assert detail.homepage_url == "https://www.t.kr"
        assert intro.usetime == "09:00~18:00"
        assert images[0].origin_img_url == "http://img/1.jpg"


class TestRetryPolicy:

    def test_backoff_schedule(self):
        policy = RetryPolicy()
        assert [policy.backoff_delay(n) for n in range(4)] == [1.0, 2.0, 4.0, 4.0]

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    async def test_sleeps_between_attempts(self):
        delays = []
        attempts = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        async def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise TourApiError("down", category=ErrorCategory.NETWORK)
            return "ok"

        assert await RetryPolicy().run(flaky, sleep=fake_sleep) == "ok"
        assert delays == [1.0, 2.0]

    async def test_parse_errors_fail_immediately(self):
        attempts = []

        async def broken():
            attempts.append(1)
            raise TourApiError("bad json", category=ErrorCategory.PARSE)

        async def no_sleep(seconds):
            raise AssertionError("should not sleep")

        with pytest.raises(TourApiError):
            await RetryPolicy().run(broken, sleep=no_sleep)
        assert len(attempts) == 1

    def test_retryable_classification(self):
        assert TourApiError("x", category=ErrorCategory.NETWORK).is_retryable
        assert TourApiError("x", category=ErrorCategory.API).is_retryable
        assert TourApiError("x", category=ErrorCategory.API, status_code=500).is_retryable
        assert not TourApiError("x", category=ErrorCategory.API, status_code=404).is_retryable
        assert not TourApiError("x", category=ErrorCategory.PARSE).is_retryable
        assert not TourApiError("x", category=ErrorCategory.UNKNOWN).is_retryable


class TestSharedClient:

    async def test_shared_pool_lifecycle(self, monkeypatch):
        monkeypatch.setattr(http_client, "_shared_client", None)

        first = http_client.get_shared_client()
        assert http_client.get_shared_client() is first
        assert first.headers["Accept"] == "application/json"

        await http_client.close_shared_client()
        assert first.is_closed
        assert http_client._shared_client is None
        await http_client.close_shared_client()

    def test_build_client_uses_settings(self, test_settings):
        test_settings.API_TIMEOUT_SECONDS = 7.5
        client = http_client.build_client(test_settings)
        assert client.timeout.read == 7.5
