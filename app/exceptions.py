"""
Exception classes for the MyTrip backend
"""
from enum import Enum
from typing import Any, Optional


class MyTripException(Exception):
    """Base exception for the MyTrip backend"""
    pass


class AuthenticationError(MyTripException):
    """Missing or invalid user identity"""
    pass


class BookmarkError(MyTripException):
    """Bookmark store failure"""
    pass


class ErrorCategory(str, Enum):
    """Coarse failure categories for upstream calls."""
    NETWORK = "network"
    API = "api"
    PARSE = "parse"
    UNKNOWN = "unknown"


# User-facing messages shown by the frontend, one per category
USER_MESSAGES = {
    ErrorCategory.NETWORK: "네트워크 연결에 실패했습니다. 인터넷 연결을 확인해주세요.",
    ErrorCategory.API: "API 호출 중 오류가 발생했습니다.",
    ErrorCategory.PARSE: "응답 데이터를 파싱하는 중 오류가 발생했습니다.",
    ErrorCategory.UNKNOWN: "알 수 없는 오류가 발생했습니다.",
}


class TourApiError(MyTripException):
    """Normalized failure of a Tour API call.

    Carries the category, the upstream status code when known (HTTP status or
    the numeric resultCode of the envelope), the raw response for debugging
    and the original exception as ``cause``.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.API,
        status_code: Optional[int] = None,
        response: Any = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = ErrorCategory(category)
        self.status_code = status_code
        self.response = response
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def user_message(self) -> str:
        """Localized message for display."""
        if self.category == ErrorCategory.API and self.message:
            return self.message
        return USER_MESSAGES[self.category]

    @property
    def is_retryable(self) -> bool:
        """Network failures and server-side (5xx or unknown status) API failures."""
        if self.category == ErrorCategory.NETWORK:
            return True
        if self.category == ErrorCategory.API:
            return self.status_code is None or self.status_code >= 500
        return False

    def __repr__(self) -> str:
        return (
            f"TourApiError(category={self.category.value!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class TourApiConfigurationError(TourApiError):
    """Service key missing; raised before any network call and never retried."""

    def __init__(self, message: str):
        super().__init__(message, category=ErrorCategory.UNKNOWN)

    @property
    def user_message(self) -> str:
        return self.message

    @property
    def is_retryable(self) -> bool:
        return False
