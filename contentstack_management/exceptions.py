# Contentstack client exceptions

import json
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from contentstack_management.core.response import ContentstackResponse

# Statuses the API uses for overload, rate limiting and gateway timeouts
SERVER_ERROR_STATUS_CODES = frozenset({408, 429})


class ContentstackError(Exception):
    """Base exception for all Contentstack client errors."""

    def __init__(self, *args, status_code: int | None = None, detail: str | None = None):
        super().__init__(*args)
        self.status_code = status_code
        # Use the first arg as detail if detail kwarg is not provided and args exist
        self.detail = detail or (args[0] if args else None)


class TransportErrorKind(str, Enum):
    """Failure classes of a network exchange that produced no HTTP status."""

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    PROTOCOL = "protocol"


class ContentstackTransportError(ContentstackError):
    """Raised when a request fails before any HTTP status is obtained."""

    def __init__(self, detail: str, kind: TransportErrorKind, request_url: Optional[str] = None):
        super().__init__(detail, detail=detail)
        self.kind = kind
        self.request_url = request_url

    def __str__(self) -> str:
        return f"{self.kind.value} error: {self.detail}"


class ContentstackApiError(ContentstackError):
    """Raised when the API answers with a non-success HTTP status.

    Attributes:
        status_code: The HTTP status code.
        reason_phrase: The HTTP reason phrase.
        error_message: The `error_message` field of the error body, if any.
        error_code: The `error_code` field of the error body, if any.
        errors: The `errors` field of the error body (field name -> messages).
        response: The response that carried the error.
    """

    def __init__(
        self,
        detail: str,
        status_code: int,
        reason_phrase: str = "",
        error_message: Optional[str] = None,
        error_code: Optional[int] = None,
        errors: Optional[Dict[str, Any]] = None,
        response: Optional["ContentstackResponse"] = None,
    ):
        super().__init__(detail, status_code=status_code, detail=detail)
        self.reason_phrase = reason_phrase
        self.error_message = error_message
        self.error_code = error_code
        self.errors = errors or {}
        self.response = response

    def __str__(self) -> str:
        return f"{self.status_code} {self.reason_phrase}: {self.detail}".strip()

    @staticmethod
    def from_response(response: "ContentstackResponse") -> "ContentstackApiError":
        """Builds the error matching the response status from a Contentstack error body."""
        error_message: Optional[str] = None
        error_code: Optional[int] = None
        errors: Optional[Dict[str, Any]] = None
        try:
            body = json.loads(response.text) if response.body else None
        except ValueError:
            body = None
        if isinstance(body, dict):
            error_message = body.get("error_message")
            error_code = body.get("error_code")
            errors = body.get("errors")

        detail = error_message or response.text or response.reason_phrase or f"HTTP {response.status_code}"
        status = response.status_code
        if status >= 500 or status in SERVER_ERROR_STATUS_CODES:
            error_class: type[ContentstackApiError] = ContentstackServerError
        elif 400 <= status < 500:
            error_class = ContentstackClientError
        else:
            error_class = ContentstackApiError
        return error_class(
            detail,
            status_code=status,
            reason_phrase=response.reason_phrase,
            error_message=error_message,
            error_code=error_code,
            errors=errors,
            response=response,
        )


class ContentstackServerError(ContentstackApiError):
    """Overload, rate limit or server failure status (408, 429, 5xx)."""

    pass


class ContentstackClientError(ContentstackApiError):
    """Malformed, unauthorized or not-found request status (other 4xx)."""

    pass


class ContentstackClientDisposedError(ContentstackError, RuntimeError):
    """Raised when a client or pipeline is used after it has been disposed."""

    def __init__(self, object_name: str):
        super().__init__(f"Cannot access a disposed object: {object_name}", detail=object_name)
        self.object_name = object_name


class ContentstackSerializationError(ContentstackError, ValueError):
    """Raised when a payload cannot be mapped to or from the requested type."""

    pass
