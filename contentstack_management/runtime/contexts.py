# Per-call state carried through the runtime pipeline.

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from contentstack_management.core.response import ContentstackResponse
from contentstack_management.exceptions import ContentstackError
from contentstack_management.options import ContentstackClientOptions
from contentstack_management.services.contentstack_service import ContentstackService


class RequestContext(BaseModel):
    """Request side of a call. Read-only once built."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    options: ContentstackClientOptions = Field()
    service: ContentstackService = Field()
    context_id: UUID = Field(default_factory=uuid4)


class ResponseContext(BaseModel):
    """Response side of a call.

    Each transport attempt replaces the slot wholesale: either a response, an
    error, or a response together with the error it describes.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_response: Optional[ContentstackResponse] = Field(default=None)
    error: Optional[ContentstackError] = Field(default=None)
    attempts: int = Field(default=0)

    def set_response(self, response: ContentstackResponse) -> None:
        self.http_response = response
        self.error = None

    def set_error(self, error: ContentstackError, response: Optional[ContentstackResponse] = None) -> None:
        self.http_response = response
        self.error = error

    @property
    def is_success(self) -> bool:
        return self.error is None and self.http_response is not None


class ExecutionContext(BaseModel):
    """Carrier of one call's request and response state."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request_context: RequestContext = Field()
    response_context: ResponseContext = Field(default_factory=ResponseContext)

    @property
    def context_id(self) -> str:
        return str(self.request_context.context_id)
