from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from contentstack_management.core.serialization import ContentstackSerializer

ResponseT = TypeVar("ResponseT", bound="ContentstackResponse")


class ContentstackResponse(BaseModel):
    """One completed HTTP exchange with the Content Management API."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field()
    reason_phrase: str = Field(default="")
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = Field(default=b"")
    url: Optional[str] = Field(default=None)

    @classmethod
    def from_httpx(cls, response: httpx.Response, body: bytes) -> "ContentstackResponse":
        """Builds a response from an httpx response whose body was read separately."""
        return cls(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=dict(response.headers),
            body=body,
            url=str(response.request.url),
        )

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_success_status_code(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Returns the decoded JSON body, or None for an empty body."""
        from contentstack_management.core.serialization import ContentstackSerializer

        return ContentstackSerializer().loads(self.body)

    def deserialize(self, value_type: Type[Any], serializer: "ContentstackSerializer") -> Any:
        """Maps the body to value_type under the given serializer's settings."""
        return serializer.loads(self.body, value_type)

    def cast(self, response_type: Type[ResponseT]) -> ResponseT:
        """Re-wraps this response as response_type, a ContentstackResponse subclass."""
        if isinstance(self, response_type):
            return self
        if not (isinstance(response_type, type) and issubclass(response_type, ContentstackResponse)):
            raise TypeError(f"{response_type!r} is not a ContentstackResponse type")
        return response_type.model_validate(self.model_dump())
