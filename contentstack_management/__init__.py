from contentstack_management.contentstack_client import VERSION, ContentstackClient
from contentstack_management.core.response import ContentstackResponse
from contentstack_management.core.serialization import (
    ContentstackSerializer,
    JsonConverter,
    SerializerSettings,
    UtcDatetime,
    json_converter,
)
from contentstack_management.exceptions import (
    ContentstackApiError,
    ContentstackClientDisposedError,
    ContentstackClientError,
    ContentstackError,
    ContentstackSerializationError,
    ContentstackServerError,
    ContentstackTransportError,
    TransportErrorKind,
)
from contentstack_management.options import ContentstackClientOptions, ProxyCredentials
from contentstack_management.services import ContentstackService, LoginCredentials

__version__ = VERSION

__all__ = [
    "VERSION",
    "ContentstackApiError",
    "ContentstackClient",
    "ContentstackClientDisposedError",
    "ContentstackClientError",
    "ContentstackClientOptions",
    "ContentstackError",
    "ContentstackResponse",
    "ContentstackSerializationError",
    "ContentstackSerializer",
    "ContentstackServerError",
    "ContentstackService",
    "ContentstackTransportError",
    "JsonConverter",
    "LoginCredentials",
    "ProxyCredentials",
    "SerializerSettings",
    "TransportErrorKind",
    "UtcDatetime",
    "json_converter",
]
