# Client facade for the Contentstack Content Management API.

import asyncio
import platform
from typing import Any, Dict, Optional, Sequence, Type, TypeVar

import httpx

from contentstack_management.core.logging import get_client_logger
from contentstack_management.core.response import ContentstackResponse
from contentstack_management.core.serialization import (
    ContentstackSerializer,
    JsonConverter,
    SerializerSettings,
    discover_converters,
)
from contentstack_management.exceptions import ContentstackClientDisposedError
from contentstack_management.models.user import User
from contentstack_management.options import ContentstackClientOptions
from contentstack_management.runtime.contexts import ExecutionContext, RequestContext
from contentstack_management.runtime.pipeline import (
    ContentstackRuntimePipeline,
    DefaultRetryPolicy,
    HttpHandler,
    RetryHandler,
)
from contentstack_management.services.contentstack_service import ContentstackService

VERSION = "0.1.0"
CLIENT_NAME = "contentstack-management-python"
X_USER_AGENT_HEADER = "X-User-Agent"
USER_AGENT_HEADER = "User-Agent"

ResultT = TypeVar("ResultT")


class ContentstackClient:
    """Entry point for calls against the Content Management API.

    The client owns its configuration, its serializer, the httpx clients used
    as transport and the runtime pipeline. Use it as a context manager (or
    async context manager) so that the transport is released on every exit
    path; `dispose()` and `aclose()` may also be called directly and more
    than once.

    Example:
        with ContentstackClient(authtoken="...") as client:
            response = client.user().get_user()

    Attributes:
        options (ContentstackClientOptions): The immutable configuration.
        serializer_settings (SerializerSettings): Policies used for request and response payloads.
        serializer (ContentstackSerializer): Serializer built from serializer_settings.
        logger (logging.Logger): Destination of client logs; silent when logging is disabled.
        pipeline (ContentstackRuntimePipeline): The handler chain calls run through.
    """

    def __init__(
        self,
        options: Optional[ContentstackClientOptions] = None,
        *,
        converters: Optional[Sequence[JsonConverter]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
        **option_fields: Any,
    ):
        """
        Initializes the client.

        Args:
            options: The configuration. When omitted it is built from option_fields.
            converters: Converters added after the ones registered with @json_converter.
            transport: Transport for the blocking httpx client, mainly for tests.
            async_transport: Transport for the asyncio httpx client, mainly for tests.
            **option_fields: ContentstackClientOptions fields, e.g. authtoken="..." or timeout=10.
                Combined with options, they produce a modified copy of it.
        """
        if options is None:
            options = ContentstackClientOptions(**option_fields)
        elif option_fields:
            options = options.with_changes(**option_fields)
        self.options = options
        self._disposed = False
        self._async_client_used = False
        self._pending_close: Optional[asyncio.Task] = None

        self.logger = get_client_logger(options.disable_logging, type(self))

        self.serializer_settings = SerializerSettings(
            date_parse_handling=False,
            date_format="iso",
            datetime_zone_utc=True,
            omit_null=True,
            converters=[*discover_converters(), *(converters or [])],
        )
        self.serializer = ContentstackSerializer(self.serializer_settings)

        transport_settings = self._transport_settings()
        self._http_client = httpx.Client(transport=transport, **transport_settings)
        self._async_http_client = httpx.AsyncClient(transport=async_transport, **transport_settings)

        self.pipeline = self._build_pipeline()
        self.logger.debug(f"Initialized ContentstackClient for {options.base_url}")

    @property
    def user_agent(self) -> str:
        return f"{CLIENT_NAME}/{VERSION} Python/{platform.python_version()}"

    @property
    def x_user_agent(self) -> str:
        return f"{CLIENT_NAME}/{VERSION}"

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def _transport_settings(self) -> Dict[str, Any]:
        """Keyword arguments shared by the blocking and asyncio httpx clients."""
        return {
            "headers": {
                X_USER_AGENT_HEADER: self.x_user_agent,
                USER_AGENT_HEADER: self.user_agent,
            },
            "timeout": httpx.Timeout(self.options.timeout_seconds),
            "proxy": self.options.get_proxy_url(),
        }

    def _build_pipeline(self) -> ContentstackRuntimePipeline:
        handlers = [
            RetryHandler(DefaultRetryPolicy.from_options(self.options), logger=self.logger),
            HttpHandler(self._http_client, self._async_http_client, logger=self.logger),
        ]
        return ContentstackRuntimePipeline(handlers, logger=self.logger)

    def _throw_if_disposed(self) -> None:
        if self._disposed:
            raise ContentstackClientDisposedError(f"{type(self).__module__}.{type(self).__qualname__}")

    def _new_context(self, request: ContentstackService) -> ExecutionContext:
        return ExecutionContext(request_context=RequestContext(options=self.options, service=request))

    def invoke_sync(self, request: ContentstackService) -> ContentstackResponse:
        """
        Sends the request and blocks until it completes, retries included.

        Args:
            request: The logical service request.

        Returns:
            The successful response.

        Raises:
            ContentstackClientDisposedError: If the client was disposed. No I/O is attempted.
            ContentstackTransportError: If the network exchange failed.
            ContentstackApiError: If the API answered with a non-success status.
        """
        self._throw_if_disposed()
        context = self.pipeline.invoke_sync(self._new_context(request))
        response = context.response_context.http_response
        assert response is not None
        return response

    async def invoke_async(
        self,
        request: ContentstackService,
        response_type: Type[ResultT] = ContentstackResponse,  # type: ignore[assignment]
    ) -> ResultT:
        """
        Sends the request on the running event loop.

        Args:
            request: The logical service request.
            response_type: A ContentstackResponse subclass to cast the response to, or
                any other type to deserialize the response body into.

        Returns:
            The response or the deserialized body.

        Raises:
            ContentstackClientDisposedError: If the client was disposed. No I/O is attempted.
            ContentstackSerializationError: If the body does not fit response_type.
        """
        self._throw_if_disposed()
        self._async_client_used = True
        context = self._new_context(request)
        if isinstance(response_type, type) and issubclass(response_type, ContentstackResponse):
            return await self.pipeline.invoke_async(context, response_type)
        response = await self.pipeline.invoke_async(context)
        return response.deserialize(response_type, self.serializer)

    def user(self) -> User:
        """User session calls: login, logout and the current user."""
        return User(self)

    # --- Disposal ---

    def _release_async_client(self) -> None:
        if self._async_http_client.is_closed or not self._async_client_used:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._pending_close = loop.create_task(self._async_http_client.aclose())
            return
        # Pooled connections may belong to an event loop that has already closed
        try:
            asyncio.run(self._async_http_client.aclose())
        except RuntimeError as e:
            self.logger.warning(f"Could not release async connections on dispose: {e}")

    def dispose(self) -> None:
        """Releases the transport and the pipeline. Calling it again has no effect."""
        if self._disposed:
            return
        self._disposed = True
        try:
            self._http_client.close()
            self._release_async_client()
        finally:
            self.pipeline.dispose()
        self.logger.debug("Disposed ContentstackClient")

    close = dispose

    async def aclose(self) -> None:
        """Releases the transport and the pipeline from async code. Calling it again has no effect."""
        if self._disposed:
            return
        self._disposed = True
        try:
            self._http_client.close()
            await self._async_http_client.aclose()
        finally:
            self.pipeline.dispose()
        self.logger.debug("Disposed ContentstackClient")

    def __enter__(self) -> "ContentstackClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    async def __aenter__(self) -> "ContentstackClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "open"
        return f"<ContentstackClient {self.options.base_url} ({state})>"
