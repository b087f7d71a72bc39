# Terminal pipeline stage: one network round trip per invocation.

import asyncio
import logging
import time
from typing import Optional

import httpx

from contentstack_management.core.logging import log_pipeline_event
from contentstack_management.core.response import ContentstackResponse
from contentstack_management.exceptions import (
    ContentstackApiError,
    ContentstackTransportError,
    TransportErrorKind,
)
from contentstack_management.runtime.contexts import ExecutionContext
from contentstack_management.runtime.pipeline.handler import PipelineHandler
from contentstack_management.services.contentstack_service import AUTHTOKEN_HEADER, HttpClientLike


def classify_transport_error(error: httpx.RequestError) -> TransportErrorKind:
    """Maps an httpx request failure to the kind the retry policy reasons about."""
    if isinstance(error, httpx.TimeoutException):
        return TransportErrorKind.TIMEOUT
    if isinstance(error, (httpx.NetworkError, httpx.ProxyError)):
        return TransportErrorKind.CONNECTION
    return TransportErrorKind.PROTOCOL


def _buffer_exceeded(request: httpx.Request, limit: int) -> ContentstackTransportError:
    return ContentstackTransportError(
        f"Cannot write more bytes to the buffer than the configured maximum buffer size: {limit}",
        kind=TransportErrorKind.PROTOCOL,
        request_url=str(request.url),
    )


def _attempt_timed_out(request: httpx.Request, timeout: float) -> ContentstackTransportError:
    return ContentstackTransportError(
        f"Request did not complete within the configured timeout of {timeout}s",
        kind=TransportErrorKind.TIMEOUT,
        request_url=str(request.url),
    )


def _declared_length(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("Content-Length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class HttpHandler(PipelineHandler):
    """Sends the service's HTTP message and records the outcome in the context.

    Network failures are captured into the response context as
    ContentstackTransportError instead of being raised, so that outer
    handlers can decide whether to retry. Non-success statuses are recorded
    together with the ContentstackApiError describing them. This handler
    never retries.

    `options.timeout` bounds each attempt as a whole, from sending the
    request to the last byte of the body. httpx applies the same value to
    every connect, write and read step; the handler adds the overall
    deadline on top. In blocking calls the deadline is checked as body
    chunks arrive; in asyncio calls the attempt is cancelled when it passes.

    The httpx clients are owned by the ContentstackClient; this handler only
    uses them.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        async_http_client: httpx.AsyncClient,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(logger=logger)
        self.http_client = http_client
        self.async_http_client = async_http_client

    def _prepare_request(self, context: ExecutionContext, http_client: HttpClientLike) -> httpx.Request:
        request_context = context.request_context
        options = request_context.options
        service = request_context.service
        request = service.build_request(http_client, options)
        if service.use_authtoken and options.authtoken and AUTHTOKEN_HEADER not in request.headers:
            request.headers[AUTHTOKEN_HEADER] = options.authtoken
        self.logger.info(
            f"[{context.context_id}] Sending {request.method} request to {request.url} ({service.name})"
        )
        return request

    def _record_response(self, context: ExecutionContext, response: httpx.Response, body: bytes) -> None:
        result = ContentstackResponse.from_httpx(response, body)
        if result.is_success_status_code:
            context.response_context.set_response(result)
            context.request_context.service.on_response(result, context.request_context.options)
        else:
            context.response_context.set_error(ContentstackApiError.from_response(result), result)
        self.logger.info(f"[{context.context_id}] Received response with status {result.status_code} ({self.name})")

    def _record_transport_error(
        self, context: ExecutionContext, error: httpx.RequestError, request: httpx.Request
    ) -> None:
        kind = classify_transport_error(error)
        self.logger.warning(f"[{context.context_id}] {kind.value} error during request to {request.url}: {error}")
        transport_error = ContentstackTransportError(str(error) or error.__class__.__name__, kind, str(request.url))
        transport_error.__cause__ = error
        context.response_context.set_error(transport_error)

    def _record_failure(self, context: ExecutionContext, error: ContentstackTransportError) -> None:
        self.logger.warning(f"[{context.context_id}] {error}")
        context.response_context.set_error(error)

    def _record_elapsed(self, context: ExecutionContext, started: float) -> None:
        response_context = context.response_context
        log_pipeline_event(
            self.logger,
            context.context_id,
            self.name,
            "completed" if response_context.is_success else "failed",
            duration=time.monotonic() - started,
            attempt=response_context.attempts,
        )

    def _read_body(
        self, response: httpx.Response, request: httpx.Request, limit: int, started: float, timeout: float
    ) -> bytes:
        deadline = started + timeout
        declared = _declared_length(response)
        if declared is not None and declared > limit:
            raise _buffer_exceeded(request, limit)
        buffer = bytearray()
        for chunk in response.iter_bytes():
            if time.monotonic() > deadline:
                raise _attempt_timed_out(request, timeout)
            buffer.extend(chunk)
            if len(buffer) > limit:
                raise _buffer_exceeded(request, limit)
        if time.monotonic() > deadline:
            raise _attempt_timed_out(request, timeout)
        return bytes(buffer)

    async def _read_body_async(self, response: httpx.Response, request: httpx.Request, limit: int) -> bytes:
        declared = _declared_length(response)
        if declared is not None and declared > limit:
            raise _buffer_exceeded(request, limit)
        buffer = bytearray()
        async for chunk in response.aiter_bytes():
            buffer.extend(chunk)
            if len(buffer) > limit:
                raise _buffer_exceeded(request, limit)
        return bytes(buffer)

    def invoke_sync(self, context: ExecutionContext) -> ExecutionContext:
        self.throw_if_disposed()
        started = time.monotonic()
        options = context.request_context.options
        request = self._prepare_request(context, self.http_client)
        try:
            response = self.http_client.send(request, stream=True)
            try:
                body = self._read_body(
                    response, request, options.max_response_content_buffer_size, started, options.timeout_seconds
                )
            finally:
                response.close()
        except httpx.RequestError as e:
            self._record_transport_error(context, e, request)
        except ContentstackTransportError as e:
            self._record_failure(context, e)
        else:
            self._record_response(context, response, body)
        self._record_elapsed(context, started)
        return context

    async def invoke_async(self, context: ExecutionContext) -> ExecutionContext:
        self.throw_if_disposed()
        started = time.monotonic()
        options = context.request_context.options
        request = self._prepare_request(context, self.async_http_client)
        try:
            async with asyncio.timeout(options.timeout_seconds):
                response = await self.async_http_client.send(request, stream=True)
                try:
                    body = await self._read_body_async(response, request, options.max_response_content_buffer_size)
                finally:
                    await response.aclose()
        except httpx.RequestError as e:
            self._record_transport_error(context, e, request)
        except ContentstackTransportError as e:
            self._record_failure(context, e)
        except TimeoutError:
            self._record_failure(context, _attempt_timed_out(request, options.timeout_seconds))
        else:
            self._record_response(context, response, body)
        self._record_elapsed(context, started)
        return context
