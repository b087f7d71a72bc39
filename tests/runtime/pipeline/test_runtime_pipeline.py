"""Tests for ContentstackRuntimePipeline."""

import logging
from unittest.mock import MagicMock

import pytest
from contentstack_management.core.response import ContentstackResponse
from contentstack_management.exceptions import (
    ContentstackClientDisposedError,
    ContentstackClientError,
    ContentstackServerError,
    ContentstackTransportError,
    TransportErrorKind,
)
from contentstack_management.runtime.contexts import ExecutionContext
from contentstack_management.runtime.pipeline.handler import PipelineHandler
from contentstack_management.runtime.pipeline.retry import DefaultRetryPolicy, RetryHandler
from contentstack_management.runtime.pipeline.runtime_pipeline import ContentstackRuntimePipeline

from tests.helpers.services import ScriptedHandler


class StackResponse(ContentstackResponse):
    pass


class RecordingHandler(PipelineHandler):
    """Pass-through stage appending its name to a shared list."""

    def __init__(self, label: str, order: list):
        super().__init__()
        self.label = label
        self.order = order

    def invoke_sync(self, context: ExecutionContext) -> ExecutionContext:
        self.order.append(self.label)
        return super().invoke_sync(context)

    async def invoke_async(self, context: ExecutionContext) -> ExecutionContext:
        self.order.append(self.label)
        return await super().invoke_async(context)


def build_pipeline(outcomes, retry_on_error: bool = True, max_attempts: int = 3):
    transport = ScriptedHandler(outcomes)
    retry = RetryHandler(
        DefaultRetryPolicy(retry_on_error=retry_on_error, max_attempts=max_attempts, retry_delay=0),
        sleep=lambda seconds: None,
    )
    return ContentstackRuntimePipeline([retry, transport], logger=logging.getLogger("tests.pipeline")), transport


def test_pipeline_requires_handlers():
    with pytest.raises(ValueError):
        ContentstackRuntimePipeline([])


def test_handlers_are_linked_outermost_first():
    pipeline, transport = build_pipeline([200])

    retry, inner = pipeline.handlers

    assert isinstance(retry, RetryHandler)
    assert retry.inner_handler is transport
    assert inner is transport
    assert transport.inner_handler is None
    assert repr(pipeline) == "<ContentstackRuntimePipeline(RetryHandler -> ScriptedHandler)>"


def test_add_handler_wraps_chain(execution_context):
    order: list = []
    pipeline, transport = build_pipeline([200])

    pipeline.add_handler(RecordingHandler("outer", order))
    pipeline.invoke_sync(execution_context)

    assert [handler.name for handler in pipeline.handlers] == ["RecordingHandler", "RetryHandler", "ScriptedHandler"]
    assert order == ["outer"]
    assert transport.calls == 1


def test_chain_runs_in_order(execution_context):
    order: list = []
    transport = ScriptedHandler([200])
    pipeline = ContentstackRuntimePipeline([RecordingHandler("a", order), RecordingHandler("b", order), transport])

    context = pipeline.invoke_sync(execution_context)

    assert order == ["a", "b"]
    assert context.response_context.is_success


def test_invoke_sync_returns_resolved_context(execution_context):
    pipeline, _ = build_pipeline([200])

    context = pipeline.invoke_sync(execution_context)

    assert context is execution_context
    assert context.response_context.http_response.status_code == 200


def test_invoke_sync_raises_recorded_error(execution_context):
    pipeline, transport = build_pipeline([401])

    with pytest.raises(ContentstackClientError) as exc_info:
        pipeline.invoke_sync(execution_context)

    assert exc_info.value.status_code == 401
    assert exc_info.value is execution_context.response_context.error
    assert transport.calls == 1


def test_invoke_sync_raises_last_failure_after_ceiling(execution_context):
    pipeline, transport = build_pipeline([TransportErrorKind.CONNECTION], max_attempts=3)

    with pytest.raises(ContentstackTransportError) as exc_info:
        pipeline.invoke_sync(execution_context)

    assert exc_info.value.kind is TransportErrorKind.CONNECTION
    assert transport.calls == 3


def test_context_without_response_is_an_error(execution_context):
    class SilentHandler(PipelineHandler):
        def invoke_sync(self, context: ExecutionContext) -> ExecutionContext:
            return context

    pipeline = ContentstackRuntimePipeline([SilentHandler()])

    with pytest.raises(RuntimeError, match="without a response"):
        pipeline.invoke_sync(execution_context)


@pytest.mark.asyncio
async def test_invoke_async_casts_response(execution_context):
    pipeline, transport = build_pipeline([503, 200])

    response = await pipeline.invoke_async(execution_context, StackResponse)

    assert isinstance(response, StackResponse)
    assert response.status_code == 200
    assert transport.calls == 2


@pytest.mark.asyncio
async def test_invoke_async_defaults_to_contentstack_response(execution_context):
    pipeline, _ = build_pipeline([200])

    response = await pipeline.invoke_async(execution_context)

    assert type(response) is ContentstackResponse


@pytest.mark.asyncio
async def test_invoke_async_raises_recorded_error(execution_context):
    pipeline, transport = build_pipeline([429], max_attempts=2)

    with pytest.raises(ContentstackServerError):
        await pipeline.invoke_async(execution_context)

    assert transport.calls == 2


def test_dispose_is_idempotent_and_cascades(execution_context):
    pipeline, transport = build_pipeline([200])
    retry = pipeline.handler
    transport.dispose = MagicMock(wraps=transport.dispose)

    pipeline.dispose()
    pipeline.dispose()

    transport.dispose.assert_called_once()
    with pytest.raises(ContentstackClientDisposedError):
        retry.throw_if_disposed()
    with pytest.raises(ContentstackClientDisposedError):
        pipeline.invoke_sync(execution_context)
    with pytest.raises(ContentstackClientDisposedError):
        pipeline.add_handler(RecordingHandler("late", []))
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_invoke_async_after_dispose(execution_context):
    pipeline, transport = build_pipeline([200])
    pipeline.dispose()

    with pytest.raises(ContentstackClientDisposedError):
        await pipeline.invoke_async(execution_context)
    assert transport.calls == 0
