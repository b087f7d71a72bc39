import os
from typing import Callable, Iterator, List

import httpx
import pytest
from contentstack_management.contentstack_client import ContentstackClient
from contentstack_management.options import ContentstackClientOptions
from contentstack_management.runtime.contexts import ExecutionContext, RequestContext

from tests.helpers.services import PingService

# Variables read by contentstack_management.settings.Settings
CONTENTSTACK_ENV_PREFIX = "CONTENTSTACK_"


@pytest.fixture(autouse=True)
def isolated_environment() -> Iterator[None]:
    """AUTOUSE: Clears CONTENTSTACK_* variables for the test and restores the environment afterwards."""
    original_environ = os.environ.copy()
    for key in list(os.environ):
        if key.startswith(CONTENTSTACK_ENV_PREFIX):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_environ)


@pytest.fixture
def options() -> ContentstackClientOptions:
    """Options with retries enabled and no backoff wait."""
    return ContentstackClientOptions(authtoken="test-authtoken", max_attempts=3, retry_delay=0)


@pytest.fixture
def execution_context(options: ContentstackClientOptions) -> ExecutionContext:
    return ExecutionContext(request_context=RequestContext(options=options, service=PingService()))


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(
    options: ContentstackClientOptions, recorded_requests: List[httpx.Request]
) -> Iterator[Callable[..., ContentstackClient]]:
    """Factory building clients whose sync and async transports run the given handler.

    The handler receives each httpx.Request and returns an httpx.Response or raises an
    httpx error. Every request is appended to recorded_requests.
    """
    clients: List[ContentstackClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response], **option_fields) -> ContentstackClient:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        client = ContentstackClient(
            options,
            transport=httpx.MockTransport(recording_handler),
            async_transport=httpx.MockTransport(recording_handler),
            **option_fields,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.dispose()
