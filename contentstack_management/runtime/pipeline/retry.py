"""Retry stage of the runtime pipeline.

The retry decision and the backoff schedule are defined once and drive both
call styles: ``RetryHandler`` builds a tenacity ``Retrying`` for blocking
calls and an ``AsyncRetrying`` for coroutine calls from the same keyword set.

Retried outcomes:
- transport errors of kind TIMEOUT or CONNECTION
- responses with status 408, 429, 500, 502, 503 or 504

Backoff is exponential (``retry_delay * 2 ** (attempt - 1)``), capped at
``max_retry_delay``, and the number of transport invocations never exceeds
``max_attempts``. When attempts run out the last context is returned as is;
the pipeline then surfaces its error.
"""

import abc
import logging
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from contentstack_management.exceptions import ContentstackTransportError, TransportErrorKind
from contentstack_management.options import ContentstackClientOptions
from contentstack_management.runtime.contexts import ExecutionContext
from contentstack_management.runtime.pipeline.handler import PipelineHandler

DEFAULT_RETRIABLE_STATUS_CODES: FrozenSet[int] = frozenset({408, 429, 500, 502, 503, 504})
DEFAULT_RETRIABLE_ERROR_KINDS: FrozenSet[TransportErrorKind] = frozenset(
    {TransportErrorKind.TIMEOUT, TransportErrorKind.CONNECTION}
)


class RetryPolicy(abc.ABC):
    """Decides whether a call outcome is worth another attempt."""

    retry_on_error: bool
    max_attempts: int
    retry_delay: float
    max_retry_delay: float

    @abc.abstractmethod
    def can_retry(self, context: ExecutionContext) -> bool:
        raise NotImplementedError


class DefaultRetryPolicy(RetryPolicy):
    """Retries connection failures, timeouts and overload statuses."""

    def __init__(
        self,
        retry_on_error: bool = True,
        max_attempts: int = 5,
        retry_delay: float = 0.3,
        max_retry_delay: float = 30.0,
        retriable_status_codes: FrozenSet[int] = DEFAULT_RETRIABLE_STATUS_CODES,
        retriable_error_kinds: FrozenSet[TransportErrorKind] = DEFAULT_RETRIABLE_ERROR_KINDS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.retry_on_error = retry_on_error
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay
        self.retriable_status_codes = frozenset(retriable_status_codes)
        self.retriable_error_kinds = frozenset(retriable_error_kinds)

    @classmethod
    def from_options(cls, options: ContentstackClientOptions) -> "DefaultRetryPolicy":
        return cls(
            retry_on_error=options.retry_on_error,
            max_attempts=options.max_attempts,
            retry_delay=options.retry_delay,
            max_retry_delay=options.max_retry_delay,
        )

    def retry_for_status(self, status_code: int) -> bool:
        return status_code in self.retriable_status_codes

    def retry_for_error(self, error: Exception) -> bool:
        return isinstance(error, ContentstackTransportError) and error.kind in self.retriable_error_kinds

    def can_retry(self, context: ExecutionContext) -> bool:
        if not self.retry_on_error:
            return False
        response_context = context.response_context
        if response_context.error is None:
            return False
        if response_context.http_response is not None:
            return self.retry_for_status(response_context.http_response.status_code)
        return self.retry_for_error(response_context.error)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__}(retry_on_error={self.retry_on_error}, "
            f"max_attempts={self.max_attempts}, retry_delay={self.retry_delay})>"
        )


class RetryHandler(PipelineHandler):
    """Re-invokes the inner handler while the retry policy allows it.

    Attributes:
        retry_policy (RetryPolicy): The policy consulted after every attempt.
    """

    def __init__(
        self,
        retry_policy: RetryPolicy,
        logger: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], None]] = None,
        async_sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        super().__init__(logger=logger)
        self.retry_policy = retry_policy
        self._sleep = sleep
        self._async_sleep = async_sleep

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        context = retry_state.args[0]
        outcome = context.response_context.error
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        self.logger.warning(
            f"[{context.context_id}] Attempt {retry_state.attempt_number}/{self.retry_policy.max_attempts} "
            f"failed with {outcome}; retrying in {wait:.2f}s"
        )

    def _give_up(self, retry_state: RetryCallState) -> ExecutionContext:
        context = retry_state.outcome.result()
        self.logger.error(
            f"[{context.context_id}] Giving up after {retry_state.attempt_number} attempts: "
            f"{context.response_context.error}"
        )
        return context

    def _retry_arguments(self) -> Dict[str, Any]:
        policy = self.retry_policy
        attempts = policy.max_attempts if policy.retry_on_error else 1
        return {
            "stop": stop_after_attempt(attempts),
            "wait": wait_exponential(multiplier=policy.retry_delay, max=policy.max_retry_delay),
            "retry": retry_if_result(policy.can_retry),
            "before_sleep": self._before_sleep,
            "retry_error_callback": self._give_up,
        }

    def _attempt(self, context: ExecutionContext) -> ExecutionContext:
        context.response_context.attempts += 1
        return self._require_inner().invoke_sync(context)

    async def _attempt_async(self, context: ExecutionContext) -> ExecutionContext:
        context.response_context.attempts += 1
        return await self._require_inner().invoke_async(context)

    def invoke_sync(self, context: ExecutionContext) -> ExecutionContext:
        self.throw_if_disposed()
        arguments = self._retry_arguments()
        if self._sleep is not None:
            arguments["sleep"] = self._sleep
        return Retrying(**arguments)(self._attempt, context)

    async def invoke_async(self, context: ExecutionContext) -> ExecutionContext:
        self.throw_if_disposed()
        arguments = self._retry_arguments()
        if self._async_sleep is not None:
            arguments["sleep"] = self._async_sleep
        return await AsyncRetrying(**arguments)(self._attempt_async, context)
