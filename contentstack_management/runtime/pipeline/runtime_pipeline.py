# Ordered handler chain with blocking and asyncio entry points.

import logging
from typing import List, Optional, Sequence, Type

from contentstack_management.core.response import ContentstackResponse, ResponseT
from contentstack_management.exceptions import ContentstackClientDisposedError
from contentstack_management.runtime.contexts import ExecutionContext
from contentstack_management.runtime.pipeline.handler import PipelineHandler


class ContentstackRuntimePipeline:
    """
    Owns the handler chain every call runs through.

    Handlers are given outermost first; each one wraps the next, and the last
    one talks to the network. Both entry points run the same chain. If the
    chain resolves with an error recorded in the context, that error is raised
    to the caller unchanged.

    Attributes:
        handler (PipelineHandler): The outermost handler.
        logger (logging.Logger): The logger instance for this pipeline.
    """

    def __init__(self, handlers: Sequence[PipelineHandler], logger: Optional[logging.Logger] = None):
        """
        Initializes the pipeline and links the handlers into a chain.

        Args:
            handlers: The handlers, outermost first. Must not be empty.
            logger: The logger used by the pipeline.

        Raises:
            ValueError: If no handler is given.
        """
        if not handlers:
            raise ValueError("ContentstackRuntimePipeline requires at least one handler")
        self.logger = logger or logging.getLogger(__name__)
        self._disposed = False
        chain = list(handlers)
        for outer, inner in zip(chain, chain[1:]):
            outer.inner_handler = inner
        self.handler: PipelineHandler = chain[0]
        self.logger.debug(f"Built runtime pipeline {self!r}")

    @property
    def handlers(self) -> List[PipelineHandler]:
        """The chain, outermost first."""
        chain = []
        current: Optional[PipelineHandler] = self.handler
        while current is not None:
            chain.append(current)
            current = current.inner_handler
        return chain

    def add_handler(self, handler: PipelineHandler) -> None:
        """Wraps the current chain with handler, making it the outermost stage."""
        self._throw_if_disposed()
        handler.inner_handler = self.handler
        self.handler = handler

    def _throw_if_disposed(self) -> None:
        if self._disposed:
            raise ContentstackClientDisposedError(self.__class__.__name__)

    def _raise_for_error(self, context: ExecutionContext) -> None:
        error = context.response_context.error
        if error is not None:
            self.logger.error(
                f"[{context.context_id}] Request {context.request_context.service.name} failed after "
                f"{context.response_context.attempts} attempt(s): {error}"
            )
            raise error
        if context.response_context.http_response is None:
            raise RuntimeError(f"[{context.context_id}] Pipeline finished without a response")

    def invoke_sync(self, context: ExecutionContext) -> ExecutionContext:
        """
        Runs the chain on the calling thread and blocks until it resolves.

        Args:
            context: The context of the call.

        Returns:
            The resolved context, carrying a successful response.

        Raises:
            ContentstackError: The error recorded by the chain, if any.
            ContentstackClientDisposedError: If the pipeline was disposed.
        """
        self._throw_if_disposed()
        context = self.handler.invoke_sync(context)
        self._raise_for_error(context)
        return context

    async def invoke_async(
        self, context: ExecutionContext, response_type: Type[ResponseT] = ContentstackResponse
    ) -> ResponseT:
        """
        Runs the chain on the running event loop.

        Cancelling the awaiting task stops waiting on the result; a request
        already sent is not recalled.

        Args:
            context: The context of the call.
            response_type: The ContentstackResponse type to return.

        Returns:
            The response, cast to response_type.
        """
        self._throw_if_disposed()
        context = await self.handler.invoke_async(context)
        self._raise_for_error(context)
        response = context.response_context.http_response
        assert response is not None
        return response.cast(response_type)

    def dispose(self) -> None:
        """Disposes every handler of the chain. Calling it again has no effect."""
        if self._disposed:
            return
        for handler in self.handlers:
            handler.dispose()
        self._disposed = True
        self.logger.debug("Disposed runtime pipeline")

    def __repr__(self) -> str:
        chain = " -> ".join(handler.name for handler in self.handlers)
        return f"<{self.__class__.__name__}({chain})>"
