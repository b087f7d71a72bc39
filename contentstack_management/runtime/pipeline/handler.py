# Base class of the stages in the runtime pipeline.

import logging
from typing import Optional

from contentstack_management.exceptions import ContentstackClientDisposedError
from contentstack_management.runtime.contexts import ExecutionContext

logger = logging.getLogger(__name__)


class PipelineHandler:
    """A stage of the runtime pipeline.

    Handlers form a chain: each one receives the execution context, may act
    on it, and passes it to its inner handler. The default implementations
    delegate straight to the inner handler. A handler processes a context on
    one task at a time and keeps no per-call state of its own.

    Attributes:
        inner_handler (Optional[PipelineHandler]): The next stage towards the network.
        logger (logging.Logger): The logger this stage writes to.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.inner_handler: Optional[PipelineHandler] = None
        self.logger = logger or logging.getLogger(self.__class__.__module__)
        self._disposed = False

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def _require_inner(self) -> "PipelineHandler":
        if self.inner_handler is None:
            raise RuntimeError(f"{self.name} has no inner handler")
        return self.inner_handler

    def invoke_sync(self, context: ExecutionContext) -> ExecutionContext:
        """Runs this stage on the calling thread."""
        return self._require_inner().invoke_sync(context)

    async def invoke_async(self, context: ExecutionContext) -> ExecutionContext:
        """Runs this stage on the running event loop."""
        return await self._require_inner().invoke_async(context)

    def throw_if_disposed(self) -> None:
        if self._disposed:
            raise ContentstackClientDisposedError(self.name)

    def dispose(self) -> None:
        """Releases resources held by this stage. Calling it again has no effect."""
        if self._disposed:
            return
        self._disposed = True
        self.logger.debug(f"Disposed pipeline handler {self.name}")

    def __repr__(self) -> str:
        return f"<{self.name}>"
