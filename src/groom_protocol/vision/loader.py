"""One-shot asynchronous loading of the pose estimator.

Loading the pose model downloads weights and builds the inference graph, which
takes seconds. The loader starts that work at most once, lets any number of
callers await the same pending load, and hands every later caller the cached
estimator.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Protocol

from groom_protocol.core.exceptions import PoseEstimationError
from groom_protocol.core.logging import get_logger
from groom_protocol.core.types import Frame, Pose

logger = get_logger(__name__)


def _close_abandoned(pending: asyncio.Future[Estimator]) -> None:
    """Close an estimator whose load finished after its loader was closed."""
    if pending.cancelled() or pending.exception() is not None:
        return
    pending.result().close()
    logger.info("Abandoned pose estimator released")


class Estimator(Protocol):
    """Anything that turns a frame into zero or more poses."""

    def initialize(self) -> None: ...

    def estimate(self, frame: Frame) -> list[Pose]: ...

    def close(self) -> None: ...


class EstimatorLoader:
    """Memoized, one-shot async construction of an Estimator.

    A failed load is not cached: every caller waiting on it receives the
    error, and the next ``get()`` starts a fresh attempt.
    """

    def __init__(self, factory: Callable[[], Estimator]) -> None:
        """Initialize loader.

        Args:
            factory: Builds an uninitialized estimator; called in a worker thread
        """
        self._factory = factory
        self._pending: asyncio.Future[Estimator] | None = None
        self._estimator: Estimator | None = None

    @property
    def is_loaded(self) -> bool:
        """Check if the estimator is ready for use."""
        return self._estimator is not None

    @property
    def is_loading(self) -> bool:
        """Check if a load is in flight."""
        return self._pending is not None and not self._pending.done()

    async def get(self) -> Estimator:
        """Return the estimator, loading it on first use.

        Raises:
            Exception: Whatever the factory or ``initialize()`` raised
        """
        if self._estimator is not None:
            return self._estimator

        if self._pending is None:
            loop = asyncio.get_running_loop()
            self._pending = loop.run_in_executor(None, self._build)

        pending = self._pending
        try:
            # Cancelling one waiter must not abort the load for the others
            estimator = await asyncio.shield(pending)
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise

        if self._pending is not pending:
            # close() ran mid-load and disposes of this estimator itself
            raise PoseEstimationError("Pose estimator was closed while loading")

        self._estimator = estimator
        return estimator

    def preload(self) -> asyncio.Task[None]:
        """Start loading in the background without waiting for it.

        Failures are logged, not raised; a later ``get()`` retries.
        """
        return asyncio.ensure_future(self._preload())

    async def _preload(self) -> None:
        try:
            await self.get()
        except Exception as e:
            logger.error("Failed to preload pose estimator: %s", e)

    def _build(self) -> Estimator:
        start = time.perf_counter()
        estimator = self._factory()
        estimator.initialize()
        logger.info("Pose estimator ready in %.2fs", time.perf_counter() - start)
        return estimator

    def close(self) -> None:
        """Dispose of the loaded estimator and forget it.

        A load still in flight is abandoned; whatever it builds is closed as
        soon as it finishes.
        """
        estimator = self._estimator
        pending = self._pending
        self._estimator = None
        self._pending = None

        if estimator is None and pending is not None:
            pending.add_done_callback(_close_abandoned)
            logger.info("Pose estimator load abandoned")

        if estimator is not None:
            estimator.close()
            logger.info("Pose estimator released")
