"""Tests for one-shot estimator loading."""

from __future__ import annotations

import asyncio
import threading

import pytest

from groom_protocol.core.exceptions import PoseEstimationError
from groom_protocol.core.types import Frame, Pose
from groom_protocol.vision.loader import EstimatorLoader


class FakeEstimator:
    """Estimator that records lifecycle calls."""

    def __init__(self, poses: list[Pose] | None = None) -> None:
        self.poses = poses or []
        self.initialized = False
        self.closed = False

    def initialize(self) -> None:
        self.initialized = True

    def estimate(self, frame: Frame) -> list[Pose]:
        return self.poses

    def close(self) -> None:
        self.closed = True


class CountingFactory:
    """Factory that counts builds and can fail the first N of them."""

    def __init__(self, failures: int = 0) -> None:
        self.builds = 0
        self.built: list[FakeEstimator] = []
        self.failures = failures
        self.release = threading.Event()
        self.release.set()
        self._lock = threading.Lock()

    def __call__(self) -> FakeEstimator:
        self.release.wait(timeout=5)
        with self._lock:
            self.builds += 1
            if self.builds <= self.failures:
                raise PoseEstimationError("model download failed")
        estimator = FakeEstimator()
        self.built.append(estimator)
        return estimator


class TestEstimatorLoader:
    """Tests for EstimatorLoader."""

    def test_loads_once_for_concurrent_callers(self) -> None:
        """Concurrent get() calls share one build."""
        factory = CountingFactory()
        factory.release.clear()
        loader = EstimatorLoader(factory)

        async def scenario() -> list[object]:
            waiters = [asyncio.ensure_future(loader.get()) for _ in range(5)]
            await asyncio.sleep(0)
            assert loader.is_loading
            factory.release.set()
            return await asyncio.gather(*waiters)

        results = asyncio.run(scenario())

        assert factory.builds == 1
        assert all(result is results[0] for result in results)
        assert results[0].initialized
        assert loader.is_loaded

    def test_cached_after_load(self) -> None:
        """Later calls return the cached estimator without rebuilding."""
        factory = CountingFactory()
        loader = EstimatorLoader(factory)

        async def scenario() -> tuple[object, object]:
            return await loader.get(), await loader.get()

        first, second = asyncio.run(scenario())

        assert first is second
        assert factory.builds == 1

    def test_failure_reaches_every_waiter_and_is_retried(self) -> None:
        """A failed load is reported to all waiters, then retried on the next call."""
        factory = CountingFactory(failures=1)
        factory.release.clear()
        loader = EstimatorLoader(factory)

        async def scenario() -> tuple[list[object], object]:
            waiters = [asyncio.ensure_future(loader.get()) for _ in range(3)]
            await asyncio.sleep(0)
            factory.release.set()
            failed = await asyncio.gather(*waiters, return_exceptions=True)
            return failed, await loader.get()

        failed, estimator = asyncio.run(scenario())

        assert all(isinstance(result, PoseEstimationError) for result in failed)
        assert isinstance(estimator, FakeEstimator)
        assert factory.builds == 2

    def test_preload_logs_instead_of_raising(self, caplog: pytest.LogCaptureFixture) -> None:
        """preload() swallows the failure and leaves the loader retryable."""
        factory = CountingFactory(failures=1)
        loader = EstimatorLoader(factory)

        async def scenario() -> None:
            await loader.preload()

        with caplog.at_level("ERROR", logger="groom_protocol"):
            asyncio.run(scenario())

        assert "Failed to preload pose estimator" in caplog.text
        assert not loader.is_loaded
        assert not loader.is_loading

    def test_preload_then_get(self) -> None:
        """get() after preload() reuses the preloaded estimator."""
        factory = CountingFactory()
        loader = EstimatorLoader(factory)

        async def scenario() -> object:
            loader.preload()
            return await loader.get()

        asyncio.run(scenario())

        assert factory.builds == 1

    def test_close_disposes_and_allows_reload(self) -> None:
        """close() releases the estimator; the next get() builds a new one."""
        factory = CountingFactory()
        loader = EstimatorLoader(factory)

        async def scenario() -> tuple[FakeEstimator, FakeEstimator]:
            first = await loader.get()
            loader.close()
            return first, await loader.get()

        first, second = asyncio.run(scenario())

        assert first.closed
        assert second is not first
        assert factory.builds == 2

    def test_close_before_load_is_noop(self) -> None:
        """Closing an unused loader does nothing."""
        loader = EstimatorLoader(CountingFactory())
        loader.close()

        assert not loader.is_loaded

    def test_close_during_load_disposes_late_estimator(self) -> None:
        """An estimator that finishes loading after close() is closed, not handed out."""
        factory = CountingFactory()
        factory.release.clear()
        loader = EstimatorLoader(factory)

        async def scenario() -> object:
            waiter = asyncio.ensure_future(loader.get())
            await asyncio.sleep(0)
            loader.close()
            factory.release.set()
            result = (await asyncio.gather(waiter, return_exceptions=True))[0]
            await asyncio.sleep(0)
            return result

        result = asyncio.run(scenario())

        assert isinstance(result, PoseEstimationError)
        assert len(factory.built) == 1
        assert factory.built[0].closed
        assert not loader.is_loaded
