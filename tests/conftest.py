"""
Shared fixtures for the actorfsm test suite.
"""
import asyncio
from collections.abc import Callable
from typing import Any

import pytest
from loguru import logger

from actorfsm.core.runtime import ITimer, ITimerHandle


class FakeTimerHandle(ITimerHandle):
    """Timer handle driven by FakeTimer.advance()."""

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def is_pending(self) -> bool:
        return not (self.cancelled or self.fired)


class FakeTimer(ITimer):
    """Manually advanced clock for deterministic delayed-call tests."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[FakeTimerHandle] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ITimerHandle:
        handle = FakeTimerHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        """Move the clock forward and fire every pending call that became due."""
        self.now += seconds
        for handle in sorted(self.handles, key=lambda h: h.due):
            if handle.is_pending() and handle.due <= self.now:
                handle.fired = True
                handle.callback()

    def pending(self) -> list[FakeTimerHandle]:
        return [handle for handle in self.handles if handle.is_pending()]


@pytest.fixture
def fake_timer() -> FakeTimer:
    """Provide a manually advanced timer."""
    return FakeTimer()


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records: list[dict[str, Any]] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)


async def _settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def settle() -> Callable[..., Any]:
    """Give spawned tasks a few loop iterations to run."""
    return _settle
