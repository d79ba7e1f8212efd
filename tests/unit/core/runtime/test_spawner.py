"""
Unit tests for the asyncio task spawner, cancel tokens and the event-loop timer.
"""
import asyncio
import threading

import pytest

from actorfsm.core.runtime import (
    AsyncioTaskSpawner,
    AsyncioTimer,
    CancelToken,
    cancel_requested,
    current_cancel_token,
)


class TestCancelToken:
    """Test CancelToken."""

    def test_initial_state(self) -> None:
        """Test a new token is not cancelled."""
        token = CancelToken()
        assert token.is_cancelled() is False
        assert token.wait(0) is False

    def test_cancel_wakes_waiting_thread(self) -> None:
        """Test cancel wakes a thread blocked on wait."""
        token = CancelToken()
        results: list[bool] = []
        worker = threading.Thread(target=lambda: results.append(token.wait(5)))
        worker.start()

        token.cancel()
        worker.join(5)

        assert results == [True]
        assert token.is_cancelled() is True

    def test_no_token_outside_task(self) -> None:
        """Test no token is bound outside a spawned task."""
        assert current_cancel_token() is None
        assert cancel_requested() is False


class TestAsyncioTaskSpawner:
    """Test AsyncioTaskSpawner and TaskHandle."""

    def test_spawn_requires_running_loop(self) -> None:
        """Test spawning without a loop raises RuntimeError."""
        async def work(token: CancelToken) -> None:
            return None

        with pytest.raises(RuntimeError):
            AsyncioTaskSpawner().spawn(work)

    @pytest.mark.asyncio
    async def test_spawn_returns_immediately(self) -> None:
        """Test spawn does not run the body synchronously."""
        events: list[str] = []

        async def work(token: CancelToken) -> None:
            events.append("run")

        handle = AsyncioTaskSpawner().spawn(work, name="worker")
        events.append("spawned")
        await handle.wait()

        assert events == ["spawned", "run"]
        assert handle.get_name() == "worker"
        assert handle.is_alive() is False

    @pytest.mark.asyncio
    async def test_token_is_bound_to_task_context(self) -> None:
        """Test the task can read its own token."""
        seen: list[CancelToken | None] = []

        async def work(token: CancelToken) -> None:
            seen.append(token)
            seen.append(current_cancel_token())

        handle = AsyncioTaskSpawner().spawn(work)
        await handle.wait()

        assert seen[0] is seen[1]
        assert seen[0] is handle.get_token()

    @pytest.mark.asyncio
    async def test_cancel_running_task(self) -> None:
        """Test cancelling a running task."""
        events: list[str] = []
        started = asyncio.Event()

        async def work(token: CancelToken) -> None:
            started.set()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                events.append(f"cancelled:{cancel_requested()}")
                raise

        handle = AsyncioTaskSpawner().spawn(work)
        await started.wait()

        handle.cancel()
        assert handle.get_token().is_cancelled() is True
        await handle.wait()

        assert events == ["cancelled:True"]
        assert handle.is_alive() is False

    @pytest.mark.asyncio
    async def test_cancel_before_start_skips_body(self) -> None:
        """Test cancelling before the first step skips the body."""
        events: list[str] = []

        async def work(token: CancelToken) -> None:
            events.append("run")

        handle = AsyncioTaskSpawner().spawn(work)
        handle.cancel()
        handle.cancel()
        await handle.wait()

        assert events == []
        assert handle.is_alive() is False

    @pytest.mark.asyncio
    async def test_wait_swallows_failure(self) -> None:
        """Test wait returns when the task fails."""
        async def work(token: CancelToken) -> None:
            raise ValueError("boom")

        handle = AsyncioTaskSpawner().spawn(work)
        await handle.wait()

        assert handle.is_alive() is False

    @pytest.mark.asyncio
    async def test_cancel_from_another_thread(self) -> None:
        """Test cancel called off the loop thread still stops the task."""
        async def work(token: CancelToken) -> None:
            await asyncio.sleep(60)

        handle = AsyncioTaskSpawner().spawn(work)
        await asyncio.sleep(0)

        await asyncio.to_thread(handle.cancel)
        await handle.wait()

        assert handle.is_alive() is False
        assert handle.get_token().is_cancelled() is True


class TestAsyncioTimer:
    """Test AsyncioTimer."""

    @pytest.mark.asyncio
    async def test_schedule_fires_once(self) -> None:
        """Test a scheduled callback fires once."""
        calls: list[int] = []
        handle = AsyncioTimer().schedule(0.01, lambda: calls.append(1))
        assert handle.is_pending() is True

        await asyncio.sleep(0.1)

        assert calls == [1]
        assert handle.is_pending() is False

    @pytest.mark.asyncio
    async def test_cancel_prevents_call(self) -> None:
        """Test a cancelled timer never fires."""
        calls: list[int] = []
        handle = AsyncioTimer().schedule(0.01, lambda: calls.append(1))

        handle.cancel()
        handle.cancel()
        await asyncio.sleep(0.05)

        assert calls == []
        assert handle.is_pending() is False
