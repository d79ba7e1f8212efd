import asyncio
from collections.abc import Callable

from .interface import ITimer, ITimerHandle


class AsyncioTimerHandle(ITimerHandle):
    """asyncio.TimerHandle 的包装，记录是否已触发"""

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None
        self._fired = False

    def bind(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def mark_fired(self) -> None:
        self._fired = True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()

    def is_pending(self) -> bool:
        if self._handle is None or self._fired:
            return False
        return not self._handle.cancelled()


class AsyncioTimer(ITimer):
    """基于 loop.call_later 的延时调用"""

    def schedule(self, delay: float, callback: Callable[[], None]) -> ITimerHandle:
        loop = asyncio.get_running_loop()
        handle = AsyncioTimerHandle()

        def fire() -> None:
            handle.mark_fired()
            callback()

        handle.bind(loop.call_later(max(0.0, delay), fire))
        return handle
