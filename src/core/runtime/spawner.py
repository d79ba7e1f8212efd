import asyncio
from typing import Any
from collections.abc import Callable, Coroutine

from loguru import logger

from .interface import ITaskHandle, ITaskSpawner
from .token import CancelToken, bind_cancel_token


class TaskHandle(ITaskHandle):
    """基于 asyncio.Task 的任务句柄"""

    def __init__(self, task: asyncio.Task[None], token: CancelToken) -> None:
        self._task = task
        self._token = token

    def get_name(self) -> str:
        return self._task.get_name()

    def get_token(self) -> CancelToken:
        return self._token

    def get_task(self) -> asyncio.Task[None]:
        return self._task

    def cancel(self) -> None:
        # 令牌先于任务置位，线程中的同步行为函数据此退出
        self._token.cancel()
        if self._task.done():
            return
        loop = self._task.get_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._task.cancel()
        else:
            # Task.cancel 只能在所属事件循环线程上调用
            loop.call_soon_threadsafe(self._task.cancel)

    def is_alive(self) -> bool:
        return not self._task.done()

    async def wait(self) -> None:
        if self._task.done():
            return
        # 等待方被取消时不连带取消任务
        await asyncio.wait({self._task})


class AsyncioTaskSpawner(ITaskSpawner):
    """在当前运行的事件循环上派生任务"""

    def spawn(
        self,
        fn: Callable[[CancelToken], Coroutine[Any, Any, None]],
        name: str | None = None,
    ) -> ITaskHandle:
        """派生一个新的并发任务，立即返回

        Args:
            fn: 任务函数，参数为任务的取消令牌，返回待执行的协程
            name: 任务名称，可选

        Returns:
            任务句柄

        Raises:
            RuntimeError: 如果当前没有运行中的事件循环则抛出该异常
        """
        loop = asyncio.get_running_loop()
        token = CancelToken()

        async def runner() -> None:
            bind_cancel_token(token)
            await fn(token)

        task = loop.create_task(runner(), name=name)
        logger.debug(f"[spawner] 派生任务 {task.get_name()}")
        return TaskHandle(task, token)
