import asyncio
import functools
import inspect
import threading
from uuid import uuid4
from typing import Any, TypeVar, cast
from collections.abc import Callable

from loguru import logger
from asyncer import asyncify, syncify

from .const import Behavior, Definition
from .interface import IStateMachine
from ..runtime import (
    INotifier,
    ISubscription,
    ITaskHandle,
    ITaskSpawner,
    ITimer,
    ITimerHandle,
    AsyncioTaskSpawner,
    AsyncioTimer,
    CancelToken,
    Notifier,
)


MethodT = TypeVar("MethodT", bound=Callable[..., Any])

# 同步行为函数所在的工作线程会置位 in_behavior
_behavior_thread = threading.local()


def _is_async_callable(fn: object) -> bool:
    while isinstance(fn, functools.partial):
        fn = fn.func
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


def _loop_bound(method: MethodT) -> MethodT:
    """在同步行为函数的工作线程中调用时，将方法转回事件循环线程执行"""

    @functools.wraps(method)
    def wrapper(self: "BaseStateMachine", *args: Any, **kwargs: Any) -> Any:
        if not getattr(_behavior_thread, "in_behavior", False):
            return method(self, *args, **kwargs)

        async def call_on_loop() -> Any:
            return method(self, *args, **kwargs)

        return syncify(call_on_loop)()

    return cast(MethodT, wrapper)


class BaseStateMachine(IStateMachine):
    """基础状态机实现：状态定义注册、状态切换与行为任务的生命周期管理

    所有公开方法都是同步的，不会挂起；行为函数在派生的并发任务中执行。
    同一实例的公开方法需由调用方串行调用，内部不加锁。同步行为函数在工作线程中
    调用状态机时，调用会被转回事件循环线程执行。
    """
    _id: str

    # ========== 状态管理 ==========
    _current_state: str | None
    _definitions: dict[str, Definition]
    _running: bool
    _destroyed: bool

    # ========== 任务管理 ==========
    _active_task: ITaskHandle | None
    _resume_timer: ITimerHandle | None

    # ========== 宿主能力 ==========
    _notifier: INotifier[str] | None
    _spawner: ITaskSpawner
    _timer: ITimer

    def __init__(
        self,
        notifier: INotifier[str] | None = None,
        spawner: ITaskSpawner | None = None,
        timer: ITimer | None = None,
    ) -> None:
        """初始化基础状态机

        Args:
            notifier: 状态变更通知通道，默认使用同步投递的 Notifier
            spawner: 行为任务派生器，默认在当前事件循环上派生
            timer: 延时调用设施，默认使用 loop.call_later
        """
        self._id = str(uuid4())
        self._current_state = None
        self._definitions = {}
        self._running = False
        self._destroyed = False
        self._active_task = None
        self._resume_timer = None

        self._notifier = notifier if notifier is not None else Notifier[str](name=f"state-machine-{self._id[:8]}")
        self._spawner = spawner if spawner is not None else AsyncioTaskSpawner()
        self._timer = timer if timer is not None else AsyncioTimer()

    # ********** 状态机信息 **********

    def get_id(self) -> str:
        """获取状态机唯一标识

        Returns:
            状态机ID字符串
        """
        return self._id

    def get_current_state(self) -> str | None:
        """获取当前状态

        Returns:
            当前状态，未切换过状态或已销毁时返回None
        """
        return self._current_state

    def is_running(self) -> bool:
        """检查状态机是否处于运行中

        Returns:
            运行中返回True，否则返回False
        """
        return self._running

    def is_destroyed(self) -> bool:
        """检查状态机是否已被销毁

        Returns:
            已销毁返回True，否则返回False
        """
        return self._destroyed

    def get_definition(self, state: str) -> Definition | None:
        """获取状态定义

        Args:
            state: 状态名

        Returns:
            状态定义，未注册时返回None
        """
        return self._definitions.get(state)

    def get_definitions(self) -> dict[str, Definition]:
        """获取所有状态定义

        Returns:
            状态名到状态定义的映射的浅拷贝
        """
        return self._definitions.copy()

    def get_active_task(self) -> ITaskHandle | None:
        """获取当前正在执行的行为任务

        Returns:
            行为任务句柄，没有行为任务时返回None
        """
        return self._active_task

    # ********** 生命周期 **********

    @_loop_bound
    def start(self) -> None:
        """启动状态机

        已运行时无操作。显式启动会取消 pause 留下的待恢复调用；
        若当前状态有未禁用的定义，则立即激活其行为。
        """
        if self._running:
            return
        self._cancel_resume_timer()
        self._running = True
        logger.info(f"[状态机 {self._id[:8]}] 启动，当前状态：{self._current_state}")

        if self._current_state is None:
            return
        definition = self._definitions.get(self._current_state)
        if definition is not None and not definition.disabled:
            self._activate(self._current_state)

    @_loop_bound
    def stop(self) -> None:
        """停止状态机并取消正在执行的行为，保留当前状态与状态定义。未运行时无操作"""
        if not self._running:
            return
        self._running = False
        self._cancel_active_task()

        if self._current_state is not None:
            definition = self._definitions.get(self._current_state)
            if definition is not None:
                definition.is_running = False
        logger.info(f"[状态机 {self._id[:8]}] 停止，当前状态：{self._current_state}")

    @_loop_bound
    def pause(self, duration: float) -> None:
        """立即停止状态机，并在 duration 秒后自动重新启动

        未运行时无操作。恢复调用无法安排时（例如没有运行中的事件循环）记录错误，
        状态机保持运行。在恢复前显式调用 start、destroy 或再次 pause 会取消这次恢复。

        Args:
            duration: 暂停秒数
        """
        if not self._running:
            return

        try:
            resume_timer = self._timer.schedule(duration, self._resume)
        except RuntimeError:
            logger.exception(f"[状态机 {self._id[:8]}] 无法安排恢复调用，忽略暂停")
            return

        self.stop()
        self._cancel_resume_timer()
        self._resume_timer = resume_timer
        logger.info(f"[状态机 {self._id[:8]}] 暂停 {duration} 秒")

    @_loop_bound
    def destroy(self) -> None:
        """销毁状态机：停止、取消待恢复调用、释放通知通道、清空状态定义与当前状态。可重复调用"""
        self.stop()
        self._cancel_resume_timer()

        if self._notifier is not None:
            self._notifier.destroy()
            self._notifier = None

        self._definitions.clear()
        self._current_state = None
        if not self._destroyed:
            self._destroyed = True
            logger.info(f"[状态机 {self._id[:8]}] 已销毁")

    # ********** 状态定义管理 **********

    @_loop_bound
    def define(self, state: str, behavior: Behavior | None = None) -> None:
        """注册或覆盖状态定义。覆盖不会影响已在执行的行为任务

        Args:
            state: 状态名
            behavior: 行为函数，可选
        """
        self._definitions[state] = Definition(behavior=behavior, is_running=False, disabled=False)

    @_loop_bound
    def disable_definition(self, state: str) -> None:
        """禁用状态定义，之后切换到该状态不执行行为。未注册时无操作

        Args:
            state: 状态名
        """
        definition = self._definitions.get(state)
        if definition is not None:
            definition.disabled = True

    @_loop_bound
    def re_enable_definition(self, state: str) -> None:
        """重新启用状态定义。未注册时无操作

        Args:
            state: 状态名
        """
        definition = self._definitions.get(state)
        if definition is not None:
            definition.disabled = False

    @_loop_bound
    def destroy_definition(self, state: str) -> None:
        """删除状态定义，不停止正在执行的行为，也不清除当前状态。未注册时无操作

        Args:
            state: 状态名
        """
        self._definitions.pop(state, None)

    @_loop_bound
    def change_definition(self, state: str, behavior: Behavior | None = None) -> None:
        """仅替换状态定义的行为函数，保留其运行与禁用标记。未注册时无操作

        Args:
            state: 状态名
            behavior: 新的行为函数，可选
        """
        definition = self._definitions.get(state)
        if definition is not None:
            definition.behavior = behavior

    def definition_is_running(self, state: str) -> bool:
        """查询状态的行为是否处于激活中

        Args:
            state: 状态名

        Returns:
            处于激活中返回True，未注册或未激活返回False
        """
        definition = self._definitions.get(state)
        if definition is None:
            return False
        return definition.is_running

    # ********** 状态切换 **********

    @_loop_bound
    def change_state(self, new_state: str) -> bool:
        """切换到新状态，取消旧行为并激活新状态的行为，随后通知订阅者

        Args:
            new_state: 目标状态名

        Returns:
            目标状态已注册时返回True，否则返回False且不做任何修改
        """
        if new_state not in self._definitions:
            logger.debug(f"[状态机 {self._id[:8]}] 状态 {new_state} 未注册，忽略切换")
            return False

        prev_state = self._current_state
        if prev_state is not None:
            prev_definition = self._definitions.get(prev_state)
            if prev_definition is not None:
                prev_definition.is_running = False
        self._cancel_active_task()

        self._current_state = new_state
        logger.info(f"[状态机 {self._id[:8]}] 状态切换：{prev_state}→{new_state}")

        self._activate(new_state)
        if self._notifier is not None:
            self._notifier.publish(new_state)
        return True

    @_loop_bound
    def on_state_changed(self, callback: Callable[[str], None]) -> ISubscription:
        """订阅状态变更通知

        Args:
            callback: 每次成功切换状态后以新状态名同步调用的回调函数

        Returns:
            订阅句柄

        Raises:
            RuntimeError: 如果状态机已被销毁则抛出该异常
        """
        if self._notifier is None:
            raise RuntimeError(f"状态机 {self._id[:8]} 已销毁，无法订阅状态变更")
        return self._notifier.subscribe(callback)

    async def wait_behavior(self) -> None:
        """等待当前行为任务结束，没有行为任务时立即返回"""
        if self._active_task is not None:
            await self._active_task.wait()

    # ********** 内部实现 **********

    def _activate(self, state: str) -> None:
        """激活协议：派生新的行为任务取代旧任务，并标记状态为激活中

        行为任务无法派生时（例如没有运行中的事件循环）记录错误，状态保持未激活。

        Args:
            state: 目标状态名
        """
        if not self._running:
            return
        definition = self._definitions.get(state)
        if definition is None or definition.disabled:
            return

        if definition.behavior is None:
            definition.is_running = True
            return

        # 先取消旧任务再派生，旧任务的取消先于新行为开始执行
        self._cancel_active_task()
        behavior = definition.behavior

        async def run(_token: CancelToken) -> None:
            await self._run_behavior(state, behavior)

        try:
            task = self._spawner.spawn(run, name=f"{self._id[:8]}:{state}")
        except RuntimeError:
            logger.exception(f"[状态机 {self._id[:8]}] 无法派生状态 {state} 的行为任务")
            return

        self._active_task = task
        definition.is_running = True

    async def _run_behavior(self, state: str, behavior: Behavior) -> None:
        """执行行为函数，行为内的异常在任务边界处记录，不向状态机传播

        Args:
            state: 行为所属的状态名
            behavior: 行为函数
        """
        try:
            if _is_async_callable(behavior):
                await behavior(self)
            else:
                result = await asyncify(self._call_in_worker)(behavior)
                if inspect.isawaitable(result):
                    await result
        except asyncio.CancelledError:
            logger.debug(f"[状态机 {self._id[:8]}] 状态 {state} 的行为已取消")
            raise
        except Exception:
            logger.exception(f"[状态机 {self._id[:8]}] 状态 {state} 的行为执行出错")

    def _call_in_worker(self, behavior: Behavior) -> Any:
        _behavior_thread.in_behavior = True
        try:
            return behavior(self)
        finally:
            _behavior_thread.in_behavior = False

    def _cancel_active_task(self) -> None:
        if self._active_task is None:
            return
        task = self._active_task
        self._active_task = None
        if task.is_alive():
            logger.debug(f"[状态机 {self._id[:8]}] 取消行为任务 {task.get_name()}")
        task.cancel()

    def _cancel_resume_timer(self) -> None:
        if self._resume_timer is not None:
            self._resume_timer.cancel()
            self._resume_timer = None

    def _resume(self) -> None:
        self._resume_timer = None
        self.start()
