from abc import ABC, abstractmethod
from collections.abc import Callable

from .const import Behavior, Definition
from ..runtime import ISubscription, ITaskHandle


class IStateMachine(ABC):
    """状态机接口：注册命名状态及其行为，任意时刻至多一个行为在执行"""

    # ********** 状态机信息 **********

    @abstractmethod
    def get_id(self) -> str:
        """获取状态机唯一标识

        Returns:
            状态机ID字符串
        """
        pass

    @abstractmethod
    def get_current_state(self) -> str | None:
        """获取当前状态

        Returns:
            当前状态，未切换过状态或已销毁时返回None
        """
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """检查状态机是否处于运行中"""
        pass

    @abstractmethod
    def is_destroyed(self) -> bool:
        """检查状态机是否已被销毁"""
        pass

    @abstractmethod
    def get_definition(self, state: str) -> Definition | None:
        """获取状态定义

        Args:
            state: 状态名

        Returns:
            状态定义，未注册时返回None
        """
        pass

    @abstractmethod
    def get_definitions(self) -> dict[str, Definition]:
        """获取所有状态定义的浅拷贝"""
        pass

    @abstractmethod
    def get_active_task(self) -> ITaskHandle | None:
        """获取当前正在执行的行为任务句柄"""
        pass

    # ********** 生命周期 **********

    @abstractmethod
    def start(self) -> None:
        """启动状态机。已运行时无操作；若当前状态有可用定义则立即激活其行为"""
        pass

    @abstractmethod
    def stop(self) -> None:
        """停止状态机并取消正在执行的行为，保留当前状态与状态定义"""
        pass

    @abstractmethod
    def pause(self, duration: float) -> None:
        """立即停止状态机，并在 duration 秒后自动重新启动，调用方不阻塞

        Args:
            duration: 暂停秒数
        """
        pass

    @abstractmethod
    def destroy(self) -> None:
        """销毁状态机：停止、释放通知通道、清空状态定义与当前状态。可重复调用"""
        pass

    # ********** 状态定义管理 **********

    @abstractmethod
    def define(self, state: str, behavior: Behavior | None = None) -> None:
        """注册或覆盖状态定义。覆盖不会影响已在执行的行为任务

        Args:
            state: 状态名
            behavior: 行为函数，可选
        """
        pass

    @abstractmethod
    def disable_definition(self, state: str) -> None:
        """禁用状态定义，之后切换到该状态不执行行为。未注册时无操作"""
        pass

    @abstractmethod
    def re_enable_definition(self, state: str) -> None:
        """重新启用状态定义。未注册时无操作"""
        pass

    @abstractmethod
    def destroy_definition(self, state: str) -> None:
        """删除状态定义，不停止正在执行的行为，也不清除当前状态。未注册时无操作"""
        pass

    @abstractmethod
    def change_definition(self, state: str, behavior: Behavior | None = None) -> None:
        """仅替换状态定义的行为函数。未注册时无操作"""
        pass

    @abstractmethod
    def definition_is_running(self, state: str) -> bool:
        """查询状态的行为是否处于激活中，未注册时返回False"""
        pass

    # ********** 状态切换 **********

    @abstractmethod
    def change_state(self, new_state: str) -> bool:
        """切换到新状态

        Args:
            new_state: 目标状态名

        Returns:
            目标状态已注册时返回True，否则返回False且不做任何修改
        """
        pass

    @abstractmethod
    def on_state_changed(self, callback: Callable[[str], None]) -> ISubscription:
        """订阅状态变更通知，每次成功切换状态后以新状态名同步调用

        Args:
            callback: 回调函数

        Returns:
            订阅句柄

        Raises:
            RuntimeError: 如果状态机已被销毁则抛出该异常
        """
        pass

    @abstractmethod
    async def wait_behavior(self) -> None:
        """等待当前行为任务结束，没有行为任务时立即返回"""
        pass
