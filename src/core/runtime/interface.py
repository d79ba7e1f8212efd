from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar
from collections.abc import Callable, Coroutine

from .token import CancelToken


T = TypeVar('T')


class ISubscription(ABC):
    """通知通道上的一次订阅，用于取消订阅"""

    @abstractmethod
    def disconnect(self) -> None:
        """取消订阅，重复调用不报错"""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """检查订阅是否仍然有效

        Returns:
            如果订阅仍然有效则返回True，否则返回False
        """
        pass


class INotifier(ABC, Generic[T]):
    """进程内发布/订阅通道，发布时同步投递给所有订阅者"""

    @abstractmethod
    def subscribe(self, callback: Callable[[T], None]) -> ISubscription:
        """订阅通道

        Args:
            callback: 收到发布值时同步调用的回调函数

        Returns:
            订阅句柄

        Raises:
            RuntimeError: 如果通道已被销毁则抛出该异常
        """
        pass

    @abstractmethod
    def publish(self, value: T) -> None:
        """发布一个值，按订阅顺序在当前调用栈内依次投递

        Args:
            value: 发布的值
        """
        pass

    @abstractmethod
    def destroy(self) -> None:
        """销毁通道并释放所有订阅，重复调用不报错"""
        pass

    @abstractmethod
    def is_destroyed(self) -> bool:
        """检查通道是否已被销毁"""
        pass


class ITaskHandle(ABC):
    """可取消的并发任务句柄"""

    @abstractmethod
    def get_name(self) -> str:
        """获取任务名称"""
        pass

    @abstractmethod
    def get_token(self) -> CancelToken:
        """获取任务共享的取消令牌"""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """请求取消任务，不等待任务真正结束"""
        pass

    @abstractmethod
    def is_alive(self) -> bool:
        """检查任务是否仍在执行

        Returns:
            如果任务尚未结束则返回True，否则返回False
        """
        pass

    @abstractmethod
    async def wait(self) -> None:
        """等待任务结束，任务被取消或失败时不抛出异常"""
        pass


class ITaskSpawner(ABC):
    """并发任务派生器，派生后立即返回"""

    @abstractmethod
    def spawn(
        self,
        fn: Callable[[CancelToken], Coroutine[Any, Any, None]],
        name: str | None = None,
    ) -> ITaskHandle:
        """派生一个新的并发任务

        Args:
            fn: 任务函数，参数为任务的取消令牌，返回待执行的协程
            name: 任务名称，可选

        Returns:
            任务句柄
        """
        pass


class ITimerHandle(ABC):
    """延时调用句柄"""

    @abstractmethod
    def cancel(self) -> None:
        """取消尚未触发的延时调用，重复调用不报错"""
        pass

    @abstractmethod
    def is_pending(self) -> bool:
        """检查延时调用是否仍待触发"""
        pass


class ITimer(ABC):
    """延时调用设施"""

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> ITimerHandle:
        """在 delay 秒后调用一次 callback，不阻塞调用方

        Args:
            delay: 延时秒数
            callback: 到期时调用的函数

        Returns:
            延时调用句柄
        """
        pass
