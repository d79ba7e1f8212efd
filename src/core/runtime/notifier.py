from typing import Generic
from collections.abc import Callable

from loguru import logger

from .interface import INotifier, ISubscription, T


class Subscription(ISubscription, Generic[T]):
    """Notifier 的订阅句柄"""

    def __init__(self, notifier: "Notifier[T]", callback: Callable[[T], None]) -> None:
        self._notifier: "Notifier[T] | None" = notifier
        self._callback = callback

    def get_callback(self) -> Callable[[T], None]:
        return self._callback

    def disconnect(self) -> None:
        if self._notifier is None:
            return
        self._notifier._remove(self)
        self._notifier = None

    def is_connected(self) -> bool:
        return self._notifier is not None


class Notifier(INotifier[T]):
    """同步投递的发布/订阅通道。单个订阅者失败只记录日志，不影响其他订阅者"""

    def __init__(self, name: str = "notifier") -> None:
        self._name = name
        self._subscriptions: list[Subscription] = []
        self._destroyed = False

    def subscribe(self, callback: Callable[[T], None]) -> ISubscription:
        if self._destroyed:
            raise RuntimeError(f"通知通道 {self._name} 已销毁，无法订阅")
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, value: T) -> None:
        if self._destroyed:
            return
        # 回调内可能取消订阅，遍历副本
        for subscription in list(self._subscriptions):
            if not subscription.is_connected():
                continue
            try:
                subscription.get_callback()(value)
            except Exception:
                logger.opt(exception=True).warning(f"[{self._name}] 订阅者处理 {value!r} 时出错")

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        for subscription in list(self._subscriptions):
            subscription.disconnect()
        self._subscriptions.clear()

    def is_destroyed(self) -> bool:
        return self._destroyed

    def subscriber_count(self) -> int:
        """获取当前有效订阅者数量"""
        return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
