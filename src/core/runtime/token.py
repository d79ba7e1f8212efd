import threading
from contextvars import ContextVar


class CancelToken:
    """取消令牌。由任务与派生方共享，取消时置位，行为函数可在任意线程中轮询"""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """阻塞当前线程直到令牌被置位或超时，供同步行为函数使用

        Args:
            timeout: 超时秒数，None 表示一直等待

        Returns:
            令牌是否已被置位
        """
        return self._event.wait(timeout)


_current_token: ContextVar[CancelToken | None] = ContextVar("actorfsm_cancel_token", default=None)


def current_cancel_token() -> CancelToken | None:
    """获取当前执行上下文所属任务的取消令牌

    Returns:
        当前任务的取消令牌，不在任务上下文中时返回None
    """
    return _current_token.get()


def cancel_requested() -> bool:
    """检查当前执行上下文所属的任务是否已被请求取消"""
    token = _current_token.get()
    return token is not None and token.is_cancelled()


def bind_cancel_token(token: CancelToken) -> None:
    """将取消令牌绑定到当前执行上下文，只应在任务协程内部调用"""
    _current_token.set(token)
