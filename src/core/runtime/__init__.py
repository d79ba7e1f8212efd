"""Host capabilities consumed by the state machine"""
from .interface import INotifier, ISubscription, ITaskHandle, ITaskSpawner, ITimer, ITimerHandle
from .notifier import Notifier, Subscription
from .spawner import AsyncioTaskSpawner, TaskHandle
from .timer import AsyncioTimer, AsyncioTimerHandle
from .token import CancelToken, current_cancel_token, cancel_requested


__all__ = [
    # Notifier
    "INotifier", "ISubscription", "Notifier", "Subscription",
    # Tasks
    "ITaskHandle", "ITaskSpawner", "AsyncioTaskSpawner", "TaskHandle",
    "CancelToken", "current_cancel_token", "cancel_requested",
    # Timer
    "ITimer", "ITimerHandle", "AsyncioTimer", "AsyncioTimerHandle",
]
