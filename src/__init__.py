"""actorfsm: a finite-state-machine runtime with preemptive, cancellable state behaviors"""
from .core.state_machine import BaseStateMachine, IStateMachine, Behavior, Definition, create_state_machine
from .core.runtime import (
    INotifier,
    ISubscription,
    ITaskHandle,
    ITaskSpawner,
    ITimer,
    ITimerHandle,
    Notifier,
    AsyncioTaskSpawner,
    AsyncioTimer,
    CancelToken,
    current_cancel_token,
    cancel_requested,
)
from .model import Settings, get_settings, reload_settings
from .utils import setup_logger


__all__ = [
    # State machine
    "BaseStateMachine", "IStateMachine", "Behavior", "Definition", "create_state_machine",
    # Runtime
    "INotifier", "ISubscription", "ITaskHandle", "ITaskSpawner", "ITimer", "ITimerHandle",
    "Notifier", "AsyncioTaskSpawner", "AsyncioTimer",
    "CancelToken", "current_cancel_token", "cancel_requested",
    # Settings & logging
    "Settings", "get_settings", "reload_settings", "setup_logger",
]
