from .base import BaseStateMachine
from .const import Behavior
from ..runtime import INotifier, ITaskSpawner, ITimer


def create_state_machine(
    definitions: dict[str, Behavior | None] | None = None,
    initial_state: str | None = None,
    autostart: bool = False,
    notifier: INotifier[str] | None = None,
    spawner: ITaskSpawner | None = None,
    timer: ITimer | None = None,
) -> BaseStateMachine:
    """创建状态机并批量注册状态定义

    Args:
        definitions: 状态名到行为函数的映射，可选
        initial_state: 初始状态，可选，必须已在 definitions 中注册
        autostart: 是否在创建后立即启动，启动时需处于运行中的事件循环内
        notifier: 状态变更通知通道，可选
        spawner: 行为任务派生器，可选
        timer: 延时调用设施，可选

    Returns:
        BaseStateMachine: 状态机实例

    Raises:
        ValueError: 如果初始状态未注册则抛出该异常
    """
    machine = BaseStateMachine(notifier=notifier, spawner=spawner, timer=timer)
    for state, behavior in (definitions or {}).items():
        machine.define(state, behavior)

    if initial_state is not None and not machine.change_state(initial_state):
        raise ValueError(f"初始状态 {initial_state} 未注册")

    if autostart:
        machine.start()
    return machine
