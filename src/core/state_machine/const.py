from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias
from collections.abc import Callable, Awaitable

if TYPE_CHECKING:
    from .interface import IStateMachine


# 行为函数：以状态机为参数，协程函数在事件循环上执行，普通函数在工作线程中执行
Behavior: TypeAlias = Callable[["IStateMachine"], Awaitable[None] | None]


@dataclass
class Definition:
    """状态定义记录

    Attributes:
        behavior: 进入状态时执行的行为函数，None 表示空状态
        is_running: 该状态的行为是否处于激活中
        disabled: 为 True 时允许切换到该状态，但不执行行为
    """
    behavior: Behavior | None = None
    is_running: bool = False
    disabled: bool = False
