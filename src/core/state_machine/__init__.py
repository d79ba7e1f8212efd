"""State machine implementation for actorfsm"""
from .base import BaseStateMachine
from .const import Behavior, Definition
from .interface import IStateMachine
from .builder import create_state_machine


__all__ = [
    "BaseStateMachine",
    "IStateMachine",
    "Behavior",
    "Definition",
    "create_state_machine",
]
