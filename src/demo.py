import asyncio

from loguru import logger

from .core.state_machine import IStateMachine, create_state_machine
from .model import get_settings
from .utils import setup_logger


def build_actor(tick: float, walk_steps: int = 3) -> IStateMachine:
    """创建演示用的角色状态机：idle 状态原地等待，walk 状态走完若干步后回到 idle

    Args:
        tick: 每一步的间隔秒数
        walk_steps: walk 状态的步数

    Returns:
        未启动的状态机实例，当前状态为 idle
    """

    async def idle(machine: IStateMachine) -> None:
        while True:
            logger.info(f"[{machine.get_id()[:8]}] idle...")
            await asyncio.sleep(tick)

    async def walk(machine: IStateMachine) -> None:
        for step in range(1, walk_steps + 1):
            logger.info(f"[{machine.get_id()[:8]}] walk step {step}/{walk_steps}")
            await asyncio.sleep(tick)
        machine.change_state("idle")

    return create_state_machine({"idle": idle, "walk": walk}, initial_state="idle")


async def run(tick: float | None = None) -> list[str]:
    """运行演示：idle → walk → 暂停 → 自动恢复 → idle，结束后销毁状态机

    Args:
        tick: 每一步的间隔秒数，默认取配置项 demo_tick

    Returns:
        演示过程中依次进入的状态
    """
    tick = tick if tick is not None else get_settings().demo_tick
    actor = build_actor(tick)

    visited: list[str] = []
    actor.on_state_changed(visited.append)

    actor.start()
    await asyncio.sleep(tick * 1.5)

    actor.change_state("walk")
    await asyncio.sleep(tick * 1.5)

    # 恢复后 walk 重新执行，走完后回到 idle
    actor.pause(tick)
    await asyncio.sleep(tick * 6)

    actor.destroy()
    logger.info(f"Demo finished, visited states: {visited}")
    return visited


def main() -> None:
    setup_logger()
    asyncio.run(run())


if __name__ == "__main__":
    main()
