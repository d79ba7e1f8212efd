import sys

from loguru import logger

from ..model import Settings, get_settings


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(settings: Settings | None = None) -> list[int]:
    """Replace loguru's default sink with the configured ones.

    Args:
        settings: Settings to apply, defaults to the global settings

    Returns:
        list[int]: Ids of the sinks that were added
    """
    settings = settings or get_settings()

    logger.remove()
    sink_ids = [logger.add(sys.stderr, level=settings.log_level, format=LOG_FORMAT)]

    if settings.log_file:
        sink_ids.append(
            logger.add(
                settings.log_file,
                level=settings.log_level,
                format=LOG_FORMAT,
                rotation=settings.log_rotation,
                encoding="utf-8",
                enqueue=True,
            )
        )

    logger.debug(f"Logger configured: level={settings.log_level}, file={settings.log_file}")
    return sink_ids
