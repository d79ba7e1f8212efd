from .log import setup_logger, LOG_FORMAT

__all__ = ["setup_logger", "LOG_FORMAT"]
