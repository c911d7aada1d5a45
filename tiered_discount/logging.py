import sys
import threading

from loguru import logger

from tiered_discount.config import get_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

_sink_lock = threading.Lock()
_sink_id = None
_sink_level = None


def configure_logging() -> None:
    """Install the application's stdout sink at get_config().log_level.

    Only the sink added here is ever replaced (when the configured level changes);
    sinks added by the host application are left alone.
    """
    global _sink_id, _sink_level
    level = get_config().log_level.upper()
    with _sink_lock:
        if _sink_id is not None and level == _sink_level:
            return
        if _sink_id is None:
            # loguru ships with a stderr handler (id 0); ours replaces it.
            try:
                logger.remove(0)
            except ValueError:
                pass
        else:
            logger.remove(_sink_id)
        _sink_id = logger.add(
            sink=lambda msg: sys.stdout.write(msg),
            level=level,
            format=LOG_FORMAT,
        )
        _sink_level = level


def get_logger(name: str = None):
    """Get the application logger, bound to `name` when given.

    Args:
        name (str, optional): Name for the logger context. Defaults to None.
    Returns:
        loguru.Logger: The configured logger instance.
    """
    configure_logging()
    if name:
        return logger.bind(name=name)
    return logger
