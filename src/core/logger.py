import logging
import sys

from src.core.config import env_config

_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
_configured = False


def _configure_root():
    global _configured # noqa
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger('news')
    root.setLevel(env_config.LOG_LEVEL.upper())
    root.addHandler(handler)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get application logger.

    Every logger lives under the `news` namespace so that a single handler
    serves the whole app.

    Args:
        name: Logger name, usually `__name__`

    Returns:
        Configured logger
    """
    _configure_root()
    return logging.getLogger(f'news.{name}')
