# addonhub/core/logging.py
import os
import sys

from loguru import logger

from .config import Settings, get_settings

_configured = False


def configure_logging(settings: Settings | None = None) -> None:
    """
    Replace loguru's default sink with one honouring LOG_LEVEL and, when
    LOG_FILE is set, add a rotating file sink next to it.
    """
    global _configured
    if _configured:
        return
    s = settings or get_settings()

    logger.remove()
    logger.add(sys.stderr, level=s.LOG_LEVEL.upper())
    if s.LOG_FILE:
        log_dir = os.path.dirname(os.path.abspath(s.LOG_FILE))
        os.makedirs(log_dir, exist_ok=True)
        logger.add(s.LOG_FILE, level=s.LOG_LEVEL.upper(), rotation="10 MB", retention="10 days")
    _configured = True
