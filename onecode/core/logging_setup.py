import logging

from onecode.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install the process-wide log format once at startup"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
