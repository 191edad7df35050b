# taskboard/logging_setup.py
import logging

from taskboard.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure the root logger once for the whole process"""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
