"""Logging setup for the application entrypoints. Library modules only create their own `logging.getLogger(__name__)`."""

import logging
from typing import Optional

from chess3d.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic handler on the root logger. Level defaults to CHESS3D_LOG_LEVEL."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
    )
