"""
Centralized logging configuration for the application.
"""

import logging
import sys
from typing import Optional

from mindlog.core.config import LOG_LEVEL


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once at startup.

    Args:
        level (Optional[str]): Log level name, defaults to LOG_LEVEL from the environment.
    """
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
