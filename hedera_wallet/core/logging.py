"""Logging setup for processes embedding the wallet core."""

import logging
from typing import Optional

from hedera_wallet.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the wallet core format.

    Args:
        level: Log level name, defaults to the LOG_LEVEL setting
    """
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
