"""
Arcade Invaders utils
"""

from __future__ import annotations

import logging

logger = logging.getLogger("arcade_invaders")


def configure_logging(debug: bool = False) -> None:
    """
    Configure the root logging handler.

    :param debug: Log game events at DEBUG level
    :type debug: bool
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))
