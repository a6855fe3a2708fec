"""Application bootstrap for the blackjack table."""
from __future__ import annotations

import logging
import sys
from typing import Optional

from .core.round_manager import RoundManager, create_default_game

LOGGER = logging.getLogger(__name__)


def run(argv: Optional[list[str]] = None) -> int:
    """Run the blackjack GUI application."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    argv = list(sys.argv if argv is None else argv)
    try:
        from .ui.qt_app import launch_qt
    except ImportError as exc:  # pragma: no cover - Qt not available during tests
        LOGGER.warning("Unable to load PyQt6; no graphical interface available")
        LOGGER.debug("PyQt6 import error: %s", exc)
        print("Unable to launch a graphical interface in this environment.")
        return 1

    return launch_qt(argv)


__all__ = ["run", "RoundManager", "create_default_game"]
