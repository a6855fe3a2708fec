"""Exceptions raised by the blackjack round engine."""
from __future__ import annotations


class GameError(ValueError):
    """Base class for recoverable game errors."""


class InvalidBetError(GameError):
    pass


class IllegalActionError(GameError):
    """Raised when an action is invoked in a phase that does not permit it."""


class EmptyDeckError(GameError):
    pass


class InsufficientFundsForSplitError(GameError):
    pass


__all__ = [
    "GameError",
    "InvalidBetError",
    "IllegalActionError",
    "EmptyDeckError",
    "InsufficientFundsForSplitError",
]
