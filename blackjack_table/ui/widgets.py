"""Reusable Qt widgets for the blackjack table."""
from __future__ import annotations

from typing import Optional

from PyQt6 import QtCore, QtWidgets

from ..core.cards import Card

RED_SUITS = frozenset({"Hearts", "Diamonds"})


class CardLabel(QtWidgets.QLabel):
    """Simple label that renders a playing card, or a face-down card for ``None``."""

    def __init__(self, card: Optional[Card] = None, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.setMinimumWidth(48)
        self.set_card(card)

    def set_card(self, card: Optional[Card]) -> None:
        color = "#c00" if card is not None and card.suit in RED_SUITS else "#000"
        self.setText(str(card) if card is not None else "??")
        self.setStyleSheet(f"border: 1px solid #666; padding: 6px; background: #fff; font-weight: bold; color: {color};")


__all__ = ["CardLabel"]
