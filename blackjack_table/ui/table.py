"""Qt widgets representing the blackjack table."""
from __future__ import annotations

from typing import List, Optional

from PyQt6 import QtGui, QtWidgets

from ..core.game import ACCEPT_SPLIT, DECLINE_SPLIT, HIT, PLACE_BET, STAND
from ..core.round_manager import RoundManager
from ..core.snapshot import HandView, TableSnapshot
from .widgets import CardLabel


class TableWindow(QtWidgets.QMainWindow):
    def __init__(self, manager: RoundManager, source: Optional[str] = None) -> None:
        super().__init__()
        self.manager = manager
        self.setWindowTitle(manager.config.name)
        self.resize(800, 560)
        self.view = TableView(manager)
        self.setCentralWidget(self.view)
        self.status = self.statusBar()
        self.status.showMessage(f"Loaded {source}" if source else "Welcome to Blackjack")

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self.view.detach()
        self.manager.close()
        super().closeEvent(event)


class TableView(QtWidgets.QWidget):
    def __init__(self, manager: RoundManager) -> None:
        super().__init__()
        self.manager = manager
        self._build_ui()
        self._unsubscribe = manager.subscribe(self.update_view)
        self.update_view(manager.snapshot())

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        header = QtWidgets.QHBoxLayout()
        self.round_label = QtWidgets.QLabel("Round #0")
        self.balance_label = QtWidgets.QLabel("Balance: 0")
        header.addWidget(self.round_label)
        header.addStretch()
        header.addWidget(self.balance_label)
        layout.addLayout(header)

        self.dealer_label = QtWidgets.QLabel("Dealer")
        layout.addWidget(self.dealer_label)
        self.dealer_layout = QtWidgets.QHBoxLayout()
        self.dealer_layout.setSpacing(8)
        layout.addLayout(self.dealer_layout)

        self.hand_labels: List[QtWidgets.QLabel] = []
        self.hand_layouts: List[QtWidgets.QHBoxLayout] = []
        for _ in range(2):
            label = QtWidgets.QLabel()
            row = QtWidgets.QHBoxLayout()
            row.setSpacing(8)
            layout.addWidget(label)
            layout.addLayout(row)
            self.hand_labels.append(label)
            self.hand_layouts.append(row)

        self.message_label = QtWidgets.QLabel()
        self.message_label.setStyleSheet("font-size: 20px; font-weight: bold; color: #1a4fb3;")
        layout.addWidget(self.message_label)
        layout.addStretch()

        controls = QtWidgets.QHBoxLayout()
        self.bet_input = QtWidgets.QSpinBox()
        self.bet_input.setMinimum(1)
        self.bet_input.setValue(100)
        controls.addWidget(self.bet_input)
        self.bet_btn = QtWidgets.QPushButton("Bet")
        self.bet_btn.clicked.connect(self.on_bet)
        controls.addWidget(self.bet_btn)
        self.hit_btn = QtWidgets.QPushButton("Hit")
        self.hit_btn.clicked.connect(lambda: self.manager.hit())
        controls.addWidget(self.hit_btn)
        self.stand_btn = QtWidgets.QPushButton("Stand")
        self.stand_btn.clicked.connect(lambda: self.manager.stand())
        controls.addWidget(self.stand_btn)
        self.split_btn = QtWidgets.QPushButton("Split")
        self.split_btn.clicked.connect(lambda: self.manager.accept_split())
        controls.addWidget(self.split_btn)
        self.decline_btn = QtWidgets.QPushButton("Keep Pair")
        self.decline_btn.clicked.connect(lambda: self.manager.decline_split())
        controls.addWidget(self.decline_btn)
        controls.addStretch()
        layout.addLayout(controls)

    def update_view(self, snapshot: TableSnapshot) -> None:
        self.round_label.setText(f"Round #{snapshot.round_number}")
        self.balance_label.setText(f"Balance: {snapshot.balance}")
        shown_total = f"{snapshot.dealer_total}+?" if snapshot.dealer_hidden else str(snapshot.dealer_total)
        self.dealer_label.setText(f"Dealer ({shown_total})")
        _fill_row(self.dealer_layout, snapshot.dealer_cards)
        for idx, (label, row) in enumerate(zip(self.hand_labels, self.hand_layouts)):
            if idx < len(snapshot.hands):
                hand = snapshot.hands[idx]
                active = idx == snapshot.active_hand and snapshot.can(HIT)
                label.setText(_describe_hand(hand, active))
                _fill_row(row, hand.cards)
            else:
                label.setText("")
                _fill_row(row, ())
        self.message_label.setText(snapshot.message)
        self.bet_input.setMaximum(max(1, snapshot.balance))
        self.bet_input.setEnabled(snapshot.can(PLACE_BET))
        self.bet_btn.setEnabled(snapshot.can(PLACE_BET))
        self.hit_btn.setEnabled(snapshot.can(HIT))
        self.stand_btn.setEnabled(snapshot.can(STAND))
        self.split_btn.setVisible(snapshot.can(ACCEPT_SPLIT))
        self.decline_btn.setVisible(snapshot.can(DECLINE_SPLIT))
        window = self.window()
        if snapshot.is_bankrupt and isinstance(window, TableWindow):
            window.status.showMessage("Bankrupt: no more bets can be placed")

    def on_bet(self) -> None:
        self.manager.place_bet(self.bet_input.value())

    def detach(self) -> None:
        self._unsubscribe()


def _describe_hand(hand: HandView, active: bool) -> str:
    marker = "> " if active else ""
    text = f"{marker}{hand.label} ({hand.total})"
    if hand.bet:
        text += f" - bet {hand.bet}"
    if hand.outcome:
        text += f" - {hand.outcome}"
    return text


def _fill_row(row: QtWidgets.QHBoxLayout, cards) -> None:
    while row.count():
        item = row.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()
    for card in cards:
        row.addWidget(CardLabel(card))
    row.addStretch()


__all__ = ["TableWindow", "TableView"]
