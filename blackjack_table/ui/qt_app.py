"""PyQt6 application bootstrap."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from PyQt6 import QtWidgets

from ..core.round_manager import DATA_PATH, RoundManager, create_default_game, create_game_from_file
from .table import TableWindow
from .timers import QtScheduler


def _load_manager_via_dialog(
    parent: Optional[QtWidgets.QWidget], scheduler: QtScheduler
) -> Optional[tuple[RoundManager, str]]:
    dialog = QtWidgets.QFileDialog(parent)
    dialog.setWindowTitle("Select Blackjack Table Configuration")
    dialog.setDirectory(str(DATA_PATH))
    dialog.setNameFilter("Config Files (*.json)")
    dialog.setFileMode(QtWidgets.QFileDialog.FileMode.ExistingFile)
    while True:
        if dialog.exec() != QtWidgets.QDialog.DialogCode.Accepted:
            return None
        filenames = dialog.selectedFiles()
        if not filenames:
            return None
        path = Path(filenames[0])
        try:
            manager = create_game_from_file(path, scheduler)
        except (OSError, ValueError) as exc:  # pragma: no cover - GUI feedback
            QtWidgets.QMessageBox.critical(parent, "Failed to Load", str(exc))
            continue
        return manager, str(path)


def launch_qt(argv: Sequence[str]) -> int:
    app = QtWidgets.QApplication(list(argv))
    scheduler = QtScheduler(app)
    manager: Optional[RoundManager] = None
    source: Optional[str] = None

    if len(argv) > 1:
        candidate = Path(argv[1]).expanduser()
        if candidate.exists():
            try:
                manager = create_game_from_file(candidate, scheduler)
                source = str(candidate)
            except (OSError, ValueError) as exc:  # pragma: no cover - GUI feedback
                QtWidgets.QMessageBox.critical(None, "Configuration Error", str(exc))
        else:
            QtWidgets.QMessageBox.warning(None, "Missing Configuration", f"Unable to open {candidate}.")

    if manager is None and DATA_PATH.exists():
        result = _load_manager_via_dialog(None, scheduler)
        if result is not None:
            manager, source = result

    if manager is None:
        manager = create_default_game(scheduler)
        source = "default settings"

    window = TableWindow(manager, source)
    window.show()
    return app.exec()


__all__ = ["launch_qt"]
