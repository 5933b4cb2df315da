from __future__ import annotations

from collections.abc import Iterable, Sequence

from PySide6.QtCore import QStringListModel, Qt, Signal
from PySide6.QtWidgets import (
    QCompleter,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QScrollArea,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from regdesk.app.record_models import add_unique_community, remove_community


class CommunityChip(QFrame):
    remove_requested = Signal(str)

    def __init__(self, name: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("CommunityChip")
        self._name = name

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 2, 4, 2)
        layout.setSpacing(4)

        label = QLabel(name, self)
        layout.addWidget(label)

        remove_button = QToolButton(self)
        remove_button.setAutoRaise(True)
        remove_button.setText("x")
        remove_button.setToolTip(f"Remove {name}")
        remove_button.setCursor(Qt.CursorShape.PointingHandCursor)
        remove_button.clicked.connect(lambda: self.remove_requested.emit(self._name))
        layout.addWidget(remove_button)


class CommunityTagInput(QWidget):
    """Text input with suggestions that collects community names as removable chips."""

    communities_changed = Signal(list)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._communities: list[str] = []
        self._suggestion_model = QStringListModel(self)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        entry_row = QHBoxLayout()
        entry_row.setContentsMargins(0, 0, 0, 0)
        entry_row.setSpacing(6)

        self._input = QLineEdit(self)
        self._input.setPlaceholderText("Type a community and press Enter")
        completer = QCompleter(self._suggestion_model, self._input)
        completer.setCaseSensitivity(Qt.CaseSensitivity.CaseInsensitive)
        completer.setFilterMode(Qt.MatchFlag.MatchContains)
        self._input.setCompleter(completer)
        self._input.returnPressed.connect(self._commit_input)
        entry_row.addWidget(self._input, 1)

        add_button = QPushButton("Add", self)
        add_button.setObjectName("ActionButton")
        add_button.clicked.connect(self._commit_input)
        entry_row.addWidget(add_button, 0)
        root.addLayout(entry_row)

        self._chips_host = QWidget(self)
        self._chips_layout = QHBoxLayout(self._chips_host)
        self._chips_layout.setContentsMargins(0, 0, 0, 0)
        self._chips_layout.setSpacing(6)
        self._chips_layout.addStretch(1)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        scroll.setFixedHeight(40)
        scroll.setWidget(self._chips_host)
        root.addWidget(scroll)

    def communities(self) -> list[str]:
        return list(self._communities)

    def set_communities(self, names: Sequence[str]) -> None:
        rows: list[str] = []
        for name in names:
            rows = add_unique_community(rows, name)
        self._communities = rows
        self._rebuild_chips()

    def set_suggestions(self, names: Iterable[str]) -> None:
        self._suggestion_model.setStringList(list(names))

    def add_community(self, name: str) -> bool:
        updated = add_unique_community(self._communities, name)
        if updated == self._communities:
            return False
        self._communities = updated
        self._rebuild_chips()
        self.communities_changed.emit(self.communities())
        return True

    def remove_community(self, name: str) -> None:
        updated = remove_community(self._communities, name)
        if updated == self._communities:
            return
        self._communities = updated
        self._rebuild_chips()
        self.communities_changed.emit(self.communities())

    def _commit_input(self) -> None:
        text = self._input.text().strip()
        if not text:
            return
        self.add_community(text)
        self._input.clear()

    def _rebuild_chips(self) -> None:
        while self._chips_layout.count() > 1:
            item = self._chips_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        for index, name in enumerate(self._communities):
            chip = CommunityChip(name, self._chips_host)
            chip.remove_requested.connect(self.remove_community)
            self._chips_layout.insertWidget(index, chip)
