from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
    QWidget,
)

from regdesk.app.settings_store import DEFAULT_RECORDS_PER_PAGE, RECORDS_PER_PAGE_CHOICES
from regdesk.ui.window.frameless_dialog import BUTTON_PRIMARY, FramelessDialog


def _page_size_choices(current: int) -> list[int]:
    choices = set(RECORDS_PER_PAGE_CHOICES)
    choices.add(current)
    return sorted(choices)


class SettingsDialog(FramelessDialog):
    """Non-modal settings panel.

    Each change is pushed to the window twice: through the ``on_*`` callback,
    which may veto or rewrite the value (the data folder callback returns the
    folder actually applied), and then through the matching signal.
    """

    dark_mode_changed = Signal(bool)
    data_storage_folder_changed = Signal(str)
    records_per_page_changed = Signal(int)

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        dark_mode_enabled: bool = False,
        on_dark_mode_changed: Callable[[bool], None] | None = None,
        data_storage_folder: str = "",
        on_data_storage_folder_changed: Callable[[str], str] | None = None,
        records_per_page: int = DEFAULT_RECORDS_PER_PAGE,
        on_records_per_page_changed: Callable[[int], None] | None = None,
        app_version: str = "",
    ) -> None:
        super().__init__(title="Settings", parent=parent, theme_mode="dark" if dark_mode_enabled else "light")
        self.setMinimumSize(560, 420)
        self.resize(620, 460)
        self._on_dark_mode_changed = on_dark_mode_changed
        self._on_data_storage_folder_changed = on_data_storage_folder_changed
        self._on_records_per_page_changed = on_records_per_page_changed
        self._records_per_page = int(records_per_page or DEFAULT_RECORDS_PER_PAGE)
        self._data_storage_folder = str(data_storage_folder or "").strip()

        general = self._panel("General Settings")
        self._dark_mode_toggle = QCheckBox(general)
        self._dark_mode_toggle.setChecked(bool(dark_mode_enabled))
        self._add_setting_row(general, "Dark mode", self._dark_mode_toggle)

        self._records_per_page_combo = QComboBox(general)
        for value in _page_size_choices(self._records_per_page):
            self._records_per_page_combo.addItem(str(value), value)
        self._records_per_page_combo.setCurrentIndex(
            max(0, self._records_per_page_combo.findData(self._records_per_page))
        )
        self._add_setting_row(general, "Records per page", self._records_per_page_combo)

        storage = self._panel(
            "Data Storage",
            hint="Records and communities are saved as JSON files in this folder.",
        )
        folder_row = QHBoxLayout()
        folder_row.setSpacing(8)
        self._data_storage_folder_input = QLineEdit(storage)
        self._data_storage_folder_input.setReadOnly(True)
        self._data_storage_folder_input.setPlaceholderText("Choose data folder")
        folder_row.addWidget(self._data_storage_folder_input, 1)
        browse_button = self.make_button("Browse...")
        browse_button.clicked.connect(self._on_browse_data_folder_clicked)
        folder_row.addWidget(browse_button)
        default_button = self.make_button("Default")
        default_button.setToolTip("Use the RegDesk Data folder in your home directory")
        default_button.clicked.connect(lambda: self._apply_data_storage_folder_change(""))
        folder_row.addWidget(default_button)
        storage.layout().addLayout(folder_row)
        self._status_label = QLabel("", storage)
        self._status_label.setObjectName("PanelMeta")
        self._status_label.setWordWrap(True)
        storage.layout().addWidget(self._status_label)
        self._show_folder(self._data_storage_folder)

        self.body_layout.addStretch(1)
        version = str(app_version or "").strip() or "unknown"
        version_label = QLabel(f"Current version: {version}", self.body)
        version_label.setObjectName("PanelMeta")
        close_button = self.make_button("Close", role=BUTTON_PRIMARY)
        close_button.clicked.connect(self.accept)
        footer = QHBoxLayout()
        footer.addWidget(version_label)
        footer.addStretch(1)
        footer.addWidget(close_button)
        self.body_layout.addLayout(footer)

        # Connected last so populating the widgets does not fire callbacks.
        self._dark_mode_toggle.toggled.connect(self._on_dark_mode_toggled)
        self._records_per_page_combo.currentIndexChanged.connect(self._on_records_per_page_selected)

    @property
    def data_storage_folder(self) -> str:
        return self._data_storage_folder

    def _panel(self, title: str, *, hint: str = "") -> QFrame:
        panel = QFrame(self.body)
        panel.setObjectName("Panel")
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)
        title_label = QLabel(title, panel)
        title_label.setObjectName("PanelTitle")
        layout.addWidget(title_label)
        if hint:
            hint_label = QLabel(hint, panel)
            hint_label.setObjectName("PanelHint")
            hint_label.setWordWrap(True)
            layout.addWidget(hint_label)
        self.body_layout.addWidget(panel)
        return panel

    def _add_setting_row(self, panel: QFrame, label: str, control: QWidget) -> None:
        row = QHBoxLayout()
        row.addWidget(QLabel(label, panel))
        row.addStretch(1)
        row.addWidget(control, 0, Qt.AlignmentFlag.AlignRight)
        panel.layout().addLayout(row)

    def _on_dark_mode_toggled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        self.set_theme_mode("dark" if enabled else "light")
        if callable(self._on_dark_mode_changed):
            self._on_dark_mode_changed(enabled)
        self.dark_mode_changed.emit(enabled)

    def _on_records_per_page_selected(self, *_args: object) -> None:
        value = self._records_per_page_combo.currentData()
        if not isinstance(value, int) or value == self._records_per_page:
            return
        self._records_per_page = value
        if callable(self._on_records_per_page_changed):
            self._on_records_per_page_changed(value)
        self.records_per_page_changed.emit(value)

    def _show_folder(self, folder: str) -> None:
        self._data_storage_folder = folder
        self._data_storage_folder_input.setText(folder)
        self._data_storage_folder_input.setCursorPosition(0)

    def _on_browse_data_folder_clicked(self) -> None:
        selected = QFileDialog.getExistingDirectory(
            self,
            "Choose Data Folder",
            self._data_storage_folder,
            QFileDialog.Option.ShowDirsOnly,
        )
        if selected:
            self._apply_data_storage_folder_change(selected)

    def _apply_data_storage_folder_change(self, requested_folder: str) -> None:
        applied = str(requested_folder or "").strip()
        if callable(self._on_data_storage_folder_changed):
            try:
                result = self._on_data_storage_folder_changed(applied)
            except Exception as exc:
                self._status_label.setText(f"Data folder update failed: {exc}")
                return
            if isinstance(result, str) and result.strip():
                applied = result.strip()
        self._show_folder(applied)
        self._status_label.setText(f"Data folder: {applied}" if applied else "Data folder updated.")
        self.data_storage_folder_changed.emit(applied)
