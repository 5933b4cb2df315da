from __future__ import annotations

import logging
import os
import sys
from datetime import date, datetime
from typing import Sequence

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QComboBox, QLabel, QLineEdit, QPushButton, QStackedWidget, QTableWidget, QWidget

from regdesk.app.data_store import LocalJsonDataStore
from regdesk.app.exporter import DEFAULT_EXPORT_FIELDS
from regdesk.app.filtering import PaginationState
from regdesk.app.normalizer import RecordNormalizer
from regdesk.app.record_store import CommunityStore, RecordStore
from regdesk.app.reference_data import load_reference_options
from regdesk.app.settings_store import (
    ensure_data_directory,
    load_dark_mode,
    load_data_directory,
    load_records_per_page,
)
from regdesk.app.state_containers import (
    VIEW_HOME,
    RecordSession,
    StorageState,
    ViewState,
    greeting_for_hour,
)
from regdesk.app.window_communities_mixin import WindowCommunitiesMixin
from regdesk.app.window_dialogs_mixin import WindowDialogsMixin
from regdesk.app.window_export_mixin import ExportWorker, WindowExportMixin
from regdesk.app.window_lookup_mixin import WindowLookupMixin
from regdesk.app.window_record_actions_mixin import WindowRecordActionsMixin
from regdesk.app.window_records_list_mixin import WindowRecordsListMixin
from regdesk.app.window_shell_mixin import WindowShellMixin
from regdesk.app.window_views_mixin import WindowViewsMixin
from regdesk.ui.settings_dialog import SettingsDialog
from regdesk.ui.theme import apply_app_theme
from regdesk.ui.widgets.loading_overlay import LoadingOverlay
from regdesk.ui.window.frameless_window import FramelessWindow
from regdesk.version import APP_NAME, APP_VERSION


_LOG_LEVEL_ENV = "REGDESK_LOG_LEVEL"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_log = logging.getLogger("regdesk.app")


def configure_logging(level: str | None = None) -> int:
    """Configure root logging from ``level`` or ``REGDESK_LOG_LEVEL`` (default WARNING)."""
    raw_level = str(level or os.getenv(_LOG_LEVEL_ENV, "") or "WARNING").strip().upper()
    resolved = logging.getLevelName(raw_level)
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logging.basicConfig(level=resolved, format=_LOG_FORMAT)
    logging.getLogger("regdesk").setLevel(resolved)
    return resolved


class RegDeskWindow(
    WindowDialogsMixin,
    WindowLookupMixin,
    WindowViewsMixin,
    WindowRecordsListMixin,
    WindowRecordActionsMixin,
    WindowCommunitiesMixin,
    WindowExportMixin,
    WindowShellMixin,
    FramelessWindow,
):
    def __init__(
        self,
        *,
        dark_mode_enabled: bool = False,
        records_per_page: int | None = None,
    ) -> None:
        theme_mode = "dark" if dark_mode_enabled else "light"
        super().__init__(title=APP_NAME, theme_mode=theme_mode)
        self.setMinimumSize(980, 640)
        self.resize(1220, 760)

        self._dark_mode_enabled = bool(dark_mode_enabled)
        self._app_version = APP_VERSION
        self._settings_dialog: SettingsDialog | None = None

        self._data_storage_folder = load_data_directory()
        ensure_data_directory(self._data_storage_folder)
        self._storage_state = StorageState(
            data_directory=self._data_storage_folder,
            dark_mode=self._dark_mode_enabled,
        )
        self._data_store = LocalJsonDataStore(self._data_storage_folder)
        self._normalizer = RecordNormalizer(load_reference_options(self._data_storage_folder))
        self._record_store = RecordStore(self._data_store, self._normalizer)
        self._community_store = CommunityStore(self._data_store, self._normalizer)
        self._session = RecordSession(
            store=self._record_store,
            pagination=PaginationState(page_size=records_per_page or load_records_per_page()),
        )
        self._view_state = ViewState()
        self._export_fields: tuple[str, ...] = DEFAULT_EXPORT_FIELDS
        self._export_worker: ExportWorker | None = None

        self._nav_buttons: dict[str, QPushButton] = {}
        self._views: dict[str, QWidget] = {}
        self._view_stack: QStackedWidget | None = None
        self._loading_overlay: LoadingOverlay | None = None
        self._greeting_label: QLabel | None = None
        self._total_records_label: QLabel | None = None
        self._today_records_label: QLabel | None = None
        self._total_communities_label: QLabel | None = None
        self._storage_path_label: QLabel | None = None
        self._name_filter_input: QLineEdit | None = None
        self._nic_filter_input: QLineEdit | None = None
        self._gs_filter_combo: QComboBox | None = None
        self._booth_filter_combo: QComboBox | None = None
        self._priority_filter_combo: QComboBox | None = None
        self._records_table: QTableWidget | None = None
        self._communities_table: QTableWidget | None = None
        self._communities_empty_label: QLabel | None = None
        self._page_size_combo: QComboBox | None = None
        self._export_table_button: QPushButton | None = None
        self._export_cards_button: QPushButton | None = None

        self._build_body()
        self._refresh_filter_options()
        self._startup_warnings = self._load_all_data()
        self._set_active_view(VIEW_HOME)

    def show_startup_warnings(self) -> None:
        warnings = self._startup_warnings
        self._startup_warnings = []
        if warnings:
            self._show_warning_dialog("Storage Warning", "\n\n".join(warnings))

    def _load_all_data(self) -> list[str]:
        warnings: list[str] = []
        for store in (self._record_store, self._community_store):
            outcome = store.load()
            if outcome.warning:
                warnings.append(outcome.warning)
            if outcome.restored_from_snapshot:
                warnings.append(f"Showing the last {outcome.count} {store.file_name} rows kept in memory.")
        _log.info(
            "Loaded %d record(s) and %d communities from %s",
            self._record_store.total,
            len(self._community_store),
            self._data_storage_folder,
        )
        return warnings

    def _refresh_home_view(self) -> None:
        if self._greeting_label is not None:
            self._greeting_label.setText(greeting_for_hour(datetime.now().hour))
        if self._total_records_label is not None:
            self._total_records_label.setText(str(self._record_store.total))
        if self._today_records_label is not None:
            self._today_records_label.setText(str(self._record_store.count_created_on(date.today())))
        if self._total_communities_label is not None:
            self._total_communities_label.setText(str(len(self._community_store)))
        if self._storage_path_label is not None:
            self._storage_path_label.setText(f"Data folder: {self._data_storage_folder}")
        self.set_title_status(self._data_storage_folder.name)

    def _refresh_all_views(self) -> None:
        self._refresh_home_view()
        self._refresh_records_table()
        self._refresh_communities_table()


def run(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    QApplication.setAttribute(Qt.ApplicationAttribute.AA_DontCreateNativeWidgetSiblings, True)
    app = QApplication.instance()
    if app is None:
        app = QApplication(list(argv or sys.argv))

    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    dark_mode_enabled = load_dark_mode(default=False)
    theme_mode = "dark" if dark_mode_enabled else "light"
    apply_app_theme(app, mode=theme_mode)
    _log.info("Starting %s %s", APP_NAME, APP_VERSION)

    window = RegDeskWindow(dark_mode_enabled=dark_mode_enabled)
    window.show()
    window.show_startup_warnings()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(run())
