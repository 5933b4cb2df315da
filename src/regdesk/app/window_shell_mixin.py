from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication

from regdesk.app.data_store import LocalJsonDataStore
from regdesk.app.normalizer import RecordNormalizer
from regdesk.app.reference_data import load_reference_options
from regdesk.app.settings_store import (
    ensure_data_directory,
    normalize_data_directory,
    save_dark_mode,
    save_data_directory,
)
from regdesk.app.state_containers import VIEW_HOME
from regdesk.ui.settings_dialog import SettingsDialog
from regdesk.ui.theme import apply_app_theme


_log = logging.getLogger("regdesk.settings")


class WindowShellMixin:
    def open_settings_dialog(self, *_args: object) -> None:
        dialog = self._settings_dialog
        if dialog is None:
            dialog = SettingsDialog(
                parent=self,
                dark_mode_enabled=self._dark_mode_enabled,
                on_dark_mode_changed=self._on_dark_mode_changed,
                data_storage_folder=str(self._data_storage_folder),
                on_data_storage_folder_changed=self._on_data_storage_folder_changed,
                records_per_page=self._session.pagination.page_size,
                on_records_per_page_changed=self._on_records_per_page_changed,
                app_version=self._app_version,
            )
            dialog.setModal(False)
            dialog.setWindowModality(Qt.WindowModality.NonModal)
            dialog.finished.connect(self._on_settings_dialog_finished)
            self._settings_dialog = dialog

        dialog.set_theme_mode("dark" if self._dark_mode_enabled else "light")
        dialog.show()
        dialog.raise_()
        dialog.activateWindow()

    def close_settings_dialog(self) -> bool:
        dialog = self._settings_dialog
        if dialog is None:
            return False
        dialog.close()
        return True

    def closeEvent(self, event) -> None:
        if self._view_state.export_running:
            if not self._confirm_dialog(
                "Export Running",
                "A PDF export is still being generated. Exit anyway?",
                confirm_text="Exit",
                cancel_text="Cancel",
            ):
                event.ignore()
                return
        self.close_settings_dialog()
        _log.info("Window closed")
        super().closeEvent(event)

    def _on_settings_dialog_finished(self, _result: int) -> None:
        dialog = self._settings_dialog
        self._settings_dialog = None
        if dialog is not None:
            dialog.deleteLater()

    def _on_dark_mode_changed(self, enabled: bool) -> None:
        self._dark_mode_enabled = bool(enabled)
        self._storage_state.dark_mode = self._dark_mode_enabled
        save_dark_mode(self._dark_mode_enabled)
        mode = "dark" if self._dark_mode_enabled else "light"
        app = QApplication.instance()
        if app is not None:
            apply_app_theme(app, mode=mode)
        self.set_theme_mode(mode)
        if self._settings_dialog is not None:
            self._settings_dialog.set_theme_mode(mode)

    def _on_records_per_page_changed(self, value: int) -> None:
        self._apply_records_per_page(value, persist=True)

    def _on_data_storage_folder_changed(self, requested_folder: str) -> str:
        target_folder = normalize_data_directory(requested_folder)
        if target_folder == self._data_storage_folder:
            return str(self._data_storage_folder)

        if not ensure_data_directory(target_folder):
            self._show_warning_dialog(
                "Storage Folder Error",
                f"Could not create the data folder:\n{target_folder}",
            )
            return str(self._data_storage_folder)

        saved_folder = save_data_directory(target_folder)
        if saved_folder is None:
            self._show_warning_dialog(
                "Storage Folder Error",
                "Could not save the data folder setting. The previous folder stays active.",
            )
            return str(self._data_storage_folder)

        self._data_storage_folder = saved_folder
        self._storage_state.data_directory = saved_folder
        self._data_store = LocalJsonDataStore(saved_folder)
        self._normalizer = RecordNormalizer(load_reference_options(saved_folder))
        self._record_store.set_data_store(self._data_store, self._normalizer)
        self._community_store.set_data_store(self._data_store, self._normalizer)

        warnings = self._load_all_data()
        self._refresh_filter_options()
        self._clear_filters()
        self._set_active_view(VIEW_HOME)
        self._refresh_all_views()
        _log.info("Switched data folder to %s", saved_folder)
        if warnings:
            self._show_warning_dialog("Storage Warning", "\n\n".join(warnings))
        else:
            self._show_info_dialog(
                "Data Folder Updated",
                f"Loaded {self._record_store.total} record(s) from:\n{saved_folder}",
            )
        return str(saved_folder)
