from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal
from PySide6.QtWidgets import QFileDialog

from regdesk.app.errors import ExportPreconditionError
from regdesk.app.exporter import (
    DEFAULT_EXPORT_FIELDS,
    LAYOUT_CARDS,
    LAYOUT_TABLE,
    NO_ROWS_MESSAGE,
    ExportRequest,
    build_export_request,
    default_export_file_name,
    render_export,
)
from regdesk.ui.dialogs.record_dialogs import ExportFieldsDialog


_log = logging.getLogger("regdesk.export")


class ExportWorkerSignals(QObject):
    finished = Signal(str)
    failed = Signal(str)


class ExportWorker(QRunnable):
    """Renders one export request off the UI thread."""

    def __init__(self, request: ExportRequest, path: Path) -> None:
        super().__init__()
        self.request = request
        self.path = path
        self.signals = ExportWorkerSignals()

    def run(self) -> None:
        try:
            written = render_export(self.request, self.path)
        except Exception as exc:
            _log.exception("Export to %s failed", self.path)
            self.signals.failed.emit(str(exc))
            return
        self.signals.finished.emit(str(written))


class WindowExportMixin:
    def _export_records_pdf(self, *_args: object) -> None:
        if self._export_blocked():
            return
        count = len(self._session.filtered())
        if not count:
            self._show_warning_dialog("Export", NO_ROWS_MESSAGE)
            return
        dialog = ExportFieldsDialog(
            record_count=count,
            selected=self._export_fields or DEFAULT_EXPORT_FIELDS,
            parent=self,
            theme_mode=self._dialog_theme_mode(),
        )
        if dialog.exec() != dialog.DialogCode.Accepted:
            return
        self._export_fields = tuple(dialog.selected_fields())
        self._start_export(self._export_fields, LAYOUT_TABLE)

    def _export_address_list(self, *_args: object) -> None:
        if self._export_blocked():
            return
        self._start_export(DEFAULT_EXPORT_FIELDS, LAYOUT_CARDS)

    def _export_blocked(self) -> bool:
        if self._view_state.export_running:
            self._show_info_dialog("Export Running", "An export is already in progress. Please wait for it to finish.")
            return True
        return False

    def _start_export(self, fields, layout: str) -> None:
        try:
            request = build_export_request(self._session, fields, layout)
        except ExportPreconditionError as exc:
            self._show_warning_dialog("Export", str(exc))
            return

        start_path = Path(self._data_storage_folder) / default_export_file_name(layout)
        selected, _filter = QFileDialog.getSaveFileName(
            self,
            "Save PDF",
            str(start_path),
            "PDF Files (*.pdf)",
        )
        if not selected:
            return
        target = Path(selected)
        if target.suffix.lower() != ".pdf":
            target = target.with_suffix(".pdf")

        worker = ExportWorker(request, target)
        worker.signals.finished.connect(self._on_export_finished)
        worker.signals.failed.connect(self._on_export_failed)
        self._export_worker = worker
        self._set_export_running(True, len(request.records))
        _log.info("Exporting %d record(s) as %s to %s", len(request.records), layout, target)
        QThreadPool.globalInstance().start(worker)

    def _set_export_running(self, running: bool, count: int = 0) -> None:
        self._view_state.export_running = running
        for button in (self._export_table_button, self._export_cards_button):
            if button is not None:
                button.setEnabled(not running)
        overlay = self._loading_overlay
        if overlay is None:
            return
        if running:
            overlay.show_message(f"Generating PDF for {count} record(s)...")
        else:
            overlay.hide()

    def _on_export_finished(self, path: str) -> None:
        self._export_worker = None
        self._set_export_running(False)
        self._show_info_dialog("Export Complete", f"PDF saved to:\n{path}")

    def _on_export_failed(self, message: str) -> None:
        self._export_worker = None
        self._set_export_running(False)
        self._show_warning_dialog("Export Failed", f"Could not generate the PDF.\n\n{message}")
