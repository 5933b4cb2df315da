from __future__ import annotations

import logging

from regdesk.app.errors import RecordValidationError
from regdesk.app.record_models import VoterRecord
from regdesk.ui.dialogs.record_dialogs import RecordDetailsDialog, RecordEditorDialog


_log = logging.getLogger("regdesk.store")


class WindowRecordActionsMixin:
    def _open_record_editor(self, record: VoterRecord | None = None) -> RecordEditorDialog | None:
        dialog = RecordEditorDialog(
            reference=self._normalizer.reference,
            records=self._record_store.items,
            record=record,
            community_suggestions=self._community_suggestions(),
            parent=self,
            theme_mode=self._dialog_theme_mode(),
        )
        if dialog.exec() != dialog.DialogCode.Accepted:
            return None
        return dialog

    def _add_record(self, *_args: object) -> None:
        dialog = self._open_record_editor()
        if dialog is None:
            return
        try:
            result = self._record_store.add(dialog.build_form())
        except RecordValidationError as exc:
            self._show_warning_dialog("Check Record", exc.message)
            return
        if not result.saved:
            self._show_save_failed(self._record_store.file_name)
        _log.info("Added record %s", result.item.record_id)
        self._refresh_all_views()
        self._show_info_dialog("Record Saved", f"Record saved. Registration ID: {result.item.reg_id}")

    def _edit_record(self, record_id: str, *_args: object) -> None:
        record = self._record_by_id(record_id)
        if record is None:
            return
        self._view_state.editing_record_id = record.record_id
        try:
            dialog = self._open_record_editor(record)
            if dialog is None:
                return
            try:
                result = self._record_store.update(record.record_id, dialog.build_form())
            except RecordValidationError as exc:
                self._show_warning_dialog("Check Record", exc.message)
                return
        finally:
            self._view_state.editing_record_id = ""
        if result is None:
            return
        if not result.saved:
            self._show_save_failed(self._record_store.file_name)
        self._refresh_all_views()

    def _delete_record(self, record_id: str, *_args: object) -> None:
        def _confirm(record: VoterRecord) -> bool:
            return self._confirm_dialog(
                "Delete Record",
                f"Delete the record for '{record.name or '(no name)'}' (NIC {record.nic or '-'})?",
                confirm_text="Delete",
                cancel_text="Cancel",
                danger=True,
            )

        result = self._record_store.delete(record_id, confirm=_confirm)
        if result is None:
            return
        if self._view_state.selected_record_id == result.item.record_id:
            self._view_state.selected_record_id = ""
        if not result.saved:
            self._show_save_failed(self._record_store.file_name)
        self._refresh_all_views()

    def _clear_all_records(self, *_args: object) -> None:
        if not self._record_store.total:
            self._show_info_dialog("Delete All", "There are no records to delete.")
            return

        def _confirm(count: int) -> bool:
            return self._confirm_dialog(
                "Delete All Records",
                f"Delete all {count} record(s)?\n\nThis cannot be undone.",
                confirm_text="Delete All",
                cancel_text="Cancel",
                danger=True,
            )

        before = self._record_store.total
        saved = self._record_store.clear_all(confirm=_confirm)
        if self._record_store.total == before:
            return
        self._view_state.selected_record_id = ""
        if not saved:
            self._show_save_failed(self._record_store.file_name)
        self._refresh_all_views()

    def _show_record_details(self, record_id: str, *_args: object) -> None:
        record = self._record_by_id(record_id)
        if record is None:
            return
        self._view_state.selected_record_id = record.record_id
        dialog = RecordDetailsDialog(
            record=record,
            parent=self,
            theme_mode=self._dialog_theme_mode(),
        )
        if dialog.exec() != dialog.DialogCode.Accepted:
            return
        if dialog.action == RecordDetailsDialog.ACTION_EDIT:
            self._edit_record(record.record_id)
        elif dialog.action == RecordDetailsDialog.ACTION_DELETE:
            self._delete_record(record.record_id)
