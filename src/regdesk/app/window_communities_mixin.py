from __future__ import annotations

from functools import partial

from PySide6.QtWidgets import QPushButton, QTableWidgetItem

from regdesk.app.errors import RecordValidationError
from regdesk.app.record_models import CommunityRecord, option_display
from regdesk.ui.dialogs.record_dialogs import CommunityEditorDialog


class WindowCommunitiesMixin:
    def _refresh_communities_table(self) -> None:
        table = self._communities_table
        if table is None:
            return
        communities = self._community_store.items
        self._communities_empty_label.setVisible(not communities)
        table.setVisible(bool(communities))
        table.setRowCount(0)
        table.setRowCount(len(communities))
        for row_index, community in enumerate(communities):
            values = (
                community.name,
                option_display(community.aga_division) or "-",
                option_display(community.gs_division) or "-",
            )
            for column, value in enumerate(values):
                table.setItem(row_index, column, QTableWidgetItem(value))
            delete_button = QPushButton("Delete", table)
            delete_button.setObjectName("DangerButton")
            delete_button.clicked.connect(partial(self._delete_community, community.community_id))
            table.setCellWidget(row_index, table.columnCount() - 1, delete_button)

    def _add_community(self, *_args: object) -> None:
        dialog = CommunityEditorDialog(
            reference=self._normalizer.reference,
            parent=self,
            theme_mode=self._dialog_theme_mode(),
        )
        if dialog.exec() != dialog.DialogCode.Accepted:
            return
        try:
            result = self._community_store.add(
                dialog.name,
                aga_division=dialog.aga_division,
                gs_division=dialog.gs_division,
            )
        except RecordValidationError as exc:
            self._show_warning_dialog("Check Community", exc.message)
            return
        if not result.saved:
            self._show_save_failed(self._community_store.file_name)
        self._refresh_all_views()

    def _delete_community(self, community_id: str, *_args: object) -> None:
        def _confirm(community: CommunityRecord) -> bool:
            return self._confirm_dialog(
                "Delete Community",
                f"Delete community '{community.name}'?\n\nRecords that list it keep their value.",
                confirm_text="Delete",
                cancel_text="Cancel",
                danger=True,
            )

        result = self._community_store.delete(community_id, confirm=_confirm)
        if result is None:
            return
        if not result.saved:
            self._show_save_failed(self._community_store.file_name)
        self._refresh_all_views()
