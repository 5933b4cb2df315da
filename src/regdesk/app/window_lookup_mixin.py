from __future__ import annotations

from PySide6.QtWidgets import QComboBox, QLineEdit

from regdesk.app.record_models import VoterRecord


class WindowLookupMixin:
    def _current_search(self, widget: QLineEdit | None) -> str:
        if widget is None:
            return ""
        return widget.text().strip()

    def _current_filter_value(self, combo: QComboBox | None) -> str:
        if combo is None:
            return ""
        return str(combo.currentData() or "").strip()

    def _record_by_id(self, record_id: str) -> VoterRecord | None:
        return self._record_store.get(record_id)

    def _community_suggestions(self) -> list[str]:
        return self._record_store.community_suggestions(self._community_store.items)
