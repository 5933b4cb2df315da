from __future__ import annotations

from functools import partial

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QPushButton, QTableWidgetItem, QWidget

from regdesk.app.filtering import FilterSpec, display_range, page_window
from regdesk.app.record_models import Option, VoterRecord, option_display
from regdesk.app.settings_store import save_records_per_page


_EMPTY = "-"


class WindowRecordsListMixin:
    def _refresh_filter_options(self) -> None:
        reference = self._normalizer.reference
        self._fill_filter_combo(self._gs_filter_combo, "All GS divisions", reference.gs_divisions)
        self._fill_filter_combo(self._booth_filter_combo, "All pooling booths", reference.pooling_booths)

    def _fill_filter_combo(self, combo: QComboBox | None, all_label: str, options: tuple[Option, ...]) -> None:
        if combo is None:
            return
        current = self._current_filter_value(combo)
        combo.blockSignals(True)
        combo.clear()
        combo.addItem(all_label, "")
        for option in options:
            combo.addItem(option.display, option.value)
        index = combo.findData(current)
        combo.setCurrentIndex(index if index >= 0 else 0)
        combo.blockSignals(False)

    def _filter_spec_from_inputs(self) -> FilterSpec:
        return FilterSpec(
            name=self._current_search(self._name_filter_input),
            nic=self._current_search(self._nic_filter_input),
            gs_division=self._current_filter_value(self._gs_filter_combo),
            pooling_booth=self._current_filter_value(self._booth_filter_combo),
            priority=self._current_filter_value(self._priority_filter_combo),
        )

    def _on_filters_changed(self, *_args: object) -> None:
        self._session.set_filters(self._filter_spec_from_inputs())
        self._refresh_records_table()

    def _clear_filters(self) -> None:
        inputs = (self._name_filter_input, self._nic_filter_input)
        combos = (self._gs_filter_combo, self._booth_filter_combo, self._priority_filter_combo)
        for widget in (*inputs, *combos):
            widget.blockSignals(True)
        for line_edit in inputs:
            line_edit.clear()
        for combo in combos:
            combo.setCurrentIndex(0)
        for widget in (*inputs, *combos):
            widget.blockSignals(False)
        self._session.clear_filters()
        self._refresh_records_table()

    def _refresh_records_table(self) -> None:
        table = self._records_table
        if table is None:
            return
        rows = self._session.current_page_rows()
        table.setRowCount(0)
        if not rows:
            table.setRowCount(1)
            item = QTableWidgetItem("No records found.")
            item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
            item.setFlags(Qt.ItemFlag.ItemIsEnabled)
            table.setItem(0, 0, item)
            table.setSpan(0, 0, 1, table.columnCount())
        else:
            table.clearSpans()
            table.setRowCount(len(rows))
            for row_index, record in enumerate(rows):
                self._populate_record_row(row_index, record)
        self._refresh_pagination_controls()

    def _populate_record_row(self, row_index: int, record: VoterRecord) -> None:
        table = self._records_table
        values = (
            record.name,
            record.nic,
            record.political_party_id,
            record.mobile1 or _EMPTY,
            option_display(record.region) or _EMPTY,
            option_display(record.aga_division) or _EMPTY,
        )
        for column, value in enumerate(values):
            item = QTableWidgetItem(value)
            item.setData(Qt.ItemDataRole.UserRole, record.record_id)
            table.setItem(row_index, column, item)

        actions = QWidget(table)
        actions_layout = QHBoxLayout(actions)
        actions_layout.setContentsMargins(4, 2, 4, 2)
        actions_layout.setSpacing(4)
        for text, handler in (
            ("View", self._show_record_details),
            ("Edit", self._edit_record),
            ("Delete", self._delete_record),
        ):
            button = QPushButton(text, actions)
            button.setObjectName("DangerButton" if text == "Delete" else "ActionButton")
            button.clicked.connect(partial(handler, record.record_id))
            actions_layout.addWidget(button)
        table.setCellWidget(row_index, table.columnCount() - 1, actions)

    def _on_record_row_double_clicked(self, row: int, _column: int) -> None:
        item = self._records_table.item(row, 0)
        if item is None:
            return
        record_id = str(item.data(Qt.ItemDataRole.UserRole) or "")
        if record_id:
            self._show_record_details(record_id)

    def _refresh_pagination_controls(self) -> None:
        count = len(self._session.filtered())
        pagination = self._session.pagination
        total = pagination.total_pages(count)
        start, end = display_range(pagination.page, pagination.page_size, count)
        self._pagination_info_label.setText(f"Showing {start} - {end} of {count} records")
        self._previous_page_button.setEnabled(pagination.page > 1)
        self._next_page_button.setEnabled(pagination.page < total)

        layout = self._page_buttons_layout
        while layout.count():
            item = layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        for page in page_window(pagination.page, total):
            if page is None:
                gap = QLabel("...", self._page_buttons_host)
                gap.setObjectName("PanelMeta")
                layout.addWidget(gap)
                continue
            button = QPushButton(str(page), self._page_buttons_host)
            button.setObjectName("PageButton")
            button.setCheckable(True)
            button.setChecked(page == pagination.page)
            button.clicked.connect(partial(self._go_to_page, page))
            layout.addWidget(button)

    def _go_to_page(self, page: int, *_args: object) -> None:
        if self._session.go_to_page(page):
            self._refresh_records_table()

    def _go_to_next_page(self) -> None:
        if self._session.next_page():
            self._refresh_records_table()

    def _go_to_previous_page(self) -> None:
        if self._session.previous_page():
            self._refresh_records_table()

    def _on_page_size_selected(self, *_args: object) -> None:
        value = self._page_size_combo.currentData()
        if not isinstance(value, int):
            return
        self._apply_records_per_page(value, persist=True)

    def _apply_records_per_page(self, value: int, *, persist: bool) -> None:
        if value != self._session.pagination.page_size:
            self._session.set_page_size(value)
        if persist:
            save_records_per_page(value)
        combo = self._page_size_combo
        if combo is not None:
            index = combo.findData(value)
            if index < 0:
                combo.addItem(str(value), value)
                index = combo.count() - 1
            if index != combo.currentIndex():
                combo.blockSignals(True)
                combo.setCurrentIndex(index)
                combo.blockSignals(False)
        self._refresh_records_table()
