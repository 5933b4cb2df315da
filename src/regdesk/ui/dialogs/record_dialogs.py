from __future__ import annotations

from collections.abc import Iterable, Sequence

from PySide6.QtCore import QDate, Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QFormLayout,
    QGridLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QScrollArea,
    QWidget,
)

from regdesk.app.errors import RecordValidationError
from regdesk.app.exporter import DEFAULT_EXPORT_FIELDS, EXPORT_FIELDS, NO_FIELDS_MESSAGE, export_cell
from regdesk.app.record_models import PRIORITY_LEVELS, Option, VoterRecord, parse_iso_date
from regdesk.app.record_validation import RecordForm, validate_record_form
from regdesk.app.reference_data import ReferenceOptions
from regdesk.ui.widgets.community_tags import CommunityTagInput
from regdesk.ui.window.app_dialogs import AppMessageDialog
from regdesk.ui.window.frameless_dialog import BUTTON_DANGER, BUTTON_PRIMARY, FramelessDialog


_DATE_FORMAT = "yyyy-MM-dd"
_EMPTY_DATE = QDate(1900, 1, 1)


def _fill_option_combo(
    combo: QComboBox,
    options: Iterable[Option],
    *,
    placeholder: str,
    current: Option | None = None,
) -> None:
    combo.clear()
    combo.addItem(placeholder, "")
    for option in options:
        combo.addItem(option.display, option.value)
    if current is None:
        combo.setCurrentIndex(0)
        return
    index = combo.findData(current.value)
    if index < 0:
        combo.addItem(current.display, current.value)
        index = combo.count() - 1
    combo.setCurrentIndex(index)


class RecordEditorDialog(FramelessDialog):
    """Add/edit form for one voter record."""

    def __init__(
        self,
        *,
        reference: ReferenceOptions,
        records: Sequence[VoterRecord],
        record: VoterRecord | None = None,
        community_suggestions: Iterable[str] = (),
        parent: QWidget,
        theme_mode: str,
    ) -> None:
        super().__init__(
            title="Edit Record" if record is not None else "Add Record",
            parent=parent,
            theme_mode=theme_mode,
        )
        self.setMinimumSize(640, 620)
        self.resize(720, 760)
        self._records = list(records)
        self._record = record

        scroll = QScrollArea(self.body)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        host = QWidget(scroll)
        form = QFormLayout(host)
        form.setContentsMargins(0, 0, 8, 0)
        form.setHorizontalSpacing(12)
        form.setVerticalSpacing(10)

        self._name_input = QLineEdit(host)
        form.addRow("Name *", self._name_input)

        self._nic_input = QLineEdit(host)
        self._nic_input.setPlaceholderText("At least 9 characters")
        form.addRow("NIC *", self._nic_input)

        self._dob_input = QDateEdit(host)
        self._dob_input.setCalendarPopup(True)
        self._dob_input.setDisplayFormat(_DATE_FORMAT)
        self._dob_input.setMinimumDate(_EMPTY_DATE)
        self._dob_input.setSpecialValueText(" ")
        self._dob_input.setDate(_EMPTY_DATE)
        form.addRow("Date of Birth *", self._dob_input)

        self._party_id_input = QLineEdit(host)
        self._party_id_input.setPlaceholderText("6 digits")
        self._party_id_input.setMaxLength(6)
        form.addRow("Political Party ID *", self._party_id_input)

        self._priority_combo = QComboBox(host)
        self._priority_combo.addItem("Select priority", "")
        for level in PRIORITY_LEVELS:
            self._priority_combo.addItem(level, level)
        form.addRow("Priority", self._priority_combo)

        self._mobile1_input = QLineEdit(host)
        form.addRow("Mobile 1", self._mobile1_input)
        self._mobile2_input = QLineEdit(host)
        form.addRow("Mobile 2", self._mobile2_input)
        self._whatsapp_input = QLineEdit(host)
        form.addRow("WhatsApp", self._whatsapp_input)
        self._home_number_input = QLineEdit(host)
        form.addRow("Home Number", self._home_number_input)

        self._address_input = QPlainTextEdit(host)
        self._address_input.setFixedHeight(70)
        form.addRow("Address *", self._address_input)

        self._region_combo = QComboBox(host)
        _fill_option_combo(
            self._region_combo,
            reference.regions,
            placeholder="Select region",
            current=record.region if record else None,
        )
        form.addRow("Region *", self._region_combo)

        self._aga_combo = QComboBox(host)
        _fill_option_combo(
            self._aga_combo,
            reference.aga_divisions,
            placeholder="Select AGA division",
            current=record.aga_division if record else None,
        )
        form.addRow("AGA Division *", self._aga_combo)

        self._gs_combo = QComboBox(host)
        _fill_option_combo(
            self._gs_combo,
            reference.gs_divisions,
            placeholder="Select GS division",
            current=record.gs_division if record else None,
        )
        form.addRow("GS Division *", self._gs_combo)

        self._booth_combo = QComboBox(host)
        _fill_option_combo(
            self._booth_combo,
            reference.pooling_booths,
            placeholder="Select pooling booth",
            current=record.pooling_booth if record else None,
        )
        form.addRow("Pooling Booth *", self._booth_combo)

        self._connectivity_input = QLineEdit(host)
        form.addRow("Connectivity", self._connectivity_input)

        self._communities_input = CommunityTagInput(host)
        self._communities_input.set_suggestions(community_suggestions)
        form.addRow("Communities", self._communities_input)

        scroll.setWidget(host)
        self.body_layout.addWidget(scroll, 1)

        cancel_button = self.make_button("Cancel")
        cancel_button.clicked.connect(self.reject)
        save_button = self.make_button("Update Record" if record is not None else "Save Record", role=BUTTON_PRIMARY)
        save_button.clicked.connect(self._on_save)
        self.add_footer(cancel_button, save_button)

        if record is not None:
            self._load_record(record)
        self._name_input.setFocus()

    def _load_record(self, record: VoterRecord) -> None:
        self._name_input.setText(record.name)
        self._nic_input.setText(record.nic)
        dob = parse_iso_date(record.dob)
        if dob is not None:
            self._dob_input.setDate(QDate(dob.year, dob.month, dob.day))
        self._party_id_input.setText(record.political_party_id)
        index = self._priority_combo.findData(record.priority)
        self._priority_combo.setCurrentIndex(max(0, index))
        self._mobile1_input.setText(record.mobile1)
        self._mobile2_input.setText(record.mobile2)
        self._whatsapp_input.setText(record.whatsapp)
        self._home_number_input.setText(record.home_number)
        self._address_input.setPlainText(record.address)
        self._connectivity_input.setText(record.connectivity)
        self._communities_input.set_communities(record.communities)

    def _dob_text(self) -> str:
        value = self._dob_input.date()
        if value == _EMPTY_DATE:
            return ""
        return value.toString(_DATE_FORMAT)

    def build_form(self) -> RecordForm:
        return RecordForm(
            name=self._name_input.text().strip(),
            nic=self._nic_input.text().strip(),
            address=self._address_input.toPlainText().strip(),
            dob=self._dob_text(),
            political_party_id=self._party_id_input.text().strip(),
            priority=str(self._priority_combo.currentData() or ""),
            mobile1=self._mobile1_input.text().strip(),
            mobile2=self._mobile2_input.text().strip(),
            whatsapp=self._whatsapp_input.text().strip(),
            home_number=self._home_number_input.text().strip(),
            region=str(self._region_combo.currentData() or ""),
            aga_division=str(self._aga_combo.currentData() or ""),
            gs_division=str(self._gs_combo.currentData() or ""),
            pooling_booth=str(self._booth_combo.currentData() or ""),
            connectivity=self._connectivity_input.text().strip(),
            communities=self._communities_input.communities(),
        )

    def _on_save(self) -> None:
        editing_id = self._record.record_id if self._record is not None else ""
        try:
            validate_record_form(self.build_form(), self._records, editing_id=editing_id)
        except RecordValidationError as exc:
            AppMessageDialog.show_warning(
                parent=self,
                title="Check Record",
                message=exc.message,
                theme_mode=self._theme_mode,
            )
            return
        self.accept()


class RecordDetailsDialog(FramelessDialog):
    ACTION_EDIT = "edit"
    ACTION_DELETE = "delete"

    def __init__(self, *, record: VoterRecord, parent: QWidget, theme_mode: str) -> None:
        super().__init__(title="Record Details", parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(600, 520)
        self.resize(660, 600)
        self.action = ""

        title = QLabel(record.name or "(no name)", self.body)
        title.setObjectName("PanelTitle")
        self.body_layout.addWidget(title)

        grid = QGridLayout()
        grid.setHorizontalSpacing(16)
        grid.setVerticalSpacing(6)
        for row, (key, label) in enumerate(EXPORT_FIELDS):
            name_label = QLabel(label, self.body)
            name_label.setObjectName("PanelMeta")
            value_label = QLabel(export_cell(record, key), self.body)
            value_label.setWordWrap(True)
            value_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            grid.addWidget(name_label, row, 0, Qt.AlignmentFlag.AlignTop)
            grid.addWidget(value_label, row, 1)
        grid.setColumnStretch(1, 1)
        self.body_layout.addLayout(grid)
        self.body_layout.addStretch(1)

        delete_button = self.make_button("Delete", role=BUTTON_DANGER)
        delete_button.clicked.connect(lambda: self._finish(self.ACTION_DELETE))
        edit_button = self.make_button("Edit", role=BUTTON_PRIMARY)
        edit_button.clicked.connect(lambda: self._finish(self.ACTION_EDIT))
        close_button = self.make_button("Close")
        close_button.clicked.connect(self.reject)
        self.add_footer(close_button, delete_button, edit_button)

    def _finish(self, action: str) -> None:
        self.action = action
        self.accept()


class CommunityEditorDialog(FramelessDialog):
    def __init__(
        self,
        *,
        reference: ReferenceOptions,
        parent: QWidget,
        theme_mode: str,
    ) -> None:
        super().__init__(title="Add Community", parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(520, 300)
        self.resize(560, 320)

        form = QFormLayout()
        form.setContentsMargins(0, 0, 0, 0)
        form.setHorizontalSpacing(12)
        form.setVerticalSpacing(10)

        self._name_input = QLineEdit(self.body)
        form.addRow("Community Name *", self._name_input)

        self._aga_combo = QComboBox(self.body)
        _fill_option_combo(self._aga_combo, reference.aga_divisions, placeholder="Select AGA division")
        form.addRow("AGA Division", self._aga_combo)

        self._gs_combo = QComboBox(self.body)
        _fill_option_combo(self._gs_combo, reference.gs_divisions, placeholder="Select GS division")
        form.addRow("GS Division", self._gs_combo)
        self.body_layout.addLayout(form)
        self.body_layout.addStretch(1)

        cancel_button = self.make_button("Cancel")
        cancel_button.clicked.connect(self.reject)
        save_button = self.make_button("Add Community", role=BUTTON_PRIMARY)
        save_button.clicked.connect(self._on_save)
        self.add_footer(cancel_button, save_button)
        self._name_input.returnPressed.connect(self._on_save)
        self._name_input.setFocus()

    @property
    def name(self) -> str:
        return self._name_input.text().strip()

    @property
    def aga_division(self) -> str:
        return str(self._aga_combo.currentData() or "")

    @property
    def gs_division(self) -> str:
        return str(self._gs_combo.currentData() or "")

    def _on_save(self) -> None:
        if not self.name:
            AppMessageDialog.show_warning(
                parent=self,
                title="Missing Name",
                message="Please enter a community name",
                theme_mode=self._theme_mode,
            )
            return
        self.accept()


class ExportFieldsDialog(FramelessDialog):
    """Column picker for the table export."""

    def __init__(
        self,
        *,
        record_count: int,
        selected: Iterable[str] = DEFAULT_EXPORT_FIELDS,
        parent: QWidget,
        theme_mode: str,
    ) -> None:
        super().__init__(title="Export to PDF", parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(520, 460)
        self.resize(560, 500)
        chosen = set(selected)

        self.add_message(f"Select the fields to include. {record_count} filtered record(s) will be exported.")

        grid = QGridLayout()
        grid.setHorizontalSpacing(16)
        grid.setVerticalSpacing(6)
        self._checkboxes: list[tuple[str, QCheckBox]] = []
        for index, (key, label) in enumerate(EXPORT_FIELDS):
            checkbox = QCheckBox(label, self.body)
            checkbox.setChecked(key in chosen)
            grid.addWidget(checkbox, index // 2, index % 2)
            self._checkboxes.append((key, checkbox))
        self.body_layout.addLayout(grid)
        self.body_layout.addStretch(1)

        cancel_button = self.make_button("Cancel")
        cancel_button.clicked.connect(self.reject)
        export_button = self.make_button("Generate PDF", role=BUTTON_PRIMARY)
        export_button.clicked.connect(self._on_export)
        self.add_footer(cancel_button, export_button)

    def selected_fields(self) -> list[str]:
        return [key for key, checkbox in self._checkboxes if checkbox.isChecked()]

    def _on_export(self) -> None:
        if not self.selected_fields():
            AppMessageDialog.show_warning(
                parent=self,
                title="No Fields Selected",
                message=NO_FIELDS_MESSAGE,
                theme_mode=self._theme_mode,
            )
            return
        self.accept()

