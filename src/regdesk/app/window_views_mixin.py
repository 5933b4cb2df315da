from __future__ import annotations

from functools import partial

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QStackedWidget,
    QTableWidget,
    QVBoxLayout,
    QWidget,
)

from regdesk.app.record_models import PRIORITY_LEVELS
from regdesk.app.settings_store import RECORDS_PER_PAGE_CHOICES
from regdesk.app.state_containers import VIEW_COMMUNITIES, VIEW_HOME, VIEW_RECORDS
from regdesk.ui.widgets.loading_overlay import LoadingOverlay


RECORD_TABLE_HEADERS: tuple[str, ...] = (
    "Name",
    "NIC",
    "Party ID",
    "Mobile 1",
    "Region",
    "AGA Division",
    "Actions",
)
COMMUNITY_TABLE_HEADERS: tuple[str, ...] = ("Community", "AGA Division", "GS Division", "Actions")


def _action_button(text: str, parent: QWidget, *, primary: bool = False) -> QPushButton:
    button = QPushButton(text, parent)
    button.setObjectName("ActionButton")
    if primary:
        button.setProperty("primary", "true")
    button.setMinimumHeight(30)
    return button


class WindowViewsMixin:
    def _build_body(self) -> None:
        host = QWidget(self.body_widget)
        root = QHBoxLayout(host)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        nav = QFrame(host)
        nav.setObjectName("Panel")
        nav.setFixedWidth(190)
        nav_layout = QVBoxLayout(nav)
        nav_layout.setContentsMargins(10, 14, 10, 14)
        nav_layout.setSpacing(6)
        for view_key, label in (
            (VIEW_HOME, "Home"),
            (VIEW_RECORDS, "Records"),
            (VIEW_COMMUNITIES, "Communities"),
        ):
            button = QPushButton(label, nav)
            button.setObjectName("NavButton")
            button.setCheckable(True)
            button.setMinimumHeight(34)
            button.clicked.connect(partial(self._set_active_view, view_key))
            nav_layout.addWidget(button)
            self._nav_buttons[view_key] = button
        nav_layout.addStretch(1)
        settings_button = QPushButton("Settings", nav)
        settings_button.setObjectName("NavButton")
        settings_button.setMinimumHeight(34)
        settings_button.clicked.connect(self.open_settings_dialog)
        nav_layout.addWidget(settings_button)
        root.addWidget(nav, 0)

        self._view_stack = QStackedWidget(host)
        self._views[VIEW_HOME] = self._build_home_view(self._view_stack)
        self._views[VIEW_RECORDS] = self._build_records_view(self._view_stack)
        self._views[VIEW_COMMUNITIES] = self._build_communities_view(self._view_stack)
        for view in self._views.values():
            self._view_stack.addWidget(view)
        root.addWidget(self._view_stack, 1)

        self.body_layout.addWidget(host, 1)
        self._loading_overlay = LoadingOverlay(host)

    def _build_home_view(self, parent: QWidget) -> QWidget:
        view = QWidget(parent)
        layout = QVBoxLayout(view)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        self._greeting_label = QLabel("", view)
        self._greeting_label.setObjectName("PanelTitle")
        layout.addWidget(self._greeting_label)

        hint = QLabel("Add voter registration records, filter them, and export them as PDF.", view)
        hint.setObjectName("PanelHint")
        hint.setWordWrap(True)
        layout.addWidget(hint)

        stats = QGridLayout()
        stats.setHorizontalSpacing(16)
        stats.setVerticalSpacing(16)
        self._total_records_label = self._stat_card(view, stats, 0, "Total Records")
        self._today_records_label = self._stat_card(view, stats, 1, "Added Today")
        self._total_communities_label = self._stat_card(view, stats, 2, "Communities")
        layout.addLayout(stats)

        actions = QHBoxLayout()
        actions.setSpacing(8)
        add_button = _action_button("Add Record", view, primary=True)
        add_button.clicked.connect(self._add_record)
        actions.addWidget(add_button)
        view_button = _action_button("View Records", view)
        view_button.clicked.connect(partial(self._set_active_view, VIEW_RECORDS))
        actions.addWidget(view_button)
        actions.addStretch(1)
        layout.addLayout(actions)

        self._storage_path_label = QLabel("", view)
        self._storage_path_label.setObjectName("PanelMeta")
        self._storage_path_label.setWordWrap(True)
        layout.addWidget(self._storage_path_label)
        layout.addStretch(1)
        return view

    def _stat_card(self, parent: QWidget, grid: QGridLayout, column: int, title: str) -> QLabel:
        card = QFrame(parent)
        card.setObjectName("StatCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(16, 14, 16, 14)
        card_layout.setSpacing(4)
        value_label = QLabel("0", card)
        value_label.setObjectName("StatValue")
        card_layout.addWidget(value_label)
        title_label = QLabel(title, card)
        title_label.setObjectName("PanelMeta")
        card_layout.addWidget(title_label)
        grid.addWidget(card, 0, column)
        return value_label

    def _build_records_view(self, parent: QWidget) -> QWidget:
        view = QWidget(parent)
        layout = QVBoxLayout(view)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(10)

        title = QLabel("Records", view)
        title.setObjectName("PanelTitle")
        layout.addWidget(title)

        filter_row = QHBoxLayout()
        filter_row.setSpacing(8)
        self._name_filter_input = QLineEdit(view)
        self._name_filter_input.setPlaceholderText("Search name")
        self._name_filter_input.textChanged.connect(self._on_filters_changed)
        filter_row.addWidget(self._name_filter_input, 2)
        self._nic_filter_input = QLineEdit(view)
        self._nic_filter_input.setPlaceholderText("Search NIC")
        self._nic_filter_input.textChanged.connect(self._on_filters_changed)
        filter_row.addWidget(self._nic_filter_input, 2)
        self._gs_filter_combo = QComboBox(view)
        self._gs_filter_combo.currentIndexChanged.connect(self._on_filters_changed)
        filter_row.addWidget(self._gs_filter_combo, 2)
        self._booth_filter_combo = QComboBox(view)
        self._booth_filter_combo.currentIndexChanged.connect(self._on_filters_changed)
        filter_row.addWidget(self._booth_filter_combo, 2)
        self._priority_filter_combo = QComboBox(view)
        self._priority_filter_combo.addItem("All priorities", "")
        for level in PRIORITY_LEVELS:
            self._priority_filter_combo.addItem(f"Priority {level}", level)
        self._priority_filter_combo.currentIndexChanged.connect(self._on_filters_changed)
        filter_row.addWidget(self._priority_filter_combo, 1)
        clear_button = _action_button("Clear", view)
        clear_button.clicked.connect(self._clear_filters)
        filter_row.addWidget(clear_button, 0)
        layout.addLayout(filter_row)

        action_row = QHBoxLayout()
        action_row.setSpacing(8)
        add_button = _action_button("Add Record", view, primary=True)
        add_button.clicked.connect(self._add_record)
        action_row.addWidget(add_button)
        self._export_table_button = _action_button("Export PDF", view)
        self._export_table_button.clicked.connect(self._export_records_pdf)
        action_row.addWidget(self._export_table_button)
        self._export_cards_button = _action_button("Print Address List", view)
        self._export_cards_button.clicked.connect(self._export_address_list)
        action_row.addWidget(self._export_cards_button)
        action_row.addStretch(1)
        delete_all_button = QPushButton("Delete All", view)
        delete_all_button.setObjectName("DangerButton")
        delete_all_button.setMinimumHeight(30)
        delete_all_button.clicked.connect(self._clear_all_records)
        action_row.addWidget(delete_all_button)
        layout.addLayout(action_row)

        self._records_table = QTableWidget(0, len(RECORD_TABLE_HEADERS), view)
        self._records_table.setHorizontalHeaderLabels(list(RECORD_TABLE_HEADERS))
        self._records_table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._records_table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self._records_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._records_table.verticalHeader().setVisible(False)
        self._records_table.setAlternatingRowColors(True)
        header = self._records_table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(len(RECORD_TABLE_HEADERS) - 1, QHeaderView.ResizeMode.ResizeToContents)
        self._records_table.cellDoubleClicked.connect(self._on_record_row_double_clicked)
        layout.addWidget(self._records_table, 1)

        pagination_row = QHBoxLayout()
        pagination_row.setSpacing(6)
        self._pagination_info_label = QLabel("", view)
        self._pagination_info_label.setObjectName("PaginationInfo")
        pagination_row.addWidget(self._pagination_info_label)
        pagination_row.addStretch(1)
        self._previous_page_button = _action_button("Previous", view)
        self._previous_page_button.clicked.connect(self._go_to_previous_page)
        pagination_row.addWidget(self._previous_page_button)
        self._page_buttons_host = QWidget(view)
        self._page_buttons_layout = QHBoxLayout(self._page_buttons_host)
        self._page_buttons_layout.setContentsMargins(0, 0, 0, 0)
        self._page_buttons_layout.setSpacing(4)
        pagination_row.addWidget(self._page_buttons_host)
        self._next_page_button = _action_button("Next", view)
        self._next_page_button.clicked.connect(self._go_to_next_page)
        pagination_row.addWidget(self._next_page_button)
        page_size_label = QLabel("Per page", view)
        page_size_label.setObjectName("PanelMeta")
        pagination_row.addWidget(page_size_label)
        self._page_size_combo = QComboBox(view)
        choices = sorted(set(RECORDS_PER_PAGE_CHOICES) | {self._session.pagination.page_size})
        for value in choices:
            self._page_size_combo.addItem(str(value), value)
        self._page_size_combo.setCurrentIndex(
            max(0, self._page_size_combo.findData(self._session.pagination.page_size))
        )
        self._page_size_combo.currentIndexChanged.connect(self._on_page_size_selected)
        pagination_row.addWidget(self._page_size_combo)
        layout.addLayout(pagination_row)
        return view

    def _build_communities_view(self, parent: QWidget) -> QWidget:
        view = QWidget(parent)
        layout = QVBoxLayout(view)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(10)

        header_row = QHBoxLayout()
        title = QLabel("Communities", view)
        title.setObjectName("PanelTitle")
        header_row.addWidget(title)
        header_row.addStretch(1)
        add_button = _action_button("Add Community", view, primary=True)
        add_button.clicked.connect(self._add_community)
        header_row.addWidget(add_button)
        layout.addLayout(header_row)

        self._communities_empty_label = QLabel("No communities added yet.", view)
        self._communities_empty_label.setObjectName("PanelHint")
        self._communities_empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._communities_empty_label)

        self._communities_table = QTableWidget(0, len(COMMUNITY_TABLE_HEADERS), view)
        self._communities_table.setHorizontalHeaderLabels(list(COMMUNITY_TABLE_HEADERS))
        self._communities_table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._communities_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._communities_table.verticalHeader().setVisible(False)
        header = self._communities_table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(len(COMMUNITY_TABLE_HEADERS) - 1, QHeaderView.ResizeMode.ResizeToContents)
        layout.addWidget(self._communities_table, 1)
        return view

    def _set_active_view(self, view_key: str, *_args: object) -> None:
        view = self._views.get(view_key)
        if view is None or self._view_stack is None:
            return
        self._view_state.active_view = view_key
        self._view_stack.setCurrentWidget(view)
        for key, button in self._nav_buttons.items():
            button.setChecked(key == view_key)
        if view_key == VIEW_HOME:
            self._refresh_home_view()
        elif view_key == VIEW_RECORDS:
            self._refresh_records_table()
        elif view_key == VIEW_COMMUNITIES:
            self._refresh_communities_table()
