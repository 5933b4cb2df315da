from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from regdesk.app.filtering import FilterSpec, PaginationState, apply_filters, paginate
from regdesk.app.record_models import VoterRecord
from regdesk.app.record_store import RecordStore


VIEW_HOME = "home"
VIEW_RECORDS = "records"
VIEW_COMMUNITIES = "communities"


@dataclass(slots=True)
class ViewState:
    active_view: str = VIEW_HOME
    selected_record_id: str = ""
    editing_record_id: str = ""
    export_running: bool = False

    @property
    def editing(self) -> bool:
        return bool(self.editing_record_id)


@dataclass(slots=True)
class StorageState:
    data_directory: Path
    dark_mode: bool = False


@dataclass(slots=True)
class RecordSession:
    """Records plus the filter and page the list view is showing."""

    store: RecordStore
    filters: FilterSpec = field(default_factory=FilterSpec)
    pagination: PaginationState = field(default_factory=PaginationState)

    def set_filters(self, filters: FilterSpec) -> None:
        self.filters = filters
        self.pagination.reset()

    def clear_filters(self) -> None:
        self.set_filters(FilterSpec())

    def filtered(self) -> list[VoterRecord]:
        return apply_filters(self.store.items, self.filters)

    def current_page_rows(self) -> list[VoterRecord]:
        rows = self.filtered()
        self.pagination.clamp(len(rows))
        return paginate(rows, self.pagination.page, self.pagination.page_size)

    def set_page_size(self, page_size: int) -> None:
        self.pagination.set_page_size(page_size)

    def go_to_page(self, page: int) -> bool:
        return self.pagination.go_to(page, len(self.filtered()))

    def next_page(self) -> bool:
        return self.pagination.next(len(self.filtered()))

    def previous_page(self) -> bool:
        return self.pagination.previous(len(self.filtered()))


def greeting_for_hour(hour: int) -> str:
    if 5 <= hour < 12:
        return "Good Morning!"
    if 12 <= hour < 17:
        return "Good Afternoon!"
    if 17 <= hour < 21:
        return "Good Evening!"
    return "Good Night!"
