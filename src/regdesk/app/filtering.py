from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from regdesk.app.record_models import VoterRecord, option_value


DEFAULT_PAGE_SIZE = 25
MAX_PAGE_BUTTONS = 7

T = TypeVar("T")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Current filter inputs. Empty fields do not constrain the result."""

    name: str = ""
    nic: str = ""
    gs_division: str = ""
    pooling_booth: str = ""
    priority: str = ""

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> "FilterSpec":
        if not isinstance(value, Mapping):
            return cls()
        return cls(
            name=_as_text(value.get("name")),
            nic=_as_text(value.get("nic")),
            gs_division=_as_text(value.get("gsDivision")),
            pooling_booth=_as_text(value.get("poolingBooth")),
            priority=_as_text(value.get("priority")),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.nic or self.gs_division or self.pooling_booth or self.priority)

    def matches(self, record: VoterRecord) -> bool:
        if self.name and self.name.casefold() not in record.name.casefold():
            return False
        if self.nic and self.nic.casefold() not in record.nic.casefold():
            return False
        if self.gs_division and option_value(record.gs_division) != self.gs_division:
            return False
        if self.pooling_booth and option_value(record.pooling_booth) != self.pooling_booth:
            return False
        if self.priority and record.priority != self.priority:
            return False
        return True


def apply_filters(records: Iterable[VoterRecord], filters: FilterSpec | None) -> list[VoterRecord]:
    if filters is None or filters.is_empty:
        return list(records)
    return [record for record in records if filters.matches(record)]


def total_pages(count: int, page_size: int) -> int:
    if count <= 0 or page_size <= 0:
        return 0
    return math.ceil(count / page_size)


def clamp_page(page: int, count: int, page_size: int) -> int:
    """Clamp ``page`` to the last valid page, or 1 when there are no results."""
    pages = total_pages(count, page_size)
    if pages == 0:
        return 1
    return max(1, min(int(page), pages))


def paginate(records: Sequence[T], page: int, page_size: int) -> list[T]:
    if page < 1 or page_size <= 0:
        return []
    start = (page - 1) * page_size
    return list(records[start : start + page_size])


def display_range(page: int, page_size: int, count: int) -> tuple[int, int]:
    """1-based first/last row numbers shown on ``page``; ``(0, 0)`` when empty."""
    if count <= 0 or page_size <= 0:
        return (0, 0)
    start = (page - 1) * page_size
    if start >= count or start < 0:
        return (0, 0)
    return (start + 1, min(start + page_size, count))


def page_window(current: int, total: int, max_buttons: int = MAX_PAGE_BUTTONS) -> list[int | None]:
    """Page buttons to show around ``current``.

    At most ``max_buttons`` consecutive pages are centered on the current page.
    The first and last page are always present; ``None`` marks a gap.
    """
    if total <= 0:
        return []
    span = max(1, max_buttons)
    reach = span // 2
    current = max(1, min(current, total))
    start = max(1, current - reach)
    end = min(total, current + reach)
    if end - start < span - 1:
        if start == 1:
            end = min(total, start + span - 1)
        else:
            start = max(1, end - span + 1)

    window: list[int | None] = []
    if start > 1:
        window.append(1)
        if start > 2:
            window.append(None)
    window.extend(range(start, end + 1))
    if end < total:
        if end < total - 1:
            window.append(None)
        window.append(total)
    return window


@dataclass(slots=True)
class PaginationState:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def set_page_size(self, page_size: int) -> None:
        size = int(page_size)
        if size < 1:
            raise ValueError(f"page size must be positive, got {page_size!r}")
        self.page_size = size
        self.page = 1

    def go_to(self, page: int, count: int) -> bool:
        """Move to ``page`` if it exists for ``count`` rows."""
        if 1 <= page <= total_pages(count, self.page_size):
            self.page = int(page)
            return True
        return False

    def next(self, count: int) -> bool:
        return self.go_to(self.page + 1, count)

    def previous(self, count: int) -> bool:
        return self.go_to(self.page - 1, count)

    def reset(self) -> None:
        self.page = 1

    def clamp(self, count: int) -> int:
        self.page = clamp_page(self.page, count, self.page_size)
        return self.page

    def total_pages(self, count: int) -> int:
        return total_pages(count, self.page_size)
