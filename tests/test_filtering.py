import pytest

from regdesk.app.filtering import (
    FilterSpec,
    PaginationState,
    apply_filters,
    clamp_page,
    display_range,
    page_window,
    paginate,
    total_pages,
)
from regdesk.app.record_models import Option, VoterRecord
from regdesk.app.state_containers import RecordSession


def _record(record_id, name, nic, *, gs="GS-001", booth="PB-01", priority=""):
    return VoterRecord(
        record_id=record_id,
        name=name,
        nic=nic,
        gs_division=Option(gs, gs),
        pooling_booth=Option(booth, booth),
        priority=priority,
    )


RECORDS = [
    _record("1", "Nimal Perera", "901111111V", priority="1"),
    _record("2", "Kamala Silva", "902222222V", gs="GS-002", priority="2"),
    _record("3", "Sunil Perera", "903333333V", booth="PB-02", priority="1"),
    _record("4", "Anoma Fernando", "199044444444", gs="GS-002", booth="PB-02"),
]


def _ids(records):
    return [record.record_id for record in records]


def test_empty_filter_returns_everything():
    assert FilterSpec().is_empty
    assert _ids(apply_filters(RECORDS, FilterSpec())) == ["1", "2", "3", "4"]
    assert _ids(apply_filters(RECORDS, None)) == ["1", "2", "3", "4"]


def test_name_and_nic_match_case_insensitive_substrings():
    assert _ids(apply_filters(RECORDS, FilterSpec(name="perera"))) == ["1", "3"]
    assert _ids(apply_filters(RECORDS, FilterSpec(nic="v"))) == ["1", "2", "3"]


def test_location_filters_match_option_value_exactly():
    assert _ids(apply_filters(RECORDS, FilterSpec(gs_division="GS-002"))) == ["2", "4"]
    assert _ids(apply_filters(RECORDS, FilterSpec(gs_division="GS-00"))) == []
    assert _ids(apply_filters(RECORDS, FilterSpec(pooling_booth="PB-02"))) == ["3", "4"]


def test_filters_are_anded():
    spec = FilterSpec(name="perera", pooling_booth="PB-02", priority="1")
    assert _ids(apply_filters(RECORDS, spec)) == ["3"]
    assert _ids(apply_filters(RECORDS, FilterSpec(name="perera", priority="2"))) == []


def test_filter_spec_from_mapping_reads_camel_case_keys():
    spec = FilterSpec.from_mapping({"name": " nimal ", "gsDivision": "GS-001", "poolingBooth": "PB-01", "priority": 1})
    assert spec == FilterSpec(name="nimal", gs_division="GS-001", pooling_booth="PB-01", priority="1")
    assert FilterSpec.from_mapping(None) == FilterSpec()


def test_page_math():
    assert total_pages(0, 25) == 0
    assert total_pages(26, 25) == 2
    assert clamp_page(5, 26, 25) == 2
    assert clamp_page(5, 0, 25) == 1
    assert clamp_page(0, 26, 25) == 1
    assert paginate(list(range(30)), 2, 25) == [25, 26, 27, 28, 29]
    assert paginate(list(range(30)), 3, 25) == []
    assert display_range(2, 25, 30) == (26, 30)
    assert display_range(1, 25, 0) == (0, 0)


@pytest.mark.parametrize(
    ("current", "total", "expected"),
    [
        (1, 0, []),
        (1, 3, [1, 2, 3]),
        (1, 20, [1, 2, 3, 4, 5, 6, 7, None, 20]),
        (10, 20, [1, None, 7, 8, 9, 10, 11, 12, 13, None, 20]),
        (20, 20, [1, None, 14, 15, 16, 17, 18, 19, 20]),
        (5, 8, [1, 2, 3, 4, 5, 6, 7, 8]),
    ],
)
def test_page_window(current, total, expected):
    assert page_window(current, total) == expected


def test_pagination_state_moves_within_bounds():
    state = PaginationState(page_size=2)
    assert state.next(5)
    assert state.next(5)
    assert state.page == 3
    assert not state.next(5)
    assert state.previous(5)
    assert state.page == 2
    assert not state.go_to(4, 5)
    assert state.clamp(1) == 1


def test_pagination_state_rejects_non_positive_page_size():
    state = PaginationState(page=3)
    with pytest.raises(ValueError):
        state.set_page_size(0)
    state.set_page_size(10)
    assert (state.page, state.page_size) == (1, 10)


class _FakeStore:
    def __init__(self, items):
        self.items = items


def test_session_resets_page_on_filter_change_and_clamps_rows():
    session = RecordSession(store=_FakeStore(RECORDS), pagination=PaginationState(page_size=1))
    assert session.go_to_page(4)
    assert _ids(session.current_page_rows()) == ["4"]

    session.set_filters(FilterSpec(name="perera"))
    assert session.pagination.page == 1
    assert _ids(session.current_page_rows()) == ["1"]

    session.pagination.page = 9
    assert _ids(session.current_page_rows()) == ["3"]
    assert session.pagination.page == 2

    session.clear_filters()
    assert len(session.filtered()) == 4


def test_stale_page_past_the_end_clamps_back_to_first_page():
    records = [_record(str(i), f"Perera {i}", f"90{i:07d}V") for i in range(10)]
    session = RecordSession(store=_FakeStore(records), pagination=PaginationState(page_size=25))
    session.pagination.page = 2

    assert paginate(session.filtered(), 2, 25) == []
    assert len(session.current_page_rows()) == 10
    assert session.pagination.page == 1
