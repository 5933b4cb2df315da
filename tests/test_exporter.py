import re
from datetime import date

import pytest

from regdesk.app.errors import ExportPreconditionError
from regdesk.app.exporter import (
    DEFAULT_EXPORT_FIELDS,
    EMPTY_CELL,
    LAYOUT_CARDS,
    LAYOUT_TABLE,
    NO_FIELDS_MESSAGE,
    NO_ROWS_MESSAGE,
    build_export_request,
    chunk_pages,
    default_export_file_name,
    export_cell,
    export_rows,
    render_export,
    select_fields,
)
from regdesk.app.filtering import FilterSpec, PaginationState
from regdesk.app.record_models import Option, VoterRecord
from regdesk.app.state_containers import RecordSession


def _record(index, **overrides):
    values = {
        "record_id": f"r{index}",
        "name": f"Voter {index}",
        "nic": f"90{index:07d}V",
        "address": f"{index} Temple Road\nColombo",
    }
    values.update(overrides)
    return VoterRecord(**values)


def _page_count(path):
    return len(re.findall(rb"/Type\s*/Page(?!s)", path.read_bytes()))


class _FakeStore:
    def __init__(self, items):
        self.items = items


def test_request_covers_all_filtered_rows_not_just_the_page():
    records = [_record(i, name="Perera" if i % 2 else f"Silva {i}") for i in range(1, 61)]
    session = RecordSession(store=_FakeStore(records), pagination=PaginationState(page_size=10))
    session.set_filters(FilterSpec(name="perera"))

    request = build_export_request(session)
    assert len(request.records) == 30
    assert request.fields == DEFAULT_EXPORT_FIELDS
    assert request.page_count() == 2


def test_request_preconditions():
    with pytest.raises(ExportPreconditionError) as info:
        build_export_request([])
    assert str(info.value) == NO_ROWS_MESSAGE

    with pytest.raises(ExportPreconditionError) as info:
        build_export_request([_record(1)], fields=["unknown"])
    assert str(info.value) == NO_FIELDS_MESSAGE

    cards = build_export_request([_record(1)], fields=[], layout=LAYOUT_CARDS)
    assert cards.fields == ()
    assert cards.page_size == 14

    with pytest.raises(ValueError):
        build_export_request([_record(1)], layout="poster")


def test_select_fields_keeps_column_order():
    assert select_fields(["mobile1", "name", "bogus", "nic"]) == ("name", "nic", "mobile1")


def test_export_cell_formats_values():
    record = _record(
        1,
        dob="1990-04-12",
        gs_division=Option("GS-003", "Bambalapitiya"),
        communities=["Fishermen", "Teachers"],
        mobile2="",
    )
    assert export_cell(record, "dob") == "1990-04-12"
    assert export_cell(record, "gsDivision") == "Bambalapitiya"
    assert export_cell(record, "communities") == "Fishermen, Teachers"
    assert export_cell(record, "mobile2") == EMPTY_CELL
    assert export_cell(record, "region") == EMPTY_CELL
    assert export_cell(record, "createdAt") == EMPTY_CELL


def test_export_rows_use_column_order_not_selection_order():
    request = build_export_request([_record(1), _record(2)], fields=["nic", "name"])
    assert export_rows(request) == [["Voter 1", "900000001V"], ["Voter 2", "900000002V"]]


def test_chunk_pages():
    assert chunk_pages(list(range(5)), 2) == [[0, 1], [2, 3], [4]]
    assert chunk_pages([], 25) == []
    with pytest.raises(ValueError):
        chunk_pages([1], 0)


def test_default_file_names():
    today = date(2024, 5, 1)
    assert default_export_file_name(LAYOUT_TABLE, today) == "user_records_2024-05-01.pdf"
    assert default_export_file_name(LAYOUT_CARDS, today) == "address_list_2024-05-01.pdf"


def test_table_export_paginates_25_rows_per_page(tmp_path):
    request = build_export_request([_record(i) for i in range(1, 31)], fields=["name", "nic"])
    path = render_export(request, tmp_path / "out" / "records.pdf")
    assert path.read_bytes().startswith(b"%PDF")
    assert _page_count(path) == 2


def test_card_export_places_14_cards_per_page(tmp_path):
    request = build_export_request([_record(i) for i in range(1, 16)], layout=LAYOUT_CARDS)
    path = render_export(request, tmp_path / "cards.pdf")
    assert _page_count(path) == 2
