from itertools import count

import pytest

from regdesk.app.data_store import LocalJsonDataStore
from regdesk.app.normalizer import RecordNormalizer
from regdesk.app.record_store import CommunityStore, RecordStore
from regdesk.app.record_validation import RecordForm
from regdesk.app.reference_data import ReferenceOptions


def make_form(**overrides) -> RecordForm:
    values = {
        "name": "Nimal Perera",
        "nic": "199012345678",
        "address": "12 Galle Road, Colombo 03",
        "dob": "1990-04-12",
        "political_party_id": "123456",
        "priority": "2",
        "mobile1": "0771234567",
        "region": "western",
        "aga_division": "AGA-01",
        "gs_division": "GS-003",
        "pooling_booth": "PB-01",
        "communities": ["Fishermen"],
    }
    values.update(overrides)
    return RecordForm(**values)


@pytest.fixture
def clock():
    ticks = count(1)

    def _now() -> str:
        return f"2024-05-01T10:00:{next(ticks) % 60:02d}.000Z"

    return _now


@pytest.fixture
def normalizer(clock):
    return RecordNormalizer(ReferenceOptions(), clock=clock)


@pytest.fixture
def data_store(tmp_path):
    return LocalJsonDataStore(tmp_path / "data")


@pytest.fixture
def record_store(data_store, normalizer, clock):
    ids = count(1)
    store = RecordStore(data_store, normalizer, clock=clock, id_factory=lambda: f"rec-{next(ids)}")
    store.load()
    return store


@pytest.fixture
def community_store(data_store, normalizer, clock):
    ids = count(1)
    store = CommunityStore(data_store, normalizer, clock=clock, id_factory=lambda: f"com-{next(ids)}")
    store.load()
    return store
