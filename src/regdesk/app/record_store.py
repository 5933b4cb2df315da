from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Generic, TypeVar
from uuid import uuid4

from regdesk.app.data_store import (
    COMMUNITIES_FILE_NAME,
    RECORDS_FILE_NAME,
    SOURCE_ERROR,
    DataLoadResult,
    LocalJsonDataStore,
)
from regdesk.app.db_debug import db_debug
from regdesk.app.errors import RecordValidationError
from regdesk.app.normalizer import RecordNormalizer
from regdesk.app.record_models import (
    CommunityRecord,
    VoterRecord,
    parse_communities,
    utc_now_iso,
)
from regdesk.app.record_validation import RecordForm, validate_record_form


STATE_LOADED = "loaded"
STATE_MUTATED = "mutated"
STATE_PERSISTING = "persisting"

T = TypeVar("T", VoterRecord, CommunityRecord)

_log = logging.getLogger("regdesk.store")


@dataclass(frozen=True, slots=True)
class LoadOutcome:
    count: int
    source: str
    warning: str = ""
    restored_from_snapshot: bool = False

    @property
    def failed(self) -> bool:
        return self.source == SOURCE_ERROR


@dataclass(frozen=True, slots=True)
class MutationResult(Generic[T]):
    item: T
    saved: bool


class CollectionStore(Generic[T]):
    """In-memory working set for one JSON collection.

    ``snapshot`` is the last collection known to match the file on disk. It is
    used to recover from failed loads and to refuse persisting an empty
    collection over a non-empty one unless the caller passes ``allow_empty``.
    """

    file_name: str = ""

    def __init__(
        self,
        data_store: LocalJsonDataStore,
        normalizer: RecordNormalizer | None = None,
        *,
        clock: Callable[[], str] = utc_now_iso,
        id_factory: Callable[[], str] = lambda: uuid4().hex,
    ) -> None:
        self._data_store = data_store
        self._normalizer = normalizer or RecordNormalizer()
        self._clock = clock
        self._id_factory = id_factory
        self._items: list[T] = []
        self._snapshot: list[T] = []
        self.state = STATE_LOADED

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def snapshot(self) -> list[T]:
        return list(self._snapshot)

    @property
    def data_store(self) -> LocalJsonDataStore:
        return self._data_store

    @property
    def normalizer(self) -> RecordNormalizer:
        return self._normalizer

    def set_data_store(
        self,
        data_store: LocalJsonDataStore,
        normalizer: RecordNormalizer | None = None,
    ) -> None:
        """Point the store at another data directory; the next load starts fresh."""
        self._data_store = data_store
        if normalizer is not None:
            self._normalizer = normalizer
        self._items = []
        self._snapshot = []
        self.state = STATE_LOADED

    def replace_items(self, items: Iterable[T]) -> None:
        self._items = list(items)
        self.state = STATE_MUTATED

    def __len__(self) -> int:
        return len(self._items)

    def _parse(self, rows: list[dict[str, Any]]) -> list[T]:
        raise NotImplementedError

    def _identity(self, item: T) -> str:
        raise NotImplementedError

    def _needs_backfill(self, row: dict[str, Any]) -> bool:
        """True when loading ``row`` had to generate a value that is not on disk yet."""
        return not str(row.get("id") or "").strip()

    def index_of(self, item_id: str) -> int:
        target = str(item_id or "").strip()
        if not target:
            return -1
        for index, item in enumerate(self._items):
            if self._identity(item) == target:
                return index
        return -1

    def load(self) -> LoadOutcome:
        try:
            result = self._data_store.load_rows(self.file_name)
        except Exception as exc:
            _log.exception("Error loading %s", self.file_name)
            result = DataLoadResult(source=SOURCE_ERROR, warning=f"Error loading {self.file_name}: {exc}")

        if result.failed:
            return self._recover_from_snapshot(result.warning)

        try:
            items = self._parse(result.rows)
        except Exception as exc:
            _log.exception("Error normalizing %s", self.file_name)
            return self._recover_from_snapshot(f"Error reading {self.file_name}: {exc}")

        self._items = items
        self._snapshot = list(items)
        self.state = STATE_LOADED
        _log.info("Loaded %d rows from %s", len(items), self.file_name)
        warning = result.warning
        if any(self._needs_backfill(row) for row in result.rows):
            # Generated ids must survive the next load.
            db_debug("store.load.backfill", file=self.file_name, rows=len(items))
            if not self.save():
                warning = warning or f"Generated ids for {self.file_name} could not be saved."
        return LoadOutcome(count=len(items), source=result.source, warning=warning)

    def _recover_from_snapshot(self, warning: str) -> LoadOutcome:
        if self._snapshot:
            self._items = list(self._snapshot)
            self.state = STATE_LOADED
            _log.warning("Using backup %s rows due to loading error", self.file_name)
            db_debug("store.load.restored", file=self.file_name, rows=len(self._items))
            return LoadOutcome(
                count=len(self._items),
                source=SOURCE_ERROR,
                warning=warning,
                restored_from_snapshot=True,
            )
        self._items = []
        self.state = STATE_LOADED
        return LoadOutcome(count=0, source=SOURCE_ERROR, warning=warning)

    def save(self, *, allow_empty: bool = False) -> bool:
        """Persist the whole collection. Returns ``True`` once the file is written."""
        if not self._items and self._snapshot and not allow_empty:
            _log.warning(
                "Prevented saving empty %s while %d backed-up rows exist",
                self.file_name,
                len(self._snapshot),
            )
            db_debug("store.save.empty_guard", file=self.file_name, snapshot=len(self._snapshot))
            self._items = list(self._snapshot)
            self.state = STATE_LOADED
            return False

        self.state = STATE_PERSISTING
        rows = [item.to_mapping() for item in self._items]
        try:
            saved = self._data_store.write_data(self.file_name, rows)
        except Exception:
            _log.exception("Error saving %s", self.file_name)
            saved = False

        if not saved:
            self.state = STATE_MUTATED
            return False
        self._snapshot = list(self._items)
        self.state = STATE_LOADED
        _log.info("Saved %d rows to %s", len(rows), self.file_name)
        return True

    def _remove(
        self,
        item_id: str,
        confirm: Callable[[T], bool],
    ) -> MutationResult[T] | None:
        index = self.index_of(item_id)
        if index < 0:
            return None
        item = self._items[index]
        if not confirm(item):
            return None
        self._items = [row for row in self._items if self._identity(row) != self._identity(item)]
        self.state = STATE_MUTATED
        return MutationResult(item=item, saved=self.save(allow_empty=True))


class RecordStore(CollectionStore[VoterRecord]):
    file_name = RECORDS_FILE_NAME

    def _parse(self, rows: list[dict[str, Any]]) -> list[VoterRecord]:
        return self._normalizer.normalize_records(rows)

    def _identity(self, item: VoterRecord) -> str:
        return item.record_id

    def _needs_backfill(self, row: dict[str, Any]) -> bool:
        return super()._needs_backfill(row) or not str(row.get("RegID") or "").strip()

    def get(self, record_id: str) -> VoterRecord | None:
        index = self.index_of(record_id)
        return self._items[index] if index >= 0 else None

    def find_by_nic(self, nic: str) -> VoterRecord | None:
        target = str(nic or "").strip()
        if not target:
            return None
        return next((row for row in self._items if row.nic.strip() == target), None)

    def add(self, form: RecordForm) -> MutationResult[VoterRecord]:
        validate_record_form(form, self._items)
        now = self._clock()
        resolve = self._normalizer.resolve
        record = VoterRecord(
            record_id=self._id_factory(),
            name=form.name.strip(),
            nic=form.nic.strip(),
            dob=form.dob.strip(),
            political_party_id=form.political_party_id.strip(),
            priority=form.priority.strip(),
            mobile1=form.mobile1.strip(),
            mobile2=form.mobile2.strip(),
            whatsapp=form.whatsapp.strip(),
            home_number=form.home_number.strip(),
            address=form.address.strip(),
            region=resolve("region", form.region),
            aga_division=resolve("agaDivision", form.aga_division),
            gs_division=resolve("gsDivision", form.gs_division),
            pooling_booth=resolve("poolingBooth", form.pooling_booth),
            communities=parse_communities(form.communities),
            connectivity=form.connectivity.strip(),
            created_at=now,
            updated_at=now,
        )
        record = self._normalizer.normalize_record(record)
        self._items.insert(0, record)
        self.state = STATE_MUTATED
        return MutationResult(item=record, saved=self.save())

    def update(self, record_id: str, form: RecordForm) -> MutationResult[VoterRecord] | None:
        """Replace a record's editable fields. Unknown ids are ignored."""
        index = self.index_of(record_id)
        if index < 0:
            return None
        current = self._items[index]
        validate_record_form(form, self._items, editing_id=current.record_id)
        resolve = self._normalizer.resolve
        updated = replace(
            current,
            name=form.name.strip(),
            nic=form.nic.strip(),
            dob=form.dob.strip(),
            political_party_id=form.political_party_id.strip(),
            priority=form.priority.strip(),
            mobile1=form.mobile1.strip(),
            mobile2=form.mobile2.strip(),
            whatsapp=form.whatsapp.strip(),
            home_number=form.home_number.strip(),
            address=form.address.strip(),
            region=resolve("region", form.region),
            aga_division=resolve("agaDivision", form.aga_division),
            gs_division=resolve("gsDivision", form.gs_division),
            pooling_booth=resolve("poolingBooth", form.pooling_booth),
            communities=parse_communities(form.communities),
            connectivity=form.connectivity.strip(),
            updated_at=self._clock(),
            extra=dict(current.extra),
        )
        updated = self._normalizer.normalize_record(updated)
        self._items[index] = updated
        self.state = STATE_MUTATED
        return MutationResult(item=updated, saved=self.save())

    def delete(
        self,
        record_id: str,
        *,
        confirm: Callable[[VoterRecord], bool],
    ) -> MutationResult[VoterRecord] | None:
        return self._remove(record_id, confirm)

    def clear_all(self, *, confirm: Callable[[int], bool]) -> bool:
        """Delete every record. This is the only path that persists an empty set."""
        if not self._items or not confirm(len(self._items)):
            return False
        self._items = []
        self.state = STATE_MUTATED
        return self.save(allow_empty=True)

    @property
    def total(self) -> int:
        return len(self._items)

    def count_created_on(self, day: date) -> int:
        return sum(1 for record in self._items if record.created_on() == day)

    def community_suggestions(self, communities: Iterable[CommunityRecord] = ()) -> list[str]:
        names: list[str] = []
        for community in communities:
            if community.name and community.name not in names:
                names.append(community.name)
        for record in self._items:
            for name in record.communities:
                if name not in names:
                    names.append(name)
        return names


class CommunityStore(CollectionStore[CommunityRecord]):
    file_name = COMMUNITIES_FILE_NAME

    def _parse(self, rows: list[dict[str, Any]]) -> list[CommunityRecord]:
        return self._normalizer.normalize_communities(rows)

    def _identity(self, item: CommunityRecord) -> str:
        return item.community_id

    def _needs_backfill(self, row: dict[str, Any]) -> bool:
        return super()._needs_backfill(row) or not str(row.get("createdAt") or "").strip()

    def add(
        self,
        name: str,
        *,
        aga_division: str = "",
        gs_division: str = "",
    ) -> MutationResult[CommunityRecord]:
        text = str(name or "").strip()
        if not text:
            raise RecordValidationError("Please enter a community name", field="name")
        community = self._normalizer.normalize_community(
            {
                "id": self._id_factory(),
                "name": text,
                "agaDivision": aga_division,
                "gsDivision": gs_division,
                "createdAt": self._clock(),
            }
        )
        self._items.append(community)
        self.state = STATE_MUTATED
        return MutationResult(item=community, saved=self.save())

    def delete(
        self,
        community_id: str,
        *,
        confirm: Callable[[CommunityRecord], bool],
    ) -> MutationResult[CommunityRecord] | None:
        return self._remove(community_id, confirm)
