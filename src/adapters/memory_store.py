"""In-memory content store adapter.

Implements the item, metadata and taxonomy ports plus a unit of work in a
single object. Suitable for tests and single-process development; every
write is visible immediately and `atomic()` restores a snapshot when the
block raises.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from src.adapters.clock import SystemClock
from src.domain.entities import ContentRecord, MetaMap
from src.ports.clock import ClockPort
from src.ports.store import StoreError

_Snapshot = tuple[
    dict[int, ContentRecord],
    dict[int, MetaMap],
    dict[int, dict[str, set[str]]],
    int,
]


class InMemoryContentStore:
    """In-memory storage for items, their metadata and term assignments."""

    def __init__(
        self,
        taxonomies: dict[str, list[str]] | None = None,
        clock: ClockPort | None = None,
    ) -> None:
        self._items: dict[int, ContentRecord] = {}
        self._meta: dict[int, MetaMap] = {}
        self._terms: dict[int, dict[str, set[str]]] = {}
        self._taxonomies = {t: set(names) for t, names in (taxonomies or {}).items()}
        self._clock = clock or SystemClock()
        self._next_id = 1
        self._lock = threading.RLock()
        self._depth = 0

    # --- Items ---

    def load(self, item_id: int) -> ContentRecord | None:
        record = self._items.get(item_id)
        return record.model_copy() if record else None

    def insert(self, fields: dict[str, Any]) -> int:
        now = self._clock.now_utc()
        item_id = self._next_id
        data = {k: v for k, v in fields.items() if k not in ("id", "created_at", "updated_at")}
        if not data.get("guid"):
            data["guid"] = f"urn:uuid:{uuid4()}"
        try:
            record = ContentRecord.model_validate(
                {**data, "id": item_id, "created_at": now, "updated_at": now}
            )
        except ValidationError as e:
            raise StoreError(f"Invalid item fields: {e}") from e

        self._items[item_id] = record
        self._meta[item_id] = {}
        self._terms[item_id] = {}
        self._next_id += 1
        return item_id

    def update(self, item_id: int, fields: dict[str, Any]) -> None:
        record = self._require(item_id)
        changes = {k: v for k, v in fields.items() if k not in ("id", "created_at")}
        changes["updated_at"] = self._clock.now_utc()
        try:
            self._items[item_id] = ContentRecord.model_validate(
                {**record.model_dump(), **changes, "id": item_id}
            )
        except ValidationError as e:
            raise StoreError(f"Invalid item fields: {e}") from e

    def delete(self, item_id: int) -> None:
        self._items.pop(item_id, None)
        self._meta.pop(item_id, None)
        self._terms.pop(item_id, None)

    def list_ids(self) -> list[int]:
        return sorted(self._items)

    # --- Metadata ---

    def get_all(self, item_id: int) -> MetaMap:
        return {k: list(v) for k, v in self._meta.get(item_id, {}).items()}

    def get_one(self, item_id: int, key: str, default: str = "") -> str:
        values = self._meta.get(item_id, {}).get(key)
        return values[0] if values else default

    def add(self, item_id: int, key: str, value: str) -> None:
        self._require(item_id)
        self._meta[item_id].setdefault(key, []).append(str(value))

    def unset(self, item_id: int, key: str) -> None:
        self._meta.get(item_id, {}).pop(key, None)

    # --- Taxonomy ---

    def get_assigned_terms(self, item_id: int, taxonomy: str) -> set[str]:
        return set(self._terms.get(item_id, {}).get(taxonomy, set()))

    def set_assigned_terms(self, item_id: int, taxonomy: str, slugs: Iterable[str]) -> None:
        self._require(item_id)
        self._terms[item_id][taxonomy] = set(slugs)

    def applicable_taxonomies(self, item_type: str) -> set[str]:
        return set(self._taxonomies.get(item_type, set()))

    # --- Unit of work ---

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshot = self._snapshot()
            self._depth = 1
            try:
                yield
            except BaseException:
                self._restore(snapshot)
                raise
            finally:
                self._depth = 0

    # --- Internals ---

    def _require(self, item_id: int) -> ContentRecord:
        record = self._items.get(item_id)
        if record is None:
            raise StoreError(f"Item {item_id} not found")
        return record

    def _snapshot(self) -> _Snapshot:
        return (
            dict(self._items),
            {i: {k: list(v) for k, v in meta.items()} for i, meta in self._meta.items()},
            {i: {t: set(s) for t, s in terms.items()} for i, terms in self._terms.items()},
            self._next_id,
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        self._items, self._meta, self._terms, self._next_id = snapshot

