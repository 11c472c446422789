import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from src.adapters.clock import SystemClock
from src.domain.entities import ContentRecord, MetaMap
from src.ports.clock import ClockPort
from src.ports.store import StoreError

ITEM_COLUMNS = (
    "type",
    "title",
    "body",
    "excerpt",
    "author_id",
    "status",
    "comment_status",
    "ping_status",
    "password",
    "parent_id",
    "menu_order",
    "slug",
    "guid",
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


class SQLiteDatabase:
    """
    Connection management shared by the SQLite repos.

    Outside a unit of work every repo call runs in its own short transaction.
    Inside `atomic()` all calls share one connection holding a write lock
    (BEGIN IMMEDIATE) until the block commits or rolls back.
    One instance per request/thread.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._tx_conn: sqlite3.Connection | None = None

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, isolation_level=None)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        if self._tx_conn is not None:
            try:
                yield self._tx_conn
            except sqlite3.Error as e:
                raise StoreError(str(e)) from e
            return

        conn = self._connect()
        try:
            conn.execute("BEGIN")
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._tx_conn is not None:
            yield
            return

        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            conn.close()
            raise StoreError(f"Could not start transaction: {e}") from e

        self._tx_conn = conn
        try:
            yield
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._tx_conn = None
            conn.close()


class SQLiteItemRepo:
    def __init__(self, db: SQLiteDatabase, clock: ClockPort | None = None):
        self.db = db
        self.clock = clock or SystemClock()

    def load(self, item_id: int) -> ContentRecord | None:
        with self.db.connection() as conn:
            row = conn.execute(
                "SELECT * FROM content_items WHERE id = ?", (item_id,)
            ).fetchone()
        if not row:
            return None
        return ContentRecord(
            id=row["id"],
            **{col: row[col] for col in ITEM_COLUMNS},
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )

    def insert(self, fields: dict[str, Any]) -> int:
        now = self.clock.now_utc().isoformat()
        record = self._validated({**fields, "id": 0})
        values = record.model_dump(include=set(ITEM_COLUMNS))
        if not values["guid"]:
            values["guid"] = f"urn:uuid:{uuid4()}"

        columns = ", ".join((*ITEM_COLUMNS, "created_at", "updated_at"))
        placeholders = ", ".join("?" for _ in range(len(ITEM_COLUMNS) + 2))
        with self.db.connection() as conn:
            cursor = conn.execute(
                f"INSERT INTO content_items ({columns}) VALUES ({placeholders})",
                (*(values[c] for c in ITEM_COLUMNS), now, now),
            )
            new_id = cursor.lastrowid
        if not new_id:
            raise StoreError("Insert did not return an id")
        return int(new_id)

    def update(self, item_id: int, fields: dict[str, Any]) -> None:
        current = self.load(item_id)
        if current is None:
            raise StoreError(f"Item {item_id} not found")

        merged = self._validated({**current.model_dump(), **fields, "id": item_id})
        values = merged.model_dump(include=set(ITEM_COLUMNS))
        assignments = ", ".join(f"{c} = ?" for c in ITEM_COLUMNS)
        with self.db.connection() as conn:
            conn.execute(
                f"UPDATE content_items SET {assignments}, updated_at = ? WHERE id = ?",
                (*(values[c] for c in ITEM_COLUMNS), self.clock.now_utc().isoformat(), item_id),
            )

    def delete(self, item_id: int) -> None:
        with self.db.connection() as conn:
            # Explicit deletes handle DBs created without ON DELETE CASCADE
            conn.execute("DELETE FROM item_meta WHERE item_id = ?", (item_id,))
            conn.execute("DELETE FROM term_assignments WHERE item_id = ?", (item_id,))
            conn.execute("DELETE FROM content_items WHERE id = ?", (item_id,))

    def _validated(self, data: dict[str, Any]) -> ContentRecord:
        try:
            return ContentRecord.model_validate(data)
        except ValidationError as e:
            raise StoreError(f"Invalid item fields: {e}") from e


class SQLiteMetaRepo:
    def __init__(self, db: SQLiteDatabase):
        self.db = db

    def get_all(self, item_id: int) -> MetaMap:
        with self.db.connection() as conn:
            rows = conn.execute(
                "SELECT meta_key, meta_value FROM item_meta WHERE item_id = ? ORDER BY meta_id",
                (item_id,),
            ).fetchall()
        meta: MetaMap = {}
        for row in rows:
            meta.setdefault(row["meta_key"], []).append(row["meta_value"])
        return meta

    def get_one(self, item_id: int, key: str, default: str = "") -> str:
        with self.db.connection() as conn:
            row = conn.execute(
                "SELECT meta_value FROM item_meta WHERE item_id = ? AND meta_key = ? "
                "ORDER BY meta_id LIMIT 1",
                (item_id, key),
            ).fetchone()
        return row["meta_value"] if row else default

    def add(self, item_id: int, key: str, value: str) -> None:
        with self.db.connection() as conn:
            conn.execute(
                "INSERT INTO item_meta (item_id, meta_key, meta_value) VALUES (?, ?, ?)",
                (item_id, key, str(value)),
            )

    def unset(self, item_id: int, key: str) -> None:
        with self.db.connection() as conn:
            conn.execute(
                "DELETE FROM item_meta WHERE item_id = ? AND meta_key = ?", (item_id, key)
            )


class SQLiteTermRepo:
    def __init__(self, db: SQLiteDatabase, taxonomies: dict[str, list[str]] | None = None):
        self.db = db
        self.taxonomies = {t: set(names) for t, names in (taxonomies or {}).items()}

    def get_assigned_terms(self, item_id: int, taxonomy: str) -> set[str]:
        with self.db.connection() as conn:
            rows = conn.execute(
                "SELECT slug FROM term_assignments WHERE item_id = ? AND taxonomy = ?",
                (item_id, taxonomy),
            ).fetchall()
        return {row["slug"] for row in rows}

    def set_assigned_terms(self, item_id: int, taxonomy: str, slugs: Iterable[str]) -> None:
        with self.db.connection() as conn:
            conn.execute(
                "DELETE FROM term_assignments WHERE item_id = ? AND taxonomy = ?",
                (item_id, taxonomy),
            )
            conn.executemany(
                "INSERT INTO term_assignments (item_id, taxonomy, slug) VALUES (?, ?, ?)",
                [(item_id, taxonomy, slug) for slug in sorted(set(slugs))],
            )

    def applicable_taxonomies(self, item_type: str) -> set[str]:
        return set(self.taxonomies.get(item_type, set()))
