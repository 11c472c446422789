from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Any, Protocol

from src.domain.entities import ContentRecord, MetaMap


class StoreError(RuntimeError):
    """A store call failed; the current operation must abort."""


class ItemStorePort(Protocol):
    def load(self, item_id: int) -> ContentRecord | None:
        ...

    def insert(self, fields: dict[str, Any]) -> int:
        """Insert a new item and return its id."""
        ...

    def update(self, item_id: int, fields: dict[str, Any]) -> None:
        ...

    def delete(self, item_id: int) -> None:
        """Delete an item together with its metadata and term assignments."""
        ...


class MetadataStorePort(Protocol):
    def get_all(self, item_id: int) -> MetaMap:
        ...

    def get_one(self, item_id: int, key: str, default: str = "") -> str:
        """First value stored under key, or default."""
        ...

    def add(self, item_id: int, key: str, value: str) -> None:
        """Append a value under key."""
        ...

    def unset(self, item_id: int, key: str) -> None:
        """Remove the key and all of its values."""
        ...


class TaxonomyStorePort(Protocol):
    def get_assigned_terms(self, item_id: int, taxonomy: str) -> set[str]:
        ...

    def set_assigned_terms(self, item_id: int, taxonomy: str, slugs: Iterable[str]) -> None:
        """Replace the item's assignment for one taxonomy."""
        ...

    def applicable_taxonomies(self, item_type: str) -> set[str]:
        ...


class UnitOfWorkPort(Protocol):
    def atomic(self) -> AbstractContextManager[None]:
        """Group store calls; roll back all of them if the block raises."""
        ...
