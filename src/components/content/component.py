"""
Content component - a single content record and its store access.

An item with id 0 is unresolved: it names nothing in the store and every
mutating operation on it is a no-op. Items are loaded on demand and never
cached beyond the operation that loaded them.
"""

from __future__ import annotations

import logging
from typing import Any, overload

from src.components.content.models import ItemRef, item_id_of
from src.components.content.ports import ContentStores
from src.components.merge import MergeOptions, MetadataMerger, TaxonomyMerger
from src.domain.entities import SYSTEM_FIELDS, ContentRecord, MetaMap

logger = logging.getLogger(__name__)


class ContentItem:
    """Wraps one content record: identity, field export/import, metadata."""

    def __init__(
        self,
        record: ContentRecord | None,
        stores: ContentStores,
        merge: MergeOptions | None = None,
    ) -> None:
        self._record = record
        self._stores = stores
        self._merge = merge or MergeOptions()

    @classmethod
    def resolve(
        cls,
        ref: ItemRef | None,
        stores: ContentStores,
        merge: MergeOptions | None = None,
    ) -> ContentItem:
        """
        Load an item by reference.

        A missing record or an invalid reference gives an unresolved item
        rather than an error; callers check `id`.
        """
        item_id = item_id_of(ref)
        record = stores.items.load(item_id) if item_id else None
        if record is None and item_id:
            logger.debug("Item %s not found", item_id)
        return cls(record, stores, merge)

    def reload(self) -> ContentItem:
        return ContentItem.resolve(self.id, self._stores, self._merge)

    # --- Identity ---

    @property
    def id(self) -> int:
        return self._record.id if self._record is not None else 0

    @property
    def record(self) -> ContentRecord | None:
        return self._record

    @property
    def type(self) -> str:
        return self._record.type if self._record is not None else ""

    @property
    def status(self) -> str:
        return self._record.status if self._record is not None else ""

    def __bool__(self) -> bool:
        return self.id != 0

    def __repr__(self) -> str:
        return f"ContentItem(id={self.id}, type={self.type!r})"

    # --- Fields ---

    @property
    def fields(self) -> dict[str, Any]:
        return self.export_fields(include_system_fields=True)

    def export_fields(self, include_system_fields: bool = False) -> dict[str, Any]:
        """
        Return the item's fields.

        Without system fields (id, timestamps, status, slug, guid) the result
        is safe to write onto another item.
        """
        if self._record is None:
            return {}

        data = self._record.model_dump()
        if include_system_fields:
            return data
        return {k: v for k, v in data.items() if k not in SYSTEM_FIELDS}

    def import_from(self, source: ItemRef) -> bool:
        """
        Copy fields, metadata and term assignments from another item.

        Returns False, without touching the store, unless both items exist.
        """
        origin = ContentItem.resolve(source, self._stores, self._merge)

        if not self.id or not origin.id:
            return False

        with self._stores.atomic():
            data = origin.export_fields()
            data["id"] = self.id
            self._stores.items.update(self.id, data)

            MetadataMerger(self._stores.metadata, self._merge).merge(origin.id, self.id)
            TaxonomyMerger(self._stores.taxonomy).merge(origin.id, self.id, item_type=origin.type)

        self._record = self._stores.items.load(self.id)
        logger.debug("Imported item %s into item %s", origin.id, self.id)
        return True

    # --- Metadata ---

    @overload
    def metadata(self, key: None = None) -> MetaMap: ...

    @overload
    def metadata(self, key: str) -> str: ...

    def metadata(self, key: str | None = None) -> MetaMap | str:
        """
        All metadata, or the first value stored under key.

        Absent items and keys give an empty mapping or an empty string.
        """
        if key is None:
            return self._stores.metadata.get_all(self.id) if self.id else {}
        return self._stores.metadata.get_one(self.id, key) if self.id else ""
