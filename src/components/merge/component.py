"""
Merge component - metadata and taxonomy reconciliation between two items.

Metadata:
- every source key is copied to the destination (pointer keys excepted)
- destination keys missing from the source are removed (pointer keys excepted)
- "replace" policy: a copied key ends up with exactly the source values
- "append" policy: source values are added after existing destination values

Taxonomy:
- for each taxonomy applicable to the source item's type, the destination's
  assignment is replaced by the source's
- taxonomies not applicable to the source type are left alone
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.components.merge.models import MergeOptions, MetaReconciliation
from src.components.merge.ports import ItemLoaderPort, MetadataStorePort, TaxonomyStorePort
from src.domain.entities import POINTER_KEYS, MetaMap

logger = logging.getLogger(__name__)


def reconcile_metadata(
    source: MetaMap,
    destination: MetaMap,
    exclude_keys: Iterable[str] = (),
) -> MetaReconciliation:
    """Compute the metadata diff; no side effects."""
    protected = POINTER_KEYS | frozenset(exclude_keys)

    to_copy = {key: list(values) for key, values in source.items() if key not in protected}
    to_remove = frozenset(
        key for key in destination if key not in to_copy and key not in protected
    )

    return MetaReconciliation(values_to_copy=to_copy, keys_to_remove=to_remove)


class MetadataMerger:
    """Applies metadata reconciliations through the metadata store."""

    def __init__(self, store: MetadataStorePort, options: MergeOptions | None = None) -> None:
        self._store = store
        self._options = options or MergeOptions()

    def merge(
        self,
        source_id: int,
        destination_id: int,
        exclude_keys: Iterable[str] = (),
    ) -> MetaReconciliation:
        """Reconcile destination metadata with the source and apply the result."""
        destination = self._store.get_all(destination_id)
        plan = reconcile_metadata(
            self._store.get_all(source_id),
            destination,
            self._options.excluding(exclude_keys),
        )
        self.apply(destination_id, plan, current=destination)

        logger.debug(
            "Merged metadata %s -> %s: %d keys copied, %d removed",
            source_id,
            destination_id,
            len(plan.values_to_copy),
            len(plan.keys_to_remove),
        )
        return plan

    def apply(
        self,
        destination_id: int,
        plan: MetaReconciliation,
        current: MetaMap | None = None,
    ) -> None:
        if current is None:
            current = self._store.get_all(destination_id)

        replace = self._options.metadata_policy == "replace"

        for key, values in plan.values_to_copy.items():
            if replace:
                if current.get(key) == values:
                    continue
                self._store.unset(destination_id, key)
            for value in values:
                self._store.add(destination_id, key, value)

        for key in sorted(plan.keys_to_remove):
            self._store.unset(destination_id, key)


class TaxonomyMerger:
    """Overwrites an item's term assignments with another item's."""

    def __init__(self, store: TaxonomyStorePort, items: ItemLoaderPort | None = None) -> None:
        self._store = store
        self._items = items

    def merge(
        self,
        source_id: int,
        destination_id: int,
        item_type: str | None = None,
    ) -> dict[str, set[str]]:
        """
        Replace the destination's assignments with the source's.

        Args:
            source_id: Item whose terms are copied.
            destination_id: Item whose terms are overwritten.
            item_type: Type of the source item; loaded when omitted.

        Returns:
            The applied assignment per taxonomy.
        """
        if item_type is None:
            record = self._items.load(source_id) if self._items is not None else None
            if record is None:
                logger.debug("Taxonomy merge skipped: source %s not found", source_id)
                return {}
            item_type = record.type

        applied: dict[str, set[str]] = {}
        for taxonomy in sorted(self._store.applicable_taxonomies(item_type)):
            slugs = self._store.get_assigned_terms(source_id, taxonomy)
            self._store.set_assigned_terms(destination_id, taxonomy, slugs)
            applied[taxonomy] = slugs

        return applied
