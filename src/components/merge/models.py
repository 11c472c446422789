"""
Merge component input/output models.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.rules.models import MergeRules, MetadataPolicy


@dataclass(frozen=True)
class MergeOptions:
    """How metadata is reconciled when one item is imported into another."""

    metadata_policy: MetadataPolicy = "replace"
    exclude_keys: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_rules(cls, rules: MergeRules) -> MergeOptions:
        return cls(
            metadata_policy=rules.metadata_policy,
            exclude_keys=frozenset(rules.exclude_keys),
        )

    def excluding(self, keys: Iterable[str]) -> frozenset[str]:
        return self.exclude_keys | frozenset(keys)


@dataclass(frozen=True)
class MetaReconciliation:
    """
    Metadata diff from a source item to a destination item.

    values_to_copy: every source key (with all its values) to write.
    keys_to_remove: destination keys with no counterpart in the source.
    Neither ever contains a pointer key.
    """

    values_to_copy: dict[str, list[str]]
    keys_to_remove: frozenset[str]

    @property
    def is_empty(self) -> bool:
        return not self.values_to_copy and not self.keys_to_remove
