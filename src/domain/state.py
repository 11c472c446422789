from enum import Enum

from src.domain.entities import DRAFT_ID_KEY, PUBLISHED_ID_KEY, MetaMap


class LinkState(str, Enum):
    """States of the published/draft pairing."""

    UNBOUND = "unbound"
    PUBLISHED_ONLY = "published_only"
    PUBLISHED_WITH_DRAFT = "published_with_draft"


class ItemRole(str, Enum):
    """Role an item plays inside a pairing, derived from its pointer metadata."""

    NONE = "none"
    PUBLISHED = "published"
    DRAFT = "draft"


def pointer_value(meta: MetaMap, key: str) -> int:
    """
    Return the integer stored under a pointer key, or 0.

    Pointer keys are single valued; only the first value is considered.
    """
    values = meta.get(key) or []
    if not values:
        return 0
    try:
        value = int(str(values[0]).strip())
    except ValueError:
        return 0
    return value if value > 0 else 0


def draft_id_of(meta: MetaMap) -> int:
    return pointer_value(meta, DRAFT_ID_KEY)


def published_id_of(meta: MetaMap) -> int:
    return pointer_value(meta, PUBLISHED_ID_KEY)


def has_draft(meta: MetaMap) -> bool:
    """Is the item a published item with a draft version?"""
    return bool(draft_id_of(meta))


def is_draft(meta: MetaMap) -> bool:
    """Is the item the draft version of a published item?"""
    return bool(published_id_of(meta)) and not has_draft(meta)


def classify(meta: MetaMap) -> ItemRole:
    """
    Classify an item from its metadata.

    The draft pointer wins when, against the invariant, both pointers are
    present: the item is then treated as the published side.
    """
    if has_draft(meta):
        return ItemRole.PUBLISHED
    if published_id_of(meta):
        return ItemRole.DRAFT
    return ItemRole.NONE


def may_change_status(meta: MetaMap, new_status: str) -> bool:
    """
    A draft version may only ever hold the "draft" status.

    Publishing it has to go through the merge instead.
    """
    if new_status == "draft":
        return True
    return not is_draft(meta)
