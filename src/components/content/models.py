"""
Content component models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from src.domain.entities import ContentRecord

if TYPE_CHECKING:
    from src.components.content.component import ContentItem

# Anything that can name an item: an id, a numeric string from a query
# parameter, a loaded record or a wrapped item.
ItemRef = Union[int, str, ContentRecord, "ContentItem"]


def item_id_of(ref: ItemRef | None) -> int:
    """
    Normalize an item reference to a positive id, or 0.

    Booleans, negative numbers and non-numeric strings all give 0.
    """
    if ref is None or isinstance(ref, bool):
        return 0
    if isinstance(ref, int):
        return ref if ref > 0 else 0
    if isinstance(ref, str):
        s = ref.strip()
        return int(s) if s.isascii() and s.isdigit() and int(s) > 0 else 0
    if isinstance(ref, ContentRecord):
        return ref.id if ref.id > 0 else 0

    ref_id = getattr(ref, "id", 0)
    return ref_id if isinstance(ref_id, int) and ref_id > 0 else 0
