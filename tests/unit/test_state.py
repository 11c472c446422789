"""
Tests for pointer metadata classification.
"""

import pytest

from src.domain.entities import DRAFT_ID_KEY, PUBLISHED_ID_KEY
from src.domain.state import (
    ItemRole,
    classify,
    draft_id_of,
    has_draft,
    is_draft,
    may_change_status,
    pointer_value,
)


class TestPointerValue:
    @pytest.mark.parametrize(
        "values, expected",
        [
            (["12"], 12),
            ([" 5 "], 5),
            (["12", "13"], 12),
            (["0"], 0),
            (["-4"], 0),
            (["abc"], 0),
            ([], 0),
        ],
    )
    def test_parsing(self, values: list[str], expected: int) -> None:
        assert pointer_value({"k": values}, "k") == expected

    def test_missing_key(self) -> None:
        assert pointer_value({}, "k") == 0


class TestClassify:
    def test_plain_item(self) -> None:
        assert classify({"other": ["1"]}) is ItemRole.NONE
        assert not has_draft({}) and not is_draft({})

    def test_published_with_draft(self) -> None:
        meta = {DRAFT_ID_KEY: ["9"]}
        assert classify(meta) is ItemRole.PUBLISHED
        assert draft_id_of(meta) == 9

    def test_draft(self) -> None:
        meta = {PUBLISHED_ID_KEY: ["3"]}
        assert classify(meta) is ItemRole.DRAFT
        assert is_draft(meta) is True

    def test_both_pointers_treated_as_published(self) -> None:
        meta = {DRAFT_ID_KEY: ["9"], PUBLISHED_ID_KEY: ["3"]}
        assert classify(meta) is ItemRole.PUBLISHED
        assert is_draft(meta) is False


class TestMayChangeStatus:
    def test_draft_is_locked_to_draft_status(self) -> None:
        meta = {PUBLISHED_ID_KEY: ["3"]}
        assert may_change_status(meta, "draft") is True
        assert may_change_status(meta, "published") is False
        assert may_change_status(meta, "scheduled") is False

    def test_other_items_are_free(self) -> None:
        assert may_change_status({}, "published") is True
        assert may_change_status({DRAFT_ID_KEY: ["9"]}, "archived") is True
