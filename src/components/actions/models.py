"""Actions component models - the action set and dispatch results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

DispatchReason = Literal[
    "ok",
    "invalid_action",
    "not_found",
    "forbidden",
    "precondition_failed",
]


class DraftAction(str, Enum):
    """Operations that can be triggered on a draft link."""

    CREATE = "create"
    PUBLISH = "publish"
    DELETE = "delete"

    @classmethod
    def parse(cls, name: Any) -> DraftAction | None:
        """Action for a request parameter; None when it names no action."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of dispatching one action."""

    performed: bool
    redirect_target: str | None
    action: DraftAction | None = None
    reason: DispatchReason = "ok"

    def to_dict(self) -> dict[str, Any]:
        return {
            "performed": self.performed,
            "redirect_target": self.redirect_target,
            "action": self.action.value if self.action else None,
            "reason": self.reason,
        }
