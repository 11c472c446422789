"""
Actions component - dispatches draft actions and builds their trigger URLs.
"""

from src.components.actions.component import DraftActionController
from src.components.actions.models import DispatchReason, DispatchResult, DraftAction
from src.components.actions.ports import AuthorizationPort, ContentStores

__all__ = [
    # Entry points
    "DraftActionController",
    # Models
    "DraftAction",
    "DispatchReason",
    "DispatchResult",
    # Ports
    "AuthorizationPort",
    "ContentStores",
]
