"""
Actions component port definitions.
"""

from src.components.content.ports import ContentStores
from src.ports.auth import AuthorizationPort

__all__ = ["AuthorizationPort", "ContentStores"]
