from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ContentStatus = Literal["draft", "scheduled", "published", "archived"]
DiscussionStatus = Literal["open", "closed"]

# --- Pointer metadata ---
# Stored on the draft, points at the published item.
PUBLISHED_ID_KEY = "shadow_draft_published_id"
# Stored on the published item, points at its draft.
DRAFT_ID_KEY = "shadow_draft_draft_id"

POINTER_KEYS: frozenset[str] = frozenset({PUBLISHED_ID_KEY, DRAFT_ID_KEY})

# Unique or store-owned fields; never copied from one item onto another.
SYSTEM_FIELDS: frozenset[str] = frozenset(
    {"id", "created_at", "updated_at", "status", "slug", "guid"}
)

MetaMap = dict[str, list[str]]


# --- Content ---

class ContentRecord(BaseModel):
    id: int = 0
    type: str = "post"
    title: str = ""
    body: str = ""
    excerpt: str = ""
    author_id: int = 0
    status: ContentStatus = "draft"

    comment_status: DiscussionStatus = "open"
    ping_status: DiscussionStatus = "open"
    password: str = ""

    parent_id: int = 0
    menu_order: int = 0

    slug: str = ""
    guid: str = ""

    created_at: datetime | None = None
    updated_at: datetime | None = None


# --- Actors ---

class ActorContext(BaseModel):
    actor_id: str
    display_name: str = ""
    capabilities: list[str] = Field(default_factory=list)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities

