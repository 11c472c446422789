from datetime import datetime

from pydantic import BaseModel

from src.domain.entities import ContentStatus, DiscussionStatus


# --- Items ---
class ItemCreateRequest(BaseModel):
    type: str = "post"
    title: str = ""
    body: str = ""
    excerpt: str = ""
    status: ContentStatus = "draft"
    slug: str = ""
    comment_status: DiscussionStatus = "open"
    ping_status: DiscussionStatus = "open"
    parent_id: int = 0
    menu_order: int = 0


class ItemUpdateRequest(BaseModel):
    title: str | None = None
    body: str | None = None
    excerpt: str | None = None
    status: ContentStatus | None = None
    slug: str | None = None
    comment_status: DiscussionStatus | None = None
    ping_status: DiscussionStatus | None = None
    parent_id: int | None = None
    menu_order: int | None = None


class ItemResponse(BaseModel):
    id: int
    type: str
    title: str
    body: str
    excerpt: str
    author_id: int
    status: ContentStatus
    slug: str
    guid: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    metadata: dict[str, list[str]] = {}
    terms: dict[str, list[str]] = {}


class MetadataUpdateRequest(BaseModel):
    """Keys listed here replace the stored values; other keys are untouched."""

    values: dict[str, list[str]]


class TermsUpdateRequest(BaseModel):
    slugs: list[str]


# --- Drafts ---
class DispatchResponse(BaseModel):
    performed: bool
    redirect_target: str | None
    action: str | None
    reason: str


class DraftSummaryResponse(BaseModel):
    state: str
    requested_id: int
    requested_role: str
    published_id: int
    draft_id: int
    is_orphaned: bool
    is_consistent: bool
    actions: dict[str, str] = {}
