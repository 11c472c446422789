from typing import Literal

from pydantic import BaseModel, Field, field_validator

MetadataPolicy = Literal["replace", "append"]


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class MergeRules(BaseModel):
    metadata_policy: MetadataPolicy = "replace"
    exclude_keys: list[str] = Field(default_factory=list)


class PermissionRules(BaseModel):
    required_capabilities: list[str] = Field(default_factory=lambda: ["edit_posts"])
    denied_capabilities: list[str] = Field(default_factory=list)
    item_types: list[str] = Field(default_factory=list)  # empty = every type
    excluded_item_types: list[str] = Field(default_factory=list)
    item_ids: list[int] = Field(default_factory=list)  # empty = every item
    excluded_item_ids: list[int] = Field(default_factory=list)


class UrlRules(BaseModel):
    admin_url: str = "/admin/"
    action_key: str = "shadow_draft_action"
    item_key: str = "shadow_draft_item_id"
    edit_url_template: str = "/admin/items/{item_id}/edit"
    listing_url_template: str = "/admin/items?type={item_type}"

    @field_validator("edit_url_template")
    @classmethod
    def _edit_has_item_id(cls, v: str) -> str:
        if "{item_id}" not in v:
            raise ValueError("edit_url_template must contain {item_id}")
        return v


class MessageRules(BaseModel):
    draft_publish_blocked: str = (
        "Item #{item_id} is a shadow draft of #{published_id} and cannot be "
        "published directly. Use the publish draft action to merge it into "
        "the published item."
    )


class DraftRules(BaseModel):
    merge: MergeRules = Field(default_factory=MergeRules)
    permissions: PermissionRules = Field(default_factory=PermissionRules)
    urls: UrlRules = Field(default_factory=UrlRules)
    messages: MessageRules = Field(default_factory=MessageRules)


class OpsRules(BaseModel):
    data_dir_required: bool = True
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    drafts: DraftRules = Field(default_factory=DraftRules)
    # item type -> taxonomies that apply to it
    taxonomies: dict[str, list[str]] = Field(default_factory=dict)
    ops: OpsRules = Field(default_factory=OpsRules)
