"""
Host item endpoints.

Status changes pass through the draft status guard and removals through the
removal hook, so drafts stay consistent however items are edited.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.deps import get_context, get_current_actor
from src.api.schemas import (
    ItemCreateRequest,
    ItemResponse,
    ItemUpdateRequest,
    MetadataUpdateRequest,
    TermsUpdateRequest,
)
from src.app_shell.context import ServiceContext
from src.domain.entities import POINTER_KEYS, ActorContext

logger = logging.getLogger(__name__)

router = APIRouter()


def _item_response(ctx: ServiceContext, item_id: int) -> ItemResponse:
    record = ctx.stores.items.load(item_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Item not found")

    terms = {
        taxonomy: sorted(ctx.stores.taxonomy.get_assigned_terms(item_id, taxonomy))
        for taxonomy in sorted(ctx.stores.taxonomy.applicable_taxonomies(record.type))
    }
    return ItemResponse(
        **record.model_dump(include=set(ItemResponse.model_fields)),
        metadata=ctx.stores.metadata.get_all(item_id),
        terms=terms,
    )


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: int,
    actor: ActorContext = Depends(get_current_actor),
    ctx: ServiceContext = Depends(get_context),
) -> ItemResponse:
    return _item_response(ctx, item_id)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    req: ItemCreateRequest,
    actor: ActorContext = Depends(get_current_actor),
    ctx: ServiceContext = Depends(get_context),
) -> ItemResponse:
    fields = req.model_dump()
    fields["author_id"] = int(actor.actor_id) if actor.actor_id.isdigit() else 0
    item_id = ctx.stores.items.insert(fields)
    return _item_response(ctx, item_id)


@router.patch("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    req: ItemUpdateRequest,
    actor: ActorContext = Depends(get_current_actor),
    ctx: ServiceContext = Depends(get_context),
) -> ItemResponse:
    current = ctx.stores.items.load(item_id)
    if current is None:
        raise HTTPException(status_code=404, detail="Item not found")

    changes = req.model_dump(exclude_unset=True, exclude_none=True)
    with ctx.stores.atomic():
        ctx.stores.items.update(item_id, changes)
        new_status = changes.get("status")
        if new_status and new_status != current.status:
            outcome = ctx.hooks.on_status_transition(item_id, new_status, current.status)
        else:
            outcome = None

    if outcome is not None and outcome.reverted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": outcome.message, "redirect_target": outcome.redirect_target},
        )

    return _item_response(ctx, item_id)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    actor: ActorContext = Depends(get_current_actor),
    ctx: ServiceContext = Depends(get_context),
) -> Response:
    if ctx.stores.items.load(item_id) is None:
        raise HTTPException(status_code=404, detail="Item not found")

    with ctx.stores.atomic():
        ctx.hooks.on_item_removed(item_id)
        ctx.stores.items.delete(item_id)

    logger.info("Actor %s deleted item %s", actor.actor_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{item_id}/metadata", response_model=ItemResponse)
def put_metadata(
    item_id: int,
    req: MetadataUpdateRequest,
    actor: ActorContext = Depends(get_current_actor),
    ctx: ServiceContext = Depends(get_context),
) -> ItemResponse:
    if ctx.stores.items.load(item_id) is None:
        raise HTTPException(status_code=404, detail="Item not found")

    reserved = sorted(POINTER_KEYS & set(req.values))
    if reserved:
        raise HTTPException(
            status_code=400,
            detail=f"Keys managed by draft actions: {', '.join(reserved)}",
        )

    with ctx.stores.atomic():
        for key, values in req.values.items():
            ctx.stores.metadata.unset(item_id, key)
            for value in values:
                ctx.stores.metadata.add(item_id, key, value)

    return _item_response(ctx, item_id)


@router.put("/{item_id}/terms/{taxonomy}", response_model=ItemResponse)
def put_terms(
    item_id: int,
    taxonomy: str,
    req: TermsUpdateRequest,
    actor: ActorContext = Depends(get_current_actor),
    ctx: ServiceContext = Depends(get_context),
) -> ItemResponse:
    record = ctx.stores.items.load(item_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Item not found")

    if taxonomy not in ctx.stores.taxonomy.applicable_taxonomies(record.type):
        raise HTTPException(
            status_code=400,
            detail=f"Taxonomy {taxonomy} does not apply to {record.type} items",
        )

    ctx.stores.taxonomy.set_assigned_terms(item_id, taxonomy, req.slugs)
    return _item_response(ctx, item_id)
