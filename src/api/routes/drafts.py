from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from src.api.deps import get_context, get_controller, get_current_actor, get_optional_actor
from src.api.schemas import DispatchResponse, DraftSummaryResponse
from src.app_shell.context import ServiceContext
from src.components.actions import DispatchResult, DraftActionController
from src.domain.entities import ActorContext
from src.domain.state import LinkState

router = APIRouter()

REASON_STATUS = {
    "invalid_action": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "precondition_failed": status.HTTP_409_CONFLICT,
}


def _raise_declined(result: DispatchResult) -> NoReturn:
    raise HTTPException(
        status_code=REASON_STATUS.get(result.reason, status.HTTP_400_BAD_REQUEST),
        detail=result.to_dict(),
    )


@router.get("/action")
def run_action_link(
    request: Request,
    controller: DraftActionController = Depends(get_controller),
    actor: ActorContext | None = Depends(get_optional_actor),
) -> RedirectResponse:
    """Trigger an action from a generated action URL and redirect to the edit screen."""
    result = controller.dispatch_query(dict(request.query_params), actor)
    if not result.performed or result.redirect_target is None:
        _raise_declined(result)

    return RedirectResponse(result.redirect_target, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{item_id}", response_model=DraftSummaryResponse)
def get_draft_summary(
    item_id: int,
    ctx: ServiceContext = Depends(get_context),
    actor: ActorContext = Depends(get_current_actor),
) -> DraftSummaryResponse:
    """Pairing state of an item, with the action URLs the caller may use."""
    link = ctx.link(item_id)
    if link.state is LinkState.UNBOUND or link.published.record is None:
        raise HTTPException(status_code=404, detail="Item not found")

    allowed = ctx.policy.can_act_on(actor, link.published.record)
    return DraftSummaryResponse(
        **link.summary().to_dict(),
        actions=ctx.controller.available_actions(link) if allowed else {},
    )


@router.post("/{item_id}/{action}", response_model=DispatchResponse)
def run_action(
    item_id: int,
    action: str,
    controller: DraftActionController = Depends(get_controller),
    actor: ActorContext | None = Depends(get_optional_actor),
) -> DispatchResponse:
    result = controller.dispatch(action, item_id, actor)
    if not result.performed:
        _raise_declined(result)

    return DispatchResponse(**result.to_dict())
