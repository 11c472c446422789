from src.domain.entities import ActorContext, ContentRecord
from src.rules.models import PermissionRules, Rules


class DraftPolicy:
    """
    Default authorization predicate for draft actions.

    Order of checks:
    1. Anonymous actors are refused
    2. Capabilities (all required held, none denied)
    3. Item type allow/deny lists
    4. Item id allow/deny lists
    """

    def __init__(self, permissions: PermissionRules):
        self.permissions = permissions

    @classmethod
    def from_rules(cls, rules: Rules) -> "DraftPolicy":
        return cls(rules.drafts.permissions)

    def can_act_on(self, actor: ActorContext | None, item: ContentRecord) -> bool:
        if actor is None:
            return False

        p = self.permissions

        if not all(actor.can(cap) for cap in p.required_capabilities):
            return False
        if any(actor.can(cap) for cap in p.denied_capabilities):
            return False

        if p.item_types and item.type not in p.item_types:
            return False
        if item.type in p.excluded_item_types:
            return False

        if p.item_ids and item.id not in p.item_ids:
            return False
        if item.id in p.excluded_item_ids:
            return False

        return True
