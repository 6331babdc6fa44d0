"""Campaign budget enforcement for computed adjustments."""

import structlog

from promotions.compute_actions.actions import CampaignBudgetExceededAction
from promotions.compute_actions.dto import PromotionDTO
from promotions.compute_actions.value_map import MethodIdPromoValueMap
from promotions.shared.enums import CampaignBudgetType

logger = structlog.get_logger(__name__)


def compute_action_for_budget_exceeded(
    promotion: PromotionDTO,
    amount: float,
    value_map: MethodIdPromoValueMap | None = None,
) -> CampaignBudgetExceededAction | None:
    """Return a ``campaignBudgetExceeded`` action if ``amount`` would breach the budget.

    ``None`` means the caller may apply the full amount. Spend budgets count
    what the promotion has already allocated in this pass (via ``value_map``)
    on top of the usage recorded on the campaign; usage budgets count one
    more use of the promotion.
    """
    budget = promotion.campaign.budget if promotion.campaign else None
    if budget is None or budget.limit is None:
        return None

    if budget.type == CampaignBudgetType.SPEND:
        spent_in_pass = value_map.spent_for(promotion.code) if value_map is not None else 0.0
        total_used = budget.used + spent_in_pass + amount
    else:
        total_used = budget.used + 1

    if total_used > budget.limit:
        logger.info(
            "Campaign budget exceeded",
            code=promotion.code,
            budget_type=budget.type.value,
            limit=budget.limit,
            used=budget.used,
            proposed_amount=amount,
        )
        return CampaignBudgetExceededAction(code=promotion.code)

    return None
