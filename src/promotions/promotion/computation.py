"""Promotion computation over the stored promotions.

Loads the active promotions a pricing pass may apply, attaches their
campaigns and hands them to the pure engine in ``promotions.compute_actions``.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from promotions.campaign.campaign import Campaign
from promotions.compute_actions import compute_actions
from promotions.compute_actions.dto import ComputeActionContext
from promotions.promotion.promotion import Promotion
from promotions.shared.enums import PromotionStatus
from promotions.utils.logging import computation_context

logger = structlog.get_logger(__name__)


def load_promotion_dtos(promotion_codes=None, prevent_auto_promotions=False):
    """Active promotions matching ``promotion_codes``, plus automatic ones, as engine DTOs."""
    codes = {code.strip().upper() for code in promotion_codes or []}
    active = (
        current_domain.repository_for(Promotion)._dao.query.filter(status=PromotionStatus.ACTIVE.value).all().items
    )

    campaign_repo = current_domain.repository_for(Campaign)
    campaigns = {}
    dtos = []

    for promotion in active:
        if promotion.code not in codes and not (promotion.is_automatic and not prevent_auto_promotions):
            continue

        campaign = None
        if promotion.campaign_id:
            campaign_id = str(promotion.campaign_id)
            if campaign_id not in campaigns:
                try:
                    campaigns[campaign_id] = campaign_repo.get(campaign_id)
                except ObjectNotFoundError:
                    logger.warning("Campaign not found for promotion", code=promotion.code, campaign_id=campaign_id)
                    campaigns[campaign_id] = None
            campaign = campaigns[campaign_id]

        dtos.append(promotion.to_dto(campaign=campaign))

    return sorted(dtos, key=lambda dto: dto.code)


def compute_promotion_actions(promotion_codes, context, prevent_auto_promotions=False, request_id=None):
    """Compute the adjustment actions for a cart against the stored promotions.

    Args:
        promotion_codes: Codes entered by the customer.
        context: A ``ComputeActionContext`` or the equivalent dict.
        prevent_auto_promotions: Ignore automatic promotions for this pass.
        request_id: Bound to every log line of the pass.
    """
    if not isinstance(context, ComputeActionContext):
        context = ComputeActionContext.model_validate(context)

    codes = [code.strip().upper() for code in promotion_codes or []]

    with computation_context(request_id=request_id):
        promotions_to_apply = load_promotion_dtos(codes, prevent_auto_promotions)
        logger.info(
            "Computing promotion actions",
            requested_codes=codes,
            candidate_codes=[p.code for p in promotions_to_apply],
        )
        return compute_actions(
            promotions_to_apply,
            context,
            promotion_codes=codes,
            prevent_auto_promotions=prevent_auto_promotions,
        )
