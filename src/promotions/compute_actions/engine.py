"""Promotion computation pass.

``compute_actions`` turns the promotions a cart is eligible for into the
ordered list of adjustment actions the totals stage applies. Each call is a
full recomputation: adjustments left by a previous pass are removed and the
surviving promotions are allocated again from scratch, so repeating a pass
over the same cart yields the same actions.
"""

from collections.abc import Callable, Iterable
from functools import cmp_to_key

import structlog

from promotions.compute_actions.actions import (
    ComputedAction,
    RemoveItemAdjustmentAction,
    RemoveShippingMethodAdjustmentAction,
)
from promotions.compute_actions.buy_get import get_computed_actions_for_buy_get, sort_by_buy_get_type
from promotions.compute_actions.dto import ComputeActionContext, PromotionDTO
from promotions.compute_actions.items import get_computed_actions_for_items
from promotions.compute_actions.order import get_computed_actions_for_order
from promotions.compute_actions.rules import are_rules_valid_for_context
from promotions.compute_actions.shipping_methods import get_computed_actions_for_shipping_methods
from promotions.compute_actions.value_map import MethodIdPromoValueMap
from promotions.shared.enums import ApplicationMethodTargetType, PromotionType

logger = structlog.get_logger(__name__)

ActionComputer = Callable[[PromotionDTO, ComputeActionContext, MethodIdPromoValueMap], list[ComputedAction]]


def _compute_standard(promotion, context, method_id_promo_value_map):
    computer = STANDARD_TARGET_COMPUTERS.get(promotion.application_method.target_type)
    if computer is None:
        logger.debug("Standard promotion has no known target type", code=promotion.code)
        return []

    return computer(promotion, context, method_id_promo_value_map)


STANDARD_TARGET_COMPUTERS: dict[ApplicationMethodTargetType, ActionComputer] = {
    ApplicationMethodTargetType.ITEMS: lambda p, ctx, m: get_computed_actions_for_items(p, ctx.items, m),
    ApplicationMethodTargetType.SHIPPING_METHODS: lambda p, ctx, m: get_computed_actions_for_shipping_methods(
        p, ctx.shipping_methods, m
    ),
    ApplicationMethodTargetType.ORDER: lambda p, ctx, m: get_computed_actions_for_order(p, ctx.items, m),
}

PROMOTION_TYPE_COMPUTERS: dict[PromotionType, ActionComputer] = {
    PromotionType.BUYGET: lambda p, ctx, m: get_computed_actions_for_buy_get(p, ctx.items, m),
    PromotionType.STANDARD: _compute_standard,
}


def select_promotions_to_apply(
    promotions: Iterable[PromotionDTO],
    promotion_codes: Iterable[str] | None = None,
    prevent_auto_promotions: bool = False,
) -> list[PromotionDTO]:
    """Requested promotions plus automatic ones, first occurrence of each code kept."""
    requested = set(promotion_codes or [])
    selected = {}

    for promotion in promotions:
        if promotion.code in selected:
            continue
        if promotion.code in requested or (promotion.is_automatic and not prevent_auto_promotions):
            selected[promotion.code] = promotion

    return list(selected.values())


def compute_remove_actions(context: ComputeActionContext) -> list[ComputedAction]:
    """Remove every adjustment a previous pass left on the cart."""
    remove_actions = []

    for item in context.items or []:
        for adjustment in item.adjustments:
            if adjustment.code:
                remove_actions.append(
                    RemoveItemAdjustmentAction(adjustment_id=adjustment.id, item_id=item.id, code=adjustment.code)
                )

    for shipping_method in context.shipping_methods or []:
        for adjustment in shipping_method.adjustments:
            if adjustment.code:
                remove_actions.append(
                    RemoveShippingMethodAdjustmentAction(
                        adjustment_id=adjustment.id,
                        shipping_method_id=shipping_method.id,
                        code=adjustment.code,
                    )
                )

    return remove_actions


def compute_actions(
    promotions: Iterable[PromotionDTO],
    context: ComputeActionContext,
    promotion_codes: Iterable[str] | None = None,
    prevent_auto_promotions: bool = False,
) -> list[ComputedAction]:
    """Run one pricing pass over ``context`` and return the resulting actions.

    Args:
        promotions: Candidate promotions, as loaded by the promotion store.
        context: The cart or order being priced.
        promotion_codes: Codes the customer entered.
        prevent_auto_promotions: Skip promotions flagged ``is_automatic``.
    """
    promotions_to_apply = select_promotions_to_apply(promotions, promotion_codes, prevent_auto_promotions)
    computed_actions = compute_remove_actions(context)

    # Buy-get first so standard promotions see what it already consumed
    sorted_promotions = sorted(promotions_to_apply, key=cmp_to_key(sort_by_buy_get_type))

    method_id_promo_value_map = MethodIdPromoValueMap()

    for promotion in sorted_promotions:
        if promotion.application_method is None:
            logger.debug("Promotion has no application method", code=promotion.code)
            continue

        if not are_rules_valid_for_context(promotion.rules, context):
            logger.debug("Promotion rules do not match context", code=promotion.code)
            continue

        computer = PROMOTION_TYPE_COMPUTERS.get(promotion.type)
        if computer is None:
            logger.debug("No action computer for promotion type", code=promotion.code, type=promotion.type)
            continue

        computed_actions.extend(computer(promotion, context, method_id_promo_value_map))

    logger.debug(
        "Computed promotion actions",
        promotions=[p.code for p in sorted_promotions],
        action_count=len(computed_actions),
    )

    return computed_actions
