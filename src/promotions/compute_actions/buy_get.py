"""Buy X get Y promotions.

The buy rules decide whether the promotion applies at all: the quantities of
every item matching them must reach ``buy_rules_min_quantity``. The target
rules pick the items that receive the discount, and ``apply_to_quantity``
units are given away starting from the most expensive target.
"""

import structlog

from promotions.compute_actions.actions import AddItemAdjustmentAction, ComputedAction
from promotions.compute_actions.dto import ItemContext, PromotionDTO
from promotions.compute_actions.rules import are_rules_valid_for_context
from promotions.compute_actions.usage import compute_action_for_budget_exceeded
from promotions.compute_actions.value_map import MethodIdPromoValueMap
from promotions.shared.enums import PromotionType
from promotions.shared.errors import InvalidDataError

logger = structlog.get_logger(__name__)


def get_computed_actions_for_buy_get(
    promotion: PromotionDTO,
    items_context: list[ItemContext] | None,
    method_id_promo_value_map: MethodIdPromoValueMap,
) -> list[ComputedAction]:
    application_method = promotion.application_method
    buy_rules_min_quantity = application_method.buy_rules_min_quantity if application_method else None
    apply_to_quantity = application_method.apply_to_quantity if application_method else None
    buy_rules = application_method.buy_rules if application_method else None
    target_rules = application_method.target_rules if application_method else None
    computed_actions = []

    if items_context is None:
        raise InvalidDataError({"items": ['"items" should be present as an array in the context to compute actions']})

    if not isinstance(buy_rules, list) or not isinstance(target_rules, list):
        logger.debug("Buy-get promotion has no rule lists", code=promotion.code)
        return []

    valid_quantity = sum(item.quantity for item in items_context if are_rules_valid_for_context(buy_rules, item))

    if not buy_rules_min_quantity or not apply_to_quantity or buy_rules_min_quantity > valid_quantity:
        return []

    # sorted() is stable, equal prices keep their cart order
    valid_items_for_target_rules = sorted(
        (item for item in items_context if are_rules_valid_for_context(target_rules, item)),
        key=lambda item: item.unit_price,
        reverse=True,
    )

    remaining_qty_to_apply = apply_to_quantity

    for item in valid_items_for_target_rules:
        multiplier = min(item.quantity, remaining_qty_to_apply)
        amount = item.unit_price * multiplier
        new_remaining_qty_to_apply = remaining_qty_to_apply - multiplier

        # Targets are sorted by price, nothing after a free line is worth discounting
        if new_remaining_qty_to_apply < 0 or amount <= 0:
            break

        remaining_qty_to_apply = new_remaining_qty_to_apply

        budget_exceeded_action = compute_action_for_budget_exceeded(promotion, amount, method_id_promo_value_map)
        if budget_exceeded_action:
            computed_actions.append(budget_exceeded_action)
            continue

        method_id_promo_value_map.add(item.id, amount, promotion.code)

        computed_actions.append(
            AddItemAdjustmentAction(
                item_id=item.id,
                amount=amount,
                code=promotion.code,
            )
        )

    return computed_actions


def sort_by_buy_get_type(a: PromotionDTO, b: PromotionDTO) -> int:
    """Comparator placing buy-get promotions ahead of every other type."""
    if a.type == PromotionType.BUYGET and b.type != PromotionType.BUYGET:
        return -1
    elif a.type != PromotionType.BUYGET and b.type == PromotionType.BUYGET:
        return 1
    else:
        return 0
