"""Standard promotions targeting line items.

``apply_promotion_to_items`` is shared by the item, shipping method and
order computers: each one hands it the lines it targets and the allocation
to use.

Allocation ``each`` discounts every matching line on its own, up to
``max_quantity`` units of it. Allocation ``across`` spreads a fixed amount
over the matching lines in proportion to what is left of their subtotals
(a percentage is simply applied to each remaining subtotal).
"""

from promotions.compute_actions.actions import (
    AddItemAdjustmentAction,
    AddShippingMethodAdjustmentAction,
    ComputedAction,
)
from promotions.compute_actions.dto import ItemContext, PromotionDTO
from promotions.compute_actions.rules import are_rules_valid_for_context
from promotions.compute_actions.usage import compute_action_for_budget_exceeded
from promotions.compute_actions.value_map import MethodIdPromoValueMap
from promotions.shared.enums import (
    ApplicationMethodAllocation,
    ApplicationMethodTargetType,
    ApplicationMethodType,
)
from promotions.shared.errors import InvalidDataError


def get_computed_actions_for_items(
    promotion: PromotionDTO,
    items: list[ItemContext] | None,
    method_id_promo_value_map: MethodIdPromoValueMap,
) -> list[ComputedAction]:
    if items is None:
        raise InvalidDataError({"items": ['"items" should be present as an array in the context to compute actions']})

    return apply_promotion_to_items(promotion, items, method_id_promo_value_map)


def get_valid_items_for_promotion(items, promotion: PromotionDTO) -> list:
    target_rules = promotion.application_method.target_rules if promotion.application_method else None
    return [item for item in items if are_rules_valid_for_context(target_rules, item)]


def calculate_adjustment_amount(
    item,
    promotion: PromotionDTO,
    applied_value: float,
    allocation: ApplicationMethodAllocation | None,
    line_items_total: float = 0.0,
) -> float:
    """Discount owed to ``item`` before any budget check."""
    application_method = promotion.application_method
    value = application_method.value or 0.0
    is_percentage = application_method.type == ApplicationMethodType.PERCENTAGE

    if allocation == ApplicationMethodAllocation.ACROSS:
        remaining_item_total = item.subtotal - applied_value
        if remaining_item_total <= 0 or line_items_total <= 0:
            return 0.0

        if is_percentage:
            return min(remaining_item_total * value / 100, remaining_item_total)

        return min(remaining_item_total * value / line_items_total, remaining_item_total)

    quantity = item.quantity
    if application_method.max_quantity is not None:
        quantity = min(quantity, application_method.max_quantity)

    applicable_total = item.unit_price * quantity - applied_value
    if applicable_total <= 0:
        return 0.0

    if is_percentage:
        return min(applicable_total * value / 100, applicable_total)

    return min(value * quantity, applicable_total)


def apply_promotion_to_items(
    promotion: PromotionDTO,
    items: list,
    method_id_promo_value_map: MethodIdPromoValueMap,
    allocation_override: ApplicationMethodAllocation | None = None,
) -> list[ComputedAction]:
    application_method = promotion.application_method
    allocation = allocation_override or application_method.allocation
    target_type = application_method.target_type
    computed_actions = []

    applicable_items = get_valid_items_for_promotion(items, promotion)

    line_items_total = 0.0
    if allocation == ApplicationMethodAllocation.ACROSS:
        line_items_total = sum(item.subtotal - method_id_promo_value_map.get(item.id) for item in applicable_items)
        if line_items_total <= 0:
            return computed_actions

    for item in applicable_items:
        if item.subtotal <= 0:
            continue

        applied_promo_value = method_id_promo_value_map.get(item.id)
        amount = calculate_adjustment_amount(
            item,
            promotion,
            applied_value=applied_promo_value,
            allocation=allocation,
            line_items_total=line_items_total,
        )

        if amount <= 0:
            continue

        budget_exceeded_action = compute_action_for_budget_exceeded(promotion, amount, method_id_promo_value_map)
        if budget_exceeded_action:
            computed_actions.append(budget_exceeded_action)
            continue

        method_id_promo_value_map.add(item.id, amount, promotion.code)

        if target_type == ApplicationMethodTargetType.SHIPPING_METHODS:
            computed_actions.append(
                AddShippingMethodAdjustmentAction(
                    shipping_method_id=item.id,
                    amount=amount,
                    code=promotion.code,
                )
            )
        else:
            computed_actions.append(
                AddItemAdjustmentAction(
                    item_id=item.id,
                    amount=amount,
                    code=promotion.code,
                )
            )

    return computed_actions
