"""Standard promotions targeting the whole order.

An order-level discount lands on the line items, always spread across them.
"""

from promotions.compute_actions.actions import ComputedAction
from promotions.compute_actions.dto import ItemContext, PromotionDTO
from promotions.compute_actions.items import apply_promotion_to_items
from promotions.compute_actions.value_map import MethodIdPromoValueMap
from promotions.shared.enums import ApplicationMethodAllocation
from promotions.shared.errors import InvalidDataError


def get_computed_actions_for_order(
    promotion: PromotionDTO,
    items: list[ItemContext] | None,
    method_id_promo_value_map: MethodIdPromoValueMap,
) -> list[ComputedAction]:
    if items is None:
        raise InvalidDataError({"items": ['"items" should be present as an array in the context to compute actions']})

    return apply_promotion_to_items(
        promotion,
        items,
        method_id_promo_value_map,
        allocation_override=ApplicationMethodAllocation.ACROSS,
    )
