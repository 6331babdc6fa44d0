"""Standard promotions targeting shipping methods.

A shipping method is discounted like a single-unit line priced at its
subtotal.
"""

from promotions.compute_actions.actions import ComputedAction
from promotions.compute_actions.dto import PromotionDTO, ShippingMethodContext
from promotions.compute_actions.items import apply_promotion_to_items
from promotions.compute_actions.value_map import MethodIdPromoValueMap
from promotions.shared.errors import InvalidDataError


def get_computed_actions_for_shipping_methods(
    promotion: PromotionDTO,
    shipping_methods: list[ShippingMethodContext] | None,
    method_id_promo_value_map: MethodIdPromoValueMap,
) -> list[ComputedAction]:
    if shipping_methods is None:
        raise InvalidDataError(
            {
                "shipping_methods": [
                    '"shipping_methods" should be present as an array in the context to compute actions'
                ]
            }
        )

    return apply_promotion_to_items(promotion, shipping_methods, method_id_promo_value_map)
