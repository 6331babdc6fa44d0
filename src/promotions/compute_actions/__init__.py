"""Promotion computation engine: pure functions over promotion and cart DTOs."""

from promotions.compute_actions.buy_get import get_computed_actions_for_buy_get, sort_by_buy_get_type
from promotions.compute_actions.engine import compute_actions
from promotions.compute_actions.items import get_computed_actions_for_items
from promotions.compute_actions.order import get_computed_actions_for_order
from promotions.compute_actions.rules import are_rules_valid_for_context
from promotions.compute_actions.shipping_methods import get_computed_actions_for_shipping_methods
from promotions.compute_actions.usage import compute_action_for_budget_exceeded
from promotions.compute_actions.value_map import MethodIdPromoValueMap

__all__ = [
    "MethodIdPromoValueMap",
    "are_rules_valid_for_context",
    "compute_action_for_budget_exceeded",
    "compute_actions",
    "get_computed_actions_for_buy_get",
    "get_computed_actions_for_items",
    "get_computed_actions_for_order",
    "get_computed_actions_for_shipping_methods",
    "sort_by_buy_get_type",
]
