"""Shared BDD fixtures and step definitions for promotion computation."""

import pytest
from promotions.compute_actions import compute_actions
from promotions.compute_actions.actions import (
    AddItemAdjustmentAction,
    CampaignBudgetExceededAction,
    RemoveItemAdjustmentAction,
)
from promotions.compute_actions.dto import (
    ApplicationMethodDTO,
    CampaignBudgetDTO,
    CampaignDTO,
    ComputeActionContext,
    PromotionDTO,
    PromotionRuleDTO,
)
from promotions.shared.errors import InvalidDataError
from pytest_bdd import given, parsers, then, when


def _category_rule(category):
    return [PromotionRuleDTO(attribute="product.category", operator="eq", values=[category])]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def promotion_list():
    return []


@pytest.fixture()
def cart():
    return {"items": [], "shipping_methods": []}


@pytest.fixture()
def outcome():
    return {"actions": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps: promotions
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        'a "{code}" promotion: buy {buy_quantity:d} "{buy_category}" get {get_quantity:d} "{get_category}" free'
    )
)
def buy_get_promotion(promotion_list, code, buy_quantity, buy_category, get_quantity, get_category):
    promotion_list.append(
        PromotionDTO(
            code=code,
            type="buyget",
            application_method=ApplicationMethodDTO(
                type="percentage",
                target_type="items",
                value=100,
                buy_rules=_category_rule(buy_category),
                target_rules=_category_rule(get_category),
                buy_rules_min_quantity=buy_quantity,
                apply_to_quantity=get_quantity,
            ),
        )
    )


@given(parsers.cfparse('a "{code}" promotion: {value:d} percent off one unit of each "{category}" line'))
def percentage_each_promotion(promotion_list, code, value, category):
    promotion_list.append(
        PromotionDTO(
            code=code,
            type="standard",
            application_method=ApplicationMethodDTO(
                type="percentage",
                target_type="items",
                allocation="each",
                value=value,
                max_quantity=1,
                target_rules=_category_rule(category),
            ),
        )
    )


@given(parsers.cfparse("the promotion has a spend budget of {limit:d}"))
def promotion_spend_budget(promotion_list, limit):
    promotion = promotion_list.pop()
    campaign = CampaignDTO(id="camp-1", budget=CampaignBudgetDTO(type="spend", limit=limit))
    promotion_list.append(promotion.model_copy(update={"campaign": campaign}))


# ---------------------------------------------------------------------------
# Given steps: cart
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the cart has line "{item_id}" with {quantity:d} "{category}" at {price:d}'))
def cart_line(cart, item_id, quantity, category, price):
    cart["items"].append(
        {"id": item_id, "quantity": quantity, "unit_price": price, "product": {"category": category}}
    )


@given(parsers.cfparse('line "{item_id}" already carries a "{code}" adjustment "{adjustment_id}"'))
def existing_adjustment(cart, item_id, code, adjustment_id):
    line = next(item for item in cart["items"] if item["id"] == item_id)
    line.setdefault("adjustments", []).append({"id": adjustment_id, "code": code})


@given("the cart carries no item list")
def cart_without_items(cart):
    cart["items"] = None


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the promotions are computed")
def compute(promotion_list, cart, outcome):
    context = ComputeActionContext.model_validate(cart)
    try:
        outcome["actions"] = compute_actions(promotion_list, context, [p.code for p in promotion_list])
    except InvalidDataError as exc:
        outcome["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('line "{item_id}" is discounted by {amount:d} from "{code}"'))
def line_discounted(outcome, item_id, amount, code):
    assert AddItemAdjustmentAction(item_id=item_id, amount=amount, code=code) in outcome["actions"]


@then(parsers.cfparse('line "{item_id}" is not discounted'))
def line_not_discounted(outcome, item_id):
    assert not any(
        isinstance(action, AddItemAdjustmentAction) and action.item_id == item_id for action in outcome["actions"]
    )


@then("no actions are computed")
def no_actions(outcome):
    assert outcome["exc"] is None
    assert outcome["actions"] == []


@then(parsers.cfparse('the campaign budget of "{code}" is reported as exceeded'))
def budget_exceeded(outcome, code):
    assert CampaignBudgetExceededAction(code=code) in outcome["actions"]


@then(parsers.cfparse('adjustment "{adjustment_id}" on line "{item_id}" is removed first'))
def adjustment_removed_first(outcome, adjustment_id, item_id):
    first = outcome["actions"][0]
    assert isinstance(first, RemoveItemAdjustmentAction)
    assert (first.adjustment_id, first.item_id) == (adjustment_id, item_id)


@then("the computation fails with an invalid data error")
def invalid_data(outcome):
    assert outcome["exc"] is not None, "Expected an invalid data error but none was raised"
    assert isinstance(outcome["exc"], InvalidDataError)
