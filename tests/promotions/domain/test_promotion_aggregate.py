"""Tests for the Promotion aggregate: creation, invariants, lifecycle and engine view."""

import json

import pytest
from promotions.campaign.campaign import Campaign
from promotions.promotion.events import PromotionActivated, PromotionCreated, PromotionDeactivated
from promotions.promotion.promotion import Promotion
from promotions.shared.enums import (
    ApplicationMethodTargetType,
    ApplicationMethodType,
    CampaignBudgetType,
    PromotionStatus,
    PromotionType,
)
from protean.exceptions import ValidationError

SHIRTS = [{"attribute": "product.category", "operator": "eq", "values": ["shirts"]}]
HATS = [{"attribute": "product.category", "operator": "eq", "values": ["hats"]}]


def _standard(**overrides):
    data = {
        "code": "save10",
        "promotion_type": "standard",
        "application_method": {
            "value_type": "percentage",
            "target_type": "items",
            "allocation": "each",
            "value": 10,
            "max_quantity": 2,
        },
    }
    data.update(overrides)
    return Promotion.create(**data)


def _buy_get(**method_overrides):
    method = {
        "value_type": "percentage",
        "target_type": "items",
        "value": 100,
        "buy_rules_min_quantity": 2,
        "apply_to_quantity": 1,
        "buy_rules": SHIRTS,
        "target_rules": HATS,
    }
    method.update(method_overrides)
    return Promotion.create(code="BUY2GET1", promotion_type="buyget", application_method=method)


class TestPromotionCreation:
    def test_code_is_normalized(self):
        assert _standard(code=" save10 ").code == "SAVE10"

    def test_starts_in_draft(self):
        assert _standard().status == PromotionStatus.DRAFT.value

    def test_rules_default_to_empty_list(self):
        assert json.loads(_standard().rules) == []

    def test_rule_lists_are_stored_as_json(self):
        promotion = _buy_get()
        assert json.loads(promotion.application_method.buy_rules) == SHIRTS

    def test_raises_created_event(self):
        promotion = _standard(is_automatic=True)

        assert len(promotion._events) == 1
        event = promotion._events[0]
        assert isinstance(event, PromotionCreated)
        assert event.code == "SAVE10"
        assert event.target_type == "items"
        assert event.is_automatic is True


class TestPromotionInvariants:
    def test_percentage_above_100_rejected(self):
        with pytest.raises(ValidationError):
            _standard(application_method={"value_type": "percentage", "target_type": "order", "value": 150})

    def test_line_targets_need_allocation(self):
        with pytest.raises(ValidationError) as exc_info:
            _standard(application_method={"value_type": "fixed", "target_type": "shipping_methods", "value": 5})
        assert "allocation" in exc_info.value.messages

    def test_each_allocation_on_items_needs_max_quantity(self):
        with pytest.raises(ValidationError) as exc_info:
            _standard(
                application_method={"value_type": "fixed", "target_type": "items", "allocation": "each", "value": 5}
            )
        assert "max_quantity" in exc_info.value.messages

    def test_order_target_needs_no_allocation(self):
        promotion = _standard(application_method={"value_type": "fixed", "target_type": "order", "value": 5})
        assert promotion.application_method.allocation is None

    def test_buy_get_needs_quantities(self):
        with pytest.raises(ValidationError):
            _buy_get(apply_to_quantity=None)

    def test_buy_get_needs_buy_rules(self):
        with pytest.raises(ValidationError):
            _buy_get(buy_rules=[])

    def test_buy_get_needs_target_rules(self):
        with pytest.raises(ValidationError):
            _buy_get(target_rules=None)

    def test_unknown_rule_operator_rejected(self):
        with pytest.raises(ValidationError):
            _standard(rules=[{"attribute": "currency_code", "operator": "like", "values": ["usd"]}])

    def test_rule_without_values_rejected(self):
        with pytest.raises(ValidationError):
            _standard(rules=[{"attribute": "currency_code", "operator": "eq", "values": []}])

    def test_rules_must_be_an_array(self):
        with pytest.raises(ValidationError):
            _standard(rules='{"attribute": "currency_code"}')


class TestPromotionLifecycle:
    def test_activate(self):
        promotion = _standard()
        promotion._events.clear()

        promotion.activate()

        assert promotion.status == PromotionStatus.ACTIVE.value
        assert isinstance(promotion._events[0], PromotionActivated)

    def test_activate_twice_rejected(self):
        promotion = _standard()
        promotion.activate()
        with pytest.raises(ValidationError):
            promotion.activate()

    def test_deactivate(self):
        promotion = _standard()
        promotion.activate()
        promotion._events.clear()

        promotion.deactivate()

        assert promotion.status == PromotionStatus.INACTIVE.value
        assert isinstance(promotion._events[0], PromotionDeactivated)

    def test_deactivate_draft_rejected(self):
        with pytest.raises(ValidationError):
            _standard().deactivate()

    def test_reactivate_after_deactivation(self):
        promotion = _standard()
        promotion.activate()
        promotion.deactivate()
        promotion.activate()
        assert promotion.status == PromotionStatus.ACTIVE.value


class TestPromotionEngineView:
    def test_to_dto(self):
        promotion = _standard(rules=[{"attribute": "currency_code", "operator": "eq", "values": ["usd"]}])

        dto = promotion.to_dto()

        assert dto.code == "SAVE10"
        assert dto.type == PromotionType.STANDARD
        assert dto.application_method.type == ApplicationMethodType.PERCENTAGE
        assert dto.application_method.target_type == ApplicationMethodTargetType.ITEMS
        assert dto.application_method.max_quantity == 2
        assert dto.rules[0].attribute == "currency_code"
        assert dto.campaign is None

    def test_to_dto_keeps_missing_rule_lists_as_none(self):
        dto = _standard().to_dto()
        assert dto.application_method.target_rules is None

    def test_to_dto_with_campaign(self):
        campaign = Campaign.create(
            name="Summer", campaign_identifier="SUMMER", budget_type="spend", budget_limit=500.0
        )
        promotion = _standard(campaign_id=str(campaign.id))

        dto = promotion.to_dto(campaign=campaign)

        assert dto.campaign.id == str(campaign.id)
        assert dto.campaign.budget.type == CampaignBudgetType.SPEND
        assert dto.campaign.budget.limit == 500.0

    def test_buy_get_dto_rules(self):
        dto = _buy_get().to_dto()
        assert [rule.values for rule in dto.application_method.buy_rules] == [["shirts"]]
        assert dto.application_method.apply_to_quantity == 1
