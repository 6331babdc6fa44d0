"""Promotion aggregate: the definition a pricing pass evaluates.

A promotion carries its application method (what is discounted, by how much
and on which lines), the promotion-level rules a cart must satisfy, and an
optional campaign whose budget caps it. Rule lists are stored as JSON arrays
of ``{attribute, operator, values}`` objects.

Lifecycle: Draft, then Active, toggling with Inactive. Only active promotions
are handed to the computation engine.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text, ValueObject

from promotions.compute_actions.dto import ApplicationMethodDTO, PromotionDTO, PromotionRuleDTO
from promotions.domain import promotions
from promotions.promotion.events import PromotionActivated, PromotionCreated, PromotionDeactivated
from promotions.shared.enums import (
    ApplicationMethodAllocation,
    ApplicationMethodTargetType,
    ApplicationMethodType,
    PromotionStatus,
    PromotionType,
    RuleOperator,
)

_VALID_OPERATORS = {operator.value for operator in RuleOperator}


def _load_rules(raw, field_name):
    """Parse and validate a JSON rule list; ``None`` stays ``None``."""
    if raw is None:
        return None

    try:
        rules = json.loads(raw) if isinstance(raw, str) else raw
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({field_name: ["Rules must be valid JSON"]}) from None

    if not isinstance(rules, list):
        raise ValidationError({field_name: ["Rules must be a JSON array"]})

    for rule in rules:
        if not isinstance(rule, dict) or not rule.get("attribute"):
            raise ValidationError({field_name: ["Every rule needs an attribute"]})
        if rule.get("operator") not in _VALID_OPERATORS:
            raise ValidationError({field_name: [f"Unsupported rule operator: {rule.get('operator')}"]})
        if not isinstance(rule.get("values"), list) or not rule["values"]:
            raise ValidationError({field_name: ["Every rule needs a non-empty list of values"]})

    return rules


def _dump_rules(rules):
    if rules is None or isinstance(rules, str):
        return rules
    return json.dumps(rules)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@promotions.value_object(part_of="Promotion")
class ApplicationMethod:
    """How a promotion is applied: value, target lines and quantity limits."""

    value_type = String(choices=ApplicationMethodType, required=True)
    target_type = String(choices=ApplicationMethodTargetType, required=True)
    allocation = String(choices=ApplicationMethodAllocation)
    value = Float(default=0.0, min_value=0.0)
    max_quantity = Integer(min_value=1)
    apply_to_quantity = Integer(min_value=1)
    buy_rules_min_quantity = Integer(min_value=1)
    target_rules = Text()  # JSON array of rules
    buy_rules = Text()  # JSON array of rules

    @invariant.post
    def percentage_must_not_exceed_100(self):
        if self.value_type == ApplicationMethodType.PERCENTAGE.value and (self.value or 0.0) > 100:
            raise ValidationError({"value": ["Percentage value must be between 0 and 100"]})

    @invariant.post
    def rules_must_be_well_formed(self):
        _load_rules(self.target_rules, "target_rules")
        _load_rules(self.buy_rules, "buy_rules")

    def to_dto(self):
        target_rules = _load_rules(self.target_rules, "target_rules")
        buy_rules = _load_rules(self.buy_rules, "buy_rules")

        return ApplicationMethodDTO(
            type=self.value_type,
            target_type=self.target_type,
            allocation=self.allocation,
            value=self.value or 0.0,
            max_quantity=self.max_quantity,
            apply_to_quantity=self.apply_to_quantity,
            buy_rules_min_quantity=self.buy_rules_min_quantity,
            target_rules=[PromotionRuleDTO(**rule) for rule in target_rules] if target_rules is not None else None,
            buy_rules=[PromotionRuleDTO(**rule) for rule in buy_rules] if buy_rules is not None else None,
        )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@promotions.aggregate
class Promotion:
    code = String(required=True, max_length=100)
    promotion_type = String(choices=PromotionType, required=True)
    status = String(choices=PromotionStatus, default=PromotionStatus.DRAFT.value)
    is_automatic = Boolean(default=False)
    campaign_id = Identifier()
    rules = Text()  # JSON array of promotion-level rules
    application_method = ValueObject(ApplicationMethod, required=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def buy_get_needs_quantities_and_rules(self):
        if self.promotion_type != PromotionType.BUYGET.value or self.application_method is None:
            return

        method = self.application_method
        if not method.buy_rules_min_quantity or not method.apply_to_quantity:
            raise ValidationError(
                {"application_method": ["Buy-get promotions need buy_rules_min_quantity and apply_to_quantity"]}
            )
        if not _load_rules(method.buy_rules, "buy_rules"):
            raise ValidationError({"buy_rules": ["Buy-get promotions need at least one buy rule"]})
        if not _load_rules(method.target_rules, "target_rules"):
            raise ValidationError({"target_rules": ["Buy-get promotions need at least one target rule"]})

    @invariant.post
    def line_targets_need_allocation(self):
        if self.promotion_type != PromotionType.STANDARD.value or self.application_method is None:
            return

        method = self.application_method
        if method.target_type == ApplicationMethodTargetType.ORDER.value:
            return
        if not method.allocation:
            raise ValidationError({"allocation": [f"Allocation is required for target type {method.target_type}"]})
        if (
            method.target_type == ApplicationMethodTargetType.ITEMS.value
            and method.allocation == ApplicationMethodAllocation.EACH.value
            and not method.max_quantity
        ):
            raise ValidationError({"max_quantity": ["max_quantity is required when allocating to each item"]})

    @invariant.post
    def rules_must_be_well_formed(self):
        _load_rules(self.rules, "rules")

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, code, promotion_type, application_method, rules=None, is_automatic=False, campaign_id=None):
        """Define a new draft promotion.

        Args:
            application_method: Dict of ``ApplicationMethod`` fields; rule
                lists may be given as lists or JSON strings.
            rules: Promotion-level rules, as a list or JSON string.
        """
        now = datetime.now(UTC)
        method_data = dict(application_method)
        for key in ("target_rules", "buy_rules"):
            if key in method_data:
                method_data[key] = _dump_rules(method_data[key])

        promotion = cls(
            code=code.strip().upper(),
            promotion_type=promotion_type,
            status=PromotionStatus.DRAFT.value,
            is_automatic=bool(is_automatic),
            campaign_id=campaign_id,
            rules=_dump_rules(rules if rules is not None else []),
            application_method=ApplicationMethod(**method_data),
            created_at=now,
            updated_at=now,
        )
        promotion.raise_(
            PromotionCreated(
                promotion_id=str(promotion.id),
                code=promotion.code,
                promotion_type=promotion.promotion_type,
                target_type=promotion.application_method.target_type,
                is_automatic=promotion.is_automatic,
                campaign_id=str(campaign_id) if campaign_id else None,
                created_at=now,
            )
        )
        return promotion

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def activate(self):
        if PromotionStatus(self.status) == PromotionStatus.ACTIVE:
            raise ValidationError({"status": ["Promotion is already active"]})

        now = datetime.now(UTC)
        self.status = PromotionStatus.ACTIVE.value
        self.updated_at = now

        self.raise_(PromotionActivated(promotion_id=str(self.id), code=self.code, activated_at=now))

    def deactivate(self):
        if PromotionStatus(self.status) != PromotionStatus.ACTIVE:
            raise ValidationError({"status": ["Only active promotions can be deactivated"]})

        now = datetime.now(UTC)
        self.status = PromotionStatus.INACTIVE.value
        self.updated_at = now

        self.raise_(PromotionDeactivated(promotion_id=str(self.id), code=self.code, deactivated_at=now))

    # -------------------------------------------------------------------
    # Engine view
    # -------------------------------------------------------------------
    def to_dto(self, campaign=None):
        """Project the promotion (and its campaign, if loaded) for the engine."""
        rules = _load_rules(self.rules, "rules") or []

        return PromotionDTO(
            id=str(self.id),
            code=self.code,
            type=self.promotion_type,
            is_automatic=bool(self.is_automatic),
            application_method=self.application_method.to_dto() if self.application_method else None,
            rules=[PromotionRuleDTO(**rule) for rule in rules],
            campaign=campaign.to_dto() if campaign is not None else None,
        )
