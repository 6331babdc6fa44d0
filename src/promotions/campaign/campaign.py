"""Campaign aggregate: groups promotions under a shared budget.

A budget either caps the money the campaign's promotions may give away
(``spend``) or the number of times they may be used (``usage``). Pricing
passes read the budget through ``to_dto``; checkout registers what was
actually consumed.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String, Text, ValueObject

from promotions.campaign.events import (
    CampaignBudgetUsageRegistered,
    CampaignBudgetUsageReverted,
    CampaignCreated,
)
from promotions.compute_actions.dto import CampaignBudgetDTO, CampaignDTO
from promotions.domain import promotions
from promotions.shared.enums import CampaignBudgetType


@promotions.value_object(part_of="Campaign")
class CampaignBudget:
    """Budget ceiling and what has been consumed so far."""

    budget_type = String(choices=CampaignBudgetType, required=True)
    limit = Float(min_value=0.0)
    used = Float(default=0.0, min_value=0.0)

    @invariant.post
    def used_must_not_exceed_limit(self):
        if self.limit is not None and (self.used or 0.0) > self.limit:
            raise ValidationError({"used": [f"Budget usage ({self.used}) exceeds limit ({self.limit})"]})


@promotions.aggregate
class Campaign:
    name = String(required=True, max_length=255)
    campaign_identifier = String(required=True, max_length=100)
    description = Text()
    budget = ValueObject(CampaignBudget)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name, campaign_identifier, description=None, budget_type=None, budget_limit=None):
        now = datetime.now(UTC)
        budget = CampaignBudget(budget_type=budget_type, limit=budget_limit, used=0.0) if budget_type else None

        campaign = cls(
            name=name,
            campaign_identifier=campaign_identifier,
            description=description,
            budget=budget,
            created_at=now,
            updated_at=now,
        )
        campaign.raise_(
            CampaignCreated(
                campaign_id=str(campaign.id),
                name=name,
                campaign_identifier=campaign_identifier,
                budget_type=budget_type,
                budget_limit=budget_limit,
                created_at=now,
            )
        )
        return campaign

    # -------------------------------------------------------------------
    # Budget usage
    # -------------------------------------------------------------------
    def _usage_for(self, amount):
        """Budget units consumed by one application worth ``amount``."""
        if CampaignBudgetType(self.budget.budget_type) == CampaignBudgetType.USAGE:
            return 1.0
        return amount

    def register_usage(self, promotion_code, amount):
        """Consume budget for a promotion applied at checkout."""
        if self.budget is None:
            return

        consumed = self._usage_for(amount)
        if consumed <= 0:
            raise ValidationError({"amount": ["Usage amount must be positive"]})

        new_used = (self.budget.used or 0.0) + consumed
        if self.budget.limit is not None and new_used > self.budget.limit:
            raise ValidationError({"budget": [f"Campaign budget exceeded for promotion {promotion_code}"]})

        self.budget = CampaignBudget(budget_type=self.budget.budget_type, limit=self.budget.limit, used=new_used)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CampaignBudgetUsageRegistered(
                campaign_id=str(self.id),
                promotion_code=promotion_code,
                amount=consumed,
                used=new_used,
            )
        )

    def revert_usage(self, promotion_code, amount):
        """Hand back budget consumed by an order that did not go through."""
        if self.budget is None:
            return

        released = self._usage_for(amount)
        new_used = max((self.budget.used or 0.0) - released, 0.0)

        self.budget = CampaignBudget(budget_type=self.budget.budget_type, limit=self.budget.limit, used=new_used)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CampaignBudgetUsageReverted(
                campaign_id=str(self.id),
                promotion_code=promotion_code,
                amount=released,
                used=new_used,
            )
        )

    # -------------------------------------------------------------------
    # Engine view
    # -------------------------------------------------------------------
    def to_dto(self):
        budget = None
        if self.budget is not None:
            budget = CampaignBudgetDTO(
                type=self.budget.budget_type,
                limit=self.budget.limit,
                used=self.budget.used or 0.0,
            )

        return CampaignDTO(
            id=str(self.id),
            campaign_identifier=self.campaign_identifier,
            budget=budget,
        )
