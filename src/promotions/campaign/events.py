"""Domain events for the Campaign aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from promotions.domain import promotions


@promotions.event(part_of="Campaign")
class CampaignCreated:
    """A campaign was created, optionally with a budget."""

    __version__ = 1

    campaign_id = Identifier(required=True)
    name = String(required=True)
    campaign_identifier = String(required=True)
    budget_type = String()
    budget_limit = Float()
    created_at = DateTime(required=True)


@promotions.event(part_of="Campaign")
class CampaignBudgetUsageRegistered:
    """An applied promotion consumed part of the campaign budget."""

    __version__ = 1

    campaign_id = Identifier(required=True)
    promotion_code = String(required=True)
    amount = Float(required=True)
    used = Float(required=True)


@promotions.event(part_of="Campaign")
class CampaignBudgetUsageReverted:
    """A cancelled or refunded order handed budget back to the campaign."""

    __version__ = 1

    campaign_id = Identifier(required=True)
    promotion_code = String(required=True)
    amount = Float(required=True)
    used = Float(required=True)
