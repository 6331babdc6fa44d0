"""Campaign budget usage: commands and handler.

Once an order is placed, the actions computed for it are replayed against
the campaign budgets of the promotions that produced them. Spend budgets are
charged the adjustment amounts; usage budgets are charged one use per
promotion code. Budget-exceeded markers and removals carry no usage.
"""

import json
from collections import defaultdict

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Text
from protean.utils.globals import current_domain

from promotions.campaign.campaign import Campaign
from promotions.compute_actions.actions import (
    AddItemAdjustmentAction,
    AddShippingMethodAdjustmentAction,
    computed_actions_adapter,
)
from promotions.domain import promotions
from promotions.promotion.promotion import Promotion

logger = structlog.get_logger(__name__)


@promotions.command(part_of="Campaign")
class RegisterUsage:
    """Charge campaign budgets for the adjustments applied to an order."""

    computed_actions = Text(required=True)  # JSON: list of computed actions


@promotions.command(part_of="Campaign")
class RevertUsage:
    """Give back budget charged for an order that was cancelled."""

    computed_actions = Text(required=True)  # JSON: list of computed actions


def _amounts_by_code(raw_actions):
    data = json.loads(raw_actions) if isinstance(raw_actions, str) else raw_actions
    actions = computed_actions_adapter.validate_python(data)

    amounts = defaultdict(float)
    for action in actions:
        if isinstance(action, AddItemAdjustmentAction | AddShippingMethodAdjustmentAction):
            amounts[action.code] += action.amount
    return amounts


def _campaign_id_for_code(code):
    matches = current_domain.repository_for(Promotion)._dao.query.filter(code=code).all().items
    if not matches or not matches[0].campaign_id:
        return None
    return str(matches[0].campaign_id)


def _load_campaigns(amounts):
    """Load the campaigns behind each promotion code and pair the budgeted ones with their charge."""
    repo = current_domain.repository_for(Campaign)
    campaigns = {}
    charges = []

    for code, amount in amounts.items():
        campaign_id = _campaign_id_for_code(code)
        if campaign_id is None:
            continue

        if campaign_id not in campaigns:
            try:
                campaigns[campaign_id] = repo.get(campaign_id)
            except ObjectNotFoundError:
                logger.warning("Campaign not found for promotion", code=code, campaign_id=campaign_id)
                continue

        if campaigns[campaign_id].budget is not None:
            charges.append((campaigns[campaign_id], code, amount))

    return campaigns, charges


@promotions.command_handler(part_of=Campaign)
class CampaignUsageHandler:
    @handle(RegisterUsage)
    def register_usage(self, command):
        campaigns, charges = _load_campaigns(_amounts_by_code(command.computed_actions))
        registered = 0

        for campaign, code, amount in charges:
            try:
                campaign.register_usage(promotion_code=code, amount=amount)
            except ValidationError as exc:
                # The order is already placed, the next pricing pass sees the exhausted budget
                logger.warning("Failed to register campaign usage", code=code, amount=amount, error=str(exc))
                continue
            registered += 1

        repo = current_domain.repository_for(Campaign)
        for campaign in campaigns.values():
            repo.add(campaign)

        logger.info("Campaign usage registered", promotions_charged=registered)
        return registered

    @handle(RevertUsage)
    def revert_usage(self, command):
        campaigns, charges = _load_campaigns(_amounts_by_code(command.computed_actions))

        for campaign, code, amount in charges:
            campaign.revert_usage(promotion_code=code, amount=amount)

        repo = current_domain.repository_for(Campaign)
        for campaign in campaigns.values():
            repo.add(campaign)

        logger.info("Campaign usage reverted", promotions_credited=len(charges))
        return len(charges)
