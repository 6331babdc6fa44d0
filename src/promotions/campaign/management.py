"""Campaign management: command and handler."""

from protean import handle
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from promotions.campaign.campaign import Campaign
from promotions.domain import promotions


@promotions.command(part_of="Campaign")
class CreateCampaign:
    """Create a campaign, optionally capped by a spend or usage budget."""

    name = String(required=True, max_length=255)
    campaign_identifier = String(required=True, max_length=100)
    description = Text()
    budget_type = String(max_length=20)
    budget_limit = Float(min_value=0.0)


@promotions.command_handler(part_of=Campaign)
class ManageCampaignHandler:
    @handle(CreateCampaign)
    def create_campaign(self, command):
        campaign = Campaign.create(
            name=command.name,
            campaign_identifier=command.campaign_identifier,
            description=command.description,
            budget_type=command.budget_type,
            budget_limit=command.budget_limit,
        )
        current_domain.repository_for(Campaign).add(campaign)
        return str(campaign.id)
