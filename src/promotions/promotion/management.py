"""Promotion management: commands and handler.

Handles promotion definition and its activation lifecycle. Codes are unique
across promotions; the check needs a repository query so it lives in the
handler rather than in the aggregate.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from promotions.domain import promotions
from promotions.promotion.promotion import Promotion


@promotions.command(part_of="Promotion")
class CreatePromotion:
    """Define a new promotion in draft."""

    code = String(required=True, max_length=100)
    promotion_type = String(required=True, max_length=20)
    application_method = Text(required=True)  # JSON: ApplicationMethod fields
    rules = Text()  # JSON: list of {attribute, operator, values}
    is_automatic = Boolean(default=False)
    campaign_id = Identifier()


@promotions.command(part_of="Promotion")
class ActivatePromotion:
    promotion_id = Identifier(required=True)


@promotions.command(part_of="Promotion")
class DeactivatePromotion:
    promotion_id = Identifier(required=True)


@promotions.command_handler(part_of=Promotion)
class ManagePromotionHandler:
    @handle(CreatePromotion)
    def create_promotion(self, command):
        repo = current_domain.repository_for(Promotion)

        code = command.code.strip().upper()
        existing = repo._dao.query.filter(code=code).all()
        if existing.items:
            raise ValidationError({"code": [f"Promotion code {code} already exists"]})

        application_method = (
            json.loads(command.application_method)
            if isinstance(command.application_method, str)
            else command.application_method
        )

        promotion = Promotion.create(
            code=code,
            promotion_type=command.promotion_type,
            application_method=application_method,
            rules=command.rules,
            is_automatic=command.is_automatic,
            campaign_id=command.campaign_id,
        )
        repo.add(promotion)
        return str(promotion.id)

    @handle(ActivatePromotion)
    def activate_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.activate()
        repo.add(promotion)

    @handle(DeactivatePromotion)
    def deactivate_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.deactivate()
        repo.add(promotion)
