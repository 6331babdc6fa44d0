"""Domain events for the Promotion aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from promotions.domain import promotions


@promotions.event(part_of="Promotion")
class PromotionCreated:
    """A promotion was defined, in draft."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True)
    promotion_type = String(required=True)
    target_type = String(required=True)
    is_automatic = Boolean(default=False)
    campaign_id = Identifier()
    created_at = DateTime(required=True)


@promotions.event(part_of="Promotion")
class PromotionActivated:
    """A promotion became available to pricing passes."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True)
    activated_at = DateTime(required=True)


@promotions.event(part_of="Promotion")
class PromotionDeactivated:
    """A promotion was withdrawn from pricing passes."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True)
    deactivated_at = DateTime(required=True)
