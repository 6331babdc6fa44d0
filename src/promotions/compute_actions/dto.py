"""Pydantic contracts consumed by the computation engine.

These are the shapes collaborators hand to the engine (anti-corruption
layer): promotion definitions from the promotion store and the cart/order
context from the ordering side. The engine treats every instance as
read-only.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from promotions.shared.enums import (
    ApplicationMethodAllocation,
    ApplicationMethodTargetType,
    ApplicationMethodType,
    CampaignBudgetType,
    PromotionType,
)


# ---------------------------------------------------------------------------
# Promotion definitions
# ---------------------------------------------------------------------------
class PromotionRuleDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    attribute: str | None = None
    operator: str | None = None
    values: list[str | int | float] = Field(default_factory=list)


class CampaignBudgetDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: CampaignBudgetType
    limit: float | None = None
    used: float = 0.0


class CampaignDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    campaign_identifier: str | None = None
    budget: CampaignBudgetDTO | None = None


class ApplicationMethodDTO(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: ApplicationMethodType | None = Field(default=None, alias="value_type")
    target_type: ApplicationMethodTargetType | None = None
    allocation: ApplicationMethodAllocation | None = None
    value: float = 0.0
    max_quantity: int | None = None
    apply_to_quantity: int | None = None
    buy_rules_min_quantity: int | None = None
    # ``None`` means the promotion store handed over no rule list at all
    target_rules: list[PromotionRuleDTO] | None = None
    buy_rules: list[PromotionRuleDTO] | None = None


class PromotionDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    code: str
    type: PromotionType
    is_automatic: bool = False
    application_method: ApplicationMethodDTO | None = None
    rules: list[PromotionRuleDTO] = Field(default_factory=list)
    campaign: CampaignDTO | None = None


# ---------------------------------------------------------------------------
# Cart / order context
# ---------------------------------------------------------------------------
class AdjustmentContext(BaseModel):
    """An adjustment left on a line by a previous pricing pass."""

    model_config = ConfigDict(frozen=True)

    id: str
    code: str | None = None
    amount: float = 0.0


class ItemContext(BaseModel):
    """One line item's evaluation-relevant projection.

    Attributes referenced by rules (``product``, ``variant_id``, ...) are
    accepted as extra fields and resolved by dotted path.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    quantity: int
    unit_price: float
    subtotal: float
    adjustments: list[AdjustmentContext] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_subtotal(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("subtotal") is None:
            if data.get("unit_price") is not None and data.get("quantity") is not None:
                data = {**data, "subtotal": data["unit_price"] * data["quantity"]}
        return data


class ShippingMethodContext(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    subtotal: float
    adjustments: list[AdjustmentContext] = Field(default_factory=list)

    @property
    def quantity(self) -> int:
        return 1

    @property
    def unit_price(self) -> float:
        return self.subtotal


class ComputeActionContext(BaseModel):
    """The whole cart/order as seen by promotion-level rules."""

    model_config = ConfigDict(extra="allow", frozen=True)

    items: list[ItemContext] | None = None
    shipping_methods: list[ShippingMethodContext] | None = None
