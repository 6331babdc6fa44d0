"""Computed actions: the engine's output, consumed by the totals stage."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str


class AddItemAdjustmentAction(_Action):
    action: Literal["addItemAdjustment"] = "addItemAdjustment"
    item_id: str
    amount: float = Field(gt=0)


class AddShippingMethodAdjustmentAction(_Action):
    action: Literal["addShippingMethodAdjustment"] = "addShippingMethodAdjustment"
    shipping_method_id: str
    amount: float = Field(gt=0)


class RemoveItemAdjustmentAction(_Action):
    action: Literal["removeItemAdjustment"] = "removeItemAdjustment"
    adjustment_id: str
    item_id: str


class RemoveShippingMethodAdjustmentAction(_Action):
    action: Literal["removeShippingMethodAdjustment"] = "removeShippingMethodAdjustment"
    adjustment_id: str
    shipping_method_id: str


class CampaignBudgetExceededAction(_Action):
    action: Literal["campaignBudgetExceeded"] = "campaignBudgetExceeded"


ComputedAction = Annotated[
    AddItemAdjustmentAction
    | AddShippingMethodAdjustmentAction
    | RemoveItemAdjustmentAction
    | RemoveShippingMethodAdjustmentAction
    | CampaignBudgetExceededAction,
    Field(discriminator="action"),
]

computed_actions_adapter = TypeAdapter(list[ComputedAction])
