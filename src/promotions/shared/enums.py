"""Enumerations shared by the promotion aggregates and the computation engine."""

from enum import Enum


class PromotionType(Enum):
    STANDARD = "standard"
    BUYGET = "buyget"


class PromotionStatus(Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ApplicationMethodType(Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class ApplicationMethodTargetType(Enum):
    ORDER = "order"
    SHIPPING_METHODS = "shipping_methods"
    ITEMS = "items"


class ApplicationMethodAllocation(Enum):
    EACH = "each"
    ACROSS = "across"


class CampaignBudgetType(Enum):
    SPEND = "spend"
    USAGE = "usage"


class RuleOperator(Enum):
    GT = "gt"
    LT = "lt"
    EQ = "eq"
    NE = "ne"
    IN = "in"
    LTE = "lte"
    GTE = "gte"
