"""Rule matching for promotions.

A rule is an ``attribute`` / ``operator`` / ``values`` triple. The attribute
is a dotted path into the item (or into the whole cart context for
promotion-level rules); lists met along the path are flattened, so
``product.categories.id`` yields every category id of the item.

Evaluation never raises: a rule with an unknown operator, no attribute or an
attribute that resolves to nothing simply does not match. Equality compares
numerically when both sides are numbers, so a unit price of ``100.0`` equals a
rule value of ``100`` or ``"100"``.
"""

from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel

from promotions.compute_actions.dto import PromotionRuleDTO
from promotions.shared.enums import RuleOperator

_MISSING = object()


def pick_value_from_object(path: str, obj: Any) -> list[Any]:
    """Resolve a dotted ``path`` against ``obj`` and return every leaf value found."""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump()

    current = [obj]
    for key in path.split("."):
        found = []
        for node in current:
            value = node.get(key, _MISSING) if isinstance(node, dict) else _MISSING
            if value is _MISSING or value is None:
                continue
            if isinstance(value, list):
                found.extend(v for v in value if v is not None)
            else:
                found.append(value)
        current = found
        if not current:
            break

    return current


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _compare_numbers(comparison: Callable[[float, float], bool]) -> Callable[[list[Any], list[Any]], bool]:
    def evaluate(rule_values: list[Any], context_values: list[Any]) -> bool:
        for context_value in context_values:
            left = _to_number(context_value)
            if left is None:
                continue
            for rule_value in rule_values:
                right = _to_number(rule_value)
                if right is not None and comparison(left, right):
                    return True
        return False

    return evaluate


def _same_value(context_value: Any, rule_value: Any) -> bool:
    left, right = _to_number(context_value), _to_number(rule_value)
    if left is not None and right is not None:
        return left == right
    return str(context_value) == str(rule_value)


def _equals(rule_values: list[Any], context_values: list[Any]) -> bool:
    return any(_same_value(c, r) for c in context_values for r in rule_values)


def _not_equals(rule_values: list[Any], context_values: list[Any]) -> bool:
    return not _equals(rule_values, context_values)


OPERATORS: dict[RuleOperator, Callable[[list[Any], list[Any]], bool]] = {
    RuleOperator.EQ: _equals,
    RuleOperator.IN: _equals,
    RuleOperator.NE: _not_equals,
    RuleOperator.GT: _compare_numbers(lambda a, b: a > b),
    RuleOperator.GTE: _compare_numbers(lambda a, b: a >= b),
    RuleOperator.LT: _compare_numbers(lambda a, b: a < b),
    RuleOperator.LTE: _compare_numbers(lambda a, b: a <= b),
}


def evaluate_rule_value_condition(rule_values: list[Any], operator: str | None, context_values: Any) -> bool:
    """Apply ``operator`` between the rule's values and the values found in the context."""
    try:
        evaluate = OPERATORS[RuleOperator(operator)]
    except ValueError:
        return False

    if not isinstance(context_values, list):
        context_values = [context_values]
    if not context_values:
        return False

    return evaluate(rule_values, context_values)


def is_rule_valid_for_context(rule: PromotionRuleDTO, context: Any) -> bool:
    if not rule.attribute:
        return False

    return evaluate_rule_value_condition(
        rule.values,
        rule.operator,
        pick_value_from_object(rule.attribute, context),
    )


def are_rules_valid_for_context(rules: Iterable[PromotionRuleDTO] | None, context: Any) -> bool:
    """True when ``context`` satisfies every rule; an empty rule set always matches."""
    if not rules:
        return True

    if isinstance(context, BaseModel):
        context = context.model_dump()

    return all(is_rule_valid_for_context(rule, context) for rule in rules)
