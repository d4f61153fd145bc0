"""
Condition evaluation against essence fields.

A condition compares one essence field with a value:
    {"property": "power_tier", "operator": ">=", "value": 80}

Conditions inside a rule are AND-combined. Unknown operators and numeric
comparisons against non-numeric values evaluate to False rather than raise.
"""

from __future__ import annotations
from typing import Any, Iterable

OPERATORS = ("==", "!=", ">", "<", ">=", "<=", "includes", "excludes")


def get_essence_property(essence, name: str) -> Any:
    """Read a field from an essence (model or mapping)."""
    if isinstance(essence, dict):
        value = essence.get(name)
    else:
        value = getattr(essence, name, None)
    return getattr(value, "value", value)


def evaluate_condition(value: Any, operator: str, target: Any) -> bool:
    """Evaluate a single comparison."""
    target = getattr(target, "value", target)

    if operator == "==":
        return value == target
    elif operator == "!=":
        return value != target
    elif operator in (">", "<", ">=", "<="):
        left = _as_number(value)
        right = _as_number(target)
        if left is None or right is None:
            return False
        if operator == ">":
            return left > right
        elif operator == "<":
            return left < right
        elif operator == ">=":
            return left >= right
        return left <= right
    elif operator == "includes":
        return _contains(value, target)
    elif operator == "excludes":
        return not _contains(value, target)
    return False


def condition_holds(essence, condition) -> bool:
    """Evaluate a condition model against an essence."""
    value = get_essence_property(essence, condition.property)
    return evaluate_condition(value, condition.operator, condition.value)


def conditions_hold(essence, conditions: Iterable) -> bool:
    """AND-combine a set of conditions. An empty set holds."""
    return all(condition_holds(essence, c) for c in conditions)


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _contains(value: Any, target: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, set, frozenset)):
        return target in value
    return str(target) in str(value)
