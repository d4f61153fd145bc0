"""
Tests for condition evaluation.
"""

import pytest

from ..rules import EssenceCondition
from ..rules.conditions import (
    condition_holds,
    conditions_hold,
    evaluate_condition,
    get_essence_property,
)


class TestEvaluateCondition:
    """Tests for single comparisons."""

    @pytest.mark.parametrize("value,operator,target,expected", [
        ("fire", "==", "fire", True),
        ("fire", "!=", "water", True),
        (90, ">", 80, True),
        (80, ">", 80, False),
        (80, ">=", 80, True),
        (10, "<", 20, True),
        (20, "<=", 19, False),
        ("fire_dragon", "includes", "dragon", True),
        (["a", "b"], "includes", "b", True),
        (["a", "b"], "excludes", "c", True),
        (None, "includes", "x", False),
    ])
    def test_operators(self, value, operator, target, expected):
        assert evaluate_condition(value, operator, target) is expected

    def test_numeric_operator_on_text_is_false(self):
        assert evaluate_condition("fire", ">", 10) is False

    def test_numeric_string_compares(self):
        assert evaluate_condition("90", ">=", 80) is True

    def test_unknown_operator_is_false(self):
        assert evaluate_condition(1, "~=", 1) is False


class TestEssenceConditions:
    """Tests for conditions over essence fields."""

    def test_reads_enum_value(self, dragon_essence):
        assert get_essence_property(dragon_essence, "rarity_class") == "legendary"

    def test_reads_mapping(self):
        assert get_essence_property({"element": "ice"}, "element") == "ice"

    def test_missing_field_is_none(self, dragon_essence):
        assert get_essence_property(dragon_essence, "no_such_field") is None

    def test_condition_holds(self, dragon_essence):
        condition = EssenceCondition(property="power_tier", operator=">=", value=80)
        assert condition_holds(dragon_essence, condition)

    def test_conditions_are_and_combined(self, dragon_essence):
        conditions = [
            EssenceCondition(property="archetype", operator="==", value="dragon"),
            EssenceCondition(property="element", operator="==", value="water"),
        ]
        assert not conditions_hold(dragon_essence, conditions)

    def test_empty_conditions_hold(self, dragon_essence):
        assert conditions_hold(dragon_essence, [])
