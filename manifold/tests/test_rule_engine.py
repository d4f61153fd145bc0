"""
Tests for the interpretation rule engine.

Tests:
- Asset type resolution
- Stat formulas, rounding and clamping
- Fallbacks when a formula fails
- Property mappings and modifiers
- Abilities, usage contexts, restrictions and display
- Memoization
"""

import pytest

from ..essence import create_essence
from ..rules import (
    AssetTypeRule,
    EssenceCondition,
    InterpretationRuleEngine,
    InterpretationRules,
    PropertyMapping,
    Rounding,
    StatCalculation,
    default_rules,
)
from ..rules.engine import apply_stat_constraints, default_stat_value


@pytest.fixture
def engine() -> InterpretationRuleEngine:
    return InterpretationRuleEngine()


class TestAssetType:
    """Tests for asset type resolution."""

    def test_first_matching_rule(self, engine, dragon_essence, realm_rules):
        assert engine.determine_asset_type(dragon_essence, realm_rules) == "creature"

    def test_rule_order_wins(self, engine, dragon_essence):
        rules = InterpretationRules(
            game_id="g",
            asset_type_rules=[
                AssetTypeRule(
                    conditions=[EssenceCondition(property="power_tier", operator=">=", value=80)],
                    result_type="boss",
                ),
                AssetTypeRule(
                    conditions=[EssenceCondition(property="archetype", operator="==", value="dragon")],
                    result_type="mount",
                ),
            ],
        )
        assert engine.determine_asset_type(dragon_essence, rules) == "boss"

    def test_archetype_default(self, engine, sword_essence):
        assert engine.determine_asset_type(sword_essence, default_rules("g")) == "weapon"

    def test_unknown_archetype_is_item(self, engine):
        blob = create_essence(archetype="blob", power_tier=10, rarity_class="common")
        assert engine.determine_asset_type(blob, default_rules("g")) == "item"


class TestStats:
    """Tests for stat calculation."""

    def test_realm_stats(self, engine, dragon_essence, realm_rules):
        interpretation = engine.interpret(dragon_essence, "realm_quest", realm_rules)
        properties = interpretation.properties

        assert properties["health"] == 900
        assert properties["attack"] == 225
        assert properties["defense"] == 45

    def test_clamped_to_max(self, engine):
        """power_tier * 2 at power 50 with max 80 yields 80, not 100."""
        essence = create_essence(archetype="golem", power_tier=50, rarity_class="common")
        rules = InterpretationRules(
            game_id="g",
            stat_calculations={"power": StatCalculation(formula="power_tier * 2", max_value=80)},
        )
        interpretation = engine.interpret(essence, "g", rules)
        assert interpretation.properties["power"] == 80

    def test_clamped_to_min(self):
        calculation = StatCalculation(formula="x", min_value=1)
        assert apply_stat_constraints(-5, calculation) == 1

    @pytest.mark.parametrize("rounding,value,expected", [
        (Rounding.FLOOR, 2.7, 2),
        (Rounding.CEIL, 2.1, 3),
        (Rounding.ROUND, 2.5, 3),
        (Rounding.ROUND, 2.4, 2),
        (None, 2.5, 2.5),
    ])
    def test_rounding(self, rounding, value, expected):
        calculation = StatCalculation(formula="x", rounding=rounding)
        assert apply_stat_constraints(value, calculation) == expected

    def test_rounding_happens_before_clamp(self):
        calculation = StatCalculation(formula="x", max_value=10.2, rounding=Rounding.CEIL)
        assert apply_stat_constraints(10.1, calculation) == 10.2

    def test_default_rules_power(self, engine, dragon_essence):
        interpretation = engine.interpret(dragon_essence, "unknown_game", default_rules("unknown_game"))
        assert interpretation.properties["power"] == 90

    def test_failed_formula_falls_back(self, engine, dragon_essence):
        """A broken formula yields the heuristic default and a warning."""
        rules = InterpretationRules(
            game_id="g",
            stat_calculations={"mana": StatCalculation(formula="mystery * 2")},
        )
        interpretation = engine.interpret(dragon_essence, "g", rules)

        assert interpretation.properties["mana"] == default_stat_value("mana", dragon_essence)
        assert interpretation.properties["mana"] == 63
        assert any("mana" in w for w in interpretation.warnings)

    def test_failure_does_not_abort_other_stats(self, engine, dragon_essence):
        rules = InterpretationRules(
            game_id="g",
            stat_calculations={
                "broken": StatCalculation(formula="1 / 0"),
                "speed": StatCalculation(formula="power_tier"),
            },
        )
        interpretation = engine.interpret(dragon_essence, "g", rules)
        assert interpretation.properties["speed"] == 90
        assert len(interpretation.warnings) == 1

    def test_essence_derived_properties(self, engine, dragon_essence, realm_rules):
        properties = engine.interpret(dragon_essence, "realm_quest", realm_rules).properties
        assert properties["essence_power"] == 90
        assert properties["rarity_tier"] == "legendary"
        assert properties["element_type"] == "fire"
        # fire element power 85 plus 0.8 * power_tier
        assert properties["elemental_power"] == 157

    def test_context(self, engine, dragon_essence):
        context = engine.build_context(dragon_essence)
        assert context["power_tier"] == 90
        assert context["rarity_multiplier"] == 2.5
        assert context["element_power"] == 85
        assert context["size_factor"] == 1.0


class TestPropertyMappings:
    """Tests for property mappings."""

    def test_mapping_with_modifier(self, engine, dragon_essence):
        rules = InterpretationRules(
            game_id="g",
            property_mappings={
                "might": PropertyMapping(
                    target_property="might",
                    source_properties=["power_tier"],
                    formula="source0 * 2",
                    modifiers={"high_power": 1.5, "elemental": 2.0, "unknown": 10.0},
                ),
            },
        )
        properties = engine.interpret(dragon_essence, "g", rules).properties
        assert properties["might"] == 90 * 2 * 1.5 * 2.0

    def test_mapping_by_field_name(self, engine, dragon_essence):
        mapping = PropertyMapping(
            target_property="x", source_properties=["power_tier"], formula="power_tier + 1"
        )
        assert engine.evaluate_mapping(mapping, dragon_essence) == 91

    def test_non_numeric_source_is_skipped(self, engine, dragon_essence):
        rules = InterpretationRules(
            game_id="g",
            property_mappings={
                "heat": PropertyMapping(
                    target_property="heat", source_properties=["element"], formula="source0 * 2"
                ),
            },
        )
        interpretation = engine.interpret(dragon_essence, "g", rules)
        assert "heat" not in interpretation.properties
        assert interpretation.warnings


class TestMechanics:
    """Tests for abilities, usage contexts and restrictions."""

    def test_rule_abilities_first(self, engine, dragon_essence, realm_rules):
        abilities = engine.interpret(dragon_essence, "realm_quest", realm_rules).abilities
        assert abilities[0] == "Flame_Shield"
        assert "Fire_Blast" in abilities
        assert "Dragon_Breath" in abilities
        assert "Legendary_Might" in abilities
        assert len(abilities) == len(set(abilities))

    def test_usage_contexts(self, engine, dragon_essence):
        contexts = engine.determine_usage_contexts(dragon_essence)
        assert contexts == [
            "tournaments", "raids", "pvp_elite",
            "special_events", "championships", "fire_trials",
        ]

    def test_low_power_contexts(self, engine):
        essence = create_essence(archetype="stick", power_tier=5, rarity_class="common")
        assert engine.determine_usage_contexts(essence) == ["training", "casual_play"]

    def test_restrictions(self, engine, dragon_essence):
        assert engine.generate_restrictions(dragon_essence) == ["level_requirement_50", "limited_use"]

    def test_default_display(self, engine, dragon_essence):
        display = engine.generate_display(dragon_essence, "realm_quest")
        assert display["name"].startswith("Fire Legendary Dragon")
        assert display["image_url"] == "https://assets.realm_quest.com/fire/dragon/legendary.png"
        assert "(90/100)" in display["description"]

    def test_display_name_is_deterministic(self, engine, dragon_essence):
        first = engine.generate_display(dragon_essence, "g")["name"]
        second = engine.generate_display(dragon_essence.model_copy(), "g")["name"]
        assert first == second


class TestMemoization:
    """Tests for the interpretation cache."""

    def test_cached_per_essence_and_rules(self, engine, dragon_essence, realm_rules):
        engine.interpret(dragon_essence, "realm_quest", realm_rules)
        engine.interpret(dragon_essence, "realm_quest", realm_rules)
        assert len(engine.cache) == 1

        engine.interpret(dragon_essence, "realm_quest", default_rules("realm_quest"))
        assert len(engine.cache) == 2

    def test_returns_private_copies(self, engine, dragon_essence, realm_rules):
        first = engine.interpret(dragon_essence, "realm_quest", realm_rules)
        first.properties["health"] = -1
        first.abilities.clear()

        second = engine.interpret(dragon_essence, "realm_quest", realm_rules)
        assert second.properties["health"] == 900
        assert second.abilities

    def test_disabled_cache(self, dragon_essence, realm_rules):
        engine = InterpretationRuleEngine(cache_enabled=False)
        engine.interpret(dragon_essence, "realm_quest", realm_rules)
        assert len(engine.cache) == 0
