"""
Pytest fixtures for Manifold tests.
"""

import pytest

from ..config import EngineConfig
from ..essence import CoreEssence, create_essence
from ..registry import GameInfo, InMemoryGameRegistry, PropertyRange
from ..rules import (
    AbilityGeneration,
    AbilityRule,
    AssetTypeRule,
    DisplayGeneration,
    EssenceCondition,
    InterpretationRules,
    ManifestationTemplate,
    PropertyGeneration,
    PropertySource,
    Rounding,
    StatCalculation,
)
from ..variants import ConversionEngine, VariantGenerator


@pytest.fixture
def dragon_essence() -> CoreEssence:
    """Legendary fire dragon at power 90."""
    return create_essence(
        archetype="dragon",
        element="fire",
        power_tier=90,
        rarity_class="legendary",
    )


@pytest.fixture
def sword_essence() -> CoreEssence:
    """Rare metal sword at power 50."""
    return create_essence(
        archetype="sword",
        element="metal",
        power_tier=50,
        rarity_class="rare",
        craftsmanship="masterwork",
    )


@pytest.fixture
def realm_rules() -> InterpretationRules:
    """Rules for a fantasy RPG."""
    return InterpretationRules(
        game_id="realm_quest",
        asset_type_rules=[
            AssetTypeRule(
                conditions=[EssenceCondition(property="archetype", operator="==", value="dragon")],
                result_type="creature",
            ),
            AssetTypeRule(
                conditions=[EssenceCondition(property="archetype", operator="==", value="sword")],
                result_type="weapon",
            ),
        ],
        stat_calculations={
            "health": StatCalculation(
                formula="power_tier * 10 * size_factor", min_value=1, max_value=1000
            ),
            "attack": StatCalculation(
                formula="power_tier * rarity_multiplier", max_value=250, rounding=Rounding.ROUND
            ),
            "defense": StatCalculation(formula="power_tier / 2"),
        },
        ability_rules=[
            AbilityRule(
                conditions=[EssenceCondition(property="element", operator="==", value="fire")],
                granted_abilities=["Flame_Shield"],
            ),
        ],
    )


@pytest.fixture
def dragon_template() -> ManifestationTemplate:
    return ManifestationTemplate(
        game_id="realm_quest",
        template_id="dragon_lord",
        name="Dragon Lord",
        applies_to=[
            EssenceCondition(property="archetype", operator="==", value="dragon", weight=1.0),
            EssenceCondition(property="power_tier", operator=">=", value=80, weight=0.5),
        ],
        priority=1,
        property_generation={
            "speed": PropertyGeneration(source=PropertySource.FORMULA, value_spec="power_tier / 2 + 10"),
            "mount_slots": PropertyGeneration(source=PropertySource.CONSTANT, value_spec=2),
            "flight_ceiling": PropertyGeneration(
                source=PropertySource.RANDOM,
                value_spec={"type": "range", "min": 100, "max": 500, "integer": True},
            ),
            "origin": PropertyGeneration(source=PropertySource.ESSENCE, value_spec="element"),
        },
        ability_generation=[
            AbilityGeneration(
                conditions=[EssenceCondition(property="rarity_class", operator="==", value="legendary")],
                abilities=["Dragon_Roar"],
            ),
        ],
        display_generation=DisplayGeneration(
            name_template="Ancient {archetype}",
            description_template="A {rarity_class} beast of {element}",
            image_rules={
                "base_url": "https://cdn.realmquest.io/art",
                "pattern": "{archetype}/{element}.png",
            },
        ),
    )


@pytest.fixture
def realm_game(realm_rules, dragon_template) -> GameInfo:
    return GameInfo(
        game_id="realm_quest",
        name="Realm Quest",
        domain="gaming",
        version="2.1.0",
        supported_asset_types=["creature", "weapon", "equipment"],
        required_properties={"creature": ["health", "attack"]},
        property_ranges={"health": PropertyRange(min=1, max=1000)},
        required_features=["mounts"],
        interpretation_rules=realm_rules,
        templates=[dragon_template],
    )


@pytest.fixture
def registry(realm_game) -> InMemoryGameRegistry:
    """Registry with realm_quest registered; other games fall back to defaults."""
    registry = InMemoryGameRegistry()
    registry.register_game(realm_game)
    return registry


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def generator(registry, config) -> VariantGenerator:
    return VariantGenerator(registry=registry, config=config)


@pytest.fixture
def converter(generator) -> ConversionEngine:
    return ConversionEngine(generator)


@pytest.fixture
def dragon_variant(generator, dragon_essence):
    """Dragon manifested in realm_quest."""
    return generator.create_variant_from_essence(dragon_essence, "realm_quest")
