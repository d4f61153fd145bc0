"""
Interpretation rule and manifestation template models.

Rules and templates are supplied per game by the game registry. When a game
has not registered any rules, default_rules() provides the built-in fallback.
"""

from enum import Enum
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field


Operator = Literal["==", "!=", ">", "<", ">=", "<=", "includes", "excludes"]


class Rounding(str, Enum):
    """Rounding policy for computed stats."""
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"


class EssenceCondition(BaseModel):
    """A comparison between one essence field and a value."""
    property: str = Field(min_length=1)
    operator: Operator
    value: Any = None
    weight: Optional[float] = Field(None, ge=0.0, le=1.0, description="Template scoring weight")


class PropertyMapping(BaseModel):
    """Maps essence fields to a game property through a formula."""
    target_property: str = Field(min_length=1)
    source_properties: list[str] = Field(default_factory=list)
    formula: str = Field(min_length=1, description="May reference source0..sourceN")
    modifiers: dict[str, float] = Field(
        default_factory=dict,
        description="Multipliers keyed by high_power, legendary, elemental",
    )


class StatCalculation(BaseModel):
    """Formula, rounding and clamp for one stat."""
    formula: str = Field(min_length=1)
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    rounding: Optional[Rounding] = None


class AssetTypeRule(BaseModel):
    conditions: list[EssenceCondition] = Field(default_factory=list)
    result_type: str = Field(min_length=1)


class AbilityRule(BaseModel):
    conditions: list[EssenceCondition] = Field(default_factory=list)
    granted_abilities: list[str] = Field(default_factory=list)


class InterpretationRules(BaseModel):
    """Per-game interpretation rule tables."""
    game_id: str = Field(min_length=1)
    property_mappings: dict[str, PropertyMapping] = Field(default_factory=dict)
    asset_type_rules: list[AssetTypeRule] = Field(default_factory=list)
    stat_calculations: dict[str, StatCalculation] = Field(default_factory=dict)
    ability_rules: list[AbilityRule] = Field(default_factory=list)


def default_rules(game_id: str) -> InterpretationRules:
    """Built-in rules for games with nothing registered."""
    return InterpretationRules(
        game_id=game_id,
        stat_calculations={
            "power": StatCalculation(formula="power_tier", min_value=1, max_value=100),
        },
    )


# =============================================================================
# Manifestation templates
# =============================================================================

class PropertySource(str, Enum):
    """Where a template-generated property gets its value."""
    ESSENCE = "essence"
    FORMULA = "formula"
    CONSTANT = "constant"
    RANDOM = "random"


class PropertyGeneration(BaseModel):
    """
    How a template produces one property.

    value_spec by source:
    - essence: essence field name
    - formula: formula string over the stat context
    - constant: the literal value
    - random: {"type": "range", "min": .., "max": ..} or
              {"type": "choice", "choices": [...]}
    """
    source: PropertySource
    value_spec: Any = None


class AbilityGeneration(BaseModel):
    conditions: list[EssenceCondition] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)


class DisplayGeneration(BaseModel):
    name_template: Optional[str] = None
    description_template: Optional[str] = None
    image_rules: Optional[dict[str, Any]] = Field(
        None, description="base_url and pattern, e.g. '{element}/{archetype}.png'"
    )


class ManifestationTemplate(BaseModel):
    """A reusable pattern for manifesting an essence in one game."""
    game_id: str = Field(min_length=1)
    template_id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    applies_to: list[EssenceCondition] = Field(default_factory=list)
    priority: int = 0
    property_generation: dict[str, PropertyGeneration] = Field(default_factory=dict)
    ability_generation: list[AbilityGeneration] = Field(default_factory=list)
    display_generation: DisplayGeneration = Field(default_factory=DisplayGeneration)
