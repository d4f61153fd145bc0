"""
Interpretation Rule Engine - reads an essence through one game's rules.

The engine:
1. Determines the asset type (ordered rules, then archetype defaults)
2. Computes stats from formulas, with rounding and clamping
3. Applies property mappings and conditional modifiers
4. Grants abilities from rules plus implicit essence-derived abilities
5. Derives usage contexts, restrictions and a default display

Evaluation is best-effort: a failing formula never aborts the call. The stat
falls back to a heuristic default and a warning is recorded instead.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any
import hashlib
import math

from ..errors import RuleEvaluationError
from ..essence import tables
from ..essence.scorer import rarity_multiplier
from ..utils.cache import MemoCache, content_hash, make_key
from ..utils.logger import get_logger
from .conditions import conditions_hold, get_essence_property
from .formula import evaluate_formula
from .models import InterpretationRules, StatCalculation, PropertyMapping, Rounding

logger = get_logger(__name__)

# Names a stat formula may reference
CONTEXT_VARIABLES = (
    "power_tier",
    "essence_score",
    "rarity_multiplier",
    "element_power",
    "intelligence_factor",
    "size_factor",
)


@dataclass
class Interpretation:
    """
    Partial variant data produced by reading an essence through rules.
    """
    asset_type: str
    properties: dict[str, Any] = field(default_factory=dict)
    abilities: list[str] = field(default_factory=list)
    usable_in: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    display: dict[str, Any] = field(default_factory=dict)

    # Rule evaluation failures that were recovered in place
    warnings: list[str] = field(default_factory=list)

    def copy(self) -> Interpretation:
        return deepcopy(self)


class InterpretationRuleEngine:
    """
    Evaluates per-game rule tables against an essence.

    Usage:
        engine = InterpretationRuleEngine()
        interpretation = engine.interpret(essence, "realm_quest", rules)
        interpretation.properties["power"]
    """

    def __init__(self, cache_enabled: bool = True):
        self.cache = MemoCache("interpretation", enabled=cache_enabled)

    def interpret(
        self,
        essence,
        game_id: str,
        rules: InterpretationRules,
    ) -> Interpretation:
        """
        Interpret an essence for a game.

        Results are memoized by game, rule content and essence content.
        Callers always receive a private copy.
        """
        cache_key = make_key(
            game_id, _rules_hash(rules), content_hash(essence), essence.essence_score
        )
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached.copy()

        warnings: list[str] = []
        interpretation = Interpretation(
            asset_type=self.determine_asset_type(essence, rules),
            properties=self.generate_properties(essence, rules, warnings),
            abilities=self.generate_abilities(essence, rules),
            usable_in=self.determine_usage_contexts(essence),
            restrictions=self.generate_restrictions(essence),
            display=self.generate_display(essence, game_id),
            warnings=warnings,
        )

        self.cache.put(cache_key, interpretation)
        return interpretation.copy()

    # -------------------------------------------------------------------------
    # Asset type
    # -------------------------------------------------------------------------

    def determine_asset_type(self, essence, rules: InterpretationRules) -> str:
        """First rule whose conditions all hold wins; else the archetype default."""
        for rule in rules.asset_type_rules:
            if conditions_hold(essence, rule.conditions):
                return rule.result_type
        return default_asset_type(essence.archetype)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    def build_context(self, essence) -> dict[str, float]:
        """The fixed numeric context stat formulas are evaluated against."""
        element = (essence.element or "").lower()
        intelligence = (essence.intelligence or "moderate").lower()
        size = (essence.size_class or "medium").lower()
        return {
            "power_tier": essence.power_tier,
            "essence_score": essence.essence_score,
            "rarity_multiplier": rarity_multiplier(essence.rarity_class),
            "element_power": (
                tables.ELEMENT_POWER.get(element, tables.DEFAULT_ELEMENT_POWER)
                if element else 50
            ),
            "intelligence_factor": tables.INTELLIGENCE_FACTORS.get(intelligence, 1.0),
            "size_factor": tables.SIZE_FACTORS.get(size, 1.0),
        }

    def generate_properties(
        self,
        essence,
        rules: InterpretationRules,
        warnings: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Compute stats, apply property mappings, then add essence-derived
        properties.
        """
        warnings = warnings if warnings is not None else []
        context = self.build_context(essence)
        properties: dict[str, Any] = {}

        for stat_name, calculation in rules.stat_calculations.items():
            try:
                properties[stat_name] = self.evaluate_stat(calculation, context)
            except RuleEvaluationError as e:
                fallback = default_stat_value(stat_name, essence)
                message = f"Failed to calculate stat {stat_name}: {e}; using default {fallback}"
                logger.warning(message, extra={"game_id": rules.game_id, "rule": stat_name})
                warnings.append(message)
                properties[stat_name] = fallback

        properties.update(self.generate_property_mappings(essence, rules, warnings))

        properties["essence_power"] = essence.power_tier
        properties["rarity_tier"] = get_essence_property(essence, "rarity_class")
        if essence.element:
            properties["element_type"] = essence.element
            properties["elemental_power"] = elemental_power(essence)

        return properties

    def evaluate_stat(self, calculation: StatCalculation, context: dict[str, float]) -> float:
        """Evaluate one stat formula and apply its constraints."""
        value = evaluate_formula(calculation.formula, context)
        return apply_stat_constraints(value, calculation)

    def generate_property_mappings(
        self,
        essence,
        rules: InterpretationRules,
        warnings: list[str] | None = None,
    ) -> dict[str, Any]:
        """Evaluate each property mapping; failures are skipped with a warning."""
        warnings = warnings if warnings is not None else []
        mapped: dict[str, Any] = {}

        for name, mapping in rules.property_mappings.items():
            target = mapping.target_property or name
            try:
                mapped[target] = self.evaluate_mapping(mapping, essence)
            except RuleEvaluationError as e:
                message = f"Failed to map property {target}: {e}"
                logger.warning(message, extra={"game_id": rules.game_id, "rule": name})
                warnings.append(message)

        return mapped

    def evaluate_mapping(self, mapping: PropertyMapping, essence) -> float:
        """
        Evaluate a mapping formula.

        Source values are bound both positionally (source0, source1, ...) and
        by their essence field name. Non-numeric sources cannot be used.
        """
        variables: dict[str, float] = {}
        for index, prop in enumerate(mapping.source_properties):
            value = get_essence_property(essence, prop)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise RuleEvaluationError(
                    f"source property '{prop}' is not numeric ({value!r})"
                )
            variables[f"source{index}"] = value
            variables[prop] = value

        result = evaluate_formula(mapping.formula, variables)

        for condition, modifier in mapping.modifiers.items():
            if modifier_applies(condition, essence):
                result *= modifier

        return result

    # -------------------------------------------------------------------------
    # Abilities and mechanics
    # -------------------------------------------------------------------------

    def generate_abilities(self, essence, rules: InterpretationRules) -> list[str]:
        """Rule-granted abilities plus essence-derived ones, de-duplicated."""
        abilities: list[str] = []
        for rule in rules.ability_rules:
            if conditions_hold(essence, rule.conditions):
                abilities.extend(rule.granted_abilities)
        abilities.extend(essence_abilities(essence))
        return _unique(abilities)

    def determine_usage_contexts(self, essence) -> list[str]:
        contexts: list[str] = []

        if essence.power_tier >= 80:
            contexts.extend(["tournaments", "raids", "pvp_elite"])
        elif essence.power_tier >= 60:
            contexts.extend(["ranked_battles", "dungeons"])
        elif essence.power_tier >= 40:
            contexts.extend(["casual_pvp", "quests"])
        else:
            contexts.extend(["training", "casual_play"])

        if _rarity(essence) in tables.PREMIUM_RARITIES:
            contexts.extend(["special_events", "championships"])

        if essence.element:
            contexts.append(f"{essence.element.lower()}_trials")

        return contexts

    def generate_restrictions(self, essence) -> list[str]:
        restrictions: list[str] = []

        if essence.power_tier >= 90:
            restrictions.append("level_requirement_50")
        elif essence.power_tier >= 70:
            restrictions.append("level_requirement_25")

        rarity = _rarity(essence)
        if rarity == "mythic":
            restrictions.extend(["one_per_team", "special_unlock_required"])
        elif rarity == "legendary":
            restrictions.append("limited_use")

        if (essence.element or "").lower() in ("light", "dark"):
            restrictions.append("alignment_requirement")

        return restrictions

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def generate_display(self, essence, game_id: str) -> dict[str, Any]:
        """Default display used when no template supplies one."""
        return {
            "name": display_name(essence),
            "description": display_description(essence),
            "image_url": default_image_url(essence, game_id),
        }


# =============================================================================
# Helpers
# =============================================================================

def apply_stat_constraints(value: float, calculation: StatCalculation) -> float:
    """Apply rounding, then clamp to [min_value, max_value]."""
    result = value

    if calculation.rounding == Rounding.FLOOR:
        result = math.floor(result)
    elif calculation.rounding == Rounding.CEIL:
        result = math.ceil(result)
    elif calculation.rounding == Rounding.ROUND:
        result = math.floor(result + 0.5)

    if calculation.min_value is not None:
        result = max(result, calculation.min_value)
    if calculation.max_value is not None:
        result = min(result, calculation.max_value)

    return result


def default_asset_type(archetype: str) -> str:
    return tables.DEFAULT_ASSET_TYPES.get(archetype.lower(), tables.FALLBACK_ASSET_TYPE)


def default_stat_value(stat_name: str, essence) -> int:
    """Heuristic stat value keyed by stat name and the archetype's default type."""
    factor = tables.DEFAULT_STAT_FACTORS.get(stat_name.lower(), tables.DEFAULT_STAT_FACTOR)
    bias = tables.ARCHETYPE_STAT_BIAS.get(default_asset_type(essence.archetype), {})
    factor *= bias.get(stat_name.lower(), 1.0)
    return math.floor(essence.power_tier * factor + 0.5)


def modifier_applies(condition: str, essence) -> bool:
    """Named boolean conditions used by property mapping modifiers."""
    if condition == "high_power":
        return essence.power_tier >= 80
    if condition == "legendary":
        return _rarity(essence) in tables.PREMIUM_RARITIES
    if condition == "elemental":
        return bool(essence.element)
    return False


def essence_abilities(essence) -> list[str]:
    """Implicit abilities every game grants from the essence itself."""
    abilities: list[str] = []

    if essence.element:
        abilities.extend(tables.ELEMENT_ABILITIES.get(essence.element.lower(), []))
    abilities.extend(tables.ARCHETYPE_ABILITIES.get(essence.archetype.lower(), []))

    if essence.power_tier >= 80:
        abilities.append("Elite_Power")
    if essence.power_tier >= 90:
        abilities.append("Legendary_Might")

    if _rarity(essence) in tables.PREMIUM_RARITIES:
        abilities.append("Rare_Essence")

    if (essence.intelligence or "").lower() in ("high", "ancient"):
        abilities.append("Strategic_Thinking")

    return abilities


def elemental_power(essence) -> int:
    power = tables.ELEMENT_POWER.get(essence.element.lower(), tables.DEFAULT_ELEMENT_POWER)
    return math.floor(power + essence.power_tier * 0.8 + 0.5)


def display_name(essence) -> str:
    prefixes = [essence.element.capitalize()] if essence.element else []
    rarity = _rarity(essence)
    if rarity == "legendary":
        prefixes.append("Legendary")
    elif rarity == "mythic":
        prefixes.append("Mythic")

    name = " ".join(prefixes + [essence.archetype.capitalize()])
    if essence.power_tier >= 85:
        suffixes = tables.DISPLAY_NAME_SUFFIXES
        # Same essence, same suffix
        name += " " + suffixes[int(content_hash(essence), 16) % len(suffixes)]
    return name


def display_description(essence) -> str:
    parts = [f"A {_rarity(essence)} {essence.archetype}"]
    if essence.element:
        parts.append(f"imbued with {essence.element} essence")
    if essence.temperament:
        parts.append(f"with a {essence.temperament} nature")
    parts.append(f"possessing considerable power ({essence.power_tier}/100)")
    return " ".join(parts) + "."


def default_image_url(essence, game_id: str) -> str:
    element = essence.element or "neutral"
    return f"https://assets.{game_id}.com/{element}/{essence.archetype}/{_rarity(essence)}.png"


def _rules_hash(rules: InterpretationRules) -> str:
    return hashlib.sha256(rules.model_dump_json().encode("utf-8")).hexdigest()[:16]


def _rarity(essence) -> str:
    return str(get_essence_property(essence, "rarity_class") or "").lower()


def _unique(items: list[str]) -> list[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
