"""
Consistency checks on a single variant.

Each check appends findings to a ValidationReport; none of them raise.
"""

from __future__ import annotations
from typing import Any
import re

from ..config import EngineConfig
from .report import ValidationReport

NON_NEGATIVE_PROPERTIES = ("health", "defense", "attack", "power", "mana", "speed")
POWER_PROPERTIES = ("power", "attack", "strength", "damage", "force")
RARE_INDICATORS = (
    "legendary", "mythic", "unique", "artifact", "divine",
    "ancient", "transcendent", "ultimate", "supreme",
)
ARCHETYPE_ASSET_TYPES = {
    "dragon": ("creature", "mount", "companion"),
    "sword": ("weapon", "equipment"),
    "potion": ("consumable", "item"),
    "armor": ("equipment", "gear"),
}
CONFLICTING_RESTRICTIONS = (("unlimited_use", "single_use"),)

_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


# =============================================================================
# Structural checks
# =============================================================================

def check_status(variant, report: ValidationReport):
    status = variant.status
    if status.active and status.deprecated:
        report.error(
            "status",
            "ACTIVE_AND_DEPRECATED",
            "Variant cannot be both active and deprecated",
            critical=True,
        )
    if status.deprecated and not status.migration_target:
        report.warn(
            "status.migration_target",
            "NO_MIGRATION_TARGET",
            "Deprecated variant has no migration target",
            "Point holders at a replacement variant",
        )


def check_properties(variant, report: ValidationReport, config: EngineConfig):
    properties = variant.properties

    for name in NON_NEGATIVE_PROPERTIES:
        value = numeric(properties.get(name))
        if value is not None and value < 0:
            report.error(
                f"properties.{name}",
                "NEGATIVE_PROPERTY_VALUE",
                f"Property {name} cannot have negative value",
            )

    for name, raw in properties.items():
        value = numeric(raw)
        if value is not None and value > config.high_value_threshold:
            report.warn(
                f"properties.{name}",
                "EXTREMELY_HIGH_VALUE",
                f"Property {name} has an extremely high value ({raw})",
                "Verify this value is intentional and balanced",
            )


def check_mechanics(variant, report: ValidationReport):
    mechanics = variant.mechanics

    if not mechanics.usable_in:
        report.warn(
            "mechanics.usable_in",
            "NO_USAGE_CONTEXTS",
            "Variant has no defined usage contexts",
            "Define where this asset can be used",
        )

    abilities = mechanics.abilities or []
    if len(set(abilities)) != len(abilities):
        report.warn(
            "mechanics.abilities",
            "DUPLICATE_ABILITIES",
            "Variant has duplicate abilities",
            "Remove duplicate abilities",
        )

    restrictions = set(mechanics.restrictions or [])
    for first, second in CONFLICTING_RESTRICTIONS:
        if first in restrictions and second in restrictions:
            report.error(
                "mechanics.restrictions",
                "CONFLICTING_RESTRICTIONS",
                f"Restrictions {first} and {second} conflict",
            )

    if mechanics.cooldown is not None and mechanics.cooldown < 0:
        report.error("mechanics.cooldown", "NEGATIVE_COOLDOWN", "Cooldown cannot be negative")

    if mechanics.durability is not None and mechanics.durability <= 0:
        report.error("mechanics.durability", "INVALID_DURABILITY", "Durability must be positive")


def check_compatibility(variant, report: ValidationReport):
    compatibility = variant.compatibility
    min_version = compatibility.min_game_version
    max_version = compatibility.max_game_version

    if not valid_version(min_version):
        report.error(
            "compatibility.min_game_version",
            "INVALID_VERSION_FORMAT",
            f"Invalid version format: {min_version}",
        )
    if max_version and not valid_version(max_version):
        report.error(
            "compatibility.max_game_version",
            "INVALID_VERSION_FORMAT",
            f"Invalid version format: {max_version}",
        )

    if (
        max_version
        and valid_version(min_version)
        and valid_version(max_version)
        and compare_versions(min_version, max_version) > 0
    ):
        report.error(
            "compatibility.max_game_version",
            "INVALID_VERSION_RANGE",
            "Maximum version must not be lower than minimum version",
        )

    if variant.status.deprecated and not max_version:
        report.warn(
            "compatibility.max_game_version",
            "DEPRECATED_NO_MAX_VERSION",
            "Deprecated variant should specify maximum supported version",
            "Set max_game_version for deprecated variants",
        )


# =============================================================================
# Essence consistency
# =============================================================================

def check_essence_consistency(variant, essence, report: ValidationReport, config: EngineConfig):
    power = variant_power(variant)
    if power is not None:
        low = essence.power_tier * (1 - config.power_tolerance)
        high = essence.power_tier * (1 + config.power_tolerance)
        if power < low or power > high:
            report.warn(
                "properties.power",
                "POWER_ESSENCE_MISMATCH",
                f"Variant power ({power:g}) doesn't align with essence power tier "
                f"({essence.power_tier})",
                "Ensure variant properties reflect core essence",
            )

    if essence.element and not element_reflected(variant, essence.element):
        report.warn(
            "properties",
            "ELEMENT_NOT_REFLECTED",
            f"Variant doesn't reflect {essence.element} element",
            "Add element-specific properties or abilities",
        )

    expected_types = ARCHETYPE_ASSET_TYPES.get(essence.archetype.lower())
    if expected_types and variant.asset_type not in expected_types:
        report.warn(
            "asset_type",
            "ARCHETYPE_INCONSISTENT",
            f"Asset type {variant.asset_type} may not align with archetype {essence.archetype}",
            "Verify asset type matches the essence archetype",
        )

    rarity = str(essence.rarity_class).lower()
    if rarity in ("legendary", "mythic") and not rarity_reflected(variant):
        report.warn(
            "properties",
            "RARE_ESSENCE_NOT_REFLECTED",
            f"{rarity} rarity not reflected in variant properties",
            "Add unique or powerful properties for rare assets",
        )


# =============================================================================
# Game-specific checks
# =============================================================================

def check_game_rules(variant, game_info, report: ValidationReport, config: EngineConfig):
    supported = game_info.supported_asset_types
    if supported and variant.asset_type not in supported:
        report.error(
            "asset_type",
            "UNSUPPORTED_ASSET_TYPE",
            f"Asset type {variant.asset_type} is not supported by game {game_info.game_id}",
            critical=True,
        )

    for name in game_info.required_properties.get(variant.asset_type, []):
        if name not in variant.properties:
            report.error(
                f"properties.{name}",
                "MISSING_REQUIRED_PROPERTY",
                f"Required property {name} is missing for {variant.asset_type} "
                f"in {game_info.game_id}",
            )

    for name, bounds in game_info.property_ranges.items():
        value = numeric(variant.properties.get(name))
        if value is not None and not bounds.min <= value <= bounds.max:
            report.warn(
                f"properties.{name}",
                "PROPERTY_OUT_OF_RANGE",
                f"Property {name} ({value:g}) is outside expected range "
                f"[{bounds.min:g}, {bounds.max:g}]",
                f"Consider adjusting {name} to be within normal range",
            )

    abilities = variant.mechanics.abilities or []
    if len(abilities) > config.max_abilities:
        report.warn(
            "mechanics.abilities",
            "TOO_MANY_ABILITIES",
            f"Variant has {len(abilities)} abilities",
            "Consider grouping or reducing abilities",
        )


# =============================================================================
# Helpers
# =============================================================================

def numeric(value: Any) -> float | None:
    """A property value as a number, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def variant_power(variant) -> float | None:
    """The first power-like numeric property, if any."""
    for name in POWER_PROPERTIES:
        value = numeric(variant.properties.get(name))
        if value is not None:
            return value
    return None


def element_reflected(variant, element: str) -> bool:
    element = element.lower()
    if any(element in name.lower() for name in variant.properties):
        return True
    return any(element in ability.lower() for ability in variant.mechanics.abilities or [])


def rarity_reflected(variant) -> bool:
    names = [*variant.properties, *(variant.mechanics.abilities or [])]
    values = [v for v in variant.properties.values() if isinstance(v, str)]
    return any(
        indicator in text.lower()
        for text in names + values
        for indicator in RARE_INDICATORS
    )


def valid_version(version: str | None) -> bool:
    return bool(version) and bool(_VERSION_RE.match(version))


def compare_versions(a: str, b: str) -> int:
    left = [int(p) for p in a.split(".")]
    right = [int(p) for p in b.split(".")]
    return (left > right) - (left < right)
