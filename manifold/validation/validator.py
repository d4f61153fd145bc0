"""
Consistency Validator - advisory checks over essences and variants.

The validator never raises. Schema failures are reported as critical errors;
everything else is an error or a warning with a recommendation.

Usage:
    validator = ConsistencyValidator()
    report = validator.validate_variant(variant, essence=essence, game_info=game)
    if not report.valid:
        for error in report.critical_errors:
            print(error.field, error.message)
"""

from __future__ import annotations
from typing import Any

from pydantic import ValidationError

from ..config import EngineConfig
from ..essence.models import CoreEssence
from ..registry.registry import GameInfo
from ..utils.logger import get_logger
from ..variants.models import GameVariant
from . import essence_checks, variant_checks
from .report import ValidationReport

logger = get_logger(__name__)

# source asset type -> target types it converts into without losing its role
TYPE_COMPATIBILITY = {
    "creature": ("creature", "mount", "companion"),
    "weapon": ("weapon", "tool", "equipment"),
    "equipment": ("equipment", "gear", "armor"),
    "consumable": ("consumable", "item", "resource"),
    "treasure": ("treasure", "currency", "collectible"),
}

MIN_PROPERTY_OVERLAP = 0.3
MAX_QUALITY_LOSS = 0.5
MAX_ABILITY_LOSS = 0.3
MAX_POWER_SPREAD = 0.5


class ConsistencyValidator:
    """Checks essences and variants for consistency."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def validate_essence(self, essence: CoreEssence | dict[str, Any]) -> ValidationReport:
        report = ValidationReport()
        essence = _parse(CoreEssence, essence, report)
        if essence is not None:
            essence_checks.check_essence(essence, report)
        return report

    def validate_variant(
        self,
        variant: GameVariant | dict[str, Any],
        essence: CoreEssence | None = None,
        game_info: GameInfo | None = None,
    ) -> ValidationReport:
        """
        Validate one variant.

        Essence consistency checks run only when the essence is supplied, and
        game-specific checks only when the game's GameInfo is supplied.
        """
        report = ValidationReport()
        variant = _parse(GameVariant, variant, report)
        if variant is None:
            return report

        variant_checks.check_status(variant, report)
        variant_checks.check_properties(variant, report, self.config)
        variant_checks.check_mechanics(variant, report)
        variant_checks.check_compatibility(variant, report)

        if essence is not None:
            variant_checks.check_essence_consistency(variant, essence, report, self.config)
        if game_info is not None:
            variant_checks.check_game_rules(variant, game_info, report, self.config)

        if not report.valid:
            logger.debug(
                f"Variant has {len(report.critical_errors)} critical errors",
                extra={"game_id": variant.game_id},
            )
        return report

    def validate_variant_set(
        self,
        variants: list[GameVariant],
        essence: CoreEssence | None = None,
    ) -> ValidationReport:
        """Validate each variant of one asset, then check them against each other."""
        report = ValidationReport()
        for index, variant in enumerate(variants):
            report.merge(self.validate_variant(variant, essence), prefix=f"variants[{index}]")

        if len(variants) <= 1:
            return report

        seen: set[str] = set()
        duplicates: list[str] = []
        for variant in variants:
            if variant.game_id in seen and variant.game_id not in duplicates:
                duplicates.append(variant.game_id)
            seen.add(variant.game_id)
        if duplicates:
            report.error(
                "variants",
                "DUPLICATE_GAME_VARIANTS",
                f"Duplicate variants for games: {', '.join(duplicates)}",
                critical=True,
            )

        powers = [p for p in (variant_checks.variant_power(v) for v in variants) if p is not None]
        if len(powers) > 1:
            spread = max(powers) - min(powers)
            mean = sum(powers) / len(powers)
            if spread > mean * MAX_POWER_SPREAD:
                report.warn(
                    "variants",
                    "INCONSISTENT_POWER_LEVELS",
                    "Large power variation between variants",
                    "Consider if power differences are intentional",
                )

        if all(v.status.deprecated for v in variants):
            report.error("variants", "ALL_VARIANTS_DEPRECATED", "All variants are deprecated")

        return report

    def validate_conversion(
        self,
        source: GameVariant,
        target: GameVariant,
        essence: CoreEssence,
    ) -> ValidationReport:
        """Validate both sides of a conversion and what it loses."""
        report = ValidationReport()
        report.merge(self.validate_variant(source, essence), prefix="source", include_warnings=False)
        report.merge(self.validate_variant(target, essence), prefix="target", include_warnings=False)

        compatible = TYPE_COMPATIBILITY.get(source.asset_type, ())
        if target.asset_type not in compatible:
            report.warn(
                "conversion",
                "INCOMPATIBLE_ASSET_TYPES",
                f"Converting from {source.asset_type} to {target.asset_type} may lose functionality",
                "Consider if this conversion makes sense",
            )

        if property_overlap(source.properties, target.properties) < MIN_PROPERTY_OVERLAP:
            report.warn(
                "conversion",
                "LOW_PROPERTY_OVERLAP",
                "Low property overlap between variants may result in significant data loss",
                "Review property mappings for conversion",
            )

        loss = quality_loss(source.properties, target.properties)
        if loss > MAX_QUALITY_LOSS:
            report.warn(
                "conversion",
                "HIGH_QUALITY_LOSS",
                f"Conversion may result in significant quality loss ({round(loss * 100)}%)",
                "Consider improving property mappings or conversion rules",
            )

        lost = ability_loss(source.mechanics.abilities or [], target.mechanics.abilities or [])
        if lost > MAX_ABILITY_LOSS:
            report.warn(
                "conversion",
                "SIGNIFICANT_ABILITY_LOSS",
                f"Conversion will lose {round(lost * 100)}% of abilities",
                "Map more abilities to target variant",
            )

        return report


def property_overlap(source: dict[str, Any], target: dict[str, Any]) -> float:
    largest = max(len(source), len(target))
    if largest == 0:
        return 1.0
    return len(source.keys() & target.keys()) / largest


def quality_loss(source: dict[str, Any], target: dict[str, Any]) -> float:
    if not source:
        return 0.0
    return 1 - len(source.keys() & target.keys()) / len(source)


def ability_loss(source: list[str], target: list[str]) -> float:
    if not source:
        return 0.0
    kept = sum(1 for ability in source if ability in target)
    return 1 - kept / len(source)


def _parse(model, data, report: ValidationReport):
    """Validate raw data into a model, recording a critical error on failure."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        for detail in e.errors():
            field = ".".join(str(part) for part in detail.get("loc", ())) or "schema"
            report.error(field, "SCHEMA_VALIDATION_FAILED", detail.get("msg", str(e)), critical=True)
        return None
