"""
Conversion Engine - re-manifests an essence in another game.

The converted variant is generated fresh from the essence; the source variant
only contributes explicitly preserved property values and the yardstick for
conversion quality.

Usage:
    engine = ConversionEngine(generator)
    result = engine.convert_variant(sword_variant, essence, "space_fleet",
                                    ConversionOptions(preserve_properties=["attack"]))
    print(result.conversion_quality, result.properties_lost)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..errors import ThresholdError
from ..utils.logger import get_logger
from .generator import VariantGenerator, validate_variant_data
from .models import GameVariant

logger = get_logger(__name__)


@dataclass
class ConversionOptions:
    preserve_properties: list[str] = field(default_factory=list)
    accept_property_loss: bool = False
    quality_threshold: float | None = None


@dataclass
class ConversionResult:
    """
    Outcome of a conversion.

    properties_lost and properties_gained are disjoint: lost names are in the
    source but not the result, gained names the reverse.
    """
    variant: GameVariant
    conversion_quality: float
    properties_lost: list[str] = field(default_factory=list)
    properties_gained: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    meets_threshold: bool = True


class ConversionEngine:
    """Converts variants between games."""

    def __init__(self, generator: VariantGenerator | None = None):
        self.generator = generator or VariantGenerator()

    def convert_variant(
        self,
        source_variant: GameVariant,
        source_essence,
        target_game_id: str,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """
        Convert a variant to the target game.

        Raises:
            ThresholdError: if quality is below the threshold and property
                loss is not accepted
            FormatError: if the converted variant fails validation
        """
        result = self._convert(source_variant, source_essence, target_game_id, options)
        if not result.meets_threshold:
            threshold = options.quality_threshold
            logger.info(
                f"Conversion rejected: quality {result.conversion_quality:.2f} "
                f"below {threshold}",
                extra={"game_id": target_game_id},
            )
            raise ThresholdError(result.conversion_quality, threshold)
        return result

    def preview_conversion(
        self,
        source_variant: GameVariant,
        source_essence,
        target_game_id: str,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Like convert_variant, but reports the threshold outcome instead of raising."""
        return self._convert(source_variant, source_essence, target_game_id, options)

    def _convert(
        self,
        source_variant: GameVariant,
        source_essence,
        target_game_id: str,
        options: ConversionOptions | None,
    ) -> ConversionResult:
        options = options or ConversionOptions()

        generation = self.generator.generate(source_essence, target_game_id)
        baseline = generation.variant
        warnings = list(generation.warnings)

        source_properties = source_variant.properties
        preserved, skipped = preserve_properties(
            source_properties, baseline.properties, options.preserve_properties
        )
        for name in skipped:
            warnings.append(f"Cannot preserve '{name}': not present in both variants")

        properties = {**baseline.properties, **preserved}
        quality = conversion_quality(source_properties, properties, preserved)

        meets_threshold = (
            options.quality_threshold is None
            or quality >= options.quality_threshold
            or options.accept_property_loss
        )

        data = baseline.model_dump()
        data["properties"] = properties
        variant = validate_variant_data(data)

        lost = properties_lost(source_properties, properties)
        gained = properties_gained(source_properties, properties)
        if lost:
            warnings.append(f"{len(lost)} properties not carried over: {', '.join(lost)}")

        return ConversionResult(
            variant=variant,
            conversion_quality=quality,
            properties_lost=lost,
            properties_gained=gained,
            warnings=warnings,
            meets_threshold=meets_threshold,
        )


def preserve_properties(
    source: dict[str, Any], target: dict[str, Any], names: list[str]
) -> tuple[dict[str, Any], list[str]]:
    """
    Source values for requested names present in both property maps.

    Returns the preserved values and the names that could not be preserved.
    """
    preserved: dict[str, Any] = {}
    skipped: list[str] = []
    for name in names:
        if name in source and name in target:
            preserved[name] = source[name]
        else:
            skipped.append(name)
    return preserved, skipped


def conversion_quality(
    source: dict[str, Any], result: dict[str, Any], preserved: dict[str, Any]
) -> float:
    """
    Mean of the preserved share of the source and of the result.

    Only properties explicitly carried over count; baseline values that happen
    to match the source do not. An empty side contributes 1.0.
    """
    retained = len(preserved)
    source_ratio = retained / len(source) if source else 1.0
    result_ratio = retained / len(result) if result else 1.0
    return max(0.0, min(1.0, (source_ratio + result_ratio) / 2))


def properties_lost(source: dict[str, Any], result: dict[str, Any]) -> list[str]:
    return [name for name in source if name not in result]


def properties_gained(source: dict[str, Any], result: dict[str, Any]) -> list[str]:
    return [name for name in result if name not in source]
