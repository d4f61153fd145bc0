"""
Tests for cross-game conversion.

Tests:
- Baseline regeneration and property preservation
- Conversion quality
- Lost/gained property sets
- Quality thresholds and previews
"""

import pytest

from ..errors import ThresholdError
from ..rules import InterpretationRules, StatCalculation
from ..variants import ConversionOptions, GameVariant
from ..variants.conversion import conversion_quality, preserve_properties
from ..variants.generator import validate_variant_data


@pytest.fixture
def arena_registry(registry):
    """Adds an arena game that also has an attack stat."""
    registry.register_rules(InterpretationRules(
        game_id="arena",
        stat_calculations={"attack": StatCalculation(formula="power_tier")},
    ))
    return registry


def shared_names(converter, source, essence, target_game_id):
    """Source property names also present in the target baseline."""
    baseline = converter.generator.generate(essence, target_game_id).variant
    return [name for name in source.properties if name in baseline.properties]


class TestConvertVariant:
    """Tests for convert_variant."""

    def test_produces_target_variant(self, converter, dragon_variant, dragon_essence):
        result = converter.convert_variant(dragon_variant, dragon_essence, "space_fleet")

        assert isinstance(result.variant, GameVariant)
        assert result.variant.game_id == "space_fleet"
        assert result.variant.properties["power"] == 90

    def test_quality(self, converter, dragon_variant, dragon_essence):
        """Four of eleven source properties are preserved into a five-property result."""
        shared = shared_names(converter, dragon_variant, dragon_essence, "space_fleet")
        assert len(shared) == 4

        result = converter.convert_variant(
            dragon_variant, dragon_essence, "space_fleet",
            ConversionOptions(preserve_properties=shared),
        )
        assert result.conversion_quality == pytest.approx((4 / 11 + 4 / 5) / 2)

    def test_lost_and_gained(self, converter, dragon_variant, dragon_essence):
        result = converter.convert_variant(dragon_variant, dragon_essence, "space_fleet")

        assert result.properties_lost == [
            "health", "attack", "defense", "speed", "mount_slots", "flight_ceiling", "origin",
        ]
        assert result.properties_gained == ["power"]
        assert not set(result.properties_lost) & set(result.properties_gained)

    def test_same_game_preserving_everything(self, converter, dragon_variant, dragon_essence):
        result = converter.convert_variant(
            dragon_variant, dragon_essence, "realm_quest",
            ConversionOptions(preserve_properties=list(dragon_variant.properties)),
        )
        assert result.conversion_quality == 1.0
        assert result.properties_lost == []
        assert result.properties_gained == []

    def test_empty_preserve_list(self, converter, dragon_variant, dragon_essence):
        result = converter.convert_variant(
            dragon_variant, dragon_essence, "space_fleet", ConversionOptions(preserve_properties=[])
        )
        assert result.conversion_quality == 0.0
        assert set(result.properties_lost).isdisjoint(result.properties_gained)

    def test_matching_values_without_preserving_score_nothing(
        self, converter, dragon_variant, dragon_essence
    ):
        """Regenerating in the same game matches every value but preserves none."""
        result = converter.convert_variant(dragon_variant, dragon_essence, "realm_quest")

        assert result.variant.properties == dragon_variant.properties
        assert result.conversion_quality == 0.0

    def test_preserve_property(self, arena_registry, converter, dragon_variant, dragon_essence):
        plain = converter.convert_variant(dragon_variant, dragon_essence, "arena")
        preserved = converter.convert_variant(
            dragon_variant, dragon_essence, "arena",
            ConversionOptions(preserve_properties=["attack"]),
        )

        assert plain.variant.properties["attack"] == 90
        assert preserved.variant.properties["attack"] == 225
        assert preserved.conversion_quality > plain.conversion_quality

    def test_preserve_missing_property_warns(self, arena_registry, converter, dragon_variant, dragon_essence):
        result = converter.convert_variant(
            dragon_variant, dragon_essence, "arena",
            ConversionOptions(preserve_properties=["health"]),
        )
        assert "health" not in result.variant.properties
        assert any("health" in w for w in result.warnings)

    def test_source_without_properties(self, converter, dragon_essence):
        source = validate_variant_data({"game_id": "old_game", "asset_type": "item"})
        result = converter.convert_variant(source, dragon_essence, "space_fleet")

        assert result.conversion_quality == 0.5
        assert result.properties_lost == []
        assert "power" in result.properties_gained


class TestThreshold:
    """Tests for quality thresholds."""

    def test_below_threshold_raises(self, converter, dragon_variant, dragon_essence):
        with pytest.raises(ThresholdError) as exc_info:
            converter.convert_variant(
                dragon_variant, dragon_essence, "space_fleet",
                ConversionOptions(quality_threshold=0.9),
            )
        assert exc_info.value.threshold == 0.9
        assert exc_info.value.quality < 0.9

    def test_accept_property_loss(self, converter, dragon_variant, dragon_essence):
        result = converter.convert_variant(
            dragon_variant, dragon_essence, "space_fleet",
            ConversionOptions(quality_threshold=0.9, accept_property_loss=True),
        )
        assert result.conversion_quality < 0.9
        assert result.variant.game_id == "space_fleet"

    def test_meets_threshold(self, converter, dragon_variant, dragon_essence):
        result = converter.convert_variant(
            dragon_variant, dragon_essence, "space_fleet",
            ConversionOptions(quality_threshold=0.5, preserve_properties=shared_names(
                converter, dragon_variant, dragon_essence, "space_fleet"
            )),
        )
        assert result.meets_threshold is True

    def test_empty_preserve_list_fails_threshold(self, converter, dragon_variant, dragon_essence):
        with pytest.raises(ThresholdError) as exc_info:
            converter.convert_variant(
                dragon_variant, dragon_essence, "realm_quest",
                ConversionOptions(preserve_properties=[], quality_threshold=0.9),
            )
        assert exc_info.value.quality == 0.0

    def test_preview_never_raises(self, converter, dragon_variant, dragon_essence):
        result = converter.preview_conversion(
            dragon_variant, dragon_essence, "space_fleet",
            ConversionOptions(quality_threshold=0.9),
        )
        assert result.meets_threshold is False
        assert result.variant.game_id == "space_fleet"


class TestHelpers:
    def test_preserve_properties(self):
        preserved, skipped = preserve_properties({"a": 1, "b": 2}, {"a": 0}, ["a", "b"])
        assert preserved == {"a": 1}
        assert skipped == ["b"]

    def test_quality_counts_preserved_only(self):
        assert conversion_quality({"a": 1, "b": 2}, {"a": 1, "b": 3}, {"a": 1}) == 0.5
        assert conversion_quality({"a": 1, "b": 2}, {"a": 1, "b": 2}, {}) == 0.0

    def test_quality_both_empty(self):
        assert conversion_quality({}, {}, {}) == 1.0
