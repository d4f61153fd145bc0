"""
Variant Generator - builds game variants from an essence.

The generator:
1. Resolves the game's interpretation rules (or built-in defaults)
2. Resolves the asset type
3. Selects the best manifestation template
4. Generates properties: rule engine, then template, then customizations
5. Builds display, mechanics and compatibility sections
6. Validates the result against the variant schema

A variant that fails validation is never returned; FormatError is raised
naming the offending field.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..config import EngineConfig
from ..errors import FormatError, StatusTransitionError
from ..registry.registry import GameRegistry, InMemoryGameRegistry
from ..rules.engine import InterpretationRuleEngine
from ..rules.models import InterpretationRules, ManifestationTemplate, default_rules
from ..utils.cache import MemoCache, make_key
from ..utils.logger import get_logger
from .models import (
    GameVariant,
    VariantStatus,
    StatusState,
    status_state,
    can_transition,
)
from .templates import (
    select_template,
    apply_template,
    template_abilities,
    interpolate,
    select_image,
)

logger = get_logger(__name__)

UPDATABLE_SECTIONS = ("properties", "display", "mechanics", "status")


@dataclass
class VariantGeneration:
    """
    Result of generating a variant.
    """
    variant: GameVariant
    template_id: str | None = None
    warnings: list[str] = field(default_factory=list)


class VariantGenerator:
    """
    Creates and updates game variants.

    Usage:
        generator = VariantGenerator(registry)
        variant = generator.create_variant_from_essence(essence, "realm_quest")
    """

    def __init__(
        self,
        registry: GameRegistry | None = None,
        rule_engine: InterpretationRuleEngine | None = None,
        config: EngineConfig | None = None,
    ):
        self.config = config or EngineConfig()
        self.registry = registry or InMemoryGameRegistry()
        self.rule_engine = rule_engine or InterpretationRuleEngine(
            cache_enabled=self.config.cache_enabled
        )
        self.rules_cache = MemoCache("rules", enabled=self.config.cache_enabled)
        self.template_cache = MemoCache("templates", enabled=self.config.cache_enabled)

    def create_variant_from_essence(
        self,
        essence,
        game_id: str,
        asset_type: str | None = None,
        customizations: dict[str, Any] | None = None,
    ) -> GameVariant:
        """
        Create a schema-valid variant for a game.

        Raises:
            FormatError: if the produced variant fails validation
        """
        return self.generate(essence, game_id, asset_type, customizations).variant

    def generate(
        self,
        essence,
        game_id: str,
        asset_type: str | None = None,
        customizations: dict[str, Any] | None = None,
    ) -> VariantGeneration:
        """Create a variant, also reporting the template used and warnings."""
        if not game_id:
            raise FormatError("game_id", "game_id is required")

        rules = self.get_interpretation_rules(game_id)
        interpretation = self.rule_engine.interpret(essence, game_id, rules)
        warnings = list(interpretation.warnings)

        resolved_type = asset_type or interpretation.asset_type

        template = select_template(self.get_templates(game_id, essence), essence)

        properties = interpretation.properties
        if template is not None:
            context = self.rule_engine.build_context(essence)
            properties = apply_template(template, essence, properties, context, warnings)
        if customizations:
            properties = {**properties, **customizations}

        display = self._build_display(essence, game_id, template, interpretation.display)

        abilities = list(interpretation.abilities)
        if template is not None:
            for ability in template_abilities(template, essence):
                if ability not in abilities:
                    abilities.append(ability)

        data = {
            "game_id": game_id,
            "asset_type": resolved_type,
            "properties": properties,
            "display": display,
            "mechanics": {
                "usable_in": interpretation.usable_in,
                "abilities": abilities,
                "restrictions": interpretation.restrictions,
            },
            "compatibility": self._build_compatibility(game_id),
            "status": {"active": True, "deprecated": False},
        }

        variant = validate_variant_data(data)
        logger.debug(
            f"Generated {resolved_type} variant for {essence.archetype}",
            extra={"game_id": game_id},
        )
        return VariantGeneration(
            variant=variant,
            template_id=template.template_id if template else None,
            warnings=warnings,
        )

    def update_variant(self, variant: GameVariant, updates: dict[str, dict[str, Any]]) -> GameVariant:
        """
        Shallow-merge updates into each section independently, then re-validate.

        Raises:
            FormatError: on an unknown section or an invalid result
        """
        data = variant.model_dump()
        for section, changes in updates.items():
            if section not in UPDATABLE_SECTIONS:
                raise FormatError(section, "section cannot be updated")
            if changes is None:
                continue
            if not isinstance(changes, dict):
                raise FormatError(section, "update must be a mapping")
            data[section] = {**data[section], **changes}
        return validate_variant_data(data)

    def deprecate_variant(self, variant: GameVariant, migration_target: str | None = None) -> GameVariant:
        """Active -> Deprecated. migration_target is recommended, not required."""
        self._check_transition(variant, StatusState.DEPRECATED)
        if not migration_target:
            logger.info(
                "Deprecating variant without migration target",
                extra={"game_id": variant.game_id},
            )
        return self.update_variant(variant, {"status": {
            "active": False,
            "deprecated": True,
            "migration_target": migration_target,
        }})

    def reactivate_variant(self, variant: GameVariant) -> GameVariant:
        """Deprecated -> Active."""
        self._check_transition(variant, StatusState.ACTIVE)
        return self.update_variant(variant, {"status": {
            "active": True,
            "deprecated": False,
            "migration_target": None,
        }})

    def get_interpretation_rules(self, game_id: str) -> InterpretationRules:
        """Registered rules for a game, or the built-in defaults (cached)."""
        cached = self.rules_cache.get(game_id)
        if cached is not None:
            return cached

        rules = self.registry.get_interpretation_rules(game_id)
        if rules is None:
            logger.debug("No rules registered, using defaults", extra={"game_id": game_id})
            rules = default_rules(game_id)

        self.rules_cache.put(game_id, rules)
        return rules

    def get_templates(self, game_id: str, essence) -> list[ManifestationTemplate]:
        """Candidate templates for a game and archetype (cached)."""
        cache_key = make_key(game_id, essence.archetype.lower())
        cached = self.template_cache.get(cache_key)
        if cached is not None:
            return cached

        templates = list(self.registry.get_templates(game_id, essence.archetype))
        self.template_cache.put(cache_key, templates)
        return templates

    def invalidate_game(self, game_id: str):
        """Drop cached rules and templates after a registry change."""
        self.rules_cache.invalidate(game_id)
        self.template_cache.invalidate_prefix(f"{game_id}_")

    def _build_display(
        self,
        essence,
        game_id: str,
        template: ManifestationTemplate | None,
        default_display: dict[str, Any],
    ) -> dict[str, Any]:
        display = dict(default_display)
        if template is None:
            return display

        rules = template.display_generation
        if rules.name_template:
            display["name"] = interpolate(rules.name_template, essence)
        if rules.description_template:
            display["description"] = interpolate(rules.description_template, essence)
        if rules.image_rules is not None:
            display["image_url"] = select_image(rules.image_rules, essence, game_id)
        return display

    def _build_compatibility(self, game_id: str) -> dict[str, Any]:
        game = self.registry.get_game(game_id)
        if game is None:
            return {
                "min_game_version": self.config.default_game_version,
                "required_features": [],
                "incompatible_with": [],
            }
        return {
            "min_game_version": game.version,
            "max_game_version": game.max_version,
            "required_features": list(game.required_features),
            "incompatible_with": list(game.incompatible_with),
        }

    def _check_transition(self, variant: GameVariant, target: StatusState):
        current = status_state(variant.status)
        if not can_transition(current, target):
            raise StatusTransitionError(current.value, target.value)


def validate_variant_data(data: dict[str, Any]) -> GameVariant:
    """
    Validate raw variant data into a GameVariant.

    Beyond the structural schema, a produced variant may not be both active
    and deprecated.

    Raises:
        FormatError: naming the first offending field
    """
    try:
        variant = GameVariant.model_validate(data)
    except ValidationError as e:
        raise FormatError.from_validation_error(e) from e

    check_status(variant.status)
    return variant


def check_status(status: VariantStatus):
    if status_state(status) == StatusState.ACTIVE_DEPRECATED:
        raise FormatError("status", "variant cannot be both active and deprecated")
