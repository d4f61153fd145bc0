"""
Game Registry - the collaborator that supplies per-game content.

The registry provides:
- Game metadata (GameInfo)
- Interpretation rules
- Manifestation templates

A game with nothing registered is not an error: lookups return None or an
empty list and the engine falls back to its built-in defaults.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel, Field

from ..rules.models import InterpretationRules, ManifestationTemplate
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PropertyRange(BaseModel):
    min: float
    max: float


class GameInfo(BaseModel):
    """Registry record for a game."""
    game_id: str = Field(min_length=1)
    name: str = ""
    domain: str = ""
    version: str = "1.0.0"
    max_version: Optional[str] = None

    # Asset integration
    supported_asset_types: list[str] = Field(default_factory=list)
    required_properties: dict[str, list[str]] = Field(
        default_factory=dict, description="asset_type -> property names"
    )
    property_ranges: dict[str, PropertyRange] = Field(default_factory=dict)
    required_features: list[str] = Field(default_factory=list)
    incompatible_with: list[str] = Field(default_factory=list)

    # Cross-game
    compatible_games: list[str] = Field(default_factory=list)
    restricted_elements: list[str] = Field(default_factory=list)

    # Content
    interpretation_rules: Optional[InterpretationRules] = None
    templates: list[ManifestationTemplate] = Field(default_factory=list)

    active: bool = True
    accepting_assets: bool = True


class GameRegistry(ABC):
    """
    Abstract game registry.

    Implementations may be remote; this interface defines no retry or
    timeout policy.
    """

    @abstractmethod
    def get_game(self, game_id: str) -> GameInfo | None:
        """Get game metadata, or None if the game is not registered."""
        pass

    @abstractmethod
    def get_interpretation_rules(self, game_id: str) -> InterpretationRules | None:
        """Get the game's interpretation rules, or None for defaults."""
        pass

    @abstractmethod
    def get_templates(self, game_id: str, archetype: str) -> list[ManifestationTemplate]:
        """Get candidate templates in declaration order."""
        pass


class InMemoryGameRegistry(GameRegistry):
    """
    Registry backed by in-process dicts.

    Usage:
        registry = InMemoryGameRegistry()
        registry.register_game(GameInfo(game_id="realm_quest", ...))
        registry.register_rules(rules)
        registry.register_template(template)
    """

    def __init__(self):
        self._games: dict[str, GameInfo] = {}
        self._rules: dict[str, InterpretationRules] = {}
        self._templates: dict[str, list[ManifestationTemplate]] = {}

    def register_game(self, game: GameInfo):
        """Register game metadata along with any embedded rules/templates."""
        self._games[game.game_id] = game
        if game.interpretation_rules is not None:
            self.register_rules(game.interpretation_rules)
        for template in game.templates:
            self.register_template(template)
        logger.info(f"Registered game {game.game_id}", extra={"game_id": game.game_id})

    def register_rules(self, rules: InterpretationRules):
        self._rules[rules.game_id] = rules

    def register_template(self, template: ManifestationTemplate):
        templates = self._templates.setdefault(template.game_id, [])
        # Re-registering a template id replaces it in place
        for index, existing in enumerate(templates):
            if existing.template_id == template.template_id:
                templates[index] = template
                return
        templates.append(template)

    def get_game(self, game_id: str) -> GameInfo | None:
        return self._games.get(game_id)

    def get_interpretation_rules(self, game_id: str) -> InterpretationRules | None:
        return self._rules.get(game_id)

    def get_templates(self, game_id: str, archetype: str) -> list[ManifestationTemplate]:
        """
        Templates for a game.

        A template restricted to other archetypes by an `archetype ==`
        condition is filtered out here.
        """
        candidates = []
        for template in self._templates.get(game_id, []):
            archetype_conditions = [
                c for c in template.applies_to
                if c.property == "archetype" and c.operator == "=="
            ]
            if archetype_conditions and not any(
                str(c.value).lower() == archetype.lower() for c in archetype_conditions
            ):
                continue
            candidates.append(template)
        return candidates

    def list_games(self) -> list[str]:
        return list(self._games)
