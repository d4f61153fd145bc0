"""
Manifestation template selection and application.

Selection is a pure ranking: each template scores the summed weights of its
matched `applies_to` conditions (weight defaults to 1). The highest score
wins; equal scores keep declaration order.
"""

from __future__ import annotations
from typing import Any
import random
import re

from ..errors import RuleEvaluationError
from ..rules.conditions import condition_holds, conditions_hold, get_essence_property
from ..rules.formula import evaluate_formula
from ..rules.models import ManifestationTemplate, PropertySource
from ..utils.cache import content_hash
from ..utils.logger import get_logger

logger = get_logger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

DEFAULT_IMAGE_PATTERN = "{archetype}/{element}.png"


def score_template(template: ManifestationTemplate, essence) -> float:
    """Sum of weights of the template's conditions that hold."""
    total = 0.0
    for condition in template.applies_to:
        if condition_holds(essence, condition):
            total += condition.weight if condition.weight is not None else 1.0
    return total


def rank_templates(
    templates: list[ManifestationTemplate], essence
) -> list[tuple[ManifestationTemplate, float]]:
    """Templates with scores, best first. Equal scores keep declaration order."""
    scored = [
        (index, template, score_template(template, essence))
        for index, template in enumerate(templates)
    ]
    scored.sort(key=lambda item: (-item[2], item[0]))
    return [(template, template_score) for _, template, template_score in scored]


def select_template(
    templates: list[ManifestationTemplate], essence
) -> ManifestationTemplate | None:
    """Pick the best-matching template, or None when there are none."""
    if not templates:
        return None
    return rank_templates(templates, essence)[0][0]


def apply_template(
    template: ManifestationTemplate,
    essence,
    base_properties: dict[str, Any],
    context: dict[str, float],
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Apply the template's property generation rules over base properties."""
    warnings = warnings if warnings is not None else []
    properties = dict(base_properties)

    for name, generation in template.property_generation.items():
        spec = generation.value_spec
        if generation.source == PropertySource.ESSENCE:
            properties[name] = (
                get_essence_property(essence, spec) if isinstance(spec, str) else spec
            )
        elif generation.source == PropertySource.FORMULA:
            try:
                properties[name] = evaluate_formula(str(spec), context)
            except RuleEvaluationError as e:
                message = f"Template {template.template_id} failed on {name}: {e}"
                logger.warning(message, extra={"template_id": template.template_id})
                warnings.append(message)
        elif generation.source == PropertySource.CONSTANT:
            properties[name] = spec
        elif generation.source == PropertySource.RANDOM:
            rng = seeded_random(template.game_id, essence, name)
            properties[name] = random_value(spec, rng)

    return properties


def template_abilities(template: ManifestationTemplate, essence) -> list[str]:
    """Abilities granted by the template's matching ability rules."""
    abilities: list[str] = []
    for rule in template.ability_generation:
        if conditions_hold(essence, rule.conditions):
            abilities.extend(rule.abilities)
    return abilities


def seeded_random(game_id: str, essence, property_name: str) -> random.Random:
    """A generator seeded so the same essence always rolls the same values."""
    return random.Random(f"{game_id}:{content_hash(essence)}:{property_name}")


def random_value(spec: Any, rng: random.Random) -> Any:
    if not isinstance(spec, dict):
        return 0
    if spec.get("type") == "range":
        low, high = spec.get("min", 0), spec.get("max", 0)
        if spec.get("integer"):
            return rng.randint(int(low), int(high))
        return rng.uniform(low, high)
    if spec.get("type") == "choice" and spec.get("choices"):
        return rng.choice(list(spec["choices"]))
    return 0


def interpolate(template: str, essence) -> str:
    """
    Replace {field} placeholders with essence values.

    Unknown placeholders are left intact; unset fields render empty.
    """
    values = essence.model_dump() if hasattr(essence, "model_dump") else dict(essence)

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in values:
            return match.group(0)
        value = get_essence_property(essence, key)
        return "" if value is None else str(value)

    return " ".join(_PLACEHOLDER_RE.sub(_replace, template).split())


def select_image(image_rules: dict[str, Any], essence, game_id: str) -> str:
    """Build an image URL from a template's image rules."""
    base_url = image_rules.get("base_url") or f"https://assets.{game_id}.com"
    pattern = image_rules.get("pattern") or DEFAULT_IMAGE_PATTERN
    by_rarity = image_rules.get("by_rarity") or {}
    rarity = str(get_essence_property(essence, "rarity_class"))
    if rarity in by_rarity:
        pattern = by_rarity[rarity]

    def _replace(match: re.Match) -> str:
        value = get_essence_property(essence, match.group(1))
        return str(value) if value not in (None, "") else "default"

    return base_url.rstrip("/") + "/" + _PLACEHOLDER_RE.sub(_replace, pattern).lstrip("/")
