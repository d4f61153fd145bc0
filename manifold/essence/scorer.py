"""
Essence Scorer - essence strength scores and compatibility factors.

All functions are pure: the same essence always produces the same score and
the same factor set, with no side effects.

Usage:
    essence = create_essence(archetype="dragon", element="fire",
                             power_tier=90, rarity_class="legendary")
    essence.essence_score            # 738
    "premium_rarity" in essence.compatibility_factors

    compatibility(essence, other)    # Jaccard index of factor sets
"""

from __future__ import annotations
from typing import Any, Iterable

from pydantic import ValidationError

from ..errors import FormatError
from .models import CoreEssence
from . import tables


def score(essence) -> int:
    """
    Calculate the overall essence score in [0, 1000].

    The weighted sum lives on a 0-100 scale and is scaled by 10.
    """
    weights = tables.PROPERTY_WEIGHTS
    total = 0.0

    total += essence.power_tier * weights["power_tier"]
    total += 100 * rarity_multiplier(essence.rarity_class) * weights["rarity_class"]

    if essence.element:
        total += _lookup(tables.ELEMENT_SCORES, essence.element,
                         tables.DEFAULT_ELEMENT_SCORE) * weights["element"]

    total += _lookup(tables.ARCHETYPE_SCORES, essence.archetype,
                     tables.DEFAULT_ARCHETYPE_SCORE) * weights["archetype"]

    if essence.temperament:
        total += _lookup(tables.TEMPERAMENT_SCORES, essence.temperament,
                         tables.DEFAULT_TEMPERAMENT_SCORE) * weights["temperament"]

    if essence.intelligence:
        total += _lookup(tables.INTELLIGENCE_SCORES, essence.intelligence,
                         tables.DEFAULT_INTELLIGENCE_SCORE) * weights["intelligence"]

    if essence.craftsmanship:
        total += _lookup(tables.CRAFTSMANSHIP_SCORES, essence.craftsmanship,
                         tables.DEFAULT_CRAFTSMANSHIP_SCORE) * weights["craftsmanship"]

    if essence.size_class:
        total += _lookup(tables.SIZE_SCORES, essence.size_class,
                         tables.DEFAULT_SIZE_SCORE) * weights["size_class"]

    total += uniqueness_bonus(essence)

    return min(1000, max(0, _round_half_up(total * 10)))


def uniqueness_bonus(essence) -> int:
    """Bonus points for documented rare combinations."""
    bonus = 0
    element = _lower(essence.element)
    archetype = _lower(essence.archetype)

    if (element, archetype) in tables.RARE_ELEMENT_ARCHETYPE_COMBOS:
        bonus += 15

    if _lower(essence.intelligence) in tables.HIGH_INTELLIGENCE and essence.power_tier >= 85:
        bonus += 10

    if _rarity(essence) in tables.PREMIUM_RARITIES and essence.power_tier >= 90:
        bonus += 12

    if _lower(essence.craftsmanship) in tables.ANCIENT_CRAFTSMANSHIP:
        bonus += 8

    return bonus


def compatibility_factors(essence) -> frozenset[str]:
    """Derive the deduplicated set of compatibility tags for an essence."""
    factors: list[str] = []

    element = _lower(essence.element)
    if element:
        factors.append(f"element_{element}")
        for compatible in tables.ELEMENT_COMPATIBILITY.get(element, []):
            if compatible != "all":
                factors.append(f"compatible_{compatible}")
        if element in tables.UNIVERSAL_ELEMENTS:
            factors.append("universal_element")

    archetype = _lower(essence.archetype)
    factors.append(f"archetype_{archetype}")
    family = archetype_family(archetype)
    if family:
        factors.append(f"family_{family}")

    factors.extend(power_bucket(essence.power_tier))

    rarity = _rarity(essence)
    factors.append(f"rarity_{rarity}")
    if rarity in tables.PREMIUM_RARITIES:
        factors.append("premium_rarity")
    elif rarity in tables.ADVANCED_RARITIES:
        factors.append("advanced_rarity")
    else:
        factors.append("basic_rarity")

    temperament = _lower(essence.temperament)
    if temperament:
        factors.append(f"temperament_{temperament}")
        if temperament in tables.VOLATILE_TEMPERAMENTS:
            factors.append("volatile_nature")
        elif temperament in tables.STABLE_TEMPERAMENTS:
            factors.append("stable_nature")
        elif temperament in tables.FLEXIBLE_TEMPERAMENTS:
            factors.append("flexible_nature")

    intelligence = _lower(essence.intelligence)
    if intelligence:
        factors.append(f"intelligence_{intelligence}")
        if intelligence in tables.HIGH_INTELLIGENCE:
            factors.append("high_intelligence")
        elif intelligence in tables.MODERATE_INTELLIGENCE:
            factors.append("moderate_intelligence")
        else:
            factors.append("basic_intelligence")

    size = _lower(essence.size_class)
    if size:
        factors.append(f"size_{size}")
        if size in tables.LARGE_SIZES:
            factors.append("large_scale")
        elif size in tables.MEDIUM_SIZES:
            factors.append("medium_scale")
        else:
            factors.append("small_scale")

    factors.extend(special_factors(essence))

    return frozenset(factors)


def special_factors(essence) -> list[str]:
    """Cross-cutting factors that depend on several fields at once."""
    factors = []
    element = _lower(essence.element)
    rarity = _rarity(essence)
    craftsmanship = _lower(essence.craftsmanship)

    if element in tables.UNIVERSAL_ELEMENTS:
        factors.append("cross_domain_compatible")

    if essence.power_tier >= 70 and rarity in tables.PREMIUM_RARITIES:
        factors.append("evolution_capable")

    if element and essence.archetype:
        factors.append("fusion_compatible")

    if essence.power_tier >= 60:
        factors.append("tournament_eligible")

    if rarity in tables.PREMIUM_RARITIES or craftsmanship in ("ancient", "divine"):
        factors.append("high_collectible_value")

    if _lower(essence.temperament) == "balanced" or _lower(essence.intelligence) == "high":
        factors.append("cross_game_adaptable")

    return factors


def power_bucket(power_tier: int) -> tuple[str, str]:
    """Power tag and tier tag for a power level."""
    if power_tier >= 80:
        return ("high_power", "elite_tier")
    if power_tier >= 60:
        return ("mid_power", "veteran_tier")
    if power_tier >= 40:
        return ("balanced_power", "standard_tier")
    return ("low_power", "novice_tier")


def archetype_family(archetype: str) -> str | None:
    return tables.ARCHETYPE_FAMILIES.get(_lower(archetype))


def rarity_multiplier(rarity_class) -> float:
    return tables.RARITY_MULTIPLIERS.get(_enum_value(rarity_class), 1.0)


def compatibility(a, b) -> float:
    """
    Jaccard similarity of two essences' compatibility factors.

    Symmetric; 1.0 for an essence against itself. Precomputed factor sets on
    CoreEssence are used when present.
    """
    factors_a = _factors_of(a)
    factors_b = _factors_of(b)
    union = factors_a | factors_b
    if not union:
        return 0.0
    return len(factors_a & factors_b) / len(union)


def rank_by_compatibility(reference, candidates: Iterable) -> list[tuple[Any, float]]:
    """Rank candidates by compatibility with the reference, best first (stable)."""
    scored = [(candidate, compatibility(reference, candidate)) for candidate in candidates]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored


def create_essence(**fields: Any) -> CoreEssence:
    """
    Validate essence fields and fill in the computed score and factors.

    Raises:
        FormatError: if the fields do not form a valid essence
    """
    fields.pop("essence_score", None)
    fields.pop("compatibility_factors", None)
    try:
        draft = CoreEssence(**fields)
    except ValidationError as e:
        raise FormatError.from_validation_error(e, prefix="essence") from e

    return draft.model_copy(update={
        "essence_score": score(draft),
        "compatibility_factors": compatibility_factors(draft),
    })


def _factors_of(essence) -> frozenset[str]:
    precomputed = getattr(essence, "compatibility_factors", None)
    if precomputed:
        return frozenset(precomputed)
    return compatibility_factors(essence)


def _lookup(table: dict, key: str, default: int) -> int:
    return table.get(_lower(key), default)


def _lower(value) -> str:
    return str(value).lower() if value else ""


def _enum_value(value) -> str:
    return str(getattr(value, "value", value) or "").lower()


def _rarity(essence) -> str:
    return _enum_value(essence.rarity_class)


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; scores round .5 upward
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
