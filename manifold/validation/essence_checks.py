"""Advisory consistency checks on a single essence."""

from __future__ import annotations

from .report import ValidationReport

RARE_CLASSES = ("legendary", "mythic")
MYTHICAL_ARCHETYPES = ("dragon", "phoenix")
UNUSUAL_ELEMENT_TEMPERAMENTS = {
    ("fire", "peaceful"),
    ("water", "aggressive"),
}


def check_essence(essence, report: ValidationReport):
    power = essence.power_tier
    rarity = str(essence.rarity_class).lower()
    element = (essence.element or "").lower()
    temperament = (essence.temperament or "").lower()

    if power >= 85 and rarity not in RARE_CLASSES:
        report.warn(
            "rarity_class",
            "POWER_RARITY_MISMATCH",
            "High power tier should typically have legendary or mythic rarity",
            "Raise rarity_class or lower power_tier",
        )

    if power <= 30 and rarity in RARE_CLASSES:
        report.warn(
            "power_tier",
            "RARITY_POWER_MISMATCH",
            "Legendary/mythic rarity should typically have higher power tier",
            "Raise power_tier or lower rarity_class",
        )

    if (element, temperament) in UNUSUAL_ELEMENT_TEMPERAMENTS:
        report.warn(
            "temperament",
            "UNUSUAL_ELEMENT_TEMPERAMENT",
            f"{element.capitalize()} element with {temperament} temperament is unusual",
        )

    if essence.archetype.lower() in MYTHICAL_ARCHETYPES and (essence.intelligence or "").lower() == "low":
        report.warn(
            "intelligence",
            "MYTHICAL_LOW_INTELLIGENCE",
            "Mythical creatures typically have higher intelligence",
        )

    if (essence.size_class or "").lower() == "massive" and power < 60:
        report.warn(
            "power_tier",
            "SIZE_POWER_MISMATCH",
            "Massive entities typically have higher power levels",
        )
