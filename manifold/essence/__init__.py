"""Essence model and scoring."""

from .models import CoreEssence, RarityClass, CLASSIFICATION_FIELDS
from .scorer import (
    score,
    compatibility_factors,
    compatibility,
    create_essence,
    rank_by_compatibility,
)

__all__ = [
    "CoreEssence",
    "RarityClass",
    "CLASSIFICATION_FIELDS",
    "score",
    "compatibility_factors",
    "compatibility",
    "create_essence",
    "rank_by_compatibility",
]
