"""
Essence model - the immutable, game-agnostic "soul" of an asset.

An essence is created once, when the asset is created, and never mutated
afterwards. Variants reference it; it holds no back-reference to them.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class RarityClass(str, Enum):
    """Closed set of rarity classes."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"


# Fields that identify what an essence *is*; cache keys hash these.
CLASSIFICATION_FIELDS = (
    "archetype",
    "element",
    "power_tier",
    "rarity_class",
    "temperament",
    "intelligence",
    "size_class",
    "craftsmanship",
    "age",
)


class CoreEssence(BaseModel):
    """Canonical description of what an asset fundamentally is."""

    # Primary classification
    archetype: str = Field(min_length=1)
    element: Optional[str] = None
    power_tier: int = Field(ge=0, le=100)

    # Behavioral traits
    temperament: Optional[str] = None
    intelligence: Optional[str] = None
    rarity_class: RarityClass

    # Physical/conceptual properties
    size_class: Optional[str] = None
    craftsmanship: Optional[str] = None
    age: Optional[str] = None

    # Thematic properties
    origin_story: Optional[str] = None
    cultural_significance: Optional[str] = None
    magical_nature: Optional[str] = None

    # Computed by the scorer
    essence_score: int = Field(0, ge=0, le=1000)
    compatibility_factors: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"frozen": True, "use_enum_values": True}

    def classification(self) -> dict:
        """The classification fields as a plain dict."""
        return {name: getattr(self, name) for name in CLASSIFICATION_FIELDS}
