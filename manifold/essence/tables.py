"""
Static lookup tables for essence scoring and interpretation.

Plain data maps; keys are lower-case essence field values.
"""

# Weight of each essence field in the essence score
PROPERTY_WEIGHTS = {
    "power_tier": 0.3,
    "rarity_class": 0.25,
    "element": 0.15,
    "archetype": 0.1,
    "temperament": 0.08,
    "intelligence": 0.05,
    "craftsmanship": 0.04,
    "size_class": 0.03,
}

RARITY_MULTIPLIERS = {
    "common": 1.0,
    "uncommon": 1.2,
    "rare": 1.5,
    "epic": 2.0,
    "legendary": 2.5,
    "mythic": 3.0,
}

PREMIUM_RARITIES = ("legendary", "mythic")
ADVANCED_RARITIES = ("rare", "epic")

# "all" marks elements compatible with every other element
ELEMENT_COMPATIBILITY = {
    "fire": ["lightning", "earth", "metal"],
    "water": ["ice", "nature", "wind"],
    "earth": ["fire", "nature", "metal"],
    "wind": ["water", "lightning", "ice"],
    "lightning": ["fire", "wind", "metal"],
    "ice": ["water", "wind"],
    "nature": ["earth", "water"],
    "metal": ["fire", "earth", "lightning"],
    "light": ["all"],
    "dark": ["all"],
    "neutral": ["all"],
}

UNIVERSAL_ELEMENTS = ("light", "dark", "neutral")

ELEMENT_SCORES = {
    "fire": 85,
    "water": 80,
    "earth": 75,
    "wind": 82,
    "lightning": 90,
    "ice": 78,
    "nature": 77,
    "metal": 83,
    "light": 95,
    "dark": 95,
    "neutral": 70,
    "void": 100,
    "time": 100,
    "space": 100,
}
DEFAULT_ELEMENT_SCORE = 50

ARCHETYPE_SCORES = {
    "dragon": 95,
    "phoenix": 90,
    "unicorn": 88,
    "demon": 85,
    "angel": 87,
    "sword": 75,
    "staff": 78,
    "bow": 72,
    "shield": 70,
    "armor": 68,
    "potion": 60,
    "scroll": 65,
    "gem": 80,
    "crystal": 82,
    "song": 70,
    "story": 68,
    "painting": 72,
    "sculpture": 75,
}
DEFAULT_ARCHETYPE_SCORE = 50

TEMPERAMENT_SCORES = {
    "aggressive": 85,
    "peaceful": 75,
    "chaotic": 90,
    "balanced": 70,
    "wild": 88,
    "calm": 72,
    "fierce": 87,
    "gentle": 73,
    "mysterious": 82,
    "noble": 78,
    "ancient": 95,
}
DEFAULT_TEMPERAMENT_SCORE = 60

INTELLIGENCE_SCORES = {
    "low": 30,
    "basic": 40,
    "moderate": 60,
    "average": 65,
    "high": 80,
    "superior": 90,
    "genius": 95,
    "ancient": 100,
    "transcendent": 100,
}
DEFAULT_INTELLIGENCE_SCORE = 50

CRAFTSMANSHIP_SCORES = {
    "crude": 20,
    "basic": 35,
    "standard": 50,
    "fine": 70,
    "masterwork": 85,
    "legendary": 95,
    "divine": 100,
    "artifacts": 100,
}
DEFAULT_CRAFTSMANSHIP_SCORE = 40

SIZE_SCORES = {
    "tiny": 40,
    "small": 55,
    "medium": 70,
    "large": 85,
    "huge": 90,
    "massive": 95,
    "colossal": 100,
}
DEFAULT_SIZE_SCORE = 60

# (element, archetype) pairs that earn the uniqueness bonus
RARE_ELEMENT_ARCHETYPE_COMBOS = {
    ("light", "dragon"),
    ("dark", "unicorn"),
    ("void", "phoenix"),
    ("time", "sword"),
    ("space", "crystal"),
}

HIGH_INTELLIGENCE = ("high", "ancient", "transcendent")
MODERATE_INTELLIGENCE = ("moderate", "average")
ANCIENT_CRAFTSMANSHIP = ("ancient", "divine", "artifacts")

ARCHETYPE_FAMILIES = {
    "dragon": "mythical_creatures",
    "phoenix": "mythical_creatures",
    "unicorn": "mythical_creatures",
    "griffin": "mythical_creatures",
    "demon": "supernatural_beings",
    "angel": "supernatural_beings",
    "spirit": "supernatural_beings",
    "sword": "weapons",
    "bow": "weapons",
    "staff": "weapons",
    "dagger": "weapons",
    "armor": "equipment",
    "shield": "equipment",
    "helmet": "equipment",
    "potion": "consumables",
    "scroll": "consumables",
    "elixir": "consumables",
    "gem": "treasures",
    "crystal": "treasures",
    "coin": "treasures",
    "song": "media",
    "story": "media",
    "painting": "media",
}

VOLATILE_TEMPERAMENTS = ("aggressive", "chaotic", "wild")
STABLE_TEMPERAMENTS = ("peaceful", "calm", "serene")
FLEXIBLE_TEMPERAMENTS = ("balanced", "neutral", "adaptive")

LARGE_SIZES = ("massive", "giant", "colossal")
MEDIUM_SIZES = ("medium", "average", "standard")

# --- Interpretation tables -------------------------------------------------

ELEMENT_POWER = {
    "fire": 85,
    "water": 80,
    "earth": 75,
    "wind": 82,
    "lightning": 90,
    "ice": 78,
    "nature": 77,
    "light": 95,
    "dark": 95,
    "metal": 83,
    "neutral": 70,
}
DEFAULT_ELEMENT_POWER = 70

INTELLIGENCE_FACTORS = {"low": 0.8, "moderate": 1.0, "high": 1.3, "ancient": 1.5}
SIZE_FACTORS = {
    "tiny": 0.5,
    "small": 0.7,
    "medium": 1.0,
    "large": 1.3,
    "huge": 1.6,
    "massive": 2.0,
}

DEFAULT_ASSET_TYPES = {
    "dragon": "creature",
    "phoenix": "creature",
    "unicorn": "creature",
    "sword": "weapon",
    "staff": "weapon",
    "bow": "weapon",
    "armor": "equipment",
    "shield": "equipment",
    "potion": "consumable",
    "scroll": "consumable",
    "gem": "treasure",
    "crystal": "treasure",
    "spell": "ability",
    "song": "media",
    "artwork": "collectible",
}
FALLBACK_ASSET_TYPE = "item"

ELEMENT_ABILITIES = {
    "fire": ["Fire_Blast", "Burn", "Heat_Aura"],
    "water": ["Water_Jet", "Heal", "Cleanse"],
    "earth": ["Stone_Armor", "Earthquake", "Root"],
    "wind": ["Gust", "Flight", "Speed_Boost"],
    "lightning": ["Lightning_Bolt", "Shock", "Chain_Lightning"],
    "ice": ["Freeze", "Ice_Shard", "Slow"],
    "nature": ["Grow", "Poison", "Regenerate"],
    "light": ["Heal", "Blind", "Purify"],
    "dark": ["Drain", "Fear", "Shadow"],
    "metal": ["Harden", "Conduct", "Magnetize"],
}

ARCHETYPE_ABILITIES = {
    "dragon": ["Dragon_Breath", "Flight", "Intimidate"],
    "phoenix": ["Rebirth", "Flight", "Fire_Immunity"],
    "unicorn": ["Heal", "Purify", "Magic_Horn"],
    "sword": ["Slash", "Parry", "Critical_Strike"],
    "staff": ["Magic_Missile", "Mana_Boost", "Spell_Focus"],
    "bow": ["Precise_Shot", "Multi_Shot", "Long_Range"],
    "shield": ["Block", "Reflect", "Protect_Ally"],
    "armor": ["Damage_Reduction", "Immunity", "Durability"],
    "potion": ["Instant_Effect", "Temporary_Boost", "Stack_Effect"],
}

# Multiplier applied to power_tier when a stat formula cannot be computed
DEFAULT_STAT_FACTORS = {
    "power": 0.8,
    "attack": 0.8,
    "strength": 0.8,
    "defense": 0.6,
    "health": 0.6,
    "speed": 0.5,
    "agility": 0.5,
    "magic": 0.7,
    "mana": 0.7,
}
DEFAULT_STAT_FACTOR = 0.5

# Archetype-keyed adjustments on top of the stat defaults
ARCHETYPE_STAT_BIAS = {
    "creature": {"health": 1.2, "attack": 1.1},
    "weapon": {"attack": 1.2, "power": 1.1, "defense": 0.8},
    "equipment": {"defense": 1.3, "health": 1.1},
    "consumable": {"magic": 1.1, "mana": 1.2},
}

DISPLAY_NAME_SUFFIXES = ("of Power", "of Legend", "of Ancient Times")
