from .models import (
    GameVariant,
    VariantDisplay,
    VariantMechanics,
    VariantCompatibility,
    VariantStatus,
    StatusState,
    status_state,
    can_transition,
)
from .generator import VariantGenerator, VariantGeneration, validate_variant_data
from .conversion import ConversionEngine, ConversionOptions, ConversionResult

__all__ = [
    "GameVariant",
    "VariantDisplay",
    "VariantMechanics",
    "VariantCompatibility",
    "VariantStatus",
    "StatusState",
    "status_state",
    "can_transition",
    "VariantGenerator",
    "VariantGeneration",
    "validate_variant_data",
    "ConversionEngine",
    "ConversionOptions",
    "ConversionResult",
]
