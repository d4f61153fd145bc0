"""
Game variant models - a game-specific manifestation of an essence.

The schema here is structural only. The active+deprecated status combination
is representable so the consistency validator can report it; the generator
refuses to produce it.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class VariantDisplay(BaseModel):
    """Display information."""
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    animation_url: Optional[str] = None
    model_url: Optional[str] = None

    @field_validator("image_url", "animation_url", "model_url")
    @classmethod
    def _check_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return value


class VariantMechanics(BaseModel):
    """Game mechanics."""
    usable_in: list[str] = Field(default_factory=list)
    abilities: Optional[list[str]] = None
    restrictions: Optional[list[str]] = None
    cooldown: Optional[float] = Field(None, ge=0)
    durability: Optional[float] = Field(None, ge=0)


class VariantCompatibility(BaseModel):
    """Game version and feature compatibility."""
    min_game_version: str = "1.0.0"
    max_game_version: Optional[str] = None
    required_features: Optional[list[str]] = None
    incompatible_with: Optional[list[str]] = None


class VariantStatus(BaseModel):
    active: bool = True
    deprecated: bool = False
    migration_target: Optional[str] = None


class GameVariant(BaseModel):
    """A game-specific manifestation (stat block, abilities, display)."""
    game_id: str = Field(min_length=1)
    asset_type: str = Field(min_length=1)
    properties: dict[str, Any] = Field(default_factory=dict)
    display: VariantDisplay = Field(default_factory=VariantDisplay)
    mechanics: VariantMechanics = Field(default_factory=VariantMechanics)
    compatibility: VariantCompatibility = Field(default_factory=VariantCompatibility)
    status: VariantStatus = Field(default_factory=VariantStatus)


# =============================================================================
# Status state machine
# =============================================================================

class StatusState(str, Enum):
    """Variant lifecycle states."""
    ACTIVE = "active"
    DEPRECATED = "deprecated"
    INACTIVE = "inactive"  # neither flag set
    ACTIVE_DEPRECATED = "active_deprecated"  # forbidden


FORBIDDEN_STATES = {StatusState.ACTIVE_DEPRECATED}

ALLOWED_TRANSITIONS = {
    (StatusState.ACTIVE, StatusState.DEPRECATED),
    (StatusState.DEPRECATED, StatusState.ACTIVE),
    (StatusState.INACTIVE, StatusState.ACTIVE),
    (StatusState.INACTIVE, StatusState.DEPRECATED),
}


def status_state(status: VariantStatus) -> StatusState:
    """Map status flags to a lifecycle state."""
    if status.active and status.deprecated:
        return StatusState.ACTIVE_DEPRECATED
    if status.active:
        return StatusState.ACTIVE
    if status.deprecated:
        return StatusState.DEPRECATED
    return StatusState.INACTIVE


def can_transition(current: StatusState, target: StatusState) -> bool:
    return (current, target) in ALLOWED_TRANSITIONS
