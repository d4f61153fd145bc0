"""
Service Models - request and result types for the AssetService facade.

These define the in-process contract between callers (asset creation,
discovery, ownership) and the engine. Every operation answers with an
OperationResult; the engine's exceptions never leak through the facade.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    FORMAT_ERROR = "FORMAT_ERROR"
    THRESHOLD_ERROR = "THRESHOLD_ERROR"
    STATUS_ERROR = "STATUS_ERROR"


# =============================================================================
# Requests
# =============================================================================

@dataclass
class CreateVariantRequest:
    """Create a variant for one game from an essence (model or raw dict)."""
    essence: Any
    game_id: str
    asset_type: str | None = None
    customizations: dict[str, Any] | None = None
    validate: bool = True


@dataclass
class ConvertVariantRequest:
    source_variant: Any
    essence: Any
    target_game_id: str
    preserve_properties: list[str] = field(default_factory=list)
    accept_property_loss: bool = False
    quality_threshold: float | None = None


@dataclass
class RankCandidatesRequest:
    """Rank candidate essences by compatibility with a reference essence."""
    reference: Any
    candidates: list[Any] = field(default_factory=list)
    limit: int | None = None


# =============================================================================
# Results
# =============================================================================

@dataclass
class OperationResult:
    """
    Outcome of a service call.

    On failure value is None and error_code names the failure class.
    """
    success: bool
    value: Any = None
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    error_code: str | None = None

    @classmethod
    def ok(cls, value: Any, warnings: list[str] | None = None) -> OperationResult:
        return cls(success=True, value=value, warnings=warnings or [])

    @classmethod
    def fail(cls, code: ErrorCode, message: str, details: list[str] | None = None) -> OperationResult:
        return cls(success=False, errors=[message, *(details or [])], error_code=code.value)
