"""
Error taxonomy for the manifestation engine.

- FormatError: a produced object fails its structural schema. Always fatal.
- RuleEvaluationError: a single formula or condition failed. Recovered
  locally by the rule engine, which records a warning instead.
- ThresholdError: conversion quality below the caller's minimum.
"""

from __future__ import annotations
from typing import Any


class ManifoldError(Exception):
    """Base class for engine errors."""


class FormatError(ManifoldError):
    """Raised when an object fails schema validation."""

    def __init__(self, field: str, message: str, errors: list[dict[str, Any]] | None = None):
        self.field = field
        self.errors = errors or []
        super().__init__(f"Invalid '{field}': {message}")

    @classmethod
    def from_validation_error(cls, exc, prefix: str = "") -> FormatError:
        """Build from a pydantic ValidationError, naming the first bad field."""
        details = exc.errors()
        first = details[0] if details else {}
        loc = ".".join(str(part) for part in first.get("loc", ()))
        field = f"{prefix}.{loc}" if prefix and loc else (loc or prefix or "schema")
        return cls(field, first.get("msg", str(exc)), errors=details)


class RuleEvaluationError(ManifoldError):
    """Raised when a rule, condition or mapping cannot be evaluated."""


class FormulaError(RuleEvaluationError):
    """Raised when a stat formula is malformed or cannot be computed."""

    def __init__(self, formula: str, reason: str):
        self.formula = formula
        self.reason = reason
        super().__init__(f"Formula '{formula}' failed: {reason}")


class ThresholdError(ManifoldError):
    """Raised when a conversion does not meet the requested quality."""

    def __init__(self, quality: float, threshold: float):
        self.quality = quality
        self.threshold = threshold
        super().__init__(
            f"Conversion quality {quality:.3f} below threshold {threshold:.3f}"
        )


class StatusTransitionError(ManifoldError):
    """Raised when a variant status change is not an allowed transition."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move variant status from {current} to {target}")
