"""
Validation report types.

Errors carry a severity; only critical errors make a report invalid. Warnings
are advisory and carry a recommendation.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ConsistencyError:
    field: str
    code: str
    message: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True)
class ConsistencyWarning:
    field: str
    code: str
    message: str
    recommendation: str | None = None


@dataclass
class ValidationReport:
    """Result of a consistency check, with errors and warnings."""
    errors: list[ConsistencyError] = field(default_factory=list)
    warnings: list[ConsistencyWarning] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.critical_errors

    @property
    def critical_errors(self) -> list[ConsistencyError]:
        return [e for e in self.errors if e.severity == Severity.CRITICAL]

    def error(self, field: str, code: str, message: str, critical: bool = False):
        severity = Severity.CRITICAL if critical else Severity.ERROR
        self.errors.append(ConsistencyError(field, code, message, severity))

    def warn(self, field: str, code: str, message: str, recommendation: str | None = None):
        self.warnings.append(ConsistencyWarning(field, code, message, recommendation))

    def merge(self, other: ValidationReport, prefix: str = "", include_warnings: bool = True):
        """Add another report's findings, optionally prefixing their fields."""
        for error in other.errors:
            self.errors.append(replace(error, field=_prefixed(prefix, error.field)))
        if include_warnings:
            for warning in other.warnings:
                self.warnings.append(replace(warning, field=_prefixed(prefix, warning.field)))

    def has_code(self, code: str) -> bool:
        return any(item.code == code for item in [*self.errors, *self.warnings])

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": [
                {"field": e.field, "code": e.code, "message": e.message, "severity": e.severity.value}
                for e in self.errors
            ],
            "warnings": [
                {"field": w.field, "code": w.code, "message": w.message,
                 "recommendation": w.recommendation}
                for w in self.warnings
            ],
        }


def _prefixed(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name
