from .report import Severity, ConsistencyError, ConsistencyWarning, ValidationReport
from .validator import ConsistencyValidator

__all__ = [
    "Severity",
    "ConsistencyError",
    "ConsistencyWarning",
    "ValidationReport",
    "ConsistencyValidator",
]
