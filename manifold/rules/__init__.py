"""
Interpretation Rules - how each game reads an essence.

The rule engine:
1. Evaluates ordered condition tables
2. Computes stats with a sandboxed formula evaluator
3. Grants abilities, usage contexts and restrictions

Rule content may come from third-party game registrations, so formulas
are only ever evaluated by the restricted arithmetic parser.
"""

from .models import (
    EssenceCondition,
    PropertyMapping,
    StatCalculation,
    Rounding,
    AssetTypeRule,
    AbilityRule,
    InterpretationRules,
    default_rules,
    PropertySource,
    PropertyGeneration,
    AbilityGeneration,
    DisplayGeneration,
    ManifestationTemplate,
)
from .formula import FormulaEvaluator, FormulaContext, evaluate_formula
from .conditions import evaluate_condition, conditions_hold
from .engine import InterpretationRuleEngine, Interpretation

__all__ = [
    "EssenceCondition",
    "PropertyMapping",
    "StatCalculation",
    "Rounding",
    "AssetTypeRule",
    "AbilityRule",
    "InterpretationRules",
    "default_rules",
    "PropertySource",
    "PropertyGeneration",
    "AbilityGeneration",
    "DisplayGeneration",
    "ManifestationTemplate",
    "FormulaEvaluator",
    "FormulaContext",
    "evaluate_formula",
    "evaluate_condition",
    "conditions_hold",
    "InterpretationRuleEngine",
    "Interpretation",
]
