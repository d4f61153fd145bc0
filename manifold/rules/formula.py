"""
Restricted Formula Evaluator for stat calculations.

Evaluates arithmetic formulas such as "power_tier * rarity_multiplier + 10"
against a fixed set of numeric variables.

Supports:
- Numeric literals: 3, 2.5, .75
- Variables: names present in the evaluation context
- Arithmetic: +, -, *, / and parentheses
- Unary sign: -power_tier, +3

Anything else (attribute access, calls, exponentiation, strings, unknown
names) is rejected with FormulaError. Formulas are parsed by a small
recursive-descent parser and never handed to the Python interpreter.

Grammar:
    expr   := term (("+" | "-") term)*
    term   := factor (("*" | "/") factor)*
    factor := ("+" | "-") factor | NUMBER | NAME | "(" expr ")"
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math
import re

from ..errors import FormulaError


MAX_FORMULA_LENGTH = 512

_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<number>\d+\.\d*|\.\d+|\d+)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>[-+*/()])"
    r")"
)


@dataclass(frozen=True)
class Token:
    kind: str  # "number", "name", "op", "end"
    text: str
    position: int


@dataclass
class FormulaContext:
    """
    Variables available to a formula.

    Only numeric values are accepted; the variable set is fixed when the
    context is built.
    """
    variables: dict[str, float] = field(default_factory=dict)

    def get_variable(self, name: str) -> float:
        if name not in self.variables:
            raise KeyError(name)
        return self.variables[name]


def tokenize(formula: str) -> list[Token]:
    """Split a formula into tokens, rejecting any unsupported character."""
    tokens: list[Token] = []
    position = 0
    length = len(formula)

    while position < length:
        if formula[position:].strip() == "":
            break
        match = _TOKEN_RE.match(formula, position)
        if not match or match.end() == position:
            bad = formula[position:].lstrip()[:1]
            raise FormulaError(formula, f"unsupported token '{bad}' at {position}")
        kind = match.lastgroup
        tokens.append(Token(kind=kind, text=match.group(kind), position=match.start(kind)))
        position = match.end()

    tokens.append(Token(kind="end", text="", position=length))
    return tokens


class FormulaEvaluator:
    """
    Parses and evaluates a single formula.

    Usage:
        evaluator = FormulaEvaluator()
        evaluator.evaluate("power_tier * 2", FormulaContext({"power_tier": 50}))
    """

    def evaluate(self, formula: str, context: FormulaContext) -> float:
        """
        Evaluate a formula.

        Args:
            formula: Arithmetic expression
            context: Variables the formula may reference

        Returns:
            Numeric result

        Raises:
            FormulaError: on any unsupported token, unknown variable,
                malformed expression or division by zero
        """
        if not isinstance(formula, str) or not formula.strip():
            raise FormulaError(str(formula), "empty formula")
        if len(formula) > MAX_FORMULA_LENGTH:
            raise FormulaError(formula[:32] + "...", "formula too long")

        self._formula = formula
        self._context = context
        self._tokens = tokenize(formula)
        self._index = 0

        try:
            result = self._parse_expr()
        except OverflowError:
            raise FormulaError(formula, "numeric overflow")
        if self._peek().kind != "end":
            token = self._peek()
            raise FormulaError(formula, f"unexpected '{token.text}' at {token.position}")

        try:
            finite = math.isfinite(result)
        except OverflowError:
            raise FormulaError(formula, "numeric overflow")
        if not finite:
            raise FormulaError(formula, "result is not finite")
        return result

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _parse_expr(self) -> float:
        value = self._parse_term()
        while self._peek().kind == "op" and self._peek().text in "+-":
            op = self._advance().text
            right = self._parse_term()
            value = value + right if op == "+" else value - right
        return value

    def _parse_term(self) -> float:
        value = self._parse_factor()
        while self._peek().kind == "op" and self._peek().text in "*/":
            op = self._advance().text
            right = self._parse_factor()
            if op == "*":
                value = value * right
            else:
                if right == 0:
                    raise FormulaError(self._formula, "division by zero")
                value = value / right
        return value

    def _parse_factor(self) -> float:
        token = self._advance()

        if token.kind == "op" and token.text in "+-":
            operand = self._parse_factor()
            return -operand if token.text == "-" else operand

        if token.kind == "number":
            return float(token.text) if "." in token.text else int(token.text)

        if token.kind == "name":
            try:
                value = self._context.get_variable(token.text)
            except KeyError:
                raise FormulaError(self._formula, f"unknown variable '{token.text}'")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise FormulaError(self._formula, f"variable '{token.text}' is not numeric")
            return value

        if token.kind == "op" and token.text == "(":
            value = self._parse_expr()
            closing = self._advance()
            if closing.kind != "op" or closing.text != ")":
                raise FormulaError(self._formula, f"expected ')' at {closing.position}")
            return value

        if token.kind == "end":
            raise FormulaError(self._formula, "unexpected end of formula")
        raise FormulaError(self._formula, f"unexpected '{token.text}' at {token.position}")


# Convenience function
def evaluate_formula(formula: str, variables: dict[str, float]) -> float:
    """
    Evaluate a formula against a variable mapping.

    Args:
        formula: Arithmetic expression
        variables: Numeric variables the formula may reference

    Returns:
        Evaluated value
    """
    return FormulaEvaluator().evaluate(formula, FormulaContext(variables=dict(variables)))
