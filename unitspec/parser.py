"""
Unit Expression Parser
======================

Turns text like "10 kg*m/s^2" into a Quantity.

Grammar:
    quantity := number (WS+ expr)? | expr
    expr     := term (("*" | "/") term)*
    term     := atom ("^" signed_int)?
    atom     := unit_name | "1" | "(" expr ")"

"^" binds tighter than "*" and "/", which share precedence and associate
left to right: "J/kg/K" is (J/kg)/K. "**" is accepted for "^" and "·" for "*".
Evaluation is incremental, one term at a time, starting from the first
term's unit. Names are resolved through the registry (aliases, custom
definitions, prefixes).

Usage:
    >>> parser = UnitExpressionParser(registry)
    >>> parser.parse("100 km/hr").unit.dims
    L * T^-1
    >>> parser.parse_unit("km").scale
    1000.0
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from unitspec.errors import UnitSyntaxError
from unitspec.units import Quantity, Unit

Resolver = Callable[[str], Unit]

_NUMBER = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
_NAME_EXTRA = "_%°'\""
MAX_NESTING = 64


@dataclass(frozen=True)
class Token:
    kind: str      # 'name', 'number', 'op'
    text: str
    position: int


def tokenize(text: str, start: int = 0) -> List[Token]:
    """Split `text[start:]` into tokens; positions index into `text`."""
    tokens = []
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch == '*' and text.startswith('**', i):
            tokens.append(Token('op', '^', i))
            i += 2
        elif ch in '*/^()+-':
            tokens.append(Token('op', ch, i))
            i += 1
        elif ch == '·':
            tokens.append(Token('op', '*', i))
            i += 1
        elif ch.isdigit() or ch == '.':
            match = _NUMBER.match(text, i)
            if match is None:
                raise UnitSyntaxError(i, "malformed number", text)
            tokens.append(Token('number', match.group(), i))
            i = match.end()
        elif ch.isalpha() or ch in _NAME_EXTRA:
            j = i + 1
            while j < n and (text[j].isalnum() or text[j] in _NAME_EXTRA):
                j += 1
            tokens.append(Token('name', text[i:j], i))
            i = j
        else:
            raise UnitSyntaxError(i, f"unexpected character '{ch}'", text)
    return tokens


class _ExpressionEvaluator:
    """Recursive descent over tokens, composing units as it goes."""

    def __init__(self, text: str, tokens: List[Token], resolve: Resolver):
        self.text = text
        self.tokens = tokens
        self.resolve = resolve
        self.index = 0
        self.depth = 0

    def _peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _next(self, expected: str) -> Token:
        token = self._peek()
        if token is None:
            raise UnitSyntaxError(len(self.text), f"expected {expected}, found end of input", self.text)
        self.index += 1
        return token

    def _is_op(self, token: Optional[Token], ops: str) -> bool:
        return token is not None and token.kind == 'op' and token.text in ops

    def run(self) -> Unit:
        unit = self.expr()
        leftover = self._peek()
        if leftover is not None:
            raise UnitSyntaxError(leftover.position, f"unexpected '{leftover.text}'", self.text)
        return unit

    def expr(self) -> Unit:
        unit = self.term()
        while self._is_op(self._peek(), '*/'):
            op = self._next("operator").text
            rhs = self.term()
            unit = unit.multiply(rhs) if op == '*' else unit.divide(rhs)
        return unit

    def term(self) -> Unit:
        unit = self.atom()
        if self._is_op(self._peek(), '^'):
            self.index += 1
            unit = unit.power(self.signed_int())
        return unit

    def atom(self) -> Unit:
        token = self._next("unit name")
        if token.kind == 'name':
            return self.resolve(token.text)
        if token.kind == 'number':
            if token.text == '1':
                return Unit.dimensionless()
            raise UnitSyntaxError(token.position, "numeric factor inside unit expression", self.text)
        if token.text == '(':
            if self.depth >= MAX_NESTING:
                raise UnitSyntaxError(token.position, "expression nested too deeply", self.text)
            self.depth += 1
            unit = self.expr()
            self.depth -= 1
            closing = self._next("')'")
            if not self._is_op(closing, ')'):
                raise UnitSyntaxError(closing.position, "expected ')'", self.text)
            return unit
        raise UnitSyntaxError(token.position, f"expected unit name, found '{token.text}'", self.text)

    def signed_int(self) -> int:
        token = self._next("exponent")
        sign = 1
        if self._is_op(token, '+-'):
            sign = -1 if token.text == '-' else 1
            token = self._next("exponent")
        if token.kind != 'number':
            raise UnitSyntaxError(token.position, "expected integer exponent", self.text)
        if not token.text.isdigit():
            raise UnitSyntaxError(token.position, "exponent must be an integer", self.text)
        return sign * int(token.text)


def evaluate_expression(text: str, resolve: Resolver, start: int = 0) -> Unit:
    """
    Evaluate a unit expression (no leading number) starting at `start`.

    Compound expressions get their source text, without whitespace, as name.

    Raises:
        UnitSyntaxError: Malformed expression
        UnknownUnitSymbol: A name does not resolve
        AffineCompositionError: Affine/functional unit in a multi-term expression
    """
    tokens = tokenize(text, start)
    if not tokens:
        raise UnitSyntaxError(start, "empty unit expression", text)
    evaluator = _ExpressionEvaluator(text, tokens, resolve)
    unit = evaluator.run()
    if len(tokens) > 1:
        unit = unit.renamed(''.join(text[start:].split()))
    return unit


def parse_quantity(text: str, resolve: Resolver) -> Quantity:
    """
    Parse "number WS+ expr", a bare number, or a bare expression.

    A bare expression has value 1.0; a bare number is dimensionless.
    """
    if not text or not text.strip():
        raise UnitSyntaxError(0, "empty input", text)

    lead = len(text) - len(text.lstrip())
    match = _NUMBER.match(text, lead)
    if match is None:
        if text[lead] in '+-.' or text[lead].isdigit():
            raise UnitSyntaxError(lead, "malformed number", text)
        return Quantity(1.0, evaluate_expression(text, resolve, lead))

    value = float(match.group())
    end = match.end()
    rest = text[end:]
    if not rest.strip():
        return Quantity(value, Unit.dimensionless())
    if not rest[0].isspace():
        raise UnitSyntaxError(end, "expected whitespace between number and unit", text)
    return Quantity(value, evaluate_expression(text, resolve, end))


# =============================================================================
# PARSER
# =============================================================================

class UnitExpressionParser:
    """
    Parser bound to one registry.

    Cheap to construct; take a fresh one per operation when the registry
    may be reloaded.
    """

    def __init__(self, registry):
        self.registry = registry

    def parse(self, text: str) -> Quantity:
        return parse_quantity(text, self.registry.resolve)

    def parse_unit(self, text: str) -> Unit:
        if not text or not text.strip():
            raise UnitSyntaxError(0, "empty input", text)
        return evaluate_expression(text, self.registry.resolve)


__all__ = [
    'UnitExpressionParser', 'Token', 'tokenize',
    'evaluate_expression', 'parse_quantity',
]
