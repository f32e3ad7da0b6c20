"""
Functional Unit Expressions
===========================

Sandboxed evaluator for one-variable expressions used by functional custom
units, e.g. a decibel-milliwatt scale:

    >>> f = compile_expression("10^(x/10)")
    >>> f(20.0)
    100.0

The source is parsed with `ast` and every node is checked against a fixed
whitelist before anything is evaluated. Allowed:

    numbers, the variable, constants (pi, e, tau)
    + - * / ^ (or **), unary + and -, parentheses
    exp(), ln(), log10(), log2(), sqrt(), abs()

No attribute access, subscripts, comparisons, keyword arguments or names
outside the tables above. Works element-wise on numpy arrays.
"""

import ast
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Union

import numpy as np

from unitspec.errors import ExpressionEvaluationError


MAX_EXPRESSION_LENGTH = 512

CONSTANTS: Dict[str, float] = {
    'pi': math.pi,
    'e': math.e,
    'tau': math.tau,
}

FUNCTIONS: Dict[str, Callable] = {
    'exp': np.exp,
    'ln': np.log,
    'log10': np.log10,
    'log2': np.log2,
    'sqrt': np.sqrt,
    'abs': np.abs,
}

_BINARY_OPS = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
    ast.Pow: lambda a, b: a ** b,
}

_UNARY_OPS = {
    ast.UAdd: lambda a: +a,
    ast.USub: lambda a: -a,
}

Number = Union[float, np.ndarray]


@dataclass(frozen=True)
class CompiledExpression:
    """A validated expression ready to evaluate for one variable."""
    source: str
    variable: str = 'x'
    _tree: ast.expr = field(default=None, repr=False, compare=False)

    def __call__(self, value: Number) -> Number:
        return self.evaluate(value)

    def evaluate(self, value: Number) -> Number:
        if isinstance(value, np.ndarray):
            value = value.astype(float)
        else:
            value = float(value)
        try:
            with np.errstate(all='raise'):
                result = _eval(self._tree, value, self.variable)
        except ZeroDivisionError:
            raise ExpressionEvaluationError(self.source, "division by zero") from None
        except OverflowError:
            raise ExpressionEvaluationError(self.source, "numeric overflow") from None
        except (FloatingPointError, ValueError, TypeError) as e:
            raise ExpressionEvaluationError(self.source, str(e) or "invalid value") from None

        if isinstance(result, complex):
            raise ExpressionEvaluationError(self.source, "complex result")
        if isinstance(result, np.ndarray):
            if not np.all(np.isfinite(result)):
                raise ExpressionEvaluationError(self.source, "non-finite result")
            return result
        result = float(result)
        if not math.isfinite(result):
            raise ExpressionEvaluationError(self.source, "non-finite result")
        return result


def compile_expression(source: str, variable: str = 'x') -> CompiledExpression:
    """
    Parse and validate an expression.

    Raises:
        ExpressionEvaluationError: If the text is too long, does not parse,
            or uses anything outside the whitelist
    """
    text = source.strip()
    if not text:
        raise ExpressionEvaluationError(source, "empty expression")
    if len(text) > MAX_EXPRESSION_LENGTH:
        raise ExpressionEvaluationError(source, f"longer than {MAX_EXPRESSION_LENGTH} characters")
    if variable in CONSTANTS or variable in FUNCTIONS:
        raise ExpressionEvaluationError(source, f"variable name '{variable}' is reserved")

    try:
        tree = ast.parse(text.replace('^', '**'), mode='eval')
    except (SyntaxError, RecursionError, MemoryError) as e:
        raise ExpressionEvaluationError(source, f"invalid syntax ({e.__class__.__name__})") from None

    _validate(tree.body, source, variable)
    return CompiledExpression(source=text, variable=variable, _tree=tree.body)


# =============================================================================
# VALIDATION / EVALUATION
# =============================================================================

def _validate(node: ast.AST, source: str, variable: str) -> None:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ExpressionEvaluationError(source, f"literal {node.value!r} not allowed")
    elif isinstance(node, ast.Name):
        if node.id != variable and node.id not in CONSTANTS:
            raise ExpressionEvaluationError(source, f"unknown name '{node.id}'")
    elif isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPS:
            raise ExpressionEvaluationError(source, f"operator {node.op.__class__.__name__} not allowed")
        _validate(node.left, source, variable)
        _validate(node.right, source, variable)
    elif isinstance(node, ast.UnaryOp):
        if type(node.op) not in _UNARY_OPS:
            raise ExpressionEvaluationError(source, f"operator {node.op.__class__.__name__} not allowed")
        _validate(node.operand, source, variable)
    elif isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in FUNCTIONS:
            raise ExpressionEvaluationError(source, "only exp, ln, log10, log2, sqrt and abs may be called")
        if node.keywords or len(node.args) != 1:
            raise ExpressionEvaluationError(source, f"{node.func.id}() takes exactly one argument")
        _validate(node.args[0], source, variable)
    else:
        raise ExpressionEvaluationError(source, f"{node.__class__.__name__} not allowed")


def _eval(node: ast.AST, value: Number, variable: str) -> Number:
    if isinstance(node, ast.Constant):
        # Floats only: 9**9**9 must overflow, not build a huge integer
        return float(node.value)
    if isinstance(node, ast.Name):
        return value if node.id == variable else CONSTANTS[node.id]
    if isinstance(node, ast.BinOp):
        left = _eval(node.left, value, variable)
        right = _eval(node.right, value, variable)
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp):
        return _UNARY_OPS[type(node.op)](_eval(node.operand, value, variable))
    if isinstance(node, ast.Call):
        result = FUNCTIONS[node.func.id](_eval(node.args[0], value, variable))
        return result if isinstance(result, np.ndarray) else float(result)
    raise TypeError(f"{node.__class__.__name__} not allowed")


__all__ = [
    'CompiledExpression', 'compile_expression',
    'CONSTANTS', 'FUNCTIONS', 'MAX_EXPRESSION_LENGTH',
]
