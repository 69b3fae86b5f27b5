"""
Primitive operations — the alphabet from which operation sequences are built.

Binary operators are modelled as relations R(a, b, r) over
(left operand, right operand, result). Given any two of the three the
relation derives the third:

    forward(a, b)     -> r
    solve_left(b, r)  -> a
    solve_right(a, r) -> b

The evaluator only ever calls `forward` (the running value is `a`, the
stored operand is `b`), but the other two directions are kept so the same
relation can be used constraint-style.

Unary functions take the running value and return a new one. Everything
here accepts Python numbers or numpy arrays (broadcasting), so a sequence
can be evaluated over all inputs of a pair set at once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np
from scipy import special

from func_discovery.config import BINARY_OPERATORS, UNARY_OPERATORS


class DomainError(ArithmeticError):
    """An operation was evaluated outside its mathematical domain."""


def _any_zero(x) -> bool:
    return bool(np.any(np.asarray(x) == 0))


def integer_mask(values) -> np.ndarray:
    """
    Which values are integers by type, not merely whole-valued.

    Python and numpy ints count; floats never do, so 3.0 is not an integer.
    """
    if isinstance(values, np.ndarray):
        return np.full(values.shape, values.dtype.kind in "iub")
    if isinstance(values, (list, tuple)):
        return np.array([isinstance(v, (int, np.integer)) for v in values], dtype=bool)
    return np.asarray(isinstance(values, (int, np.integer)))


# ---------------------------------------------------------------------------
# Binary relations
# ---------------------------------------------------------------------------

def _add(a, b):
    return a + b


def _add_solve_left(b, r):
    return r - b


def _add_solve_right(a, r):
    return r - a


def _sub(a, b):
    return a - b


def _sub_solve_left(b, r):
    return r + b


def _sub_solve_right(a, r):
    return a - r


def _mul(a, b):
    return a * b


def _mul_solve_left(b, r):
    if _any_zero(b):
        raise DomainError("mul: cannot solve for the left operand when b = 0")
    return r / b


def _mul_solve_right(a, r):
    if _any_zero(a):
        raise DomainError("mul: cannot solve for the right operand when a = 0")
    return r / a


def _div(a, b):
    if _any_zero(b):
        raise DomainError("div: division by zero")
    return a / b


def _div_solve_left(b, r):
    return r * b


def _div_solve_right(a, r):
    if _any_zero(a) or _any_zero(r):
        raise DomainError("div: cannot solve for the divisor when a = 0 or r = 0")
    return a / r


@dataclass(frozen=True, slots=True)
class Relation:
    """A binary operator, solvable for any one of its three positions."""

    name: str
    symbol: str  # Symbol used by the textual notation, e.g. "+"
    forward: Callable
    solve_left: Callable
    solve_right: Callable

    def __call__(self, a, b):
        return self.forward(a, b)

    def solve(self, a=None, b=None, r=None):
        """Derive the single missing quantity of R(a, b, r)."""
        unbound = [name for name, v in (("a", a), ("b", b), ("r", r)) if v is None]
        if len(unbound) != 1:
            raise ValueError(
                f"{self.name}: exactly one of a, b, r must be unbound, "
                f"got {len(unbound)}"
            )
        if r is None:
            return self.forward(a, b)
        if a is None:
            return self.solve_left(b, r)
        return self.solve_right(a, r)

    def holds(self, a, b, r) -> bool:
        """Check a fully bound R(a, b, r)."""
        try:
            return bool(np.all(self.forward(a, b) == r))
        except DomainError:
            return False

    def __repr__(self) -> str:
        return f"Relation({self.name})"


# ---------------------------------------------------------------------------
# Unary functions
# ---------------------------------------------------------------------------

# 171! no longer fits in a float
_MAX_FACTORIAL = 170


def _exact_factorial(n: float) -> float:
    if n > _MAX_FACTORIAL:
        return math.inf
    return float(special.factorial(int(n), exact=True))


def _factorial(x):
    arr = np.asarray(x, dtype=float)
    if np.any(~np.isfinite(arr)) or np.any(arr < 0) or np.any(arr != np.floor(arr)):
        raise DomainError("factorial: defined only for non-negative integers")
    result = np.array([_exact_factorial(n) for n in arr.ravel().tolist()],
                      dtype=float).reshape(arr.shape)
    return result if result.ndim else float(result)


def _square(x):
    return x * x


def _sqrt(x):
    if np.any(np.asarray(x) < 0):
        raise DomainError("sqrt: negative input")
    return np.sqrt(x)


def _reciprocal(x):
    if _any_zero(x):
        raise DomainError("reciprocal: zero input")
    return 1 / x


@dataclass(frozen=True, slots=True)
class UnaryFunction:
    """A single-argument transformation of the running value."""

    name: str
    symbol: str
    func: Callable
    integer_only: bool = False  # Rejects floats even when whole-valued

    def __call__(self, x, integral=None):
        """
        Apply to x. `integral` says which entries are integers; when omitted
        it is taken from the type of x.
        """
        if self.integer_only:
            if integral is None:
                integral = integer_mask(x)
            if not np.all(integral):
                raise DomainError(f"{self.name}: defined only for integers")
        return self.func(x)

    def __repr__(self) -> str:
        return f"UnaryFunction({self.name})"


# ---------------------------------------------------------------------------
# Registries, ordered as the enumeration order in `config`
# ---------------------------------------------------------------------------

_RELATIONS = [
    Relation("add", "+", _add, _add_solve_left, _add_solve_right),
    Relation("sub", "-", _sub, _sub_solve_left, _sub_solve_right),
    Relation("mul", "*", _mul, _mul_solve_left, _mul_solve_right),
    Relation("div", "/", _div, _div_solve_left, _div_solve_right),
]

_UNARY_FUNCTIONS = [
    UnaryFunction("factorial", "!", _factorial, integer_only=True),
    UnaryFunction("square", "^2", _square),
    UnaryFunction("sqrt", "sqrt", _sqrt),
    UnaryFunction("abs", "abs", np.abs),
    UnaryFunction("neg", "neg", np.negative),
    UnaryFunction("reciprocal", "1/x", _reciprocal),
]

RELATIONS: dict[str, Relation] = {
    name: next(r for r in _RELATIONS if r.name == name) for name in BINARY_OPERATORS
}
UNARY_FUNCTIONS: dict[str, UnaryFunction] = {
    name: next(f for f in _UNARY_FUNCTIONS if f.name == name) for name in UNARY_OPERATORS
}


def _lookup(registry: dict, key: str, kind: str):
    if key in registry:
        return registry[key]
    for entry in registry.values():
        if entry.symbol == key:
            return entry
    raise KeyError(f"unknown {kind} operator: {key!r}")


def lookup_relation(key: str) -> Relation:
    """Find a relation by name ("mul") or symbol ("*")."""
    return _lookup(RELATIONS, key, "binary")


def lookup_unary(key: str) -> UnaryFunction:
    """Find a unary function by name ("square") or symbol ("^2")."""
    return _lookup(UNARY_FUNCTIONS, key, "unary")
