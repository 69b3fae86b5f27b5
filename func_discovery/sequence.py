"""
Operation sequences: candidate functions written as left-to-right folds.

A sequence such as (Binary("mul", 2), Binary("add", 1)) denotes the
function x -> x * 2 + 1. Binary steps combine the running value (left
argument) with a fixed operand (right argument); unary steps transform the
running value alone. Order is significant.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from func_discovery.primitives import (
    RELATIONS,
    UNARY_FUNCTIONS,
    integer_mask,
    lookup_relation,
    lookup_unary,
)

ADDITIVE = "additive"
MULTIPLICATIVE = "multiplicative"

_FAMILIES = {
    "add": ADDITIVE,
    "sub": ADDITIVE,
    "mul": MULTIPLICATIVE,
    "div": MULTIPLICATIVE,
}


@dataclass(frozen=True)
class Binary:
    """Apply a binary relation with a fixed right operand."""

    op: str
    operand: float

    def __post_init__(self):
        try:
            relation = lookup_relation(self.op)
        except KeyError as exc:
            raise ValueError(str(exc)) from exc
        # Accept symbols ("*") but always store the canonical name
        object.__setattr__(self, "op", relation.name)

    @property
    def family(self) -> Optional[str]:
        return _FAMILIES[self.op]

    def apply(self, value, integral=None):
        return RELATIONS[self.op].forward(value, self.operand)

    def integral_after(self, integral: np.ndarray, result: np.ndarray) -> np.ndarray:
        """Integer-ness of the running value after this step."""
        if not isinstance(self.operand, (int, np.integer)):
            return np.zeros_like(integral, dtype=bool)
        if self.op == "div":
            return integral & _whole(result)
        return integral


@dataclass(frozen=True)
class Unary:
    """Apply a unary function to the running value."""

    op: str

    def __post_init__(self):
        try:
            func = lookup_unary(self.op)
        except KeyError as exc:
            raise ValueError(str(exc)) from exc
        object.__setattr__(self, "op", func.name)

    @property
    def family(self) -> Optional[str]:
        return None

    def apply(self, value, integral=None):
        return UNARY_FUNCTIONS[self.op](value, integral=integral)

    def integral_after(self, integral: np.ndarray, result: np.ndarray) -> np.ndarray:
        if self.op == "sqrt":
            return np.zeros_like(integral, dtype=bool)
        if self.op == "reciprocal":
            # 1 / x stays an integer only for x = 1 or x = -1
            return integral & _whole(result)
        return integral


def _whole(values: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore"):
        return np.isfinite(values) & (values == np.floor(values))


Operation = Union[Binary, Unary]
OperationSequence = Tuple[Operation, ...]


def as_sequence(operations: Iterable) -> OperationSequence:
    """
    Normalize a list or other iterable of operations into a tuple.

    Bare (symbol, operand) tuples such as ("*", 4) are read as binary steps.
    """
    sequence = []
    for op in operations:
        if isinstance(op, tuple) and len(op) == 2:
            op = Binary(*op)
        if not isinstance(op, (Binary, Unary)):
            raise TypeError(f"not an operation: {op!r}")
        sequence.append(op)
    return tuple(sequence)


def _to_float(value) -> float:
    try:
        return float(value)
    except OverflowError:
        # Integers beyond float range
        return math.inf if value > 0 else -math.inf


def to_float_array(values) -> np.ndarray:
    """Float array of values; integers too large for a float become +/-inf."""
    try:
        return np.array(values, dtype=float)
    except OverflowError:
        return np.array([_to_float(v) for v in values], dtype=float)


def step(op: Operation, values: np.ndarray, integral: np.ndarray):
    """One fold step over arrays; returns (values, integral) afterwards."""
    with np.errstate(all="ignore"):
        result = np.asarray(op.apply(values, integral=integral), dtype=float)
    return result, op.integral_after(integral, result)


def apply_array(sequence: Iterable[Operation], values, integral=None) -> np.ndarray:
    """
    Fold a sequence over an array of inputs.

    `integral` marks which inputs are integers; by default it follows the
    input types, so 3 is an integer and 3.0 is not. Raises DomainError if any
    step is undefined for any element; no partial result is returned.
    Overflow is not an error: it yields inf/nan, which never passes a
    tolerance check.
    """
    sequence = as_sequence(sequence)
    if integral is None:
        integral = integer_mask(values)
    result = to_float_array(values)
    integral = np.broadcast_to(np.asarray(integral, dtype=bool), result.shape).copy()
    for op in sequence:
        result, integral = step(op, result, integral)
    return result


def apply(sequence: Iterable[Operation], value):
    """Apply a sequence to a single input. The empty sequence is the identity."""
    sequence = as_sequence(sequence)
    if not sequence:
        return value
    return float(apply_array(sequence, [value])[0])
