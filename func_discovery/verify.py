"""
Checking a sequence against input/output pairs.

`test_all` is the all-or-nothing check used by the search. `verify` is the
reporting variant: every pair is evaluated on its own, so one pair failing
(out of tolerance or out of domain) says nothing about the others.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from func_discovery.config import TOLERANCE
from func_discovery.primitives import DomainError, integer_mask
from func_discovery.sequence import (
    Operation,
    apply,
    apply_array,
    as_sequence,
    to_float_array,
)

Pair = Tuple[float, float]
PairSet = Sequence[Pair]


@dataclass
class PairOutcome:
    """Verification outcome for a single (input, expected) pair."""
    input: float
    expected: float
    result: Optional[float]          # None when evaluation failed
    error: Optional[DomainError]     # Set when evaluation failed
    passed: bool

    @property
    def difference(self) -> Optional[float]:
        if self.result is None:
            return None
        return abs(self.result - self.expected)


def _split(pairs: Iterable[Pair]) -> Tuple[list, list]:
    inputs, expected = [], []
    for pair in pairs:
        try:
            value, output = pair
        except (TypeError, ValueError) as exc:
            raise ValueError(f"pairs must be (input, output) numbers: {exc}") from exc
        inputs.append(value)
        expected.append(output)
    return inputs, expected


def as_arrays(pairs: Iterable[Pair]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split a pair set into (inputs, expected outputs) float arrays.

    Integers beyond float range become +/-inf and so never match.
    """
    inputs, expected = _split(pairs)
    try:
        x, y = to_float_array(inputs), to_float_array(expected)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"pairs must be (input, output) numbers: {exc}") from exc
    if x.ndim != 1 or y.ndim != 1:
        raise ValueError("pairs must be (input, output) numbers")
    return x, y


def input_mask(pairs: Iterable[Pair]) -> np.ndarray:
    """Which pair inputs are integers (by type)."""
    inputs, _ = _split(pairs)
    return integer_mask(inputs)


def within_tolerance(result, expected, tolerance: float = TOLERANCE):
    """Elementwise |result - expected| < tolerance; nan/inf never pass."""
    with np.errstate(invalid="ignore", over="ignore"):
        return np.abs(np.asarray(result, dtype=float) - expected) < tolerance


def test_all(pairs: Iterable[Pair], sequence: Iterable[Operation],
             tolerance: float = TOLERANCE) -> bool:
    """True iff the sequence maps every input to its expected output."""
    pairs = list(pairs)
    x, y = as_arrays(pairs)
    try:
        results = apply_array(sequence, x, integral=input_mask(pairs))
    except DomainError:
        return False
    return bool(np.all(within_tolerance(results, y, tolerance)))


def verify(pairs: Iterable[Pair], sequence: Iterable[Operation],
           tolerance: float = TOLERANCE) -> List[PairOutcome]:
    """Evaluate every pair independently, in pair order."""
    sequence = as_sequence(sequence)
    pairs = list(pairs)
    inputs, _ = _split(pairs)
    _, y = as_arrays(pairs)
    outcomes = []
    for value, expected in zip(inputs, y.tolist()):
        try:
            result = float(to_float_array([apply(sequence, value)])[0])
        except DomainError as exc:
            outcomes.append(PairOutcome(value, expected, None, exc, False))
            continue
        passed = bool(within_tolerance(result, expected, tolerance))
        outcomes.append(PairOutcome(value, expected, result, None, passed))
    return outcomes


def check_operations(value: float, sequence: Iterable[Operation],
                     expected: float,
                     tolerance: float = TOLERANCE) -> PairOutcome:
    """Check one hand-written sequence on one input."""
    return verify([(value, expected)], sequence, tolerance)[0]
