"""
Candidate generation: every operation sequence of a given length.

Each position independently picks one choice from a fixed, ordered choice
set: the binary choices in (operator, operand) order, then the unary
choices. Sequences are produced in nested order, first position outermost,
so the same length always yields the same candidates in the same order.
The search returns the first match under this order.
"""

from __future__ import annotations

import itertools
from functools import lru_cache
from typing import Iterator, Tuple

import numpy as np

from func_discovery.config import (
    BINARY_OPERATORS,
    DECIMAL_DIGITS,
    DECIMAL_INT_PART_RANGE,
    INTEGER_OPERAND_RANGE,
    UNARY_OPERATORS,
)
from func_discovery.sequence import Binary, Operation, OperationSequence, Unary


@lru_cache(maxsize=None)
def operand_alphabet() -> Tuple[float, ...]:
    """
    Ordered operands for binary choices.

    Integers in INTEGER_OPERAND_RANGE, then IntPart + DecPart / 10 with
    IntPart as the outer loop. Zero is never emitted. The decimal grid
    repeats the small integers; only their first occurrence is kept.
    """
    lo, hi = INTEGER_OPERAND_RANGE
    integers = np.arange(lo, hi + 1, dtype=float)

    int_lo, int_hi = DECIMAL_INT_PART_RANGE
    int_parts = np.arange(int_lo, int_hi + 1, dtype=float)
    digits = np.arange(DECIMAL_DIGITS, dtype=float) / DECIMAL_DIGITS
    decimals = np.round((int_parts[:, None] + digits[None, :]).ravel(), 1)

    seen = set()
    alphabet = []
    for value in np.concatenate([integers, decimals]).tolist():
        if value == 0 or value in seen:
            continue
        seen.add(value)
        alphabet.append(int(value) if value.is_integer() else value)
    return tuple(alphabet)


@lru_cache(maxsize=None)
def choice_set() -> Tuple[Operation, ...]:
    """All choices for a single position, in enumeration order."""
    binaries = tuple(
        Binary(op, operand)
        for op in BINARY_OPERATORS
        for operand in operand_alphabet()
    )
    unaries = tuple(Unary(op) for op in UNARY_OPERATORS)
    return binaries + unaries


def generate(length: int) -> Iterator[OperationSequence]:
    """Lazily yield every sequence of exactly `length` operations."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    return itertools.product(choice_set(), repeat=length)


def count_candidates(length: int) -> int:
    """Size of the candidate space for a given length."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    return len(choice_set()) ** length
