"""
Folding runs of commutative binary steps in a sequence.

A run is a maximal stretch of consecutive operations from one family:
additive (add/sub) or multiplicative (mul/div). Each run of two or more
operations collapses into a single operation with the same effect; runs of
one operation and every operation outside the family are left untouched,
and nothing is reordered or dropped.
"""

from __future__ import annotations

from itertools import groupby
from typing import Callable, Iterable, List

from func_discovery.primitives import DomainError
from func_discovery.sequence import (
    ADDITIVE,
    MULTIPLICATIVE,
    Binary,
    Operation,
    OperationSequence,
    as_sequence,
)


def _combine_runs(sequence: Iterable[Operation], family: str,
                  combine: Callable[[List[Binary]], Binary]) -> OperationSequence:
    result = []
    for in_family, run in groupby(as_sequence(sequence),
                                  key=lambda op: op.family == family):
        run = list(run)
        if in_family and len(run) > 1:
            result.append(combine(run))
        else:
            result.extend(run)
    return tuple(result)


def _net_additive(run: List[Binary]) -> Binary:
    net = 0
    for op in run:
        net = net + op.operand if op.op == "add" else net - op.operand
    # A zero net value stays as an explicit "add 0"
    if net >= 0:
        return Binary("add", net)
    return Binary("sub", abs(net))


def _net_multiplicative(run: List[Binary]) -> Binary:
    multiplier = 1
    for op in run:
        if op.op == "mul":
            multiplier = multiplier * op.operand
        elif op.operand == 0:
            raise DomainError("div: division by zero while combining a run")
        else:
            multiplier = multiplier / op.operand

    if multiplier == 1:
        return Binary("mul", 1)
    if multiplier > 1:
        return Binary("mul", multiplier)
    if multiplier > 0:
        return Binary("div", 1 / multiplier)
    # Negative or zero multipliers pass through as a plain multiply
    return Binary("mul", multiplier)


def combine_add_sub(sequence: Iterable[Operation]) -> OperationSequence:
    """Collapse each run of add/sub into one add (net >= 0) or sub."""
    return _combine_runs(sequence, ADDITIVE, _net_additive)


def combine_mult_div(sequence: Iterable[Operation]) -> OperationSequence:
    """Collapse each run of mul/div into one mul or div."""
    return _combine_runs(sequence, MULTIPLICATIVE, _net_multiplicative)


def simplify_operations(sequence: Iterable[Operation]) -> OperationSequence:
    """Additive folding only."""
    return combine_add_sub(sequence)


def full_simplify(sequence: Iterable[Operation]) -> OperationSequence:
    """Additive folding followed by multiplicative folding."""
    return combine_mult_div(combine_add_sub(sequence))
