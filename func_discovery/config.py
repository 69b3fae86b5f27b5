"""
Search configuration — the operator alphabet and tuning knobs.

The alphabet is fixed: extending it means extending these constants and
adding the matching relation or unary function in `primitives`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Absolute tolerance; a result passes when |result - expected| < TOLERANCE
TOLERANCE = 1e-4

DEFAULT_MAX_DEPTH = 5

# Enumeration order matters: the first matching sequence wins
BINARY_OPERATORS = ("add", "sub", "mul", "div")
UNARY_OPERATORS = ("factorial", "square", "sqrt", "abs", "neg", "reciprocal")

# Operands: integers in [-10, 10], then IntPart + DecPart / 10
INTEGER_OPERAND_RANGE = (-10, 10)
DECIMAL_INT_PART_RANGE = (-50, 50)
DECIMAL_DIGITS = 10


@dataclass
class SearchConfig:
    """Configuration for the iterative-deepening search."""
    max_depth: int = DEFAULT_MAX_DEPTH       # Longest sequence tried
    tolerance: float = TOLERANCE             # Absolute match tolerance
    max_candidates: Optional[int] = None     # Step budget (None = unbounded)
    timeout: Optional[float] = None          # Seconds (None = no deadline)
    vectorized: bool = True                  # Sweep the last position with numpy
    verbose: bool = False

    def __post_init__(self):
        assert self.max_depth >= 0, "max_depth must be non-negative"
        assert self.tolerance > 0, "tolerance must be positive"
        if self.max_candidates is not None:
            assert self.max_candidates > 0, "max_candidates must be positive"
        if self.timeout is not None:
            assert self.timeout > 0, "timeout must be positive"
