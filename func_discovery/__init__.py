"""
Function discovery by enumerating short operation sequences.

Given input/output pairs, finds the first sequence of elementary steps
(add/sub/mul/div by a constant, factorial, square, sqrt, abs, neg,
reciprocal) that maps every input to its output within a fixed absolute
tolerance, trying shorter sequences first.
"""

from func_discovery.config import DEFAULT_MAX_DEPTH, TOLERANCE, SearchConfig
from func_discovery.primitives import (
    RELATIONS,
    UNARY_FUNCTIONS,
    DomainError,
    Relation,
    UnaryFunction,
)
from func_discovery.sequence import Binary, Unary, Operation, OperationSequence, apply
from func_discovery.generator import choice_set, generate, operand_alphabet
from func_discovery.verify import PairOutcome, check_operations, test_all, verify
from func_discovery.search import (
    DepthSearch,
    SearchBudgetExceeded,
    SearchOutcome,
    find_function,
)
from func_discovery.simplify import combine_add_sub, combine_mult_div, full_simplify
from func_discovery.discoverer import Discoverer, DiscoveryResult

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_MAX_DEPTH",
    "TOLERANCE",
    "SearchConfig",
    "RELATIONS",
    "UNARY_FUNCTIONS",
    "DomainError",
    "Relation",
    "UnaryFunction",
    "Binary",
    "Unary",
    "Operation",
    "OperationSequence",
    "apply",
    "choice_set",
    "generate",
    "operand_alphabet",
    "PairOutcome",
    "check_operations",
    "test_all",
    "verify",
    "DepthSearch",
    "SearchBudgetExceeded",
    "SearchOutcome",
    "find_function",
    "combine_add_sub",
    "combine_mult_div",
    "full_simplify",
    "Discoverer",
    "DiscoveryResult",
]
