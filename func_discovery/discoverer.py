"""
Discoverer — the high-level entry point for function discovery.

Wraps the search, the simplifier and the verifier behind one call:

    discoverer = Discoverer(max_depth=3)
    result = discoverer.discover([(1, 3), (2, 5), (3, 7)])
    result.sequence        # e.g. (Binary("add", 0.5), Binary("mul", 2))
    result.verification    # one PairOutcome per pair
    result.predict([10])   # array([21.])

Rendering a sequence as text is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional

import numpy as np

from func_discovery.config import DEFAULT_MAX_DEPTH, TOLERANCE, SearchConfig
from func_discovery.primitives import DomainError
from func_discovery.search import DepthSearch, SearchHistory
from func_discovery.sequence import OperationSequence, apply_array
from func_discovery.simplify import full_simplify
from func_discovery.verify import Pair, PairOutcome, verify


@dataclass
class DiscoveryResult:
    """Result of a discovery run."""
    sequence: Optional[OperationSequence]        # None when nothing was found
    simplified: Optional[OperationSequence]      # Folded form, if requested
    verification: List[PairOutcome]              # Against the raw sequence
    length: Optional[int]                        # Length the match was found at
    candidates_tested: int
    elapsed: float
    history: SearchHistory = field(default_factory=SearchHistory)
    simplification_error: Optional[DomainError] = None

    @property
    def found(self) -> bool:
        return self.sequence is not None

    @property
    def all_passed(self) -> bool:
        return self.found and all(o.passed for o in self.verification)

    @property
    def changed_by_simplification(self) -> bool:
        return self.simplified is not None and self.simplified != self.sequence

    def predict(self, x) -> np.ndarray:
        """Evaluate the discovered sequence on new inputs."""
        if self.sequence is None:
            raise ValueError("no function was discovered")
        return apply_array(self.sequence, np.ravel(x))


class Discoverer:
    """
    High-level API for discovering an operation sequence from examples.

    Parameters
    ----------
    max_depth : int
        Longest sequence length to try. Default 5.
    tolerance : float
        Absolute tolerance for matching outputs. Default 1e-4.
    max_candidates : Optional[int]
        Candidate budget; SearchBudgetExceeded is raised past it.
    timeout : Optional[float]
        Deadline in seconds; SearchBudgetExceeded is raised past it.
    vectorized : bool
        Use the numpy sweep for the last position. Default True.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        tolerance: float = TOLERANCE,
        max_candidates: Optional[int] = None,
        timeout: Optional[float] = None,
        vectorized: bool = True,
    ):
        self.config = SearchConfig(
            max_depth=max_depth,
            tolerance=tolerance,
            max_candidates=max_candidates,
            timeout=timeout,
            vectorized=vectorized,
        )

    def discover(
        self,
        pairs: Iterable[Pair],
        simplify: bool = True,
        verbose: bool = False,
    ) -> DiscoveryResult:
        """
        Find the first sequence that reproduces every pair.

        Parameters
        ----------
        pairs : iterable of (input, expected)
            Examples of the unknown function.
        simplify : bool
            Also compute the folded form of the discovered sequence.
        verbose : bool
            Print search progress. Default False.

        Returns
        -------
        DiscoveryResult
            With `found == False` and an empty verification when no
            sequence up to max_depth matches.
        """
        pairs = list(pairs)
        outcome = DepthSearch(replace(self.config, verbose=verbose)).search(pairs)

        simplified = None
        simplification_error = None
        verification: List[PairOutcome] = []
        if outcome.found:
            verification = verify(pairs, outcome.sequence, self.config.tolerance)
            if simplify:
                try:
                    simplified = full_simplify(outcome.sequence)
                except DomainError as exc:
                    simplification_error = exc
                    if verbose:
                        print(f"Simplification failed: {exc}")

        return DiscoveryResult(
            sequence=outcome.sequence,
            simplified=simplified,
            verification=verification,
            length=outcome.length,
            candidates_tested=outcome.candidates_tested,
            elapsed=outcome.elapsed,
            history=outcome.history,
            simplification_error=simplification_error,
        )
