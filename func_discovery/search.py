"""
Iterative-deepening search over operation sequences.

For length = 1, 2, ..., max_depth the candidates of that length are tested
in generator order and the first one that maps every input to its expected
output is returned. Shorter sequences are therefore always preferred, and
the result is deterministic. Length 0 is never tried.

The default strategy walks prefixes depth-first, exactly like the nested
enumeration, but tests the whole choice set of the final position in one
numpy step per prefix:

    prefix values v (P,) x operands b (K,)  ->  results (K, P)

and takes the first passing index. Two prunings keep the walk cheap
without changing which candidate is found first:

- a prefix that is undefined (DomainError) on any input fails for every
  extension, so its subtree is skipped;
- a prefix that produced nan on any input can never recover, so it is
  skipped as well.

With `vectorized=False` the search tests `generate(length)` one candidate
at a time through `test_all`, which is slow but trivially faithful.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

import numpy as np

from func_discovery.config import DEFAULT_MAX_DEPTH, SearchConfig
from func_discovery.generator import choice_set, count_candidates, generate
from func_discovery.primitives import RELATIONS, UNARY_FUNCTIONS, DomainError
from func_discovery.sequence import Binary, OperationSequence, step
from func_discovery.verify import (
    Pair,
    as_arrays,
    input_mask,
    test_all,
    within_tolerance,
)


class SearchBudgetExceeded(RuntimeError):
    """The candidate budget or the deadline ran out before the search ended."""

    def __init__(self, message: str, outcome: "SearchOutcome"):
        super().__init__(message)
        self.outcome = outcome


@dataclass
class SearchHistory:
    """Per-length record of the search."""
    lengths: List[int] = field(default_factory=list)
    candidates: List[int] = field(default_factory=list)   # Tested at that length
    elapsed: List[float] = field(default_factory=list)    # Seconds since start


@dataclass
class SearchOutcome:
    """Result of one search run."""
    sequence: Optional[OperationSequence] = None
    length: Optional[int] = None
    candidates_tested: int = 0
    elapsed: float = 0.0
    history: SearchHistory = field(default_factory=SearchHistory)
    exhausted: bool = False  # Every candidate up to max_depth was rejected

    @property
    def found(self) -> bool:
        return self.sequence is not None


class _FinalPositionTable:
    """The choice set split into numpy-friendly blocks for one-step sweeps."""

    def __init__(self):
        self.choices = choice_set()
        self.binary_blocks = []  # (relation, operands as (K, 1) array)
        for name, relation in RELATIONS.items():
            operands = [c.operand for c in self.choices
                        if isinstance(c, Binary) and c.op == name]
            self.binary_blocks.append(
                (relation, np.asarray(operands, dtype=float)[:, None])
            )
        self.unary_functions = [
            UNARY_FUNCTIONS[c.op] for c in self.choices if not isinstance(c, Binary)
        ]

    def first_match(self, values: np.ndarray, integral: np.ndarray,
                    expected: np.ndarray, tolerance: float) -> Optional[int]:
        """Index of the first choice that maps `values` onto `expected`."""
        passes = []
        with np.errstate(all="ignore"):
            for relation, operands in self.binary_blocks:
                try:
                    results = relation.forward(values[None, :], operands)
                except DomainError:
                    passes.append(np.zeros(len(operands), dtype=bool))
                    continue
                passes.append(np.all(within_tolerance(results, expected, tolerance), axis=1))
            unary_passes = np.zeros(len(self.unary_functions), dtype=bool)
            for i, func in enumerate(self.unary_functions):
                try:
                    results = func(values, integral=integral)
                except DomainError:
                    continue
                unary_passes[i] = bool(np.all(within_tolerance(results, expected, tolerance)))
            passes.append(unary_passes)
        hits = np.flatnonzero(np.concatenate(passes))
        return int(hits[0]) if len(hits) else None


class DepthSearch:
    """
    Iterative-deepening search for an operation sequence matching pairs.

    Parameters
    ----------
    config : SearchConfig, optional
        Depth bound, tolerance, budget and verbosity. Defaults to
        SearchConfig().
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig()
        self._table: Optional[_FinalPositionTable] = None
        self._start = 0.0

    def search(
        self,
        pairs: Iterable[Pair],
        callback: Optional[Callable[[int, SearchOutcome], None]] = None,
    ) -> SearchOutcome:
        """
        Run the search.

        Parameters
        ----------
        pairs : iterable of (input, expected) pairs
            The examples every candidate must reproduce.
        callback : Callable, optional
            Called after each completed length with (length, outcome).

        Returns
        -------
        SearchOutcome
            `sequence` is None when nothing up to max_depth matches.

        Raises
        ------
        SearchBudgetExceeded
            When max_candidates or timeout is exceeded; the partial outcome
            is attached to the exception.
        """
        pairs = list(pairs)
        x, y = as_arrays(pairs)
        integral = input_mask(pairs)
        outcome = SearchOutcome()
        self._start = time.monotonic()

        for length in range(1, self.config.max_depth + 1):
            before = outcome.candidates_tested
            if self.config.vectorized:
                sequence = self._search_vectorized(length, x, integral, y, outcome)
            else:
                sequence = self._search_sequential(length, pairs, outcome)

            outcome.elapsed = time.monotonic() - self._start
            outcome.history.lengths.append(length)
            outcome.history.candidates.append(outcome.candidates_tested - before)
            outcome.history.elapsed.append(outcome.elapsed)

            if self.config.verbose:
                print(
                    f"[length {length}] "
                    f"space={count_candidates(length)}  "
                    f"tested={outcome.candidates_tested - before}  "
                    f"elapsed={outcome.elapsed:.3f}s  "
                    f"{'found ' + repr(sequence) if sequence is not None else 'no match'}"
                )
            if callback:
                callback(length, outcome)

            if sequence is not None:
                outcome.sequence = sequence
                outcome.length = length
                return outcome

        outcome.exhausted = True
        if self.config.verbose:
            print(f"No sequence of length <= {self.config.max_depth} found.")
        return outcome

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _search_sequential(self, length: int, pairs: List[Pair],
                           outcome: SearchOutcome) -> Optional[OperationSequence]:
        for candidate in generate(length):
            self._spend(1, outcome)
            if test_all(pairs, candidate, self.config.tolerance):
                return candidate
        return None

    def _search_vectorized(self, length: int, x: np.ndarray, integral: np.ndarray,
                           y: np.ndarray, outcome: SearchOutcome) -> Optional[OperationSequence]:
        if self._table is None:
            self._table = _FinalPositionTable()
        return self._extend((), x, integral, length, y, outcome)

    def _extend(self, prefix: OperationSequence, values: np.ndarray,
                integral: np.ndarray, remaining: int, expected: np.ndarray,
                outcome: SearchOutcome) -> Optional[OperationSequence]:
        table = self._table
        n_choices = len(table.choices)

        if remaining == 1:
            index = table.first_match(values, integral, expected,
                                      self.config.tolerance)
            if index is None:
                self._spend(n_choices, outcome)
                return None
            self._spend(index + 1, outcome)
            return prefix + (table.choices[index],)

        subtree = n_choices ** (remaining - 1)
        for choice in table.choices:
            try:
                next_values, next_integral = step(choice, values, integral)
            except DomainError:
                self._spend(subtree, outcome)
                continue
            if np.any(np.isnan(next_values)):
                self._spend(subtree, outcome)
                continue
            found = self._extend(prefix + (choice,), next_values, next_integral,
                                 remaining - 1, expected, outcome)
            if found is not None:
                return found
        return None

    def _spend(self, n: int, outcome: SearchOutcome) -> None:
        """Account for tested candidates and enforce the budget."""
        outcome.candidates_tested += n
        budget = self.config.max_candidates
        if budget is not None and outcome.candidates_tested > budget:
            outcome.elapsed = time.monotonic() - self._start
            raise SearchBudgetExceeded(
                f"candidate budget of {budget} exceeded", outcome
            )
        timeout = self.config.timeout
        if timeout is not None and time.monotonic() - self._start > timeout:
            outcome.elapsed = time.monotonic() - self._start
            raise SearchBudgetExceeded(
                f"search deadline of {timeout}s exceeded", outcome
            )


def find_function(pairs: Iterable[Pair], max_depth: int = DEFAULT_MAX_DEPTH,
                  **config) -> Optional[OperationSequence]:
    """
    First operation sequence (by length, then generator order) that maps
    every input to its expected output, or None if there is none up to
    `max_depth`. Extra keyword arguments go to SearchConfig.
    """
    search = DepthSearch(SearchConfig(max_depth=max_depth, **config))
    return search.search(pairs).sequence
