"""
Quick start example for function discovery.

Demonstrates the core workflow:
1. Write down a few input/output pairs of an unknown function
2. Use the Discoverer to find an operation sequence that reproduces them
3. Inspect the simplified form and the per-pair verification
"""

from func_discovery import Binary, Discoverer, full_simplify


def main():
    discoverer = Discoverer(max_depth=2)

    problems = [
        ("x * 2 + 1", [(1, 3), (2, 5), (3, 7)]),
        ("x * 4", [(2, 8), (3, 12), (4, 16)]),
        ("1 / x", [(1, 1), (2, 0.5), (4, 0.25)]),
        ("x! + 1", [(3, 7), (4, 25)]),
    ]

    print("Function Discovery — Quick Start")
    print("=" * 50)
    for name, pairs in problems:
        result = discoverer.discover(pairs)
        print(f"\nTarget: {name}    pairs: {pairs}")
        if not result.found:
            print("  No function found.")
            continue
        print(f"  Found:      {result.sequence}")
        if result.changed_by_simplification:
            print(f"  Simplified: {result.simplified}")
        print(f"  Candidates: {result.candidates_tested}  ({result.elapsed:.3f}s)")
        for outcome in result.verification:
            mark = "ok" if outcome.passed else "FAIL"
            shown = "undefined" if outcome.result is None else f"{outcome.result:.4f}"
            print(f"    {outcome.input:g} -> {shown}  [{mark}]")

    # Simplification on its own
    ops = [Binary("add", 2), Binary("add", 3), Binary("sub", 1)]
    print(f"\nSimplify {ops}\n  -> {full_simplify(ops)}")


if __name__ == "__main__":
    main()
