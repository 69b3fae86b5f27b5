"""Tests for run folding in the simplifier."""

import random
import unittest

from func_discovery.generator import operand_alphabet
from func_discovery.primitives import DomainError
from func_discovery.sequence import Binary, Unary, apply
from func_discovery.simplify import (
    combine_add_sub,
    combine_mult_div,
    full_simplify,
    simplify_operations,
)


class TestCombineAddSub(unittest.TestCase):
    """Additive runs collapse to one add or sub."""

    def test_mixed_run(self):
        seq = [Binary("add", 5), Binary("add", 3), Binary("sub", 2)]
        self.assertEqual(full_simplify(seq), (Binary("add", 6),))

    def test_negative_net_becomes_sub(self):
        seq = [Binary("add", 1), Binary("sub", 4)]
        self.assertEqual(combine_add_sub(seq), (Binary("sub", 3),))

    def test_zero_net_kept_as_add_zero(self):
        seq = [Binary("add", 2), Binary("sub", 2)]
        self.assertEqual(combine_add_sub(seq), (Binary("add", 0),))

    def test_single_operation_unchanged(self):
        seq = (Binary("sub", -3),)
        self.assertEqual(combine_add_sub(seq), seq)

    def test_runs_not_merged_across_other_operations(self):
        seq = [Binary("add", 1), Binary("add", 2), Unary("square"),
               Binary("add", 3), Binary("add", 4)]
        self.assertEqual(combine_add_sub(seq),
                         (Binary("add", 3), Unary("square"), Binary("add", 7)))

    def test_multiplicative_ops_untouched(self):
        seq = (Binary("mul", 2), Binary("mul", 3))
        self.assertEqual(combine_add_sub(seq), seq)
        self.assertEqual(simplify_operations(seq), seq)

    def test_empty(self):
        self.assertEqual(full_simplify([]), ())


class TestCombineMultDiv(unittest.TestCase):
    """Multiplicative runs collapse to one mul or div."""

    def test_mixed_run(self):
        seq = [Binary("mul", 2), Binary("mul", 3), Binary("div", 2)]
        self.assertEqual(full_simplify(seq), (Binary("mul", 3),))

    def test_unit_multiplier(self):
        seq = [Binary("mul", 2), Binary("div", 2)]
        self.assertEqual(combine_mult_div(seq), (Binary("mul", 1),))

    def test_fraction_becomes_div(self):
        seq = [Binary("mul", 2), Binary("div", 8)]
        self.assertEqual(combine_mult_div(seq), (Binary("div", 4),))

    def test_negative_multiplier_passes_through(self):
        seq = [Binary("mul", -2), Binary("div", 4)]
        self.assertEqual(combine_mult_div(seq), (Binary("mul", -0.5),))

    def test_zero_multiplier(self):
        seq = [Binary("mul", 0), Binary("mul", 3)]
        self.assertEqual(combine_mult_div(seq), (Binary("mul", 0),))

    def test_division_by_zero_in_run(self):
        with self.assertRaises(DomainError):
            combine_mult_div([Binary("mul", 2), Binary("div", 0)])

    def test_single_division_by_zero_left_alone(self):
        seq = (Binary("div", 0),)
        self.assertEqual(combine_mult_div(seq), seq)


class TestFullSimplify(unittest.TestCase):
    """Both passes composed: semantics kept, idempotent."""

    def setUp(self):
        self.rng = random.Random(7)
        self.operands = operand_alphabet()

    def _random_sequence(self, ops, length):
        seq = []
        for _ in range(length):
            op = self.rng.choice(ops)
            if op in ("add", "sub", "mul", "div"):
                seq.append(Binary(op, self.rng.choice(self.operands)))
            else:
                seq.append(Unary(op))
        return seq

    def _assert_close(self, a, b):
        self.assertLessEqual(abs(a - b), 1e-9 * max(1.0, abs(a)))

    def test_both_families(self):
        seq = [Binary("add", 1), Binary("add", 2), Binary("mul", 2), Binary("mul", 3),
               Unary("neg")]
        self.assertEqual(full_simplify(seq),
                         (Binary("add", 3), Binary("mul", 6), Unary("neg")))

    def test_additive_semantics_preserved(self):
        for _ in range(50):
            seq = self._random_sequence(["add", "sub"], self.rng.randint(1, 6))
            simplified = combine_add_sub(seq)
            self.assertEqual(len(simplified), 1)
            for x in (-7.5, 0, 3, 42.1):
                self._assert_close(apply(seq, x), apply(simplified, x))

    def test_multiplicative_semantics_preserved(self):
        for _ in range(50):
            seq = self._random_sequence(["mul", "div"], self.rng.randint(1, 4))
            simplified = combine_mult_div(seq)
            self.assertEqual(len(simplified), 1)
            for x in (-2.5, 0, 1, 9):
                self._assert_close(apply(seq, x), apply(simplified, x))

    def test_idempotent(self):
        alphabet = ["add", "sub", "mul", "div", "square", "abs", "neg"]
        for _ in range(100):
            seq = self._random_sequence(alphabet, self.rng.randint(0, 8))
            once = full_simplify(seq)
            self.assertEqual(full_simplify(once), once)

    def test_never_longer(self):
        alphabet = ["add", "mul", "div", "sqrt"]
        for _ in range(50):
            seq = self._random_sequence(alphabet, self.rng.randint(0, 8))
            self.assertLessEqual(len(full_simplify(seq)), len(seq))


if __name__ == "__main__":
    unittest.main()
