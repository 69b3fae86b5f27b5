"""
Integration tests for the Discoverer facade.

Runs the full pipeline: search, simplification of the discovered
sequence, and verification against the input pairs.
"""

import contextlib
import io
import math
import unittest

import numpy as np

from func_discovery import Binary, Discoverer, Unary, apply


class TestDiscoverer(unittest.TestCase):
    """End-to-end discovery runs."""

    def test_linear(self):
        result = Discoverer().discover([(1, 3), (2, 5), (3, 7)])
        self.assertTrue(result.found)
        self.assertTrue(result.all_passed)
        self.assertEqual(result.length, 2)
        self.assertEqual(len(result.verification), 3)
        np.testing.assert_allclose(result.predict([10, -1]), [21.0, -1.0])

    def test_constant_offset(self):
        result = Discoverer().discover([(1, 11), (2, 12), (3, 13)])
        self.assertEqual(result.sequence, (Binary("add", 10),))
        self.assertFalse(result.changed_by_simplification)

    def test_factorial_based(self):
        pairs = [(3, 7), (4, 25)]
        result = Discoverer(max_depth=2).discover(pairs)
        self.assertTrue(result.all_passed)
        self.assertEqual(result.length, 2)
        for x, y in pairs:
            self.assertAlmostEqual(apply(result.sequence, x), y, places=4)

    def test_simplified_form_is_equivalent(self):
        result = Discoverer(max_depth=2).discover([(1, 3), (2, 5), (3, 7)])
        self.assertIsNotNone(result.simplified)
        for x in (-2.0, 0.0, 5.5):
            self.assertAlmostEqual(apply(result.sequence, x),
                                   apply(result.simplified, x))

    def test_without_simplification(self):
        result = Discoverer().discover([(1, 1), (2, 0.5), (4, 0.25)], simplify=False)
        self.assertEqual(result.sequence, (Unary("reciprocal"),))
        self.assertIsNone(result.simplified)

    def test_not_found(self):
        result = Discoverer(max_depth=1).discover([(2, 1000)])
        self.assertFalse(result.found)
        self.assertFalse(result.all_passed)
        self.assertEqual(result.verification, [])
        self.assertEqual(result.candidates_tested, result.history.candidates[0])
        with self.assertRaises(ValueError):
            result.predict([1.0])

    def test_verbose(self):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            Discoverer(max_depth=1).discover([(2, 8), (3, 12)], verbose=True)
        self.assertIn("found", buf.getvalue())

    def test_verbose_leaves_config_untouched(self):
        discoverer = Discoverer(max_depth=1)
        with contextlib.redirect_stdout(io.StringIO()):
            discoverer.discover([(2, 8), (3, 12)], verbose=True)
        self.assertFalse(discoverer.config.verbose)
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            discoverer.discover([(2, 8), (3, 12)])
        self.assertEqual(buf.getvalue(), "")

    def test_outputs_beyond_float_range(self):
        result = Discoverer(max_depth=1).discover([(171, math.factorial(171))])
        self.assertFalse(result.found)

    def test_predict_keeps_integer_inputs(self):
        result = Discoverer(max_depth=1).discover([(3, 6), (4, 24)])
        self.assertEqual(result.sequence, (Unary("factorial"),))
        np.testing.assert_allclose(result.predict([5]), [120.0])

    def test_rejects_non_numeric_pairs(self):
        with self.assertRaises(ValueError):
            Discoverer(max_depth=1).discover([("two", 4)])


if __name__ == "__main__":
    unittest.main()
