#!/usr/bin/env python3

import unittest
import sys

import numpy as np

from testutils import SymdiffTestCase, slowtest
from . import singlevar as S
from .exprs import ConstantExpression, ExpressionWarning


class TestSingleVariable(SymdiffTestCase):
    def test_polynomial(self):
        x = S.variable()
        f = 3 * x * x - 2 * x + 1
        df = f.dx()
        self.assertEqual(f(2.0), 9)
        self.assertEqual(df(2.0), 10)
        self.assertEqual(f.dx(n=2)(5.0), 6)
        self.assertListAlmostEqual(df([0, 1, 2]), [-2, 4, 10])

    def test_rational(self):
        x = S.variable()
        f = x * x / (x + 5)
        # (x^2 + 10 x) / (x + 5)^2
        for t in np.linspace(-3, 3, 7):
            expected = (t*t + 10*t) / (t + 5)**2
            self.assertAlmostEqual(f.dx()(t), expected, places=5)

    def test_literals_keep_trees_small(self):
        x = S.variable()
        f = x * x * x
        self.assertEqual(f.dx().size(), 9)
        self.assertEqual(f.dx(n=3).size(), 1)
        self.assertIsType(f.dx(n=3), ConstantExpression)

    @slowtest
    def test_high_order(self):
        x = S.variable()
        f = x
        for _ in range(7):
            f = f * x
        self.assertEqual(f.dx(n=7)(1.0), 40320)
        d8 = f.dx(n=8)
        self.assertIsType(d8, ConstantExpression)
        self.assertEqual(d8.value, 40320)

    def test_derivative_of_literals(self):
        self.assertEqual(S.ZERO.dx().literal, 0)
        self.assertEqual(S.ONE.dx().literal, 0)

    def test_division_by_literal_zero(self):
        x = S.variable()
        with self.assertWarns(ExpressionWarning):
            f = (x + 1) / S.ZERO
        self.assertEqual(f(1.0), 0)
        self.assertEqual(f.dx()(1.0), 0)
        g = (x + 1) / S.constant(0)
        self.assertEqual(g(1.0), np.inf)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
