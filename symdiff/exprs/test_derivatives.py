#!/usr/bin/env python3

import unittest
import sys

import numpy as np
import sympy as sp

from testutils import SymdiffTestCase
from .. import singlevar as S
from .. import multivar as M
from .basics import ConstantExpression, QuotientExpression
from .numexpr import isclose


class TestRules(SymdiffTestCase):
    def test_constant(self):
        for engine in (S.ENGINE, M.ENGINE):
            var = engine.variable()
            d = engine.constant(3.5).dx(var)
            self.assertIsType(d, ConstantExpression)
            self.assertEqual(d.value, 0)
        self.assertEqual(S.constant(2).dx().literal, 0)
        self.assertIsNone(M.constant(2).dx(M.variable()).literal)

    def test_variable(self):
        x = M.variable('x')
        y = M.variable('x')
        z = x
        for var, expected in [(x, 1), (z, 1), (y, 0)]:
            d = x.dx(var)
            self.assertIsType(d, ConstantExpression)
            self.assertEqual(d.value, expected)

    def test_single_variable(self):
        x = S.variable('x')
        y = S.variable('y')
        self.assertEqual(x.dx().literal, 1)
        self.assertEqual(x.dx(y).literal, 1)
        self.assertSameExpression((x * x).dx(), x + x)
        d = (3 * x).dx()
        self.assertIsType(d, ConstantExpression)
        self.assertEqual(d.value, 3)

    def test_quotient_structure(self):
        x = S.variable()
        d = (1 / x).dx()
        self.assertIsType(d, QuotientExpression)
        self.assertIsType(d.lhs, ConstantExpression)
        self.assertEqual(d.lhs.value, -1)
        self.assertSameExpression(d.rhs, x * x)
        self.assertEqual(d(2.0), -.25)

    def test_absent_variable(self):
        x = M.variable('x')
        y = M.variable('y')
        expr = x * x / (x + 3) - 2 * x
        d = expr.dx(y)
        self.assertEqual(d(x.assign(1.5), y.assign(4)), 0)
        self.assertEqual(d(), 0)

    def test_invalid_variable(self):
        x = M.variable('x')
        expr = x * x
        with self.assertRaises(TypeError):
            expr.dx()
        with self.assertRaises(TypeError):
            expr.dx(x * 2)
        with self.assertRaises(TypeError):
            expr.dx(S.variable())
        with self.assertRaises(TypeError):
            S.variable().dx(x)
        with self.assertRaises(TypeError):
            S.variable().dx(3)

    def test_order(self):
        x = S.variable()
        f = x * x * x
        self.assertIs(f.dx(n=0), f)
        self.assertEqual(f.dx(n=1)(2.0), 12)
        self.assertEqual(f.dx(n=2)(2.0), 12)
        self.assertEqual(f.dx(n=3)(2.0), 6)
        d4 = f.dx(n=4)
        self.assertIsType(d4, ConstantExpression)
        self.assertEqual(d4.value, 0)
        with self.assertRaises(ValueError):
            f.dx(n=-1)


class TestCalculusProperties(SymdiffTestCase):
    def setUp(self):
        self.x = M.variable('x')
        self.y = M.variable('y')
        x, y = self.x, self.y
        self.funcs = [
            x * y + 3,
            x / (y + 2) - x,
            4 * y * y / (x + 5),
            (x - 1) * (y + x) * x,
            x * x + y + 1,
        ]
        rng = np.random.RandomState(42)
        self.points = [(x.assign(a), y.assign(b))
                       for a, b in rng.uniform(1, 3, size=(10, 2))]

    def assertClose(self, a, b):
        if not isclose(a, b, rel_tol=1e-4, abs_tol=1e-4):
            raise self.failureException("%r != %r" % (a, b))

    def test_linearity(self):
        for f in self.funcs:
            for g in self.funcs:
                for v in (self.x, self.y):
                    dsum = (f + g).dx(v)
                    ddiff = (f - g).dx(v)
                    for p in self.points:
                        self.assertClose(dsum(*p), f.dx(v)(*p) + g.dx(v)(*p))
                        self.assertClose(ddiff(*p), f.dx(v)(*p) - g.dx(v)(*p))

    def test_product_rule(self):
        for f in self.funcs:
            for g in self.funcs:
                for v in (self.x, self.y):
                    d = (f * g).dx(v)
                    for p in self.points:
                        self.assertClose(d(*p), f.dx(v)(*p) * g(*p) + f(*p) * g.dx(v)(*p))

    def test_quotient_rule(self):
        # The last function is positive at all the sample points.
        g = self.funcs[-1]
        for f in self.funcs:
            for v in (self.x, self.y):
                d = (f / g).dx(v)
                for p in self.points:
                    gp = g(*p)
                    expected = (f.dx(v)(*p) * gp - f(*p) * g.dx(v)(*p)) / (gp * gp)
                    self.assertClose(d(*p), expected)

    def test_against_sympy(self):
        x, y = self.x, self.y
        X, Y = sp.symbols('x y')
        for f in self.funcs:
            fs = f.to_sympy()
            for v, V in ((x, X), (y, Y)):
                expected = sp.lambdify((X, Y), sp.diff(fs, V))
                d = f.dx(v)
                for a, b in [(1.5, 2.0), (2.5, 1.25), (1.0, 3.0)]:
                    self.assertClose(d(x.assign(a), y.assign(b)), expected(a, b))

    def test_singlevar_against_sympy(self):
        x = S.variable()
        X = sp.Symbol('x')
        f = (x * x - 3) / (x + 5) + 2 * x * S.ONE - x / 7
        expected = sp.lambdify(X, sp.diff(f.to_sympy(), X, 2))
        d2 = f.dx(n=2)
        for a in (0.0, 1.5, 3.0):
            self.assertClose(d2(a), expected(a))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
