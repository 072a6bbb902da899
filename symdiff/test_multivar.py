#!/usr/bin/env python3

import unittest
import sys

import numpy as np

from testutils import SymdiffTestCase
from . import multivar as M
from .exprs import QuotientExpression, SumExpression


class TestPartialDerivatives(SymdiffTestCase):
    def setUp(self):
        self.x = M.variable('x')
        self.y = M.variable('y')
        # z is the same variable as x, y is independent.
        self.z = self.x
        x, y, z = self.x, self.y, self.z
        self.expr = x * z + 4 * y * y / (x + 5)

    def test_structure(self):
        expr = self.expr
        self.assertIsType(expr, SumExpression)
        self.assertIsType(expr.rhs, QuotientExpression)
        self.assertEqual(str(expr), "(x * x) + (((4.0 * y) * y) / (x + 5.0))")

    def test_values(self):
        x, y = self.x, self.y
        value = self.expr(x.assign(10), y.assign(200))
        self.assertIsType(value, np.float32)
        self.assertAlmostEqual(value, 100 + 160000 / 15, delta=1e-2)

    def test_dx(self):
        x, y = self.x, self.y
        value = self.expr.dx(x)(x.assign(10), y.assign(200))
        # 2 x - 4 y^2 / (x + 5)^2
        self.assertAlmostEqual(value, 20 - 160000 / 225, delta=1e-3)
        self.assertAlmostEqual(value, -691.1111, delta=1e-3)
        self.assertEqual(value, self.expr.dx(self.z)(x.assign(10), y.assign(200)))

    def test_dy(self):
        x, y = self.x, self.y
        value = self.expr.dx(y)(x.assign(10), y.assign(200))
        # 8 y / (x + 5)
        self.assertAlmostEqual(value, 1600 / 15, delta=1e-4)

    def test_single_precision_result(self):
        x, y = self.x, self.y
        f32 = np.float32
        xv, yv = f32(10), f32(200)
        # Same operation order as the derivative tree of the quotient.
        num = (f32(0)*yv + f32(4)*f32(0))*yv + f32(4)*yv*f32(0)
        num = num*(xv + f32(5)) - f32(4)*yv*yv*(f32(1) + f32(0))
        quot = num / ((xv + f32(5))*(xv + f32(5)))
        expected = (f32(1)*xv + xv*f32(1)) + quot
        self.assertEqual(self.expr.dx(x)(x.assign(10), y.assign(200)), expected)

    def test_second_order(self):
        x, y = self.x, self.y
        args = (x.assign(10), y.assign(200))
        # d^2/dy^2 = 8 / (x + 5), d^2/dxdy = -8 y / (x + 5)^2
        self.assertAlmostEqual(self.expr.dx(y, n=2)(*args), 8 / 15, delta=1e-6)
        self.assertAlmostEqual(self.expr.dx(y).dx(x)(*args), -1600 / 225, delta=1e-4)
        self.assertAlmostEqual(self.expr.dx(x).dx(y)(*args), -1600 / 225, delta=1e-4)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
