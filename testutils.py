r"""@package testutils

Utilities to add more features to `unittest` classes.

This module provides a custom subclass of `unittest.TestCase`, namely
SymdiffTestCase, which obeys the global configuration settings in
TestSettings. The latter can be configured by the script invoking the test
run.

This module also introduces a new decorator slowtest, which, when applied,
leads to the test being skipped on normal runs. The script starting the test
must set `TestSettings.skipslow` to `False` for the slow tests to be run.
"""

import sys
import functools
import unittest
import time


__all__ = [
    "SymdiffTestCase",
    "TestSettings",
    "slowtest",
]


def slowtest(func):
    """Decorator for skipping a test if TestSettings.skipslow is true."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if TestSettings.skipslow:
            raise unittest.SkipTest("skipping slow tests")
        return func(*args, **kwargs)
    return wrapper


def _count(result, kind):
    return len(getattr(result, kind, ()))


class SymdiffTestCase(unittest.TestCase):
    """Base class for the unit tests of the expression system.

    Deriving from this class, tests
        * are timed individually if TestSettings.timing is true
        * print the trees of all expressions stored as attributes of the test
          case (e.g. `self.expr` set in `setUp()`) when they fail, see
          failureHook()
        * get assertions for comparing expressions and lists of values
    """

    def run(self, result=None):
        if result is None:
            return unittest.TestCase.run(self, result)
        counts = [_count(result, kind) for kind in ('errors', 'failures', 'skipped')]
        start = time.time()
        unittest.TestCase.run(self, result)
        errors, failures, skipped = [_count(result, kind) - n for kind, n in
                                     zip(('errors', 'failures', 'skipped'), counts)]
        if errors or failures:
            self.failureHook(result)
        elif TestSettings.timing and not skipped and getattr(result, 'showAll', False):
            print("    (%.4f seconds)" % (time.time() - start), file=sys.stderr)
        return result

    def failureHook(self, result):
        r"""Called after a test failed or errored.

        The default prints the tree of each expression the test case stores
        as attribute. Subclasses may override this to report other data.
        """
        from symdiff.exprs import Expression
        for attr, value in sorted(vars(self).items()):
            if isinstance(value, Expression):
                print("\n%s = %s" % (attr, value), file=sys.stderr)
                value.print_tree(root_name=attr, file=sys.stderr)

    def assertIsType(self, obj, cls):
        r"""Assert that an object is exactly of a certain type."""
        self.assertIs(type(obj), cls)

    def assertSameExpression(self, a, b):
        r"""Assert that two expressions are structurally identical."""
        if not a.equals(b):
            raise self.failureException("Expressions differ:\n  %r\n  %r" % (a, b))

    def assertListAlmostEqual(self, a, b, places=None, delta=None):
        r"""Assert that two sequences of numbers contain (almost) the same values."""
        if places is not None and delta is not None:
            raise TypeError("Cannot use delta and places at the same time")
        if len(a) != len(b):
            raise self.failureException("Lengths differ (%d != %d)" % (len(a), len(b)))
        if delta is None:
            tol = 0.5 * 10**-(7 if places is None else places)
        else:
            tol = delta
        fails = [i for i in range(len(a)) if a[i] != b[i] and abs(a[i] - b[i]) > tol]
        if fails:
            raise self.failureException(
                "%d elements differ:\n%s" % (len(fails), "\n".join(
                    "  [%d] %s != %s" % (i, a[i], b[i]) for i in fails[:9]
                ))
            )


class TestSettings(object):
    """Global settings for tests."""
    ## Stop test run on first fail/error.
    failfast = False
    ## Whether output is buffered.\ Just information, cannot be used to toggle output buffering.
    buffering = False
    ## Whether the timing for each test case should be printed.
    timing = False
    ## Control whether tests marked as slowtest should be skipped.
    skipslow = True
