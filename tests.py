#!/usr/bin/env python3

import unittest
import logging
import os
import sys

import os.path as op
sys.path.append(op.realpath(op.join(__file__, op.pardir)))

from testutils import TestSettings


def run_tests():
    failfast = '-f' in sys.argv or '--failfast' in sys.argv
    buffering = '-b' in sys.argv or '--buffer' in sys.argv
    timing = '-t' in sys.argv or '--timing' in sys.argv
    runSlow = '-s' in sys.argv or '--run-slow-tests' in sys.argv
    if '-v' in sys.argv or '--verbose' in sys.argv:
        logging.basicConfig(level=logging.INFO)
    TestSettings.failfast = failfast
    TestSettings.buffering = buffering
    TestSettings.timing = timing
    TestSettings.skipslow = not runSlow
    suite = unittest.TestLoader().discover(os.path.dirname(os.path.realpath(__file__)), pattern="test_*.py")
    return len(unittest.TextTestRunner(verbosity=2, failfast=failfast, buffer=buffering).run(suite).failures)


if __name__ == '__main__':
    sys.exit(1 if run_tests() else 0)
