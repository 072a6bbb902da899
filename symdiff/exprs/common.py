r"""@package symdiff.exprs.common

Utils used by multiple modules in symdiff.exprs.

All numbers in the expression system are single precision floats. The
helpers here convert values accordingly and collect the exception and
warning classes shared by builder and evaluators.
"""

import numbers

import numpy as np

from ..utils import isiterable


__all__ = [
    "FLOAT",
    "to_float",
    "to_float_array",
    "is_number",
    "ExpressionError",
    "DivisionByZeroError",
    "UnboundVariableError",
    "ExpressionWarning",
]


## The one numeric type used for constants and evaluation results.
FLOAT = np.float32


class ExpressionError(Exception):
    r"""Base class for errors signaled by strict evaluators."""
    pass


class DivisionByZeroError(ExpressionError, ZeroDivisionError):
    r"""Raised by strict evaluators when a denominator evaluates to zero."""
    pass


class UnboundVariableError(ExpressionError, LookupError):
    r"""Raised by strict evaluators when a variable has no binding."""
    pass


class ExpressionWarning(UserWarning):
    """Warning issued when expressions might not evaluate as expected."""
    pass


def is_number(value):
    r"""Return whether `value` can be promoted to a constant.

    Booleans are not accepted even though they are `numbers.Real`.
    """
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (numbers.Real, np.floating, np.integer))


def to_float(value):
    r"""Convert a scalar to the single precision float type."""
    return FLOAT(value)


def to_float_array(value):
    r"""Convert a scalar or an iterable of scalars to single precision.

    Scalars are returned as `FLOAT` scalars, everything iterable as a
    `FLOAT` numpy array.
    """
    if isinstance(value, np.ndarray) or isiterable(value):
        return np.asarray(value, dtype=FLOAT)
    return to_float(value)
