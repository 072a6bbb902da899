r"""@package symdiff.utils

General utilities for simplifying certain tasks in Python.
"""


__all__ = [
    "isiterable",
]


def isiterable(obj):
    """Check whether an object is iterable.

    Note that this returns `True` for strings, which callers converting
    values to numbers should reject themselves.
    """
    try:
        iter(obj)
    except TypeError:
        return False
    return True
