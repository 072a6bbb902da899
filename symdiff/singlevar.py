r"""@package symdiff.singlevar

Expressions of a single (implicit) variable.

All variables created here are treated as the same logical variable: their
derivative is always one and they all take the one value the expression is
evaluated with. Construction eliminates the literal constants ZERO and ONE
(e.g. `x * ONE` is `x` and `ZERO / x` is ZERO).

@b Examples
\code
    x = variable()
    f = x * x / (x + 5)
    f.dx()(2.0)  # derivative at x=2
    f([0.0, 1.0, 2.0])  # element-wise evaluation
\endcode

Note that general constants, like those created from Python numbers, are
never eliminated: `x + 0` is a sum node while `x + ZERO` is `x`.
"""

from .exprs.builder import Engine


__all__ = [
    "ENGINE",
    "ZERO",
    "ONE",
    "variable",
    "constant",
]


## Engine of all single-variable expressions.
ENGINE = Engine('single', eliminate_identities=True,
                discipline=Engine.SINGLE_VALUE)

## The literal constant zero.
ZERO = ENGINE.zero()

## The literal constant one.
ONE = ENGINE.one()


def variable(name='x'):
    r"""Create the variable (the name is only used for display)."""
    return ENGINE.variable(name)


def constant(value):
    r"""Create a general (non-literal) constant."""
    return ENGINE.constant(value)
