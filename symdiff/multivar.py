r"""@package symdiff.multivar

Expressions of any number of independent variables.

Each variable created by variable() is distinct from all other variables,
while copies of a variable are the same variable. Derivatives are partial
derivatives w.r.t. one variable at a time, and expressions are evaluated with
`variable.assign(value)` bindings. Variables without binding evaluate to zero
unless a strict evaluator is used.

Construction folds constants but does not eliminate identities, so
derivatives keep terms like `0 * y`.

@b Examples
\code
    x = variable('x')
    y = variable('y')
    z = x  # same variable as x
    expr = x * z + 4 * y * y / (x + 5)
    expr.dx(x)(x.assign(10), y.assign(200))  # about -1402.22
    expr.dx(y)(x.assign(10), y.assign(200))  # about 106.67
\endcode
"""

from .exprs.builder import Engine
from .exprs.evaluators import EvalVariable


__all__ = [
    "ENGINE",
    "EvalVariable",
    "variable",
    "constant",
]


## Engine of all multi-variable expressions.
ENGINE = Engine('multi', eliminate_identities=False,
                discipline=Engine.BINDINGS)


def variable(name=None):
    r"""Create a new variable distinct from all existing ones."""
    return ENGINE.variable(name)


def constant(value):
    r"""Create a constant."""
    return ENGINE.constant(value)
