r"""@package symdiff.exprs.evaluators

Evaluators turning numexpr.Expression trees into callables.

Expressions are evaluated by taking a *snapshot* of the expression tree in
the form of an evaluator. Upon creation, each node of the tree is asked to
create a plain callable of the current *binding* (see
numexpr.Expression._evaluator()). Composite nodes combine the callables of
their children, so that calling the evaluator is a single walk through nested
closures.

What a binding is depends on the evaluation discipline of the expression's
engine:

    * SingleValueEvaluator: the binding is the one value all variables take
    * BindingEvaluator: the binding is the ordered tuple of EvalVariable
      objects the evaluator was called with

By default, evaluation follows plain IEEE-754 single precision arithmetic
silently, i.e. division by zero results in `inf` or `nan`, and unbound
variables evaluate to zero. Strict evaluators raise common.DivisionByZeroError
and common.UnboundVariableError instead.
"""

from abc import ABCMeta, abstractmethod
from collections import namedtuple
import logging

import numpy as np

from .common import FLOAT, to_float, to_float_array
from .common import DivisionByZeroError, UnboundVariableError


__all__ = [
    "EvalVariable",
    "EvaluatorSettings",
    "SingleValueEvaluator",
    "BindingEvaluator",
]


## Binding of a variable's identity token to a single precision value.
EvalVariable = namedtuple('EvalVariable', ['token', 'value'])


class EvaluatorSettings(object):
    """Global settings for newly created evaluators."""
    ## Default for evaluators created without explicit `strict` argument.
    strict = False


class _Evaluator(object, metaclass=ABCMeta):
    r"""Base class for all evaluator classes.

    Evaluators are callable, which evaluates the expression for the binding
    given as arguments. They also have a `diff(*args, var=None, n=1)` function
    evaluating the n'th derivative w.r.t. `var` for the same arguments.
    Furthermore, a function `function(n=0, var=None)` returns a callable for
    the n'th derivative.
    """
    def __init__(self, expr, strict=None):
        r"""Base class init for evaluators.

        @param expr
            The expression object for which this evaluator is created.
        @param strict
            Whether to raise on division by zero and unbound variables. If
            `None` (default), use EvaluatorSettings.strict.
        """
        if strict is None:
            strict = EvaluatorSettings.strict
        ## The expression this evaluator was created for.
        self.expr = expr
        ## Whether numeric problems raise errors.
        self.strict = bool(strict)
        logging.debug("Creating %s evaluator for %s",
                      "strict" if self.strict else "non-strict", expr.name)
        self._f = expr._evaluator(self)

    def __call__(self, *args):
        r"""Evaluate the expression for the given binding."""
        binding = self._bind(*args)
        with np.errstate(all='ignore'):
            return self._f(binding)

    def diff(self, *args, var=None, n=1):
        r"""Evaluate the n'th derivative w.r.t. `var` for the given binding."""
        return self.function(n=n, var=var)(*args)

    def function(self, n=0, var=None):
        r"""Return a callable for the n'th derivative w.r.t. `var`."""
        if n == 0:
            return self
        return type(self)(self.expr.dx(var, n=n), strict=self.strict)

    def divide(self, lhs, rhs):
        r"""Divide two evaluated operands, respecting the `strict` setting."""
        if self.strict and np.any(rhs == 0):
            raise DivisionByZeroError("Denominator %s evaluated to zero." % rhs)
        return lhs / rhs

    @abstractmethod
    def _bind(self, *args):
        r"""Convert the call arguments into the binding passed to the nodes."""
        pass

    @abstractmethod
    def lookup(self, variable):
        r"""Return a callable computing the value of `variable` from a binding."""
        pass


class SingleValueEvaluator(_Evaluator):
    r"""Evaluator of expressions of one (implicit) variable.

    Every variable in the expression takes the one value the evaluator is
    called with. This value may be a scalar or an array-like, in which case
    the expression is evaluated element-wise.
    """
    def __call__(self, *args):
        r"""Evaluate the expression, keeping the shape of array arguments.

        Expressions not depending on the variable (e.g. constant derivatives)
        produce an array of the same shape filled with their value.
        """
        binding = self._bind(*args)
        with np.errstate(all='ignore'):
            result = self._f(binding)
        if isinstance(binding, np.ndarray) and np.shape(result) != binding.shape:
            result = np.full(binding.shape, result, dtype=FLOAT)
        return result

    def _bind(self, *args):
        if len(args) != 1:
            raise TypeError("Expected exactly one value, got %d." % len(args))
        return to_float_array(args[0])

    def lookup(self, variable):
        return lambda x: x


class BindingEvaluator(_Evaluator):
    r"""Evaluator of expressions of any number of distinct variables.

    The evaluator is called with EvalVariable objects, which are created via
    `var.assign(value)`. A variable takes the value of the first binding
    carrying its identity token. Variables without binding evaluate to zero
    unless the evaluator is strict.
    """
    def _bind(self, *args):
        for arg in args:
            if not isinstance(arg, EvalVariable):
                raise TypeError("Expected variable bindings, got %s. "
                                "Use `var.assign(value)` to create them."
                                % type(arg).__name__)
        return tuple(EvalVariable(arg.token, to_float(arg.value)) for arg in args)

    def lookup(self, variable):
        token = variable.token
        strict = self.strict
        unbound = to_float(0)
        def f(bindings):
            for binding in bindings:
                if binding.token == token:
                    return binding.value
            if strict:
                raise UnboundVariableError("No binding for variable %r."
                                           % variable.name)
            return unbound
        return f
