r"""@package symdiff.exprs.builder

Construction-time simplification of expression trees.

Every arithmetic combinator of the expression classes ends up in one of the
Engine.add(), Engine.sub(), Engine.mul() or Engine.div() methods. These
normalize the new node before it is created, applying in order:

    1. constant folding: two constants are combined into one constant
    2. identity elimination (only if the engine is configured for it):
       `x+0`, `0+x`, `x-0`, `x*1`, `1*x` give `x`, while `x*0`, `0*x`, `0/x`
       give zero and `x/1` gives `x`
    3. otherwise a new composite node is created

Identity elimination only reacts to the *literal* constants zero and one
(see basics.ConstantExpression.literal), never to a general constant that
happens to have the value `0.0` or `1.0`.

The rule `x/0 -> 0` is mathematically wrong. It is kept for compatibility
with earlier versions of the single-variable engine, and an
ExpressionWarning is issued whenever it is applied.

An engine also decides how expressions are evaluated (its *discipline*):

    * `Engine.SINGLE_VALUE`: all variables are the same logical variable,
      evaluated with one anonymous value
    * `Engine.BINDINGS`: variables are distinguished by identity and
      evaluated with explicit `variable = value` bindings
"""

import logging
import operator
import warnings

import numpy as np

from .common import is_number, to_float, ExpressionWarning
from .evaluators import SingleValueEvaluator, BindingEvaluator


__all__ = [
    "Engine",
    "get_engine",
]


_registry = dict()


def get_engine(name):
    r"""Return the registered engine with the given name.

    The engines shipped with this package are registered upon import of
    their modules, which this function triggers if needed.
    """
    if name not in _registry:
        # Importing registers the shipped engines.
        from .. import singlevar, multivar # pylint: disable=unused-import
    try:
        return _registry[name]
    except KeyError:
        raise ValueError("Unknown engine: %r" % (name,))


class Engine(object):
    r"""Configuration and builder shared by all nodes of one expression variant.

    Engines are compared by identity. Pickled expressions store only the
    engine name and are re-attached to the registered engine upon loading.
    """

    SINGLE_VALUE = 'single-value'
    BINDINGS = 'bindings'

    _folds = {
        '+': operator.add,
        '-': operator.sub,
        '*': operator.mul,
        '/': operator.truediv,
    }

    def __init__(self, name, eliminate_identities, discipline):
        r"""Create and register a new engine.

        Args:
            name:   Unique name of the engine.
            eliminate_identities: Whether the literal constants zero and one
                    should be eliminated when building composite nodes.
            discipline: One of `Engine.SINGLE_VALUE` or `Engine.BINDINGS`.
        """
        if discipline not in (self.SINGLE_VALUE, self.BINDINGS):
            raise ValueError("Unknown evaluation discipline: %r" % (discipline,))
        if name in _registry:
            raise ValueError("Engine %r already exists." % (name,))
        ## Name of this engine, used when pickling expressions.
        self.name = name
        ## Whether identity elimination is active.
        self.eliminate_identities = eliminate_identities
        ## How variables are bound during evaluation.
        self.discipline = discipline
        _registry[name] = self

    def __repr__(self):
        return "<Engine %r>" % self.name

    def __reduce__(self):
        return (get_engine, (self.name,))

    @property
    def single_variable(self):
        r"""Whether all variables are treated as the same variable."""
        return self.discipline == self.SINGLE_VALUE

    def constant(self, value):
        r"""Create a general constant of this engine."""
        from .basics import ConstantExpression
        return ConstantExpression(value, engine=self)

    def literal(self, value):
        r"""Create the constant zero or one for rule shortcuts.

        Only engines eliminating identities distinguish literal constants.
        Other engines return a general constant with the same value.
        """
        from .basics import ConstantExpression
        if not self.eliminate_identities:
            return ConstantExpression(value, engine=self)
        return ConstantExpression(value, literal=value, engine=self)

    def zero(self):
        r"""Constant zero, tagged as literal if the engine distinguishes literals."""
        return self.literal(0)

    def one(self):
        r"""Constant one, tagged as literal if the engine distinguishes literals."""
        return self.literal(1)

    def variable(self, name=None):
        r"""Create a new variable with a fresh identity."""
        from .basics import VariableExpression
        return VariableExpression(engine=self, name=name)

    def ensure_expr(self, expr):
        """Ensure an object is an expression of this engine.

        Numbers are converted to a general constant. Expressions of other
        engines and all other objects raise a `TypeError`.
        """
        from .numexpr import Expression
        if isinstance(expr, Expression):
            if expr.engine is not self:
                raise TypeError("Cannot combine expressions of engines %r and %r."
                                % (self.name, expr.engine.name))
            return expr
        if is_number(expr):
            return self.constant(expr)
        raise TypeError("Cannot use object of type %s in an expression."
                        % type(expr).__name__)

    def check_variable(self, var):
        r"""Validate the variable to differentiate with respect to.

        The single-variable engine allows `var` to be `None`.
        """
        from .basics import VariableExpression
        if var is None and self.single_variable:
            return
        if not isinstance(var, VariableExpression):
            raise TypeError("Can only differentiate w.r.t. a variable, got %s."
                            % type(var).__name__)
        if var.engine is not self:
            raise TypeError("Variable %r belongs to engine %r, not %r."
                            % (var.name, var.engine.name, self.name))

    def add(self, lhs, rhs):
        r"""Build the simplest expression for `lhs + rhs`."""
        return self._build('+', lhs, rhs)

    def sub(self, lhs, rhs):
        r"""Build the simplest expression for `lhs - rhs`."""
        return self._build('-', lhs, rhs)

    def mul(self, lhs, rhs):
        r"""Build the simplest expression for `lhs * rhs`."""
        return self._build('*', lhs, rhs)

    def div(self, lhs, rhs):
        r"""Build the simplest expression for `lhs / rhs`."""
        return self._build('/', lhs, rhs)

    def combine(self, op, lhs, rhs):
        r"""Build the simplest expression for `lhs <op> rhs`.

        `op` is one of ``'+', '-', '*', '/'``.
        """
        if op not in self._folds:
            raise ValueError("Unknown operator: %r" % (op,))
        return self._build(op, lhs, rhs)

    def _build(self, op, lhs, rhs):
        from .basics import ConstantExpression, BINARY_EXPRESSIONS
        lhs = self.ensure_expr(lhs)
        rhs = self.ensure_expr(rhs)
        if (isinstance(lhs, ConstantExpression)
                and isinstance(rhs, ConstantExpression)):
            return self._fold(op, lhs, rhs)
        if self.eliminate_identities:
            result = self._eliminate(op, lhs, rhs)
            if result is not None:
                return result
        return BINARY_EXPRESSIONS[op](lhs, rhs)

    def _fold(self, op, lhs, rhs):
        r"""Combine two constants into one. IEEE-754 rules apply silently."""
        with np.errstate(all='ignore'):
            value = to_float(self._folds[op](lhs.value, rhs.value))
        logging.debug("%s: folded %s %s %s = %s",
                      self.name, lhs.value, op, rhs.value, value)
        return self.constant(value)

    def _eliminate(self, op, lhs, rhs):
        r"""Apply the identity rules, returning `None` if none applies."""
        lhs0, rhs0 = _is_literal(lhs, 0), _is_literal(rhs, 0)
        if op == '+':
            if lhs0:
                return self._rule("0 + x = x", rhs)
            if rhs0:
                return self._rule("x + 0 = x", lhs)
        elif op == '-':
            if rhs0:
                return self._rule("x - 0 = x", lhs)
        elif op == '*':
            if lhs0 or rhs0:
                return self._rule("x * 0 = 0", self.zero())
            if _is_literal(lhs, 1):
                return self._rule("1 * x = x", rhs)
            if _is_literal(rhs, 1):
                return self._rule("x * 1 = x", lhs)
        elif op == '/':
            if rhs0:
                warnings.warn(
                    "Division by the literal zero constant evaluates to zero.",
                    ExpressionWarning, stacklevel=5
                )
                return self._rule("x / 0 = 0", self.zero())
            if lhs0:
                return self._rule("0 / x = 0", self.zero())
            if _is_literal(rhs, 1):
                return self._rule("x / 1 = x", lhs)
        return None

    def _rule(self, desc, result):
        logging.debug("%s: applied rule %s", self.name, desc)
        return result

    def evaluator(self, expr, strict=None):
        r"""Create an evaluator for `expr` following this engine's discipline."""
        if self.single_variable:
            return SingleValueEvaluator(expr, strict=strict)
        return BindingEvaluator(expr, strict=strict)


def _is_literal(expr, value):
    r"""Check whether `expr` is the literal constant `value` (0 or 1)."""
    return getattr(expr, 'literal', None) == value
