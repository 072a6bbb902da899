r"""@package symdiff.exprs.basics

The node classes of the expression system.

Every expression tree consists of exactly these six kinds of nodes:
constants, variables and the four binary operations sum, difference, product
and quotient. Users normally don't create the binary nodes directly but use
the arithmetic operators, which apply the simplification rules of the
builder.Engine the operands belong to.
"""

import uuid

import sympy as sp

from .common import to_float
from .evaluators import EvalVariable
from .numexpr import Expression


__all__ = [
    "ConstantExpression",
    "VariableExpression",
    "BinaryExpression",
    "SumExpression",
    "DifferenceExpression",
    "ProductExpression",
    "QuotientExpression",
    "BINARY_EXPRESSIONS",
]


class ConstantExpression(Expression):
    r"""Represent an expression that is a constant.

    Represents an expression of the form \f$ f(x) = c = \mathrm{const} \f$.

    The value of the constant can be accessed through the `value` property.
    Engines eliminating identities additionally mark the constants zero and
    one they create for rule shortcuts with a `literal` tag. A constant
    obtained by folding (e.g. `2 - 2`) is never literal.
    """

    def __init__(self, value, engine, literal=None, name='const'):
        r"""Init function.

        Args:
            value:  The constant value. Stored in single precision.
            engine: Engine this constant belongs to.
            literal: `None` (default) for a general constant, or `0` or `1`
                    to mark the literal constants zero and one.
            name:   Name of the expression (e.g. for print_tree()).
        """
        super(ConstantExpression, self).__init__(engine=engine, name=name)
        value = to_float(value)
        if literal is not None:
            if literal not in (0, 1) or value != literal:
                raise ValueError("Only the constants 0 and 1 can be literal.")
            literal = int(literal)
        ## The constant value this expression represents.
        self._set('value', value)
        ## `0` or `1` for the literal zero and one constants, else `None`.
        self._set('literal', literal)

    def _expr_str(self):
        return "%s" % self.value

    @property
    def nice_name(self):
        if self.literal is not None:
            return "%s (literal %s)" % (self.name, self.literal)
        return "%s (%s)" % (self.name, self.value)

    def _dx(self, var):
        return self.engine.zero()

    def _evaluator(self, evaluator):
        c = self.value
        return lambda b: c

    def _simplify(self):
        return self

    def _equals(self, other):
        return (self.literal == other.literal
                and self.value.tobytes() == other.value.tobytes())

    def _to_sympy(self, symbols):
        if self.literal is not None:
            return sp.Integer(self.literal)
        return sp.Float(float(self.value))


class VariableExpression(Expression):
    r"""A variable, distinguished from other variables by its identity.

    Each variable gets a unique identity token when created. Copies of the
    variable (e.g. by `copy.copy()` or pickling) keep this token and are hence
    the same variable, while two independently created variables are always
    different, even if they have the same name.
    """

    def __init__(self, engine, name=None, token=None):
        r"""Init function.

        Args:
            engine: Engine this variable belongs to.
            name:   Display name of the variable. Default is `'x'`.
            token:  Identity token. By default, a new unique token is
                    generated. Pass the token of an existing variable to
                    recreate that variable.
        """
        super(VariableExpression, self).__init__(engine=engine,
                                                 name=name if name else 'x')
        ## Identity token of this variable.
        self._set('token', uuid.uuid4() if token is None else token)

    def _expr_str(self):
        return self.name

    @property
    def nice_name(self):
        return "%s <%s>" % (self.name, self.token.hex[:8])

    def same_variable(self, other):
        r"""Return whether `other` is (a copy of) this variable."""
        return isinstance(other, VariableExpression) and other.token == self.token

    def assign(self, value):
        r"""Bind a value to this variable for evaluation.

        The returned evaluators.EvalVariable object can be passed to the
        evaluator of an expression, e.g. `expr(x.assign(1), y.assign(2))`.
        Only variables of engines using `Engine.BINDINGS` can be assigned.
        """
        if self.engine.single_variable:
            raise TypeError("Expressions of a single variable are evaluated "
                            "with a plain value, not bindings.")
        return EvalVariable(self.token, to_float(value))

    def _dx(self, var):
        if self.engine.single_variable or self.same_variable(var):
            return self.engine.one()
        return self.engine.zero()

    def _evaluator(self, evaluator):
        return evaluator.lookup(self)

    def _simplify(self):
        return self

    def _equals(self, other):
        return self.same_variable(other)

    def _to_sympy(self, symbols):
        return symbols[self.token]


class BinaryExpression(Expression):
    r"""Base class of the sum, difference, product and quotient expressions.

    The two operands are available as `lhs` and `rhs` attributes. Child
    classes define the operator symbol `op` and the actual operation on
    evaluated values in _apply().
    """
    op = None

    def __init__(self, lhs, rhs, name=None):
        r"""Init function.

        Args:
            lhs:    Left operand expression.
            rhs:    Right operand expression.
            name:   Name of the expression (e.g. for print_tree()).
        """
        super(BinaryExpression, self).__init__(engine=getattr(lhs, "engine", None),
                                               name=name,
                                               lhs=lhs, rhs=rhs)

    def _expr_str(self):
        return "%s %s %s" % (_operand_str(self.lhs), self.op,
                             _operand_str(self.rhs))

    def _evaluator(self, evaluator):
        lhs = self.lhs._evaluator(evaluator)
        rhs = self.rhs._evaluator(evaluator)
        apply = self._apply
        return lambda b: apply(evaluator, lhs(b), rhs(b))

    def _simplify(self):
        return self.engine.combine(self.op, self.lhs.simplify(),
                                   self.rhs.simplify())

    def _equals(self, other):
        return self.lhs.equals(other.lhs) and self.rhs.equals(other.rhs)

    @staticmethod
    def _apply(evaluator, a, b):
        raise NotImplementedError


class SumExpression(BinaryExpression):
    r"""Sum of two expressions, \f$ f(x) = g(x) + h(x) \f$."""
    op = '+'

    def __init__(self, lhs, rhs, name='sum'):
        super(SumExpression, self).__init__(lhs, rhs, name=name)

    @staticmethod
    def _apply(evaluator, a, b):
        return a + b

    def _dx(self, var):
        return self.engine.add(self.lhs._dx(var), self.rhs._dx(var))

    def _to_sympy(self, symbols):
        return self.lhs._to_sympy(symbols) + self.rhs._to_sympy(symbols)


class DifferenceExpression(BinaryExpression):
    r"""Difference of two expressions, \f$ f(x) = g(x) - h(x) \f$."""
    op = '-'

    def __init__(self, lhs, rhs, name='diff'):
        super(DifferenceExpression, self).__init__(lhs, rhs, name=name)

    @staticmethod
    def _apply(evaluator, a, b):
        return a - b

    def _dx(self, var):
        return self.engine.sub(self.lhs._dx(var), self.rhs._dx(var))

    def _to_sympy(self, symbols):
        return self.lhs._to_sympy(symbols) - self.rhs._to_sympy(symbols)


class ProductExpression(BinaryExpression):
    r"""Multiply two expressions, \f$ f(x) = g(x) h(x) \f$.

    The derivative follows the product rule \f$ f' = g' h + g h' \f$.
    """
    op = '*'

    def __init__(self, lhs, rhs, name='mult'):
        super(ProductExpression, self).__init__(lhs, rhs, name=name)

    @staticmethod
    def _apply(evaluator, a, b):
        return a * b

    def _dx(self, var):
        e = self.engine
        g, h = self.lhs, self.rhs
        return e.add(e.mul(g._dx(var), h), e.mul(g, h._dx(var)))

    def _to_sympy(self, symbols):
        return self.lhs._to_sympy(symbols) * self.rhs._to_sympy(symbols)


class QuotientExpression(BinaryExpression):
    r"""Divide one expression by another, \f$ f(x) = g(x) / h(x) \f$.

    The derivative follows the quotient rule
    \f$ f' = (g' h - g h') / (h h) \f$.

    Division by zero during evaluation yields `inf` or `nan` unless the
    evaluator is strict, in which case a common.DivisionByZeroError is raised.
    """
    op = '/'

    def __init__(self, lhs, rhs, name='divide'):
        super(QuotientExpression, self).__init__(lhs, rhs, name=name)

    @staticmethod
    def _apply(evaluator, a, b):
        return evaluator.divide(a, b)

    def _dx(self, var):
        e = self.engine
        g, h = self.lhs, self.rhs
        return e.div(e.sub(e.mul(g._dx(var), h), e.mul(g, h._dx(var))),
                     e.mul(h, h))

    def _to_sympy(self, symbols):
        return self.lhs._to_sympy(symbols) / self.rhs._to_sympy(symbols)


## Node class for each of the operators `+`, `-`, `*`, `/`.
BINARY_EXPRESSIONS = {
    '+': SumExpression,
    '-': DifferenceExpression,
    '*': ProductExpression,
    '/': QuotientExpression,
}


def _operand_str(expr):
    r"""String of an operand, with parentheses around composite expressions."""
    if isinstance(expr, BinaryExpression):
        return expr.str()
    return str(expr)
