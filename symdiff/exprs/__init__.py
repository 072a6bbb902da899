r"""@package symdiff.exprs

Expression system for building algebraic expressions, differentiating them
symbolically and evaluating them.

Each expression is an immutable tree of the node classes in basics:
constants, variables, sums, differences, products and quotients. Expressions
are combined with the usual arithmetic operators. Each combination is
simplified as it is created (see builder.Engine), such that e.g. constant
sub-expressions are folded right away.

The derivative of an expression w.r.t. a variable is again an expression,
obtained via numexpr.Expression.dx() using the sum, difference, product and
quotient rules.

NOTE: Expression objects are evaluated by taking a *snapshot* of the tree and
      turning it into a callable object, here called an *evaluator* (see the
      evaluators module). Calling an expression directly does this
      implicitly.

All expressions belong to an *engine*, which decides whether the literal
constants zero and one are eliminated and how variables are bound during
evaluation. The two engines are set up in the symdiff.singlevar and
symdiff.multivar modules.
"""

from .common import ExpressionError, DivisionByZeroError, UnboundVariableError
from .common import ExpressionWarning
from .numexpr import Expression
from .basics import ConstantExpression, VariableExpression
from .basics import SumExpression, DifferenceExpression
from .basics import ProductExpression, QuotientExpression
from .evaluators import EvalVariable, EvaluatorSettings
from .builder import Engine
