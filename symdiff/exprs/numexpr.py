r"""@package symdiff.exprs.numexpr

Base of the symbolic Expression system.

The idea is to have a notion of an expression which is 'self aware' and can
produce exact symbolic derivatives of itself. Composite expressions are built
from more basic ones with the usual arithmetic operators, each of which
simplifies the result at construction time (see builder.Engine).

The definition of an expression is decoupled from the so-called 'evaluator'
objects, which are callable snapshots of an expression tree. As a
convenience, calling an expression creates an evaluator and uses it right
away.

As a simple example, let's build a function of two variables and take its
partial derivatives:

~~~.py
from symdiff import multivar
x = multivar.variable('x')
y = multivar.variable('y')
expr = x * x + 4 * y * y / (x + 5)
dfdx = expr.dx(x)
print(dfdx(x.assign(10), y.assign(200)))
~~~

Expressions are immutable and picklable. The Expression.save() and
Expression.load() methods use this to store an expression on disk and retrieve
it later, keeping the identity of all variables intact.
"""

from abc import ABCMeta, abstractmethod
import logging
import os
import os.path as op

import numpy as np
import sympy as sp

from .common import is_number


__all__ = [
    "Expression",
    "isclose",
]


def save_to_file(filename, data, overwrite=False, verbose=True,
                 showname='data', mkpath=True):
    r"""Save an object to disk.

    This uses `numpy.save()` to store an object in a file. Use
    load_from_file() to restore the data afterwards.

    @param filename
        The file name to store the data in. An extension ``'.npy'`` will be
        added if not already there.
    @param overwrite
        Whether to overwrite an existing file with the same name. If `False`
        (default) and such a file exists, a `RuntimeError` is raised.
    @param verbose
        Whether to log when the file was written. Default is `True`.
    @param showname
        Name to show in the confirmation message in case `verbose==True`.

    @b Notes

    The data will be put into a 1-element object array to avoid creating
    0-dimensional numpy arrays.
    """
    filename = op.expanduser(filename)
    if not filename.endswith('.npy'):
        filename += '.npy'
    if mkpath:
        os.makedirs(op.normpath(op.dirname(op.abspath(filename))), exist_ok=True)
    if op.exists(filename) and not overwrite:
        raise RuntimeError("File already exists.")
    arr = np.empty(1, dtype=object)
    arr[0] = data
    np.save(filename, arr, allow_pickle=True)
    if verbose:
        logging.info("%s saved to: %s", showname, filename)
    return filename


def load_from_file(filename):
    r"""Load an object from disk.

    If the object had been stored using save_to_file(), the result should be a
    perfect copy of the object.

    Only load files you trust, since loading unpickles arbitrary objects.
    """
    filename = op.expanduser(filename)
    result = np.load(filename, allow_pickle=True)
    if result.shape == (1,):
        return result[0]
    # Not a single value. Return as is.
    return result


def isclose(a, b, rel_tol=None, abs_tol=None):
    r"""Test if two numbers agree within an absolute/relative tolerance.

    The default relative tolerance is `1e-6` (suitable for single precision
    results) and the absolute one `0.0`.
    """
    if rel_tol is None:
        rel_tol = 1e-6
    if abs_tol is None:
        abs_tol = 0.0
    a, b = float(a), float(b)
    return abs(a-b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)


class Expression(object, metaclass=ABCMeta):
    """Parent class for symbolic expressions.

    Expressions are immutable trees. Every node belongs to an engine (see
    builder.Engine), which defines how nodes are combined and evaluated.

    Expressions support building a string representation of the complete
    expression, including any sub-expressions, and can be stored to disk and
    loaded back from disk.

    The methods a child has to override are:
        * _expr_str() returning a representation of the expression
        * _dx() returning the derivative w.r.t. a (validated) variable
        * _evaluator() creating a callable of the evaluation binding
        * _simplify() rebuilding the node with the engine's rules
        * _equals() comparing with a node of the same class
        * _to_sympy() converting to a SymPy expression
    """
    # pylint: disable=too-many-public-methods

    # Make numpy scalars defer to our reflected operators.
    __array_ufunc__ = None

    def __init__(self, engine, name=None, **sub_exprs):
        r"""Base class init for expressions.

        The ``**sub_exprs`` sub expressions given as keyword arguments here
        are stored in this object and can be accessed with the keys used here.
        They are used when traversing through a complete expression hierarchy
        in e.g. print_tree() or traverse_tree().

        Args:
            engine: (builder.Engine)
                Engine this expression belongs to. All sub expressions need
                to belong to the same engine.
            name: (string, optional)
                Name for the expression. Can be useful to label expressions in
                a more complex expression tree to indicate their role/meaning.
                By default, the current class name is used as name.
        """
        for key, expr in sub_exprs.items():
            if not isinstance(expr, Expression):
                raise TypeError("Sub expression %r is not an expression." % key)
            if expr.engine is not engine:
                raise TypeError("Sub expression %r belongs to engine %r, not %r."
                                % (key, expr.engine.name,
                                   getattr(engine, 'name', None)))
        self._set('_engine', engine)
        self._set('_name', name if name else self.__class__.__name__)
        self._set('_sub_expressions', tuple(sub_exprs.items()))
        for key, expr in sub_exprs.items():
            self._set(key, expr)

    def _set(self, attr, value):
        r"""Set an attribute during initialization of the immutable object."""
        object.__setattr__(self, attr, value)

    def __setattr__(self, attr, value):
        raise AttributeError("Expressions are immutable.")

    def __delattr__(self, attr):
        raise AttributeError("Expressions are immutable.")

    @property
    def engine(self):
        r"""Engine (builder.Engine) this expression belongs to."""
        return self._engine

    @property
    def name(self):
        r"""Name given to this instance of the expression."""
        return self._name

    @property
    def nice_name(self):
        r"""More descriptive name, which may be overridden by sub classes."""
        return self._name

    @property
    def sub_expressions(self):
        r"""Tuple of `(key, expr)` pairs of the direct sub expressions."""
        return self._sub_expressions

    def traverse_tree(self, include_root=False, parents=None):
        r"""Generator that walks through a complete expression tree.

        In each iteration, the returned values represent the current node's
        parents (as a list from root to immediate parent), its key under which
        it is stored in its parent, and the node itself.

        Args:
            include_root: Whether to include the root as first item. Default
                is `False`.
            parents: Optional list of parents of the root. Normally only used
                internally for the recursion.

        @b Examples
        \code
            for parents, name, expr in root_expr.traverse_tree():
                print("-"*len(parents), name)
        \endcode

        """
        if parents is None:
            parents = []
        if include_root:
            yield parents, "", self
        parents = parents + [self]
        for name, expr in self._sub_expressions:
            yield parents, name, expr
            for node in expr.traverse_tree(include_root=False, parents=parents):
                yield node

    def print_tree(self, root_name='root', nice_names=True, file=None):
        r"""Print the whole expression tree.

        Each expression's key under which it is stored as sub expression will
        be shown as well as its actual name and the class name.

        Args:
            root_name: Key name to print for the root expression.
            nice_names: Whether to use the nice more descriptive name (when
                implemented) or the usually shorter abstract names.
            file: Stream to print to. Default is `sys.stdout`.
        """
        def _p(expr, name, parents=()):
            n = expr.nice_name if nice_names else expr.name
            print("%s%s [%s] <%s>" % (
                ". " * len(parents), name, n, type(expr).__name__
            ), file=file)
        _p(self, root_name)
        for parents, name, expr in self.traverse_tree():
            _p(expr, name, parents)

    def size(self):
        r"""Number of nodes in the expression tree (including the root)."""
        return 1 + sum(1 for _ in self.traverse_tree())

    def variables(self):
        r"""List of the distinct variables in the tree.

        Variables are distinguished by identity and listed in the order of
        their first occurrence.
        """
        from .basics import VariableExpression
        result = []
        tokens = set()
        for _, _, expr in self.traverse_tree(include_root=True):
            if isinstance(expr, VariableExpression) and expr.token not in tokens:
                tokens.add(expr.token)
                result.append(expr)
        return result

    def save(self, filename, overwrite=False, verbose=True):
        r"""Save the expression object to disk.

        Args:
            filename: The file name to store the data in. An extension
                ``'.npy'`` will be added if not already there.
            overwrite: Whether to overwrite an existing file with the same
                name. If `False` (default) and such a file exists, a
                `RuntimeError` is raised.
            verbose: Whether to log when the file was written. Default is
                `True`.
        """
        return save_to_file(
            filename, self, overwrite=overwrite, verbose=verbose,
            showname="%s [%s]" % (self.nice_name, type(self).__name__)
        )

    @classmethod
    def load(cls, filename):
        r"""Static function to load an expression object from disk."""
        return load_from_file(filename)

    def __getstate__(self):
        r"""Return a picklable state object representing the whole expression."""
        return dict(self.__dict__)

    def __setstate__(self, state):
        r"""Restore a complete expression from the given unpickled state."""
        self.__dict__.update(state)

    def __repr__(self):
        r"""Return a string representing the whole expression tree."""
        cls = self.__class__.__name__
        return "<%s%s>" % (cls, self.str())

    def __str__(self):
        return self._expr_str()

    def str(self):
        """Return the expression as a string enclosed in parentheses."""
        return "(%s)" % self._expr_str()

    def equals(self, other):
        r"""Return whether `other` is a structurally identical expression.

        Variables are compared by identity and constants by their exact value
        (including `nan`) and literal tag.
        """
        if self is other:
            return True
        if type(self) is not type(other) or self.engine is not other.engine:
            return False
        return self._equals(other)

    def dx(self, var=None, n=1):
        r"""Return the n'th derivative expression w.r.t. the variable `var`.

        All other variables are treated as constants. For expressions of the
        single-variable engine, `var` may be omitted.

        Args:
            var:    Variable to differentiate with respect to.
            n:      Derivative order. Default is `1`. For `n=0`, the
                    expression itself is returned.

        The derivative rules recurse through the tree, so trees nested deeper
        than roughly the interpreter's recursion limit (see
        `sys.getrecursionlimit()`, usually 1000) raise a `RecursionError`.
        This applies e.g. to a sum of about a thousand terms built with `+` in
        a loop.
        """
        if n < 0:
            raise ValueError("Derivative order must be non-negative, got %r." % n)
        self.engine.check_variable(var)
        expr = self
        for _ in range(n):
            expr = expr._dx(var)
        return expr

    def simplify(self):
        r"""Rebuild the tree bottom-up applying the engine's rules again.

        Expressions built through the arithmetic operators are already
        simplified, in which case a structurally identical tree is returned.
        """
        return self._simplify()

    def evaluator(self, strict=None):
        r"""Create an evaluator for the expression.

        Args:
            strict: Whether the evaluator should raise errors on division by
                zero and unbound variables instead of silently producing
                IEEE-754 results and zeros, respectively. If `None`
                (default), evaluators.EvaluatorSettings.strict is used.
        """
        return self.engine.evaluator(self, strict=strict)

    def __call__(self, *args):
        r"""Evaluate the expression (see evaluator()).

        Like dx(), evaluation recurses through the tree and is limited to
        trees less deep than the interpreter's recursion limit.
        """
        return self.evaluator()(*args)

    def to_sympy(self):
        r"""Convert the expression to a SymPy expression.

        For the single-variable engine, all variables become the symbol `x`.
        Otherwise, each distinct variable becomes a symbol named after the
        variable. Different variables sharing the same name get a suffix
        derived from their identity token.
        """
        names = dict()
        for var in self.variables():
            names.setdefault(var.name, []).append(var)
        symbols = dict()
        for name, variables in names.items():
            for var in variables:
                if self.engine.single_variable:
                    symbols[var.token] = sp.Symbol('x')
                elif len(variables) == 1:
                    symbols[var.token] = sp.Symbol(name)
                else:
                    symbols[var.token] = sp.Symbol("%s_%s" % (name, var.token.hex[:6]))
        return self._to_sympy(symbols)

    @abstractmethod
    def _expr_str(self):
        """String representing the expression.

        If a sub-expression is part of the representation, be sure to use its
        `str` method and not the `_expr_str`, e.g.:

            def _expr_str(self):
                return "%s + %s" % (self.lhs.str(), self.rhs.str())
        """
        pass

    @abstractmethod
    def _dx(self, var):
        r"""Derivative w.r.t. `var`, which has been validated by the engine."""
        pass

    @abstractmethod
    def _evaluator(self, evaluator):
        r"""Return a callable computing the value from an evaluation binding.

        The `evaluator` is the evaluators._Evaluator being created. It resolves
        variables (`evaluator.lookup(var)`) and divides (`evaluator.divide()`)
        according to its discipline and strictness.
        """
        pass

    @abstractmethod
    def _simplify(self):
        pass

    @abstractmethod
    def _equals(self, other):
        pass

    @abstractmethod
    def _to_sympy(self, symbols):
        r"""Convert to SymPy, with `symbols` mapping tokens to symbols."""
        pass

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.add(self, other)

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.add(other, self)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.sub(self, other)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.sub(other, self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.mul(self, other)

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.mul(other, self)

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.div(self, other)

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.engine.div(other, self)

    def __neg__(self):
        return self.engine.sub(0.0, self)

    def __pos__(self):
        return self


def _is_operand(obj):
    r"""Whether `obj` can be combined with an expression."""
    return isinstance(obj, Expression) or is_number(obj)
