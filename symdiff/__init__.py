r"""@package symdiff

Symbolic differentiation of algebraic expressions.

Expressions are built from variables and constants with the operators
`+`, `-`, `*` and `/`, simplified as they are built, differentiated exactly
with respect to a chosen variable and evaluated in single precision.

Two variants are available:
    * symdiff.singlevar for functions of one implicit variable, evaluated
      with one plain value
    * symdiff.multivar for functions of any number of independent variables,
      evaluated with explicit `variable = value` bindings

The expression classes themselves live in the symdiff.exprs package.
"""
