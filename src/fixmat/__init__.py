"""
###################################
Fixed-size matrices (:mod:`fixmat`)
###################################

.. currentmodule:: fixmat

This package provides dense matrices over a generic element type, together with
Gaussian elimination, Gauss-Jordan elimination, inversion and linear solving.

Matrices
========

.. autosummary::
    :toctree: generated/

    Matrix
    FloatMatrix

Operations
==========

.. autosummary::
    :toctree: generated/

    equals
    gauss
    gauss_jordan
    identity
    inv
    solve
    transpose

Miscellaneous
=============

.. autosummary::
    :toctree: generated/

    DimensionError
    InvalidArgumentError
    LinAlgError
    PreconditionError
    SingularMatrixError

"""

import logging

from .context import Context, getcontext, localcontext, setcontext
from .exceptions import (
    DimensionError,
    InvalidArgumentError,
    LinAlgError,
    PreconditionError,
    SingularMatrixError,
)
from .floatmatrix import FloatMatrix
from .matrix import (
    Matrix,
    equals,
    gauss,
    gauss_jordan,
    identity,
    inv,
    solve,
    transpose,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Context",
    "DimensionError",
    "FloatMatrix",
    "InvalidArgumentError",
    "LinAlgError",
    "Matrix",
    "PreconditionError",
    "SingularMatrixError",
    "equals",
    "gauss",
    "gauss_jordan",
    "getcontext",
    "identity",
    "inv",
    "localcontext",
    "setcontext",
    "solve",
    "transpose",
]
